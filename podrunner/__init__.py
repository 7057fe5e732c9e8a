"""
PodRunner - Maintenance script runner for Kubernetes pods

Executes catalogued maintenance scripts inside a pod of a managed cluster.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- catalog: Script definitions loaded from the catalog document
- cluster: Target pod resolution and startup permission check
- binder: Request payload to shell environment assignments
- executor: Remote command execution via kubectl exec
- tracking: Process tracking service client
- orchestrator: Request pipeline composing the modules above
- api: REST API models
"""

__version__ = "1.0.0"
