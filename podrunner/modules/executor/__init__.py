"""
Executor Module - Black Box Interface

Purpose: Run a command inside a Kubernetes pod
Interface: CommandExecutor.execute() returning ExecutionResult
Hidden: kubectl exec invocation, output capture, timeout handling

Can be replaced with different execution mechanisms (direct K8s exec API, SSH).
"""

from .executor import CommandExecutor, ExecutionResult

__all__ = ["CommandExecutor", "ExecutionResult"]
