"""
Cluster Module - Black Box Interface

Purpose: Read-only cluster queries
Interface: TargetResolver.resolve(), PermissionChecker.check()
Hidden: kubectl invocation, jsonpath output parsing, access review answers

Can be replaced with a direct Kubernetes API client.
"""

from .kubectl import KubectlOutput, run_kubectl
from .permissions import REQUIRED_PERMISSIONS, PermissionChecker, RequiredPermission
from .resolver import TargetResolver

__all__ = [
    "KubectlOutput",
    "PermissionChecker",
    "REQUIRED_PERMISSIONS",
    "RequiredPermission",
    "TargetResolver",
    "run_kubectl",
]
