"""
Startup permission self-check.

Asks the cluster's own authorizer (kubectl auth can-i, backed by a
SelfSubjectAccessReview) whether the service account may do everything the
service needs. Any denial aborts startup.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from podrunner.errors import PermissionCheckError

from .kubectl import run_kubectl

logger = logging.getLogger("podrunner.permissions")


@dataclass(frozen=True)
class RequiredPermission:
    verb: str
    resource: str
    description: str


REQUIRED_PERMISSIONS: Tuple[RequiredPermission, ...] = (
    RequiredPermission("list", "pods", "List Pods"),
    RequiredPermission("get", "pods", "Get Pods"),
    RequiredPermission("create", "pods/exec", "Create Pods/Exec"),
)


class PermissionChecker:
    """Verifies RBAC permissions of the running service account."""

    def __init__(
        self,
        namespace: str,
        permissions: Tuple[RequiredPermission, ...] = REQUIRED_PERMISSIONS,
        timeout: Optional[float] = 30,
    ):
        self.namespace = namespace
        self.permissions = permissions
        self.timeout = timeout

    def _is_allowed(self, permission: RequiredPermission) -> Tuple[bool, str]:
        try:
            result = run_kubectl(
                ["auth", "can-i", permission.verb, permission.resource, "-n", self.namespace],
                timeout=self.timeout,
            )
        except OSError as e:
            raise PermissionCheckError(
                f"Failed to perform access review for {permission.description}: {e}"
            ) from e

        if result.timed_out:
            raise PermissionCheckError(
                f"Access review for {permission.description} timed out"
            )

        answer = result.stdout.strip().lower()
        # can-i answers "no" with exit status 1; anything else is an error
        if answer not in ("yes", "no"):
            raise PermissionCheckError(
                f"Failed to perform access review for {permission.description}: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )
        return answer == "yes", result.stderr.strip()

    def check(self) -> None:
        """
        Raise PermissionCheckError unless every required permission is granted.
        """
        logger.info(f"Checking required Kubernetes permissions in namespace '{self.namespace}'...")

        denied: List[str] = []
        for permission in self.permissions:
            allowed, reason = self._is_allowed(permission)
            if allowed:
                logger.info(f"Permission check PASSED: '{permission.description}' is allowed")
            else:
                logger.error(
                    f"Permission check FAILED: '{permission.description}' is DENIED. Reason: {reason}"
                )
                denied.append(permission.description)

        if denied:
            raise PermissionCheckError(
                f"Missing required Kubernetes permissions in namespace {self.namespace}: "
                f"{', '.join(denied)}"
            )

        logger.info(f"All required Kubernetes permissions verified in namespace '{self.namespace}'")
