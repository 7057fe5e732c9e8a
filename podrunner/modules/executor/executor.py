"""
Remote command execution via kubectl exec.

The command reaches the pod as a single argv element handed to the pod's
shell with -c, so it goes through exactly one layer of shell parsing.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from podrunner.modules.cluster import run_kubectl

logger = logging.getLogger("podrunner.executor")


@dataclass
class ExecutionResult:
    """Outcome of one remote command."""

    output: str
    failed: bool
    error: Optional[str] = None
    return_code: Optional[int] = None


class CommandExecutor:
    """Runs commands inside a target pod. Single attempt, no retry."""

    def __init__(self, shell: str = "/bin/bash", timeout: Optional[float] = 300):
        self.shell = shell
        self.timeout = timeout

    def build_command(self, namespace: str, target: str, full_command: str) -> List[str]:
        """kubectl arguments for running full_command in target."""
        return ["exec", "-n", namespace, target, "--", self.shell, "-c", full_command]

    def execute(self, namespace: str, target: str, full_command: str) -> ExecutionResult:
        """
        Run full_command inside target and capture its outcome.

        Args:
            namespace: Namespace of the target pod
            target: Pod name
            full_command: Shell text, including any env assignment prefix

        Returns:
            ExecutionResult with combined output; failures are reported
            in the result rather than raised
        """
        args = self.build_command(namespace, target, full_command)

        try:
            result = run_kubectl(args, timeout=self.timeout, merge_stderr=True)
        except OSError as e:
            logger.error(f"Failed to start kubectl exec for pod {target}: {e}")
            return ExecutionResult(output="", failed=True, error=str(e), return_code=-1)

        if result.timed_out:
            return ExecutionResult(
                output=result.combined,
                failed=True,
                error=f"Command timed out after {self.timeout}s",
                return_code=result.return_code,
            )

        if not result.success:
            return ExecutionResult(
                output=result.combined,
                failed=True,
                error=f"exit status {result.return_code}",
                return_code=result.return_code,
            )

        return ExecutionResult(
            output=result.combined,
            failed=False,
            return_code=result.return_code,
        )

    async def execute_async(self, namespace: str, target: str, full_command: str) -> ExecutionResult:
        """execute() without blocking the event loop."""
        return await asyncio.to_thread(self.execute, namespace, target, full_command)
