"""Execution target discovery."""

import asyncio
import logging
from typing import Optional

from podrunner.errors import TargetUnavailable

from .kubectl import run_kubectl

logger = logging.getLogger("podrunner.resolver")


class TargetResolver:
    """Finds the pod a script should run in."""

    def __init__(self, timeout: Optional[float] = 30):
        self.timeout = timeout

    def resolve(self, namespace: str, selector: str) -> str:
        """
        Return the name of a pod matching selector in namespace.

        When several pods match, which one is returned is unspecified.

        Raises:
            TargetUnavailable: No pod matched, or the lookup failed
        """
        where = f"namespace: {namespace}, selector: {selector}"
        try:
            result = run_kubectl(
                [
                    "get", "pods",
                    "-n", namespace,
                    "-l", selector,
                    "-o", "jsonpath={.items[*].metadata.name}",
                ],
                timeout=self.timeout,
            )
        except OSError as e:
            raise TargetUnavailable(f"Failed to get pod ({where}): {e}") from e

        if result.timed_out:
            raise TargetUnavailable(f"Failed to get pod ({where}): lookup timed out")
        if not result.success:
            raise TargetUnavailable(
                f"Failed to get pod ({where}): exit status {result.return_code}, "
                f"stderr: {result.stderr.strip()}"
            )

        names = result.stdout.split()
        if not names:
            raise TargetUnavailable(
                f"No pod found matching label selector: {selector} in namespace {namespace}"
            )

        if len(names) > 1:
            logger.debug(f"{len(names)} pods match ({where}), using {names[0]}")
        return names[0]

    async def resolve_async(self, namespace: str, selector: str) -> str:
        """resolve() without blocking the event loop."""
        return await asyncio.to_thread(self.resolve, namespace, selector)
