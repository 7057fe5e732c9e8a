"""Thin wrapper around the kubectl binary."""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger("podrunner.kubectl")

KUBECTL = "kubectl"


@dataclass
class KubectlOutput:
    """Result of one kubectl invocation."""

    stdout: str
    stderr: str
    return_code: int
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.return_code == 0 and not self.timed_out

    @property
    def combined(self) -> str:
        """stdout followed by stderr (stderr is empty when the streams were merged)."""
        if not self.stderr:
            return self.stdout
        if self.stdout and not self.stdout.endswith("\n"):
            return f"{self.stdout}\n{self.stderr}"
        return self.stdout + self.stderr


def _as_text(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_kubectl(
    args: List[str], timeout: Optional[float] = None, merge_stderr: bool = False
) -> KubectlOutput:
    """
    Run kubectl with the given arguments.

    Args:
        args: Arguments after the kubectl binary
        timeout: Seconds before the child is killed (None waits forever)
        merge_stderr: Send stderr into stdout so both keep their interleaving

    Returns:
        KubectlOutput; a timeout is reported, not raised

    Raises:
        OSError: kubectl could not be started
    """
    cmd = [KUBECTL] + args
    logger.debug(f"Running: {' '.join(cmd[:4])} ...")

    if merge_stderr:
        streams = {"stdout": subprocess.PIPE, "stderr": subprocess.STDOUT}
    else:
        streams = {"capture_output": True}

    try:
        process = subprocess.run(
            cmd,
            text=True,
            timeout=timeout,
            **streams,
        )
    except subprocess.TimeoutExpired as e:
        logger.error(f"kubectl timed out after {timeout}s")
        return KubectlOutput(
            stdout=_as_text(e.stdout),
            stderr=_as_text(e.stderr),
            return_code=-1,
            timed_out=True,
        )

    return KubectlOutput(
        stdout=process.stdout or "",
        stderr=process.stderr or "",
        return_code=process.returncode,
    )
