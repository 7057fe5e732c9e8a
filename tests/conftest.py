"""
Shared pytest fixtures for PodRunner tests.

This module provides common fixtures including:
- KubectlMocker: Mock kubectl subprocess calls with canned responses
- TrackingRecorder: In-process stand-in for the process tracking service
- Catalog document helpers
"""

import json
import os
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Pattern, Union
from unittest.mock import MagicMock, patch

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# =============================================================================
# Kubectl Mocking Infrastructure
# =============================================================================

@dataclass
class KubectlResponse:
    """Represents a mocked kubectl command response."""
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    timeout: bool = False

    def merged_output(self) -> str:
        """What stdout holds when stderr is redirected into it."""
        if self.stdout and self.stderr and not self.stdout.endswith("\n"):
            return f"{self.stdout}\n{self.stderr}"
        return self.stdout + self.stderr

    def to_completed_process(self, merged: bool = False) -> MagicMock:
        """Convert to a subprocess.CompletedProcess-like mock."""
        result = MagicMock()
        result.stdout = self.merged_output() if merged else self.stdout
        result.stderr = None if merged else self.stderr
        result.returncode = self.returncode
        return result


@dataclass
class KubectlCall:
    """Record of a kubectl call made during testing."""
    command: List[str]
    full_command_str: str
    timeout: Optional[float] = None
    matched_pattern: Optional[str] = None
    response: Optional[KubectlResponse] = None


class KubectlMocker:
    """
    Mock kubectl subprocess calls with pattern-matched responses.

    Usage:
        def test_resolve(kubectl_mocker):
            kubectl_mocker.register("get pods", KubectlResponse(stdout="pod-x"))

            TargetResolver().resolve("default", "app=x")

            assert kubectl_mocker.was_called_with("get pods")
    """

    def __init__(self):
        self._responses: List[tuple] = []
        self._call_history: List[KubectlCall] = []
        self._default_response = KubectlResponse(
            stderr="Error: mock not configured for this command",
            returncode=1
        )

    def register(
        self,
        pattern: Union[str, Pattern],
        response: KubectlResponse,
        priority: int = 0
    ) -> "KubectlMocker":
        """
        Register a response for commands matching the pattern.

        Args:
            pattern: String (substring match) or regex pattern
            response: KubectlResponse to return when matched
            priority: Higher priority patterns are checked first
        """
        self._responses.append((pattern, response, priority))
        self._responses.sort(key=lambda x: x[2], reverse=True)
        return self

    def register_scenario(self, scenario_name: str) -> "KubectlMocker":
        """Register all responses for a named scenario."""
        from fixtures.kubectl_scenarios import SCENARIOS

        if scenario_name not in SCENARIOS:
            raise ValueError(
                f"Unknown scenario: {scenario_name}. "
                f"Available: {list(SCENARIOS.keys())}"
            )

        for pattern, response in SCENARIOS[scenario_name].items():
            self.register(pattern, response)

        return self

    def mock_run(self, cmd: List[str], capture_output: bool = True, text: bool = True,
                 timeout: Optional[float] = None, **kwargs) -> MagicMock:
        """Side effect replacing subprocess.run for kubectl commands."""
        cmd_str = " ".join(cmd)

        if cmd[0] != "kubectl":
            raise RuntimeError(f"Non-kubectl command blocked: {cmd_str}")

        kubectl_args = " ".join(cmd[1:])
        matched_pattern = None
        response = self._default_response

        for pattern, resp, _ in self._responses:
            if isinstance(pattern, str):
                if pattern in kubectl_args:
                    matched_pattern = pattern
                    response = resp
                    break
            elif pattern.search(kubectl_args):
                matched_pattern = pattern.pattern
                response = resp
                break

        self._call_history.append(KubectlCall(
            command=list(cmd),
            full_command_str=cmd_str,
            timeout=timeout,
            matched_pattern=matched_pattern,
            response=response,
        ))

        merged = kwargs.get("stderr") == subprocess.STDOUT
        if response.timeout:
            if merged:
                raise subprocess.TimeoutExpired(cmd, timeout, output=response.merged_output())
            raise subprocess.TimeoutExpired(
                cmd, timeout, output=response.stdout, stderr=response.stderr
            )
        return response.to_completed_process(merged=merged)

    @property
    def calls(self) -> List[KubectlCall]:
        """Get all kubectl calls made during the test."""
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)

    def was_called_with(self, pattern: str) -> bool:
        """Check if any call contained the given pattern."""
        return any(pattern in call.full_command_str for call in self._call_history)

    def get_calls_matching(self, pattern: str) -> List[KubectlCall]:
        """Get all calls containing the given pattern."""
        return [c for c in self._call_history if pattern in c.full_command_str]


@pytest.fixture
def kubectl_mocker():
    """
    Fixture that provides a KubectlMocker with subprocess.run patched.
    """
    mocker = KubectlMocker()
    with patch("subprocess.run", side_effect=mocker.mock_run):
        yield mocker


# =============================================================================
# Process Tracking Service Stand-in
# =============================================================================

@dataclass
class TrackingRecorder:
    """
    Records requests sent to the tracking service and answers them.

    Create requests go to BASE_URL, updates to BASE_URL/<processId>.
    """
    base_url: str = "http://tracking.test/api/process"
    process_id: Any = 42
    create_status: int = 200
    update_status: int = 200
    create_body: Optional[str] = None
    unreachable: bool = False
    requests: List[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        if str(request.url).rstrip("/") == self.base_url.rstrip("/"):
            if self.create_body is not None:
                return httpx.Response(self.create_status, text=self.create_body)
            return httpx.Response(self.create_status, json={"processId": self.process_id})
        return httpx.Response(self.update_status, json={})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def creates(self) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url).rstrip("/") == self.base_url.rstrip("/")]

    @property
    def updates(self) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url).rstrip("/") != self.base_url.rstrip("/")]

    @staticmethod
    def body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)


@pytest.fixture
def tracking_recorder():
    return TrackingRecorder()


# =============================================================================
# Catalog Helpers
# =============================================================================

SAMPLE_CATALOG = [
    {
        "id": "where-am-i",
        "name": "where am i",
        "command": "pwd",
        "parameters": [],
    },
    {
        "id": "sleep",
        "name": "Sleep X seconds",
        "command": "sleep $SECONDS",
        "parameters": [{"name": "seconds", "type": "number", "optional": False}],
    },
    {
        "name": "Reindex dataset",
        "command": "SECRET_TOKEN=abc123 /opt/tools/reindex.sh",
        "parameters": [
            {"name": "dataset-id", "description": "Dataset to reindex"},
            {"name": "dry run", "type": "boolean", "optional": True},
        ],
    },
]


@pytest.fixture
def write_catalog(tmp_path):
    """Write a catalog document and return its path."""
    def _write(entries: Any = None, text: Optional[str] = None, name: str = "scripts.json") -> str:
        path = tmp_path / name
        if text is None:
            text = json.dumps(SAMPLE_CATALOG if entries is None else entries)
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def catalog_path(write_catalog):
    return write_catalog()


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "kubectl_mock: Tests using mocked kubectl subprocess calls"
    )
