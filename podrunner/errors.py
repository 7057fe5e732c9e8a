"""
Error taxonomy shared by all PodRunner modules.

Each error knows the HTTP status the API layer answers with, and carries
the correlation identifier of the request it belongs to once known.
"""

from typing import Any, Optional


class PodRunnerError(Exception):
    """Base class for request-level failures."""

    status_code = 500

    def __init__(self, message: str, correlation_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id


class ConfigurationError(PodRunnerError):
    """Script catalog is missing, unreadable or invalid."""

    status_code = 500


class NotFound(PodRunnerError):
    """No script with the requested name exists in the catalog."""

    status_code = 404


class ValidationError(PodRunnerError):
    """Request payload does not satisfy the script's parameter declarations."""

    status_code = 400


class MissingParameter(ValidationError):
    """A required parameter is absent from the payload."""

    def __init__(self, parameter: str, correlation_id: Optional[str] = None):
        super().__init__(f"Required parameter '{parameter}' is missing in taskData", correlation_id)
        self.parameter = parameter


class InvalidParameterName(ValidationError):
    """A declared parameter name could not be turned into an env identifier."""

    # Catalog defect rather than caller fault
    status_code = 500

    def __init__(self, parameter: str, sanitized: str, correlation_id: Optional[str] = None):
        super().__init__(
            f"Parameter name '{parameter}' sanitized to invalid identifier '{sanitized}'",
            correlation_id,
        )
        self.parameter = parameter
        self.sanitized = sanitized


class TargetUnavailable(PodRunnerError):
    """No pod matched the selector, or the lookup itself failed."""

    status_code = 503


class ExecutionError(PodRunnerError):
    """Remote command failed. Carries the outcome so output reaches the caller."""

    status_code = 500

    def __init__(self, message: str, outcome: Any, correlation_id: Optional[str] = None):
        super().__init__(message, correlation_id)
        self.outcome = outcome


class TrackingError(Exception):
    """Process tracking call failed. Logged, never returned to the caller."""


class PermissionCheckError(Exception):
    """Service account lacks the cluster permissions it needs. Fatal at startup."""
