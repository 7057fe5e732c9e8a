"""
API Module - Black Box Interface

Purpose: HTTP request/response shapes
Interface: Pydantic models used by the REST endpoints
Hidden: Wire naming, payload validation

The API module only describes data - it contains no business logic.
All logic is delegated to the orchestrator.
"""

from .models import (
    ExecuteScriptRequest,
    ExecuteScriptResponse,
    ParameterInfo,
    ScriptSummary,
)

__all__ = [
    "ExecuteScriptRequest",
    "ExecuteScriptResponse",
    "ParameterInfo",
    "ScriptSummary",
]
