"""
PodRunner API data models.

Wire names follow the calling Task Service (camelCase) where it defines
them; Python attribute names stay snake_case.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from podrunner.modules.catalog import ScriptDefinition

SCRIPT_NAME_KEY = "name"


# Request Models (API Input)


class ExecuteScriptRequest(BaseModel):
    """Request from the Task Service to run a script."""

    model_config = ConfigDict(populate_by_name=True)

    task_name: Optional[str] = Field(
        None, alias="taskName", description="Task instance name assigned by the caller"
    )
    last_run_time: Optional[int] = Field(
        None, alias="lastRunTime", description="Previous run timestamp (informational)"
    )
    tracking_id: Optional[str] = Field(
        None, alias="trackingId", description="Correlation ID for request tracking"
    )
    task_data: Dict[str, Any] = Field(
        ...,
        alias="taskData",
        description="Script name under 'name' plus parameter values keyed by parameter name",
    )

    @field_validator("task_data")
    @classmethod
    def validate_script_name(cls, v):
        """Ensure taskData names the script to run."""
        if SCRIPT_NAME_KEY not in v:
            raise ValueError("taskData must contain a 'name' field specifying the script to run")
        name = v[SCRIPT_NAME_KEY]
        if not isinstance(name, str) or not name:
            raise ValueError("taskData 'name' field must be a non-empty string")
        return v

    @property
    def script_name(self) -> str:
        return self.task_data[SCRIPT_NAME_KEY]


# Response Models (API Output)


class ParameterInfo(BaseModel):
    """Parameter as advertised to callers."""

    name: str
    type: str
    description: str = ""
    optional: bool = False


class ScriptSummary(BaseModel):
    """Catalog entry as listed to callers. Never includes the command."""

    name: str
    parameters: List[ParameterInfo] = Field(default_factory=list)

    @classmethod
    def from_definition(cls, definition: ScriptDefinition) -> "ScriptSummary":
        return cls(
            name=definition.name,
            parameters=[ParameterInfo(**p.to_dict()) for p in definition.parameters],
        )


class ExecuteScriptResponse(BaseModel):
    """Response after running (or failing to run) a script."""

    model_config = ConfigDict(populate_by_name=True)

    task_name: Optional[str] = Field(None, alias="taskName")
    script_id: Optional[str] = None
    tracking_id: Optional[str] = Field(None, alias="trackingId")
    process_id: Optional[int] = Field(None, alias="processId")
    output: Optional[str] = None
    error: Optional[str] = None
