"""
Parameter binding - request payload to shell environment assignments.

Values arrive as untyped JSON scalars. Each is wrapped in a ParameterValue,
rendered with the canonical rule for its tag, and quoted so one layer of
remote shell interpretation yields the original text.
"""

import json
import logging
import re
import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List

from podrunner.errors import InvalidParameterName, MissingParameter
from podrunner.modules.catalog import ParameterDeclaration

logger = logging.getLogger("podrunner.binder")

_INVALID_RUN = re.compile(r"[^A-Za-z0-9_]+")
_ENV_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ValueTag(str, Enum):
    """Kind of a payload value."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    OTHER = "other"


@dataclass(frozen=True)
class ParameterValue:
    """A payload value together with its kind."""

    tag: ValueTag
    raw: Any

    @classmethod
    def of(cls, value: Any) -> "ParameterValue":
        # bool is a subclass of int, check it first
        if isinstance(value, bool):
            return cls(ValueTag.BOOLEAN, value)
        if isinstance(value, (int, float)):
            return cls(ValueTag.NUMBER, value)
        if isinstance(value, str):
            return cls(ValueTag.STRING, value)
        if value is None:
            return cls(ValueTag.NULL, value)
        return cls(ValueTag.OTHER, value)

    def render(self) -> str:
        """Canonical text form of the value."""
        if self.tag is ValueTag.STRING:
            return self.raw
        if self.tag is ValueTag.BOOLEAN:
            return "true" if self.raw else "false"
        if self.tag is ValueTag.NUMBER:
            if isinstance(self.raw, float) and self.raw.is_integer() and abs(self.raw) < 1e21:
                return str(int(self.raw))
            return str(self.raw)
        if self.tag is ValueTag.NULL:
            return ""
        return json.dumps(self.raw, separators=(",", ":"), sort_keys=True, default=str)


def sanitize_env_name(name: str) -> str:
    """
    Turn a parameter name into an environment variable identifier.

    Every run of characters outside [A-Za-z0-9_] becomes a single
    underscore, and a leading digit gets an underscore prefix.
    """
    sanitized = _INVALID_RUN.sub("_", name)
    if sanitized[:1].isdigit():
        sanitized = "_" + sanitized
    return sanitized


def is_valid_env_name(name: str) -> bool:
    return bool(_ENV_NAME.match(name))


def bind(declarations: Iterable[ParameterDeclaration], payload: Dict[str, Any]) -> str:
    """
    Build the environment prefix for a script invocation.

    Args:
        declarations: Parameters the script accepts, in declaration order
        payload: Caller-supplied values keyed by parameter name

    Returns:
        Space separated NAME=value assignments with a trailing space,
        or an empty string when nothing is bound

    Raises:
        MissingParameter: A required parameter is absent from the payload
        InvalidParameterName: A declared name cannot become an identifier
    """
    assignments: List[str] = []

    for declaration in declarations:
        if declaration.name not in payload:
            if not declaration.optional:
                raise MissingParameter(declaration.name)
            logger.debug(f"Optional parameter '{declaration.name}' not supplied, skipping")
            continue

        value = ParameterValue.of(payload[declaration.name]).render()

        env_name = sanitize_env_name(declaration.name)
        if not is_valid_env_name(env_name):
            raise InvalidParameterName(declaration.name, env_name)

        assignments.append(f"{env_name}={shlex.quote(value)}")

    if not assignments:
        return ""
    return " ".join(assignments) + " "
