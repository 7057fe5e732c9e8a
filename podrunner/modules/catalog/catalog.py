"""
Script catalog loading and validation.

The catalog document is a list of script entries (JSON or YAML). Entries are
validated with pydantic models before being turned into definitions. Loading
is all-or-nothing: any invalid entry fails the whole load.
"""

import json
import logging
import os
import re
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from podrunner.errors import ConfigurationError, NotFound

logger = logging.getLogger("podrunner.catalog")

DEFAULT_PARAMETER_TYPE = "string"

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class ParameterDeclaration:
    """Parameter accepted by a script, exported to it as an env variable."""

    name: str
    type: str = DEFAULT_PARAMETER_TYPE
    optional: bool = False
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "optional": self.optional,
        }


@dataclass(frozen=True)
class ScriptDefinition:
    """A catalogued maintenance script."""

    id: str
    name: str
    command: str
    parameters: Tuple[ParameterDeclaration, ...] = field(default_factory=tuple)
    description: str = ""
    monitoring: bool = False
    stage: Optional[str] = None


def slugify(name: str) -> str:
    """Derive a script identifier from its display name."""
    return _SLUG_PATTERN.sub("-", name.lower()).strip("-")


# Document models (catalog file input)


class ParameterEntry(BaseModel):
    """Parameter declaration as written in the catalog document."""

    name: StrictStr
    type: Optional[StrictStr] = None
    optional: Optional[StrictBool] = None
    description: Optional[StrictStr] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def to_declaration(self) -> ParameterDeclaration:
        return ParameterDeclaration(
            name=self.name,
            type=self.type or DEFAULT_PARAMETER_TYPE,
            optional=bool(self.optional),
            description=self.description or "",
        )


class ScriptEntry(BaseModel):
    """Script entry as written in the catalog document."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[StrictStr] = None
    name: StrictStr
    command: StrictStr
    parameters: Optional[List[ParameterEntry]] = None
    # acceptedParameters is the key used by older catalog documents
    accepted_parameters: Optional[List[ParameterEntry]] = Field(None, alias="acceptedParameters")
    description: Optional[StrictStr] = None
    monitoring: Optional[StrictBool] = None
    stage: Optional[StrictStr] = None

    @field_validator("name", "command")
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def to_definition(self) -> ScriptDefinition:
        script_id = self.id or slugify(self.name)
        if not script_id:
            raise ConfigurationError(f"script '{self.name}' has no usable 'id'")

        entries = self.parameters if self.parameters is not None else self.accepted_parameters
        return ScriptDefinition(
            id=script_id,
            name=self.name,
            command=self.command,
            parameters=tuple(p.to_declaration() for p in entries or []),
            description=self.description or "",
            monitoring=bool(self.monitoring),
            stage=self.stage or None,
        )


def _describe(error: PydanticValidationError) -> str:
    """One line per failed field, e.g. 'parameters.0.optional': Input should be a valid boolean."""
    problems = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        problems.append(f"'{location}': {err['msg']}" if location else err["msg"])
    return "; ".join(problems)


def _parse_entry(raw: Any, index: int) -> ScriptDefinition:
    where = f"script definition {index}"
    if isinstance(raw, dict) and isinstance(raw.get("name"), str):
        where = f"{where} ({raw['name']})"

    try:
        entry = ScriptEntry.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigurationError(f"{where} is invalid: {_describe(e)}") from e

    return entry.to_definition()


def parse_catalog(document: str, source: str = "<catalog>") -> List[ScriptDefinition]:
    """
    Parse and validate a catalog document.

    Args:
        document: JSON or YAML text holding a list of script entries
        source: Name used in error messages

    Returns:
        Script definitions in document order

    Raises:
        ConfigurationError: If the document or any entry is invalid
    """
    try:
        data = json.loads(document)
    except json.JSONDecodeError:
        # Not JSON; YAML catalogs are accepted too
        try:
            data = yaml.safe_load(document)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse script definitions from '{source}': {e}"
            ) from e

    if data is None:
        data = []
    if not isinstance(data, list):
        raise ConfigurationError(f"Script definitions in '{source}' must be a list")

    try:
        definitions = [_parse_entry(raw, i) for i, raw in enumerate(data)]
    except ConfigurationError as e:
        raise ConfigurationError(f"{e.message} in '{source}'") from e

    seen = set()
    for definition in definitions:
        if definition.name in seen:
            logger.warning(
                f"Duplicate script name '{definition.name}' in '{source}'; first entry wins"
            )
        seen.add(definition.name)

    return definitions


def load_catalog(path: str) -> List[ScriptDefinition]:
    """
    Read and validate the catalog document at path.

    Raises:
        ConfigurationError: If the file is unreadable or invalid
    """
    try:
        document = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(f"Script definitions file not found at {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to read script definitions file '{path}': {e}") from e

    definitions = parse_catalog(document, source=path)
    logger.debug(f"Loaded {len(definitions)} script definitions from {path}")
    return definitions


def find_script(definitions: List[ScriptDefinition], name: str) -> ScriptDefinition:
    """Return the first definition with the given name."""
    for definition in definitions:
        if definition.name == name:
            return definition
    raise NotFound(f"Script '{name}' not found")


class CatalogCache:
    """
    Catalog loader that reuses the last result while the file is unchanged.

    Keyed on the document's modification time, so edits still take effect
    on the next request.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()
        self._key: Optional[int] = None
        self._definitions: List[ScriptDefinition] = []

    def load(self) -> List[ScriptDefinition]:
        try:
            mtime = os.stat(self.path).st_mtime_ns
        except OSError:
            # Let load_catalog produce the proper error
            return load_catalog(self.path)

        with self._lock:
            if self._key == mtime:
                return list(self._definitions)

        definitions = load_catalog(self.path)

        with self._lock:
            self._key = mtime
            self._definitions = definitions
        return list(definitions)

    def invalidate(self) -> None:
        with self._lock:
            self._key = None
            self._definitions = []
