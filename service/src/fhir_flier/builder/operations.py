"""Pending mutations recorded by a :class:`ResourceBuilder`.

Each operation maps onto one FHIRPath Patch operation type
(https://hl7.org/fhir/R4/fhirpatch.html). Operations are immutable once
created; a builder only ever appends them to its log.
"""

import copy
import json
import logging
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from ..errors import InvalidFileFormat

logger = logging.getLogger(__name__)


class OperationType(StrEnum):
    ADD = "add"
    REPLACE = "replace"
    DELETE = "delete"


class AddOperation(BaseModel):
    """Adds (or overwrites) a property on the resource."""

    model_config = ConfigDict(frozen=True)

    type: Literal["add"] = "add"
    property: str = Field(min_length=1)
    value: Any = None

    @field_validator("value")
    @classmethod
    def detach_value(cls, v: Any) -> Any:
        # The log must not share lists or dicts with the caller
        return copy.deepcopy(v)


class ReplaceOperation(BaseModel):
    """Replaces the value of a property that already exists.

    Applying it to a resource without the property is a no-op.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["replace"] = "replace"
    property: str = Field(min_length=1)
    value: Any = None

    @field_validator("value")
    @classmethod
    def detach_value(cls, v: Any) -> Any:
        return copy.deepcopy(v)


class DeleteOperation(BaseModel):
    """Removes a property from the resource."""

    model_config = ConfigDict(frozen=True)

    type: Literal["delete"] = "delete"
    property: str = Field(min_length=1)


Operation = Annotated[
    Union[AddOperation, ReplaceOperation, DeleteOperation],
    Field(discriminator="type"),
]

OPERATION_LIST_ADAPTER = TypeAdapter(list[Operation])


def load_operations(file: str | Path) -> list[Operation]:
    """Read an operation log from a JSON or YAML file.

    The file holds a list of mappings such as
    ``{"type": "replace", "property": "gender", "value": "female"}``.
    """
    file = Path(file)
    content = file.read_text(encoding="utf-8")

    suffix = file.suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(content) if content.strip() else []
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)  # may be None
        else:
            raise InvalidFileFormat(f"unsupported operations file type '{suffix}'")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        msg = f"failed to parse operations from {str(file)}"
        logger.error(msg)
        raise InvalidFileFormat(msg) from e

    try:
        operations = OPERATION_LIST_ADAPTER.validate_python(data or [])
    except ValidationError as e:
        msg = f"invalid operations in {str(file)}"
        logger.error(msg)
        logger.error(e.errors())
        raise InvalidFileFormat(msg) from e

    logger.debug(f"Loaded {len(operations)} operations from {file}")
    return operations
