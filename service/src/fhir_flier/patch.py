"""FHIRPath Patch generation.

Turns an operation log into a FHIR ``Parameters`` resource as described in
https://hl7.org/fhir/R4/fhirpatch.html, e.g. for a delete, an add and a
replace::

    {
      "resourceType": "Parameters",
      "parameter": [
        {"name": "operation", "part": [
          {"name": "type", "valueCode": "delete"},
          {"name": "path", "valueString": "Patient.birthDate"}
        ]},
        {"name": "operation", "part": [
          {"name": "type", "valueCode": "add"},
          {"name": "path", "valueString": "Patient"},
          {"name": "name", "valueString": "name"},
          {"name": "value", "valueString": "[{\\"family\\":\\"Doe\\"}]"}
        ]},
        {"name": "operation", "part": [
          {"name": "type", "valueCode": "replace"},
          {"name": "path", "valueString": "Patient.status"},
          {"name": "value", "valueString": "active"}
        ]}
      ]
    }
"""

import json
import logging
import numbers
import re
from datetime import date
from decimal import Decimal
from typing import Any, Literal, Sequence

from pydantic import BaseModel

from .builder.operations import (
    AddOperation,
    DeleteOperation,
    Operation,
    OperationType,
    ReplaceOperation,
)

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
DATETIME_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:\d{2})?",
    re.ASCII,
)


class PatchPart(BaseModel):
    name: str
    valueCode: str | None = None
    valueString: str | None = None
    valueBoolean: bool | None = None
    valueInteger: int | None = None
    valueDecimal: float | None = None
    valueDate: str | None = None
    valueDateTime: str | None = None


class PatchParameter(BaseModel):
    name: str = "operation"
    part: list[PatchPart]


class PatchDocument(BaseModel):
    resourceType: Literal["Parameters"] = "Parameters"
    parameter: list[PatchParameter] = []

    def to_dict(self) -> dict[str, Any]:
        # Every part carries exactly one value[x] key
        return self.model_dump(exclude_none=True)


class FHIRPathPatchGenerator:
    """Builds the ``Parameters`` resource for an operation log. Stateless."""

    def generate(
        self, resource_type: str, operations: Sequence[Operation]
    ) -> PatchDocument:
        parameters = [
            PatchParameter(part=self._build_parts(resource_type, op))
            for op in operations
        ]
        logger.debug(
            f"Generated FHIRPath Patch for {resource_type} with {len(parameters)} operations"
        )
        return PatchDocument(parameter=parameters)

    def _build_parts(self, resource_type: str, operation: Operation) -> list[PatchPart]:
        if isinstance(operation, AddOperation):
            return self._add_parts(resource_type, operation)
        if isinstance(operation, ReplaceOperation):
            return self._replace_parts(resource_type, operation)
        if isinstance(operation, DeleteOperation):
            return self._delete_parts(resource_type, operation)
        return []

    def _add_parts(self, resource_type: str, operation: AddOperation) -> list[PatchPart]:
        """``path`` points at the parent resource, ``name`` is the property."""
        return [
            PatchPart(name="type", valueCode=OperationType.ADD.value),
            PatchPart(name="path", valueString=resource_type),
            PatchPart(name="name", valueString=operation.property),
            *self._value_parts(operation.value),
        ]

    def _replace_parts(
        self, resource_type: str, operation: ReplaceOperation
    ) -> list[PatchPart]:
        return [
            PatchPart(name="type", valueCode=OperationType.REPLACE.value),
            PatchPart(name="path", valueString=f"{resource_type}.{operation.property}"),
            *self._value_parts(operation.value),
        ]

    def _delete_parts(
        self, resource_type: str, operation: DeleteOperation
    ) -> list[PatchPart]:
        return [
            PatchPart(name="type", valueCode=OperationType.DELETE.value),
            PatchPart(name="path", valueString=f"{resource_type}.{operation.property}"),
        ]

    def _value_parts(self, value: Any) -> list[PatchPart]:
        if value is None:
            return []

        key, serialized = self._detect_value(value)
        return [PatchPart(name="value", **{key: serialized})]

    def _detect_value(self, value: Any) -> tuple[str, Any]:
        """Map a Python value to its ``value[x]`` key and payload.

        Complex values are never given a complex FHIR type; they are sent as
        compact JSON in ``valueString``. Dates and dateTimes are recognised by
        pattern; ``date`` and ``datetime`` objects are turned into ISO text
        first and go through the same checks.
        """
        if isinstance(value, date):
            value = value.isoformat()
        if isinstance(value, bool):
            return "valueBoolean", value
        if isinstance(value, int):
            return "valueInteger", value
        if isinstance(value, (numbers.Real, Decimal)):
            return "valueDecimal", float(value)
        if isinstance(value, (dict, list, tuple)):
            return "valueString", json.dumps(
                value, separators=(",", ":"), ensure_ascii=False, default=_json_default
            )
        if isinstance(value, str):
            if looks_like_date(value):
                return "valueDate", value
            if looks_like_datetime(value):
                return "valueDateTime", value
            return "valueString", value
        return "valueString", str(value)


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def looks_like_date(value: str) -> bool:
    """``YYYY-MM-DD``, nothing more."""
    return DATE_PATTERN.fullmatch(value) is not None


def looks_like_datetime(value: str) -> bool:
    """``YYYY-MM-DDThh:mm`` with optional seconds, fraction and zone."""
    return DATETIME_PATTERN.fullmatch(value) is not None
