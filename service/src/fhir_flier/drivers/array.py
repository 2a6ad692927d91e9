"""In-memory resource driver working on plain dictionaries."""

import copy
from typing import Any, Sequence

from ..builder.operations import (
    AddOperation,
    DeleteOperation,
    Operation,
    ReplaceOperation,
)
from .base import ResourceDriver


class ArrayResourceDriver(ResourceDriver):
    """Applies operations to a resource dictionary without any persistence.

    Used for local materialization by the builders, for tests and for
    previewing changes before they are sent anywhere.
    """

    def create(
        self, resource_type: str, data: dict[str, Any], operations: Sequence[Operation]
    ) -> dict[str, Any]:
        return self.apply(data, operations)

    def update(
        self, resource_type: str, data: dict[str, Any], operations: Sequence[Operation]
    ) -> dict[str, Any]:
        return self.apply(data, operations)

    def put(
        self, resource_type: str, data: dict[str, Any], operations: Sequence[Operation]
    ) -> dict[str, Any]:
        return self.apply(data, operations)

    def delete(self, resource_type: str, data: dict[str, Any]) -> dict[str, Any]:
        return {}

    def apply(
        self, data: dict[str, Any], operations: Sequence[Operation]
    ) -> dict[str, Any]:
        """Fold *operations* onto a shallow copy of *data*.

        - AddOperation sets (or overwrites) the property
        - ReplaceOperation sets the property only if the current result has it
        - DeleteOperation removes the property if present

        None of the three raises; *data* itself is never modified and the
        result shares no values with the operations.
        """
        result = dict(data)

        for operation in operations:
            prop = operation.property

            if isinstance(operation, AddOperation):
                result[prop] = copy.deepcopy(operation.value)
            elif isinstance(operation, ReplaceOperation):
                if prop in result:
                    result[prop] = copy.deepcopy(operation.value)
            elif isinstance(operation, DeleteOperation):
                result.pop(prop, None)

        return result
