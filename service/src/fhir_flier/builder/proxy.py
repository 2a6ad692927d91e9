import json
from typing import TYPE_CHECKING, Any

from .operations import DeleteOperation, ReplaceOperation

if TYPE_CHECKING:
    from .resource import ResourceBuilder


class PropertyProxy:
    """Cursor on a single FHIR property of a :class:`ResourceBuilder`.

    Returned by calling a property without arguments::

        builder.birthDate().delete()          # records a delete
        builder.status().replace("active")    # records a replace
        builder.name().value()                # reads, records nothing

    The value is read from the builder's base data once, when the proxy is
    created; pending operations are not taken into account.
    """

    def __init__(
        self, property_name: str, current_value: Any, parent: "ResourceBuilder"
    ):
        self._property_name = property_name
        self._current_value = current_value
        self._parent = parent

    @property
    def property_name(self) -> str:
        return self._property_name

    def delete(self) -> "ResourceBuilder":
        """Record a ``delete`` of the property."""
        return self._parent.add_operation(DeleteOperation(property=self._property_name))

    def replace(self, value: Any) -> "ResourceBuilder":
        """Record a ``replace``; it only takes effect if the property exists."""
        return self._parent.add_operation(
            ReplaceOperation(property=self._property_name, value=value)
        )

    def value(self) -> Any:
        return self._current_value

    def to_text(self) -> str:
        if isinstance(self._current_value, (dict, list)):
            return json.dumps(
                self._current_value, separators=(",", ":"), ensure_ascii=False
            )
        if self._current_value is None:
            return ""
        if isinstance(self._current_value, bool):
            return "true" if self._current_value else "false"
        return str(self._current_value)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"PropertyProxy({self._property_name!r}, {self._current_value!r})"
