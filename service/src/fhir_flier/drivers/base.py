"""Driver contracts consumed by the fluent builders.

A driver receives what a builder has accumulated and turns it into an
external effect: an HTTP request, a database write, an index update.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from ..builder.operations import Operation
from ..builder.search_param import SearchParam


class ResourceDriver(ABC):
    """Materializes the operation log of a :class:`ResourceBuilder`."""

    @abstractmethod
    def create(
        self, resource_type: str, data: dict[str, Any], operations: Sequence[Operation]
    ) -> Any:
        """Create the resource from its data with the operations applied."""

    @abstractmethod
    def update(
        self, resource_type: str, data: dict[str, Any], operations: Sequence[Operation]
    ) -> Any:
        """Update (patch) the resource with the accumulated operations."""

    @abstractmethod
    def put(
        self, resource_type: str, data: dict[str, Any], operations: Sequence[Operation]
    ) -> Any:
        """Replace the whole resource."""

    @abstractmethod
    def delete(self, resource_type: str, data: dict[str, Any]) -> Any:
        """Delete the resource."""


class SearchDriver(ABC):
    """Executes the parameters accumulated by a :class:`SearchBuilder`."""

    @abstractmethod
    def search(self, resource_type: str, params: Sequence[SearchParam]) -> Any:
        """Run the search; the return type is up to the driver."""
