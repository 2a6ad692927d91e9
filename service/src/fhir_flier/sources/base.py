from abc import ABC, abstractmethod

from .parameter import FHIRSearchParameter


class SearchParameterSource(ABC):
    """Provides the search parameters that apply to a resource type."""

    @abstractmethod
    def for_type(self, resource_type: str) -> list[FHIRSearchParameter]:
        pass
