from typing import Mapping, Sequence

from .base import SearchParameterSource
from .parameter import FHIRSearchParameter


class InMemorySearchParameterSource(SearchParameterSource):
    """Search parameters defined in code, keyed by resource type.

    Handy for tests and for resources whose parameters are hard-coded.
    """

    def __init__(
        self, params: Mapping[str, Sequence[FHIRSearchParameter]] | None = None
    ):
        self._params: dict[str, list[FHIRSearchParameter]] = {
            resource_type: list(defs) for resource_type, defs in (params or {}).items()
        }

    @staticmethod
    def only(
        resource_type: str, params: Sequence[FHIRSearchParameter]
    ) -> "InMemorySearchParameterSource":
        return InMemorySearchParameterSource({resource_type: params})

    def for_type(self, resource_type: str) -> list[FHIRSearchParameter]:
        return list(self._params.get(resource_type, []))
