import logging

from ..errors import RegistryFrozen
from .base import SearchParameterSource
from .parameter import FHIRSearchParameter

logger = logging.getLogger(__name__)


class CompositeSearchParameterSource(SearchParameterSource):
    """Merges several sources into one.

    Registration order matters: the first source that defines a code wins,
    later definitions of the same code are dropped. Sources are registered
    during start-up only; after :meth:`freeze` the list is read-only and
    :meth:`add` raises :class:`RegistryFrozen`.
    """

    def __init__(self, sources: list[SearchParameterSource] | None = None):
        self._sources: list[SearchParameterSource] = list(sources or [])
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, source: SearchParameterSource) -> None:
        if self._frozen:
            raise RegistryFrozen(
                "search parameter sources cannot be registered after boot"
            )

        self._sources.append(source)
        logger.debug(
            f"Registered search parameter source {type(source).__name__} "
            f"({len(self._sources)} total)"
        )

    def freeze(self) -> None:
        self._frozen = True

    def for_type(self, resource_type: str) -> list[FHIRSearchParameter]:
        seen: set[str] = set()
        merged: list[FHIRSearchParameter] = []

        for source in self._sources:
            for param in source.for_type(resource_type):
                if param.code in seen:
                    continue

                seen.add(param.code)
                merged.append(param)

        return merged
