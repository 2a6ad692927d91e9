"""Named extensions ("macros") attachable to the fluent builders.

Each builder class keeps its own registry, shared by all of its instances.
Macros are registered during start-up; :meth:`Macroable.freeze_macros` closes
the registry for the rest of the process lifetime.
"""

import logging
from typing import Any, Callable, ClassVar

from ..errors import RegistryFrozen

logger = logging.getLogger(__name__)


class Macroable:
    _macros: ClassVar[dict[str, Callable[..., Any]]]
    _macros_frozen: ClassVar[bool]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._macros = {}
        cls._macros_frozen = False

    @classmethod
    def macro(cls, name: str, fn: Callable[..., Any]) -> None:
        """Register *fn* under *name*; it is called as ``fn(builder, *args)``."""
        if cls._macros_frozen:
            raise RegistryFrozen(f"macros of {cls.__name__} cannot change after boot")

        cls._macros[name] = fn
        logger.debug(f"Registered macro '{name}' on {cls.__name__}")

    @classmethod
    def has_macro(cls, name: str) -> bool:
        return name in cls._macros

    @classmethod
    def flush_macros(cls) -> None:
        """Drop every macro; not allowed once the registry is frozen."""
        if cls._macros_frozen:
            raise RegistryFrozen(f"macros of {cls.__name__} cannot change after boot")

        cls._macros = {}

    @classmethod
    def _reset_macros(cls) -> None:
        # Test-only: empty and reopen the registry
        cls._macros = {}
        cls._macros_frozen = False

    @classmethod
    def freeze_macros(cls) -> None:
        cls._macros_frozen = True

    def call_macro(self, name: str, args: tuple) -> Any:
        return self._macros[name](self, *args)


PROPERTY_SUFFIX = "_"


def resolve_property_name(name: str) -> str:
    """Strip the collision suffix: ``delete_`` addresses the property ``delete``."""
    if len(name) > 1 and name.endswith(PROPERTY_SUFFIX):
        return name[: -len(PROPERTY_SUFFIX)]
    return name
