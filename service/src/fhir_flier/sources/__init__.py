from .base import SearchParameterSource
from .composite import CompositeSearchParameterSource
from .in_memory import InMemorySearchParameterSource
from .parameter import FHIRSearchParameter

__all__ = [
    "CompositeSearchParameterSource",
    "FHIRSearchParameter",
    "InMemorySearchParameterSource",
    "SearchParameterSource",
]
