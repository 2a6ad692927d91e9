from .builder import (
    AddOperation,
    DeleteOperation,
    PropertyProxy,
    ReplaceOperation,
    ResourceBuilder,
    SearchBuilder,
    SearchParam,
)
from .drivers import ArrayResourceDriver, FHIRHttpDriver, ResourceDriver, SearchDriver
from .flier import Flier
from .patch import FHIRPathPatchGenerator

__all__ = [
    "AddOperation",
    "ArrayResourceDriver",
    "DeleteOperation",
    "FHIRHttpDriver",
    "FHIRPathPatchGenerator",
    "Flier",
    "PropertyProxy",
    "ReplaceOperation",
    "ResourceBuilder",
    "ResourceDriver",
    "SearchBuilder",
    "SearchDriver",
    "SearchParam",
]
