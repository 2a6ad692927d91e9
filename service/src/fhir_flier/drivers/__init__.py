from .base import ResourceDriver, SearchDriver
from .array import ArrayResourceDriver
from .http import FHIR_JSON, FHIRHttpDriver

__all__ = [
    "ArrayResourceDriver",
    "FHIR_JSON",
    "FHIRHttpDriver",
    "ResourceDriver",
    "SearchDriver",
]
