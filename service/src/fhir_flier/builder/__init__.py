from .operations import (
    AddOperation,
    DeleteOperation,
    Operation,
    OperationType,
    ReplaceOperation,
    load_operations,
)
from .search_param import SearchParam, parse_search_query
from .proxy import PropertyProxy
from .resource import ResourceBuilder
from .search import SearchBuilder

__all__ = [
    "AddOperation",
    "DeleteOperation",
    "Operation",
    "OperationType",
    "PropertyProxy",
    "ReplaceOperation",
    "ResourceBuilder",
    "SearchBuilder",
    "SearchParam",
    "load_operations",
    "parse_search_query",
]
