"""Hand-off between :meth:`ResourceBuilder.index` and a search indexer.

The indexer itself (what gets extracted, where it is stored) lives outside
this package; only the record it receives and its contract are defined here.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict


class IndexedResource(BaseModel):
    model_config = ConfigDict(frozen=True)

    resource_id: str
    resource_type: str
    resource_data: dict[str, Any]


class SearchIndexer(ABC):
    @abstractmethod
    def index(self, resource: IndexedResource) -> None:
        pass
