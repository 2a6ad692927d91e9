"""FHIR REST driver based on httpx.

Usage::

    driver = FHIRHttpDriver("https://hapi.fhir.org/baseR4")

    # POST, the operations applied locally first
    Flier.resource("Patient").gender("male").use_driver(driver).create()

    # PATCH with a FHIRPath Patch body
    Flier.resource("Patient", data).birthDate().delete().use_driver(driver).update()
"""

import json
import logging
from typing import Any, Sequence

import httpx

from ..builder.operations import Operation
from ..builder.search_param import SearchParam
from ..config import FlierConfig
from ..errors import InitializationError, MissingResourceId
from ..patch import FHIRPathPatchGenerator
from .array import ArrayResourceDriver
from .base import ResourceDriver, SearchDriver

logger = logging.getLogger(__name__)

FHIR_JSON = "application/fhir+json"


class FHIRHttpDriver(ResourceDriver, SearchDriver):
    """Talks to a FHIR server over its RESTful API.

    All requests send ``Accept`` and ``Content-Type`` set to the FHIR JSON
    media type. Non-2xx responses raise :class:`httpx.HTTPStatusError`,
    connection problems raise the corresponding httpx error; neither is
    caught here.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        media_type: str = FHIR_JSON,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.media_type = media_type
        self._transport = transport

    @staticmethod
    def from_config(
        config: FlierConfig, transport: httpx.BaseTransport | None = None
    ) -> "FHIRHttpDriver":
        if not config.base_url:
            raise InitializationError("config has no base_url for the FHIR server")

        return FHIRHttpDriver(
            config.base_url,
            timeout=config.timeout,
            media_type=config.media_type,
            transport=transport,
        )

    def create(
        self, resource_type: str, data: dict[str, Any], operations: Sequence[Operation]
    ) -> Any:
        payload = ArrayResourceDriver().create(resource_type, data, operations)

        return self._request("POST", f"/{resource_type}", body=payload)

    def update(
        self, resource_type: str, data: dict[str, Any], operations: Sequence[Operation]
    ) -> Any:
        resource_id = data.get("id")
        if resource_id is None:
            raise MissingResourceId("Resource must contain 'id' for PATCH.")

        patch = FHIRPathPatchGenerator().generate(resource_type, operations).to_dict()

        return self._request("PATCH", f"/{resource_type}/{resource_id}", body=patch)

    def put(
        self, resource_type: str, data: dict[str, Any], operations: Sequence[Operation]
    ) -> Any:
        payload = ArrayResourceDriver().put(resource_type, data, operations)
        resource_id = payload.get("id")
        if resource_id is None:
            raise MissingResourceId("Resource must contain 'id' for PUT.")

        return self._request("PUT", f"/{resource_type}/{resource_id}", body=payload)

    def delete(self, resource_type: str, data: dict[str, Any]) -> dict[str, Any]:
        resource_id = data.get("id")
        if resource_id is None:
            raise MissingResourceId("Resource must contain 'id' for DELETE.")

        self._request("DELETE", f"/{resource_type}/{resource_id}")

        return {}

    def search(self, resource_type: str, params: Sequence[SearchParam]) -> Any:
        query = [(p.key, p.raw_value) for p in params]

        return self._request("GET", f"/{resource_type}", params=query)

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            headers={"Accept": self.media_type, "Content-Type": self.media_type},
            timeout=self.timeout,
            transport=self._transport,
        )

    def _request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: list[tuple[str, str]] | None = None,
    ) -> Any:
        content = None
        if body is not None:
            content = json.dumps(body, ensure_ascii=False).encode("utf-8")

        logger.info(f"{method} {self.base_url}{path}")

        with self._client() as client:
            response = client.request(method, path, content=content, params=params)
            response.raise_for_status()

            if not response.content:
                return {}
            return response.json()
