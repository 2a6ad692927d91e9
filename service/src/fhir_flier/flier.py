import logging
from typing import Any, ClassVar

from .builder.resource import ResourceBuilder
from .builder.search import SearchBuilder
from .errors import InvalidResource
from .sources.base import SearchParameterSource
from .sources.composite import CompositeSearchParameterSource

logger = logging.getLogger(__name__)


class Flier:
    """Entry point of the fluent FHIR API.

    Build and edit resources::

        resource = (
            Flier.resource("Patient")
            .name([{"family": "Smith", "given": ["John"]}])
            .birthDate("1990-01-15")
            .to_dict()
        )

    Turn edits into a FHIRPath Patch::

        patch = (
            Flier.resource("Patient", existing)
            .birthDate().delete()
            .status().replace("active")
            .as_fhir_patch()
        )

    Build a search URL::

        url = Flier.search("Patient").family("Smith").as_url("https://hapi.fhir.org/baseR4")
    """

    _search_parameters: ClassVar[CompositeSearchParameterSource] = (
        CompositeSearchParameterSource()
    )

    @staticmethod
    def resource(resource_type: str, data: dict[str, Any] | None = None) -> ResourceBuilder:
        """Start a builder; *data* holds an existing resource when editing."""
        if not data:
            data = {"resourceType": resource_type}

        return ResourceBuilder(resource_type, data)

    @staticmethod
    def search(resource_type: str) -> SearchBuilder:
        return SearchBuilder(resource_type)

    @staticmethod
    def from_resource(data: dict[str, Any]) -> ResourceBuilder:
        """Start a builder from an existing resource, e.g. a server response."""
        resource_type = data.get("resourceType")
        if not resource_type:
            raise InvalidResource("Resource must contain 'resourceType'.")

        return ResourceBuilder(str(resource_type), data)

    @staticmethod
    def from_bundle(bundle: dict[str, Any]) -> list[ResourceBuilder]:
        """One builder per ``entry[].resource``; entries without one are skipped."""
        builders = [
            Flier.from_resource(entry["resource"])
            for entry in bundle.get("entry") or []
            if entry.get("resource")
        ]
        logger.debug(f"Parsed {len(builders)} resources from bundle")
        return builders

    @classmethod
    def register_search_parameter_source(cls, source: SearchParameterSource) -> None:
        """Add a source to the process-wide registry.

        Only allowed before :meth:`boot`.
        """
        cls._search_parameters.add(source)

    @classmethod
    def search_parameters(cls) -> CompositeSearchParameterSource:
        return cls._search_parameters

    @classmethod
    def boot(cls) -> None:
        """End the registration phase.

        The search parameter registry and the macros of both builders are
        read-only from here on.
        """
        cls._search_parameters.freeze()
        ResourceBuilder.freeze_macros()
        SearchBuilder.freeze_macros()
        logger.info("Flier booted, registries frozen")
