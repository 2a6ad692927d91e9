import logging
from functools import partial
from typing import Any

from ..drivers.array import ArrayResourceDriver
from ..drivers.base import ResourceDriver
from ..errors import IndexerNotConfigured
from ..indexing import IndexedResource, SearchIndexer
from ..patch import FHIRPathPatchGenerator
from .macros import Macroable, resolve_property_name
from .operations import AddOperation, Operation
from .proxy import PropertyProxy

logger = logging.getLogger(__name__)


class ResourceBuilder(Macroable):
    """Fluent builder for FHIR resources.

    Any attribute that is not a method of the builder is treated as a FHIR
    property:

    - called without arguments it returns a :class:`PropertyProxy`
      (``.delete()``, ``.replace()``, ``.value()``)
    - called with one argument it records an :class:`AddOperation` and
      returns the builder

    Nothing is changed in place; the operations are kept in a log and only
    applied by :meth:`to_dict`, turned into a patch by :meth:`as_fhir_patch`
    or handed to a driver by the terminal calls (create, update, put, delete).
    Without a driver the terminal calls work in memory.

    A FHIR property whose name clashes with a builder method is addressed with
    a trailing underscore: ``builder.delete_("x")`` sets the property
    ``delete``. Properties starting with an underscore (primitive extensions
    such as ``_birthDate``) are reached through :meth:`call`.

    Usage::

        patient = (
            Flier.resource("Patient")
            .name([{"family": "Smith"}])
            .birthDate("1990-01-15")
            .gender("male")
            .create()  # applied dict without a driver
        )

        (
            Flier.resource("Patient", data)
            .birthDate().delete()
            .status().replace("inactive")
            .use_driver(FHIRHttpDriver(base_url))
            .update()  # FHIRPath Patch over HTTP
        )
    """

    def __init__(self, resource_type: str, data: dict[str, Any] | None = None):
        self._resource_type = resource_type
        self._data: dict[str, Any] = dict(data or {})
        self._operations: list[Operation] = []
        self._driver: ResourceDriver | None = None
        self._indexer: SearchIndexer | None = None

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        return partial(self.call, name)

    def call(self, name: str, *args: Any) -> Any:
        """Dispatch a property-style call by name."""
        # Macros take priority over FHIR properties
        if self.has_macro(name):
            return self.call_macro(name, args)

        prop = resolve_property_name(name)

        if not args:
            return PropertyProxy(prop, self._data.get(prop), self)

        if len(args) > 1:
            raise TypeError(
                f"property '{prop}' takes at most one value ({len(args)} given)"
            )

        self._operations.append(AddOperation(property=prop, value=args[0]))
        return self

    def use_driver(
        self, driver: ResourceDriver | type[ResourceDriver]
    ) -> "ResourceBuilder":
        """Set the driver used by create, update, put and delete.

        A driver class is instantiated without arguments.
        """
        self._driver = driver() if isinstance(driver, type) else driver
        return self

    def use_indexer(self, indexer: SearchIndexer) -> "ResourceBuilder":
        self._indexer = indexer
        return self

    def create(self) -> Any:
        """Create the resource (POST semantics)."""
        if self._driver is not None:
            logger.debug(
                f"Delegating create of {self._resource_type} to {type(self._driver).__name__}"
            )
            return self._driver.create(
                self._resource_type, self.get_data(), self.get_operations()
            )

        return self.to_dict()

    def update(self) -> Any:
        """Update the resource with the recorded operations (PATCH semantics).

        Whether this becomes a FHIRPath Patch is up to the driver.
        """
        if self._driver is not None:
            logger.debug(
                f"Delegating update of {self._resource_type} to {type(self._driver).__name__}"
            )
            return self._driver.update(
                self._resource_type, self.get_data(), self.get_operations()
            )

        return self.to_dict()

    def put(self) -> Any:
        """Replace the whole resource (PUT semantics)."""
        if self._driver is not None:
            logger.debug(
                f"Delegating put of {self._resource_type} to {type(self._driver).__name__}"
            )
            return self._driver.put(
                self._resource_type, self.get_data(), self.get_operations()
            )

        return self.to_dict()

    def delete(self) -> Any:
        """Delete the resource.

        Without a driver an empty dict is returned and the operation log is
        ignored. To remove a single property use ``builder.prop().delete()``.
        """
        if self._driver is not None:
            logger.debug(
                f"Delegating delete of {self._resource_type} to {type(self._driver).__name__}"
            )
            return self._driver.delete(self._resource_type, self.get_data())

        return {}

    def index(self, indexer: SearchIndexer | None = None) -> "ResourceBuilder":
        """Hand the materialized resource to a search indexer.

        Resources without an ``id`` are not indexed.
        """
        if indexer is None:
            indexer = self._indexer
        if indexer is None:
            raise IndexerNotConfigured(
                f"no search indexer configured for {self._resource_type}"
            )

        data = self.to_dict()
        resource_id = data.get("id")

        if resource_id is None:
            logger.debug(f"Skipping index of {self._resource_type} without id")
            return self

        indexer.index(
            IndexedResource(
                resource_id=str(resource_id),
                resource_type=self._resource_type,
                resource_data=data,
            )
        )
        return self

    def to_dict(self) -> dict[str, Any]:
        """Apply the operations to the base data; the log is kept."""
        return ArrayResourceDriver().apply(self._data, self._operations)

    def as_fhir_patch(self) -> dict[str, Any]:
        """The operation log as a FHIRPath Patch ``Parameters`` resource."""
        return (
            FHIRPathPatchGenerator()
            .generate(self._resource_type, self._operations)
            .to_dict()
        )

    def add_operation(self, op: Operation) -> "ResourceBuilder":
        self._operations.append(op)
        return self

    def get_operations(self) -> list[Operation]:
        return list(self._operations)

    def get_resource_type(self) -> str:
        return self._resource_type

    def get_data(self) -> dict[str, Any]:
        return dict(self._data)

    def __repr__(self) -> str:
        return (
            f"ResourceBuilder({self._resource_type!r}, "
            f"{len(self._operations)} pending operations)"
        )
