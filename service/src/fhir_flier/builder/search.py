import logging
from functools import partial
from typing import Any
from urllib.parse import quote, quote_plus

from ..drivers.base import SearchDriver
from .macros import Macroable, resolve_property_name
from .search_param import SearchParam

logger = logging.getLogger(__name__)


class SearchBuilder(Macroable):
    """Fluent builder for FHIR searches.

    Every attribute that is not a method of the builder is a search parameter
    code, called with a value and an optional modifier::

        url = (
            Flier.search("Patient")
            .family("Smith")
            .birthdate("ge1990-01-01")
            .identifier("12345", "of-type")
            .search()
        )  # "Patient?family=Smith&birthdate=ge1990-01-01&identifier:of-type=12345"

    Without a driver :meth:`search` returns the query URL; with one it
    returns whatever the driver returns. A code clashing with a builder
    method takes a trailing underscore (``search_("x")`` adds ``search``).
    """

    def __init__(self, resource_type: str):
        self._resource_type = resource_type
        self._params: list[SearchParam] = []
        self._driver: SearchDriver | None = None

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        return partial(self.call, name)

    def call(self, name: str, *args: Any) -> Any:
        """Dispatch a parameter-style call: ``call(code, value, modifier=None)``."""
        if self.has_macro(name):
            return self.call_macro(name, args)

        if len(args) > 2:
            raise TypeError(
                f"search parameter '{name}' takes a value and a modifier ({len(args)} given)"
            )

        code = resolve_property_name(name)
        value = args[0] if args else None
        modifier = args[1] if len(args) > 1 else None

        self._params.append(
            SearchParam(
                code=code,
                raw_value=_to_query_value(value),
                modifier=str(modifier) if modifier is not None else None,
            )
        )
        return self

    def use_driver(self, driver: SearchDriver | type[SearchDriver]) -> "SearchBuilder":
        self._driver = driver() if isinstance(driver, type) else driver
        return self

    def search(self) -> Any:
        """Run the search with the accumulated parameters."""
        if self._driver is not None:
            logger.debug(
                f"Delegating search on {self._resource_type} to {type(self._driver).__name__}"
            )
            return self._driver.search(self._resource_type, self.get_params())

        return self.as_url()

    def as_url(self, base_url: str | None = None) -> str:
        """The FHIR query, e.g. ``Patient?family=Smith&birthdate=ge1990``.

        Parameters keep their accumulation order; repeated codes are kept.
        """
        query = "&".join(
            f"{quote(p.key, safe=':')}={quote_plus(p.raw_value)}" for p in self._params
        )
        path = f"{self._resource_type}?{query}"

        if base_url is not None:
            return f"{base_url.rstrip('/')}/{path}"
        return path

    def get_params(self) -> list[SearchParam]:
        return list(self._params)

    def get_resource_type(self) -> str:
        return self._resource_type

    def __repr__(self) -> str:
        return f"SearchBuilder({self._resource_type!r}, {len(self._params)} params)"


def _to_query_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
