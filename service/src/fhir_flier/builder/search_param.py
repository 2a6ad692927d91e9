from typing import Iterable, Mapping
from urllib.parse import parse_qsl

from pydantic import BaseModel, ConfigDict

from ..sources.parameter import FHIRSearchParameter

COMPARISON_PREFIXES = ("eq", "ne", "gt", "lt", "ge", "le", "sa", "eb", "ap")

# Parameter types whose values may carry a comparison prefix
_PREFIXED_TYPES = {"number", "date", "quantity"}


class SearchParam(BaseModel):
    """A FHIR search parameter, built fluently or parsed from a query string."""

    model_config = ConfigDict(frozen=True)

    code: str
    type: str = "string"  # string | token | date | reference | number | quantity | uri
    raw_value: str
    modifier: str | None = None
    prefix: str | None = None  # eq | ne | gt | lt | ge | le | sa | eb | ap
    token_system: str | None = None
    token_code: str | None = None

    @property
    def key(self) -> str:
        """Query-string key, ``code`` or ``code:modifier``."""
        if self.modifier is not None:
            return f"{self.code}:{self.modifier}"
        return self.code


def parse_search_query(
    query: str | Mapping[str, str] | Iterable[tuple[str, str]],
    definitions: Iterable[FHIRSearchParameter] = (),
) -> list[SearchParam]:
    """Parse an HTTP query string into :class:`SearchParam` objects.

    Keys of the form ``code:modifier`` are split. When *definitions* are
    given, the parameter type is taken from the definition with the same
    code (``string`` otherwise); comparison prefixes are split off for
    number, date and quantity parameters and ``system|code`` is split for
    token parameters. The order of the query is preserved.
    """
    if isinstance(query, str):
        pairs = parse_qsl(query.lstrip("?"), keep_blank_values=True)
    elif isinstance(query, Mapping):
        pairs = list(query.items())
    else:
        pairs = list(query)

    types = {d.code: d.type for d in definitions}
    params: list[SearchParam] = []

    for key, value in pairs:
        code, _, modifier = key.partition(":")
        param_type = types.get(code, "string")
        value = str(value)

        prefix = None
        token_system = None
        token_code = None

        if param_type in _PREFIXED_TYPES and len(value) > 2:
            if value[:2] in COMPARISON_PREFIXES:
                prefix = value[:2]

        if param_type == "token":
            if "|" in value:
                token_system, token_code = value.split("|", 1)
                token_code = token_code or None
            else:
                token_code = value

        params.append(
            SearchParam(
                code=code,
                type=param_type,
                raw_value=value,
                modifier=modifier or None,
                prefix=prefix,
                token_system=token_system,
                token_code=token_code,
            )
        )

    return params
