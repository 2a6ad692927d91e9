import pytest

from fhir_flier.builder.resource import ResourceBuilder
from fhir_flier.builder.search import SearchBuilder
from fhir_flier.flier import Flier
from fhir_flier.sources.composite import CompositeSearchParameterSource


@pytest.fixture(autouse=True)
def clean_registries(monkeypatch):
    """Every test starts with no macros and an open search parameter registry."""
    ResourceBuilder._reset_macros()
    SearchBuilder._reset_macros()
    monkeypatch.setattr(Flier, "_search_parameters", CompositeSearchParameterSource())
    yield
    ResourceBuilder._reset_macros()
    SearchBuilder._reset_macros()
