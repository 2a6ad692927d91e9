import pytest

from fhir_flier.builder.resource import ResourceBuilder
from fhir_flier.builder.search import SearchBuilder
from fhir_flier.errors import InvalidResource, RegistryFrozen
from fhir_flier.flier import Flier
from fhir_flier.sources import FHIRSearchParameter, InMemorySearchParameterSource

FAMILY = FHIRSearchParameter(code="family", type="string", expression="Patient.name.family")


def test_resource_without_data_starts_with_resource_type():
    builder = Flier.resource("Patient")

    assert isinstance(builder, ResourceBuilder)
    assert builder.get_resource_type() == "Patient"
    assert builder.get_data() == {"resourceType": "Patient"}
    assert builder.to_dict() == {"resourceType": "Patient"}


def test_resource_with_data_keeps_it():
    data = {"resourceType": "Patient", "id": "p1"}

    builder = Flier.resource("Patient", data)

    assert builder.get_data() == data


def test_resource_does_not_share_base_data():
    data = {"resourceType": "Patient", "id": "p1"}

    Flier.resource("Patient", data).gender("male").to_dict()

    assert data == {"resourceType": "Patient", "id": "p1"}


def test_search():
    builder = Flier.search("Observation")

    assert isinstance(builder, SearchBuilder)
    assert builder.get_resource_type() == "Observation"


def test_from_resource():
    builder = Flier.from_resource({"resourceType": "Observation", "id": "o1", "status": "final"})

    assert builder.get_resource_type() == "Observation"
    assert builder.status().value() == "final"


@pytest.mark.parametrize("data", [{}, {"id": "x"}, {"resourceType": ""}])
def test_from_resource_requires_resource_type(data):
    with pytest.raises(InvalidResource):
        Flier.from_resource(data)


def test_invalid_resource_is_a_value_error():
    with pytest.raises(ValueError):
        Flier.from_resource({"id": "x"})


def test_from_bundle_skips_entries_without_resource():
    bundle = {
        "resourceType": "Bundle",
        "type": "searchset",
        "entry": [
            {"resource": {"resourceType": "Patient", "id": "p1"}},
            {"fullUrl": "urn:uuid:1"},
            {"resource": {"resourceType": "Observation", "id": "o1"}},
        ],
    }

    builders = Flier.from_bundle(bundle)

    assert [b.get_resource_type() for b in builders] == ["Patient", "Observation"]
    assert builders[0].id().value() == "p1"


def test_from_bundle_without_entries():
    assert Flier.from_bundle({"resourceType": "Bundle"}) == []


def test_from_bundle_propagates_invalid_resource():
    with pytest.raises(InvalidResource):
        Flier.from_bundle({"entry": [{"resource": {"id": "no-type"}}]})


def test_register_search_parameter_source():
    Flier.register_search_parameter_source(
        InMemorySearchParameterSource.only("Patient", [FAMILY])
    )

    assert Flier.search_parameters().for_type("Patient") == [FAMILY]


def test_boot_freezes_registries():
    Flier.boot()

    with pytest.raises(RegistryFrozen):
        Flier.register_search_parameter_source(InMemorySearchParameterSource())
    with pytest.raises(RegistryFrozen):
        ResourceBuilder.macro("x", lambda builder: builder)
    with pytest.raises(RegistryFrozen):
        SearchBuilder.macro("x", lambda builder: builder)


def test_macros_registered_before_boot_still_work():
    ResourceBuilder.macro("male", lambda builder: builder.gender("male"))

    Flier.boot()

    assert Flier.resource("Patient").male().to_dict() == {
        "resourceType": "Patient",
        "gender": "male",
    }


def test_boot_keeps_macros_from_being_flushed():
    ResourceBuilder.macro("male", lambda builder: builder.gender("male"))

    Flier.boot()

    with pytest.raises(RegistryFrozen):
        ResourceBuilder.flush_macros()
    assert ResourceBuilder.has_macro("male")
