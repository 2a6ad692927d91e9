"""Tests for the httpx based FHIR driver, using httpx.MockTransport."""

import json

import httpx
import pytest

from fhir_flier.builder.operations import AddOperation, ReplaceOperation
from fhir_flier.builder.search_param import SearchParam
from fhir_flier.config import FlierConfig
from fhir_flier.drivers.http import FHIRHttpDriver
from fhir_flier.errors import InitializationError, MissingResourceId
from fhir_flier.flier import Flier


class Recorder:
    """Mock transport handler remembering every request."""

    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_driver(recorder, base_url="https://example.com/fhir"):
    return FHIRHttpDriver(base_url, transport=httpx.MockTransport(recorder))


def test_create_posts_applied_resource():
    recorder = Recorder(201, {"resourceType": "Patient", "id": "new-1", "gender": "male"})

    result = make_driver(recorder).create(
        "Patient", {"resourceType": "Patient"}, [AddOperation(property="gender", value="male")]
    )

    assert recorder.last.method == "POST"
    assert str(recorder.last.url) == "https://example.com/fhir/Patient"
    assert json.loads(recorder.last.content) == {"resourceType": "Patient", "gender": "male"}
    assert result["id"] == "new-1"


def test_update_patches_with_fhir_path_patch():
    recorder = Recorder(200, {"resourceType": "Patient", "id": "p1", "gender": "female"})

    result = make_driver(recorder).update(
        "Patient", {"id": "p1"}, [ReplaceOperation(property="gender", value="female")]
    )

    assert recorder.last.method == "PATCH"
    assert str(recorder.last.url) == "https://example.com/fhir/Patient/p1"
    assert json.loads(recorder.last.content) == {
        "resourceType": "Parameters",
        "parameter": [
            {
                "name": "operation",
                "part": [
                    {"name": "type", "valueCode": "replace"},
                    {"name": "path", "valueString": "Patient.gender"},
                    {"name": "value", "valueString": "female"},
                ],
            }
        ],
    }
    assert result["gender"] == "female"


def test_update_requires_id():
    recorder = Recorder()

    with pytest.raises(MissingResourceId):
        make_driver(recorder).update("Patient", {}, [])

    assert recorder.requests == []


def test_put_sends_full_payload():
    recorder = Recorder(200, {"resourceType": "Patient", "id": "p1"})

    result = make_driver(recorder).put("Patient", {"resourceType": "Patient", "id": "p1"}, [])

    assert recorder.last.method == "PUT"
    assert str(recorder.last.url) == "https://example.com/fhir/Patient/p1"
    assert json.loads(recorder.last.content) == {"resourceType": "Patient", "id": "p1"}
    assert result["id"] == "p1"


def test_put_takes_id_from_applied_resource():
    recorder = Recorder(200, {"id": "p9"})

    make_driver(recorder).put("Patient", {}, [AddOperation(property="id", value="p9")])

    assert str(recorder.last.url) == "https://example.com/fhir/Patient/p9"


def test_put_requires_id():
    with pytest.raises(MissingResourceId):
        make_driver(Recorder()).put("Patient", {"resourceType": "Patient"}, [])


def test_delete_returns_empty_dict():
    recorder = Recorder(204)

    result = make_driver(recorder).delete("Patient", {"id": "p1"})

    assert recorder.last.method == "DELETE"
    assert str(recorder.last.url) == "https://example.com/fhir/Patient/p1"
    assert result == {}


def test_delete_requires_id():
    with pytest.raises(MissingResourceId):
        make_driver(Recorder()).delete("Patient", {})


def test_search_sends_query_params_in_order():
    recorder = Recorder(200, {"resourceType": "Bundle", "total": 1, "entry": []})

    result = make_driver(recorder).search(
        "Patient",
        [
            SearchParam(code="family", raw_value="Smith"),
            SearchParam(code="gender", type="token", raw_value="male"),
            SearchParam(code="name", raw_value="Doe", modifier="exact"),
        ],
    )

    assert recorder.last.method == "GET"
    assert recorder.last.url.path == "/fhir/Patient"
    assert list(recorder.last.url.params.multi_items()) == [
        ("family", "Smith"),
        ("gender", "male"),
        ("name:exact", "Doe"),
    ]
    assert result["resourceType"] == "Bundle"


def test_requests_send_fhir_headers():
    recorder = Recorder(200, {"resourceType": "Patient", "id": "x"})

    make_driver(recorder).put("Patient", {"id": "x", "resourceType": "Patient"}, [])

    assert recorder.last.headers["Accept"] == "application/fhir+json"
    assert recorder.last.headers["Content-Type"] == "application/fhir+json"


def test_trailing_slash_in_base_url():
    recorder = Recorder(200, {})

    make_driver(recorder, "https://example.com/fhir/").delete("Patient", {"id": "p1"})

    assert str(recorder.last.url) == "https://example.com/fhir/Patient/p1"


def test_http_errors_propagate_unchanged():
    recorder = Recorder(404, {"resourceType": "OperationOutcome"})

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        make_driver(recorder).update("Patient", {"id": "missing"}, [])

    assert exc_info.value.response.status_code == 404


def test_builder_update_through_driver():
    recorder = Recorder(200, {"resourceType": "Patient", "id": "p1", "active": False})

    result = (
        Flier.resource("Patient", {"resourceType": "Patient", "id": "p1", "active": True})
        .active().replace(False)
        .use_driver(make_driver(recorder))
        .update()
    )

    body = json.loads(recorder.last.content)
    assert body["parameter"][0]["part"][-1] == {"name": "value", "valueBoolean": False}
    assert result == {"resourceType": "Patient", "id": "p1", "active": False}


def test_from_config():
    config = FlierConfig(base_url="https://example.com/fhir", timeout=5, media_type="application/json")

    driver = FHIRHttpDriver.from_config(config)

    assert driver.base_url == "https://example.com/fhir"
    assert driver.timeout == 5
    assert driver.media_type == "application/json"


def test_from_config_requires_base_url():
    with pytest.raises(InitializationError):
        FHIRHttpDriver.from_config(FlierConfig())
