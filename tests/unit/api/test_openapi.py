"""
OpenAPI Generation Tests

The generated spec is what scripts/export_openapi.py writes to docs/.
"""

import re

import yaml
from fastapi.testclient import TestClient


class TestOpenAPIEndpoint:
    """GET /openapi.json"""

    def test_openapi_json_endpoint_exists(self, client: TestClient) -> None:
        response = client.get("/openapi.json")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")

    def test_openapi_info_section(self, client: TestClient) -> None:
        info = client.get("/openapi.json").json()["info"]

        assert info["title"] == "Chat Sessions API"
        assert re.match(r"^\d+\.\d+\.\d+$", info["version"])

    def test_openapi_includes_all_endpoints(self, client: TestClient) -> None:
        paths = client.get("/openapi.json").json()["paths"]

        assert set(paths["/api/sessions"]) == {"get", "post"}
        assert set(paths["/api/sessions/{session_id}"]) == {"get", "put", "delete"}
        assert "/health" in paths
        assert "/health/ready" in paths

    def test_list_query_parameters_documented(self, client: TestClient) -> None:
        params = client.get("/openapi.json").json()["paths"]["/api/sessions"]["get"]["parameters"]

        assert {p["name"] for p in params} == {"userId", "limit", "skip"}

    def test_session_schemas_defined(self, client: TestClient) -> None:
        schemas = client.get("/openapi.json").json()["components"]["schemas"]

        for name in ("SessionCreateRequest", "SessionUpdateRequest", "SessionResponse", "ErrorResponse"):
            assert name in schemas


class TestOpenAPIValidation:
    def test_openapi_spec_is_valid(self, client: TestClient) -> None:
        from openapi_spec_validator import validate

        validate(client.get("/openapi.json").json())

    def test_openapi_can_be_exported_as_yaml(self, client: TestClient) -> None:
        spec = client.get("/openapi.json").json()

        assert yaml.safe_load(yaml.dump(spec, sort_keys=False)) == spec
