import json

import pytest
from fastapi.testclient import TestClient

from citisignal_mesh.config import MeshConfigError
from server import app as app_module

from fixtures import RAW_CATEGORY_TREE


NAV_QUERY = "{ Citisignal_categoryNavigation { items { name } } }"


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, context, commerce):
    commerce.responses["categoryList"] = RAW_CATEGORY_TREE
    seen = {}

    def fake_create_context(headers, config):
        seen["headers"] = headers
        return context

    monkeypatch.setattr(app_module, "get_config", lambda: object())
    monkeypatch.setattr(app_module, "create_context", fake_create_context)
    test_client = TestClient(app_module.app)
    test_client.seen = seen
    return test_client


def test_health(client) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


class TestGraphqlEndpoint:
    def test_post(self, client) -> None:
        resp = client.post("/graphql", json={"query": NAV_QUERY}, headers={"X-Cart-Id": "cart-1"})

        assert resp.status_code == 200
        assert resp.json() == {"data": {"Citisignal_categoryNavigation": {"items": [{"name": "Watches"}, {"name": "Phones"}]}}}
        assert client.seen["headers"]["x-cart-id"] == "cart-1"

    def test_post_with_variables(self, client) -> None:
        body = {
            "query": "query Nav($max: Int) { Citisignal_categoryNavigation(maxItems: $max) { items { name } } }",
            "variables": {"max": 1},
            "operationName": "Nav",
        }

        resp = client.post("/graphql", json=body)

        assert resp.json()["data"]["Citisignal_categoryNavigation"]["items"] == [{"name": "Watches"}]

    def test_missing_query(self, client) -> None:
        assert client.post("/graphql", json={}).status_code == 400

    def test_get(self, client) -> None:
        resp = client.get(
            "/graphql",
            params={
                "query": "query Nav($max: Int) { Citisignal_categoryNavigation(maxItems: $max) { items { name } } }",
                "variables": json.dumps({"max": 1}),
            },
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["Citisignal_categoryNavigation"]["items"] == [{"name": "Watches"}]

    def test_get_with_bad_variables(self, client) -> None:
        resp = client.get("/graphql", params={"query": NAV_QUERY, "variables": "{oops"})

        assert resp.status_code == 400

    def test_get_rejects_mutations(self, client) -> None:
        resp = client.get("/graphql", params={"query": "mutation { Citisignal_clearCart { success } }"})

        assert resp.status_code == 405
        assert resp.headers["allow"] == "POST"

    def test_get_picks_named_operation(self, client) -> None:
        document = "query Nav { Citisignal_categoryNavigation { items { name } } } mutation Clear { Citisignal_clearCart { success } }"

        assert client.get("/graphql", params={"query": document, "operationName": "Clear"}).status_code == 405
        assert client.get("/graphql", params={"query": document, "operationName": "Nav"}).status_code == 200

    def test_upstream_cache_id_is_forwarded(self, client, context) -> None:
        context.response_headers["X-Magento-Cache-Id"] = "c-42"

        resp = client.post("/graphql", json={"query": NAV_QUERY})

        assert resp.headers["x-magento-cache-id"] == "c-42"

    def test_graphql_errors_are_returned(self, client) -> None:
        resp = client.post("/graphql", json={"query": "{ nope }"})

        assert resp.status_code == 200
        assert resp.json()["data"] is None
        assert "nope" in resp.json()["errors"][0]["message"]

    def test_missing_configuration(self, client, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken():
            raise MeshConfigError("Missing endpoint for CommerceGraphQL")

        monkeypatch.setattr(app_module, "get_config", broken)

        resp = client.post("/graphql", json={"query": NAV_QUERY})

        assert resp.status_code == 503


def test_cors_preflight(client) -> None:
    resp = client.options(
        "/graphql",
        headers={"Origin": "https://shop.example.com", "Access-Control-Request-Method": "POST"},
    )

    assert resp.status_code == 200
    assert "access-control-allow-origin" in resp.headers
