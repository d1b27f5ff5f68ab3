"""
Product API — Endpoint Tests
=============================

What:  End-to-end tests of every route through the full middleware stack.
How:   HTTPX AsyncClient over ASGITransport (no server process); each test
       gets a fresh app and store from conftest.py.

What we test:
    ✅ GET /, list with filters and pagination, stats, get by id
    ✅ POST / PUT / DELETE success codes and bodies
    ✅ 404 and 400 responses use the {status, message} envelope
    ✅ /stats is not mistaken for a product id
    ✅ Request ID header is present on responses
"""

import json

import pytest

from productapi.routes.root import WELCOME_MESSAGE


class TestRoot:

    @pytest.mark.asyncio
    async def test_welcome_text(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.text == WELCOME_MESSAGE
        assert response.headers["content-type"].startswith("text/plain")


class TestListProducts:

    @pytest.mark.asyncio
    async def test_default_page_returns_all_three(self, test_client):
        response = await test_client.get("/api/products", params={"page": 1, "limit": 10})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]) == 3
        assert body["total"] == 3
        assert body["page"] == 1
        assert body["limit"] == 10

    @pytest.mark.asyncio
    async def test_page_past_end_is_empty_with_total(self, test_client):
        response = await test_client.get("/api/products", params={"page": 2, "limit": 10})
        body = response.json()
        assert response.status_code == 200
        assert body["data"] == []
        assert body["total"] == 3

    @pytest.mark.asyncio
    async def test_category_filter(self, test_client):
        response = await test_client.get("/api/products", params={"category": "electronics"})
        data = response.json()["data"]
        assert {p["category"] for p in data} == {"electronics"}
        assert len(data) == 2

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, test_client):
        response = await test_client.get("/api/products", params={"search": "lap"})
        assert [p["name"] for p in response.json()["data"]] == ["Laptop"]

    @pytest.mark.asyncio
    async def test_products_use_camel_case_in_stock(self, test_client):
        response = await test_client.get("/api/products")
        product = response.json()["data"][0]
        assert set(product) == {"id", "name", "description", "price", "category", "inStock"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [
        {"page": "abc"},
        {"page": "0"},
        {"limit": "-1"},
        {"limit": "1000"},
    ])
    async def test_invalid_pagination_is_400(self, test_client, params):
        response = await test_client.get("/api/products", params=params)
        assert response.status_code == 400
        assert response.json()["status"] == "fail"


class TestGetProduct:

    @pytest.mark.asyncio
    async def test_existing_product(self, test_client):
        response = await test_client.get("/api/products/1")
        assert response.status_code == 200
        assert response.json() == {
            "id": "1",
            "name": "Laptop",
            "description": "High-performance laptop with 16GB RAM",
            "price": 1200,
            "category": "electronics",
            "inStock": True,
        }

    @pytest.mark.asyncio
    async def test_missing_product_is_404(self, test_client):
        response = await test_client.get("/api/products/999")
        assert response.status_code == 404
        assert response.json() == {
            "status": "fail",
            "message": "Product with ID 999 not found",
        }

    @pytest.mark.asyncio
    async def test_repeated_gets_are_identical(self, test_client):
        first = await test_client.get("/api/products/2")
        second = await test_client.get("/api/products/2")
        assert first.json() == second.json()


class TestStats:

    @pytest.mark.asyncio
    async def test_stats_route_is_not_an_id_lookup(self, test_client):
        response = await test_client.get("/api/products/stats")
        assert response.status_code == 200
        assert response.json() == {
            "total": 3,
            "categories": {"electronics": 2, "kitchen": 1},
            "inStock": 2,
            "totalValue": 2050,
        }

    @pytest.mark.asyncio
    async def test_stats_follow_writes(self, test_client, sample_payload):
        await test_client.post("/api/products", json=sample_payload)
        await test_client.delete("/api/products/3")
        body = (await test_client.get("/api/products/stats")).json()
        assert body["total"] == 3
        assert body["categories"] == {"electronics": 3}
        assert body["totalValue"] == 2020


class TestCreateProduct:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_id(self, test_client, sample_payload):
        response = await test_client.post("/api/products", json=sample_payload)
        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert body["price"] == 20
        assert body["name"] == "Mouse"
        assert body["inStock"] is True

    @pytest.mark.asyncio
    async def test_round_trip(self, test_client, sample_payload):
        created = (await test_client.post("/api/products", json=sample_payload)).json()
        fetched = await test_client.get(f"/api/products/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == created
        assert fetched.json() == {**sample_payload, "id": created["id"]}

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, test_client, sample_payload):
        ids = set()
        for _ in range(5):
            ids.add((await test_client.post("/api/products", json=sample_payload)).json()["id"])
        assert len(ids) == 5

    @pytest.mark.asyncio
    async def test_created_product_is_listed_last(self, test_client, sample_payload):
        created = (await test_client.post("/api/products", json=sample_payload)).json()
        data = (await test_client.get("/api/products")).json()["data"]
        assert data[-1]["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_string_in_stock_is_400(self, test_client, sample_payload):
        response = await test_client.post(
            "/api/products", json={**sample_payload, "inStock": "true"}
        )
        assert response.status_code == 400
        assert response.json()["status"] == "fail"

    @pytest.mark.asyncio
    async def test_missing_field_is_400(self, test_client, sample_payload):
        payload = dict(sample_payload)
        del payload["category"]
        response = await test_client.post("/api/products", json=payload)
        assert response.status_code == 400
        assert response.json() == {
            "status": "fail",
            "message": "Missing required field: category",
        }

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/api/products",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Request body must be valid JSON"

    @pytest.mark.asyncio
    async def test_empty_body_is_400(self, test_client):
        response = await test_client.post("/api/products")
        assert response.status_code == 400
        assert response.json()["status"] == "fail"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("digits", [400, 5000])
    async def test_oversized_price_literal_is_400(self, test_client, digits):
        body = (
            b'{"name": "Mouse", "description": "Wireless", "category": "electronics", '
            b'"inStock": true, "price": ' + b"9" * digits + b"}"
        )
        response = await test_client.post(
            "/api/products",
            content=body,
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["status"] == "fail"

    @pytest.mark.asyncio
    async def test_non_json_content_type_is_not_parsed(self, test_client, sample_payload, store):
        response = await test_client.post(
            "/api/products",
            content=json.dumps(sample_payload).encode(),
            headers={"content-type": "text/plain"},
        )
        assert response.status_code == 400
        assert response.json() == {
            "status": "fail",
            "message": "Missing required field: name",
        }
        assert len(store) == 3

    @pytest.mark.asyncio
    async def test_json_content_type_with_charset(self, test_client, sample_payload):
        response = await test_client.post(
            "/api/products",
            content=json.dumps(sample_payload).encode(),
            headers={"content-type": "application/json; charset=utf-8"},
        )
        assert response.status_code == 201


class TestUpdateProduct:

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, test_client, sample_payload):
        response = await test_client.put("/api/products/2", json=sample_payload)
        assert response.status_code == 200
        assert response.json() == {**sample_payload, "id": "2"}

        listed = (await test_client.get("/api/products")).json()["data"]
        assert [p["id"] for p in listed] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_update_missing_product_is_404(self, test_client, sample_payload):
        response = await test_client.put("/api/products/999", json=sample_payload)
        assert response.status_code == 404
        assert response.json()["status"] == "fail"

    @pytest.mark.asyncio
    async def test_update_invalid_body_is_400(self, test_client, sample_payload):
        response = await test_client.put(
            "/api/products/1", json={**sample_payload, "price": "cheap"}
        )
        assert response.status_code == 400
        assert (await test_client.get("/api/products/1")).json()["name"] == "Laptop"


class TestDeleteProduct:

    @pytest.mark.asyncio
    async def test_delete_returns_204_without_body(self, test_client):
        response = await test_client.delete("/api/products/1")
        assert response.status_code == 204
        assert response.content == b""
        assert (await test_client.get("/api/products/1")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_product_is_404_fail(self, test_client):
        response = await test_client.delete("/api/products/does-not-exist")
        assert response.status_code == 404
        assert response.json()["status"] == "fail"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_request_id(self, test_client):
        response = await test_client.get("/")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"
