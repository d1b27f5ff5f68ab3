"""
Product API — Access Log Tests
===============================

What we test:
    ✅ Every request ends in one "productapi.access" record
    ✅ Gate rejections are tagged "rejected", not "fail"
    ✅ Classified 4xx carry the outcome "fail" and the error class name
    ✅ Defects are logged at ERROR with the outcome "error"
    ✅ The submitted API key never reaches the log
"""

import logging
from unittest.mock import patch

import pytest

ACCESS_LOGGER = "productapi.access"


def access_records(caplog):
    return [record for record in caplog.records if record.name == ACCESS_LOGGER]


class TestAccessLogOutcome:

    @pytest.mark.asyncio
    async def test_successful_request_is_ok(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            await test_client.get("/api/products/1")

        [record] = access_records(caplog)
        assert record.levelno == logging.INFO
        assert record.status == 200
        assert record.outcome == "ok"
        assert record.error_type is None
        assert record.route == "GET /api/products/1"

    @pytest.mark.asyncio
    async def test_missing_key_is_rejected(self, anon_client, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            await anon_client.get("/api/products")

        [record] = access_records(caplog)
        assert record.levelno == logging.WARNING
        assert record.status == 401
        assert record.outcome == "rejected"
        assert record.error_type is None

    @pytest.mark.asyncio
    async def test_wrong_key_is_not_logged(self, anon_client, caplog):
        with caplog.at_level(logging.INFO):
            await anon_client.get("/", headers={"x-api-key": "near-miss-secret"})

        assert access_records(caplog)[0].outcome == "rejected"
        assert "near-miss-secret" not in caplog.text

    @pytest.mark.asyncio
    async def test_unknown_product_is_fail_with_error_type(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            await test_client.get("/api/products/999")

        [record] = access_records(caplog)
        assert record.status == 404
        assert record.outcome == "fail"
        assert record.error_type == "NotFoundError"
        assert "NotFoundError" in record.getMessage()

    @pytest.mark.asyncio
    async def test_invalid_payload_is_fail_with_error_type(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            await test_client.post("/api/products", json={"name": "Mouse"})

        [record] = access_records(caplog)
        assert record.status == 400
        assert record.outcome == "fail"
        assert record.error_type == "ValidationError"

    @pytest.mark.asyncio
    async def test_unknown_route_is_fail(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            await test_client.get("/api/unknown")

        [record] = access_records(caplog)
        assert record.outcome == "fail"
        assert record.error_type == "HTTPException"

    @pytest.mark.asyncio
    async def test_defect_is_error(self, test_client, store, caplog):
        with patch.object(store, "stats", side_effect=RuntimeError("boom")):
            with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
                await test_client.get("/api/products/stats")

        [record] = access_records(caplog)
        assert record.levelno == logging.ERROR
        assert record.status == 500
        assert record.outcome == "error"
        assert record.error_type == "RuntimeError"
