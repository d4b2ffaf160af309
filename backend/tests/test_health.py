from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from httpx import AsyncClient


async def test_health_reports_ok(async_client: AsyncClient) -> None:
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"
    assert body["email_provider"] in {"memory", "resend"}


async def test_missing_user_header_is_validation_error(async_client: AsyncClient) -> None:
    resp = await async_client.get("/approvals")
    assert resp.status_code == 422
    assert resp.json()["error"] == "ValidationError"
