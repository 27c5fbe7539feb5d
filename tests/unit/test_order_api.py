# tests/unit/test_order_api.py
"""HTTP-level tests for the order router with mocked repositories and session."""
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.ob_catalog.domain.models import Variant
from src.ob_common.database import get_db_session
from src.ob_gateway.auth.dependencies import Principal, get_current_principal
from src.ob_gateway.auth.jwt_handler import create_access_token
from src.ob_order.application.service import OrderApplicationService
from src.ob_order.domain.models import Order
from src.main import app

_VARIANTS = {
    "v100": Variant("v100", "p-1", "org-1", "SKU-100", Decimal("100.00"), Decimal("0.10")),
    "v50": Variant("v50", "p-2", "org-1", "SKU-50", Decimal("50.00"), Decimal("0.05")),
}

_BODY = {
    "customer_id": "cust-1",
    "items": [{"variant_id": "v100", "quantity": 1}, {"variant_id": "v50", "quantity": 2}],
    "delivery": {"address": {"street": "1 Main St", "city": "Springfield", "country": "US"}},
}


@pytest.fixture
def repo(monkeypatch) -> AsyncMock:
    """Route the module-level service to mocked repositories."""
    order_repo = AsyncMock()
    variant_repo = AsyncMock()
    variant_repo.get_by_ids.side_effect = lambda db, org_id, ids: [
        _VARIANTS[i] for i in ids if i in _VARIANTS
    ]
    monkeypatch.setattr(
        "src.ob_order.api.router._service",
        OrderApplicationService(repo=order_repo, variant_repo=variant_repo),
    )
    return order_repo


@pytest.fixture
def db() -> AsyncMock:
    session = AsyncMock()

    async def _override():
        yield session

    app.dependency_overrides[get_db_session] = _override
    return session


@pytest.fixture
def as_org1():
    app.dependency_overrides[get_current_principal] = lambda: Principal("user-1", "org-1")


class TestCreateOrder:
    async def test_created_with_totals(self, client, repo, db, as_org1) -> None:
        resp = await client.post("/api/v1/orders", json=_BODY)

        assert resp.status_code == 201
        body = resp.json()
        assert body["code"] == 0
        assert body["request_id"] == resp.headers["X-Request-ID"]
        data = body["data"]
        assert data["status"] == "PENDING"
        assert data["org_id"] == "org-1"
        assert data["subtotal"] == "200.00"
        assert data["tax_total"] == "15.00"
        assert data["total"] == "215.00"
        assert [i["line_total"] for i in data["items"]] == ["110.00", "105.00"]
        repo.save.assert_awaited_once()
        db.commit.assert_awaited_once()

    async def test_unknown_variant_404(self, client, repo, db, as_org1) -> None:
        body = dict(_BODY, items=[{"variant_id": "ghost", "quantity": 1}])

        resp = await client.post("/api/v1/orders", json=body)

        assert resp.status_code == 404
        assert resp.json()["code"] == 3001
        repo.save.assert_not_awaited()

    async def test_empty_items_422(self, client, repo, db, as_org1) -> None:
        resp = await client.post("/api/v1/orders", json=dict(_BODY, items=[]))

        assert resp.status_code == 422
        assert resp.json()["code"] == 4007

    async def test_unknown_discount_type_rejected(self, client, repo, db, as_org1) -> None:
        body = dict(_BODY, discount={"type": "BOGO", "amount": "5"})

        resp = await client.post("/api/v1/orders", json=body)

        assert resp.status_code == 422
        repo.save.assert_not_awaited()

    async def test_client_totals_ignored(self, client, repo, db, as_org1) -> None:
        body = dict(_BODY, total="1.00", subtotal="1.00")

        resp = await client.post("/api/v1/orders", json=body)

        assert resp.status_code == 201
        assert resp.json()["data"]["total"] == "215.00"


class TestUpdateOrder:
    async def test_not_pending_409(self, client, repo, db, as_org1) -> None:
        repo.get_by_id.return_value = Order(
            id="order-1", order_number="ORD-1", org_id="org-1", customer_id="c", status="APPROVED"
        )

        resp = await client.patch(
            "/api/v1/orders/order-1", json={"items": [{"variant_id": "v50", "quantity": 1}]}
        )

        assert resp.status_code == 409
        assert resp.json()["code"] == 4008
        repo.update.assert_not_awaited()

    async def test_order_not_found_404(self, client, repo, db, as_org1) -> None:
        repo.get_by_id.return_value = None

        resp = await client.patch("/api/v1/orders/nope", json={"notes": "x"})

        assert resp.status_code == 404
        assert resp.json()["code"] == 4004


class TestStatusEndpoints:
    async def test_invalid_transition_422(self, client, repo, db, as_org1) -> None:
        repo.get_by_id.return_value = Order(
            id="order-1", order_number="ORD-1", org_id="org-1", customer_id="c", status="CANCELLED"
        )

        resp = await client.post("/api/v1/orders/order-1/status", json={"status": "APPROVED"})

        assert resp.status_code == 422
        assert resp.json()["code"] == 4009

    async def test_delivery_status(self, client, repo, db, as_org1) -> None:
        repo.get_by_id.return_value = Order(
            id="order-1", order_number="ORD-1", org_id="org-1", customer_id="c"
        )

        resp = await client.post(
            "/api/v1/orders/order-1/delivery-status", json={"status": "SHIPPED"}
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["delivery"]["status"] == "SHIPPED"


class TestListAndDelete:
    async def test_list_scoped_to_principal_org(self, client, repo, db, as_org1) -> None:
        repo.list_by_org.return_value = []

        resp = await client.get("/api/v1/orders", params={"status": "PENDING", "limit": 5})

        assert resp.status_code == 200
        assert resp.json()["data"] == {"items": [], "next_cursor": None, "has_more": False}
        args = repo.list_by_org.await_args.args
        assert args[1:] == ("org-1", "PENDING", None, None, 6)

    async def test_delete(self, client, repo, db, as_org1) -> None:
        repo.delete.return_value = True

        resp = await client.delete("/api/v1/orders/order-1")

        assert resp.status_code == 200
        assert resp.json()["data"] == {"order_id": "order-1"}


class TestAuth:
    async def test_missing_token_401(self, client, repo, db) -> None:
        resp = await client.get("/api/v1/orders")
        assert resp.status_code == 401

    async def test_bad_token_401(self, client, repo, db) -> None:
        resp = await client.get(
            "/api/v1/orders", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert resp.status_code == 401

    async def test_real_token_carries_tenant(self, client, repo, db) -> None:
        repo.list_by_org.return_value = []
        token = create_access_token("user-9", "org-9")

        resp = await client.get("/api/v1/orders", headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 200
        assert repo.list_by_org.await_args.args[1] == "org-9"


async def test_health(client) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
