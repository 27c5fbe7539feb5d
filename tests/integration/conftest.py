"""Integration-test fixtures.

Require a PostgreSQL at settings.DATABASE_URL with migrations applied
(`alembic upgrade head`). All tests share one event loop so the module-level
async engine pool stays valid; without a database they are skipped.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.ob_common.database import engine
from src.ob_common.id_generator import generate_id
from src.ob_gateway.auth.jwt_handler import create_access_token
from src.main import app

_UPSERT_VARIANT_SQL = text("""
    INSERT INTO variants (id, product_id, org_id, sku, price, tax_rate)
    VALUES (:id, :product_id, :org_id, :sku, :price, :tax_rate)
    ON CONFLICT (id) DO NOTHING
""")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def org_id() -> str:
    """A fresh tenant with two seeded variants: v100 (100.00, 10%) and v50 (50.00, 5%)."""
    org = f"org-{generate_id()}"
    try:
        async with engine.begin() as conn:
            for vid, price, tax in (("v100", "100.00", "0.10"), ("v50", "50.00", "0.05")):
                await conn.execute(
                    _UPSERT_VARIANT_SQL,
                    {
                        "id": f"{org}-{vid}",
                        "product_id": f"{org}-p-{vid}",
                        "org_id": org,
                        "sku": vid.upper(),
                        "price": Decimal(price),
                        "tax_rate": Decimal(tax),
                    },
                )
    except Exception as exc:
        pytest.skip(f"PostgreSQL not available: {exc}")
    return org


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client(org_id: str) -> AsyncClient:  # type: ignore[override]
    """Session-scoped client authenticated as a user of org_id."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        ac.headers.update(
            {"Authorization": f"Bearer {create_access_token('user-it', org_id)}"}
        )
        yield ac
