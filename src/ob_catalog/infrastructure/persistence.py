"""VariantRepository — raw SQL read access to the variants table."""

from collections.abc import Collection
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_catalog.domain.models import Variant

# Tenant-scoped: a variant of another org is indistinguishable from a missing one.
_GET_VARIANTS_BY_IDS_SQL = text("""
    SELECT id, product_id, org_id, sku, price, tax_rate
    FROM variants
    WHERE org_id = :org_id AND id = ANY(:ids)
""")


def _row_to_variant(row: Any) -> Variant:
    return Variant(
        id=row.id,
        product_id=row.product_id,
        org_id=row.org_id,
        sku=row.sku,
        price=row.price,
        tax_rate=row.tax_rate,
    )


class VariantRepository:
    """Concrete implementation of VariantRepositoryProtocol using raw SQL."""

    async def get_by_ids(
        self, db: AsyncSession, org_id: str, variant_ids: Collection[str]
    ) -> list[Variant]:
        if not variant_ids:
            return []
        result = await db.execute(
            _GET_VARIANTS_BY_IDS_SQL,
            {"org_id": org_id, "ids": list(variant_ids)},
        )
        return [_row_to_variant(row) for row in result.fetchall()]
