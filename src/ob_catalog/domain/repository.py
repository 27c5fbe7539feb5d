"""VariantRepository Protocol — the single batch lookup the order workflow needs."""

from collections.abc import Collection
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_catalog.domain.models import Variant


class VariantRepositoryProtocol(Protocol):
    async def get_by_ids(
        self, db: AsyncSession, org_id: str, variant_ids: Collection[str]
    ) -> list[Variant]: ...
