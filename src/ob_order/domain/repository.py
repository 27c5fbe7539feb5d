# src/ob_order/domain/repository.py
"""OrderRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, order: Order) -> None: ...

    async def update(self, db: AsyncSession, order: Order) -> None:
        """Persist order and replace its items. Raises StaleOrderError if
        order.version no longer matches the stored row; bumps order.version."""
        ...

    async def get_by_id(
        self, db: AsyncSession, org_id: str, order_id: str
    ) -> Order | None: ...

    async def list_by_org(
        self,
        db: AsyncSession,
        org_id: str,
        status: str | None,
        customer_id: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Order]: ...

    async def delete(self, db: AsyncSession, org_id: str, order_id: str) -> bool: ...
