"""InvoiceRepository Protocol."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_invoice.domain.models import Invoice


class InvoiceRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, invoice: Invoice) -> None: ...

    async def mark_issued(self, db: AsyncSession, invoice: Invoice) -> None:
        """Write status/issued_at only if the stored row is still DRAFT.
        Raises InvoiceNotDraftError otherwise."""
        ...

    async def get_by_id(
        self, db: AsyncSession, org_id: str, invoice_id: str
    ) -> Invoice | None: ...

    async def list_by_org(
        self,
        db: AsyncSession,
        org_id: str,
        status: str | None,
        order_id: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Invoice]: ...
