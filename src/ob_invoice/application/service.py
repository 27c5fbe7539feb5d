"""InvoiceApplicationService — invoice a priced order, issue it, read it back."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_common.datetime_utils import as_utc, utc_now
from src.ob_common.errors import InvoiceNotFoundError, OrderNotFoundError
from src.ob_common.id_generator import generate_id, generate_invoice_number
from src.ob_invoice.application.schemas import (
    CreateInvoiceRequest,
    InvoiceListResponse,
    InvoiceResponse,
)
from src.ob_invoice.domain import snapshot
from src.ob_invoice.domain.models import Invoice
from src.ob_invoice.domain.repository import InvoiceRepositoryProtocol
from src.ob_invoice.infrastructure.persistence import InvoiceRepository
from src.ob_order.domain.repository import OrderRepositoryProtocol
from src.ob_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)


class InvoiceApplicationService:
    def __init__(
        self,
        repo: InvoiceRepositoryProtocol | None = None,
        order_repo: OrderRepositoryProtocol | None = None,
    ) -> None:
        self._repo: InvoiceRepositoryProtocol = repo or InvoiceRepository()
        self._order_repo: OrderRepositoryProtocol = order_repo or OrderRepository()

    async def create_invoice(
        self, db: AsyncSession, org_id: str, req: CreateInvoiceRequest
    ) -> InvoiceResponse:
        order = await self._order_repo.get_by_id(db, org_id, req.order_id)
        if order is None:
            raise OrderNotFoundError(req.order_id)

        invoice = snapshot.invoice_from_order(
            order,
            invoice_id=generate_id(),
            invoice_number=generate_invoice_number(),
            notes=req.notes,
            due_date=as_utc(req.due_date),
        )
        try:
            await self._repo.save(db, invoice)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Invoice created: id=%s, number=%s, order=%s, total=%s",
            invoice.id, invoice.invoice_number, order.id, invoice.total,
        )
        return InvoiceResponse.from_domain(invoice)

    async def issue_invoice(
        self, db: AsyncSession, org_id: str, invoice_id: str
    ) -> InvoiceResponse:
        invoice = await self._load(db, org_id, invoice_id)
        snapshot.issue(invoice, utc_now())
        try:
            await self._repo.mark_issued(db, invoice)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Invoice issued: id=%s, number=%s", invoice.id, invoice.invoice_number)
        return InvoiceResponse.from_domain(invoice)

    async def get_invoice(
        self, db: AsyncSession, org_id: str, invoice_id: str
    ) -> InvoiceResponse:
        return InvoiceResponse.from_domain(await self._load(db, org_id, invoice_id))

    async def list_invoices(
        self,
        db: AsyncSession,
        org_id: str,
        status: str | None,
        order_id: str | None,
        cursor: str | None,
        limit: int,
    ) -> InvoiceListResponse:
        invoices = await self._repo.list_by_org(
            db, org_id, status, order_id, cursor, limit + 1
        )
        has_more = len(invoices) > limit
        page = invoices[:limit]
        return InvoiceListResponse(
            items=[InvoiceResponse.from_domain(i) for i in page],
            next_cursor=page[-1].id if has_more and page else None,
            has_more=has_more,
        )

    async def _load(self, db: AsyncSession, org_id: str, invoice_id: str) -> Invoice:
        invoice = await self._repo.get_by_id(db, org_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice
