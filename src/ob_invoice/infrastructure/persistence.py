# src/ob_invoice/infrastructure/persistence.py
"""InvoiceRepository — raw SQL persistence for invoices and their lines.

Invoice lines are written once, at creation. The only later write is the
DRAFT → ISSUED status change, guarded in SQL so two concurrent issues cannot
both succeed.
"""
from collections import defaultdict
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_common.errors import InvoiceNotDraftError
from src.ob_common.id_generator import generate_id
from src.ob_invoice.domain.models import Invoice, InvoiceItem

_INSERT_INVOICE_SQL = text("""
    INSERT INTO invoices (id, invoice_number, org_id, order_id, order_number, customer_id,
        status, notes, due_date, issued_at,
        subtotal, discount_total, tax_total, total)
    VALUES (:id, :invoice_number, :org_id, :order_id, :order_number, :customer_id,
        :status, :notes, :due_date, :issued_at,
        :subtotal, :discount_total, :tax_total, :total)
    RETURNING created_at, updated_at
""")

_INSERT_ITEM_SQL = text("""
    INSERT INTO invoice_items (id, invoice_id, position, variant_id, sku, quantity,
        unit_price, subtotal, discount, tax_amount, line_total, notes)
    VALUES (:id, :invoice_id, :position, :variant_id, :sku, :quantity,
        :unit_price, :subtotal, :discount, :tax_amount, :line_total, :notes)
""")

_MARK_ISSUED_SQL = text("""
    UPDATE invoices
    SET status = 'ISSUED', issued_at = :issued_at
    WHERE id = :id AND org_id = :org_id AND status = 'DRAFT'
    RETURNING updated_at
""")

_SELECT_COLUMNS = """
    id, invoice_number, org_id, order_id, order_number, customer_id,
    status, notes, due_date, issued_at,
    subtotal, discount_total, tax_total, total, created_at, updated_at
"""

_GET_INVOICE_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM invoices WHERE id = :id AND org_id = :org_id
""")

_LIST_INVOICES_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM invoices
    WHERE org_id = :org_id
      AND (CAST(:status AS TEXT) IS NULL OR status = :status)
      AND (CAST(:order_id AS TEXT) IS NULL OR order_id = :order_id)
      AND (CAST(:cursor_id AS TEXT) IS NULL OR id < :cursor_id)
    ORDER BY id DESC
    LIMIT :limit
""")

_GET_ITEMS_SQL = text("""
    SELECT id, invoice_id, variant_id, sku, quantity, unit_price, subtotal,
        discount, tax_amount, line_total, notes
    FROM invoice_items
    WHERE invoice_id = ANY(:invoice_ids)
    ORDER BY invoice_id, position
""")


def _row_to_item(row: Any) -> InvoiceItem:
    return InvoiceItem(
        id=row.id,
        variant_id=row.variant_id,
        sku=row.sku or "",
        quantity=row.quantity,
        unit_price=row.unit_price,
        subtotal=row.subtotal,
        discount=row.discount,
        tax_amount=row.tax_amount,
        line_total=row.line_total,
        notes=row.notes or "",
    )


def _row_to_invoice(row: Any, items: list[InvoiceItem]) -> Invoice:
    return Invoice(
        id=row.id,
        invoice_number=row.invoice_number,
        org_id=row.org_id,
        order_id=row.order_id,
        order_number=row.order_number,
        customer_id=row.customer_id,
        status=row.status,
        notes=row.notes or "",
        due_date=row.due_date,
        issued_at=row.issued_at,
        items=items,
        subtotal=row.subtotal,
        discount_total=row.discount_total,
        tax_total=row.tax_total,
        total=row.total,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class InvoiceRepository:
    """Concrete implementation of InvoiceRepositoryProtocol using raw SQL."""

    async def save(self, db: AsyncSession, invoice: Invoice) -> None:
        result = await db.execute(
            _INSERT_INVOICE_SQL,
            {
                "id": invoice.id,
                "invoice_number": invoice.invoice_number,
                "org_id": invoice.org_id,
                "order_id": invoice.order_id,
                "order_number": invoice.order_number,
                "customer_id": invoice.customer_id,
                "status": invoice.status,
                "notes": invoice.notes,
                "due_date": invoice.due_date,
                "issued_at": invoice.issued_at,
                "subtotal": invoice.subtotal,
                "discount_total": invoice.discount_total,
                "tax_total": invoice.tax_total,
                "total": invoice.total,
            },
        )
        row = result.fetchone()
        invoice.created_at = row.created_at
        invoice.updated_at = row.updated_at

        if not invoice.items:
            return
        params = []
        for position, item in enumerate(invoice.items):
            if item.id is None:
                item.id = generate_id()
            params.append(
                {
                    "id": item.id,
                    "invoice_id": invoice.id,
                    "position": position,
                    "variant_id": item.variant_id,
                    "sku": item.sku,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "subtotal": item.subtotal,
                    "discount": item.discount,
                    "tax_amount": item.tax_amount,
                    "line_total": item.line_total,
                    "notes": item.notes,
                }
            )
        await db.execute(_INSERT_ITEM_SQL, params)

    async def mark_issued(self, db: AsyncSession, invoice: Invoice) -> None:
        result = await db.execute(
            _MARK_ISSUED_SQL,
            {"id": invoice.id, "org_id": invoice.org_id, "issued_at": invoice.issued_at},
        )
        row = result.fetchone()
        if row is None:
            raise InvoiceNotDraftError(invoice.id, "ISSUED")
        invoice.updated_at = row.updated_at

    async def get_by_id(
        self, db: AsyncSession, org_id: str, invoice_id: str
    ) -> Invoice | None:
        result = await db.execute(
            _GET_INVOICE_BY_ID_SQL, {"id": invoice_id, "org_id": org_id}
        )
        row = result.fetchone()
        if row is None:
            return None
        items = await self._load_items(db, [row.id])
        return _row_to_invoice(row, items.get(row.id, []))

    async def list_by_org(
        self,
        db: AsyncSession,
        org_id: str,
        status: str | None,
        order_id: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Invoice]:
        result = await db.execute(
            _LIST_INVOICES_SQL,
            {
                "org_id": org_id,
                "status": status,
                "order_id": order_id,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        rows = result.fetchall()
        if not rows:
            return []
        items = await self._load_items(db, [row.id for row in rows])
        return [_row_to_invoice(row, items.get(row.id, [])) for row in rows]

    async def _load_items(
        self, db: AsyncSession, invoice_ids: list[str]
    ) -> dict[str, list[InvoiceItem]]:
        result = await db.execute(_GET_ITEMS_SQL, {"invoice_ids": invoice_ids})
        grouped: dict[str, list[InvoiceItem]] = defaultdict(list)
        for row in result.fetchall():
            grouped[row.invoice_id].append(_row_to_item(row))
        return grouped
