"""Invoice domain model — pure dataclasses.

An invoice is a frozen copy of a priced order: totals and lines are taken from
the order when the invoice is created and never recomputed, so later edits or
catalog price changes do not reach an existing invoice.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.ob_common.money import ZERO


@dataclass
class InvoiceItem:
    variant_id: str
    sku: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal  # unit_price * quantity
    discount: Decimal  # item discount + allocated share of the order discount
    tax_amount: Decimal
    line_total: Decimal
    notes: str = ""
    id: str | None = None


@dataclass
class Invoice:
    id: str
    invoice_number: str
    org_id: str
    order_id: str
    order_number: str
    customer_id: str
    status: str = "DRAFT"
    notes: str = ""
    due_date: datetime | None = None
    issued_at: datetime | None = None
    items: list[InvoiceItem] = field(default_factory=list)
    subtotal: Decimal = ZERO
    discount_total: Decimal = ZERO
    tax_total: Decimal = ZERO
    total: Decimal = ZERO
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_draft(self) -> bool:
        return self.status == "DRAFT"
