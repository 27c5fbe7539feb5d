"""Order domain model — pure dataclasses, no SQLAlchemy dependency.

Derived monetary fields (applied_discount, tax_amount, subtotal, total, ...)
are owned by ob_order.domain.totals and are never taken from the client.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.ob_common.money import ZERO


@dataclass(frozen=True)
class DiscountSpec:
    kind: str | None = None  # PERCENTAGE / FIXED / None = no discount
    amount: Decimal = ZERO


@dataclass
class ItemRequest:
    """Client-submitted line: which variant, how many, and an optional item discount."""

    variant_id: str
    quantity: int
    discount: DiscountSpec = field(default_factory=DiscountSpec)
    notes: str = ""


@dataclass
class OrderItem:
    variant_id: str
    product_id: str
    quantity: int
    # Snapshot from the variant at resolution time
    unit_price: Decimal
    tax_rate: Decimal
    discount: DiscountSpec = field(default_factory=DiscountSpec)
    notes: str = ""
    sku: str = ""
    id: str | None = None
    # Derived
    applied_discount: Decimal = ZERO
    applied_order_discount: Decimal = ZERO
    tax_amount: Decimal = ZERO
    line_total: Decimal = ZERO

    @property
    def subtotal(self) -> Decimal:
        """Unrounded unit_price * quantity."""
        return self.unit_price * self.quantity


@dataclass
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip: str = ""


@dataclass
class DeliveryInfo:
    address: Address = field(default_factory=Address)
    transport_fare: Decimal = ZERO  # informational, not part of order totals
    status: str = "PENDING"  # PENDING / SHIPPED / DELIVERED / CANCELLED
    date: datetime | None = None  # scheduled
    delivered_at: datetime | None = None


@dataclass
class Order:
    id: str
    order_number: str
    org_id: str
    customer_id: str
    status: str = "PENDING"
    delivery: DeliveryInfo = field(default_factory=DeliveryInfo)
    notes: str = ""
    discount: DiscountSpec = field(default_factory=DiscountSpec)
    # Sequence order is significant: the last item absorbs the allocation remainder
    items: list[OrderItem] = field(default_factory=list)
    version: int = 1
    # Derived
    subtotal: Decimal = ZERO
    item_discount_total: Decimal = ZERO
    applied_discount: Decimal = ZERO
    discount_total: Decimal = ZERO
    tax_total: Decimal = ZERO
    total: Decimal = ZERO
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_mutable(self) -> bool:
        return self.status == "PENDING"

    @property
    def is_terminal(self) -> bool:
        return self.status in ("DELIVERED", "CANCELLED")

    def replace_items(self, items: list[OrderItem]) -> None:
        """Swap the whole item set. Previous items are dropped, never merged."""
        self.items = list(items)
