# src/ob_order/application/schemas.py
"""Pydantic schemas for ob_order requests and responses.

Money is Decimal end to end; JSON output renders it as a string ("215.00").
Derived amounts are response-only: no request schema accepts them.
"""
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from src.ob_common.enums import DeliveryStatus, OrderStatus
from src.ob_common.money import ZERO, money_display
from src.ob_order.domain.models import (
    Address,
    DeliveryInfo,
    DiscountSpec,
    ItemRequest,
    Order,
    OrderItem,
)

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DiscountIn(BaseModel):
    type: Literal["PERCENTAGE", "FIXED"]
    amount: Decimal = Field(ZERO, ge=0, max_digits=12, decimal_places=2)

    def to_domain(self) -> DiscountSpec:
        return DiscountSpec(kind=self.type, amount=self.amount)


class OrderItemIn(BaseModel):
    variant_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    discount: DiscountIn | None = None
    notes: str = Field("", max_length=1000)

    def to_domain(self) -> ItemRequest:
        return ItemRequest(
            variant_id=self.variant_id,
            quantity=self.quantity,
            discount=self.discount.to_domain() if self.discount else DiscountSpec(),
            notes=self.notes,
        )


class AddressIn(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = ""
    country: str = Field(..., min_length=1)
    zip: str = ""

    def to_domain(self) -> Address:
        return Address(**self.model_dump())


class DeliveryIn(BaseModel):
    address: AddressIn
    transport_fare: Decimal = Field(ZERO, ge=0, max_digits=12, decimal_places=2)
    date: datetime | None = None


class DeliveryUpdateIn(BaseModel):
    address: AddressIn | None = None
    transport_fare: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    date: datetime | None = None


class CreateOrderRequest(BaseModel):
    customer_id: str = Field(..., min_length=1)
    items: list[OrderItemIn]
    delivery: DeliveryIn
    notes: str = Field("", max_length=1000)
    discount: DiscountIn | None = None


class UpdateOrderRequest(BaseModel):
    """Partial update. A supplied `items` list replaces the whole item set.

    Omitted fields are left unchanged; `"discount": null` removes the order discount.
    """

    customer_id: str | None = Field(None, min_length=1)
    notes: str | None = Field(None, max_length=1000)
    discount: DiscountIn | None = None
    items: list[OrderItemIn] | None = None
    delivery: DeliveryUpdateIn | None = None
    expected_version: int | None = Field(None, ge=1)


class ChangeStatusRequest(BaseModel):
    status: OrderStatus
    expected_version: int | None = Field(None, ge=1)


class DeliveryStatusRequest(BaseModel):
    status: DeliveryStatus


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class DiscountOut(BaseModel):
    type: str | None
    amount: Decimal

    @classmethod
    def from_domain(cls, spec: DiscountSpec) -> "DiscountOut":
        return cls(type=spec.kind, amount=spec.amount)


class OrderItemResponse(BaseModel):
    id: str | None
    variant_id: str
    product_id: str
    sku: str
    quantity: int
    unit_price: Decimal
    tax_rate: Decimal
    discount: DiscountOut
    notes: str
    applied_discount: Decimal
    applied_order_discount: Decimal
    tax_amount: Decimal
    line_total: Decimal

    @classmethod
    def from_domain(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            id=item.id,
            variant_id=item.variant_id,
            product_id=item.product_id,
            sku=item.sku,
            quantity=item.quantity,
            unit_price=item.unit_price,
            tax_rate=item.tax_rate,
            discount=DiscountOut.from_domain(item.discount),
            notes=item.notes,
            applied_discount=item.applied_discount,
            applied_order_discount=item.applied_order_discount,
            tax_amount=item.tax_amount,
            line_total=item.line_total,
        )


class AddressOut(BaseModel):
    street: str
    city: str
    state: str
    country: str
    zip: str


class DeliveryOut(BaseModel):
    address: AddressOut
    transport_fare: Decimal
    status: str
    date: datetime | None
    delivered_at: datetime | None

    @classmethod
    def from_domain(cls, delivery: DeliveryInfo) -> "DeliveryOut":
        a = delivery.address
        return cls(
            address=AddressOut(
                street=a.street, city=a.city, state=a.state, country=a.country, zip=a.zip
            ),
            transport_fare=delivery.transport_fare,
            status=delivery.status,
            date=delivery.date,
            delivered_at=delivery.delivered_at,
        )


class OrderResponse(BaseModel):
    id: str
    order_number: str
    org_id: str
    customer_id: str
    status: str
    notes: str
    discount: DiscountOut
    delivery: DeliveryOut
    items: list[OrderItemResponse]
    subtotal: Decimal
    item_discount_total: Decimal
    applied_discount: Decimal
    discount_total: Decimal
    tax_total: Decimal
    total: Decimal
    total_display: str
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_number=order.order_number,
            org_id=order.org_id,
            customer_id=order.customer_id,
            status=order.status,
            notes=order.notes,
            discount=DiscountOut.from_domain(order.discount),
            delivery=DeliveryOut.from_domain(order.delivery),
            items=[OrderItemResponse.from_domain(i) for i in order.items],
            subtotal=order.subtotal,
            item_discount_total=order.item_discount_total,
            applied_discount=order.applied_discount,
            discount_total=order.discount_total,
            tax_total=order.tax_total,
            total=order.total,
            total_display=money_display(order.total),
            version=order.version,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    next_cursor: str | None
    has_more: bool
