# src/ob_order/infrastructure/persistence.py
"""OrderRepository — raw SQL persistence implementation.

Orders live in `orders`, their lines in `order_items` keyed by (order_id, position).
Updates are optimistic: the row is only written if its version still matches the
one the caller loaded, and the item set is replaced wholesale.
"""
from collections import defaultdict
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_common.errors import StaleOrderError
from src.ob_common.id_generator import generate_id
from src.ob_common.money import ZERO
from src.ob_order.domain.models import (
    Address,
    DeliveryInfo,
    DiscountSpec,
    Order,
    OrderItem,
)

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, order_number, org_id, customer_id, status, notes,
        discount_type, discount_amount,
        delivery_street, delivery_city, delivery_state, delivery_country, delivery_zip,
        delivery_transport_fare, delivery_status, delivery_date, delivered_at,
        subtotal, item_discount_total, applied_discount, discount_total,
        tax_total, total, version)
    VALUES (:id, :order_number, :org_id, :customer_id, :status, :notes,
        :discount_type, :discount_amount,
        :delivery_street, :delivery_city, :delivery_state, :delivery_country, :delivery_zip,
        :delivery_transport_fare, :delivery_status, :delivery_date, :delivered_at,
        :subtotal, :item_discount_total, :applied_discount, :discount_total,
        :tax_total, :total, :version)
""")

_UPDATE_ORDER_SQL = text("""
    UPDATE orders
    SET customer_id = :customer_id, status = :status, notes = :notes,
        discount_type = :discount_type, discount_amount = :discount_amount,
        delivery_street = :delivery_street, delivery_city = :delivery_city,
        delivery_state = :delivery_state, delivery_country = :delivery_country,
        delivery_zip = :delivery_zip, delivery_transport_fare = :delivery_transport_fare,
        delivery_status = :delivery_status, delivery_date = :delivery_date,
        delivered_at = :delivered_at,
        subtotal = :subtotal, item_discount_total = :item_discount_total,
        applied_discount = :applied_discount, discount_total = :discount_total,
        tax_total = :tax_total, total = :total,
        version = version + 1, updated_at = NOW()
    WHERE id = :id AND org_id = :org_id AND version = :version
    RETURNING version, updated_at
""")

_INSERT_ITEM_SQL = text("""
    INSERT INTO order_items (id, order_id, position, variant_id, product_id, sku,
        quantity, unit_price, tax_rate, discount_type, discount_amount, notes,
        applied_discount, applied_order_discount, tax_amount, line_total)
    VALUES (:id, :order_id, :position, :variant_id, :product_id, :sku,
        :quantity, :unit_price, :tax_rate, :discount_type, :discount_amount, :notes,
        :applied_discount, :applied_order_discount, :tax_amount, :line_total)
""")

_DELETE_ITEMS_SQL = text("DELETE FROM order_items WHERE order_id = :order_id")

_DELETE_ORDER_SQL = text("""
    DELETE FROM orders WHERE id = :id AND org_id = :org_id
    RETURNING id
""")

_SELECT_COLUMNS = """
    id, order_number, org_id, customer_id, status, notes,
    discount_type, discount_amount,
    delivery_street, delivery_city, delivery_state, delivery_country, delivery_zip,
    delivery_transport_fare, delivery_status, delivery_date, delivered_at,
    subtotal, item_discount_total, applied_discount, discount_total,
    tax_total, total, version, created_at, updated_at
"""

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE id = :id AND org_id = :org_id
""")

_LIST_ORDERS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders
    WHERE org_id = :org_id
      AND (CAST(:status AS TEXT) IS NULL OR status = :status)
      AND (CAST(:customer_id AS TEXT) IS NULL OR customer_id = :customer_id)
      AND (CAST(:cursor_id AS TEXT) IS NULL OR id < :cursor_id)
    ORDER BY id DESC
    LIMIT :limit
""")

_GET_ITEMS_SQL = text("""
    SELECT id, order_id, position, variant_id, product_id, sku, quantity,
        unit_price, tax_rate, discount_type, discount_amount, notes,
        applied_discount, applied_order_discount, tax_amount, line_total
    FROM order_items
    WHERE order_id = ANY(:order_ids)
    ORDER BY order_id, position
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _discount(kind: str | None, amount: Decimal | None) -> DiscountSpec:
    return DiscountSpec(kind=kind, amount=amount if amount is not None else ZERO)


def _row_to_item(row: Any) -> OrderItem:
    return OrderItem(
        id=row.id,
        variant_id=row.variant_id,
        product_id=row.product_id,
        sku=row.sku or "",
        quantity=row.quantity,
        unit_price=row.unit_price,
        tax_rate=row.tax_rate,
        discount=_discount(row.discount_type, row.discount_amount),
        notes=row.notes or "",
        applied_discount=row.applied_discount,
        applied_order_discount=row.applied_order_discount,
        tax_amount=row.tax_amount,
        line_total=row.line_total,
    )


def _row_to_order(row: Any, items: list[OrderItem]) -> Order:
    """Convert a DB result row (plus its already-mapped items) to an Order."""
    return Order(
        id=row.id,
        order_number=row.order_number,
        org_id=row.org_id,
        customer_id=row.customer_id,
        status=row.status,
        notes=row.notes or "",
        discount=_discount(row.discount_type, row.discount_amount),
        delivery=DeliveryInfo(
            address=Address(
                street=row.delivery_street or "",
                city=row.delivery_city or "",
                state=row.delivery_state or "",
                country=row.delivery_country or "",
                zip=row.delivery_zip or "",
            ),
            transport_fare=row.delivery_transport_fare,
            status=row.delivery_status,
            date=row.delivery_date,
            delivered_at=row.delivered_at,
        ),
        items=items,
        version=row.version,
        subtotal=row.subtotal,
        item_discount_total=row.item_discount_total,
        applied_discount=row.applied_discount,
        discount_total=row.discount_total,
        tax_total=row.tax_total,
        total=row.total,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _order_params(order: Order) -> dict[str, Any]:
    delivery = order.delivery
    return {
        "id": order.id,
        "order_number": order.order_number,
        "org_id": order.org_id,
        "customer_id": order.customer_id,
        "status": order.status,
        "notes": order.notes,
        "discount_type": order.discount.kind,
        "discount_amount": order.discount.amount,
        "delivery_street": delivery.address.street,
        "delivery_city": delivery.address.city,
        "delivery_state": delivery.address.state,
        "delivery_country": delivery.address.country,
        "delivery_zip": delivery.address.zip,
        "delivery_transport_fare": delivery.transport_fare,
        "delivery_status": delivery.status,
        "delivery_date": delivery.date,
        "delivered_at": delivery.delivered_at,
        "subtotal": order.subtotal,
        "item_discount_total": order.item_discount_total,
        "applied_discount": order.applied_discount,
        "discount_total": order.discount_total,
        "tax_total": order.tax_total,
        "total": order.total,
        "version": order.version,
    }


def _item_params(order_id: str, position: int, item: OrderItem) -> dict[str, Any]:
    if item.id is None:
        item.id = generate_id()
    return {
        "id": item.id,
        "order_id": order_id,
        "position": position,
        "variant_id": item.variant_id,
        "product_id": item.product_id,
        "sku": item.sku,
        "quantity": item.quantity,
        "unit_price": item.unit_price,
        "tax_rate": item.tax_rate,
        "discount_type": item.discount.kind,
        "discount_amount": item.discount.amount,
        "notes": item.notes,
        "applied_discount": item.applied_discount,
        "applied_order_discount": item.applied_order_discount,
        "tax_amount": item.tax_amount,
        "line_total": item.line_total,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def save(self, db: AsyncSession, order: Order) -> None:
        await db.execute(_INSERT_ORDER_SQL, _order_params(order))
        await self._insert_items(db, order)

    async def update(self, db: AsyncSession, order: Order) -> None:
        result = await db.execute(_UPDATE_ORDER_SQL, _order_params(order))
        row = result.fetchone()
        if row is None:
            raise StaleOrderError(order.id, order.version)
        order.version = row.version
        order.updated_at = row.updated_at

        # Full replacement: previous lines are dropped, never merged
        await db.execute(_DELETE_ITEMS_SQL, {"order_id": order.id})
        await self._insert_items(db, order)

    async def get_by_id(
        self, db: AsyncSession, org_id: str, order_id: str
    ) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id, "org_id": org_id})
        row = result.fetchone()
        if row is None:
            return None
        items = await self._load_items(db, [row.id])
        return _row_to_order(row, items.get(row.id, []))

    async def list_by_org(
        self,
        db: AsyncSession,
        org_id: str,
        status: str | None,
        customer_id: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Order]:
        result = await db.execute(
            _LIST_ORDERS_SQL,
            {
                "org_id": org_id,
                "status": status,
                "customer_id": customer_id,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        rows = result.fetchall()
        if not rows:
            return []
        items = await self._load_items(db, [row.id for row in rows])
        return [_row_to_order(row, items.get(row.id, [])) for row in rows]

    async def delete(self, db: AsyncSession, org_id: str, order_id: str) -> bool:
        # order_items rows go with it (ON DELETE CASCADE)
        result = await db.execute(_DELETE_ORDER_SQL, {"id": order_id, "org_id": org_id})
        return result.fetchone() is not None

    async def _insert_items(self, db: AsyncSession, order: Order) -> None:
        if not order.items:
            return
        params = [
            _item_params(order.id, position, item)
            for position, item in enumerate(order.items)
        ]
        await db.execute(_INSERT_ITEM_SQL, params)

    async def _load_items(
        self, db: AsyncSession, order_ids: list[str]
    ) -> dict[str, list[OrderItem]]:
        result = await db.execute(_GET_ITEMS_SQL, {"order_ids": order_ids})
        grouped: dict[str, list[OrderItem]] = defaultdict(list)
        for row in result.fetchall():
            grouped[row.order_id].append(_row_to_item(row))
        return grouped
