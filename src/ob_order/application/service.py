"""OrderApplicationService — order create/update workflow around the pricing core.

Flow for every item-bearing write:
    lifecycle guard → one batch variant lookup → resolve → compute totals → persist

Writes to one order are serialized in-process by a per-order lock (KeyedLocks) and
across processes by the orders.version column; a stale write raises
StaleOrderError instead of overwriting. The caller passes the db session;
the service commits or rolls back.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ob_catalog.domain.repository import VariantRepositoryProtocol
from src.ob_catalog.infrastructure.persistence import VariantRepository
from src.ob_common.datetime_utils import as_utc, utc_now
from src.ob_common.enums import OrderStatus
from src.ob_common.errors import EmptyOrderError, OrderNotFoundError, StaleOrderError
from src.ob_common.id_generator import generate_id, generate_order_number
from src.ob_common.keyed_lock import KeyedLocks
from src.ob_order.application.schemas import (
    ChangeStatusRequest,
    CreateOrderRequest,
    DeliveryStatusRequest,
    OrderItemIn,
    OrderListResponse,
    OrderResponse,
    UpdateOrderRequest,
)
from src.ob_order.domain import lifecycle, totals
from src.ob_order.domain.models import DeliveryInfo, DiscountSpec, Order, OrderItem
from src.ob_order.domain.repository import OrderRepositoryProtocol
from src.ob_order.domain.resolver import collect_variant_ids, resolve
from src.ob_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)


class OrderApplicationService:
    def __init__(
        self,
        repo: OrderRepositoryProtocol | None = None,
        variant_repo: VariantRepositoryProtocol | None = None,
    ) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()
        self._variant_repo: VariantRepositoryProtocol = variant_repo or VariantRepository()
        self._order_locks = KeyedLocks()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_order(
        self, db: AsyncSession, org_id: str, req: CreateOrderRequest
    ) -> OrderResponse:
        if not req.items:
            raise EmptyOrderError()

        items = await self._resolve_items(db, org_id, req.items)
        now = utc_now()
        order = Order(
            id=generate_id(),
            order_number=generate_order_number(),
            org_id=org_id,
            customer_id=req.customer_id,
            status=OrderStatus.PENDING.value,
            delivery=DeliveryInfo(
                address=req.delivery.address.to_domain(),
                transport_fare=req.delivery.transport_fare,
                date=as_utc(req.delivery.date),
            ),
            notes=req.notes,
            discount=req.discount.to_domain() if req.discount else DiscountSpec(),
            items=items,
            created_at=now,
            updated_at=now,
        )
        totals.compute(order)

        try:
            await self._repo.save(db, order)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Order created: id=%s, number=%s, org=%s, items=%d, total=%s",
            order.id, order.order_number, org_id, len(order.items), order.total,
        )
        return OrderResponse.from_domain(order)

    async def update_order(
        self, db: AsyncSession, org_id: str, order_id: str, req: UpdateOrderRequest
    ) -> OrderResponse:
        async with self._order_locks.hold(order_id):
            order = await self._load(db, org_id, order_id)
            # Guard runs before any resolution; a rejected update leaves totals untouched
            lifecycle.ensure_mutable(order)
            self._check_version(order, req.expected_version)

            if req.items is not None:
                if not req.items:
                    raise EmptyOrderError()
                items = await self._resolve_items(db, org_id, req.items)
                order.replace_items(items)
                logger.info(
                    "Order items replaced: id=%s, items=%d", order.id, len(items)
                )

            if req.customer_id is not None:
                order.customer_id = req.customer_id
            if req.notes is not None:
                order.notes = req.notes
            # An explicit null removes the order discount; an absent field keeps it
            if "discount" in req.model_fields_set:
                order.discount = req.discount.to_domain() if req.discount else DiscountSpec()
            if req.delivery is not None:
                if req.delivery.address is not None:
                    order.delivery.address = req.delivery.address.to_domain()
                if req.delivery.transport_fare is not None:
                    order.delivery.transport_fare = req.delivery.transport_fare
                if req.delivery.date is not None:
                    order.delivery.date = as_utc(req.delivery.date)

            totals.compute(order)
            await self._persist(db, order)

        return OrderResponse.from_domain(order)

    async def change_status(
        self, db: AsyncSession, org_id: str, order_id: str, req: ChangeStatusRequest
    ) -> OrderResponse:
        async with self._order_locks.hold(order_id):
            order = await self._load(db, org_id, order_id)
            self._check_version(order, req.expected_version)
            previous = order.status
            lifecycle.transition(order, req.status.value)
            await self._persist(db, order)

        logger.info("Order status changed: id=%s, %s → %s", order.id, previous, order.status)
        return OrderResponse.from_domain(order)

    async def update_delivery_status(
        self, db: AsyncSession, org_id: str, order_id: str, req: DeliveryStatusRequest
    ) -> OrderResponse:
        async with self._order_locks.hold(order_id):
            order = await self._load(db, org_id, order_id)
            lifecycle.apply_delivery_status(order.delivery, req.status.value, utc_now())
            await self._persist(db, order)

        logger.info(
            "Delivery status changed: id=%s, delivery=%s", order.id, order.delivery.status
        )
        return OrderResponse.from_domain(order)

    async def delete_order(self, db: AsyncSession, org_id: str, order_id: str) -> None:
        async with self._order_locks.hold(order_id):
            try:
                deleted = await self._repo.delete(db, org_id, order_id)
                if not deleted:
                    raise OrderNotFoundError(order_id)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info("Order deleted: id=%s, org=%s", order_id, org_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_order(self, db: AsyncSession, org_id: str, order_id: str) -> OrderResponse:
        return OrderResponse.from_domain(await self._load(db, org_id, order_id))

    async def list_orders(
        self,
        db: AsyncSession,
        org_id: str,
        status: str | None,
        customer_id: str | None,
        cursor: str | None,
        limit: int,
    ) -> OrderListResponse:
        # Fetch limit+1 to detect has_more without COUNT(*)
        orders = await self._repo.list_by_org(
            db, org_id, status, customer_id, cursor, limit + 1
        )
        has_more = len(orders) > limit
        page = orders[:limit]
        next_cursor = page[-1].id if has_more and page else None
        return OrderListResponse(
            items=[OrderResponse.from_domain(o) for o in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, db: AsyncSession, org_id: str, order_id: str) -> Order:
        order = await self._repo.get_by_id(db, org_id, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def _resolve_items(
        self, db: AsyncSession, org_id: str, items_in: list[OrderItemIn]
    ) -> list[OrderItem]:
        requests = [i.to_domain() for i in items_in]
        variants = await self._variant_repo.get_by_ids(
            db, org_id, collect_variant_ids(requests)
        )
        return resolve(requests, {v.id: v for v in variants})

    @staticmethod
    def _check_version(order: Order, expected_version: int | None) -> None:
        if expected_version is not None and expected_version != order.version:
            raise StaleOrderError(order.id, expected_version)

    async def _persist(self, db: AsyncSession, order: Order) -> None:
        try:
            await self._repo.update(db, order)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
