"""Order totals engine: discounts, proportional allocation, tax and totals.

compute() fills every derived monetary field on an Order and its items, in
place. It is a total function over validated input and never raises.

Order of operations:
  1. per-item discount          item.applied_discount
  2. order-level discount       order.applied_discount (capped by what items left)
  3. allocation across items    item.applied_order_discount (remainder on last item)
  4. tax and line total         item.tax_amount, item.line_total
  5. aggregation                order.tax_total, order.total

Every amount is round2()-ed at the point it is finalized.
"""
import logging
from collections.abc import Sequence
from decimal import Decimal

from src.ob_common.enums import DiscountType
from src.ob_common.money import ZERO, round2
from src.ob_order.domain.models import DiscountSpec, Order, OrderItem

logger = logging.getLogger(__name__)


def nominal_discount(spec: DiscountSpec, base: Decimal) -> Decimal:
    """Discount implied by spec against base, before any cap or rounding.

    Unknown kinds yield zero (logged); None is the normal "no discount".
    """
    if spec.kind == DiscountType.PERCENTAGE:
        return base * spec.amount / 100
    if spec.kind == DiscountType.FIXED:
        return spec.amount
    if spec.kind is not None:
        logger.warning("Unknown discount kind %r treated as no discount", spec.kind)
    return ZERO


def item_discount(item: OrderItem) -> Decimal:
    """Item-level discount, clamped into [0, item subtotal]."""
    subtotal = item.subtotal
    discount = nominal_discount(item.discount, subtotal)
    discount = min(max(discount, ZERO), subtotal)
    return round2(discount)


def order_discount(order: Order) -> Decimal:
    """Order-level discount, capped so item + order discounts never exceed subtotal."""
    discount = nominal_discount(order.discount, order.subtotal)
    max_discount = max(order.subtotal - order.item_discount_total, ZERO)
    discount = min(max(discount, ZERO), max_discount)
    return round2(discount)


def allocate_order_discount(
    items: Sequence[OrderItem], subtotal: Decimal, applied: Decimal
) -> list[Decimal]:
    """Split applied across items by their share of subtotal.

    Every item but the last gets its rounded proportional share; the last one
    gets exactly what is left, so the shares always sum to applied. A share
    never exceeds what is still unallocated.
    """
    if not items:
        return []
    if applied <= 0 or subtotal <= 0:
        return [ZERO] * len(items)

    shares: list[Decimal] = []
    remaining = applied
    for item in items[:-1]:
        share = round2(item.subtotal / subtotal * applied)
        share = min(share, remaining)
        shares.append(share)
        remaining -= share
    shares.append(remaining)
    return shares


def apply_tax_and_line_total(item: OrderItem) -> None:
    taxable = item.subtotal - item.applied_discount - item.applied_order_discount
    if taxable < 0:
        taxable = ZERO
    item.tax_amount = round2(taxable * item.tax_rate)
    item.line_total = round2(taxable + item.tax_amount)


def _reset(order: Order) -> None:
    order.subtotal = ZERO
    order.item_discount_total = ZERO
    order.applied_discount = ZERO
    order.discount_total = ZERO
    order.tax_total = ZERO
    order.total = ZERO


def compute(order: Order) -> None:
    """Recalculate all financial fields of order and its items, in place."""
    if not order.items:
        _reset(order)
        return

    # Step 1: per-item discounts and subtotal
    subtotal = ZERO
    item_discount_total = ZERO
    for item in order.items:
        item.applied_discount = item_discount(item)
        subtotal += item.subtotal
        item_discount_total += item.applied_discount

    order.subtotal = round2(subtotal)
    order.item_discount_total = round2(item_discount_total)

    # Step 2: order-level discount
    order.applied_discount = order_discount(order)
    order.discount_total = round2(order.item_discount_total + order.applied_discount)

    # Step 3: proportional allocation
    shares = allocate_order_discount(order.items, order.subtotal, order.applied_discount)
    for item, share in zip(order.items, shares):
        item.applied_order_discount = share

    # Step 4: tax and line totals
    for item in order.items:
        apply_tax_and_line_total(item)

    # Step 5: aggregation
    order.tax_total = round2(sum((i.tax_amount for i in order.items), ZERO))
    order.total = round2(sum((i.line_total for i in order.items), ZERO))

    logger.debug(
        "Totals computed: order=%s, items=%d, subtotal=%s, discount=%s, tax=%s, total=%s",
        order.id, len(order.items), order.subtotal, order.discount_total,
        order.tax_total, order.total,
    )
