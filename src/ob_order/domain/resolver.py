"""Item resolver: maps client item requests onto priced OrderItems.

Pure mapping, no I/O. The caller fetches every referenced variant in one batch
(see collect_variant_ids) so all lines of an order share one price snapshot.
"""
from collections.abc import Mapping, Sequence

from src.ob_catalog.domain.models import Variant
from src.ob_common.errors import VariantNotFoundError
from src.ob_order.domain.models import ItemRequest, OrderItem


def collect_variant_ids(requests: Sequence[ItemRequest]) -> list[str]:
    """Distinct variant ids in first-seen order."""
    return list(dict.fromkeys(r.variant_id for r in requests))


def resolve(
    requests: Sequence[ItemRequest], variants_by_id: Mapping[str, Variant]
) -> list[OrderItem]:
    """Build one OrderItem per request, in request order.

    All-or-nothing: the first missing variant raises VariantNotFoundError and
    no items are returned. Repeated variant ids produce separate lines.
    """
    missing = [r.variant_id for r in requests if r.variant_id not in variants_by_id]
    if missing:
        raise VariantNotFoundError(missing[0])

    items: list[OrderItem] = []
    for req in requests:
        variant = variants_by_id[req.variant_id]
        items.append(
            OrderItem(
                variant_id=req.variant_id,
                product_id=variant.product_id,
                sku=variant.sku,
                quantity=req.quantity,
                unit_price=variant.price,
                tax_rate=variant.tax_rate,
                discount=req.discount,
                notes=req.notes,
            )
        )
    return items
