"""Domain models for ob_catalog — pure dataclasses, no business logic."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Variant:
    """Purchasable SKU. Read-only snapshot source for order items."""

    id: str
    product_id: str
    org_id: str
    sku: str
    price: Decimal
    tax_rate: Decimal  # fraction: 0.1 = 10%
