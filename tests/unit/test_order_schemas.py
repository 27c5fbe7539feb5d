"""Tests for ob_order request/response schemas."""
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.ob_order.application.schemas import (
    ChangeStatusRequest,
    CreateOrderRequest,
    DeliveryStatusRequest,
    DiscountIn,
    OrderItemIn,
    OrderResponse,
    UpdateOrderRequest,
)
from src.ob_order.domain.models import (
    Address,
    DeliveryInfo,
    DiscountSpec,
    Order,
    OrderItem,
)

_DELIVERY = {"address": {"street": "1 Main St", "city": "Springfield", "country": "US"}}


class TestDiscountIn:
    def test_valid(self) -> None:
        spec = DiscountIn(type="PERCENTAGE", amount="12.5").to_domain()
        assert spec == DiscountSpec(kind="PERCENTAGE", amount=Decimal("12.5"))

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DiscountIn(type="BOGO", amount="5")

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DiscountIn(type="FIXED", amount="-1")

    def test_too_many_decimal_places(self) -> None:
        with pytest.raises(ValidationError):
            DiscountIn(type="FIXED", amount="1.005")


class TestOrderItemIn:
    def test_quantity_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            OrderItemIn(variant_id="v1", quantity=0)

    def test_variant_id_required(self) -> None:
        with pytest.raises(ValidationError):
            OrderItemIn(variant_id="", quantity=1)

    def test_to_domain_without_discount(self) -> None:
        req = OrderItemIn(variant_id="v1", quantity=2).to_domain()
        assert req.variant_id == "v1"
        assert req.quantity == 2
        assert req.discount == DiscountSpec()

    def test_to_domain_with_discount(self) -> None:
        req = OrderItemIn(
            variant_id="v1", quantity=1, discount={"type": "FIXED", "amount": "3"}
        ).to_domain()
        assert req.discount.kind == "FIXED"


class TestCreateOrderRequest:
    def test_minimal(self) -> None:
        req = CreateOrderRequest(
            customer_id="c-1", items=[{"variant_id": "v1", "quantity": 1}], delivery=_DELIVERY
        )
        assert req.discount is None
        assert req.delivery.transport_fare == Decimal("0")
        assert req.delivery.address.to_domain() == Address(
            street="1 Main St", city="Springfield", country="US"
        )

    def test_address_city_required(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(
                customer_id="c-1",
                items=[],
                delivery={"address": {"street": "x", "country": "US"}},
            )

    def test_derived_fields_are_ignored(self) -> None:
        req = CreateOrderRequest(
            customer_id="c-1", items=[], delivery=_DELIVERY, total="0.01"
        )
        assert not hasattr(req, "total")


class TestUpdateOrderRequest:
    def test_all_optional(self) -> None:
        req = UpdateOrderRequest()
        assert req.items is None
        assert req.expected_version is None

    def test_empty_items_distinguished_from_absent(self) -> None:
        assert UpdateOrderRequest(items=[]).items == []

    def test_expected_version_positive(self) -> None:
        with pytest.raises(ValidationError):
            UpdateOrderRequest(expected_version=0)

    def test_null_discount_distinguished_from_absent(self) -> None:
        cleared = UpdateOrderRequest.model_validate({"discount": None})
        assert cleared.discount is None
        assert "discount" in cleared.model_fields_set
        assert "discount" not in UpdateOrderRequest.model_validate({}).model_fields_set


class TestStatusRequests:
    def test_unknown_order_status(self) -> None:
        with pytest.raises(ValidationError):
            ChangeStatusRequest(status="SHIPPED")

    def test_delivery_shipped(self) -> None:
        assert DeliveryStatusRequest(status="SHIPPED").status.value == "SHIPPED"


class TestOrderResponse:
    def test_from_domain_json(self) -> None:
        order = Order(
            id="o-1",
            order_number="ORD-1",
            org_id="org-1",
            customer_id="c-1",
            delivery=DeliveryInfo(
                address=Address(street="s", city="c", country="US"),
                delivered_at=datetime(2026, 1, 1, tzinfo=UTC),
            ),
            items=[
                OrderItem(
                    id="i-1",
                    variant_id="v1",
                    product_id="p1",
                    sku="SKU-1",
                    quantity=2,
                    unit_price=Decimal("1250.00"),
                    tax_rate=Decimal("0.10"),
                    line_total=Decimal("2750.00"),
                )
            ],
            subtotal=Decimal("2500.00"),
            total=Decimal("2750.00"),
        )

        data = OrderResponse.from_domain(order).model_dump(mode="json")

        assert data["total"] == "2750.00"
        assert data["total_display"] == "$2,750.00"
        assert data["discount"] == {"type": None, "amount": "0"}
        assert data["items"][0]["line_total"] == "2750.00"
        assert data["items"][0]["sku"] == "SKU-1"
        assert data["delivery"]["address"]["city"] == "c"
        assert data["delivery"]["delivered_at"].startswith("2026-01-01")
