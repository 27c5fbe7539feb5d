"""Tests for ob_common.id_generator and ob_common.datetime_utils."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from src.ob_common.datetime_utils import as_utc, utc_now
from src.ob_common.id_generator import (
    SnowflakeIdGenerator,
    generate_id,
    generate_invoice_number,
    generate_order_number,
)


class TestSnowflakeIdGenerator:
    def test_returns_str(self) -> None:
        assert isinstance(SnowflakeIdGenerator(machine_id=1).next_id(), str)

    def test_unique_ids(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        prev = int(gen.next_id())
        for _ in range(100):
            current = int(gen.next_id())
            assert current > prev
            prev = current

    def test_machine_id_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            SnowflakeIdGenerator(machine_id=1024)

    def test_module_level_generator(self) -> None:
        assert generate_id() != generate_id()


class TestOrderNumber:
    def test_default_prefix(self) -> None:
        number = generate_order_number()
        prefix, _, suffix = number.partition("-")
        assert prefix == "ORD"
        assert suffix.isdigit()

    def test_prefix_upper_cased(self) -> None:
        assert generate_order_number("inv").startswith("INV-")

    def test_unique(self) -> None:
        assert len({generate_order_number() for _ in range(200)}) == 200


class TestInvoiceNumber:
    def test_default_prefix(self) -> None:
        prefix, _, suffix = generate_invoice_number().partition("-")
        assert prefix == "INV"
        assert suffix.isdigit()

    def test_distinct_from_order_numbers(self) -> None:
        assert generate_invoice_number() != generate_order_number()


class TestUtcNow:
    def test_returns_aware_datetime(self) -> None:
        now = utc_now()
        assert isinstance(now, datetime)
        assert now.tzinfo == UTC


class TestAsUtc:
    def test_none(self) -> None:
        assert as_utc(None) is None

    def test_naive_is_taken_as_utc(self) -> None:
        result = as_utc(datetime(2026, 1, 2, 3, 4))
        assert result == datetime(2026, 1, 2, 3, 4, tzinfo=UTC)

    def test_aware_is_converted(self) -> None:
        plus2 = timezone(timedelta(hours=2))
        result = as_utc(datetime(2026, 1, 2, 5, 0, tzinfo=plus2))
        assert result == datetime(2026, 1, 2, 3, 0, tzinfo=UTC)
        assert result.tzinfo == UTC
