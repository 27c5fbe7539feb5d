"""Row ids and human-facing document numbers.

Orders, order lines and invoices get time-ordered 64-bit ids rendered as
decimal strings. Keyset pagination (`id < :cursor ORDER BY id DESC`) relies on
ids from one machine sorting by creation time. Document numbers are the same id
behind a prefix: ORD-..., INV-...
"""

import threading
import time

from config.settings import settings


class SnowflakeIdGenerator:
    """Thread-safe time-ordered id source.

    Bits, high to low: 41 ms since _EPOCH_MS, 10 machine id (ID_MACHINE_ID,
    distinct per replica), 12 per-millisecond counter. When the counter wraps
    inside one millisecond the caller spins to the next one.
    """

    _EPOCH_MS = 1_700_000_000_000
    _MACHINE_BITS = 10
    _COUNTER_BITS = 12
    _MAX_COUNTER = (1 << _COUNTER_BITS) - 1

    def __init__(self, machine_id: int = 0) -> None:
        if not (0 <= machine_id < (1 << self._MACHINE_BITS)):
            raise ValueError(f"machine_id must be 0-{(1 << self._MACHINE_BITS) - 1}")
        self._machine_id = machine_id
        self._counter = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            now_ms = self._now_ms()
            if now_ms == self._last_ms:
                self._counter = (self._counter + 1) & self._MAX_COUNTER
                if self._counter == 0:
                    now_ms = self._next_ms(now_ms)
            else:
                self._counter = 0

            self._last_ms = now_ms
            value = (
                ((now_ms - self._EPOCH_MS) << (self._MACHINE_BITS + self._COUNTER_BITS))
                | (self._machine_id << self._COUNTER_BITS)
                | self._counter
            )
            return str(value)

    @staticmethod
    def _now_ms() -> int:
        return time.time_ns() // 1_000_000

    def _next_ms(self, current_ms: int) -> int:
        now_ms = self._now_ms()
        while now_ms <= current_ms:
            now_ms = self._now_ms()
        return now_ms


_generator = SnowflakeIdGenerator(settings.ID_MACHINE_ID)


def generate_id() -> str:
    return _generator.next_id()


def _document_number(prefix: str) -> str:
    return f"{prefix.upper()}-{generate_id()}"


def generate_order_number(prefix: str | None = None) -> str:
    """'ORD-<id>' by default; prefix comes from ORDER_NUMBER_PREFIX."""
    return _document_number(prefix or settings.ORDER_NUMBER_PREFIX)


def generate_invoice_number(prefix: str | None = None) -> str:
    """'INV-<id>' by default; prefix comes from INVOICE_NUMBER_PREFIX."""
    return _document_number(prefix or settings.INVOICE_NUMBER_PREFIX)
