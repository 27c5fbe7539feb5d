"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  3xxx: Catalog
  4xxx: Order
  5xxx: Invoice
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired access token", 401)


# --- 3xxx: Catalog ---

class VariantNotFoundError(AppError):
    def __init__(self, variant_id: str) -> None:
        self.variant_id = variant_id
        super().__init__(3001, f"Variant not found: {variant_id}", 404)


# --- 4xxx: Order ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4004, f"Order not found: {order_id}", 404)


class EmptyOrderError(AppError):
    def __init__(self) -> None:
        super().__init__(4007, "Order must contain at least one item", 422)


class OrderNotPendingError(AppError):
    def __init__(self, order_id: str, status: str) -> None:
        self.status = status
        super().__init__(
            4008, f"Order {order_id} in status {status} cannot be modified", 409
        )


class InvalidStatusTransitionError(AppError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            4009, f"Order status cannot change from {current} to {target}", 422
        )


class StaleOrderError(AppError):
    def __init__(self, order_id: str, expected_version: int) -> None:
        super().__init__(
            4010,
            f"Order {order_id} was modified concurrently (expected version {expected_version})",
            409,
        )


# --- 5xxx: Invoice ---

class InvoiceNotFoundError(AppError):
    def __init__(self, invoice_id: str) -> None:
        super().__init__(5004, f"Invoice not found: {invoice_id}", 404)


class InvoiceNotDraftError(AppError):
    def __init__(self, invoice_id: str, status: str) -> None:
        self.status = status
        super().__init__(
            5008, f"Invoice {invoice_id} in status {status} cannot be issued", 409
        )


class OrderNotInvoiceableError(AppError):
    def __init__(self, order_id: str, status: str) -> None:
        self.status = status
        super().__init__(
            5009, f"Order {order_id} in status {status} cannot be invoiced", 409
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
