"""
Payments module exceptions.
"""

from shared.exceptions import ConflictError, NotFoundError, ValidationError


class PaymentNotFoundError(NotFoundError):
    """Raised when a payment does not exist or is not in one of the caller's vaults."""

    def __init__(self, payment_id: str):
        super().__init__(
            f"Payment not found: {payment_id}",
            code="PAYMENT_NOT_FOUND",
            details={"payment_id": payment_id},
        )


class InvalidAmountError(ValidationError):
    """Raised when an amount cannot be converted to USDC base units."""

    def __init__(self, amount: str, reason: str):
        super().__init__(
            f"Invalid amount '{amount}': {reason}",
            code="INVALID_AMOUNT",
            details={"amount": amount},
        )


class InvalidStatusTransitionError(ValidationError):
    """Raised when a payment cannot move from its current status to the requested one."""

    def __init__(self, payment_id: str, current: str, requested: str):
        super().__init__(
            f"Cannot change payment status from {current} to {requested}",
            code="INVALID_STATUS_TRANSITION",
            details={"payment_id": payment_id, "from": current, "to": requested},
        )


class PaymentNotExecutableError(ConflictError):
    """Raised when recording an execution for a payment that is not active."""

    def __init__(self, payment_id: str, status: str):
        super().__init__(
            f"Only active payments can be executed (status: {status})",
            code="PAYMENT_NOT_EXECUTABLE",
            details={"payment_id": payment_id, "status": status},
        )
