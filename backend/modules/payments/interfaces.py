"""
Payments module interface.

The API layer depends on IPaymentService for all payment operations.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import (
    CreatePaymentRequest,
    Payment,
    PaymentFilters,
    PaymentHistoryResponse,
    PaymentListResponse,
    RecordExecutionRequest,
    UpdatePaymentRequest,
)


@runtime_checkable
class IPaymentService(Protocol):
    """
    Interface for payment operations.

    Implementations are bound to one caller and only see payments in that
    caller's vaults.
    """

    async def create_payments(self, request: CreatePaymentRequest) -> list[Payment]:
        """
        Create a payment, or a series of payments sharing a series_id.

        Raises:
            VaultNotFoundError: If the vault is missing or not owned
            InvalidAmountError: If the amount cannot be converted to base units
        """
        ...

    async def list_payments(
        self,
        filters: Optional[PaymentFilters] = None,
    ) -> PaymentListResponse:
        """List payments ordered by next execution date."""
        ...

    async def get_payment(self, payment_id: str) -> Payment:
        """
        Get a payment by id.

        Raises:
            PaymentNotFoundError: If missing or not owned
        """
        ...

    async def update_payment(self, payment_id: str, request: UpdatePaymentRequest) -> Payment:
        """Update details or status; status changes follow the lifecycle table."""
        ...

    async def delete_payment(self, payment_id: str) -> None:
        """Delete a payment."""
        ...

    async def record_execution(
        self,
        payment_id: str,
        request: RecordExecutionRequest,
    ) -> Payment:
        """
        Record a manual execution with the wallet's transaction hash.

        Raises:
            PaymentNotExecutableError: If the payment is not active
        """
        ...

    async def get_status_history(self, payment_id: str) -> PaymentHistoryResponse:
        """Status changes recorded for a payment."""
        ...
