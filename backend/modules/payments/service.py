"""
Payments service implementation.

Creates and manages scheduled payments and records manual executions.
There is no scheduler: a payment is only executed when the user pays it
from their wallet, after which the transaction hash is recorded here.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from modules.vaults.exceptions import VaultNotFoundError
from shared.exceptions import AuthorizationError

from .amounts import parse_base_units, to_base_units
from .exceptions import (
    InvalidStatusTransitionError,
    PaymentNotExecutableError,
    PaymentNotFoundError,
)
from .interfaces import IPaymentService
from .models import (
    STATUS_TRANSITIONS,
    CreatePaymentRequest,
    DateFilter,
    Payment,
    PaymentFilters,
    PaymentHistoryResponse,
    PaymentListResponse,
    PaymentStatus,
    RecordExecutionRequest,
    UpdatePaymentRequest,
)
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


def can_transition(current: PaymentStatus, requested: PaymentStatus) -> bool:
    """Whether a payment may move from current to requested."""
    return current == requested or requested in STATUS_TRANSITIONS[current]


class PaymentService(IPaymentService):
    """
    Payment operations for one caller.

    Built per request around an owner-scoped repository.
    """

    def __init__(self, repository: PaymentRepository):
        self._repo = repository

    async def create_payments(self, request: CreatePaymentRequest) -> list[Payment]:
        """
        Create one payment, or a series sharing a series_id.

        New payments are active. The vault must belong to the caller;
        otherwise the vault is reported as not found.
        """
        if request.amount_base_units is not None:
            amount = str(parse_base_units(request.amount_base_units))
        else:
            amount = to_base_units(request.amount)

        first_date = request.next_execution_date or datetime.now(timezone.utc)
        if first_date.tzinfo is None:
            first_date = first_date.replace(tzinfo=timezone.utc)

        series_id = str(uuid.uuid4()) if request.occurrences > 1 else None
        interval = timedelta(seconds=request.interval_seconds or 0)

        rows: list[dict[str, Any]] = []
        for index in range(request.occurrences):
            rows.append(
                {
                    "vault_id": request.vault_id,
                    "recipient_address": request.recipient_address,
                    "recipient_name": request.recipient_name or None,
                    "description": request.description or None,
                    "amount": amount,
                    "status": PaymentStatus.ACTIVE.value,
                    "next_execution_date": (first_date + interval * index).isoformat(),
                    "series_id": series_id,
                    "executed_count": 0,
                    "transaction_hashes": [],
                    "chain": request.chain.value,
                }
            )

        try:
            payments = self._repo.create_many(rows)
        except AuthorizationError:
            raise VaultNotFoundError(request.vault_id)

        logger.info(
            f"Created {len(payments)} payment(s) in vault {request.vault_id}"
            + (f" as series {series_id}" if series_id else "")
        )
        return payments

    async def list_payments(
        self,
        filters: Optional[PaymentFilters] = None,
    ) -> PaymentListResponse:
        """List the caller's payments, soonest first."""
        filters = filters or PaymentFilters()
        now = datetime.now(timezone.utc)

        due_before = now if filters.date_filter == DateFilter.OVERDUE else None
        due_from = now if filters.date_filter == DateFilter.UPCOMING else None

        payments = self._repo.list_payments(filters, due_before=due_before, due_from=due_from)
        return PaymentListResponse(payments=payments, total=len(payments))

    async def get_payment(self, payment_id: str) -> Payment:
        payment = self._repo.get_by_id(payment_id)
        if payment is None:
            raise PaymentNotFoundError(payment_id)
        return payment

    async def update_payment(self, payment_id: str, request: UpdatePaymentRequest) -> Payment:
        """
        Update a payment's details or status.

        Raises:
            InvalidStatusTransitionError: If the status change is not allowed
        """
        current = await self.get_payment(payment_id)
        changes = request.model_dump(exclude_unset=True, mode="json")

        expected_status = None
        if request.status is not None and request.status != current.status:
            if not can_transition(current.status, request.status):
                raise InvalidStatusTransitionError(
                    payment_id, current.status.value, request.status.value
                )
            expected_status = current.status
        if changes.get("status") is None:
            changes.pop("status", None)

        if not changes:
            return current

        changes["updated_at"] = datetime.now(timezone.utc).isoformat()
        payment = self._repo.update(payment_id, changes, expected_status=expected_status)
        if payment is None:
            # Deleted, or its status changed underneath us
            raise PaymentNotFoundError(payment_id)

        if expected_status is not None:
            logger.info(
                f"Payment {payment_id} status {expected_status.value} -> {payment.status.value}"
            )
        return payment

    async def delete_payment(self, payment_id: str) -> None:
        if not self._repo.delete(payment_id):
            raise PaymentNotFoundError(payment_id)
        logger.info(f"Deleted payment {payment_id}")

    async def record_execution(
        self,
        payment_id: str,
        request: RecordExecutionRequest,
    ) -> Payment:
        """
        Record a manual payment made from the user's wallet.

        Appends the transaction hash, bumps executed_count, stamps
        last_payment_date, clears next_execution_date and completes the
        payment. The update only applies while the payment is still active.
        """
        current = await self.get_payment(payment_id)
        if current.status != PaymentStatus.ACTIVE:
            raise PaymentNotExecutableError(payment_id, current.status.value)

        now = datetime.now(timezone.utc).isoformat()
        changes = {
            "transaction_hashes": [*current.transaction_hashes, request.transaction_hash],
            "executed_count": current.executed_count + 1,
            "last_payment_date": now,
            "next_execution_date": None,
            "status": PaymentStatus.COMPLETED.value,
            "updated_at": now,
        }

        payment = self._repo.update(payment_id, changes, expected_status=PaymentStatus.ACTIVE)
        if payment is None:
            # Executed or paused concurrently
            refreshed = await self.get_payment(payment_id)
            raise PaymentNotExecutableError(payment_id, refreshed.status.value)

        logger.info(f"Recorded execution {request.transaction_hash} for payment {payment_id}")
        return payment

    async def get_status_history(self, payment_id: str) -> PaymentHistoryResponse:
        """Status changes of an owned payment, oldest first."""
        await self.get_payment(payment_id)
        changes = self._repo.list_status_history(payment_id)
        return PaymentHistoryResponse(payment_id=payment_id, changes=changes)
