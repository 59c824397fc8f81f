"""
Payments module data models.

A payment is a scheduled USDC transfer out of one vault. Execution happens
in the user's wallet; these models only carry the record-keeping fields.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from shared.models import ETH_ADDRESS_PATTERN, TX_HASH_PATTERN


class PaymentStatus(str, Enum):
    """Payment lifecycle status."""

    PENDING = "pending"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"  # Terminal
    CANCELLED = "cancelled"  # Terminal


# Allowed manual status changes; completed and cancelled are terminal
STATUS_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.ACTIVE, PaymentStatus.CANCELLED}),
    PaymentStatus.ACTIVE: frozenset(
        {PaymentStatus.PAUSED, PaymentStatus.COMPLETED, PaymentStatus.CANCELLED}
    ),
    PaymentStatus.PAUSED: frozenset({PaymentStatus.ACTIVE, PaymentStatus.CANCELLED}),
    PaymentStatus.COMPLETED: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
}


class PaymentChain(str, Enum):
    """Network a payment is sent on."""

    BASE = "base"
    BASE_SEPOLIA = "base-sepolia"


class DateFilter(str, Enum):
    """Filter on next_execution_date relative to now."""

    OVERDUE = "overdue"    # Before now
    UPCOMING = "upcoming"  # At or after now


class VaultSummary(BaseModel):
    """Vault fields embedded in payment listings."""

    id: str
    name: str
    emoji: Optional[str] = None
    handle: str


class Payment(BaseModel):
    """A payment as stored."""

    id: str
    vault_id: str
    recipient_address: str
    recipient_name: Optional[str] = None
    description: Optional[str] = None
    amount: str = Field(..., description="USDC base units (6 decimals)")
    status: PaymentStatus
    next_execution_date: Optional[datetime] = None
    last_payment_date: Optional[datetime] = None
    series_id: Optional[str] = None
    executed_count: int = 0
    transaction_hashes: list[str] = Field(default_factory=list)
    chain: PaymentChain = PaymentChain.BASE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    vault: Optional[VaultSummary] = None


class CreatePaymentRequest(BaseModel):
    """
    Request to create a payment or a series of payments.

    Give the amount either in USDC (``amount``, e.g. "12.5") or already in
    base units (``amount_base_units``, e.g. "12500000").
    """

    vault_id: str
    recipient_address: str = Field(..., pattern=ETH_ADDRESS_PATTERN)
    recipient_name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    amount: Optional[str] = Field(None, description="Display amount in USDC")
    amount_base_units: Optional[str] = Field(None, description="Amount in base units")
    next_execution_date: Optional[datetime] = Field(
        None, description="First execution date; defaults to now"
    )
    chain: PaymentChain = PaymentChain.BASE
    occurrences: int = Field(default=1, ge=1, le=120, description="Payments in the series")
    interval_seconds: Optional[int] = Field(
        None, ge=60, description="Spacing between payments in a series"
    )

    @model_validator(mode="after")
    def check_amount_and_series(self) -> "CreatePaymentRequest":
        if (self.amount is None) == (self.amount_base_units is None):
            raise ValueError("Provide exactly one of amount or amount_base_units")
        if self.occurrences > 1 and not self.interval_seconds:
            raise ValueError("interval_seconds is required when occurrences > 1")
        return self


class UpdatePaymentRequest(BaseModel):
    """Partial payment update."""

    recipient_name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    next_execution_date: Optional[datetime] = None
    status: Optional[PaymentStatus] = None


class RecordExecutionRequest(BaseModel):
    """Transaction hash returned by the wallet after a manual payment."""

    transaction_hash: str = Field(..., pattern=TX_HASH_PATTERN)


class PaymentFilters(BaseModel):
    """Filters for listing payments."""

    status: Optional[PaymentStatus] = None
    vault_id: Optional[str] = None
    series_id: Optional[str] = None
    date_filter: Optional[DateFilter] = None


class PaymentListResponse(BaseModel):
    """Payments ordered by next execution date."""

    payments: list[Payment]
    total: int


class PaymentStatusChange(BaseModel):
    """One status transition recorded by the database trigger."""

    id: str
    payment_id: str
    old_status: Optional[PaymentStatus] = None
    new_status: PaymentStatus
    changed_at: datetime


class PaymentHistoryResponse(BaseModel):
    """Status history of a payment, oldest first."""

    payment_id: str
    changes: list[PaymentStatusChange]
