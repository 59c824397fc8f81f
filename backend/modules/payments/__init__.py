"""
Payments module.

Scheduled USDC payments out of a vault, with manual execution records.

Public API:
- IPaymentService: Interface for payment operations
- Payment, PaymentStatus, CreatePaymentRequest: Models
- to_base_units, format_amount, format_usd: Amount conversion
"""

from .interfaces import IPaymentService
from .models import (
    Payment,
    PaymentStatus,
    PaymentChain,
    CreatePaymentRequest,
    UpdatePaymentRequest,
    RecordExecutionRequest,
    PaymentFilters,
    PaymentListResponse,
    STATUS_TRANSITIONS,
)
from .amounts import to_base_units, format_amount, format_usd, USDC_DECIMALS
from .exceptions import (
    PaymentNotFoundError,
    InvalidAmountError,
    InvalidStatusTransitionError,
    PaymentNotExecutableError,
)

__all__ = [
    "IPaymentService",
    "Payment",
    "PaymentStatus",
    "PaymentChain",
    "CreatePaymentRequest",
    "UpdatePaymentRequest",
    "RecordExecutionRequest",
    "PaymentFilters",
    "PaymentListResponse",
    "STATUS_TRANSITIONS",
    "to_base_units",
    "format_amount",
    "format_usd",
    "USDC_DECIMALS",
    "PaymentNotFoundError",
    "InvalidAmountError",
    "InvalidStatusTransitionError",
    "PaymentNotExecutableError",
]
