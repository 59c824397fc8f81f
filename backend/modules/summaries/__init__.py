"""
Summaries module.

Derived read models: per-vault spending, payments over time, dashboard.
"""

from .interfaces import ISummaryService
from .models import (
    VaultSpendingSummary,
    VaultSpendingResponse,
    PaymentsOverTimePoint,
    PaymentsOverTimeResponse,
    DashboardSummary,
)

__all__ = [
    "ISummaryService",
    "VaultSpendingSummary",
    "VaultSpendingResponse",
    "PaymentsOverTimePoint",
    "PaymentsOverTimeResponse",
    "DashboardSummary",
]
