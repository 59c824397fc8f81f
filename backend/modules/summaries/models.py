"""
Summaries module data models.

Read-only aggregates over the caller's vaults and payments. Amounts are
USDC base-unit strings with a formatted dollar string alongside.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel


class VaultSpendingSummary(BaseModel):
    """Per-vault payment counts and completed spend."""

    vault_id: str
    vault_name: str
    vault_emoji: Optional[str] = None
    vault_handle: Optional[str] = None
    total_payments: int = 0
    active_payments: int = 0
    completed_payments: int = 0
    total_spent: str = "0"
    total_spent_usd: str = "$0.00"


class VaultSpendingResponse(BaseModel):
    vaults: list[VaultSpendingSummary]


class PaymentsOverTimePoint(BaseModel):
    """Completed spend for one vault on one day."""

    date: date
    vault_id: str
    vault_name: str
    total_amount: str


class PaymentsOverTimeResponse(BaseModel):
    days: int
    vault_id: Optional[str] = None
    points: list[PaymentsOverTimePoint]


class DashboardSummary(BaseModel):
    """Headline numbers for the dashboard."""

    vault_count: int
    total_payments: int
    active_payments_total: str
    active_payments_total_usd: str
    due_today_total: str
    due_today_total_usd: str
    overdue_count: int
