"""
Summaries service implementation.

Builds the dashboard aggregates from owner-scoped reads. Payments over time
is computed here from the scoped payments query rather than a database
function, so the same owner filter applies.
"""

from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from modules.payments.amounts import format_usd, sum_base_units
from shared.exceptions import ValidationError

from .interfaces import ISummaryService
from .models import (
    DashboardSummary,
    PaymentsOverTimePoint,
    PaymentsOverTimeResponse,
    VaultSpendingResponse,
    VaultSpendingSummary,
)
from .repository import SummaryRepository

MAX_DAYS = 365


class SummaryService(ISummaryService):
    """Read models for one caller."""

    def __init__(self, repository: SummaryRepository):
        self._repo = repository

    async def get_vault_spending(self) -> VaultSpendingResponse:
        summaries = []
        for row in self._repo.vault_spending():
            total_spent = self._repo.to_base_units_string(row.get("total_spent"))
            summaries.append(
                VaultSpendingSummary(
                    vault_id=str(row["vault_id"]),
                    vault_name=row["vault_name"],
                    vault_emoji=row.get("vault_emoji"),
                    vault_handle=row.get("vault_handle"),
                    total_payments=row.get("total_payments") or 0,
                    active_payments=row.get("active_payments") or 0,
                    completed_payments=row.get("completed_payments") or 0,
                    total_spent=total_spent,
                    total_spent_usd=format_usd(total_spent),
                )
            )
        return VaultSpendingResponse(vaults=summaries)

    async def get_payments_over_time(
        self,
        days: int = 30,
        vault_id: Optional[str] = None,
    ) -> PaymentsOverTimeResponse:
        """
        Completed spend per day and vault over the last ``days`` days.

        Raises:
            ValidationError: If days is outside 1..365
        """
        if days < 1 or days > MAX_DAYS:
            raise ValidationError(
                f"days must be between 1 and {MAX_DAYS}",
                code="INVALID_DAYS",
                details={"days": days},
            )

        since = datetime.now(timezone.utc) - timedelta(days=days)
        totals: dict[tuple[date, str], list[str]] = defaultdict(list)
        names: dict[str, str] = {}

        for row in self._repo.completed_payments_since(since, vault_id):
            paid_at = _parse_datetime(row["last_payment_date"])
            key = (paid_at.date(), str(row["vault_id"]))
            totals[key].append(str(row["amount"]))
            vault = row.get("vault") or {}
            names[str(row["vault_id"])] = vault.get("name", "")

        points = [
            PaymentsOverTimePoint(
                date=day,
                vault_id=vid,
                vault_name=names.get(vid, ""),
                total_amount=sum_base_units(amounts),
            )
            for (day, vid), amounts in sorted(totals.items())
        ]
        return PaymentsOverTimeResponse(days=days, vault_id=vault_id, points=points)

    async def get_dashboard(self) -> DashboardSummary:
        now = datetime.now(timezone.utc)
        day_start = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
        day_end = day_start + timedelta(days=1)

        active = self._repo.active_payments()
        active_total = sum_base_units([str(row["amount"]) for row in active])

        due_today = self._repo.active_payments(due_from=day_start, due_before=day_end)
        due_today_total = sum_base_units([str(row["amount"]) for row in due_today])

        overdue = [
            row
            for row in active
            if row.get("next_execution_date")
            and _parse_datetime(row["next_execution_date"]) < now
        ]

        return DashboardSummary(
            vault_count=self._repo.count("vaults"),
            total_payments=self._repo.count("payments"),
            active_payments_total=active_total,
            active_payments_total_usd=format_usd(active_total),
            due_today_total=due_today_total,
            due_today_total_usd=format_usd(due_today_total),
            overdue_count=len(overdue),
        )


def _parse_datetime(value) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
