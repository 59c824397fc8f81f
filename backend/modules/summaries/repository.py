"""
Summary repository for the derived read models.

The views carry a ``user_id`` column and are read through the OwnerScope
like any base table, so the owner filter is applied here as well as inside
the view definitions.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from shared.repository import ScopedRepository
from .models import VaultSpendingSummary


class SummaryRepository(ScopedRepository[VaultSpendingSummary]):
    """Reads from vault_spending_summary, active_payments_view and payments."""

    def vault_spending(self) -> list[dict[str, Any]]:
        result = self._scope.select("vault_spending_summary").order("vault_name").execute()
        return self._rows(result)

    def active_payments(
        self,
        due_from: Optional[datetime] = None,
        due_before: Optional[datetime] = None,
    ) -> list[dict[str, Any]]:
        """Active payments, optionally limited to a next-execution window."""
        query = self._scope.select(
            "active_payments_view", "id, vault_id, amount, next_execution_date"
        )
        if due_from is not None:
            query = query.gte("next_execution_date", due_from.isoformat())
        if due_before is not None:
            query = query.lt("next_execution_date", due_before.isoformat())
        return self._rows(query.execute())

    def completed_payments_since(
        self,
        since: datetime,
        vault_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        query = (
            self._scope.select(
                "payments", "id, vault_id, amount, last_payment_date, vault:vaults(id, name)"
            )
            .eq("status", "completed")
            .gte("last_payment_date", since.isoformat())
        )
        if vault_id:
            query = query.eq("vault_id", vault_id)
        return self._rows(query.order("last_payment_date").execute())

    def count(self, source: str) -> int:
        result = self._scope.select(source, "id", count="exact").execute()
        if getattr(result, "count", None) is not None:
            return int(result.count)
        return len(self._rows(result))

    @staticmethod
    def to_base_units_string(value: Any) -> str:
        """Normalize a numeric column (int, float or string) to an integer string."""
        if value is None:
            return "0"
        return str(int(Decimal(str(value))))
