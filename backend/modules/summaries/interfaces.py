"""
Summaries module interface.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import DashboardSummary, PaymentsOverTimeResponse, VaultSpendingResponse


@runtime_checkable
class ISummaryService(Protocol):
    """
    Interface for the derived read models.

    Every aggregate only covers the caller's own vaults and payments.
    """

    async def get_vault_spending(self) -> VaultSpendingResponse:
        """Per-vault payment counts and completed spend."""
        ...

    async def get_payments_over_time(
        self,
        days: int = 30,
        vault_id: Optional[str] = None,
    ) -> PaymentsOverTimeResponse:
        """Completed spend grouped by day and vault."""
        ...

    async def get_dashboard(self) -> DashboardSummary:
        """Vault count, active and due-today totals, overdue count."""
        ...
