"""
Payment repository for database access.

Encapsulates the Supabase queries for:
- payments (owned through vaults.user_id)
- payment_status_history (owned through payments)
"""

from datetime import datetime
from typing import Any, Optional

from shared.repository import ScopedRepository
from .models import (
    Payment,
    PaymentChain,
    PaymentFilters,
    PaymentStatus,
    PaymentStatusChange,
    VaultSummary,
)

# Payments with the owning vault embedded
PAYMENT_COLUMNS = "*, vault:vaults(id, name, emoji, handle)"


class PaymentRepository(ScopedRepository[Payment]):
    """
    Repository for payment data access.

    Every query goes through the OwnerScope, so payments in other users'
    vaults are invisible and unaffected by writes.
    """

    # -------------------------------------------------------------------------
    # Payment reads
    # -------------------------------------------------------------------------

    def list_payments(
        self,
        filters: Optional[PaymentFilters] = None,
        due_before: Optional[datetime] = None,
        due_from: Optional[datetime] = None,
    ) -> list[Payment]:
        """
        List owned payments ordered by next execution date.

        Args:
            filters: Optional status / vault / series filters.
            due_before: Only payments whose next execution is before this time.
            due_from: Only payments whose next execution is at or after this time.
        """
        query = self._scope.select("payments", PAYMENT_COLUMNS)
        if filters:
            if filters.status:
                query = query.eq("status", filters.status.value)
            if filters.vault_id:
                query = query.eq("vault_id", filters.vault_id)
            if filters.series_id:
                query = query.eq("series_id", filters.series_id)
        if due_before is not None:
            query = query.lt("next_execution_date", due_before.isoformat())
        if due_from is not None:
            query = query.gte("next_execution_date", due_from.isoformat())

        result = query.order("next_execution_date").execute()
        return [self._map_to_payment(row) for row in self._rows(result)]

    def get_by_id(self, payment_id: str) -> Optional[Payment]:
        result = self._scope.select("payments", PAYMENT_COLUMNS).eq("id", payment_id).execute()
        rows = self._rows(result)
        return self._map_to_payment(rows[0]) if rows else None

    # -------------------------------------------------------------------------
    # Payment writes
    # -------------------------------------------------------------------------

    def create_many(self, rows: list[dict[str, Any]]) -> list[Payment]:
        """
        Insert payments.

        Raises AuthorizationError (from the scope) if any row references a
        vault the caller does not own.
        """
        result = self._scope.insert("payments", rows).execute()
        return [self._map_to_payment(row) for row in self._rows(result)]

    def update(
        self,
        payment_id: str,
        data: dict[str, Any],
        expected_status: Optional[PaymentStatus] = None,
    ) -> Optional[Payment]:
        """
        Update an owned payment.

        With expected_status, the row only changes if it still has that
        status. Returns None when no row matched.
        """
        query = self._scope.update("payments", data).eq("id", payment_id)
        if expected_status is not None:
            query = query.eq("status", expected_status.value)
        rows = self._rows(query.execute())
        return self._map_to_payment(rows[0]) if rows else None

    def delete(self, payment_id: str) -> bool:
        result = self._scope.delete("payments").eq("id", payment_id).execute()
        return len(self._rows(result)) > 0

    # -------------------------------------------------------------------------
    # Status history
    # -------------------------------------------------------------------------

    def list_status_history(self, payment_id: str) -> list[PaymentStatusChange]:
        result = (
            self._scope.select("payment_status_history")
            .eq("payment_id", payment_id)
            .order("changed_at")
            .execute()
        )
        return [self._map_to_status_change(row) for row in self._rows(result)]

    # -------------------------------------------------------------------------
    # Mapping
    # -------------------------------------------------------------------------

    def _map_to_payment(self, data: dict[str, Any]) -> Payment:
        """Map database row to Payment model."""
        vault_data = data.get("vault")
        vault = None
        if vault_data:
            vault = VaultSummary(
                id=str(vault_data["id"]),
                name=vault_data["name"],
                emoji=vault_data.get("emoji"),
                handle=vault_data["handle"],
            )

        return Payment(
            id=str(data["id"]),
            vault_id=str(data["vault_id"]),
            recipient_address=data["recipient_address"],
            recipient_name=data.get("recipient_name"),
            description=data.get("description"),
            amount=str(data["amount"]),
            status=PaymentStatus(data["status"]),
            next_execution_date=data.get("next_execution_date"),
            last_payment_date=data.get("last_payment_date"),
            series_id=str(data["series_id"]) if data.get("series_id") else None,
            executed_count=data.get("executed_count") or 0,
            transaction_hashes=list(data.get("transaction_hashes") or []),
            chain=PaymentChain(data.get("chain") or PaymentChain.BASE.value),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            vault=vault,
        )

    def _map_to_status_change(self, data: dict[str, Any]) -> PaymentStatusChange:
        """Map database row to PaymentStatusChange model."""
        old_status = data.get("old_status")
        return PaymentStatusChange(
            id=str(data["id"]),
            payment_id=str(data["payment_id"]),
            old_status=PaymentStatus(old_status) if old_status else None,
            new_status=PaymentStatus(data["new_status"]),
            changed_at=data["changed_at"],
        )
