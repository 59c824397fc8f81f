"""
Owner-scoped access to the protected tables and views.

OwnerScope wraps a Supabase client together with the caller's user id and
injects the ownership predicate into every query it builds. Repositories for
vaults, payments, profiles and the derived read models only ever see an
OwnerScope, never the raw client, so there is no unfiltered query path.

Ownership rules:
- vaults, user_profiles and the derived views carry a ``user_id`` column
  that must equal the caller.
- payments are owned through their vault: ``vault_id`` must be one of the
  caller's vault ids.
- payment_status_history is owned through its payment.

The database enforces the same rules with RLS policies; this layer applies
them again so a view or policy regression cannot widen what a caller sees.
"""

from typing import Any, Optional, Union

from supabase import Client

from .exceptions import AuthorizationError


# Tables and views filtered directly on the owner column
OWNER_COLUMN_TABLES: dict[str, str] = {
    "vaults": "user_id",
    "user_profiles": "user_id",
    "vault_spending_summary": "user_id",
    "active_payments_view": "user_id",
}

# Rows owned through vaults.user_id
VAULT_CHILD_TABLES = frozenset({"payments"})

# Rows owned through payments -> vaults.user_id
PAYMENT_CHILD_TABLES = frozenset({"payment_status_history"})

# Sources that are read-only for callers (views and trigger-maintained tables)
READ_ONLY_SOURCES = frozenset(
    {"vault_spending_summary", "active_payments_view", "payment_status_history"}
)


class OwnerScope:
    """
    Capability object that builds owner-filtered queries.

    Example:
        scope = OwnerScope(get_supabase_user_client(token), user.id)
        rows = scope.select("vaults").order("created_at", desc=True).execute().data
    """

    def __init__(self, db: Client, user_id: str) -> None:
        if not user_id:
            raise AuthorizationError("Owner scope requires a user id", code="MISSING_OWNER")
        self._db = db
        self._user_id = user_id

    @property
    def user_id(self) -> str:
        """The identity every query is filtered to."""
        return self._user_id

    # -------------------------------------------------------------------------
    # Query builders
    # -------------------------------------------------------------------------

    def select(self, source: str, columns: str = "*", count: Optional[str] = None):
        """Start a SELECT on a table or view, filtered to the caller's rows."""
        if count:
            builder = self._db.table(source).select(columns, count=count)
        else:
            builder = self._db.table(source).select(columns)
        return self._apply(source, builder)

    def update(self, table: str, data: dict[str, Any]):
        """Start an UPDATE that can only touch the caller's rows."""
        self._ensure_writable(table)
        if "user_id" in data and data["user_id"] != self._user_id:
            raise AuthorizationError(
                "Cannot assign a row to another owner",
                code="OWNER_MISMATCH",
                details={"table": table},
            )
        if table in VAULT_CHILD_TABLES and "vault_id" in data:
            self._ensure_owned_vaults([data["vault_id"]], table)
        return self._apply(table, self._db.table(table).update(data))

    def delete(self, table: str):
        """Start a DELETE that can only touch the caller's rows."""
        self._ensure_writable(table)
        return self._apply(table, self._db.table(table).delete())

    def insert(self, table: str, rows: Union[dict[str, Any], list[dict[str, Any]]]):
        """
        Start an INSERT of rows owned by the caller.

        Owner-column rows get the caller's id stamped when missing; a row that
        names a different owner is rejected. Payment rows must reference one of
        the caller's vaults.
        """
        self._ensure_writable(table)
        batch = rows if isinstance(rows, list) else [rows]

        if table in OWNER_COLUMN_TABLES:
            column = OWNER_COLUMN_TABLES[table]
            for row in batch:
                owner = row.setdefault(column, self._user_id)
                if owner != self._user_id:
                    raise AuthorizationError(
                        "Cannot create a row for another owner",
                        code="OWNER_MISMATCH",
                        details={"table": table},
                    )
        elif table in VAULT_CHILD_TABLES:
            self._ensure_owned_vaults([row.get("vault_id") for row in batch], table)
        else:
            raise ValueError(f"Table is not owner-scoped: {table}")

        return self._db.table(table).insert(rows)

    # -------------------------------------------------------------------------
    # Ownership lookups
    # -------------------------------------------------------------------------

    def owned_vault_ids(self) -> list[str]:
        """Ids of every vault the caller owns."""
        result = self.select("vaults", "id").execute()
        return [str(row["id"]) for row in result.data or []]

    def owned_payment_ids(self) -> list[str]:
        """Ids of every payment in the caller's vaults."""
        result = self.select("payments", "id").execute()
        return [str(row["id"]) for row in result.data or []]

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _apply(self, source: str, builder):
        if source in OWNER_COLUMN_TABLES:
            return builder.eq(OWNER_COLUMN_TABLES[source], self._user_id)
        if source in VAULT_CHILD_TABLES:
            return builder.in_("vault_id", self.owned_vault_ids())
        if source in PAYMENT_CHILD_TABLES:
            return builder.in_("payment_id", self.owned_payment_ids())
        raise ValueError(f"Table is not owner-scoped: {source}")

    def _ensure_writable(self, table: str) -> None:
        if table in READ_ONLY_SOURCES:
            raise ValueError(f"Read-only source: {table}")

    def _ensure_owned_vaults(self, vault_ids: list[Any], table: str) -> None:
        owned = set(self.owned_vault_ids())
        for vault_id in vault_ids:
            if vault_id is None or str(vault_id) not in owned:
                raise AuthorizationError(
                    "Vault is not owned by the caller",
                    code="VAULT_NOT_OWNED",
                    details={"table": table, "vault_id": str(vault_id)},
                )
