"""
Summary API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_summary_service

from .interfaces import ISummaryService
from .models import DashboardSummary, PaymentsOverTimeResponse, VaultSpendingResponse

router = APIRouter()


@router.get("/vaults", response_model=VaultSpendingResponse)
async def get_vault_spending(
    service: ISummaryService = Depends(get_summary_service),
) -> VaultSpendingResponse:
    """Spending summary for each of the current user's vaults."""
    return await service.get_vault_spending()


@router.get("/payments-over-time", response_model=PaymentsOverTimeResponse)
async def get_payments_over_time(
    days: int = Query(default=30, ge=1, le=365, description="Window in days"),
    vault_id: Optional[str] = Query(default=None, description="Limit to one vault"),
    service: ISummaryService = Depends(get_summary_service),
) -> PaymentsOverTimeResponse:
    """
    Completed payments grouped by day and vault.
    """
    return await service.get_payments_over_time(days, vault_id)


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    service: ISummaryService = Depends(get_summary_service),
) -> DashboardSummary:
    return await service.get_dashboard()
