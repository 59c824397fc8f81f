"""
Payment API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_payment_service

from .interfaces import IPaymentService
from .models import (
    CreatePaymentRequest,
    DateFilter,
    Payment,
    PaymentFilters,
    PaymentHistoryResponse,
    PaymentListResponse,
    PaymentStatus,
    RecordExecutionRequest,
    UpdatePaymentRequest,
)

router = APIRouter()


@router.post("", response_model=PaymentListResponse, status_code=201)
async def create_payment(
    request: CreatePaymentRequest,
    service: IPaymentService = Depends(get_payment_service),
) -> PaymentListResponse:
    """
    Create a payment.

    With `occurrences` > 1 a series is created, one payment every
    `interval_seconds`, all sharing a `series_id`.
    """
    payments = await service.create_payments(request)
    return PaymentListResponse(payments=payments, total=len(payments))


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    status: Optional[PaymentStatus] = Query(default=None, description="Filter by status"),
    vault_id: Optional[str] = Query(default=None, description="Filter by vault"),
    series_id: Optional[str] = Query(default=None, description="Filter by series"),
    date_filter: Optional[DateFilter] = Query(
        default=None, description="overdue or upcoming, relative to now"
    ),
    service: IPaymentService = Depends(get_payment_service),
) -> PaymentListResponse:
    """
    List the current user's payments, soonest first.
    """
    filters = PaymentFilters(
        status=status,
        vault_id=vault_id,
        series_id=series_id,
        date_filter=date_filter,
    )
    return await service.list_payments(filters)


@router.get("/{payment_id}", response_model=Payment)
async def get_payment(
    payment_id: str,
    service: IPaymentService = Depends(get_payment_service),
) -> Payment:
    return await service.get_payment(payment_id)


@router.patch("/{payment_id}", response_model=Payment)
async def update_payment(
    payment_id: str,
    request: UpdatePaymentRequest,
    service: IPaymentService = Depends(get_payment_service),
) -> Payment:
    """
    Update a payment.

    Status changes must follow pending -> active/cancelled,
    active -> paused/completed/cancelled, paused -> active/cancelled.
    """
    return await service.update_payment(payment_id, request)


@router.delete("/{payment_id}", status_code=204)
async def delete_payment(
    payment_id: str,
    service: IPaymentService = Depends(get_payment_service),
) -> None:
    await service.delete_payment(payment_id)


@router.post("/{payment_id}/executions", response_model=Payment)
async def record_execution(
    payment_id: str,
    request: RecordExecutionRequest,
    service: IPaymentService = Depends(get_payment_service),
) -> Payment:
    """
    Record a payment sent from the user's wallet.

    The transaction is not sent or checked here; the hash returned by the
    wallet is stored and the payment is marked completed.
    """
    return await service.record_execution(payment_id, request)


@router.get("/{payment_id}/history", response_model=PaymentHistoryResponse)
async def get_payment_history(
    payment_id: str,
    service: IPaymentService = Depends(get_payment_service),
) -> PaymentHistoryResponse:
    """
    Status history of a payment, oldest first.
    """
    return await service.get_status_history(payment_id)
