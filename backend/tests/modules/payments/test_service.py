"""Tests for the payments service."""

import pytest
from datetime import datetime, timedelta, timezone

from modules.payments.exceptions import (
    InvalidAmountError,
    InvalidStatusTransitionError,
    PaymentNotExecutableError,
    PaymentNotFoundError,
)
from modules.payments.models import (
    CreatePaymentRequest,
    DateFilter,
    PaymentFilters,
    PaymentStatus,
    RecordExecutionRequest,
    UpdatePaymentRequest,
)
from modules.payments.repository import PaymentRepository
from modules.payments.service import PaymentService, can_transition
from modules.vaults.exceptions import VaultNotFoundError

from tests.conftest import OTHER_USER_ID, TEST_USER_ID

RECIPIENT = "0x" + "ab" * 20
TX_HASH = "0x" + "cd" * 32


@pytest.fixture
def vault(fake_db):
    return fake_db.add_vault(TEST_USER_ID, "Ops", "ops")


@pytest.fixture
def foreign_vault(fake_db):
    return fake_db.add_vault(OTHER_USER_ID, "Theirs", "theirs")


@pytest.fixture
def service(scope) -> PaymentService:
    return PaymentService(PaymentRepository(scope))


def create_request(vault_id: str, **overrides) -> CreatePaymentRequest:
    values = {"vault_id": vault_id, "recipient_address": RECIPIENT, "amount": "12.5"}
    values.update(overrides)
    return CreatePaymentRequest(**values)


class TestCanTransition:
    @pytest.mark.parametrize(
        "current, requested",
        [
            ("pending", "active"),
            ("pending", "cancelled"),
            ("active", "paused"),
            ("active", "completed"),
            ("active", "cancelled"),
            ("paused", "active"),
            ("paused", "cancelled"),
        ],
    )
    def test_allowed(self, current, requested):
        assert can_transition(PaymentStatus(current), PaymentStatus(requested))

    @pytest.mark.parametrize(
        "current, requested",
        [
            ("completed", "active"),
            ("cancelled", "active"),
            ("paused", "completed"),
            ("pending", "paused"),
        ],
    )
    def test_rejected(self, current, requested):
        assert not can_transition(PaymentStatus(current), PaymentStatus(requested))


class TestCreatePayments:
    @pytest.mark.asyncio
    async def test_single_payment(self, service, vault):
        [payment] = await service.create_payments(create_request(vault["id"]))

        assert payment.amount == "12500000"
        assert payment.status == PaymentStatus.ACTIVE
        assert payment.series_id is None
        assert payment.executed_count == 0
        assert payment.transaction_hashes == []
        assert payment.next_execution_date is not None

    @pytest.mark.asyncio
    async def test_amount_in_base_units(self, service, vault):
        [payment] = await service.create_payments(
            create_request(vault["id"], amount=None, amount_base_units="250000")
        )
        assert payment.amount == "250000"

    @pytest.mark.asyncio
    async def test_too_many_decimals(self, service, vault):
        with pytest.raises(InvalidAmountError):
            await service.create_payments(create_request(vault["id"], amount="1.1234567"))

    @pytest.mark.asyncio
    async def test_series_shares_id_and_spaces_dates(self, service, vault):
        start = datetime(2026, 3, 1, tzinfo=timezone.utc)
        payments = await service.create_payments(
            create_request(
                vault["id"],
                next_execution_date=start,
                occurrences=3,
                interval_seconds=7 * 24 * 3600,
            )
        )

        assert len(payments) == 3
        assert len({p.series_id for p in payments}) == 1
        assert payments[0].series_id is not None
        assert [p.next_execution_date for p in payments] == [
            start,
            start + timedelta(weeks=1),
            start + timedelta(weeks=2),
        ]

    @pytest.mark.asyncio
    async def test_foreign_vault_is_not_found(self, service, foreign_vault, fake_db):
        with pytest.raises(VaultNotFoundError):
            await service.create_payments(create_request(foreign_vault["id"]))
        assert fake_db.tables["payments"] == []

    def test_series_needs_interval(self, vault):
        with pytest.raises(ValueError, match="interval_seconds"):
            create_request(vault["id"], occurrences=2)

    def test_exactly_one_amount_form(self, vault):
        with pytest.raises(ValueError, match="exactly one"):
            create_request(vault["id"], amount_base_units="1")


class TestListPayments:
    @pytest.mark.asyncio
    async def test_ordered_by_next_execution_and_scoped(self, service, vault, foreign_vault, fake_db):
        fake_db.add_payment(vault["id"], next_execution_date="2026-05-02T00:00:00+00:00")
        fake_db.add_payment(vault["id"], next_execution_date="2026-05-01T00:00:00+00:00")
        fake_db.add_payment(foreign_vault["id"], next_execution_date="2026-04-01T00:00:00+00:00")

        result = await service.list_payments()

        assert result.total == 2
        assert [p.next_execution_date.day for p in result.payments] == [1, 2]
        assert result.payments[0].vault.handle == "ops"

    @pytest.mark.asyncio
    async def test_overdue_and_upcoming(self, service, vault, fake_db):
        now = datetime.now(timezone.utc)
        late = fake_db.add_payment(vault["id"], next_execution_date=(now - timedelta(days=1)).isoformat())
        soon = fake_db.add_payment(vault["id"], next_execution_date=(now + timedelta(days=1)).isoformat())

        overdue = await service.list_payments(PaymentFilters(date_filter=DateFilter.OVERDUE))
        upcoming = await service.list_payments(PaymentFilters(date_filter=DateFilter.UPCOMING))

        assert [p.id for p in overdue.payments] == [late["id"]]
        assert [p.id for p in upcoming.payments] == [soon["id"]]

    @pytest.mark.asyncio
    async def test_status_and_vault_filters(self, service, vault, fake_db):
        other_vault = fake_db.add_vault(TEST_USER_ID, "Payroll", "payroll")
        paused = fake_db.add_payment(vault["id"], status="paused")
        fake_db.add_payment(vault["id"])
        fake_db.add_payment(other_vault["id"], status="paused")

        result = await service.list_payments(
            PaymentFilters(status=PaymentStatus.PAUSED, vault_id=vault["id"])
        )

        assert [p.id for p in result.payments] == [paused["id"]]


class TestUpdatePayment:
    @pytest.mark.asyncio
    async def test_valid_transition_is_recorded_in_history(self, service, vault):
        [payment] = await service.create_payments(create_request(vault["id"]))

        updated = await service.update_payment(
            payment.id, UpdatePaymentRequest(status=PaymentStatus.PAUSED)
        )
        history = await service.get_status_history(payment.id)

        assert updated.status == PaymentStatus.PAUSED
        assert [(c.old_status, c.new_status) for c in history.changes] == [
            (None, PaymentStatus.ACTIVE),
            (PaymentStatus.ACTIVE, PaymentStatus.PAUSED),
        ]

    @pytest.mark.asyncio
    async def test_terminal_status_cannot_change(self, service, vault, fake_db):
        payment = fake_db.add_payment(vault["id"], status="cancelled")
        with pytest.raises(InvalidStatusTransitionError):
            await service.update_payment(
                payment["id"], UpdatePaymentRequest(status=PaymentStatus.ACTIVE)
            )

    @pytest.mark.asyncio
    async def test_details_update(self, service, vault):
        [payment] = await service.create_payments(create_request(vault["id"]))
        updated = await service.update_payment(
            payment.id, UpdatePaymentRequest(recipient_name="Alice", description="Design")
        )
        assert updated.recipient_name == "Alice"
        assert updated.description == "Design"
        assert updated.status == PaymentStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_empty_update_returns_current(self, service, vault):
        [payment] = await service.create_payments(create_request(vault["id"]))
        assert (await service.update_payment(payment.id, UpdatePaymentRequest())).id == payment.id

    @pytest.mark.asyncio
    async def test_foreign_payment_is_not_found(self, service, foreign_vault, fake_db):
        theirs = fake_db.add_payment(foreign_vault["id"])
        with pytest.raises(PaymentNotFoundError):
            await service.update_payment(theirs["id"], UpdatePaymentRequest(recipient_name="x"))
        assert fake_db.tables["payments"][0]["recipient_name"] is None


class TestRecordExecution:
    @pytest.mark.asyncio
    async def test_records_hash_and_completes(self, service, vault):
        [payment] = await service.create_payments(create_request(vault["id"]))

        executed = await service.record_execution(
            payment.id, RecordExecutionRequest(transaction_hash=TX_HASH)
        )

        assert executed.status == PaymentStatus.COMPLETED
        assert executed.transaction_hashes == [TX_HASH]
        assert executed.executed_count == 1
        assert executed.last_payment_date is not None
        assert executed.next_execution_date is None

    @pytest.mark.asyncio
    async def test_completed_payment_cannot_be_executed_again(self, service, vault):
        [payment] = await service.create_payments(create_request(vault["id"]))
        await service.record_execution(payment.id, RecordExecutionRequest(transaction_hash=TX_HASH))

        with pytest.raises(PaymentNotExecutableError) as exc_info:
            await service.record_execution(
                payment.id, RecordExecutionRequest(transaction_hash="0x" + "ef" * 32)
            )
        assert exc_info.value.details["status"] == "completed"

    @pytest.mark.asyncio
    async def test_paused_payment_cannot_be_executed(self, service, vault, fake_db):
        payment = fake_db.add_payment(vault["id"], status="paused")
        with pytest.raises(PaymentNotExecutableError):
            await service.record_execution(
                payment["id"], RecordExecutionRequest(transaction_hash=TX_HASH)
            )

    def test_malformed_hash_is_rejected(self):
        with pytest.raises(ValueError):
            RecordExecutionRequest(transaction_hash="0x1234")


class TestDeleteAndHistory:
    @pytest.mark.asyncio
    async def test_delete(self, service, vault, fake_db):
        [payment] = await service.create_payments(create_request(vault["id"]))
        await service.delete_payment(payment.id)
        assert fake_db.tables["payments"] == []

    @pytest.mark.asyncio
    async def test_delete_foreign_payment_is_not_found(self, service, foreign_vault, fake_db):
        theirs = fake_db.add_payment(foreign_vault["id"])
        with pytest.raises(PaymentNotFoundError):
            await service.delete_payment(theirs["id"])
        assert len(fake_db.tables["payments"]) == 1

    @pytest.mark.asyncio
    async def test_history_of_foreign_payment_is_not_found(self, service, foreign_vault, fake_db):
        theirs = fake_db.add_payment(foreign_vault["id"])
        with pytest.raises(PaymentNotFoundError):
            await service.get_status_history(theirs["id"])
