"""
Unit Tests for the ledger application services.

These tests verify:
1. Recording credit through the approval handshake
2. Settlement, rewards and score recomputation
3. Profile queries and administrative removal
4. Concurrent credits on one buyer
"""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from credit_ledger.application.dto import CreditRequest
from credit_ledger.application.services import (
    LedgerStore,
    SettlementEngine,
    TransactionRecorder,
)
from credit_ledger.domain.exceptions import (
    AlreadySettledException,
    ApprovalDeclinedException,
    ApprovalExpiredException,
    ApprovalRejectedException,
    BuyerNotFoundException,
    ChallengeNotFoundException,
    InvalidInputException,
    PersistenceUnavailableException,
    TransactionNotFoundException,
)


BUYER = "ABCDE1234F"
SELLER = "Sharma Kirana Store"


async def approve(pending):
    """Approver that reads the code back, as a buyer at the counter would."""
    return pending.code


async def record(recorder: TransactionRecorder, amount, buyer_id: str = BUYER) -> str:
    return await recorder.record_credit(buyer_id, SELLER, amount, approve)


# =============================================================================
# Recorder Tests
# =============================================================================

class TestBeginCredit:
    """Tests for issuing an approval challenge."""

    @pytest.mark.asyncio
    async def test_issues_challenge_and_sends_code(self, recorder, notifier, handshake):
        pending = await recorder.begin_credit(CreditRequest(" abcde1234f ", " Shop ", 500))

        assert pending.buyer_id == BUYER
        assert pending.seller == "Shop"
        assert pending.amount == Decimal("500.00")
        assert pending.code == "123456"
        assert pending.attempts_allowed == 3
        assert notifier.sent == [(BUYER, "123456")]
        assert handshake.pending_count == 1

    @pytest.mark.asyncio
    async def test_code_hidden_unless_exposed(self, store, handshake, notifier, scoring, clock):
        recorder = TransactionRecorder(store, handshake, notifier, scoring=scoring, clock=clock)

        pending = await recorder.begin_credit(CreditRequest(BUYER, SELLER, 500))

        assert pending.code is None

    @pytest.mark.asyncio
    async def test_nothing_is_written_before_approval(self, recorder, store, backend):
        await recorder.begin_credit(CreditRequest(BUYER, SELLER, 500))

        assert store.get(BUYER) is None
        assert await backend.get("credit_ledger") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "buyer_id,seller,amount",
        [
            ("", SELLER, 500),
            (BUYER, "  ", 500),
            (BUYER, SELLER, 0),
            (BUYER, SELLER, -100),
            (BUYER, SELLER, "lots"),
        ],
    )
    async def test_invalid_input_leaves_no_trace(
        self, recorder, notifier, handshake, store, buyer_id, seller, amount
    ):
        with pytest.raises(InvalidInputException):
            await recorder.begin_credit(CreditRequest(buyer_id, seller, amount))

        assert notifier.sent == []
        assert handshake.pending_count == 0
        assert store.profiles() == []

    @pytest.mark.asyncio
    async def test_all_errors_are_reported(self, recorder):
        with pytest.raises(InvalidInputException) as exc_info:
            await recorder.begin_credit(CreditRequest("", "", 0))

        assert "buyer_id" in exc_info.value.message
        assert "seller" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_undelivered_code_still_issues_challenge(self, recorder, notifier, handshake):
        notifier.delivered = False

        pending = await recorder.begin_credit(CreditRequest(BUYER, SELLER, 500))

        assert pending.challenge_id
        assert handshake.pending_count == 1


class TestConfirmCredit:
    """Tests for committing an approved credit."""

    @pytest.mark.asyncio
    async def test_first_credit_creates_profile(self, recorder, store, clock):
        pending = await recorder.begin_credit(CreditRequest(BUYER, SELLER, 2000))

        result = await recorder.confirm_credit(UUID(pending.challenge_id), "123456")

        assert result.new_profile is True
        assert result.transaction_id == str(int(clock.now.timestamp() * 1000))
        assert result.transaction.paid is False
        assert result.profile.outstanding == Decimal("2000")
        assert result.profile.score == 98

        profile = store.get(BUYER)
        assert profile.reward_points == 0
        assert len(profile.transactions) == 1

    @pytest.mark.asyncio
    async def test_second_credit_extends_profile(self, recorder):
        await record(recorder, 500)
        pending = await recorder.begin_credit(CreditRequest(BUYER, SELLER, 1000))

        result = await recorder.confirm_credit(UUID(pending.challenge_id), "123456")

        assert result.new_profile is False
        assert result.profile.transaction_count == 2
        assert result.profile.outstanding == Decimal("1500")
        assert result.profile.score == 99

    @pytest.mark.asyncio
    async def test_wrong_code_leaves_ledger_unchanged(self, recorder, store):
        pending = await recorder.begin_credit(CreditRequest(BUYER, SELLER, 500))

        with pytest.raises(ApprovalRejectedException) as exc_info:
            await recorder.confirm_credit(UUID(pending.challenge_id), "999999")

        assert exc_info.value.attempts_remaining == 2
        assert store.get(BUYER) is None

    @pytest.mark.asyncio
    async def test_challenge_cannot_be_reused(self, recorder, store):
        pending = await recorder.begin_credit(CreditRequest(BUYER, SELLER, 500))
        await recorder.confirm_credit(UUID(pending.challenge_id), "123456")

        with pytest.raises(ChallengeNotFoundException):
            await recorder.confirm_credit(UUID(pending.challenge_id), "123456")

        assert len(store.get(BUYER).transactions) == 1

    @pytest.mark.asyncio
    async def test_declined_credit_cannot_be_approved(self, recorder, store):
        pending = await recorder.begin_credit(CreditRequest(BUYER, SELLER, 500))
        await recorder.decline_credit(UUID(pending.challenge_id))

        with pytest.raises(ChallengeNotFoundException):
            await recorder.confirm_credit(UUID(pending.challenge_id), "123456")

        assert store.get(BUYER) is None

    @pytest.mark.asyncio
    async def test_storage_failure_is_reported_and_rolled_back(
        self, flaky_backend, handshake, notifier, scoring, clock
    ):
        store = LedgerStore(flaky_backend)
        recorder = TransactionRecorder(
            store, handshake, notifier, scoring=scoring, clock=clock, expose_code=True
        )

        with pytest.raises(PersistenceUnavailableException):
            await record(recorder, 500)

        assert store.get(BUYER) is None


class TestRecordCredit:
    """Tests for the one-call credit flow with an approver callback."""

    @pytest.mark.asyncio
    async def test_returns_transaction_id(self, recorder, store):
        txn_id = await record(recorder, 500)

        assert store.get(BUYER).find_transaction(txn_id) is not None

    @pytest.mark.asyncio
    async def test_buyer_id_is_case_insensitive(self, recorder, store):
        await record(recorder, 500, buyer_id="abcde1234f")
        await record(recorder, 700, buyer_id=" ABCDE1234F")

        assert [p.id for p in store.profiles()] == [BUYER]
        assert len(store.get(BUYER).transactions) == 2

    @pytest.mark.asyncio
    async def test_approver_decline(self, recorder, store, handshake):
        async def decline(pending):
            return None

        with pytest.raises(ApprovalDeclinedException):
            await recorder.record_credit(BUYER, SELLER, 500, decline)

        assert store.get(BUYER) is None
        assert handshake.pending_count == 0

    @pytest.mark.asyncio
    async def test_approver_failure_discards_challenge(self, recorder, store, handshake):
        async def broken(pending):
            raise RuntimeError("device offline")

        with pytest.raises(RuntimeError):
            await recorder.record_credit(BUYER, SELLER, 500, broken)

        assert store.get(BUYER) is None
        assert handshake.pending_count == 0

    @pytest.mark.asyncio
    async def test_amount_is_recorded_exactly(self, recorder, store):
        txn_id = await record(recorder, Decimal("12.345"))

        assert store.get(BUYER).find_transaction(txn_id).amount == Decimal("12.345")

    @pytest.mark.asyncio
    async def test_late_decline_is_still_a_decline(self, recorder, store, clock):
        async def slow_decline(pending):
            clock.advance(seconds=301)
            await recorder.begin_credit(CreditRequest("ZZZZZ9999Z", SELLER, 100))
            return None

        with pytest.raises(ApprovalDeclinedException):
            await recorder.record_credit(BUYER, SELLER, 500, slow_decline)

        assert store.get(BUYER) is None

    @pytest.mark.asyncio
    async def test_late_code_is_expired(self, recorder, store, clock):
        async def slow_approve(pending):
            clock.advance(seconds=301)
            await recorder.begin_credit(CreditRequest("ZZZZZ9999Z", SELLER, 100))
            return pending.code

        with pytest.raises(ApprovalExpiredException):
            await recorder.record_credit(BUYER, SELLER, 500, slow_approve)

        assert store.get(BUYER) is None

    @pytest.mark.asyncio
    async def test_cancellation_propagates_after_expiry(self, recorder, clock):
        async def cancelled(pending):
            clock.advance(seconds=301)
            await recorder.begin_credit(CreditRequest("ZZZZZ9999Z", SELLER, 100))
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await recorder.record_credit(BUYER, SELLER, 500, cancelled)

    @pytest.mark.asyncio
    async def test_wrong_code_from_approver(self, recorder, store):
        async def mistyped(pending):
            return "000000"

        with pytest.raises(ApprovalRejectedException):
            await recorder.record_credit(BUYER, SELLER, 500, mistyped)

        assert store.get(BUYER) is None

    @pytest.mark.asyncio
    async def test_same_millisecond_credits_get_distinct_ids(self, recorder, store):
        first = await record(recorder, 100)
        second = await record(recorder, 200)

        assert first != second
        assert int(second) == int(first) + 1

    @pytest.mark.asyncio
    async def test_concurrent_credits_on_one_buyer(self, recorder, store):
        amounts = [100 * (n + 1) for n in range(10)]

        ids = await asyncio.gather(*(record(recorder, a) for a in amounts))

        profile = store.get(BUYER)
        assert len(set(ids)) == 10
        assert len(profile.transactions) == 10
        assert profile.outstanding == Decimal(sum(amounts))
        assert profile.score == 95


# =============================================================================
# Settlement Tests
# =============================================================================

class TestSettlement:
    """Tests for SettlementEngine.settle."""

    @pytest.mark.asyncio
    async def test_reward_scenario(self, recorder, engine, store, clock):
        """500 repaid within the year, then 2000 outstanding."""
        first = await record(recorder, 500)

        clock.now = datetime(2025, 11, 20, 6, 30, tzinfo=timezone.utc)
        settled = await engine.settle(BUYER, first)

        assert settled.points_awarded == 10
        assert settled.profile.reward_points == 10
        assert settled.profile.score == 100
        assert settled.profile.outstanding == Decimal("0")

        clock.now = datetime(2025, 12, 1, 8, 0, tzinfo=timezone.utc)
        await record(recorder, 2000)

        profile = store.get(BUYER)
        assert profile.outstanding == Decimal("2000")
        assert profile.score == 98
        assert profile.reward_points == 10
        assert [t.paid for t in profile.transactions] == [True, False]

    @pytest.mark.asyncio
    async def test_next_year_settlement_earns_no_reward(self, recorder, engine, clock):
        clock.now = datetime(2025, 3, 15, 6, 30, tzinfo=timezone.utc)
        txn_id = await record(recorder, 3000)

        clock.now = datetime(2025, 4, 2, 6, 30, tzinfo=timezone.utc)
        settled = await engine.settle(BUYER, txn_id)

        assert settled.points_awarded == 0
        assert settled.profile.reward_points == 0
        assert settled.profile.score == 100

    @pytest.mark.asyncio
    async def test_settlement_raises_score(self, recorder, engine):
        first = await record(recorder, 5000)
        await record(recorder, 2000)

        settled = await engine.settle(BUYER, first)

        assert settled.profile.score == 98
        assert settled.profile.outstanding == Decimal("2000")

    @pytest.mark.asyncio
    async def test_double_settlement_is_refused(self, recorder, engine, store):
        txn_id = await record(recorder, 500)
        await engine.settle(BUYER, txn_id)

        with pytest.raises(AlreadySettledException):
            await engine.settle(BUYER, txn_id)

        assert store.get(BUYER).reward_points == 10

    @pytest.mark.asyncio
    async def test_unknown_buyer(self, engine):
        with pytest.raises(BuyerNotFoundException):
            await engine.settle("ZZZZZ9999Z", "1")

    @pytest.mark.asyncio
    async def test_unknown_buyers_leave_no_locks_behind(self, engine, store):
        for n in range(100):
            with pytest.raises(BuyerNotFoundException):
                await engine.settle(f"UNKNOWN{n}", "1")

        assert store._buyer_locks == {}

    @pytest.mark.asyncio
    async def test_unknown_transaction(self, recorder, engine):
        await record(recorder, 500)

        with pytest.raises(TransactionNotFoundException):
            await engine.settle(BUYER, "1")

    @pytest.mark.asyncio
    async def test_failed_write_leaves_transaction_unpaid(
        self, flaky_backend, handshake, notifier, scoring, clock
    ):
        store = LedgerStore(flaky_backend)
        recorder = TransactionRecorder(
            store, handshake, notifier, scoring=scoring, clock=clock, expose_code=True
        )
        flaky_backend.fail_set = False
        txn_id = await record(recorder, 500)

        flaky_backend.fail_set = True
        with pytest.raises(PersistenceUnavailableException):
            await SettlementEngine(store, scoring=scoring, clock=clock).settle(BUYER, txn_id)

        profile = store.get(BUYER)
        assert profile.find_transaction(txn_id).paid is False
        assert profile.reward_points == 0


# =============================================================================
# Query Service Tests
# =============================================================================

class TestLedgerQueryService:
    """Tests for LedgerQueryService."""

    @pytest.mark.asyncio
    async def test_get_profile(self, recorder, ledger_service):
        txn_id = await record(recorder, 2000)

        profile = await ledger_service.get_profile("abcde1234f")

        assert profile.buyer_id == BUYER
        assert profile.score == 98
        assert profile.outstanding == Decimal("2000")
        assert [t.transaction_id for t in profile.transactions] == [txn_id]

    @pytest.mark.asyncio
    async def test_get_unknown_profile(self, ledger_service):
        with pytest.raises(BuyerNotFoundException):
            await ledger_service.get_profile("ZZZZZ9999Z")

    @pytest.mark.asyncio
    async def test_list_profiles(self, recorder, ledger_service):
        await record(recorder, 500, buyer_id="AAAAA1111A")
        await record(recorder, 700, buyer_id="BBBBB2222B")

        summaries = await ledger_service.list_profiles()

        assert [s.buyer_id for s in summaries] == ["AAAAA1111A", "BBBBB2222B"]
        assert summaries[1].unpaid_count == 1

    @pytest.mark.asyncio
    async def test_remove_profile(self, recorder, ledger_service, store, backend):
        await record(recorder, 500)

        await ledger_service.remove_profile(BUYER)

        assert store.get(BUYER) is None
        assert await backend.get("credit_ledger") == "{}"

    @pytest.mark.asyncio
    async def test_remove_unknown_profile(self, ledger_service):
        with pytest.raises(BuyerNotFoundException):
            await ledger_service.remove_profile("ZZZZZ9999Z")
