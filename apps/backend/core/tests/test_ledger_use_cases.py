"""
Tests for the ledger use cases (create, approve, queries, rates, KYC).

Run with: pytest apps/backend/core/tests/test_ledger_use_cases.py -v
"""

import pytest
from dataclasses import replace
from decimal import Decimal

from apps.backend.core.domain.errors import (
    AccountNotConfigured,
    AlreadyApproved,
    MissingProof,
    NotFound,
    ValidationError,
    VerificationRequired,
)
from apps.backend.core.domain.exchange import (
    CliqType,
    CurrencyBasis,
    DocumentUpload,
    KycStatus,
    Network,
    PaymentMethod,
    TradeType,
    TransactionStatus,
)
from apps.backend.core.application.use_cases import (
    ApproveKycUseCase,
    ApproveTransactionUseCase,
    CreateTransactionUseCase,
    QuoteTradeUseCase,
    SubmitKycDocumentUseCase,
    TransactionQueries,
    UpdateRateConfigurationUseCase,
    loyalty_points_for,
    order_for_review,
)
from apps.backend.core.tests.fakes import PDF_BYTES, PNG_BYTES, make_profile, make_rates


class RecordingUnitOfWork:
    def __init__(self):
        self.entered = 0
        self.rolled_back = 0

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.rolled_back += 1
        return False


@pytest.fixture
def proof():
    return DocumentUpload("receipt.png", PNG_BYTES, "image/png")


@pytest.fixture
def create_uc(transaction_repo, user_repo, rate_repo, storage, bus, clock):
    return CreateTransactionUseCase(transaction_repo, user_repo, rate_repo, storage, bus, clock)


@pytest.fixture
def approve_uc(transaction_repo, user_repo, bus, clock):
    return ApproveTransactionUseCase(transaction_repo, user_repo, bus, clock)


class TestCreateTransaction:
    def test_buy_foreign_basis_persists_native_amount(self, create_uc, bus):
        txn = create_uc.execute(
            1,
            {"type": "buy", "amount": "100", "basis": "foreign", "payment_method": "cliq"},
            DocumentUpload("receipt.png", PNG_BYTES),
        )

        assert txn.id == 1
        assert txn.status == TransactionStatus.PENDING
        assert txn.type == TradeType.BUY
        assert txn.amount == Decimal("71.00")
        assert txn.basis == CurrencyBasis.FOREIGN
        assert txn.rate == Decimal("0.71")
        assert txn.commission == Decimal("0.02")
        assert txn.fee == Decimal("1.42")
        assert txn.final_amount == Decimal("72.42")
        assert txn.payment_method == PaymentMethod.CLIQ
        assert txn.network is None
        assert txn.cliq_type is None

    def test_sell_captures_cliq_snapshot(self, create_uc, proof):
        txn = create_uc.execute(1, {"type": "sell", "amount": "50", "network": "bep20"}, proof)

        assert txn.amount == Decimal("50")
        assert txn.final_amount == Decimal("33.81")
        assert txn.fee == Decimal("1.00")
        assert txn.network == Network.BEP20
        assert txn.payment_method is None
        assert txn.cliq_type == CliqType.ALIAS
        assert txn.cliq_alias == "AHMAD1"
        assert txn.cliq_number is None

    def test_stores_proof_reference(self, create_uc, storage, proof):
        txn = create_uc.execute(1, {"type": "buy", "amount": "10", "payment_method": "wallet"}, proof)

        assert txn.proof_of_payment.startswith("payment_proofs/1/")
        assert storage.open(txn.proof_of_payment) == PNG_BYTES

    def test_publishes_transaction_created(self, create_uc, bus, proof):
        txn = create_uc.execute(1, {"type": "buy", "amount": "10", "payment_method": "cliq"}, proof)

        events = bus.events_of("TransactionCreated")
        assert len(events) == 1
        assert events[0].transaction_id == txn.id
        assert events[0].user_id == 1
        assert events[0].currency == "JOD"
        assert events[0].metadata["full_name"] == "User 1"

    def test_rate_is_captured_by_value(self, create_uc, rate_repo, transaction_repo, proof):
        txn = create_uc.execute(1, {"type": "sell", "amount": "50", "network": "trc20"}, proof)

        rate_repo.replace(make_rates(sell_rate=Decimal("0.80")))

        assert transaction_repo.find_by_id(txn.id).rate == Decimal("0.69")

    def test_explicit_rates_snapshot_wins(self, create_uc, proof):
        txn = create_uc.execute(
            1,
            {"type": "sell", "amount": "50", "network": "trc20"},
            proof,
            rates=make_rates(sell_rate=Decimal("0.70")),
        )

        assert txn.rate == Decimal("0.70")

    @pytest.mark.parametrize("amount", ["0", "-1", "1.234", "abc", "1e2"])
    def test_rejects_invalid_amounts(self, create_uc, transaction_repo, bus, proof, amount):
        with pytest.raises(ValidationError):
            create_uc.execute(1, {"type": "buy", "amount": amount, "payment_method": "cliq"}, proof)

        assert transaction_repo.list_all() == []
        assert bus.published_events == []

    @pytest.mark.parametrize(
        "amount", ["1000000000000", "99999999999999999999", "1" + "0" * 30]
    )
    def test_rejects_amounts_beyond_ledger_capacity(
        self, create_uc, transaction_repo, storage, bus, proof, amount
    ):
        with pytest.raises(ValidationError) as exc:
            create_uc.execute(1, {"type": "buy", "amount": amount, "payment_method": "cliq"}, proof)

        assert exc.value.field == "amount"
        assert transaction_repo.list_all() == []
        assert storage.files == {}
        assert bus.published_events == []

    def test_rejects_conversion_overflowing_ledger(self, create_uc, transaction_repo, storage, proof):
        tiny_rate = make_rates(buy_rate=Decimal("0.00000001"))

        with pytest.raises(ValidationError) as exc:
            create_uc.execute(
                1,
                {"type": "buy", "amount": "999999999999", "payment_method": "cliq"},
                proof,
                rates=tiny_rate,
            )

        assert exc.value.field == "amount"
        assert transaction_repo.list_all() == []
        assert storage.files == {}

    def test_rejects_amount_rounding_to_zero(self, create_uc, transaction_repo, storage, bus, proof):
        with pytest.raises(ValidationError) as exc:
            create_uc.execute(
                1,
                {"type": "sell", "amount": "0.01", "basis": "foreign", "network": "trc20"},
                proof,
                rates=make_rates(sell_rate=Decimal("2.5")),
            )

        assert exc.value.field == "amount"
        assert "too small" in str(exc.value)
        assert transaction_repo.list_all() == []
        assert storage.files == {}
        assert bus.published_events == []

    def test_sell_without_cliq_settings_then_with(self, create_uc, user_repo, proof):
        user_repo.add(make_profile(1, cliq_type=None, cliq_alias=None))
        payload = {"type": "sell", "amount": "50", "network": "trc20"}

        with pytest.raises(AccountNotConfigured):
            create_uc.execute(1, payload, proof)

        user_repo.add(make_profile(1, cliq_type=CliqType.NUMBER, cliq_number="00962791234567"))
        txn = create_uc.execute(1, payload, proof)

        assert txn.cliq_type == CliqType.NUMBER
        assert txn.cliq_number == "00962791234567"

    def test_unverified_user_rejected(self, create_uc, user_repo, storage, proof):
        user_repo.add(make_profile(1, kyc_status=KycStatus.PENDING))

        with pytest.raises(VerificationRequired):
            create_uc.execute(1, {"type": "buy", "amount": "10", "payment_method": "cliq"}, proof)
        assert storage.files == {}

    def test_missing_proof_rejected(self, create_uc):
        with pytest.raises(MissingProof):
            create_uc.execute(1, {"type": "buy", "amount": "10", "payment_method": "cliq"}, None)

    def test_unknown_user(self, create_uc, proof):
        with pytest.raises(NotFound):
            create_uc.execute(999, {"type": "buy", "amount": "10", "payment_method": "cliq"}, proof)

    def test_insert_runs_inside_unit_of_work(
        self, transaction_repo, user_repo, rate_repo, storage, bus, clock, proof
    ):
        uow = RecordingUnitOfWork()
        uc = CreateTransactionUseCase(
            transaction_repo, user_repo, rate_repo, storage, bus, clock, uow=uow
        )

        uc.execute(1, {"type": "buy", "amount": "10", "payment_method": "cliq"}, proof)

        assert uow.entered == 1
        assert uow.rolled_back == 0

    def test_concurrent_creates_are_independent(self, create_uc, transaction_repo, proof):
        payload = {"type": "buy", "amount": "10", "payment_method": "cliq"}

        first = create_uc.execute(1, payload, proof)
        second = create_uc.execute(1, payload, proof)

        assert first.id != second.id
        assert len(transaction_repo.list_for_user(1)) == 2


class TestApproveTransaction:
    @pytest.fixture
    def pending(self, create_uc, proof):
        return create_uc.execute(1, {"type": "buy", "amount": "250", "payment_method": "cliq"}, proof)

    def test_approve_awards_floor_loyalty_points(self, approve_uc, pending, user_repo):
        approved = approve_uc.execute(pending.id, approver_id=100)

        assert approved.status == TransactionStatus.APPROVED
        assert approved.approved_by == 100
        assert approved.approved_at is not None
        assert user_repo.get_profile(1).loyalty_points == 2

    def test_second_approval_conflicts_without_side_effects(
        self, approve_uc, pending, user_repo, bus
    ):
        approve_uc.execute(pending.id, approver_id=100)

        with pytest.raises(AlreadyApproved):
            approve_uc.execute(pending.id, approver_id=101)

        assert user_repo.get_profile(1).loyalty_points == 2
        assert len(bus.events_of("TransactionApproved")) == 1

    def test_unknown_transaction(self, approve_uc):
        with pytest.raises(NotFound):
            approve_uc.execute(404, approver_id=100)

    def test_publishes_transaction_approved(self, approve_uc, pending, bus):
        approve_uc.execute(pending.id, approver_id=100)

        event = bus.events_of("TransactionApproved")[0]
        assert event.transaction_id == pending.id
        assert event.user_id == 1
        assert event.approver_id == 100
        assert event.loyalty_points_awarded == 2

    def test_pricing_facts_unchanged_by_approval(self, approve_uc, pending):
        approved = approve_uc.execute(pending.id, approver_id=100)

        assert (approved.amount, approved.rate, approved.fee, approved.final_amount) == (
            pending.amount,
            pending.rate,
            pending.fee,
            pending.final_amount,
        )

    def test_small_amount_awards_no_points(self, create_uc, approve_uc, user_repo, proof):
        txn = create_uc.execute(1, {"type": "buy", "amount": "99.99", "payment_method": "cliq"}, proof)

        approve_uc.execute(txn.id, approver_id=100)

        assert user_repo.get_profile(1).loyalty_points == 0

    def test_custom_loyalty_divisor(self, transaction_repo, user_repo, bus, clock, pending):
        uc = ApproveTransactionUseCase(
            transaction_repo, user_repo, bus, clock, loyalty_divisor=Decimal("50")
        )

        uc.execute(pending.id, approver_id=100)

        assert user_repo.get_profile(1).loyalty_points == 5


@pytest.mark.parametrize(
    "amount,points",
    [("0.01", 0), ("99.99", 0), ("100", 1), ("250", 2), ("1099.50", 10)],
)
def test_loyalty_points_for(amount, points):
    assert loyalty_points_for(Decimal(amount)) == points


class TestTransactionQueries:
    def test_get_unknown_raises(self, transaction_repo):
        with pytest.raises(NotFound):
            TransactionQueries(transaction_repo).get(1)

    def test_list_for_user_only_returns_own(self, create_uc, user_repo, transaction_repo, proof):
        user_repo.add(make_profile(2))
        payload = {"type": "buy", "amount": "10", "payment_method": "cliq"}
        create_uc.execute(1, payload, proof)
        create_uc.execute(2, payload, proof)

        rows = TransactionQueries(transaction_repo).list_for_user(2)

        assert [t.user_id for t in rows] == [2]

    def test_list_all_orders_pending_oldest_first_then_approved_newest_first(
        self, create_uc, approve_uc, transaction_repo, proof
    ):
        payload = {"type": "buy", "amount": "10", "payment_method": "cliq"}
        created = [create_uc.execute(1, payload, proof) for _ in range(4)]
        approve_uc.execute(created[0].id, approver_id=100)
        approve_uc.execute(created[2].id, approver_id=100)

        ordered = TransactionQueries(transaction_repo).list_all()

        assert [t.id for t in ordered] == [
            created[1].id,
            created[3].id,
            created[2].id,
            created[0].id,
        ]

    def test_order_for_review_empty(self):
        assert order_for_review([]) == []


class TestRateConfiguration:
    def test_update_replaces_whole_configuration(self, rate_repo):
        uc = UpdateRateConfigurationUseCase(rate_repo)

        saved = uc.execute(
            {
                "buy_rate": "0.72",
                "buy_commission_rate": "0.01",
                "sell_rate": "0.70",
                "sell_commission_rate": "0.015",
            },
            actor_id=100,
        )

        assert saved.buy_rate == Decimal("0.72")
        assert saved.sell_commission_rate == Decimal("0.015")
        # Omitted receiving details are cleared, not merged
        assert saved.cliq_alias == ""
        assert rate_repo.get() == saved

    def test_update_requires_every_rate(self, rate_repo, rates):
        uc = UpdateRateConfigurationUseCase(rate_repo)

        with pytest.raises(ValidationError) as exc:
            uc.execute({"buy_rate": "0.72"}, actor_id=100)

        assert exc.value.field == "buy_commission_rate"
        assert rate_repo.get() == rates

    @pytest.mark.parametrize(
        "field,value",
        [("buy_rate", "0"), ("sell_rate", "-1"), ("buy_commission_rate", "1.5"), ("sell_rate", "abc")],
    )
    def test_update_rejects_out_of_range(self, rate_repo, field, value):
        values = {
            "buy_rate": "0.71",
            "buy_commission_rate": "0.02",
            "sell_rate": "0.69",
            "sell_commission_rate": "0.02",
            field: value,
        }

        with pytest.raises(ValidationError) as exc:
            UpdateRateConfigurationUseCase(rate_repo).execute(values, actor_id=100)
        assert exc.value.field == field

    def test_quote_reads_current_rates(self, rate_repo):
        uc = QuoteTradeUseCase(rate_repo)
        payload = {"type": "buy", "amount": "100", "basis": "foreign"}

        assert uc.execute(payload).final_amount == Decimal("72.42")

        rate_repo.replace(replace(rate_repo.get(), buy_rate=Decimal("1")))
        assert uc.execute(payload).final_amount == Decimal("102.00")

    @pytest.mark.parametrize("amount", ["9999999999999999999999999999", "1" + "0" * 30])
    def test_quote_rejects_oversized_amount(self, rate_repo, amount):
        with pytest.raises(ValidationError) as exc:
            QuoteTradeUseCase(rate_repo).execute({"type": "buy", "amount": amount})
        assert exc.value.field == "amount"


class TestKyc:
    def test_submit_stores_document_and_resets_status(self, user_repo, storage, bus, clock):
        uc = SubmitKycDocumentUseCase(user_repo, storage, bus, clock)

        reference = uc.execute(1, DocumentUpload("id.pdf", PDF_BYTES))

        assert reference.startswith("kyc/1/")
        assert user_repo.kyc_documents[1] == reference
        assert user_repo.get_profile(1).kyc_status == KycStatus.PENDING
        event = bus.events_of("KycSubmitted")[0]
        assert event.user_id == 1
        assert event.full_name == "User 1"

    def test_submit_requires_document(self, user_repo, storage, bus, clock):
        uc = SubmitKycDocumentUseCase(user_repo, storage, bus, clock)

        with pytest.raises(ValidationError) as exc:
            uc.execute(1, None)
        assert exc.value.field == "document"

    def test_submit_rejects_unsupported_file(self, user_repo, storage, bus, clock):
        uc = SubmitKycDocumentUseCase(user_repo, storage, bus, clock)

        with pytest.raises(ValidationError):
            uc.execute(1, DocumentUpload("id.gif", b"GIF89a...."))
        assert storage.files == {}

    def test_approve_kyc(self, user_repo):
        user_repo.add(make_profile(3, kyc_status=KycStatus.PENDING))

        profile = ApproveKycUseCase(user_repo).execute(3, approver_id=100)

        assert profile.kyc_status == KycStatus.APPROVED

    def test_approve_kyc_unknown_user(self, user_repo):
        with pytest.raises(NotFound):
            ApproveKycUseCase(user_repo).execute(999, approver_id=100)
