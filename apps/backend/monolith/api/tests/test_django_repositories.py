from __future__ import annotations
from dataclasses import replace
from decimal import Decimal
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase

from api.models import Notification as DjangoNotification, PlatformSetting, Transaction as DjangoTransaction
from apps.backend.core.adapters.driven.persistence.django_repositories import (
    DjangoNotificationRepository,
    DjangoRateConfigurationRepository,
    DjangoTransactionRepository,
    DjangoUnitOfWork,
    DjangoUserRepository,
)
from apps.backend.core.domain.errors import PersistenceFailure, ValidationError
from apps.backend.core.domain.exchange import (
    CliqType,
    CurrencyBasis,
    Network,
    Notification,
    NotificationType,
    PaymentMethod,
    TradeType,
    Transaction,
    TransactionStatus,
)

User = get_user_model()

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_transaction(user_id, created_at=T0, trade_type=TradeType.BUY, amount="250.00"):
    sell = trade_type == TradeType.SELL
    return Transaction(
        id=None,
        user_id=user_id,
        type=trade_type,
        amount=Decimal(amount),
        rate=Decimal("0.71"),
        commission=Decimal("0.02"),
        fee=Decimal("5.00"),
        basis=CurrencyBasis.NATIVE,
        final_amount=Decimal("345.07"),
        status=TransactionStatus.PENDING,
        proof_of_payment="payment_proofs/1/abc_receipt.png",
        created_at=created_at,
        network=Network.TRC20 if sell else None,
        payment_method=None if sell else PaymentMethod.CLIQ,
        cliq_type=CliqType.ALIAS if sell else None,
        cliq_alias="AHMAD1" if sell else None,
    )


class DjangoTransactionRepositoryTests(TestCase):
    def setUp(self) -> None:
        self.repo = DjangoTransactionRepository()
        self.user = User.objects.create_user(username="owner", password="x")
        self.admin = User.objects.create_user(username="desk", password="x", role="admin")

    def test_add_persists_and_returns_domain_object(self):
        saved = self.repo.add(make_transaction(self.user.id, trade_type=TradeType.SELL, amount="50.00"))

        self.assertIsNotNone(saved.id)
        self.assertEqual(saved.network, Network.TRC20)
        self.assertEqual(saved.cliq_alias, "AHMAD1")
        m = DjangoTransaction.objects.get(pk=saved.id)
        self.assertEqual(m.amount, Decimal("50.00"))
        self.assertEqual(m.status, "pending")
        self.assertEqual(m.created_at, T0)

    def test_find_missing_returns_none(self):
        self.assertIsNone(self.repo.find_by_id(12345))

    def test_list_for_user_newest_first(self):
        older = self.repo.add(make_transaction(self.user.id, created_at=T0))
        newer = self.repo.add(make_transaction(self.user.id, created_at=T0 + timedelta(minutes=5)))
        self.repo.add(make_transaction(self.admin.id))

        ids = [t.id for t in self.repo.list_for_user(self.user.id)]

        self.assertEqual(ids, [newer.id, older.id])

    def test_mark_approved_only_once(self):
        txn = self.repo.add(make_transaction(self.user.id))
        approved_at = T0 + timedelta(hours=1)

        first = self.repo.mark_approved(txn.id, self.admin.id, approved_at)
        second = self.repo.mark_approved(txn.id, self.admin.id, approved_at + timedelta(minutes=1))

        self.assertEqual(first.status, TransactionStatus.APPROVED)
        self.assertEqual(first.approved_by, self.admin.id)
        self.assertEqual(first.approved_at, approved_at)
        self.assertIsNone(second)
        self.assertEqual(DjangoTransaction.objects.get(pk=txn.id).approved_at, approved_at)

    def test_database_errors_become_persistence_failures(self):
        with patch.object(DjangoTransaction.objects, "filter", side_effect=DatabaseError("boom")):
            with self.assertRaises(PersistenceFailure):
                self.repo.list_for_user(self.user.id)


class DjangoUserRepositoryTests(TestCase):
    def setUp(self) -> None:
        self.repo = DjangoUserRepository()

    def test_admin_ids_include_staff_and_skip_inactive(self):
        admin = User.objects.create_user(username="a", password="x", role="admin")
        staff = User.objects.create_user(username="s", password="x", is_staff=True)
        User.objects.create_user(username="gone", password="x", role="admin", is_active=False)
        User.objects.create_user(username="u", password="x")

        self.assertEqual(self.repo.list_admin_ids(), [admin.id, staff.id])

    def test_add_loyalty_points_accumulates(self):
        user = User.objects.create_user(username="u", password="x", loyalty_points=3)

        self.repo.add_loyalty_points(user.id, 2)
        self.repo.add_loyalty_points(user.id, 4)

        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 9)

    def test_profile_snapshot(self):
        user = User.objects.create_user(
            username="u", password="x", mobile_verified=True, kyc_status="approved",
            cliq_type="number", cliq_number="00962791234567",
        )

        profile = self.repo.get_profile(user.id)

        self.assertTrue(profile.is_verified)
        self.assertEqual(profile.cliq_type, CliqType.NUMBER)
        self.assertIsNone(profile.cliq_alias)
        self.assertIsNone(self.repo.get_profile(999))

    def test_kyc_document_resets_status(self):
        user = User.objects.create_user(username="u", password="x", kyc_status="approved")

        self.repo.set_kyc_document(user.id, "kyc/1/doc.pdf")

        user.refresh_from_db()
        self.assertEqual(user.kyc_status, "pending")
        self.assertEqual(user.kyc_document, "kyc/1/doc.pdf")
        self.assertTrue(self.repo.approve_kyc(user.id))
        self.assertFalse(self.repo.approve_kyc(999))


class DjangoRateConfigurationRepositoryTests(TestCase):
    DEFAULTS = {
        "buy_rate": "0.71",
        "buy_commission_rate": "0.02",
        "sell_rate": "0.69",
        "sell_commission_rate": "0.02",
    }

    def setUp(self) -> None:
        self.repo = DjangoRateConfigurationRepository(defaults=self.DEFAULTS)

    def test_defaults_until_saved(self):
        config = self.repo.get()

        self.assertEqual(config.buy_rate, Decimal("0.71"))
        self.assertEqual(PlatformSetting.objects.count(), 0)

    def test_replace_overwrites_every_key(self):
        config = self.repo.get()

        self.repo.replace(replace(config, sell_rate=Decimal("0.70"), cliq_alias="DESK"))

        stored = self.repo.get()
        self.assertEqual(stored.sell_rate, Decimal("0.70"))
        self.assertEqual(stored.cliq_alias, "DESK")
        self.assertEqual(PlatformSetting.objects.get(key="cliq_alias").value, "DESK")

    def test_corrupt_stored_rate_is_reported_by_key(self):
        PlatformSetting.objects.create(key="buy_rate", value="not-a-number")

        with self.assertRaises(ValidationError) as ctx:
            self.repo.get()
        self.assertEqual(ctx.exception.field, "buy_rate")


class DjangoNotificationRepositoryTests(TestCase):
    def setUp(self) -> None:
        self.repo = DjangoNotificationRepository()
        self.user = User.objects.create_user(username="u", password="x")
        self.other = User.objects.create_user(username="o", password="x")

    def _add(self, user_id, message, created_at=T0):
        return self.repo.add(Notification(
            id=None, user_id=user_id, type=NotificationType.ORDER_APPROVED,
            message=message, related_id=1, created_at=created_at,
        ))

    def test_add_and_list(self):
        self._add(self.user.id, "first")
        self._add(self.user.id, "second", T0 + timedelta(seconds=1))

        messages = [n.message for n in self.repo.list_for_user(self.user.id)]

        self.assertEqual(messages, ["second", "first"])

    def test_mark_read_scoped_to_owner(self):
        note = self._add(self.user.id, "mine")

        self.assertFalse(self.repo.mark_read(note.id, self.other.id))
        self.assertTrue(self.repo.mark_read(note.id, self.user.id))
        self.assertTrue(self.repo.mark_read(note.id, self.user.id))
        self.assertTrue(DjangoNotification.objects.get(pk=note.id).read)


class DjangoUnitOfWorkTests(TestCase):
    def test_rolls_back_on_error(self):
        user = User.objects.create_user(username="u", password="x")
        repo = DjangoTransactionRepository()
        uow = DjangoUnitOfWork()

        with self.assertRaises(RuntimeError):
            with uow:
                repo.add(make_transaction(user.id))
                raise RuntimeError("abort")

        self.assertEqual(DjangoTransaction.objects.count(), 0)

    def test_nested_blocks_commit_together(self):
        user = User.objects.create_user(username="u", password="x")
        repo = DjangoTransactionRepository()
        uow = DjangoUnitOfWork()

        with uow:
            repo.add(make_transaction(user.id))
            with uow:
                repo.add(make_transaction(user.id))

        self.assertEqual(DjangoTransaction.objects.count(), 2)
