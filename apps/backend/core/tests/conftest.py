"""Fixtures wiring the in-memory fakes into engine tests."""

import pytest

from apps.backend.core.tests.fakes import (
    FakeClock,
    FakeMessageBus,
    InMemoryDocumentStorage,
    InMemoryNotificationRepository,
    InMemoryRateRepository,
    InMemoryTransactionRepository,
    InMemoryUserRepository,
    make_admin,
    make_profile,
    make_rates,
)


@pytest.fixture
def rates():
    return make_rates()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transaction_repo():
    return InMemoryTransactionRepository()


@pytest.fixture
def user_repo():
    return InMemoryUserRepository(make_profile(1), make_admin(100), make_admin(101))


@pytest.fixture
def rate_repo(rates):
    return InMemoryRateRepository(rates)


@pytest.fixture
def notification_repo():
    return InMemoryNotificationRepository()


@pytest.fixture
def storage():
    return InMemoryDocumentStorage()


@pytest.fixture
def bus():
    return FakeMessageBus()
