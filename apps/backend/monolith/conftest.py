"""Fixtures shared by the API and clients test suites."""

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from apps.backend.core.tests.fakes import PDF_BYTES, PNG_BYTES
from apps.backend.core.wiring.container import reset_container

User = get_user_model()


@pytest.fixture(autouse=True)
def isolated_exchange(settings, tmp_path):
    """Fresh wiring, an empty cache and a throwaway media root per test."""
    settings.MEDIA_ROOT = str(tmp_path / "media")
    reset_container()
    cache.clear()
    yield
    reset_container()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    def factory(username, **fields):
        return User.objects.create_user(
            username=username,
            email=f"{username}@example.com",
            password="testpass123",
            **fields,
        )
    return factory


@pytest.fixture
def trader(make_user):
    """Verified user with both settlement accounts configured."""
    return make_user(
        "trader",
        full_name="Ahmad Trader",
        mobile_number="0791234567",
        mobile_verified=True,
        kyc_status="approved",
        usdt_address="TQn9Y2khEsLJW1ChVWFMSMeRDow5KcbLSE",
        usdt_network="trc20",
        cliq_bank_name="Arab Bank",
        cliq_type="alias",
        cliq_alias="AHMAD1",
        cliq_account_holder="Ahmad Trader",
    )


@pytest.fixture
def admin_user(make_user):
    return make_user("desk", full_name="Desk Admin", role="admin")


@pytest.fixture
def trader_client(api_client, trader):
    api_client.force_authenticate(user=trader)
    return api_client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def png_upload():
    return SimpleUploadedFile("receipt.png", PNG_BYTES, content_type="image/png")


@pytest.fixture
def pdf_upload():
    return SimpleUploadedFile("id.pdf", PDF_BYTES, content_type="application/pdf")
