"""
Tests for the notification inbox endpoints.
"""

import pytest
from rest_framework.test import APIClient

from api.models import Notification


@pytest.fixture
def inbox(trader):
    return [
        Notification.objects.create(user=trader, type="order_approved", message=f"note {i}", related_id=i)
        for i in range(3)
    ]


@pytest.mark.django_db
class TestNotificationsApi:

    def test_list_newest_first(self, trader_client, inbox, admin_user):
        Notification.objects.create(user=admin_user, type="new_user", message="not yours")

        response = trader_client.get("/api/notifications/")

        assert response.status_code == 200
        assert [n["message"] for n in response.data] == ["note 2", "note 1", "note 0"]
        assert response.data[0]["type"] == "order_approved"
        assert response.data[0]["read"] is False

    def test_mark_read_is_idempotent(self, trader_client, inbox):
        target = inbox[0]

        first = trader_client.post(f"/api/notifications/{target.id}/read/")
        second = trader_client.post(f"/api/notifications/{target.id}/read/")

        assert first.status_code == second.status_code == 200
        target.refresh_from_db()
        assert target.read is True
        assert Notification.objects.filter(read=False).count() == 2

    def test_cannot_mark_someone_elses_notification(self, api_client, make_user, inbox):
        intruder = make_user("intruder")
        api_client.force_authenticate(user=intruder)

        response = api_client.post(f"/api/notifications/{inbox[0].id}/read/")

        assert response.status_code == 404
        inbox[0].refresh_from_db()
        assert inbox[0].read is False

    def test_mark_all_read(self, trader_client, inbox, admin_user):
        other = Notification.objects.create(user=admin_user, type="new_user", message="x")

        response = trader_client.post("/api/notifications/mark-all-read/")

        assert response.status_code == 200
        assert response.data["updated"] == 3
        other.refresh_from_db()
        assert other.read is False

    def test_requires_authentication(self):
        assert APIClient().get("/api/notifications/").status_code == 401
