from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import Position, User

from .models import Customer


class CustomerApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        staff_position = Position.objects.create(name="担当", level=Position.Level.STAFF)
        manager_position = Position.objects.create(name="課長", level=Position.Level.MANAGER)
        self.staff = User.objects.create_user(
            username="staff",
            email="staff@example.com",
            password="StrongPass123!",
            position=staff_position,
        )
        self.manager = User.objects.create_user(
            username="manager",
            email="manager@example.com",
            password="StrongPass123!",
            position=manager_position,
        )
        self.abc = Customer.objects.create(name="株式会社ABC", address="東京都千代田区", industry="製造業")
        self.xyz = Customer.objects.create(name="株式会社XYZ", address="東京都港区", industry="IT・通信")
        self.closed = Customer.objects.create(name="閉鎖商事", industry="小売・流通", is_active=False)

    def test_anonymous_is_rejected(self):
        response = self.client.get("/api/v1/customers/")
        self.assertEqual(response.status_code, 401)

    def test_staff_can_list_and_filter(self):
        self.client.force_authenticate(self.staff)

        response = self.client.get("/api/v1/customers/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["pagination"]["total_count"], 3)

        response = self.client.get("/api/v1/customers/", {"q": "港区"})
        self.assertEqual([item["id"] for item in response.data["items"]], [self.xyz.id])

        response = self.client.get("/api/v1/customers/", {"industry": "製造業"})
        self.assertEqual([item["id"] for item in response.data["items"]], [self.abc.id])

        response = self.client.get("/api/v1/customers/", {"is_active": "false"})
        self.assertEqual([item["id"] for item in response.data["items"]], [self.closed.id])

    def test_staff_cannot_create(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post("/api/v1/customers/", {"name": "新規顧客"}, format="json")
        self.assertEqual(response.status_code, 403)

    @patch("customers.views.CustomersAuditService.log_customer_created")
    def test_manager_creates_customer(self, log_created):
        self.client.force_authenticate(self.manager)
        response = self.client.post(
            "/api/v1/customers/",
            {"name": "  新規顧客  ", "phone": "03-1111-2222", "industry": "製造業"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["name"], "新規顧客")
        log_created.assert_called_once()

    def test_invalid_phone_is_rejected(self):
        self.client.force_authenticate(self.manager)
        response = self.client.post("/api/v1/customers/", {"name": "顧客", "phone": "call me"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("phone", response.data)

    def test_update_customer(self):
        self.client.force_authenticate(self.manager)
        response = self.client.patch(f"/api/v1/customers/{self.abc.id}/", {"phone": "03-9999-0000"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.abc.refresh_from_db()
        self.assertEqual(self.abc.phone, "03-9999-0000")

    @patch("customers.views.CustomersAuditService.log_customer_deactivated")
    def test_delete_is_soft(self, log_deactivated):
        self.client.force_authenticate(self.manager)
        response = self.client.delete(f"/api/v1/customers/{self.abc.id}/")
        self.assertEqual(response.status_code, 204)
        self.abc.refresh_from_db()
        self.assertFalse(self.abc.is_active)
        log_deactivated.assert_called_once()

    def test_industries_lists_active_distinct_values(self):
        Customer.objects.create(name="第二製造", industry="製造業")
        self.client.force_authenticate(self.staff)
        response = self.client.get("/api/v1/industries/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["items"], sorted(["IT・通信", "製造業"]))
