from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from .access_policy import AccessPolicy
from .models import AuditLog, Position, User


class AccountsTestCase(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.staff_position = Position.objects.create(name="担当", level=Position.Level.STAFF)
        self.manager_position = Position.objects.create(name="課長", level=Position.Level.MANAGER)
        self.director_position = Position.objects.create(name="部長", level=Position.Level.DIRECTOR)

        self.director = User.objects.create_user(
            username="director",
            email="director@example.com",
            password="StrongPass123!",
            position=self.director_position,
        )
        self.manager = User.objects.create_user(
            username="manager",
            email="manager@example.com",
            password="StrongPass123!",
            position=self.manager_position,
        )
        self.staff = User.objects.create_user(
            username="yamada",
            email="yamada@example.com",
            password="StrongPass123!",
            position=self.staff_position,
            manager=self.manager,
        )


class LoginApiTests(AccountsTestCase):
    def test_login_with_username_returns_tokens(self):
        response = self.client.post(
            "/api/v1/auth/login/",
            {"username": "yamada", "password": "StrongPass123!"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)
        self.assertEqual(response.data["user"]["position_level"], Position.Level.STAFF)
        self.assertTrue(AuditLog.objects.filter(action="login_success", user=self.staff).exists())

    def test_login_with_email(self):
        response = self.client.post(
            "/api/v1/auth/login/",
            {"username": "YAMADA@example.com", "password": "StrongPass123!"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user"]["id"], self.staff.id)

    def test_wrong_password(self):
        response = self.client.post(
            "/api/v1/auth/login/",
            {"username": "yamada", "password": "nope"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertTrue(AuditLog.objects.filter(action="login_failed").exists())

    def test_blocked_user_is_refused(self):
        self.staff.is_blocked = True
        self.staff.save(update_fields=["is_blocked"])
        response = self.client.post(
            "/api/v1/auth/login/",
            {"username": "yamada", "password": "StrongPass123!"},
            format="json",
        )
        self.assertEqual(response.status_code, 403)

    def test_inactive_user_is_refused(self):
        self.staff.is_active = False
        self.staff.save(update_fields=["is_active"])
        response = self.client.post(
            "/api/v1/auth/login/",
            {"username": "yamada", "password": "StrongPass123!"},
            format="json",
        )
        self.assertEqual(response.status_code, 403)

    def test_token_authenticates_me_endpoint(self):
        login = self.client.post(
            "/api/v1/auth/login/",
            {"username": "yamada", "password": "StrongPass123!"},
            format="json",
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")
        response = self.client.get("/api/v1/auth/me/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "yamada")
        self.assertEqual(response.data["manager_id"], self.manager.id)

    def test_refresh_token(self):
        login = self.client.post(
            "/api/v1/auth/login/",
            {"username": "yamada", "password": "StrongPass123!"},
            format="json",
        )
        response = self.client.post("/api/v1/auth/refresh/", {"refresh": login.data["refresh"]}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertIn("access", response.data)


class PasswordChangeApiTests(AccountsTestCase):
    def test_change_password(self):
        self.client.force_authenticate(self.staff)
        response = self.client.put(
            "/api/v1/auth/password/",
            {"current_password": "StrongPass123!", "new_password": "EvenStronger456!"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.staff.refresh_from_db()
        self.assertTrue(self.staff.check_password("EvenStronger456!"))

    def test_wrong_current_password(self):
        self.client.force_authenticate(self.staff)
        response = self.client.put(
            "/api/v1/auth/password/",
            {"current_password": "wrong", "new_password": "EvenStronger456!"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("current_password", response.data)


class SalespersonApiTests(AccountsTestCase):
    def payload(self, **overrides):
        data = {
            "email": "sato@example.com",
            "password": "StrongPass123!",
            "last_name": "佐藤",
            "first_name": "花子",
            "position_id": self.staff_position.id,
            "manager_id": self.manager.id,
            "director_id": self.director.id,
        }
        data.update(overrides)
        return data

    def test_only_directors_manage_salespersons(self):
        self.client.force_authenticate(self.manager)
        self.assertEqual(self.client.get("/api/v1/salespersons/").status_code, 403)
        response = self.client.post("/api/v1/salespersons/", self.payload(), format="json")
        self.assertEqual(response.status_code, 403)

    def test_director_creates_salesperson(self):
        self.client.force_authenticate(self.director)
        response = self.client.post("/api/v1/salespersons/", self.payload(), format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["username"], "sato@example.com")
        self.assertEqual(response.data["full_name"], "佐藤 花子")
        self.assertNotIn("password", response.data)

        user = User.objects.get(email="sato@example.com")
        self.assertTrue(user.check_password("StrongPass123!"))
        self.assertEqual(user.manager_id, self.manager.id)

    def test_duplicate_email_conflicts(self):
        self.client.force_authenticate(self.director)
        response = self.client.post(
            "/api/v1/salespersons/",
            self.payload(email="Yamada@example.com"),
            format="json",
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "DUPLICATE_EMAIL")

    def test_manager_link_requires_manager_position(self):
        self.client.force_authenticate(self.director)
        response = self.client.post(
            "/api/v1/salespersons/",
            self.payload(manager_id=self.staff.id),
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("manager_id", response.data)

        response = self.client.post(
            "/api/v1/salespersons/",
            self.payload(director_id=self.manager.id),
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("director_id", response.data)

    def test_list_filters(self):
        self.client.force_authenticate(self.director)
        response = self.client.get("/api/v1/salespersons/", {"position_id": self.manager_position.id})
        self.assertEqual([item["id"] for item in response.data["items"]], [self.manager.id])

        response = self.client.get("/api/v1/salespersons/", {"q": "yamada"})
        self.assertEqual([item["id"] for item in response.data["items"]], [self.staff.id])

    def test_update_salesperson(self):
        self.client.force_authenticate(self.director)
        response = self.client.patch(
            f"/api/v1/salespersons/{self.staff.id}/",
            {"last_name": "山田", "first_name": "一郎"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["full_name"], "山田 一郎")

    def test_update_to_taken_email_conflicts(self):
        self.client.force_authenticate(self.director)
        response = self.client.patch(
            f"/api/v1/salespersons/{self.staff.id}/",
            {"email": "manager@example.com"},
            format="json",
        )
        self.assertEqual(response.status_code, 409)

    def test_delete_deactivates(self):
        self.client.force_authenticate(self.director)
        response = self.client.delete(f"/api/v1/salespersons/{self.staff.id}/")
        self.assertEqual(response.status_code, 204)
        self.staff.refresh_from_db()
        self.assertFalse(self.staff.is_active)

    def test_director_cannot_deactivate_self(self):
        self.client.force_authenticate(self.director)
        response = self.client.delete(f"/api/v1/salespersons/{self.director.id}/")
        self.assertEqual(response.status_code, 403)
        self.director.refresh_from_db()
        self.assertTrue(self.director.is_active)

    def test_positions_master(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get("/api/v1/positions/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["level"] for item in response.data["items"]], [1, 2, 3])


class AccessPolicyTests(AccountsTestCase):
    def test_position_levels(self):
        self.assertTrue(AccessPolicy.is_staff_member(self.staff))
        self.assertTrue(AccessPolicy.is_manager(self.manager))
        self.assertTrue(AccessPolicy.is_director(self.director))
        self.assertFalse(AccessPolicy.can_approve(self.staff))
        self.assertTrue(AccessPolicy.can_approve(self.manager))
        self.assertTrue(AccessPolicy.can_manage_salespersons(self.director))
        self.assertFalse(AccessPolicy.can_manage_salespersons(self.manager))

    def test_manager_of(self):
        self.assertTrue(AccessPolicy.is_manager_of(self.manager, self.staff))
        self.assertFalse(AccessPolicy.is_manager_of(self.director, self.staff))

    def test_superuser_gets_director_position(self):
        admin = User.objects.create_superuser("root", "root@example.com", "StrongPass123!")
        self.assertEqual(admin.position_level, Position.Level.DIRECTOR)
        self.assertEqual(admin.position_id, self.director_position.id)
