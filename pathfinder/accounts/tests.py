from django.test import TestCase
from django.urls import reverse

from .context import RequestContext
from .models import User


class RegistrationTests(TestCase):
    def register(self, **overrides):
        data = {"full_name": "Jane Doe", "phone": "555-0100", "email": "Jane@Example.com", "password": "secret1"}
        data.update(overrides)
        return self.client.post(reverse("register"), data)

    def test_register_success(self):
        resp = self.register()
        self.assertEqual(resp.json(), {"success": True, "message": "Registration successful"})

        user = User.objects.get(email="jane@example.com")
        self.assertEqual(user.username, "jane@example.com")
        self.assertEqual(user.role, User.Role.USER)
        self.assertEqual(user.full_name, "Jane Doe")
        self.assertTrue(user.check_password("secret1"))

    def test_register_duplicate_email(self):
        self.register()
        resp = self.register(email="jane@example.com")
        self.assertFalse(resp.json()["success"])
        self.assertEqual(resp.json()["message"], "Email already registered")

    def test_register_validation(self):
        self.assertEqual(self.register(full_name="").json()["message"], "All fields are required")
        self.assertEqual(self.register(email="nope").json()["message"], "Invalid email format")
        self.assertEqual(self.register(password="abc").json()["message"], "Password must be at least 6 characters")
        self.assertEqual(User.objects.count(), 0)


class LoginTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="seeker@example.com", email="seeker@example.com", password="secret1", full_name="Sam Seeker"
        )
        self.admin = User.objects.create_user(
            username="boss@example.com", email="boss@example.com", password="secret1", role=User.Role.ADMIN
        )

    def test_user_login_and_session(self):
        resp = self.client.post(reverse("login"), {"email": "seeker@example.com", "password": "secret1"})
        self.assertTrue(resp.json()["success"])
        self.assertEqual(resp.json()["user"]["type"], "user")
        self.assertEqual(self.client.session["role"], "user")

        session = self.client.get(reverse("session_status")).json()
        self.assertTrue(session["logged_in"])
        self.assertTrue(session["is_user"])
        self.assertFalse(session["is_admin"])
        self.assertEqual(session["user_info"]["name"], "Sam Seeker")

    def test_wrong_password(self):
        resp = self.client.post(reverse("login"), {"email": "seeker@example.com", "password": "nope123"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid email or password")

    def test_admin_cannot_use_user_login(self):
        resp = self.client.post(reverse("login"), {"email": "boss@example.com", "password": "secret1"})
        self.assertEqual(resp.status_code, 401)

    def test_admin_login(self):
        resp = self.client.post(reverse("admin_login"), {"email": "boss@example.com", "password": "secret1"})
        self.assertEqual(resp.json()["admin"]["type"], "admin")
        self.assertTrue(self.client.get(reverse("session_status")).json()["is_admin"])

        self.client.logout()
        resp = self.client.post(reverse("admin_login"), {"email": "seeker@example.com", "password": "secret1"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid admin credentials")

    def test_missing_credentials(self):
        resp = self.client.post(reverse("login"), {"email": "", "password": ""})
        self.assertEqual(resp.json()["message"], "Email and password are required")

    def test_logout(self):
        self.client.force_login(self.user)
        self.assertTrue(self.client.post(reverse("logout")).json()["success"])
        self.assertFalse(self.client.get(reverse("session_status")).json()["logged_in"])

    def test_anonymous_session(self):
        session = self.client.get(reverse("session_status")).json()
        self.assertEqual(session, {"logged_in": False, "is_admin": False, "is_user": False, "user_info": None})


class ProfileTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="seeker@example.com", email="seeker@example.com", password="secret1", full_name="Sam Seeker"
        )
        User.objects.create_user(username="taken@example.com", email="taken@example.com", password="secret1")

    def test_requires_login(self):
        self.assertEqual(self.client.get(reverse("profile")).status_code, 401)

    def test_get_profile(self):
        self.client.force_login(self.user)
        self.assertEqual(self.client.get(reverse("profile")).json()["user"]["full_name"], "Sam Seeker")

    def test_update_profile_and_password(self):
        self.client.force_login(self.user)
        resp = self.client.post(
            reverse("profile"),
            {"action": "update", "full_name": "Sam S", "email": "sam@example.com", "phone": "1", "new_password": "better1"},
        )
        self.assertTrue(resp.json()["success"])

        self.user.refresh_from_db()
        self.assertEqual(self.user.email, "sam@example.com")
        self.assertTrue(self.user.check_password("better1"))
        # Still logged in after the password change.
        self.assertTrue(self.client.get(reverse("session_status")).json()["logged_in"])

    def test_update_rejects_taken_email(self):
        self.client.force_login(self.user)
        resp = self.client.post(
            reverse("profile"), {"action": "update", "full_name": "Sam", "email": "taken@example.com"}
        )
        self.assertEqual(resp.json()["message"], "Email already exists")

    def test_delete_account(self):
        self.client.force_login(self.user)
        resp = self.client.post(reverse("profile"), {"action": "delete"})
        self.assertTrue(resp.json()["success"])
        self.assertFalse(User.objects.filter(pk=self.user.pk).exists())

    def test_unknown_action(self):
        self.client.force_login(self.user)
        self.assertEqual(self.client.post(reverse("profile"), {"action": "x"}).json()["message"], "Invalid action")


class RequestContextTests(TestCase):
    def test_from_request(self):
        admin = User.objects.create_user(username="a@example.com", email="a@example.com", password="x", role="admin")

        class _Request:
            user = admin

        ctx = RequestContext.from_request(_Request())
        self.assertEqual(ctx, RequestContext(user_id=admin.pk, is_admin=True))
        self.assertTrue(RequestContext().is_anonymous)
