from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from shops.models import ShopMembership
from shops.tests.factories import add_member, make_shop, make_user


class MeEndpointTests(TestCase):
    """
    GUARANTEES:
    - /api/auth/me/ returns the caller and their active shop memberships
    - JWT login works with email + password
    """

    def setUp(self):
        self.user = make_user("me@example.com", password="s3cret-pass")
        self.alpha = make_shop("Alpha Mart")
        self.beta = make_shop("Beta Store")
        self.closed = make_shop("Closed Shop")
        add_member(self.user, self.beta, ShopMembership.Role.STAFF)
        add_member(self.user, self.alpha, ShopMembership.Role.OWNER)
        add_member(self.user, self.closed, ShopMembership.Role.MANAGER)
        self.closed.is_active = False
        self.closed.save(update_fields=["is_active"])

    def test_me_lists_active_memberships_by_shop_name(self):
        client = APIClient()
        client.force_authenticate(user=self.user)

        res = client.get("/api/auth/me/")
        self.assertEqual(res.status_code, 200)

        body = res.json()
        self.assertEqual(body["email"], "me@example.com")
        self.assertEqual(
            [(m["shopName"], m["role"]) for m in body["memberships"]],
            [("Alpha Mart", "OWNER"), ("Beta Store", "STAFF")],
        )
        self.assertEqual(body["memberships"][0]["shopId"], str(self.alpha.id))

    def test_me_requires_authentication(self):
        self.assertEqual(APIClient().get("/api/auth/me/").status_code, 401)

    def test_jwt_login_then_me(self):
        client = APIClient()
        res = client.post(
            "/api/auth/jwt/create/",
            {"email": "me@example.com", "password": "s3cret-pass"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)

        client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.json()['access']}")
        self.assertEqual(client.get("/api/auth/me/").status_code, 200)


class UserManagerTests(TestCase):
    def test_email_is_required(self):
        with self.assertRaises(ValueError):
            make_user(email="")

    def test_superuser_flags(self):
        admin = get_user_model().objects.create_superuser(
            email="root@example.com", password="x-pass-123"
        )
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)
