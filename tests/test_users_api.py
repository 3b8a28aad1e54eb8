"""End-to-end tests of /v1/users through the FastAPI app."""

import unittest
import uuid

from app.models import Role
from tests.helpers import DEFAULT_PASSWORD, ApiTestCase


class TestRegisterAndLogin(ApiTestCase):
    def test_register_returns_created_id(self) -> None:
        resp = self.client.post(
            "/v1/users/register",
            json={"email": "ann@example.com", "password": DEFAULT_PASSWORD, "first_name": "Ann"},
        )
        self.assertEqual(resp.status_code, 201)
        uuid.UUID(resp.json()["data"])
        self.assertIn("X-Request-Id", resp.headers)

    def test_duplicate_email_conflicts(self) -> None:
        self.register("ann@example.com")
        resp = self.client.post(
            "/v1/users/register", json={"email": "ann@example.com", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"]["key"], "ErrEntityExisted")

    def test_invalid_body_is_a_400_envelope(self) -> None:
        resp = self.client.post(
            "/v1/users/register", json={"email": "not-an-email", "password": "short"}
        )
        self.assertEqual(resp.status_code, 400)
        error = resp.json()["error"]
        self.assertEqual(error["key"], "ErrInvalidRequest")
        self.assertEqual(error["status_code"], 400)
        self.assertTrue(error["details"])

    def test_login_failures_are_indistinguishable(self) -> None:
        self.register("ann@example.com")
        wrong_pw = self.client.post(
            "/v1/users/login", json={"email": "ann@example.com", "password": "wrong-password"}
        )
        unknown = self.client.post(
            "/v1/users/login", json={"email": "ghost@example.com", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(wrong_pw.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        strip = lambda body: {k: v for k, v in body["error"].items() if k != "request_id"}
        self.assertEqual(strip(wrong_pw.json()), strip(unknown.json()))

    def test_login_returns_bearer_token(self) -> None:
        self.register("ann@example.com")
        resp = self.client.post(
            "/v1/users/login", json={"email": "ann@example.com", "password": DEFAULT_PASSWORD}
        )
        data = resp.json()["data"]
        self.assertEqual(data["token_type"], "bearer")
        self.assertGreater(data["expires_in"], 0)


class TestAuthentication(ApiTestCase):
    def test_missing_header_is_401(self) -> None:
        resp = self.client.get("/v1/users/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers["WWW-Authenticate"], "Bearer")
        self.assertEqual(resp.json()["error"]["message"], "wrong authentication header")

    def test_wrong_scheme_is_401(self) -> None:
        resp = self.client.get("/v1/users/me", headers={"Authorization": "Basic abc"})
        self.assertEqual(resp.status_code, 401)

    def test_invalid_token_is_401(self) -> None:
        resp = self.client.get("/v1/users/me", headers={"Authorization": "Bearer nope"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"]["key"], "ErrInvalidToken")

    def test_me_returns_profile_without_secrets(self) -> None:
        user_id, headers = self.signup("ann@example.com")
        resp = self.client.get("/v1/users/me", headers=headers)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["id"], str(user_id))
        self.assertNotIn("password_hash", data)
        self.assertNotIn("salt", data)

    def test_repeated_requests_hit_the_user_cache(self) -> None:
        _, headers = self.signup("ann@example.com")
        for _ in range(3):
            self.client.get("/v1/users/me", headers=headers)
        self.assertEqual(self.user_cache.stats["loads"], 1)

    def test_deleted_user_is_rejected_on_next_request(self) -> None:
        user_id, headers = self.signup("ann@example.com")
        resp = self.client.delete(f"/v1/users/{user_id}", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertIs(resp.json()["data"], True)
        resp = self.client.get("/v1/users/me", headers=headers)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"]["message"], "user has been deleted or banned")

    def test_banned_user_is_rejected(self) -> None:
        user_id, headers = self.signup("ann@example.com")
        _, admin_headers = self.signup("admin@example.com", role=Role.ADMIN)
        self.client.get("/v1/users/me", headers=headers)
        resp = self.client.patch(
            f"/v1/users/{user_id}", json={"status": 2}, headers=admin_headers
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/v1/users/me", headers=headers).status_code, 403)


class TestUserManagement(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.ann_id, self.ann = self.signup("ann@example.com")
        self.bob_id, self.bob = self.signup("bob@example.com")
        self.admin_id, self.admin = self.signup("admin@example.com", role=Role.ADMIN)

    def test_user_cannot_read_other_user(self) -> None:
        resp = self.client.get(f"/v1/users/{self.bob_id}", headers=self.ann)
        self.assertEqual(resp.status_code, 403)

    def test_admin_reads_any_user(self) -> None:
        resp = self.client.get(f"/v1/users/{self.bob_id}", headers=self.admin)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["email"], "bob@example.com")

    def test_list_scoped_by_role(self) -> None:
        mine = self.client.get("/v1/users/", headers=self.ann).json()
        self.assertEqual([u["id"] for u in mine["data"]], [str(self.ann_id)])
        everyone = self.client.get("/v1/users/", headers=self.admin).json()
        self.assertEqual(everyone["paging"]["total"], 3)

    def test_user_updates_own_profile(self) -> None:
        resp = self.client.patch(
            f"/v1/users/{self.ann_id}", json={"last_name": "Lee"}, headers=self.ann
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["last_name"], "Lee")

    def test_user_cannot_promote_self(self) -> None:
        resp = self.client.patch(f"/v1/users/{self.ann_id}", json={"role": 1}, headers=self.ann)
        self.assertEqual(resp.status_code, 403)

    def test_user_cannot_delete_other_user(self) -> None:
        resp = self.client.delete(f"/v1/users/{self.bob_id}", headers=self.ann)
        self.assertEqual(resp.status_code, 403)

    def test_malformed_id_is_400(self) -> None:
        resp = self.client.get("/v1/users/not-a-uuid", headers=self.admin)
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
