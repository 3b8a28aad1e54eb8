"""End-to-end tests of /v1/items: ownership isolation, admin bypass, paging, and throttling."""

import unittest
import uuid

from fastapi.testclient import TestClient

from app.api.deps import get_item_service
from app.main import app
from app.models import Role
from tests.helpers import ApiTestCase


class ItemsApiTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.ann_id, self.ann = self.signup("ann@example.com")
        self.bob_id, self.bob = self.signup("bob@example.com")

    def create_item(self, headers: dict[str, str], title: str = "Buy milk", **extra) -> str:
        resp = self.client.post("/v1/items/", json={"title": title, **extra}, headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]


class TestItemCrud(ItemsApiTestCase):
    def test_create_then_get(self) -> None:
        item_id = self.create_item(self.ann, description="2 litres")
        resp = self.client.get(f"/v1/items/{item_id}", headers=self.ann)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["title"], "Buy milk")
        self.assertEqual(data["description"], "2 litres")
        self.assertEqual(data["user_id"], str(self.ann_id))
        self.assertEqual(data["status"], 0)

    def test_partial_update(self) -> None:
        item_id = self.create_item(self.ann, description="keep me")
        resp = self.client.patch(f"/v1/items/{item_id}", json={"status": 2}, headers=self.ann)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["status"], 2)
        self.assertEqual(data["description"], "keep me")

    def test_delete_then_not_found(self) -> None:
        item_id = self.create_item(self.ann)
        resp = self.client.delete(f"/v1/items/{item_id}", headers=self.ann)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"/v1/items/{item_id}", headers=self.ann)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"]["key"], "ErrRecordNotFound")

    def test_blank_title_is_400(self) -> None:
        resp = self.client.post("/v1/items/", json={"title": "   "}, headers=self.ann)
        self.assertEqual(resp.status_code, 400)

    def test_empty_patch_is_400(self) -> None:
        item_id = self.create_item(self.ann)
        resp = self.client.patch(f"/v1/items/{item_id}", json={}, headers=self.ann)
        self.assertEqual(resp.status_code, 400)

    def test_requires_authentication(self) -> None:
        self.assertEqual(self.client.post("/v1/items/", json={"title": "x"}).status_code, 401)

    def test_unknown_item_id_is_404(self) -> None:
        resp = self.client.get(f"/v1/items/{uuid.uuid4()}", headers=self.ann)
        self.assertEqual(resp.status_code, 404)


class TestOwnershipIsolation(ItemsApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.item_id = self.create_item(self.ann)

    def test_other_user_cannot_read(self) -> None:
        self.assertEqual(
            self.client.get(f"/v1/items/{self.item_id}", headers=self.bob).status_code, 404
        )

    def test_other_user_cannot_update(self) -> None:
        resp = self.client.patch(
            f"/v1/items/{self.item_id}", json={"title": "mine now"}, headers=self.bob
        )
        self.assertEqual(resp.status_code, 404)
        still = self.client.get(f"/v1/items/{self.item_id}", headers=self.ann).json()["data"]
        self.assertEqual(still["title"], "Buy milk")

    def test_other_user_cannot_delete(self) -> None:
        resp = self.client.delete(f"/v1/items/{self.item_id}", headers=self.bob)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(
            self.client.get(f"/v1/items/{self.item_id}", headers=self.ann).status_code, 200
        )

    def test_other_user_list_excludes_item(self) -> None:
        body = self.client.get("/v1/items/", headers=self.bob).json()
        self.assertEqual(body["data"], [])
        self.assertEqual(body["paging"]["total"], 0)

    def test_user_cannot_list_another_owner(self) -> None:
        resp = self.client.get(f"/v1/items/?user_id={self.ann_id}", headers=self.bob)
        self.assertEqual(resp.status_code, 403)

    def test_admin_bypasses_ownership(self) -> None:
        _, admin = self.signup("admin@example.com", role=Role.ADMIN)
        self.assertEqual(
            self.client.get(f"/v1/items/{self.item_id}", headers=admin).status_code, 200
        )
        resp = self.client.patch(
            f"/v1/items/{self.item_id}", json={"title": "moderated"}, headers=admin
        )
        self.assertEqual(resp.json()["data"]["title"], "moderated")
        self.assertEqual(
            self.client.get(f"/v1/items/?user_id={self.ann_id}", headers=admin).json()["paging"][
                "total"
            ],
            1,
        )
        self.assertEqual(
            self.client.delete(f"/v1/items/{self.item_id}", headers=admin).status_code, 200
        )


class TestPagination(ItemsApiTestCase):
    def test_second_page_of_fifteen(self) -> None:
        for i in range(15):
            self.create_item(self.ann, title=f"item {i}")
        self.create_item(self.bob, title="not ann's")
        body = self.client.get("/v1/items/?page=2&limit=10", headers=self.ann).json()
        self.assertEqual(len(body["data"]), 5)
        self.assertEqual(body["paging"], {"page": 2, "limit": 10, "total": 15})

    def test_status_filter(self) -> None:
        self.create_item(self.ann, title="open")
        self.create_item(self.ann, title="done", status=2)
        body = self.client.get("/v1/items/?status=2", headers=self.ann).json()
        self.assertEqual([i["title"] for i in body["data"]], ["done"])

    def test_page_beyond_maximum_is_400(self) -> None:
        resp = self.client.get("/v1/items/?page=100000000000000000000", headers=self.ann)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["key"], "ErrInvalidRequest")


class TestUnexpectedError(ItemsApiTestCase):
    def test_unhandled_exception_uses_error_envelope(self) -> None:
        def broken_service():
            raise RuntimeError("driver exploded")

        app.dependency_overrides[get_item_service] = broken_service
        client = TestClient(app, raise_server_exceptions=False)
        resp = client.get("/v1/items/", headers=self.ann)
        self.assertEqual(resp.status_code, 500)
        error = resp.json()["error"]
        self.assertEqual(error["key"], "ErrInternal")
        self.assertNotIn("driver exploded", error["message"])


class TestRateLimit(ItemsApiTestCase):
    rate_limit_requests = 3
    rate_limit_period = 60

    def test_limit_plus_one_is_rejected_until_window_ends(self) -> None:
        for expected_remaining in ("2", "1", "0"):
            resp = self.client.get("/v1/items/", headers=self.ann)
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.headers["X-RateLimit-Limit"], "3")
            self.assertEqual(resp.headers["X-RateLimit-Remaining"], expected_remaining)

        resp = self.client.get("/v1/items/", headers=self.ann)
        self.assertEqual(resp.status_code, 429)
        self.assertEqual(resp.json()["error"]["key"], "ErrTooManyRequests")
        self.assertIn("Retry-After", resp.headers)

        self.clock.advance(60)
        self.assertEqual(self.client.get("/v1/items/", headers=self.ann).status_code, 200)

    def test_rejected_before_authentication(self) -> None:
        for _ in range(3):
            self.client.get("/v1/items/", headers=self.ann)
        resp = self.client.get("/v1/items/")
        self.assertEqual(resp.status_code, 429)

    def test_other_routes_are_not_throttled(self) -> None:
        item_id = self.create_item(self.ann)
        for _ in range(5):
            resp = self.client.get(f"/v1/items/{item_id}", headers=self.ann)
            self.assertEqual(resp.status_code, 200)


if __name__ == "__main__":
    unittest.main()
