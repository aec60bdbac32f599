"""HTTP tests for the users and pins endpoints against an in-memory SQLite database."""

import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tuerauf.core.config import Settings, get_settings, settings as app_settings
from tuerauf.core.database import get_db
from tuerauf.core.notifier import get_notifier
from tuerauf.main import app
from tuerauf.models import Base

PREFIX = app_settings.API_V1_PREFIX


class ApiTestCase(unittest.TestCase):
    """TestClient with the database, settings and notifier dependencies replaced."""

    max_serial_id = 4

    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.engine = engine
        testing_session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        def override_get_db():
            db = testing_session()
            try:
                yield db
            finally:
                db.close()

        self.notifier = MagicMock()
        test_settings = Settings(MAX_SERIAL_ID=self.max_serial_id, REGISTRATION_MAX_ATTEMPTS=2)
        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: test_settings
        app.dependency_overrides[get_notifier] = lambda: self.notifier
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.engine.dispose()

    def register(self, username: str, pin: str, installation_id: str):
        return self.client.post(
            f"{PREFIX}/users/register",
            json={"username": username, "pin": pin, "installation_id": installation_id},
        )


class TestRegisterEndpoint(ApiTestCase):
    def test_new_installation_is_created(self) -> None:
        resp = self.register("User1", "1111", "InstIdUser1")
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["status"], "created")
        self.assertEqual(body["user"]["username"], "User1")
        self.assertEqual(body["user"]["serial_id"], 0)
        self.assertFalse(body["user"]["active"])
        self.assertTrue(body["user"]["new_user"])
        self.assertNotIn("pin", body["user"])

    def test_known_installation_is_updated(self) -> None:
        created = self.register("User1", "1111", "InstIdUser1").json()
        resp = self.register("User1b", "1112", "InstIdUser1")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "updated")
        self.assertEqual(body["user"]["id"], created["user"]["id"])
        self.assertEqual(body["user"]["serial_id"], created["user"]["serial_id"])
        self.assertEqual(body["user"]["username"], "User1b")

    def test_duplicate_username_conflicts(self) -> None:
        self.register("User1", "1111", "InstIdUser1")
        resp = self.register("User1", "1112", "InstIdUser2")
        self.assertEqual(resp.status_code, 409)
        self.assertIn("User1", resp.json()["detail"])
        self.assertEqual(self.client.get(f"{PREFIX}/users/count").json()["count"], 1)

    def test_invalid_input_is_unprocessable(self) -> None:
        resp = self.register("User1", "123", "InstIdUser1")
        self.assertEqual(resp.status_code, 422)
        self.assertIn("pin", resp.json()["detail"])

    def test_full_pool_is_unavailable(self) -> None:
        for n in range(self.max_serial_id):
            self.assertEqual(self.register(f"User{n}", "1111", f"InstIdUser{n}").status_code, 201)
        resp = self.register("UserX", "1111", "InstIdUserX")
        self.assertEqual(resp.status_code, 503)
        self.notifier.notify.assert_any_call("too many users - MAX_SERIAL_ID reached")
        self.assertEqual(self.client.get(f"{PREFIX}/users/count").json()["count"], self.max_serial_id)


class TestActivationAndAccess(ApiTestCase):
    def test_user_is_active_only_after_activation(self) -> None:
        self.register("User1", "1111", "InstIdUser1")
        self.assertEqual(self.client.get(f"{PREFIX}/users/active/InstIdUser1").status_code, 404)

        resp = self.client.post(f"{PREFIX}/users/activate")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([u["username"] for u in resp.json()["activated"]], ["User1"])

        resp = self.client.get(f"{PREFIX}/users/active/InstIdUser1")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["active"])

    def test_unknown_installation_is_not_found(self) -> None:
        self.assertEqual(self.client.get(f"{PREFIX}/users/active/InstIdNobody").status_code, 404)


class TestPinEndpoints(ApiTestCase):
    def test_pin_hand_off(self) -> None:
        self.register("User1", "1111", "InstIdUser1")
        self.register("User2", "2222", "InstIdUser2")
        self.client.post(f"{PREFIX}/users/activate")

        pins = self.client.get(f"{PREFIX}/pins").json()["pins"]
        self.assertEqual(pins, ["1111", "2222", None, None])

        resp = self.client.post(f"{PREFIX}/pins/clear", json={"serial_ids": [0]})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["cleared"], 1)
        self.assertEqual(self.client.get(f"{PREFIX}/pins").json()["pins"], [None, "2222", None, None])

    def test_clearing_unknown_slot_is_rejected(self) -> None:
        self.register("User1", "1111", "InstIdUser1")
        self.client.post(f"{PREFIX}/users/activate")

        resp = self.client.post(f"{PREFIX}/pins/clear", json={"serial_ids": [0, 3]})

        self.assertEqual(resp.status_code, 422)
        self.assertEqual(self.client.get(f"{PREFIX}/pins").json()["pins"][0], "1111")


class TestHealthEndpoint(ApiTestCase):
    def test_reports_free_serial_ids(self) -> None:
        self.register("User1", "1111", "InstIdUser1")
        resp = self.client.get(f"{PREFIX}/health/")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["free_serial_ids"], self.max_serial_id - 1)

    def test_full_pool_reports_no_free_serial_ids(self) -> None:
        for n in range(self.max_serial_id):
            self.register(f"User{n}", "1111", f"InstIdUser{n}")
        self.assertEqual(self.register("UserX", "1111", "InstIdUserX").status_code, 503)

        body = self.client.get(f"{PREFIX}/health/").json()

        self.assertEqual(body["free_serial_ids"], 0)


if __name__ == "__main__":
    unittest.main()
