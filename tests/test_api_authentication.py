"""HTTP tests for /api/authentication and /api/users: status codes and the access gate."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from subjapi.api.deps import get_app_settings
from subjapi.core.config import get_settings
from subjapi.core.database import get_db
from subjapi.core.security import issue_token, verify_token
from subjapi.main import app
from subjapi.models import Account
from subjapi.schemas.auth import TokenClaims
from subjapi.services.accounts import AccountStore
from tests.support import make_sessionmaker, make_token_config

PREFIX = "/api/authentication"

ALICE = {
    "username": "alice",
    "email": "a@x.com",
    "password": "P@ssw0rd",
    "name": "Alice Example",
    "date_of_birth": "1999-04-01",
    "neptun_code": "ABC123",
    "department": "Mathematics",
}


class ApiTestCase(unittest.TestCase):
    """TestClient bound to a fresh in-memory database per test."""

    def setUp(self) -> None:
        self.SessionLocal = make_sessionmaker()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)
        self.client.__enter__()
        self.config = app.state.token_config

    def tearDown(self) -> None:
        self.client.__exit__(None, None, None)
        app.dependency_overrides.clear()

    def _register(self, **overrides: str) -> int:
        return self.client.post(f"{PREFIX}/register", json={**ALICE, **overrides}).status_code

    def _login(self, username: str = "alice", password: str = "P@ssw0rd"):
        return self.client.post(f"{PREFIX}/login", json={"username": username, "password": password})

    def _grant(self, username: str, role: str) -> None:
        with self.SessionLocal() as db:
            store = AccountStore(db)
            if not store.role_exists(role):
                store.create_role(role)
            store.add_to_role(store.find_by_username(username), role)

    def _auth(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}


class TestRegistrationAndLoginScenario(ApiTestCase):
    def test_end_to_end(self) -> None:
        self.assertEqual(self._register(), 201)
        self.assertEqual(self._register(email="other@x.com"), 409)
        with self.SessionLocal() as db:
            self.assertEqual(db.query(Account).count(), 1)

        self._grant("alice", "User")
        resp = self._login()
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(set(body), {"token", "expiration"})
        claims = verify_token(body["token"], self.config)
        self.assertEqual(claims.sub, "alice")
        self.assertEqual(claims.roles, ("User",))

        self.assertEqual(self._login(password="wrong").status_code, 401)

        forbidden = self.client.get("/api/users", headers=self._auth(body["token"]))
        self.assertEqual(forbidden.status_code, 403)

    def test_register_returns_no_body(self) -> None:
        resp = self.client.post(f"{PREFIX}/register", json=ALICE)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.content, b"")

    def test_register_validation_errors(self) -> None:
        self.assertEqual(self._register(password="password"), 422)
        self.assertEqual(self._register(email="nope"), 422)
        self.assertEqual(self._register(username="has space"), 422)

    def test_failed_logins_look_identical(self) -> None:
        self._register()
        unknown = self._login(username="mallory")
        wrong = self._login(password="wrong")
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.json(), wrong.json())


class TestAccessGate(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self._register()
        self.token = self._login().json()["token"]

    def test_missing_token_is_401(self) -> None:
        resp = self.client.get(f"{PREFIX}/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers["WWW-Authenticate"], "Bearer")

    def test_malformed_token_is_401(self) -> None:
        self.assertEqual(self.client.get(f"{PREFIX}/me", headers=self._auth("garbage")).status_code, 401)
        resp = self.client.get(f"{PREFIX}/me", headers={"Authorization": f"Basic {self.token}"})
        self.assertEqual(resp.status_code, 401)

    def test_token_signed_with_other_secret_is_401(self) -> None:
        other = make_token_config(
            secret="another-signing-secret-fedcba9876543210xyz",
            issuer=self.config.issuer,
            audience=self.config.audience,
        )
        forged = issue_token(
            TokenClaims(sub="alice", jti="x", actor="False", roles=("Admin",)), other
        ).token
        self.assertEqual(self.client.get("/api/users", headers=self._auth(forged)).status_code, 401)

    def test_me_returns_identity(self) -> None:
        resp = self.client.get(f"{PREFIX}/me", headers=self._auth(self.token))
        self.assertEqual(resp.status_code, 200)
        expected = {
            "username": "alice",
            "token_id": verify_token(self.token, self.config).jti,
            "is_base_user": False,
            "roles": [],
        }
        self.assertEqual(resp.json(), expected)

    def test_logout_requires_token_and_does_not_revoke(self) -> None:
        self.assertEqual(self.client.post(f"{PREFIX}/logout").status_code, 401)
        self.assertEqual(
            self.client.post(f"{PREFIX}/logout", headers=self._auth(self.token)).status_code, 204
        )
        # Stateless tokens stay valid until they expire.
        self.assertEqual(
            self.client.get(f"{PREFIX}/me", headers=self._auth(self.token)).status_code, 200
        )

    def test_admin_can_list_users(self) -> None:
        self._grant("alice", "Admin")
        # Roles are read at login; the earlier token still lacks Admin.
        self.assertEqual(self.client.get("/api/users", headers=self._auth(self.token)).status_code, 403)
        token = self._login().json()["token"]
        resp = self.client.get("/api/users", headers=self._auth(token))
        self.assertEqual(resp.status_code, 200)
        users = resp.json()["users"]
        self.assertEqual([u["username"] for u in users], ["alice"])
        self.assertEqual(users[0]["roles"], ["Admin"])
        self.assertNotIn("password_hash", users[0])

    def test_forbidden_logs_required_role(self) -> None:
        with self.assertLogs("subjapi.main", level="INFO") as logs:
            resp = self.client.get("/api/users", headers=self._auth(self.token))
        self.assertEqual(resp.status_code, 403)
        record = logs.records[-1]
        self.assertEqual(record.required_role, "Admin")
        self.assertEqual(record.path, "/api/users")


class TestBootstrapRoutes(ApiTestCase):
    def test_init_roles_and_users_are_idempotent(self) -> None:
        first = self.client.post(f"{PREFIX}/init-roles")
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), {"created": ["Admin", "User"]})
        self.assertEqual(self.client.post(f"{PREFIX}/init-roles").json(), {"created": []})

        self.assertEqual(self.client.post(f"{PREFIX}/init-users").status_code, 200)
        second = self.client.post(f"{PREFIX}/init-users")
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json(), {"created": []})

        settings = get_settings()
        token = self._login("admin", settings.SEED_ADMIN_PASSWORD.get_secret_value()).json()["token"]
        users = self.client.get("/api/users", headers=self._auth(token)).json()["users"]
        self.assertEqual(
            {u["username"]: u["roles"] for u in users},
            {"admin": ["Admin"], "user": ["User"]},
        )

    def test_disabled_bootstrap_is_404(self) -> None:
        disabled = get_settings().model_copy(update={"BOOTSTRAP_ENABLED": False})
        app.dependency_overrides[get_app_settings] = lambda: disabled
        self.assertEqual(self.client.post(f"{PREFIX}/init-roles").status_code, 404)
        self.assertEqual(self.client.post(f"{PREFIX}/init-users").status_code, 404)


if __name__ == "__main__":
    unittest.main()
