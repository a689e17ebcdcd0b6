"""Tests for app.services.auth: registration, status-gated login, admin login."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from pydantic import SecretStr

from app.core.config import Settings
from app.core.database import build_engine, build_session_factory
from app.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.core.security import decode_access_token, strip_registered_claims
from app.models import Base, User
from app.services import status as status_rules
from app.services.auth import _reactivate_if_suspended, admin_login, login, register

NOW = datetime(2025, 10, 20, 12, 0, tzinfo=UTC)


def _settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        ADMIN_EMAIL="admin@example.com",
        ADMIN_PASSWORD=SecretStr("admin-pass"),
        JWT_SECRET=SecretStr("test-signing-secret-0123456789abcdef"),
        BCRYPT_ROUNDS=4,
    )


class _DbTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = _settings()
        self.engine = build_engine(self.settings)
        Base.metadata.create_all(self.engine)
        self.db = build_session_factory(self.engine)()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def _register(self, email: str = "a@x.com", password: str = "p", role: str = "customer"):
        return register(
            self.db, self.settings, name="A", email=email, password=password, role=role
        )

    def _set_status(self, email: str, status: str, until: datetime | None = None) -> None:
        user = self.db.query(User).filter(User.email == email).one()
        user.status = status
        user.suspended_until = until
        self.db.commit()


class TestRegister(_DbTestCase):
    def test_register_returns_identity_and_stores_hash(self) -> None:
        created = self._register()
        self.assertEqual(created.email, "a@x.com")
        self.assertEqual(created.role, "customer")
        stored = self.db.get(User, created.id)
        self.assertNotEqual(stored.password_hash, "p")
        self.assertEqual(stored.status, "active")
        self.assertIsNone(stored.suspended_until)

    def test_duplicate_email_is_conflict(self) -> None:
        self._register()
        with self.assertRaises(ConflictError):
            self._register()

    def test_missing_fields_are_validation_errors(self) -> None:
        for kwargs in (
            {"name": "", "email": "b@x.com", "password": "p"},
            {"name": "B", "email": "  ", "password": "p"},
            {"name": "B", "email": "b@x.com", "password": ""},
        ):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValidationError):
                    register(self.db, self.settings, **kwargs)

    def test_admin_role_cannot_be_registered(self) -> None:
        with self.assertRaises(ValidationError):
            self._register(role="admin")


class TestLogin(_DbTestCase):
    def test_fresh_registration_can_log_in(self) -> None:
        created = self._register()
        token = login(self.db, self.settings, "a@x.com", "p", now=NOW)
        claims = strip_registered_claims(decode_access_token(token, self.settings))
        self.assertEqual(
            claims,
            {"id": created.id, "email": "a@x.com", "role": "customer", "status": "active"},
        )

    def test_unknown_email_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            login(self.db, self.settings, "nobody@x.com", "p", now=NOW)

    def test_wrong_password_is_unauthorized(self) -> None:
        self._register()
        with self.assertRaises(UnauthorizedError):
            login(self.db, self.settings, "a@x.com", "nope", now=NOW)

    def test_banned_is_forbidden_regardless_of_password(self) -> None:
        self._register()
        self._set_status("a@x.com", "banned")
        for password in ("p", "wrong"):
            with self.subTest(password=password):
                with self.assertRaises(ForbiddenError) as ctx:
                    login(self.db, self.settings, "a@x.com", password, now=NOW)
                self.assertIn("permanently banned", ctx.exception.message)

    def test_active_suspension_is_forbidden_with_remaining_hours(self) -> None:
        self._register()
        self._set_status("a@x.com", "suspended", NOW + timedelta(hours=2, minutes=30))
        with self.assertRaises(ForbiddenError) as ctx:
            login(self.db, self.settings, "a@x.com", "p", now=NOW)
        self.assertIn("another 3 hour(s)", ctx.exception.message)
        self.assertEqual(self.db.query(User).one().status, "suspended")

    def test_lapsed_suspension_is_lifted_and_login_succeeds(self) -> None:
        self._register()
        self._set_status("a@x.com", "suspended", NOW - timedelta(minutes=5))
        token = login(self.db, self.settings, "a@x.com", "p", now=NOW)
        self.assertEqual(decode_access_token(token, self.settings)["status"], "active")
        self.db.expire_all()
        stored = self.db.query(User).one()
        self.assertEqual(stored.status, "active")
        self.assertIsNone(stored.suspended_until)

    def test_lapsed_suspension_is_lifted_even_with_wrong_password(self) -> None:
        self._register()
        self._set_status("a@x.com", "suspended", NOW - timedelta(minutes=5))
        with self.assertRaises(UnauthorizedError):
            login(self.db, self.settings, "a@x.com", "wrong", now=NOW)
        self.db.expire_all()
        self.assertEqual(self.db.query(User).one().status, "active")

    def _login_with_change_after_gate(self, status: str, until: datetime | None) -> str:
        """Run login with the stored row changed right after the first status gate passes."""
        changed = []

        def gate_then_change(current, suspended_until, now):
            result = status_rules.evaluate_status_gate(current, suspended_until, now)
            if not changed:
                changed.append(status)
                self.db.query(User).filter(User.email == "a@x.com").update(
                    {"status": status, "suspended_until": until}, synchronize_session=False
                )
                self.db.commit()
            return result

        with patch("app.services.auth.evaluate_status_gate", side_effect=gate_then_change):
            return login(self.db, self.settings, "a@x.com", "p", now=NOW)

    def test_ban_during_lazy_expiry_is_forbidden(self) -> None:
        self._register()
        self._set_status("a@x.com", "suspended", NOW - timedelta(minutes=5))
        with self.assertRaises(ForbiddenError) as ctx:
            self._login_with_change_after_gate("banned", None)
        self.assertIn("permanently banned", ctx.exception.message)
        self.db.expire_all()
        self.assertEqual(self.db.query(User).one().status, "banned")

    def test_resuspension_during_lazy_expiry_is_forbidden(self) -> None:
        self._register()
        self._set_status("a@x.com", "suspended", NOW - timedelta(minutes=5))
        with self.assertRaises(ForbiddenError) as ctx:
            self._login_with_change_after_gate("suspended", NOW + timedelta(hours=6))
        self.assertIn("another 6 hour(s)", ctx.exception.message)

    def test_activation_during_lazy_expiry_still_logs_in(self) -> None:
        self._register()
        self._set_status("a@x.com", "suspended", NOW - timedelta(minutes=5))
        token = self._login_with_change_after_gate("active", None)
        self.assertEqual(decode_access_token(token, self.settings)["status"], "active")


class TestReactivateIfSuspended(_DbTestCase):
    """The conditional update only touches rows that are still suspended."""

    def _stored(self) -> User:
        self.db.expire_all()
        return self.db.query(User).one()

    def test_lifts_a_suspended_row(self) -> None:
        created = self._register()
        self._set_status("a@x.com", "suspended", NOW - timedelta(minutes=5))
        self.assertEqual(_reactivate_if_suspended(self.db, created.id, NOW), 1)
        stored = self._stored()
        self.assertEqual(stored.status, "active")
        self.assertIsNone(stored.suspended_until)

    def test_active_row_is_unchanged(self) -> None:
        created = self._register()
        self.assertEqual(_reactivate_if_suspended(self.db, created.id, NOW), 0)
        stored = self._stored()
        self.assertEqual(stored.status, "active")
        self.assertIsNone(stored.suspended_until)

    def test_banned_row_is_unchanged(self) -> None:
        created = self._register()
        self._set_status("a@x.com", "banned")
        self.assertEqual(_reactivate_if_suspended(self.db, created.id, NOW), 0)
        self.assertEqual(self._stored().status, "banned")

    def test_second_call_is_a_no_op(self) -> None:
        created = self._register()
        self._set_status("a@x.com", "suspended", NOW - timedelta(minutes=5))
        self.assertEqual(_reactivate_if_suspended(self.db, created.id, NOW), 1)
        self.assertEqual(_reactivate_if_suspended(self.db, created.id, NOW), 0)
        self.assertEqual(self._stored().status, "active")


class TestAdminLogin(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = _settings()

    def test_matching_credentials_issue_admin_token(self) -> None:
        token = admin_login(self.settings, "admin@example.com", "admin-pass")
        claims = strip_registered_claims(decode_access_token(token, self.settings))
        self.assertEqual(claims, {"role": "admin", "email": "admin@example.com"})

    def test_mismatch_is_unauthorized(self) -> None:
        for email, password in (
            ("admin@example.com", "wrong"),
            ("other@example.com", "admin-pass"),
            ("", ""),
        ):
            with self.subTest(email=email):
                with self.assertRaises(UnauthorizedError):
                    admin_login(self.settings, email, password)


if __name__ == "__main__":
    unittest.main()
