"""Unit tests for app.core.security: bcrypt hashing and JWT issue/verify."""

import unittest
from datetime import timedelta

import jwt
from pydantic import SecretStr

from app.core.config import Settings
from app.core.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    strip_registered_claims,
    verify_password,
)


def _settings(**overrides: object) -> Settings:
    """Build Settings for tests without touching the environment."""
    values: dict[str, object] = {
        "DATABASE_URL": "sqlite://",
        "ADMIN_EMAIL": "admin@example.com",
        "ADMIN_PASSWORD": SecretStr("admin-pass"),
        "JWT_SECRET": SecretStr("test-signing-secret-0123456789abcdef"),
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(**values)


class TestPasswordHashing(unittest.TestCase):
    """hash_password produces a salted one-way hash that verify_password accepts."""

    def test_hash_differs_from_plaintext(self) -> None:
        hashed = hash_password("p", rounds=4)
        self.assertNotEqual(hashed, "p")
        self.assertTrue(hashed.startswith("$2"))

    def test_same_password_hashes_differently(self) -> None:
        self.assertNotEqual(hash_password("secret", rounds=4), hash_password("secret", rounds=4))

    def test_verify_accepts_correct_and_rejects_wrong(self) -> None:
        hashed = hash_password("correct horse", rounds=4)
        self.assertTrue(verify_password("correct horse", hashed))
        self.assertFalse(verify_password("wrong horse", hashed))

    def test_verify_against_garbage_hash_is_false(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))


class TestAccessToken(unittest.TestCase):
    """create_access_token / decode_access_token round trip and failure modes."""

    def setUp(self) -> None:
        self.settings = _settings()

    def test_round_trip_returns_input_claims(self) -> None:
        claims = {"id": 7, "email": "a@x.com", "role": "customer", "status": "active"}
        token = create_access_token(claims, self.settings)
        payload = decode_access_token(token, self.settings)
        self.assertIn("iat", payload)
        self.assertIn("exp", payload)
        self.assertEqual(strip_registered_claims(payload), claims)

    def test_expiry_is_two_hours_by_default(self) -> None:
        token = create_access_token({"role": "admin"}, self.settings)
        payload = decode_access_token(token, self.settings)
        self.assertEqual(payload["exp"] - payload["iat"], 2 * 60 * 60)

    def test_expired_token_is_rejected(self) -> None:
        token = create_access_token(
            {"role": "admin"}, self.settings, expires_delta=timedelta(seconds=-10)
        )
        with self.assertRaises(InvalidTokenError) as ctx:
            decode_access_token(token, self.settings)
        self.assertIn("expired", ctx.exception.message)

    def test_token_signed_with_other_secret_is_rejected(self) -> None:
        other = _settings(JWT_SECRET=SecretStr("other-signing-secret-0123456789abcdef"))
        token = create_access_token({"role": "admin"}, other)
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token, self.settings)

    def test_tampered_payload_is_rejected(self) -> None:
        token = create_access_token({"role": "customer"}, self.settings)
        header, _payload, signature = token.split(".")
        forged = jwt.encode(
            {"role": "admin"}, "guessed-signing-secret-0123456789abcdef", algorithm="HS256"
        ).split(".")[1]
        with self.assertRaises(InvalidTokenError):
            decode_access_token(f"{header}.{forged}.{signature}", self.settings)

    def test_garbage_is_rejected(self) -> None:
        with self.assertRaises(InvalidTokenError):
            decode_access_token("not-a-jwt", self.settings)


if __name__ == "__main__":
    unittest.main()
