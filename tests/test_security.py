"""Unit tests for supportdesk.core.security: token issue/validation and password hashing."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from _support import TEST_SECRET, make_settings
from supportdesk.core import security
from supportdesk.core.security import (
    ACCESS_TOKEN_EXPIRE_HOURS,
    ExpiredTokenError,
    InvalidSignatureError,
    InvalidTokenClaimsError,
    MalformedTokenError,
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def _encode(payload: dict, secret: str = TEST_SECRET, algorithm: str = "HS256") -> str:
    return jwt.encode(payload, secret, algorithm=algorithm)


def _future(hours: int = 1) -> datetime:
    return datetime.now(UTC) + timedelta(hours=hours)


class TestCreateAccessToken(unittest.TestCase):
    """create_access_token carries user_id, legacy id, role, iat and a 24h exp."""

    def setUp(self) -> None:
        self.settings = make_settings()

    def test_claims(self) -> None:
        token = create_access_token(7, "admin", self.settings)
        payload = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
        self.assertEqual(payload["user_id"], 7)
        self.assertEqual(payload["id"], 7)
        self.assertEqual(payload["role"], "admin")
        self.assertEqual(ACCESS_TOKEN_EXPIRE_HOURS, 24)
        self.assertEqual(payload["exp"] - payload["iat"], 24 * 3600)

    def test_round_trip(self) -> None:
        claims = decode_access_token(create_access_token(3, "user", self.settings), self.settings)
        self.assertEqual(claims.user_id, 3)
        self.assertEqual(claims.role, "user")


class TestDecodeAccessToken(unittest.TestCase):
    """decode_access_token rejects bad tokens with a kind-specific TokenError."""

    def setUp(self) -> None:
        self.settings = make_settings()

    def test_expired_token_rejected_despite_valid_signature(self) -> None:
        token = _encode({"user_id": 1, "exp": datetime.now(UTC) - timedelta(seconds=5)})
        with self.assertRaises(ExpiredTokenError):
            decode_access_token(token, self.settings)

    def test_not_yet_valid_token_rejected(self) -> None:
        token = _encode({"user_id": 1, "exp": _future(), "nbf": _future()})
        with self.assertRaises(ExpiredTokenError):
            decode_access_token(token, self.settings)

    def test_tampered_signature_rejected(self) -> None:
        token = create_access_token(1, "user", self.settings)
        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
        with self.assertRaises(InvalidSignatureError):
            decode_access_token(f"{header}.{payload}.{flipped}", self.settings)

    def test_wrong_secret_rejected(self) -> None:
        token = _encode({"user_id": 1, "exp": _future()}, secret="some-other-secret-0123456789abcdef")
        with self.assertRaises(InvalidSignatureError):
            decode_access_token(token, self.settings)

    def test_malformed_token(self) -> None:
        with self.assertRaises(MalformedTokenError):
            decode_access_token("not-a-jwt", self.settings)

    def test_unsigned_token_rejected(self) -> None:
        token = jwt.encode({"user_id": 1, "exp": _future()}, None, algorithm="none")
        with self.assertRaises(TokenError):
            decode_access_token(token, self.settings)

    def test_other_hmac_algorithm_rejected(self) -> None:
        token = _encode({"user_id": 1, "exp": _future()}, algorithm="HS512")
        with self.assertRaises(TokenError):
            decode_access_token(token, self.settings)

    def test_legacy_id_claim_accepted(self) -> None:
        token = _encode({"id": 42, "role": "user", "exp": _future()})
        self.assertEqual(decode_access_token(token, self.settings).user_id, 42)

    def test_user_id_claim_wins_over_legacy_id(self) -> None:
        token = _encode({"user_id": 5, "id": 6, "exp": _future()})
        self.assertEqual(decode_access_token(token, self.settings).user_id, 5)

    def test_missing_identity_claim(self) -> None:
        token = _encode({"role": "admin", "exp": _future()})
        with self.assertRaises(InvalidTokenClaimsError):
            decode_access_token(token, self.settings)

    def test_non_numeric_identity_claim(self) -> None:
        token = _encode({"user_id": "abc", "exp": _future()})
        with self.assertRaises(InvalidTokenClaimsError):
            decode_access_token(token, self.settings)

    def test_missing_exp_rejected(self) -> None:
        token = _encode({"user_id": 1})
        with self.assertRaises(TokenError):
            decode_access_token(token, self.settings)


class TestPasswordHashing(unittest.TestCase):
    def setUp(self) -> None:
        self._rounds = security.BCRYPT_ROUNDS
        security.BCRYPT_ROUNDS = 4

    def tearDown(self) -> None:
        security.BCRYPT_ROUNDS = self._rounds

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("secret1")
        self.assertNotEqual(hashed, "secret1")
        self.assertTrue(verify_password("secret1", hashed))
        self.assertFalse(verify_password("secret2", hashed))

    def test_empty_password_never_verifies(self) -> None:
        self.assertFalse(verify_password("", hash_password("secret1")))

    def test_garbage_hash_does_not_raise(self) -> None:
        self.assertFalse(verify_password("secret1", "not-a-bcrypt-hash"))


if __name__ == "__main__":
    unittest.main()
