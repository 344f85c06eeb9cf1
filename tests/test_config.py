"""Unit tests for supportdesk.core.config.Settings validation."""

import unittest

from pydantic import SecretStr, ValidationError

from supportdesk.core.config import DEFAULT_CATEGORIES, DEV_FALLBACK_JWT_SECRET, Settings


def _settings(**values: object) -> Settings:
    values.setdefault("DATABASE_URL", "sqlite://")
    return Settings(_env_file=None, **values)


class TestJwtSecret(unittest.TestCase):
    """The development fallback secret is only ever used when APP_ENV=dev."""

    def test_prod_without_secret_fails(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(APP_ENV="prod", JWT_SECRET=None)

    def test_prod_with_blank_secret_fails(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(APP_ENV="prod", JWT_SECRET=SecretStr("   "))

    def test_dev_without_secret_uses_fallback_and_warns(self) -> None:
        with self.assertLogs("supportdesk.core.config", level="WARNING"):
            s = _settings(APP_ENV="dev", JWT_SECRET=None)
        self.assertEqual(s.JWT_SECRET.get_secret_value(), DEV_FALLBACK_JWT_SECRET)

    def test_explicit_secret_kept(self) -> None:
        s = _settings(APP_ENV="prod", JWT_SECRET=SecretStr("a-real-deployment-secret-value-0123"))
        self.assertEqual(s.JWT_SECRET.get_secret_value(), "a-real-deployment-secret-value-0123")


class TestOtherSettings(unittest.TestCase):
    def test_non_hmac_algorithm_rejected(self) -> None:
        for alg in ("RS256", "none", ""):
            with self.subTest(alg=alg), self.assertRaises(ValidationError):
                _settings(JWT_ALGORITHM=alg, JWT_SECRET=SecretStr("x" * 40))

    def test_database_url_scheme(self) -> None:
        self.assertEqual(_settings(DATABASE_URL=" sqlite:// ").DATABASE_URL, "sqlite://")
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://localhost/db")

    def test_default_categories_and_dedupe(self) -> None:
        self.assertEqual(_settings(JWT_SECRET=SecretStr("x" * 40)).CATEGORIES, list(DEFAULT_CATEGORIES))
        s = _settings(JWT_SECRET=SecretStr("x" * 40), CATEGORIES=["faq", " faq ", "", "howto"])
        self.assertEqual(s.CATEGORIES, ["faq", "howto"])

    def test_token_expiry_is_not_configurable(self) -> None:
        self.assertNotIn("JWT_EXPIRE_HOURS", Settings.model_fields)

    def test_reserved_category_key_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_SECRET=SecretStr("x" * 40), CATEGORIES=["faq", "pending-tasks"])


if __name__ == "__main__":
    unittest.main()
