"""Unit tests for subjapi.core.config: settings validation."""

import unittest

from pydantic import ValidationError

from subjapi.core.config import DEV_JWT_SECRET, Settings


def _settings(**kwargs: object) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = _settings()
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 240)
        self.assertEqual(settings.JWT_ALGORITHM, "HS256")
        self.assertTrue(settings.BOOTSTRAP_ENABLED)

    def test_empty_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_SECRET="")

    def test_short_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_SECRET="short-secret")

    def test_dev_secret_rejected_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(APP_ENV="prod", JWT_SECRET=DEV_JWT_SECRET)
        prod = _settings(APP_ENV="prod", JWT_SECRET="p" * 48)
        self.assertEqual(prod.APP_ENV, "prod")

    def test_issuer_and_audience_required(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_VALID_ISSUER=" ")
        with self.assertRaises(ValidationError):
            _settings(JWT_VALID_AUDIENCE="")

    def test_expire_minutes_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_EXPIRE_MINUTES=0)
        with self.assertRaises(ValidationError):
            _settings(JWT_EXPIRE_MINUTES=10081)

    def test_database_url(self) -> None:
        self.assertEqual(_settings(DATABASE_URL=" sqlite:// ").DATABASE_URL, "sqlite://")
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://root@localhost/db")

    def test_weak_seed_passwords_rejected(self) -> None:
        for field in ("SEED_ADMIN_PASSWORD", "SEED_USER_PASSWORD"):
            for weak in ("admin", "alllowercase1!", "NoSymbol1"):
                with self.subTest(field=field, password=weak):
                    with self.assertRaises(ValidationError):
                        _settings(**{field: weak})
        strong = _settings(SEED_ADMIN_PASSWORD="S3cure!pw")
        self.assertEqual(strong.SEED_ADMIN_PASSWORD.get_secret_value(), "S3cure!pw")

    def test_log_level_normalized(self) -> None:
        self.assertEqual(_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            _settings(LOG_LEVEL="loud")


if __name__ == "__main__":
    unittest.main()
