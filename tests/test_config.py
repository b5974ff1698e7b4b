"""Unit tests for stepup.core.config.Settings validation."""

import unittest

from pydantic import ValidationError

from stepup.core.config import Settings


class TestSettingsDefaults(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        self.assertEqual(settings.SESSION_COOKIE_NAME, "_session")
        self.assertEqual(settings.VERIFICATION_TTL_SECONDS, 600)
        self.assertFalse(settings.VERIFICATION_SINGLE_USE)
        self.assertEqual(settings.API_PREFIX, "/api/me")


class TestSettingsValidation(unittest.TestCase):
    def test_rejects_non_postgres_url(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, DATABASE_URL="sqlite:///x.db")

    def test_ttl_bounds(self) -> None:
        for ttl in (0, 29, 86401):
            with self.subTest(ttl=ttl):
                with self.assertRaises(ValidationError):
                    Settings(_env_file=None, VERIFICATION_TTL_SECONDS=ttl)
        self.assertEqual(Settings(_env_file=None, VERIFICATION_TTL_SECONDS=30).VERIFICATION_TTL_SECONDS, 30)

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, BCRYPT_ROUNDS=3)

    def test_prefix_normalized(self) -> None:
        settings = Settings(_env_file=None, API_PREFIX="/account/")
        self.assertEqual(settings.API_PREFIX, "/account")
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, API_PREFIX="account")

    def test_blank_session_cookie_name(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, SESSION_COOKIE_NAME="  ")


if __name__ == "__main__":
    unittest.main()
