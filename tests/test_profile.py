"""Unit tests for stepup.services.profile: suspension gating and identifier collisions."""

import unittest

from stepup.core.errors import IdentifierCollisionError, UserSuspendedError
from stepup.services.profile import ProfileService
from tests.fakes import InMemoryUserStore, make_user


class TestUpdateProfile(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryUserStore(
            make_user("u1", username="alice", primary_email="alice@example.com"),
            make_user("u2", username="Bob", primary_email="bob@example.com"),
        )
        self.service = ProfileService(self.store)

    def test_updates_fields(self) -> None:
        user = self.service.update_profile("u1", {"name": "Alice A.", "avatar": ""})
        self.assertEqual(user.name, "Alice A.")
        self.assertEqual(user.avatar, "")

    def test_username_collision_is_case_insensitive(self) -> None:
        with self.assertRaises(IdentifierCollisionError) as ctx:
            self.service.update_profile("u1", {"username": "bob"})
        self.assertEqual(ctx.exception.code, "user.username_already_in_use")
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(self.store.updates, [])

    def test_email_collision(self) -> None:
        with self.assertRaises(IdentifierCollisionError) as ctx:
            self.service.update_profile("u1", {"primary_email": "BOB@example.com"})
        self.assertEqual(ctx.exception.code, "user.email_already_in_use")

    def test_own_identifiers_are_not_a_collision(self) -> None:
        user = self.service.update_profile(
            "u1", {"username": "ALICE", "primary_email": "alice@example.com"}
        )
        self.assertEqual(user.username, "ALICE")

    def test_ignores_non_profile_fields(self) -> None:
        self.service.update_profile("u1", {"name": "A", "is_suspended": True, "password_encrypted": "x"})
        _, changes = self.store.updates[0]
        self.assertEqual(changes, {"name": "A"})
        self.assertFalse(self.store.users["u1"].is_suspended)

    def test_empty_update_writes_nothing(self) -> None:
        user = self.service.update_profile("u1", {})
        self.assertEqual(user.id, "u1")
        self.assertEqual(self.store.updates, [])

    def test_suspended_user_cannot_update(self) -> None:
        self.store.users["u1"].is_suspended = True
        with self.assertRaises(UserSuspendedError):
            self.service.update_profile("u1", {"name": "A"})
        self.assertEqual(self.store.updates, [])


class TestCustomData(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryUserStore(make_user("u1", custom_data={"theme": "dark"}))
        self.service = ProfileService(self.store)

    def test_read(self) -> None:
        self.assertEqual(self.service.get_custom_data("u1"), {"theme": "dark"})

    def test_replace_and_echo(self) -> None:
        stored = self.service.update_custom_data("u1", {"lang": "fr", "nested": {"a": [1, 2]}})
        self.assertEqual(stored, {"lang": "fr", "nested": {"a": [1, 2]}})
        self.assertEqual(self.store.users["u1"].custom_data, stored)

    def test_suspended_user_cannot_read_or_write(self) -> None:
        self.store.users["u1"].is_suspended = True
        with self.assertRaises(UserSuspendedError):
            self.service.update_custom_data("u1", {"lang": "fr"})
        with self.assertRaises(UserSuspendedError):
            self.service.get_custom_data("u1")


class TestGetProfile(unittest.TestCase):
    def test_suspended_user_can_read_profile(self) -> None:
        store = InMemoryUserStore(make_user("u1", is_suspended=True, username="alice"))
        user = ProfileService(store).get_profile("u1")
        self.assertEqual(user.username, "alice")


if __name__ == "__main__":
    unittest.main()
