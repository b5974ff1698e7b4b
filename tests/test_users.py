"""Unit tests for stepup.services.users.UserRepository against a mocked SQLAlchemy session."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError

from stepup.core.errors import IdentifierCollisionError, StorageError, UserNotFoundError
from stepup.services.users import UserRepository
from tests.fakes import make_user


def _repo_returning(user):
    db = MagicMock()
    db.query.return_value.filter.return_value.first.return_value = user
    return UserRepository(db), db


class TestFindUserById(unittest.TestCase):
    def test_returns_user(self) -> None:
        user = make_user("u1")
        repo, _ = _repo_returning(user)
        self.assertIs(repo.find_user_by_id("u1"), user)

    def test_missing_user(self) -> None:
        repo, _ = _repo_returning(None)
        with self.assertRaises(UserNotFoundError):
            repo.find_user_by_id("nope")

    def test_database_error(self) -> None:
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("down"))
        with self.assertRaises(StorageError):
            UserRepository(db).find_user_by_id("u1")


class TestUpdateUserById(unittest.TestCase):
    def test_applies_changes_and_commits(self) -> None:
        user = make_user("u1")
        repo, db = _repo_returning(user)
        result = repo.update_user_by_id(
            "u1", {"password_encrypted": "cipher", "password_encryption_method": "Bcrypt"}
        )
        self.assertIs(result, user)
        self.assertEqual(user.password_encrypted, "cipher")
        self.assertEqual(user.password_encryption_method, "Bcrypt")
        db.commit.assert_called_once()
        db.refresh.assert_called_once_with(user)

    def test_commit_failure_rolls_back(self) -> None:
        repo, db = _repo_returning(make_user("u1"))
        db.commit.side_effect = OperationalError("UPDATE", {}, Exception("down"))
        with self.assertRaises(StorageError):
            repo.update_user_by_id("u1", {"name": "x"})
        db.rollback.assert_called_once()
        db.refresh.assert_not_called()

    def test_unique_index_violation_is_collision(self) -> None:
        repo, db = _repo_returning(make_user("u1"))
        db.commit.side_effect = IntegrityError(
            "UPDATE",
            {},
            Exception('duplicate key value violates unique constraint "ix_users_username_lower"'),
        )
        with self.assertRaises(IdentifierCollisionError) as ctx:
            repo.update_user_by_id("u1", {"username": "bob"})
        self.assertEqual(ctx.exception.identifier, "username")
        db.rollback.assert_called_once()

    def test_other_integrity_error_is_storage_error(self) -> None:
        repo, db = _repo_returning(make_user("u1"))
        db.commit.side_effect = IntegrityError(
            "UPDATE", {}, Exception('violates check constraint "ck_users_password_pair"')
        )
        with self.assertRaises(StorageError):
            repo.update_user_by_id("u1", {"password_encrypted": "x"})


class TestCheckIdentifierCollision(unittest.TestCase):
    def test_no_identifiers_no_queries(self) -> None:
        db = MagicMock()
        UserRepository(db).check_identifier_collision({"name": "A"}, exclude_user_id="u1")
        db.query.assert_not_called()

    def test_taken_username(self) -> None:
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = ("u2",)
        with self.assertRaises(IdentifierCollisionError) as ctx:
            UserRepository(db).check_identifier_collision({"username": "Bob"}, exclude_user_id="u1")
        self.assertEqual(ctx.exception.code, "user.username_already_in_use")

    def test_free_identifiers(self) -> None:
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        UserRepository(db).check_identifier_collision(
            {"username": "bob", "primary_email": "bob@example.com"}, exclude_user_id="u1"
        )
        self.assertEqual(db.query.call_count, 2)


if __name__ == "__main__":
    unittest.main()
