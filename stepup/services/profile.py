"""Profile and custom data for the authenticated user. No step-up verification involved."""

import logging
from collections.abc import Mapping
from typing import Any

from stepup.core.errors import UserSuspendedError
from stepup.models.user import User
from stepup.services.users import PROFILE_FIELDS, UserStore

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, users: UserStore) -> None:
        self.users = users

    def _find_active_user(self, user_id: str) -> User:
        user = self.users.find_user_by_id(user_id)
        if user.is_suspended:
            raise UserSuspendedError()
        return user

    def get_profile(self, user_id: str) -> User:
        """Read-only; available to suspended users too."""
        return self.users.find_user_by_id(user_id)

    def update_profile(self, user_id: str, changes: Mapping[str, Any]) -> User:
        """
        Update username, primary_email, name and/or avatar.

        New username or email must not belong to another user (case-insensitive).
        Keys outside the profile fields are ignored.
        """
        self._find_active_user(user_id)
        updates = {key: value for key, value in changes.items() if key in PROFILE_FIELDS}
        self.users.check_identifier_collision(updates, exclude_user_id=user_id)
        if not updates:
            return self.users.find_user_by_id(user_id)
        user = self.users.update_user_by_id(user_id, updates)
        logger.info("Profile updated", extra={"user_id": user_id, "fields": sorted(updates)})
        return user

    def get_custom_data(self, user_id: str) -> dict[str, Any]:
        user = self._find_active_user(user_id)
        return dict(user.custom_data or {})

    def update_custom_data(self, user_id: str, custom_data: Mapping[str, Any]) -> dict[str, Any]:
        """Replace the whole custom data document and return what was stored."""
        self._find_active_user(user_id)
        user = self.users.update_user_by_id(user_id, {"custom_data": dict(custom_data)})
        return dict(user.custom_data or {})
