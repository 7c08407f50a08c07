"""User storage for shopcore."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from .config import DEFAULT_ACTOR
from .errors import DuplicateKeyError, InvalidFieldError, NotFoundError
from .identity import IdAllocator
from .models import User, UserStatus
from .validation import (
    enum_member,
    is_not_empty,
    is_valid_email,
    is_valid_phone_number,
    length_in_range,
)

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50


def _key(value: str) -> str:
    return value.lower()


class UserStore:
    """In-memory users indexed by ID, username and email."""

    def __init__(self, actor: str = DEFAULT_ACTOR):
        """
        Initialize UserStore.

        Args:
            actor: Name recorded as created_by/updated_by on every write.
        """
        self.actor = actor
        self._ids = IdAllocator()
        self._users: dict[int, User] = {}
        self._by_username: dict[str, User] = {}
        self._by_email: dict[str, User] = {}
        self._mutex = threading.RLock()

    @contextmanager
    def _lock(self) -> Iterator[None]:
        """Hold the store lock for a check-then-write sequence."""
        with self._mutex:
            yield

    def __len__(self) -> int:
        return len(self._users)

    def count(self) -> int:
        return len(self._users)

    def create(
        self,
        username: str,
        email: str,
        first_name: str,
        last_name: str,
        phone_number: str | None = None,
        password_hash: str | None = None,
    ) -> User:
        """
        Create and store a new user.

        Returns:
            The created User, ACTIVE and with a freshly allocated ID.

        Raises:
            InvalidFieldError: If a field fails validation.
            DuplicateKeyError: If the username or email is already taken
                (case-insensitive).
        """
        logger.info("Creating user with username: %s, email: %s", username, email)

        self._validate(username, email, first_name, last_name, phone_number)

        with self._lock():
            if _key(username) in self._by_username:
                raise DuplicateKeyError("username", username)
            if _key(email) in self._by_email:
                raise DuplicateKeyError("email", email)

            user = User(
                username=username,
                email=email,
                first_name=first_name,
                last_name=last_name,
                phone_number=phone_number,
                password_hash=password_hash,
            )
            user.id = self._ids.next_id()
            user.lifecycle.stamp(self.actor)

            self._users[user.id] = user
            self._by_username[_key(username)] = user
            self._by_email[_key(email)] = user

        logger.info("User created successfully with ID: %s", user.id)
        return user

    def find_by_id(self, user_id: int | None) -> User | None:
        if user_id is None:
            return None
        return self._users.get(user_id)

    def find_by_username(self, username: str | None) -> User | None:
        if not is_not_empty(username):
            return None
        return self._by_username.get(_key(username))

    def find_by_email(self, email: str | None) -> User | None:
        """Find a user by email. A malformed email never matches."""
        if not is_valid_email(email):
            return None
        return self._by_email.get(_key(email))

    def get(self, user_id: int | None) -> User:
        """
        Get a user by ID.

        Raises:
            NotFoundError: If the user doesn't exist.
        """
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def update(
        self,
        user_id: int,
        first_name: str | None = None,
        last_name: str | None = None,
        phone_number: str | None = None,
    ) -> User:
        """
        Update a user's name and phone number.

        Blank or missing values leave the field as it is.

        Raises:
            NotFoundError: If the user doesn't exist.
            InvalidFieldError: If the phone number is malformed. Nothing is
                changed in that case.
        """
        with self._lock():
            user = self.get(user_id)

            if is_not_empty(phone_number) and not is_valid_phone_number(phone_number):
                raise InvalidFieldError(
                    "phone_number", "Invalid phone number format", "INVALID_PHONE"
                )

            if is_not_empty(first_name):
                user.first_name = first_name
            if is_not_empty(last_name):
                user.last_name = last_name
            if is_not_empty(phone_number):
                user.phone_number = phone_number

            user.lifecycle.touch(self.actor)

        logger.info("User updated successfully: %s", user.id)
        return user

    def change_status(self, user_id: int, status: UserStatus | str) -> User:
        """
        Set a user's status.

        Raises:
            NotFoundError: If the user doesn't exist.
            InvalidFieldError: If status isn't a known UserStatus.
        """
        new_status = enum_member(UserStatus, status)
        with self._lock():
            user = self.get(user_id)
            if new_status is None:
                raise InvalidFieldError("status", f"Unknown user status: {status}")

            old_status = user.status
            user.status = new_status
            user.lifecycle.touch(self.actor)

        logger.info(
            "User status changed from %s to %s for user ID: %s",
            old_status.value,
            new_status.value,
            user_id,
        )
        return user

    def activate(self, user_id: int) -> User:
        return self.change_status(user_id, UserStatus.ACTIVE)

    def deactivate(self, user_id: int) -> User:
        return self.change_status(user_id, UserStatus.INACTIVE)

    def suspend(self, user_id: int) -> User:
        return self.change_status(user_id, UserStatus.SUSPENDED)

    def list_users(self) -> list[User]:
        return list(self._users.values())

    def list_active(self) -> list[User]:
        return [u for u in self._users.values() if u.is_active]

    def list_by_status(self, status: UserStatus | str | None) -> list[User]:
        wanted = enum_member(UserStatus, status)
        if wanted is None:
            return []
        return [u for u in self._users.values() if u.status is wanted]

    def _validate(
        self,
        username: str,
        email: str,
        first_name: str,
        last_name: str,
        phone_number: str | None,
    ) -> None:
        if not is_not_empty(username):
            raise InvalidFieldError("username", "Username cannot be empty")
        if not length_in_range(username, USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH):
            raise InvalidFieldError(
                "username",
                f"Username must be between {USERNAME_MIN_LENGTH} and "
                f"{USERNAME_MAX_LENGTH} characters",
            )
        if not is_valid_email(email):
            raise InvalidFieldError("email", "Invalid email format")
        if not is_not_empty(first_name):
            raise InvalidFieldError("first_name", "First name cannot be empty")
        if not is_not_empty(last_name):
            raise InvalidFieldError("last_name", "Last name cannot be empty")
        if phone_number is not None and not is_valid_phone_number(phone_number):
            raise InvalidFieldError(
                "phone_number", "Invalid phone number format", "INVALID_PHONE"
            )
