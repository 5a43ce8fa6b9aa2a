"""Business rules for managing users."""

from __future__ import annotations

from .model import User, UserChangable, UserFullNoPass


class PasswordMismatchError(ValueError):
    """The password and its confirmation differ."""


class UsersService:
    """Validates requests and delegates storage to a repository."""

    def __init__(self, repository) -> None:
        self._repository = repository

    def create(self, user: User) -> int:
        """Create the user after checking the password confirmation."""
        if user.password != user.password_confirm:
            raise PasswordMismatchError("passwords do not match")
        return self._repository.create(user)

    def get(self, user_id: int) -> UserFullNoPass:
        return self._repository.get(user_id)

    def update(self, data: UserChangable) -> None:
        self._repository.update(data)

    def delete(self, user_id: int) -> None:
        self._repository.delete(user_id)