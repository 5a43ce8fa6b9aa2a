"""Domain records for users."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class User:
    """A user as submitted for creation."""

    name: str
    email: str
    role: int
    password: str
    password_confirm: str


@dataclass
class UserFullNoPass:
    """A stored user, without credentials."""

    id: int
    name: str
    email: str
    role: int
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass
class UserChangable:
    """The fields of a user that may be updated; ``None`` means unchanged."""

    id: int
    name: Optional[str] = None
    email: Optional[str] = None