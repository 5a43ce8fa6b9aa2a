"""Request and response messages, and their conversion to domain records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .model import User, UserChangable, UserFullNoPass


@dataclass
class CreateRequest:
    name: str = ""
    email: str = ""
    role: int = 0
    password: str = ""
    password_confirm: str = ""


@dataclass
class CreateResponse:
    id: int = 0


@dataclass
class GetRequest:
    id: int = 0


@dataclass
class GetResponse:
    id: int
    name: str
    email: str
    role: int
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass
class UpdateRequest:
    """An update; a ``None`` field is left unchanged."""

    id: int = 0
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class DeleteRequest:
    id: int = 0


def to_get_response_from_service(user: UserFullNoPass) -> GetResponse:
    return GetResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def to_user_from_desc(request: CreateRequest) -> User:
    return User(
        name=request.name,
        email=request.email,
        role=request.role,
        password=request.password,
        password_confirm=request.password_confirm,
    )


def to_user_changable_from_desc(request: UpdateRequest) -> UserChangable:
    return UserChangable(id=request.id, name=request.name, email=request.email)