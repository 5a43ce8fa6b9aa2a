"""The user service's request handlers."""

from __future__ import annotations

from .converter import (
    CreateRequest,
    CreateResponse,
    DeleteRequest,
    GetRequest,
    GetResponse,
    UpdateRequest,
    to_get_response_from_service,
    to_user_changable_from_desc,
    to_user_from_desc,
)


class Implementation:
    """Handles user requests by calling the users service."""

    def __init__(self, users_service) -> None:
        self._users_service = users_service

    def create(self, request: CreateRequest) -> CreateResponse:
        user_id = self._users_service.create(to_user_from_desc(request))
        return CreateResponse(id=user_id)

    def get(self, request: GetRequest) -> GetResponse:
        user = self._users_service.get(request.id)
        return to_get_response_from_service(user)

    def update(self, request: UpdateRequest) -> None:
        self._users_service.update(to_user_changable_from_desc(request))

    def delete(self, request: DeleteRequest) -> None:
        self._users_service.delete(request.id)