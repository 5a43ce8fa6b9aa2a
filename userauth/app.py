"""Wiring of the service and its gRPC server."""

from __future__ import annotations

import argparse
import json
import logging
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any, Callable

import grpc

from . import closer, config
from .api import Implementation
from .config import GRPCConfig, PGConfig
from .converter import CreateRequest, DeleteRequest, GetRequest, UpdateRequest
from .db import Client, connect
from .prettier import PLACEHOLDER_DOLLAR, PLACEHOLDER_QUESTION
from .repository import RepositoryError, UsersRepository
from .service import PasswordMismatchError, UsersService

logger = logging.getLogger(__name__)

SERVICE_NAME = "user_v1.UserV1"
_MAX_WORKERS = 10


class _SQLiteConnector:
    """Opens ``sqlite://<path>`` DSNs with the standard library."""

    paramstyle = PLACEHOLDER_QUESTION
    prefix = "sqlite://"

    def __call__(self, dsn: str):
        if not dsn.startswith(self.prefix):
            raise ValueError(f"unsupported dsn: {dsn!r}")
        return sqlite3.connect(dsn[len(self.prefix):], check_same_thread=False)


class ServiceProvider:
    """Builds each dependency on first use and reuses it afterwards.

    ``connector`` opens a DB-API connection from the DSN; its ``paramstyle``
    attribute, if any, names the numbered placeholder marker (``$`` by default).
    """

    def __init__(self, connector: Callable[[str], Any] | None = None) -> None:
        self._connector = connector if connector is not None else _SQLiteConnector()
        self._pg_config: PGConfig | None = None
        self._grpc_config: GRPCConfig | None = None
        self._db_client: Client | None = None
        self._users_repository: UsersRepository | None = None
        self._users_service: UsersService | None = None
        self._users_impl: Implementation | None = None

    def pg_config(self) -> PGConfig:
        if self._pg_config is None:
            self._pg_config = PGConfig.from_env()
        return self._pg_config

    def grpc_config(self) -> GRPCConfig:
        if self._grpc_config is None:
            self._grpc_config = GRPCConfig.from_env()
        return self._grpc_config

    def db_client(self) -> Client:
        if self._db_client is None:
            paramstyle = getattr(self._connector, "paramstyle", PLACEHOLDER_DOLLAR)
            client = connect(self.pg_config().dsn, self._connector, paramstyle)
            client.db().ping()
            closer.add(client.close)
            self._db_client = client
        return self._db_client

    def users_repository(self) -> UsersRepository:
        if self._users_repository is None:
            self._users_repository = UsersRepository(self.db_client())
        return self._users_repository

    def users_service(self) -> UsersService:
        if self._users_service is None:
            self._users_service = UsersService(self.users_repository())
        return self._users_service

    def users_impl(self) -> Implementation:
        if self._users_impl is None:
            self._users_impl = Implementation(self.users_service())
        return self._users_impl


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"cannot encode {type(value).__name__}")


def _encode(message: Any) -> bytes:
    payload = asdict(message) if is_dataclass(message) else {}
    return json.dumps(payload, default=_jsonable).encode("utf-8")


def _decoder(message_type: type) -> Callable[[bytes], Any]:
    def decode(data: bytes) -> Any:
        return message_type(**(json.loads(data) if data else {}))

    return decode


def _unary(method: Callable[[Any], Any], message_type: type) -> grpc.RpcMethodHandler:
    def handle(request, context):
        try:
            return method(request)
        except RepositoryError as error:
            context.abort(error.code, str(error))
        except PasswordMismatchError as error:
            context.abort(grpc.StatusCode.UNKNOWN, str(error))

    return grpc.unary_unary_rpc_method_handler(
        handle, request_deserializer=_decoder(message_type), response_serializer=_encode
    )


def _users_handler(impl: Implementation) -> grpc.GenericRpcHandler:
    return grpc.method_handlers_generic_handler(
        SERVICE_NAME,
        {
            "Create": _unary(impl.create, CreateRequest),
            "Get": _unary(impl.get, GetRequest),
            "Update": _unary(impl.update, UpdateRequest),
            "Delete": _unary(impl.delete, DeleteRequest),
        },
    )


class App:
    """Loads configuration, connects its dependencies and serves gRPC."""

    def __init__(self, config_path: str = ".env", connector: Callable[[str], Any] | None = None) -> None:
        config.load(config_path)
        self.service_provider = ServiceProvider(connector)
        self.grpc_server = grpc.server(ThreadPoolExecutor(max_workers=_MAX_WORKERS))
        self.grpc_server.add_generic_rpc_handlers(
            (_users_handler(self.service_provider.users_impl()),)
        )

    def run(self) -> None:
        """Serve until the server stops, then release every resource."""
        try:
            self._run_grpc_server()
        finally:
            closer.close_all()
            closer.wait()

    def _run_grpc_server(self) -> None:
        address = self.service_provider.grpc_config().address()
        logger.info("GRPC server is running on %s", address)
        if self.grpc_server.add_insecure_port(address) == 0:
            raise OSError(f"failed to listen on {address}")
        self.grpc_server.start()
        self.grpc_server.wait_for_termination()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="User management gRPC service.")
    parser.add_argument("--config-path", default=".env", help="path to config file")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        app = App(args.config_path)
    except Exception as error:
        logger.critical("failed to init app: %s", error)
        return 1

    try:
        app.run()
    except Exception as error:
        logger.critical("failed to run app: %s", error)
        return 1
    return 0