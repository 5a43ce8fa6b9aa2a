"""Configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

GRPC_HOST_ENV_NAME = "GRPC_HOST"
GRPC_PORT_ENV_NAME = "GRPC_PORT"
DSN_ENV_NAME = "PG_DSN"


class ConfigError(Exception):
    """A required configuration value is missing."""


def load(path: str) -> None:
    """Load variables from an env file without overriding existing ones."""
    with open(path, encoding="utf-8") as stream:
        load_dotenv(stream=stream, override=False)


def _require(name: str, message: str) -> str:
    value = os.environ.get(name, "")
    if not value:
        raise ConfigError(message)
    return value


@dataclass(frozen=True)
class GRPCConfig:
    """Where the gRPC server listens."""

    host: str
    port: str

    @classmethod
    def from_env(cls) -> "GRPCConfig":
        host = _require(GRPC_HOST_ENV_NAME, "grpc host not found")
        port = _require(GRPC_PORT_ENV_NAME, "grpc port not found")
        return cls(host=host, port=port)

    def address(self) -> str:
        """Return host and port joined, bracketing IPv6 hosts."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"


@dataclass(frozen=True)
class PGConfig:
    """How to reach the database."""

    dsn: str

    @classmethod
    def from_env(cls) -> "PGConfig":
        return cls(dsn=_require(DSN_ENV_NAME, "pg dsn not found"))