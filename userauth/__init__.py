"""A gRPC user account service over a DB-API SQL connection."""

__version__ = "0.1.0"