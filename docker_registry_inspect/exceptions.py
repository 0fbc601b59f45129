#!/usr/bin/env python

# pylint: disable=too-few-public-methods

"""Errors raised while talking to a docker registry."""

from typing import Any


class ProtocolError(ValueError):
    """Error raised when a registry response does not have the expected shape."""

    def __init__(
        self, message: str = "Unexpected registry response!", *, response: Any = None
    ):
        super().__init__(message)
        self.response = response


class UnsupportedSchemaVersionError(ProtocolError):
    """Error raised when a manifest declares a schema version other than 2."""

    def __init__(self, schema_version: Any = None):
        super().__init__(
            f"Unknown manifest version: {schema_version}", response=schema_version
        )
        self.schema_version = schema_version


class RegistryError(RuntimeError):
    """Error raised when the registry answers with a client error (4xx)."""

    def __init__(self, url: str, status: int, message: str, body: bytes = b""):
        super().__init__(f"HTTP Error {status} on {url}: {message}")
        self.body = body
        self.message = message
        self.status = int(status)
        self.url = url


class TransportError(RuntimeError):
    """Error raised for server errors, unclassified responses and connection failures."""

    def __init__(self, message: str, *, url: str = None, status: int = None):
        super().__init__(message)
        self.status = status
        self.url = url


# Errors that are recorded against a single tag while scanning a repository.
TAG_ERRORS = (ProtocolError, RegistryError, TransportError)
