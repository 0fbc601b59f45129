#!/usr/bin/env python

# pylint: disable=too-few-public-methods

"""Reusable string literals."""

from enum import Enum


class DockerMediaTypes:
    """
    Docker media types.
    """

    DISTRIBUTION_MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"


class ManifestStatus(Enum):
    """
    Outcome of a manifest lookup.
    """

    FOUND = 0
    NOT_FOUND = 1
    ERROR = 2


class ResponseClasses(Enum):
    """
    Classification of registry HTTP responses.
    """

    SUCCESS = 0  # 2xx
    CLIENT_ERROR = 1  # 4xx
    UNKNOWN = 2  # 5xx and everything else


SCHEMA_VERSION = 2
SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]
