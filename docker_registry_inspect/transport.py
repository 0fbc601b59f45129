#!/usr/bin/env python

"""HTTP transport for the docker registry API v2."""

import asyncio
import json
import logging
import os

from ssl import create_default_context, SSLContext
from typing import Any, Dict, List, NamedTuple, Optional, Union

from aiohttp import ClientError, ClientSession, TCPConnector

from .exceptions import ProtocolError, RegistryError, TransportError
from .specs import DockerMediaTypes, ResponseClasses

LOGGER = logging.getLogger("docker_registry_inspect")


class TransportResponse(NamedTuple):
    # pylint: disable=missing-class-docstring
    body: bytes
    headers: Dict[str, List[str]]
    status: int


class TransportJsonResponse(NamedTuple):
    # pylint: disable=missing-class-docstring
    headers: Dict[str, List[str]]
    json: Any


class RegistryTransport:
    """
    AIOHTTP based transport that issues requests against <base url>/v2/ and classifies the responses.
    """

    DEFAULT_CACERTS = os.environ.get("DRI_CACERTS", None)

    def __init__(
        self,
        base_url: str,
        *,
        cacerts: str = None,
        client_session: ClientSession = None,
        insecure: bool = False,
        logger: logging.Logger = None,
    ):
        """
        Args:
            base_url: The registry URL, e.g. https://registry:5000.
            cacerts: Path to a CA certificate bundle used to verify the registry.
            client_session: The underlying client session to use when making connections.
            insecure: If True, the registry certificate is not verified.
            logger: The logger to which requests and responses are reported.
        """
        if cacerts is None:
            cacerts = RegistryTransport.DEFAULT_CACERTS

        self.base_url = f"{base_url.rstrip('/')}/v2/"
        self.cacerts = cacerts
        self.client_session = client_session
        self.insecure = insecure
        self.logger = logger if logger is not None else LOGGER
        self.ssl = self._get_ssl()

    async def __aenter__(self) -> "RegistryTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_ssl(self) -> Union[bool, SSLContext]:
        """
        Derives the TLS policy from the transport configuration.

        Returns:
            False if peer verification is disabled, an SSL context trusting the CA bundle, or True for the defaults.
        """
        if self.insecure:
            self.logger.debug("Peer certificate verification is disabled.")
            return False
        if self.cacerts:
            self.logger.debug("Using cacerts: %s", self.cacerts)
            return create_default_context(cafile=str(self.cacerts))
        return True

    async def _get_client_session(self) -> ClientSession:
        """
        Initializes and / or retrieves an AIOHTTP client session.

        Returns:
            The AIOHTTP client session.
        """
        if not self.client_session:
            self.client_session = ClientSession(connector=TCPConnector(ssl=self.ssl))
        return self.client_session

    async def close(self):
        """Gracefully closes this instance."""
        if self.client_session:
            await self.client_session.close()
        self.client_session = None

    @staticmethod
    def classify(status: int) -> ResponseClasses:
        """
        Classifies an HTTP status code.

        Args:
            status: The HTTP status code.

        Returns:
            The corresponding response class.
        """
        if 200 <= status < 300:
            return ResponseClasses.SUCCESS
        if 400 <= status < 500:
            return ResponseClasses.CLIENT_ERROR
        return ResponseClasses.UNKNOWN

    async def request(self, path: str, *, method: str = "GET") -> TransportResponse:
        """
        Issues a request against the registry and classifies the response.

        Args:
            path: The escaped path, relative to <base url>/v2/.
            method: The HTTP method.

        Returns:
            The body, headers, and status of a successful response.
        """
        url = f"{self.base_url}{path}"
        client_session = await self._get_client_session()

        self.logger.debug("Request %s %s", method, url)
        try:
            async with client_session.request(
                method,
                url,
                allow_redirects=False,
                headers={"Accept": DockerMediaTypes.DISTRIBUTION_MANIFEST_V2},
                ssl=self.ssl,
            ) as client_response:
                body = await client_response.read()
                headers = {}
                for key, value in client_response.headers.items():
                    headers.setdefault(key.lower(), []).append(value)
                reason = client_response.reason
                status = client_response.status
        except (asyncio.TimeoutError, ClientError) as exception:
            raise TransportError(
                f"Unable to {method} {url}: {exception}", url=url
            ) from exception
        self.logger.debug("Response %s %s returned %d", method, url, status)

        response_class = RegistryTransport.classify(status)
        if response_class == ResponseClasses.SUCCESS:
            return TransportResponse(body=body, headers=headers, status=status)
        if response_class == ResponseClasses.CLIENT_ERROR:
            raise RegistryError(url, status, reason, body)
        raise TransportError(
            f"Unknown response {status} {reason} on {url}", url=url, status=status
        )

    async def request_json(
        self, path: str, *, method: str = "GET"
    ) -> TransportJsonResponse:
        """
        Issues a request against the registry and decodes the JSON response body.

        Args:
            path: The escaped path, relative to <base url>/v2/.
            method: The HTTP method.

        Returns:
            The headers of the response and the decoded body; None if the body is empty.
        """
        response = await self.request(path, method=method)
        return TransportJsonResponse(
            headers=response.headers, json=decode_json(response.body)
        )


def decode_json(body: bytes) -> Optional[Any]:
    """
    Decodes a response body.

    Args:
        body: The raw response body.

    Returns:
        The decoded value, or None if the body is empty.
    """
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError as exception:
        raise ProtocolError(
            f"Unable to decode response: {exception}", response=body
        ) from exception
