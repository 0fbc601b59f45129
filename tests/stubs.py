#!/usr/bin/env python

"""Stub classes for offline testing."""

import json

from typing import Any, Dict, List, Optional, Tuple, Union

from aiohttp import web

from docker_registry_inspect import (
    RegistryTransport,
    TransportJsonResponse,
    TransportResponse,
)

DIGEST_HEADER = "Docker-Content-Digest"


class FakeTransport(RegistryTransport):
    """
    Transport that answers from a table of canned responses instead of the network.

    Each entry maps (method, path) to either a decoded body, a (decoded body, headers) tuple, or an exception that is
    raised when the path is requested.
    """

    def __init__(self, responses: Dict[Tuple[str, str], Any] = None):
        super().__init__("https://fake.registry")
        self.calls = []  # type: List[Tuple[str, str]]
        self.closed = False
        self.responses = responses if responses is not None else {}

    def add(
        self,
        path: str,
        response: Any,
        *,
        headers: Dict[str, List[str]] = None,
        method: str = "GET",
    ):
        """Registers a canned response."""
        if not isinstance(response, Exception):
            response = (response, headers or {})
        self.responses[(method, path)] = response

    def add_manifest(self, repository: str, reference: str, json_: Any, digest: str):
        """Registers a canned manifest response, including its digest header."""
        self.add(
            f"{repository}/manifests/{reference}",
            json_,
            headers={"docker-content-digest": [digest]},
        )

    async def close(self):
        self.closed = True

    async def request(self, path: str, *, method: str = "GET") -> TransportResponse:
        response = await self.request_json(path, method=method)
        body = b"" if response.json is None else json.dumps(response.json).encode()
        return TransportResponse(body=body, headers=response.headers, status=200)

    async def request_json(
        self, path: str, *, method: str = "GET"
    ) -> TransportJsonResponse:
        self.calls.append((method, path))
        response = self.responses.get((method, path))
        if response is None:
            raise AssertionError(f"Unexpected request: {method} {path}")
        if isinstance(response, Exception):
            raise response
        return TransportJsonResponse(headers=response[1], json=response[0])


class RegistryStub:
    """
    In-process registry that implements the subset of the registry API v2 used by the client.
    """

    def __init__(self):
        self.deleted = []  # type: List[Tuple[str, str, str]]
        # repository -> tag / digest -> (manifest, digest)
        self.manifests = {}  # type: Dict[str, Dict[str, Tuple[Any, str]]]
        self.requests = []  # type: List[web.Request]
        # path -> (status, body)
        self.overrides = {}  # type: Dict[str, Tuple[int, Union[bytes, str]]]
        # path -> (status, location)
        self.redirects = {}  # type: Dict[str, Tuple[int, str]]
        self.root = {}  # type: Optional[Any]
        self.url = None  # type: Optional[str]

        self.app = web.Application(middlewares=[self._middleware])
        self.app.router.add_get("/v2/", self._get_root)
        self.app.router.add_get("/elsewhere", self._get_root)
        self.app.router.add_get("/v2/_catalog", self._get_catalog)
        self.app.router.add_get("/v2/{repository:.+}/tags/list", self._get_tags)
        self.app.router.add_get(
            "/v2/{repository:.+}/manifests/{reference}", self._get_manifest
        )
        self.app.router.add_delete(
            "/v2/{repository:.+}/manifests/{reference}", self._delete
        )
        self.app.router.add_delete("/v2/{repository:.+}/blobs/{reference}", self._delete)

    def add_manifest(self, repository: str, tag: str, manifest: Any, digest: str):
        """Adds a manifest to a repository, reachable by tag and by digest."""
        tags = self.manifests.setdefault(repository, {})
        tags[tag] = (manifest, digest)
        tags[digest] = (manifest, digest)

    @web.middleware
    async def _middleware(self, request: web.Request, handler):
        self.requests.append(request)
        override = self.overrides.get(request.path)
        if override:
            status, body = override
            return web.Response(body=body, status=status)
        redirect = self.redirects.get(request.path)
        if redirect:
            status, location = redirect
            return web.Response(headers={"Location": location}, status=status)
        return await handler(request)

    async def _get_root(self, request: web.Request) -> web.Response:
        # pylint: disable=unused-argument
        if self.root is None:
            return web.Response(status=200)
        return web.json_response(self.root)

    async def _get_catalog(self, request: web.Request) -> web.Response:
        count = int(request.query.get("n", "100"))
        repositories = sorted(self.manifests.keys())[:count]
        return web.json_response({"repositories": repositories})

    async def _get_tags(self, request: web.Request) -> web.Response:
        repository = request.match_info["repository"]
        if repository not in self.manifests:
            return web.json_response({"errors": [{"code": "NAME_UNKNOWN"}]}, status=404)
        tags = [tag for tag in self.manifests[repository] if ":" not in tag]
        return web.json_response({"name": repository, "tags": tags or None})

    async def _get_manifest(self, request: web.Request) -> web.Response:
        repository = request.match_info["repository"]
        reference = request.match_info["reference"]
        entry = self.manifests.get(repository, {}).get(reference)
        if entry is None:
            return web.json_response(
                {"errors": [{"code": "MANIFEST_UNKNOWN"}]}, status=404
            )
        manifest, digest = entry
        return web.json_response(manifest, headers={DIGEST_HEADER: digest})

    async def _delete(self, request: web.Request) -> web.Response:
        kind = request.path.rsplit("/", 2)[-2]
        self.deleted.append(
            (kind, request.match_info["repository"], request.match_info["reference"])
        )
        return web.Response(status=202)
