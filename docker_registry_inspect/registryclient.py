#!/usr/bin/env python

"""Docker registry API v2 client."""

import logging
import os

from http import HTTPStatus
from typing import Dict, List, NamedTuple, Optional

from .exceptions import ProtocolError, RegistryError, TAG_ERRORS
from .manifest import Manifest
from .sizereport import SizeReport, TagSize
from .specs import ManifestStatus
from .transport import LOGGER, RegistryTransport
from .utils import human_size, quote_path


class ManifestLookup(NamedTuple):
    """
    Result of fetching a manifest; a missing manifest is not an error.
    """

    status: ManifestStatus
    manifest: Optional[Manifest] = None
    error: Optional[Exception] = None


class RegistryClient:
    """
    Lists, inspects, measures, and deletes content of a docker registry.
    """

    DEFAULT_CATALOG_COUNT = os.environ.get("DRI_CATALOG_COUNT", "250")

    def __init__(
        self,
        base_url: str,
        *,
        cacerts: str = None,
        insecure: bool = False,
        logger: logging.Logger = None,
        transport: RegistryTransport = None,
    ):
        """
        Args:
            base_url: The registry URL, e.g. https://registry:5000.
            cacerts: Path to a CA certificate bundle used to verify the registry.
            insecure: If True, the registry certificate is not verified.
            logger: The logger to which progress is reported.
            transport: The underlying transport; created from the other arguments if omitted.
        """
        self.logger = logger if logger is not None else LOGGER
        if not transport:
            transport = RegistryTransport(
                base_url, cacerts=cacerts, insecure=insecure, logger=self.logger
            )
        self.transport = transport

    async def __aenter__(self) -> "RegistryClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self):
        """Gracefully closes this instance."""
        await self.transport.close()

    human_size = staticmethod(human_size)

    async def validate(self):
        """Verifies that the endpoint implements the registry API v2."""
        response = await self.transport.request_json("")
        if response.json != {}:
            raise ProtocolError(
                f"Error expected empty object as V2 validation result; got {response.json}",
                response=response.json,
            )

    async def list_repositories(self, count: int = None) -> List[str]:
        """
        Retrieves a single page of the registry catalog.

        Args:
            count: The maximum number of repositories to retrieve.

        Returns:
            The repository names.
        """
        if count is None:
            count = RegistryClient.DEFAULT_CATALOG_COUNT
        response = await self.transport.request_json(f"_catalog?n={int(count)}")
        if not isinstance(response.json, dict) or "repositories" not in response.json:
            raise ProtocolError(
                f"Invalid catalog: {response.json}", response=response.json
            )
        return response.json["repositories"] or []

    async def list_tags(self, repository: str) -> List[str]:
        """
        Retrieves the tags of a repository.

        Args:
            repository: The repository name.

        Returns:
            The tag names; empty if the repository has none.
        """
        response = await self.transport.request_json(
            f"{quote_path(repository)}/tags/list"
        )
        if not isinstance(response.json, dict):
            raise ProtocolError(
                f"Invalid tag list: {response.json}", response=response.json
            )
        return response.json.get("tags") or []

    async def get_manifest(self, repository: str, reference: str) -> ManifestLookup:
        """
        Retrieves an image manifest.

        Args:
            repository: The repository name.
            reference: A tag or digest.

        Returns:
            A FOUND lookup carrying the manifest, or a NOT_FOUND lookup if the registry returned 404.
        """
        try:
            response = await self.transport.request_json(
                f"{quote_path(repository)}/manifests/{quote_path(reference)}"
            )
        except RegistryError as exception:
            if exception.status == HTTPStatus.NOT_FOUND:
                return ManifestLookup(status=ManifestStatus.NOT_FOUND)
            raise

        digests = response.headers.get("docker-content-digest")
        if not digests:
            raise ProtocolError(
                f"Missing docker-content-digest header for {repository}:{reference}",
                response=response.headers,
            )
        return ManifestLookup(
            manifest=Manifest(digests[0], response.json), status=ManifestStatus.FOUND
        )

    async def lookup_manifest(self, repository: str, reference: str) -> ManifestLookup:
        """
        Retrieves an image manifest without raising registry, protocol, or transport errors.

        Args:
            repository: The repository name.
            reference: A tag or digest.

        Returns:
            A FOUND, NOT_FOUND, or ERROR lookup.
        """
        try:
            return await self.get_manifest(repository, reference)
        except TAG_ERRORS as exception:
            return ManifestLookup(error=exception, status=ManifestStatus.ERROR)

    async def delete_manifest(self, repository: str, digest: str) -> bool:
        """
        Deletes a manifest; manifests can only be deleted by digest.

        Args:
            repository: The repository name.
            digest: The manifest digest.

        Returns:
            True if the registry accepted the deletion.
        """
        await self.transport.request(
            f"{quote_path(repository)}/manifests/{quote_path(digest)}",
            method="DELETE",
        )
        self.logger.info("Deleted manifest %s@%s", repository, digest)
        return True

    async def delete_blob(self, repository: str, digest: str) -> bool:
        """
        Deletes a blob.

        Args:
            repository: The repository name.
            digest: The blob digest.

        Returns:
            True if the registry accepted the deletion.
        """
        await self.transport.request(
            f"{quote_path(repository)}/blobs/{quote_path(digest)}", method="DELETE"
        )
        self.logger.info("Deleted blob %s@%s", repository, digest)
        return True

    async def list_size(self, repository: str) -> SizeReport:
        """
        Measures the tags of a repository.

        Tags whose manifest is missing or cannot be retrieved are recorded with an error, and the scan continues.

        Args:
            repository: The repository name.

        Returns:
            The per-tag sizes and the overall size, with layers shared between tags counted once.
        """
        layers = {}  # type: Dict[str, int]
        tags = []
        for tag in await self.list_tags(repository):
            lookup = await self.lookup_manifest(repository, tag)
            if lookup.status == ManifestStatus.NOT_FOUND:
                error = "No manifest found"
            elif lookup.status == ManifestStatus.ERROR:
                error = str(lookup.error)
            else:
                error = None
            if error is not None:
                self.logger.warning("Unable to measure %s:%s: %s", repository, tag, error)
                tags.append(TagSize(tag=tag, error=error))
                continue

            manifest = lookup.manifest
            tags.append(TagSize(tag=tag, digest=manifest.digest, size=manifest.size))
            for layer in manifest.layers:
                layers[layer.digest] = layer.size

        return SizeReport(layers=layers, repository=repository, tags=tags)

    async def list_all(self) -> List[SizeReport]:
        """
        Measures every repository in the catalog.

        Returns:
            One size report per repository, in catalog order.
        """
        return [
            await self.list_size(repository)
            for repository in await self.list_repositories()
        ]
