#!/usr/bin/env python

"""Classes that provide abstractions of image manifests."""

from typing import Any, Dict, Tuple

from .exceptions import ProtocolError, UnsupportedSchemaVersionError
from .layer import Layer
from .specs import SCHEMA_VERSION


class Manifest:
    """
    Image manifest, version 2, schema 2 as defined in:

    https://github.com/docker/distribution/blob/master/docs/spec/manifest-v2-2.md
    """

    def __init__(self, digest: str, json: Dict[str, Any]):
        """
        Args:
            digest: The registry-reported digest of the manifest.
            json: The decoded manifest.
        """
        if not isinstance(json, dict):
            raise ProtocolError(f"Invalid manifest: {json}", response=json)

        schema_version = json.get("schemaVersion")
        if schema_version != SCHEMA_VERSION:
            raise UnsupportedSchemaVersionError(schema_version)

        layers = json.get("layers")
        if not isinstance(layers, list):
            raise ProtocolError(f"Invalid manifest layers: {layers}", response=json)

        self.digest = digest
        self.json = json
        self.layers = tuple(Layer.from_json(layer) for layer in layers)
        self.schema_version = schema_version

    def get_json(self) -> Dict[str, Any]:
        """
        Retrieves the decoded manifest.

        Returns:
            The decoded manifest.
        """
        return self.json

    def get_layers(self) -> Tuple[Layer, ...]:
        """
        Retrieves the manifest layers, in manifest order.

        Returns:
            The manifest layers.
        """
        return self.layers

    @property
    def size(self) -> int:
        """The sum of all layer sizes, in bytes."""
        return sum(layer.size for layer in self.layers)

    def __str__(self):
        layers = ", ".join(str(layer) for layer in self.layers)
        return f"Digest={self.digest}, Layers: [{layers}]"
