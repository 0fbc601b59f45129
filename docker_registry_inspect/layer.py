#!/usr/bin/env python

"""Content-addressed blob references within an image manifest."""

from typing import Any, Dict, NamedTuple

from .exceptions import ProtocolError


class Layer(NamedTuple):
    """
    A single layer entry of an image manifest.
    """

    digest: str
    size: int

    @staticmethod
    def from_json(json: Dict[str, Any]) -> "Layer":
        """
        Initializes a layer from a decoded manifest "layers" entry.

        Args:
            json: The decoded layer descriptor.

        Returns:
            The corresponding layer.
        """
        if not isinstance(json, dict):
            raise ProtocolError(f"Invalid layer descriptor: {json}", response=json)
        digest = json.get("digest")
        size = json.get("size")
        if not isinstance(digest, str):
            raise ProtocolError(f"Invalid layer digest: {digest}", response=json)
        # bool is an int subclass
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ProtocolError(f"Invalid layer size: {size}", response=json)
        return Layer(digest=digest, size=size)

    def __str__(self):
        return f"Digest={self.digest}, Size: {self.size}"
