#!/usr/bin/env python

"""Repository size aggregation results."""

from typing import Dict, List, NamedTuple, Optional

from .utils import human_size


class TagSize(NamedTuple):
    """
    Size of a single tag, or the reason it could not be determined.
    """

    tag: str
    digest: Optional[str] = None
    size: Optional[int] = None
    error: Optional[str] = None

    def __str__(self):
        if self.error is not None:
            return f"{self.tag} (error: {self.error})"
        return f"{self.tag} ({self.digest}) {human_size(self.size)}"


class SizeReport(NamedTuple):
    """
    Per-tag and overall sizes of a repository.

    The overall total is computed from the layers mapping, which is keyed by layer digest; layers shared between tags
    are counted once.
    """

    repository: str
    tags: List[TagSize]
    layers: Dict[str, int]

    @property
    def total(self) -> int:
        """The deduplicated size of all layers in the repository, in bytes."""
        return sum(self.layers.values())

    def lines(self) -> List[str]:
        """
        Renders the report as text.

        Returns:
            One line for the repository, one for each tag, and one for the overall total.
        """
        result = [f" - {self.repository}"]
        result.extend(f"  - {tag_size}" for tag_size in self.tags)
        result.append(f" - overall: {human_size(self.total)}")
        return result

    def __str__(self):
        return "\n".join(self.lines())
