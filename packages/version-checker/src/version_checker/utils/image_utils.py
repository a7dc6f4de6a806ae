"""
Shared utilities for parsing container image references.

This module provides the canonical ImageReference dataclass for splitting an
image string (``host[:port]/path[:tag][@digest]``) into its lookup URL, tag
and digest. Parsing is total: anything that cannot be split is kept in the
URL and the tag is left empty.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ImageReference:
    """
    Parsed container image reference.

    Unlike a fully normalized reference, the URL is kept exactly as written
    (no implicit docker.io/library prefix) because it is used as the
    registry lookup key.
    """

    url: str
    """Image location without tag or digest (e.g. 'localhost:5000/app')."""

    tag: str = ""
    """Image tag (e.g. 'v0.2.0'). Empty if none was given."""

    digest: str = ""
    """Image digest (e.g. 'sha256:abc...'). Empty if none was given."""

    @classmethod
    def parse(cls, image: str) -> "ImageReference":
        """
        Parse a container image reference string.

        Handles various formats:
            - nginx -> url=nginx
            - nginx:1.25 -> url=nginx, tag=1.25
            - localhost:5000/app -> url=localhost:5000/app (port is not a tag)
            - localhost:5000/app:v1@sha256:abc -> url, tag and digest
            - app@sha256:abc -> url=app, digest=sha256:abc

        Args:
            image: Image reference string

        Returns:
            Parsed ImageReference
        """
        if "@" in image:
            left, digest = image.split("@", 1)

            # Only a colon after the first slash can separate a tag; an
            # earlier one belongs to host:port.
            first_slash = left.find("/")
            if first_slash == -1:
                first_slash = 0

            if ":" in left[first_slash:]:
                last_colon = left.rfind(":")
                return cls(url=left[:last_colon], tag=left[last_colon + 1:], digest=digest)

            return cls(url=left, digest=digest)

        last_colon = image.rfind(":")
        if last_colon == -1:
            return cls(url=image)

        if image.rfind("/") > last_colon:
            return cls(url=image)

        return cls(url=image[:last_colon], tag=image[last_colon + 1:])

    @property
    def full_name(self) -> str:
        """Return the reference in its written form."""
        result = self.url
        if self.tag:
            result = f"{result}:{self.tag}"
        if self.digest:
            result = f"{result}@{self.digest}"
        return result

    @property
    def has_digest(self) -> bool:
        """True if the reference pins a digest."""
        return bool(self.digest)

    @property
    def has_tag(self) -> bool:
        """True if the reference names a tag."""
        return bool(self.tag)


def url_tag_digest_from_image(image: str) -> tuple[str, str, str]:
    """
    Split an image string into (url, tag, digest).

    Examples:
        >>> url_tag_digest_from_image("localhost:5000/app:v0.2.0@sha:123")
        ('localhost:5000/app', 'v0.2.0', 'sha:123')
        >>> url_tag_digest_from_image("localhost:5000/app")
        ('localhost:5000/app', '', '')
        >>> url_tag_digest_from_image("nginx:latest")
        ('nginx', 'latest', '')
    """
    ref = ImageReference.parse(image)
    return ref.url, ref.tag, ref.digest

