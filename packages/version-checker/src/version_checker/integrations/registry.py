"""
Dispatch image URLs to the registry client that serves their host.

Clients are matched by host pattern once per distinct host; the decision is
memoized so later lookups for the same host skip the pattern checks.
"""

import logging
import threading
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from version_checker.core.exceptions import IntegrationException, VersionNotFoundException
from version_checker.core.models import ImageTag

if TYPE_CHECKING:
    from version_checker.context import CheckContext

logger = logging.getLogger(__name__)


@runtime_checkable
class RegistryClient(Protocol):
    """Protocol that every registry client must implement."""

    name: str

    def is_host(self, host: str) -> bool:
        """True if this client serves ``host``."""
        ...

    def repo_image_from_path(self, path: str) -> tuple[str, str]:
        """Split a URL path into (repository, image)."""
        ...

    def tags(self, ctx: "CheckContext", host: str, repo: str, image: str) -> list[ImageTag]:
        """List every tag the registry knows for the image."""
        ...


def split_host_path(image_url: str) -> tuple[str, str]:
    """
    Split an image URL into (host, path).

    A host is only recognised when the URL contains a '.' or ':'.

    Examples:
        >>> split_host_path("quay.io/jetstack/cert-manager")
        ('quay.io', 'jetstack/cert-manager')
        >>> split_host_path("library/nginx")
        ('', 'library/nginx')
    """
    if "." in image_url or ":" in image_url:
        parts = image_url.split("/", 1)
        if len(parts) < 2:
            return "", image_url
        return parts[0], parts[1]
    return "", image_url


class ClientManager:
    """Routes tag lookups to the first client whose host pattern matches."""

    def __init__(self, clients: list[RegistryClient], fallback: Optional[RegistryClient] = None):
        self._clients = list(clients)
        self._fallback = fallback
        self._lock = threading.Lock()
        self._by_host: dict[str, Optional[RegistryClient]] = {}

        for client in self._clients:
            logger.info(f"registered client: {client.name}")
        if fallback is not None:
            logger.info(f"registered fallback client: {fallback.name}")

    def client_for_host(self, host: str) -> RegistryClient:
        """Return the client serving ``host``, resolving it once per host."""
        with self._lock:
            if host in self._by_host:
                client = self._by_host[host]
            else:
                client = next((c for c in self._clients if c.is_host(host)), self._fallback)
                self._by_host[host] = client

        if client is None:
            raise IntegrationException("registry", f"no client configured for host {host!r}")
        return client

    def tags(self, ctx: "CheckContext", image_url: str) -> list[ImageTag]:
        """Return every tag available for ``image_url``."""
        host, path = split_host_path(image_url)
        client = self.client_for_host(host)
        repo, image = client.repo_image_from_path(path)

        logger.debug(f"using client {client.name!r} for image URL {image_url!r}")
        return client.tags(ctx, host, repo, image)

    def resolve_sha_to_tag(self, ctx: "CheckContext", image_url: str, sha: str) -> str:
        """
        Return the first tag whose digest is ``sha``.

        Raises:
            VersionNotFoundException: If no tag carries that digest
        """
        for tag in self.tags(ctx, image_url):
            if tag.sha == sha and tag.tag:
                return tag.tag

        raise VersionNotFoundException(f"{image_url}: no tag found for digest {sha!r}")
