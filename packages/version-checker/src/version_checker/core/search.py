"""
Latest-image lookups backed by the shared cache.

Search is the only owner of the Cache: tag lists are fetched once per
(policy, image URL) key and reused until they go stale.
"""

import logging
from typing import TYPE_CHECKING, Optional, Protocol

from version_checker.core.cache import Cache, calculate_hash_index
from version_checker.core.exceptions import (
    ContextCancelledException,
    DeadlineExceededException,
    FetchException,
    VersionNotFoundException,
)
from version_checker.core.models import ImageTag, Policy
from version_checker.core.selector import select_latest_digest, select_latest_semver

if TYPE_CHECKING:
    from version_checker.context import CheckContext

logger = logging.getLogger(__name__)


class TagLister(Protocol):
    """The registry collaborator Search depends on."""

    def tags(self, ctx: "CheckContext", image_url: str) -> list[ImageTag]:
        ...

    def resolve_sha_to_tag(self, ctx: "CheckContext", image_url: str, sha: str) -> str:
        ...


class Searcher(Protocol):
    """What the Checker needs from Search; fakes implement this in tests."""

    def latest_image(self, ctx: "CheckContext", image_url: str, policy: Policy) -> ImageTag:
        ...

    def resolve_sha_to_tag(self, ctx: "CheckContext", image_url: str, sha: str) -> str:
        ...


class Search:
    """Searching and caching of image tag lookups."""

    def __init__(self, client: TagLister, cache_timeout_seconds: float, cache: Optional[Cache] = None):
        self._client = client
        self._cache: Cache[list[ImageTag]] = cache if cache is not None else Cache(cache_timeout_seconds, self)

    @property
    def cache(self) -> Cache:
        return self._cache

    def fetch(self, ctx: "CheckContext", image_url: str, _policy: Optional[Policy]) -> list[ImageTag]:
        """Cache handler: list every tag for ``image_url``."""
        try:
            tags = self._client.tags(ctx, image_url)
        except (VersionNotFoundException, ContextCancelledException, DeadlineExceededException):
            raise
        except Exception as e:
            raise FetchException(image_url, str(e)) from e

        # Report no version found rather than caching an empty list, so a bad
        # URL is not re-queried needlessly on every reconcile.
        if not tags:
            raise VersionNotFoundException(f"no tags found for given image URL: {image_url!r}")

        return tags

    def latest_image(self, ctx: "CheckContext", image_url: str, policy: Policy) -> ImageTag:
        """
        Return the latest tag for ``image_url`` under ``policy``.

        Raises:
            VersionNotFoundException: No tag satisfies the policy
            FetchException: The registry lookup failed
        """
        index = calculate_hash_index(image_url, policy)
        tags = self._cache.get(ctx, index, image_url, policy)

        try:
            if policy.use_sha:
                return select_latest_digest(tags, policy)
            return select_latest_semver(tags, policy)
        except VersionNotFoundException as e:
            raise VersionNotFoundException(f"{image_url}: {e}") from e

    def resolve_sha_to_tag(self, ctx: "CheckContext", image_url: str, sha: str) -> str:
        """Best-effort digest to tag lookup."""
        try:
            return self._client.resolve_sha_to_tag(ctx, image_url, sha)
        except VersionNotFoundException:
            raise
        except Exception as e:
            raise FetchException(image_url, f"failed to resolve sha to tag: {e}") from e

    def run(self, ctx: "CheckContext", refresh_rate_seconds: float) -> None:
        """Blocking; runs the cache garbage collector until ``ctx`` ends."""
        self._cache.start_garbage_collector(ctx, refresh_rate_seconds)

    def shutdown(self) -> None:
        """Flush the cache."""
        self._cache.shutdown()
