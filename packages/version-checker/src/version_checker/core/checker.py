"""
Per-container comparison of the running image against its registry.

The Checker is stateless between calls: all shared state lives in the
Search's cache. It is safe to call concurrently for different containers.
"""

import logging
from typing import TYPE_CHECKING, Optional

from version_checker.constants import FLOATING_TAG
from version_checker.core.architecture import NodeMap
from version_checker.core.exceptions import FetchException, VersionNotFoundException
from version_checker.core.models import Container, Pod, Policy, Result
from version_checker.core.search import Searcher
from version_checker.utils.image_utils import url_tag_digest_from_image
from version_checker.utils.semver import SemVer
from version_checker.utils.substitution import Substitution

if TYPE_CHECKING:
    from version_checker.context import CheckContext

logger = logging.getLogger(__name__)


def container_status_image_digest(pod: Pod, container_name: str) -> str:
    """
    Return the digest the named container is running, or "" if not reported.

    Init container statuses are searched first. When the recorded image ID
    carries no "@", the image ID itself is returned.
    """
    for status in [*pod.init_container_statuses, *pod.container_statuses]:
        if status.name != container_name:
            continue

        # containerd reports a bare digest such as "sha256:abc"
        if "@" not in status.image_id:
            return status.image_id

        _, _, status_sha = url_tag_digest_from_image(status.image_id)
        return status_sha

    return ""


def is_latest_or_empty_tag(tag: str) -> bool:
    """True for tags that carry no version information."""
    return tag == "" or tag == FLOATING_TAG


class Checker:
    """
    Decides whether a container runs the latest image its policy allows.

    Resolution order:
    1. Skip containers whose running digest has not been reported yet
    2. Optionally resolve a pinned digest back to its tag
    3. Force digest comparison for empty and 'latest' tags
    4. Apply the URL substitution, then the policy's override URL
    5. Compare by digest or by version against the latest registry tag
    """

    def __init__(
        self,
        search: Searcher,
        image_url_substitution: Optional[Substitution] = None,
        node_map: Optional[NodeMap] = None,
    ):
        self._search = search
        self._substitution = image_url_substitution
        self._node_map = node_map

    @property
    def search(self) -> Searcher:
        return self._search

    def container(
        self,
        ctx: "CheckContext",
        pod: Pod,
        container: Container,
        policy: Optional[Policy] = None,
    ) -> Optional[Result]:
        """
        Compare the container's running image with the latest available.

        Args:
            ctx: Context governing registry lookups
            pod: Pod owning the container (supplies status and node)
            container: Declared container
            policy: Selection constraints; defaults to an empty Policy

        Returns:
            Result, or None if the container has no recorded running digest

        Raises:
            VersionNotFoundException: No tag satisfies the policy (non-fatal)
            FetchException: The registry lookup failed
        """
        status_sha = container_status_image_digest(pod, container.name)
        if not status_sha:
            return None

        policy = policy or Policy()
        image_url, current_tag, current_sha = url_tag_digest_from_image(container.image)
        using_sha, using_tag = bool(current_sha), bool(current_tag)

        if policy.resolve_sha_to_tags and using_sha:
            resolved = self._resolve_sha_to_tag(ctx, image_url, current_sha)
            if resolved:
                current_tag, current_sha = resolved, ""
                using_sha, using_tag = False, True

        if is_latest_or_empty_tag(current_tag):
            logger.debug(
                f"image using {current_tag!r} tag, comparing image SHA {current_sha!r}"
            )
            policy = policy.with_changes(use_sha=True)
            using_tag = False

        image_url = self._substitute_image_url(image_url)
        image_url = self._override_image_url(image_url, policy)
        policy = self._with_node_platform(pod, policy)

        if policy.use_sha:
            result = self._handle_sha(ctx, image_url, status_sha, policy, using_tag, current_tag)
        else:
            result = self._handle_semver(ctx, image_url, status_sha, current_tag, using_sha, policy)

        result.os = policy.os or ""
        result.architecture = policy.architecture or ""
        return result

    def _resolve_sha_to_tag(self, ctx: "CheckContext", image_url: str, sha: str) -> str:
        try:
            return self._search.resolve_sha_to_tag(ctx, image_url, sha)
        except (VersionNotFoundException, FetchException) as e:
            logger.warning(f"failed to resolve {image_url}@{sha} to a tag, comparing by SHA: {e}")
            return ""

    def _substitute_image_url(self, image_url: str) -> str:
        if self._substitution is None:
            return image_url

        new_image_url = self._substitution.apply(image_url)
        if new_image_url != image_url:
            logger.debug(f"substituting image URL {image_url} -> {new_image_url}")
        return new_image_url

    def _override_image_url(self, image_url: str, policy: Policy) -> str:
        if policy.override_url and policy.override_url != image_url:
            logger.debug(f"overriding image URL {image_url} -> {policy.override_url}")
            return policy.override_url
        return image_url

    def _with_node_platform(self, pod: Pod, policy: Policy) -> Policy:
        if self._node_map is None or not pod.node_name:
            return policy

        node = self._node_map.get_architecture(pod.node_name)
        if node is None:
            logger.debug(f"no platform recorded for node {pod.node_name!r}")
            return policy

        return policy.with_changes(os=node.os, architecture=node.architecture)

    def _handle_sha(
        self,
        ctx: "CheckContext",
        image_url: str,
        status_sha: str,
        policy: Policy,
        using_tag: bool,
        current_tag: str,
    ) -> Result:
        result = self.is_latest_sha(ctx, image_url, status_sha, policy)
        if using_tag:
            result.current_version = f"{current_tag}@{result.current_version}"
        return result

    def _handle_semver(
        self,
        ctx: "CheckContext",
        image_url: str,
        status_sha: str,
        current_tag: str,
        using_sha: bool,
        policy: Policy,
    ) -> Result:
        current_image = SemVer.parse(current_tag)
        latest_version, latest_sha, is_latest = self.is_latest_semver(
            ctx, image_url, status_sha, current_image, policy
        )

        if using_sha and "@" not in latest_version and latest_sha:
            latest_version = f"{latest_version}@{latest_sha}"

        current_version = current_tag
        if "@" in latest_version:
            current_version = f"{current_tag}@{status_sha}"

        return Result(
            current_version=current_version,
            latest_version=latest_version,
            is_latest=is_latest,
            image_url=image_url,
        )

    def is_latest_semver(
        self,
        ctx: "CheckContext",
        image_url: str,
        current_sha: str,
        current_image: SemVer,
        policy: Policy,
    ) -> tuple[str, str, bool]:
        """
        Compare ``current_image`` with the latest tag by version.

        Returns:
            (latest version string, latest digest, is latest)
        """
        latest_image = self._search.latest_image(ctx, image_url, policy)
        latest_v = SemVer.parse(latest_image.tag)

        is_latest = not current_image.less_than(latest_v)
        latest_version = latest_image.tag

        # Same tag, but republished upstream with different content.
        if current_image.equal(latest_v) and latest_image.sha and current_sha != latest_image.sha:
            is_latest = False
            latest_version = f"{latest_version}@{latest_image.sha}"

        return latest_version, latest_image.sha, is_latest

    def is_latest_sha(
        self,
        ctx: "CheckContext",
        image_url: str,
        current_sha: str,
        policy: Policy,
    ) -> Result:
        """Compare ``current_sha`` with the most recently pushed digest."""
        latest_image = self._search.latest_image(ctx, image_url, policy)

        latest_version = latest_image.sha
        if latest_image.tag:
            latest_version = f"{latest_image.tag}@{latest_image.sha}"

        return Result(
            current_version=current_sha,
            latest_version=latest_version,
            is_latest=latest_image.sha == current_sha,
            image_url=image_url,
        )
