"""
Reduce a registry's tag list to the single "latest" tag under a Policy.

Both selectors are pure functions and safe to call from any thread.
"""

import logging
from typing import Optional, Sequence

from version_checker.constants import NON_IMAGE_TAG_SUFFIXES
from version_checker.core.exceptions import VersionNotFoundException
from version_checker.core.models import ImageTag, Policy
from version_checker.utils.semver import SemVer

logger = logging.getLogger(__name__)


def platform_matches(tag: ImageTag, policy: Policy) -> bool:
    """True unless the policy pins both OS and architecture and the tag differs."""
    if policy.os is None or policy.architecture is None:
        return True
    return tag.os == policy.os and tag.architecture == policy.architecture


def should_skip_tag(policy: Policy, version: SemVer) -> bool:
    """Semver-mode filter. A regex, when set, replaces every other filter."""
    if policy.regex_matcher is not None:
        return not policy.regex_matcher.search(version.original)

    return (
        (not policy.use_metadata and version.has_metadata())
        or (policy.pin_major is not None and policy.pin_major != version.major)
        or (policy.pin_minor is not None and policy.pin_minor != version.minor)
        or (policy.pin_patch is not None and policy.pin_patch != version.patch)
    )


def is_non_image_tag(tag: str) -> bool:
    """True for attestation, signature and SBOM tags."""
    return tag.endswith(NON_IMAGE_TAG_SUFFIXES)


def should_skip_digest(policy: Optional[Policy], tag: str) -> bool:
    """Digest-mode filter."""
    if is_non_image_tag(tag):
        return True

    if policy is not None and policy.regex_matcher is not None:
        return not policy.regex_matcher.search(tag)

    return False


def is_better_semver(
    latest: Optional[SemVer],
    candidate: SemVer,
    latest_tag: Optional[ImageTag],
    candidate_tag: ImageTag,
) -> bool:
    """Whether ``candidate`` should replace the current best."""
    if latest is None or latest_tag is None:
        return True

    if latest.less_than(candidate):
        return True

    # Same tag pushed more than once: prefer the newest push.
    return latest.equal(candidate) and candidate_tag.timestamp > latest_tag.timestamp


def select_latest_semver(tags: Sequence[ImageTag], policy: Policy) -> ImageTag:
    """
    Return the newest tag by version, honouring the policy filters.

    Args:
        tags: Tags reported by the registry
        policy: Selection constraints

    Returns:
        The latest ImageTag

    Raises:
        VersionNotFoundException: If no tag survives filtering
    """
    latest_version: Optional[SemVer] = None
    latest_tag: Optional[ImageTag] = None

    for tag in tags:
        if not platform_matches(tag, policy):
            continue

        version = SemVer.parse(tag.tag)
        if should_skip_tag(policy, version):
            continue

        if is_better_semver(latest_version, version, latest_tag, tag):
            latest_version = version
            latest_tag = tag

    if latest_tag is None:
        raise VersionNotFoundException(
            f"no tags found with these option constraints: {policy.to_json()}"
        )

    return latest_tag


def select_latest_digest(tags: Sequence[ImageTag], policy: Policy) -> ImageTag:
    """
    Return the most recently pushed tag, ignoring version numbers.

    Ties keep the first tag encountered.

    Raises:
        VersionNotFoundException: If the input is empty or nothing survives filtering
    """
    latest_tag: Optional[ImageTag] = None

    for tag in tags:
        if not platform_matches(tag, policy):
            continue
        if should_skip_digest(policy, tag.tag):
            continue

        if latest_tag is None or tag.timestamp > latest_tag.timestamp:
            latest_tag = tag

    if latest_tag is None:
        raise VersionNotFoundException("failed to find latest image based on SHA")

    return latest_tag
