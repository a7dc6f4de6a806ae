"""Utility modules for image references, versions and URL rewriting."""

from version_checker.utils.image_utils import ImageReference, url_tag_digest_from_image
from version_checker.utils.semver import SemVer
from version_checker.utils.substitution import Substitution

__all__ = [
    "ImageReference",
    "SemVer",
    "Substitution",
    "url_tag_digest_from_image",
]
