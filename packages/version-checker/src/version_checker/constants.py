"""
Centralized configuration constants for version-checker.

This module provides a single source of truth for values that are shared
between the resolution engine, the registry clients and the policy builder.
"""

__version__ = "0.9.0"
__author__ = "version-checker maintainers"

# ============================================================================
# Cache Configuration
# ============================================================================

DEFAULT_CACHE_TIMEOUT_SECONDS = 1800
"""How long a registry lookup is considered fresh (30 minutes)."""

DEFAULT_GC_INTERVAL_SECONDS = 900
"""How often stale cache entries are swept (15 minutes)."""

# ============================================================================
# Tag Selection
# ============================================================================

FLOATING_TAG = "latest"
"""Tag that never carries version information; forces digest comparison."""

NON_IMAGE_TAG_SUFFIXES = (".att", ".sig", ".sbom")
"""Tag suffixes used for attestations, signatures and SBOMs, never images."""

# ============================================================================
# Kubernetes Labels and Annotations
# ============================================================================

NODE_OS_LABEL = "kubernetes.io/os"
"""Well-known node label holding the node operating system."""

NODE_ARCH_LABEL = "kubernetes.io/arch"
"""Well-known node label holding the node CPU architecture."""

ENABLE_ANNOTATION_KEY = "enable.version-checker.io"
"""Enable or disable checking for a given container."""

OVERRIDE_URL_ANNOTATION_KEY = "override-url.version-checker.io"
"""Override the lookup URL. Useful when mirroring images."""

USE_SHA_ANNOTATION_KEY = "use-sha.version-checker.io"
"""Compare image digests instead of tags."""

RESOLVE_SHA_TO_TAGS_ANNOTATION_KEY = "resolve-sha-to-tags.version-checker.io"
"""Resolve a pinned image digest to its tag before comparing."""

MATCH_REGEX_ANNOTATION_KEY = "match-regex.version-checker.io"
"""Only consider tags matching this regex. All other semver options are ignored."""

USE_METADATA_ANNOTATION_KEY = "use-metadata.version-checker.io"
"""Allow tags carrying metadata after the patch digit (e.g. v1.0.1-gke.3)."""

PIN_MAJOR_ANNOTATION_KEY = "pin-major.version-checker.io"
"""Pin the major version to check."""

PIN_MINOR_ANNOTATION_KEY = "pin-minor.version-checker.io"
"""Pin the minor version to check."""

PIN_PATCH_ANNOTATION_KEY = "pin-patch.version-checker.io"
"""Pin the patch version to check."""

# ============================================================================
# Registry Configuration
# ============================================================================

DOCKERHUB_LOGIN_URL = "https://hub.docker.com/v2/users/login/"
"""Docker Hub endpoint exchanging username/password for a JWT."""

DOCKERHUB_LOOKUP_URL = "https://registry.hub.docker.com/v2/repositories/{repo}/{image}/tags"
"""Docker Hub paginated tag listing endpoint."""

DOCKERHUB_PAGE_SIZE = 100
"""Number of tags requested per Docker Hub page."""

DOCKERHUB_DEFAULT_REPO = "library"
"""Repository used for single-segment Docker Hub image names."""

# ============================================================================
# Timeouts (in seconds)
# ============================================================================

API_REQUEST_TIMEOUT = 30
"""Timeout for registry API requests (30 seconds)."""

# ============================================================================
# Logging
# ============================================================================

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
"""Format used by configure_logging()."""
