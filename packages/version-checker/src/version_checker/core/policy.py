"""
Build per-container Policies from pod annotations.

Annotations are keyed ``<option>.version-checker.io/<container-name>`` so a
single pod can configure each of its containers independently.
"""

import logging
import re
from typing import Mapping, Optional

from version_checker.constants import (
    ENABLE_ANNOTATION_KEY,
    MATCH_REGEX_ANNOTATION_KEY,
    OVERRIDE_URL_ANNOTATION_KEY,
    PIN_MAJOR_ANNOTATION_KEY,
    PIN_MINOR_ANNOTATION_KEY,
    PIN_PATCH_ANNOTATION_KEY,
    RESOLVE_SHA_TO_TAGS_ANNOTATION_KEY,
    USE_METADATA_ANNOTATION_KEY,
    USE_SHA_ANNOTATION_KEY,
)
from version_checker.core.exceptions import PolicyException
from version_checker.core.models import Policy

logger = logging.getLogger(__name__)

PIN_PATTERN = re.compile(r"[+-]?[0-9]+")


class PolicyBuilder:
    """Builds container Policies from a pod's annotations."""

    def __init__(self, annotations: Optional[Mapping[str, str]] = None):
        self._annotations = dict(annotations or {})

    @staticmethod
    def index(container_name: str, annotation_key: str) -> str:
        """Return the annotation key for a given container."""
        return f"{annotation_key}/{container_name}"

    def _get(self, name: str, key: str) -> Optional[str]:
        return self._annotations.get(self.index(name, key))

    def _parse_pin(self, name: str, key: str, raw: str, errors: list[str]) -> Optional[int]:
        # int() alone would also accept whitespace and underscores
        if not PIN_PATTERN.fullmatch(raw):
            errors.append(f"failed to parse {self.index(name, key)}: invalid integer {raw!r}")
            return None
        return int(raw)

    def policy(self, name: str) -> Policy:
        """
        Build the Policy for container ``name``.

        Raises:
            PolicyException: With every problem found, if any
        """
        errors: list[str] = []
        set_non_sha = False

        use_sha = self._get(name, USE_SHA_ANNOTATION_KEY) == "true"
        resolve_sha_to_tags = self._get(name, RESOLVE_SHA_TO_TAGS_ANNOTATION_KEY) == "true"

        use_metadata = self._get(name, USE_METADATA_ANNOTATION_KEY) == "true"
        if use_metadata:
            set_non_sha = True

        match_regex = self._get(name, MATCH_REGEX_ANNOTATION_KEY)
        regex_matcher = None
        if match_regex is not None:
            set_non_sha = True
            try:
                regex_matcher = re.compile(match_regex)
            except re.error as e:
                errors.append(
                    f"failed to compile regex at annotation {MATCH_REGEX_ANNOTATION_KEY!r}: {e}"
                )

        pin_major = pin_minor = pin_patch = None

        raw = self._get(name, PIN_MAJOR_ANNOTATION_KEY)
        if raw is not None:
            set_non_sha = True
            pin_major = self._parse_pin(name, PIN_MAJOR_ANNOTATION_KEY, raw, errors)

        raw = self._get(name, PIN_MINOR_ANNOTATION_KEY)
        if raw is not None:
            set_non_sha = True
            if pin_major is None:
                errors.append(
                    f"unable to set {self.index(name, PIN_MINOR_ANNOTATION_KEY)!r} "
                    f"without setting {self.index(name, PIN_MAJOR_ANNOTATION_KEY)!r}"
                )
            else:
                pin_minor = self._parse_pin(name, PIN_MINOR_ANNOTATION_KEY, raw, errors)

        raw = self._get(name, PIN_PATCH_ANNOTATION_KEY)
        if raw is not None:
            set_non_sha = True
            if pin_major is None and pin_minor is None:
                errors.append(
                    f"unable to set {self.index(name, PIN_PATCH_ANNOTATION_KEY)!r} "
                    f"without setting {self.index(name, PIN_MINOR_ANNOTATION_KEY)!r} "
                    f"and {self.index(name, PIN_MAJOR_ANNOTATION_KEY)!r}"
                )
            else:
                pin_patch = self._parse_pin(name, PIN_PATCH_ANNOTATION_KEY, raw, errors)

        override_url = self._get(name, OVERRIDE_URL_ANNOTATION_KEY)

        if use_sha and set_non_sha:
            errors.append(
                f"cannot define {self.index(name, USE_SHA_ANNOTATION_KEY)!r} with any semver options"
            )

        if errors:
            raise PolicyException(errors)

        return Policy(
            override_url=override_url,
            use_sha=use_sha,
            resolve_sha_to_tags=resolve_sha_to_tags,
            match_regex=match_regex,
            regex_matcher=regex_matcher,
            use_metadata=use_metadata,
            pin_major=pin_major,
            pin_minor=pin_minor,
            pin_patch=pin_patch,
        )

    def is_enabled(self, default_enabled: bool, name: str) -> bool:
        """Whether container ``name`` should be checked; falls back to the default."""
        value = self._get(name, ENABLE_ANNOTATION_KEY)
        if value == "true":
            return True
        if value == "false":
            return False
        return default_enabled
