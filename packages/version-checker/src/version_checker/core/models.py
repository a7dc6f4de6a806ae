"""Data models for version resolution."""

import json
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Optional

EPOCH = datetime.min.replace(tzinfo=timezone.utc)
"""Timestamp used for tags the registry reported without one."""


@dataclass(frozen=True)
class ImageTag:
    """One tag/digest pair as reported by a registry."""

    tag: str
    """Tag name (e.g. 'v1.2.3'). May be empty for untagged manifests."""

    sha: str = ""
    """Manifest digest (e.g. 'sha256:abc...')."""

    timestamp: datetime = EPOCH
    """When the tag was pushed or last updated."""

    architecture: str = ""
    """CPU architecture of the image (e.g. 'amd64'). Empty if unknown."""

    os: str = ""
    """Operating system of the image (e.g. 'linux'). Empty if unknown."""


@dataclass(frozen=True)
class Policy:
    """
    Constraints used to decide which tag is the "latest" for a container.

    ``use_sha`` cannot be combined with ``match_regex``, the pins or
    ``use_metadata``. The policy builder enforces this; it is not re-checked here.
    """

    override_url: Optional[str] = None
    use_sha: bool = False
    resolve_sha_to_tags: bool = False
    match_regex: Optional[str] = None
    use_metadata: bool = False
    pin_major: Optional[int] = None
    pin_minor: Optional[int] = None
    pin_patch: Optional[int] = None
    os: Optional[str] = None
    architecture: Optional[str] = None
    regex_matcher: Optional[re.Pattern] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.regex_matcher is None and self.match_regex is not None:
            object.__setattr__(self, "regex_matcher", re.compile(self.match_regex))
        elif self.regex_matcher is not None and self.match_regex is None:
            object.__setattr__(self, "match_regex", self.regex_matcher.pattern)

    def with_changes(self, **changes: Any) -> "Policy":
        """Return a copy of this policy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire form, omitting unset and false fields."""
        data: dict[str, Any] = {}
        if self.override_url is not None:
            data["override-url"] = self.override_url
        if self.use_sha:
            data["use-sha"] = True
        if self.resolve_sha_to_tags:
            data["resolve-sha-to-tags"] = True
        if self.match_regex is not None:
            data["match-regex"] = self.match_regex
        if self.use_metadata:
            data["use-metadata"] = True
        if self.pin_major is not None:
            data["pin-major"] = self.pin_major
        if self.pin_minor is not None:
            data["pin-minor"] = self.pin_minor
        if self.pin_patch is not None:
            data["pin-patch"] = self.pin_patch
        if self.os is not None:
            data["os"] = self.os
        if self.architecture is not None:
            data["architecture"] = self.architecture
        return data

    def to_json(self) -> str:
        """Compact JSON form used in cache keys and error messages."""
        return json.dumps(self.to_dict(), separators=(",", ":"))


@dataclass
class Result:
    """Outcome of comparing one running container against its registry."""

    current_version: str
    latest_version: str
    is_latest: bool
    image_url: str
    os: str = ""
    architecture: str = ""


@dataclass(frozen=True)
class Container:
    """Declared container in a pod spec."""

    name: str
    image: str


@dataclass(frozen=True)
class ContainerStatus:
    """Runtime status of a container as recorded by the kubelet."""

    name: str
    image_id: str = ""


@dataclass
class Pod:
    """The parts of a Kubernetes pod the checker reads."""

    name: str = ""
    namespace: str = ""
    node_name: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    containers: list[Container] = field(default_factory=list)
    init_containers: list[Container] = field(default_factory=list)
    container_statuses: list[ContainerStatus] = field(default_factory=list)
    init_container_statuses: list[ContainerStatus] = field(default_factory=list)
