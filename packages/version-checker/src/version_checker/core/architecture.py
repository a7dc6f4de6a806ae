"""Node platform lookups used to filter tags by OS and architecture."""

import logging
import threading
from dataclasses import dataclass
from typing import Mapping, Optional

from version_checker.constants import NODE_ARCH_LABEL, NODE_OS_LABEL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeMetadata:
    """Platform of a cluster node."""

    os: str
    architecture: str


class NodeMap:
    """Thread-safe map of node name to platform, fed by the node informer."""

    def __init__(self):
        self._lock = threading.Lock()
        self._nodes: dict[str, NodeMetadata] = {}

    def add(self, name: str, labels: Optional[Mapping[str, str]]) -> None:
        """
        Record a node's platform from its labels.

        Raises:
            ValueError: If the OS or architecture label is missing
        """
        labels = labels or {}
        arch = labels.get(NODE_ARCH_LABEL)
        if arch is None:
            raise ValueError(f"missing {NODE_ARCH_LABEL!r} label on node {name!r}")

        os_name = labels.get(NODE_OS_LABEL)
        if os_name is None:
            raise ValueError(f"missing {NODE_OS_LABEL!r} label on node {name!r}")

        with self._lock:
            self._nodes[name] = NodeMetadata(os=os_name, architecture=arch)

    def get_architecture(self, name: str) -> Optional[NodeMetadata]:
        """Return the node's platform, or None if unknown."""
        with self._lock:
            return self._nodes.get(name)

    def delete(self, name: str) -> None:
        with self._lock:
            self._nodes.pop(name, None)
