"""Core business logic for version resolution."""

from version_checker.core.models import (
    Container,
    ContainerStatus,
    ImageTag,
    Pod,
    Policy,
    Result,
)
from version_checker.core.cache import Cache
from version_checker.core.search import Search
from version_checker.core.checker import Checker
from version_checker.core.pod_sync import sync_pod

__all__ = [
    "Cache",
    "Checker",
    "Container",
    "ContainerStatus",
    "ImageTag",
    "Pod",
    "Policy",
    "Result",
    "Search",
    "sync_pod",
]
