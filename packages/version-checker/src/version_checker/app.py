"""Wiring for a long-running version-checker process."""

from __future__ import annotations

import logging
import threading

from version_checker.config import Settings, configure_logging, get_settings
from version_checker.context import CheckContext
from version_checker.core.architecture import NodeMap
from version_checker.core.checker import Checker
from version_checker.core.models import Pod, Result
from version_checker.core.pod_sync import sync_pod
from version_checker.core.search import Search, TagLister
from version_checker.integrations.dockerhub import DockerHubClient
from version_checker.integrations.registry import ClientManager
from version_checker.utils.substitution import Substitution

logger = logging.getLogger(__name__)


def create_client(settings: Settings) -> ClientManager:
    """Build the registry client manager from settings."""
    dockerhub = DockerHubClient(
        username=settings.dockerhub_username,
        password=settings.dockerhub_password,
        token=settings.dockerhub_token,
        timeout=settings.request_timeout_seconds,
    )
    return ClientManager([dockerhub])


def create_checker(
    settings: Settings | None = None,
    client: TagLister | None = None,
    node_map: NodeMap | None = None,
) -> Checker:
    """Create and configure the Checker and the Search it owns.

    Args:
        settings: Optional settings override (useful for testing).
        client: Optional registry client override (useful for testing).
        node_map: Optional node platform map for OS/architecture filtering.

    Returns:
        Configured Checker. Its Search must be shut down at process exit.
    """
    if settings is None:
        settings = get_settings()

    configure_logging(settings.log_level)

    if client is None:
        client = create_client(settings)

    substitution = None
    if settings.image_url_substitution:
        substitution = Substitution.from_sed_command(settings.image_url_substitution)

    search = Search(client, settings.cache_timeout_seconds)
    return Checker(search, image_url_substitution=substitution, node_map=node_map)


def check_pod(
    ctx: CheckContext,
    checker: Checker,
    pod: Pod,
    settings: Settings | None = None,
) -> dict[str, Result]:
    """Check every enabled container of ``pod``, honouring default_test_all."""
    if settings is None:
        settings = get_settings()
    return sync_pod(ctx, checker, pod, default_test_all=settings.default_test_all)


def start_garbage_collector(
    ctx: CheckContext,
    search: Search,
    interval_seconds: float | None = None,
) -> threading.Thread:
    """Run the cache garbage collector on a daemon thread until ``ctx`` ends.

    The interval defaults to ``gc_interval_seconds`` from settings.
    """
    if interval_seconds is None:
        interval_seconds = get_settings().gc_interval_seconds

    thread = threading.Thread(
        target=search.run,
        args=(ctx, interval_seconds),
        name="cache-gc",
        daemon=True,
    )
    thread.start()
    return thread
