"""
Check every container of a pod against its annotation-derived policy.
"""

import logging
from typing import TYPE_CHECKING

from version_checker.core.checker import Checker
from version_checker.core.exceptions import VersionCheckerException, is_version_not_found
from version_checker.core.models import Pod, Result
from version_checker.core.policy import PolicyBuilder

if TYPE_CHECKING:
    from version_checker.context import CheckContext

logger = logging.getLogger(__name__)


def sync_pod(
    ctx: "CheckContext",
    checker: Checker,
    pod: Pod,
    default_test_all: bool = False,
) -> dict[str, Result]:
    """
    Check the init containers, then the containers, of ``pod``.

    Containers disabled by annotation (or not enabled, when
    ``default_test_all`` is off) are skipped. A missing version is logged
    and does not fail the pod.

    Args:
        ctx: Context governing registry lookups
        checker: Checker to run per container
        pod: Pod to check
        default_test_all: Check containers without the enable annotation

    Returns:
        Result per container name, for every container that produced one

    Raises:
        VersionCheckerException: Listing every container that failed
    """
    builder = PolicyBuilder(pod.annotations)
    results: dict[str, Result] = {}
    errors: list[str] = []

    for container in [*pod.init_containers, *pod.containers]:
        if not builder.is_enabled(default_test_all, container.name):
            continue

        try:
            policy = builder.policy(container.name)
        except VersionCheckerException as e:
            errors.append(f"failed to build options from annotations for {container.name!r}: {e}")
            continue

        logger.debug(f"processing container image {pod.namespace}/{pod.name}/{container.name}")

        try:
            result = checker.container(ctx, pod, container, policy)
        except VersionCheckerException as e:
            if is_version_not_found(e):
                logger.error(str(e))
                continue
            errors.append(f"failed to check container image {container.name!r}: {e}")
            continue

        if result is None:
            continue

        if result.is_latest:
            logger.debug(f"image is latest {result.image_url}:{result.current_version}")
        else:
            logger.debug(
                f"image is not latest {result.image_url}: "
                f"{result.current_version} -> {result.latest_version}"
            )
        results[container.name] = result

    if errors:
        raise VersionCheckerException(
            f"failed to sync pod {pod.namespace}/{pod.name}: {','.join(errors)}"
        )

    return results
