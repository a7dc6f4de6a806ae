"""
Docker Hub client for listing image tags.

Uses the Hub repositories API, which reports every tag together with its
per-platform digests and last-updated time in one paginated listing. Uses a
requests Session for connection pooling. Retries are left to the caller's
next reconcile.
"""

import logging
import re
from datetime import datetime
from typing import TYPE_CHECKING, Optional

import requests

from version_checker.constants import (
    API_REQUEST_TIMEOUT,
    DOCKERHUB_DEFAULT_REPO,
    DOCKERHUB_LOGIN_URL,
    DOCKERHUB_LOOKUP_URL,
    DOCKERHUB_PAGE_SIZE,
)
from version_checker.core.exceptions import IntegrationException
from version_checker.core.models import EPOCH, ImageTag

if TYPE_CHECKING:
    from version_checker.context import CheckContext

logger = logging.getLogger(__name__)

DOCKER_HOST_PATTERN = re.compile(r"(^(.*\.)?docker\.com$)|(^(.*\.)?docker\.io$)")


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp as returned by Docker Hub."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    # fromisoformat() accepts at most microsecond precision
    match = re.match(r"^(.*\.\d{6})\d+(.*)$", value)
    if match:
        value = match.group(1) + match.group(2)

    return datetime.fromisoformat(value)


class DockerHubClient:
    """
    Client for Docker Hub.

    Authenticates with either a static token or a username/password pair
    exchanged for a token at construction time.
    """

    name = "dockerhub"

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = API_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._session = session or requests.Session()
        self._timeout = timeout
        self._token = token or ""

        if username or password:
            if token:
                raise IntegrationException(
                    self.name, "cannot specify Token as well as username/password"
                )
            self._token = self._login(username or "", password or "")

    def _login(self, username: str, password: str) -> str:
        """Exchange credentials for a JWT."""
        try:
            response = self._session.post(
                DOCKERHUB_LOGIN_URL,
                json={"username": username, "password": password},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise IntegrationException(self.name, f"failed to setup auth: {e}") from e

        if response.status_code != 200:
            raise IntegrationException(
                self.name, f"failed to setup auth: {response.text}", response.status_code
            )

        return response.json().get("token", "")

    def is_host(self, host: str) -> bool:
        """Docker Hub serves bare image names and *.docker.io / *.docker.com."""
        return host == "" or bool(DOCKER_HOST_PATTERN.match(host))

    def repo_image_from_path(self, path: str) -> tuple[str, str]:
        """
        Split a path into (repo, image); single-segment names live in 'library'.

        Examples:
            >>> DockerHubClient().repo_image_from_path("nginx")
            ('library', 'nginx')
            >>> DockerHubClient().repo_image_from_path("jetstack/cert-manager")
            ('jetstack', 'cert-manager')
        """
        parts = path.split("/")
        if len(parts) == 1:
            return DOCKERHUB_DEFAULT_REPO, parts[0]
        return parts[-2], parts[-1]

    def tags(self, ctx: "CheckContext", host: str, repo: str, image: str) -> list[ImageTag]:
        """
        List every tag of ``repo/image``, one ImageTag per platform digest.

        Raises:
            IntegrationException: On HTTP errors or malformed responses
        """
        url: Optional[str] = DOCKERHUB_LOOKUP_URL.format(repo=repo, image=image)
        params: Optional[dict] = {"page_size": DOCKERHUB_PAGE_SIZE}

        tags: list[ImageTag] = []
        while url:
            ctx.raise_if_done()
            page = self._get_page(ctx, url, params)
            params = None  # "next" links already carry the query string

            for result in page.get("results") or []:
                tags.extend(self._tags_from_result(result))

            url = page.get("next")

        logger.debug(f"Found {len(tags)} tags for {repo}/{image}")
        return tags

    def _tags_from_result(self, result: dict) -> list[ImageTag]:
        images = result.get("images") or []
        # No images in this result: nothing real to compare against.
        if not images:
            return []

        timestamp = EPOCH
        if result.get("last_updated"):
            try:
                timestamp = parse_timestamp(result["last_updated"])
            except ValueError as e:
                raise IntegrationException(
                    self.name, f"failed to parse image timestamp: {e}"
                ) from e

        tags = []
        for image in images:
            digest = image.get("digest")
            # An image without a digest contains no real image.
            if not digest:
                continue
            tags.append(
                ImageTag(
                    tag=result.get("name", ""),
                    sha=digest,
                    timestamp=timestamp,
                    os=image.get("os") or "",
                    architecture=image.get("architecture") or "",
                )
            )
        return tags

    def _get_page(self, ctx: "CheckContext", url: str, params: Optional[dict]) -> dict:
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        timeout = self._timeout
        remaining = ctx.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)

        try:
            response = self._session.get(url, headers=headers, params=params, timeout=timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise IntegrationException(self.name, f"failed to get image: {e}", status) from e
        except requests.RequestException as e:
            raise IntegrationException(self.name, f"failed to get image: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise IntegrationException(
                self.name, f"unexpected image tags response: {response.text}"
            ) from e
