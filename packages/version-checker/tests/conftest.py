"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from version_checker.context import CheckContext
from version_checker.core.models import ImageTag


@pytest.fixture
def ctx():
    """Fresh, never-cancelled context."""
    return CheckContext()


@pytest.fixture
def base_time():
    """Fixed reference timestamp for tag push times."""
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_tags(base_time):
    """Build ImageTags from names, each pushed one hour after the previous."""

    def _make(*names, sha_prefix="sha256:"):
        return [
            ImageTag(
                tag=name,
                sha=f"{sha_prefix}{index}",
                timestamp=base_time + timedelta(hours=index),
            )
            for index, name in enumerate(names)
        ]

    return _make


class FakeSearch:
    """Searcher returning a canned response and recording its calls."""

    def __init__(self, latest=None, error=None, resolved_tag=None, resolve_error=None):
        self.latest = latest
        self.error = error
        self.resolved_tag = resolved_tag
        self.resolve_error = resolve_error
        self.calls = []
        self.resolve_calls = []

    def latest_image(self, ctx, image_url, policy):
        self.calls.append((image_url, policy))
        if self.error is not None:
            raise self.error
        return self.latest

    def resolve_sha_to_tag(self, ctx, image_url, sha):
        self.resolve_calls.append((image_url, sha))
        if self.resolve_error is not None:
            raise self.resolve_error
        return self.resolved_tag


@pytest.fixture
def fake_search():
    """Factory for FakeSearch instances."""
    return FakeSearch
