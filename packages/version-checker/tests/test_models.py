"""Tests for Policy serialization and exception helpers."""

import json
import re

from version_checker.core.exceptions import (
    FetchException,
    IntegrationException,
    VersionCheckerException,
    VersionNotFoundException,
    is_version_not_found,
)
from version_checker.core.models import EPOCH, ImageTag, Policy


class TestPolicy:
    """Tests for Policy."""

    def test_empty_json(self):
        """Test an empty policy serializes to an empty object."""
        assert Policy().to_json() == "{}"

    def test_json_field_names_and_order(self):
        """Test wire names and field order."""
        policy = Policy(
            override_url="quay.io/app",
            use_sha=False,
            match_regex="^v1",
            pin_major=1,
            pin_minor=0,
            os="linux",
            architecture="amd64",
        )
        assert policy.to_json() == (
            '{"override-url":"quay.io/app","match-regex":"^v1",'
            '"pin-major":1,"pin-minor":0,"os":"linux","architecture":"amd64"}'
        )
        assert json.loads(policy.to_json())["pin-minor"] == 0

    def test_regex_compiled(self):
        """Test match_regex is compiled on construction."""
        assert Policy(match_regex="^v1").regex_matcher.pattern == "^v1"

    def test_matcher_backfills_regex(self):
        """Test a compiled matcher fills in match_regex."""
        policy = Policy(regex_matcher=re.compile("^v2"))
        assert policy.match_regex == "^v2"
        assert '"match-regex":"^v2"' in policy.to_json()

    def test_with_changes(self):
        """Test with_changes copies and leaves the original intact."""
        policy = Policy(pin_major=1)
        changed = policy.with_changes(use_sha=True)
        assert changed.use_sha is True
        assert changed.pin_major == 1
        assert policy.use_sha is False

    def test_equality_ignores_matcher(self):
        """Test equal regex strings make equal policies."""
        assert Policy(match_regex="^v1") == Policy(match_regex="^v1")


class TestImageTag:
    """Tests for ImageTag defaults."""

    def test_defaults(self):
        """Test unset fields default to empty values."""
        tag = ImageTag(tag="v1")
        assert tag.sha == ""
        assert tag.timestamp == EPOCH
        assert (tag.os, tag.architecture) == ("", "")


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_is_version_not_found(self):
        """Test direct and chained not-found errors are recognised."""
        assert is_version_not_found(VersionNotFoundException("x"))
        assert not is_version_not_found(ValueError("x"))

        try:
            try:
                raise VersionNotFoundException("inner")
            except VersionNotFoundException as e:
                raise VersionCheckerException("outer") from e
        except VersionCheckerException as outer:
            assert is_version_not_found(outer)

    def test_fetch_exception_message(self):
        """Test FetchException names the image."""
        error = FetchException("nginx", "timeout")
        assert error.image_url == "nginx"
        assert "nginx" in str(error)
        assert "timeout" in str(error)

    def test_integration_exception(self):
        """Test IntegrationException carries service and status."""
        error = IntegrationException("dockerhub", "failed", 404)
        assert error.service == "dockerhub"
        assert error.status_code == 404
        assert str(error) == "dockerhub: failed"
