"""
Tests for SemVer parsing and ordering of image tags.
"""

import pytest

from version_checker.utils.semver import SemVer, split_words


class TestParse:
    """Tests for SemVer.parse."""

    @pytest.mark.parametrize(
        "tag, expected, metadata",
        [
            ("", (0, 0, 0), ""),
            ("v", (0, 0, 0), "v"),
            ("hello-1.2.3", (0, 0, 0), "hello-1.2.3"),
            ("1", (1, 0, 0), ""),
            ("1.2", (1, 2, 0), ""),
            ("1.0.1", (1, 0, 1), ""),
            ("v1.0.1", (1, 0, 1), ""),
            ("v1.0.1-debian-3.hello-world-12", (1, 0, 1), "-debian-3.hello-world-12"),
            ("v1.0.1-", (1, 0, 1), "-"),
            ("v1.2-alpha", (1, 2, 0), "-alpha"),
            ("1.2.3.4", (1, 2, 3), ".4"),
            ("v1.3.hello1-debian-3.hello-world-12", (1, 3, 0), ".hello1-debian-3.hello-world-12"),
        ],
    )
    def test_parse(self, tag, expected, metadata):
        """Test numeric components and metadata extraction."""
        version = SemVer.parse(tag)
        assert (version.major, version.minor, version.patch) == expected
        assert version.metadata == metadata

    def test_parse_keeps_original(self):
        """Test that the original string is kept verbatim."""
        for tag in ["v1.2.3", "1.27.0-alpine", "latest", "", "v1.0.1-"]:
            assert str(SemVer.parse(tag)) == tag

    def test_has_metadata(self):
        """Test has_metadata on plain and suffixed tags."""
        assert SemVer.parse("v1.2.3").has_metadata() is False
        assert SemVer.parse("v1.2.3-rc1").has_metadata() is True
        assert SemVer.parse("latest").has_metadata() is True

    def test_large_numbers(self):
        """Test that large numeric components parse as integers."""
        version = SemVer.parse("20240101.1.0")
        assert version.major == 20240101


class TestEqual:
    """Tests for strict tag equality."""

    def test_same_tag_equal(self):
        """Test identical tags are equal."""
        assert SemVer.parse("v1.2.3").equal(SemVer.parse("v1.2.3"))

    def test_numerically_equal_tags_differ(self):
        """Test that v1.0.0 and 1.0.0 are not equal."""
        assert not SemVer.parse("v1.0.0").equal(SemVer.parse("1.0.0"))
        assert SemVer.parse("v1.0.0") != SemVer.parse("1.0.0")

    def test_equal_consistent_with_string(self):
        """Test equality agrees with string comparison."""
        tags = ["v1.0.0", "1.0.0", "1.0", "v1.0.0-alpha", ""]
        for a in tags:
            for b in tags:
                assert SemVer.parse(a).equal(SemVer.parse(b)) == (a == b)


class TestLessThan:
    """Tests for SemVer.less_than ordering rules."""

    @pytest.mark.parametrize(
        "first, second, expected",
        [
            ("", "", False),
            ("hello", "aworld", False),
            ("", "1", True),
            ("1", "", False),
            ("hello", "world-1", True),
            ("hello-1", "aworld", False),
            ("v0.1.2", "v0.1.2", False),
            ("v0.1.2", "v0.1.3", True),
            ("v0.1.3", "v0.1.2", False),
            ("v0.1.2", "v0.2.0", True),
            ("v0.9.9", "v1.0.0", True),
            ("v0.1.2", "v0.1.3-alpha", False),
            ("v0.1.2", "v0.1.3-alpha.0", False),
            ("v0.1.3-alpha.0", "v0.1.3-alpha.1", True),
            ("v0.1.3-beta.0", "v0.1.3-alpha.1", False),
            ("v0.1.3-12.alpha.1", "v0.1.3-12.beta.1", True),
            ("v0.1.3-alpha.103.gke", "v0.1.3-alpha.0113.gke", True),
            ("v1.3.hello1-debian-3.hello-world-12", "v1.3.hello1-debian-9.hello-world-12", True),
            ("v1.3.hello1-debian-9.hello-world-125", "v1.3.hello1-debian-9.hello-world-115", False),
            ("v1.3.hello1-debian-9.hello-world-12", "v1.3.hello1-debian-9.hello-world-12", False),
            ("0.21.0-debian-10-r9", "0.21.0-debian-10-r39", True),
            ("0.21.0-debian-10-r39", "0.21.0-debian-10-r9", False),
        ],
    )
    def test_less_than(self, first, second, expected):
        """Test ordering between two tags."""
        assert SemVer.parse(first).less_than(SemVer.parse(second)) is expected

    def test_release_never_less_than_metadata(self):
        """Test a plain release is not less than a suffixed tag, even a newer one."""
        assert SemVer.parse("v1.0.0").less_than(SemVer.parse("v2.0.0-rc1")) is False

    def test_metadata_tag_less_than_release_of_same_version(self):
        """Test a pre-release is less than its release."""
        assert SemVer.parse("v1.1.1-alpha").less_than(SemVer.parse("v1.1.1")) is True

    def test_metadata_tag_less_than_any_release(self):
        """Test a suffixed tag is less than a release, even an older one."""
        assert SemVer.parse("v2.0.0-alpha").less_than(SemVer.parse("v1.0.0")) is True

    def test_release_and_metadata_ordering_is_antisymmetric(self):
        """Test exactly one direction holds between a release and a suffixed tag."""
        release, suffixed = SemVer.parse("v1.0.0"), SemVer.parse("v2.0.0-rc1")
        assert suffixed.less_than(release) is True
        assert release.less_than(suffixed) is False

    def test_numeric_word_inside_longer_metadata(self):
        """Test numeric revision ordering with trailing words."""
        assert SemVer.parse("0.21.0-debian-10-r9-hello").less_than(
            SemVer.parse("0.21.0-debian-10-r39-hello")
        ) is True
        assert SemVer.parse("0.21.0-debian-10-r39-hello").less_than(
            SemVer.parse("0.21.0-debian-10-r9-hello")
        ) is False

    def test_shorter_metadata_not_less(self):
        """Test that running out of words first is not less."""
        assert SemVer.parse("1.0.0-r1").less_than(SemVer.parse("1.0.0-r1-x")) is False
        assert SemVer.parse("1.0.0-r1-x").less_than(SemVer.parse("1.0.0-r1")) is True

    def test_lt_operator(self):
        """Test the < operator delegates to less_than."""
        assert SemVer.parse("v1.0.0") < SemVer.parse("v1.0.1")


class TestSplitWords:
    """Tests for metadata tokenization."""

    def test_empty(self):
        """Test empty metadata has no words."""
        assert split_words("") == []

    def test_mixed(self):
        """Test runs of digits and non-digits alternate."""
        assert split_words("-debian-10-r39") == ["-debian-", 10, "-r", 39]

    def test_leading_number(self):
        """Test metadata starting with digits."""
        assert split_words(".4") == [".", 4]
        assert split_words("12.alpha") == [12, ".alpha"]
