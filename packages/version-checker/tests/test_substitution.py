"""Tests for sed-style image URL substitution."""

import pytest

from version_checker.utils.substitution import Substitution, split_sed_command


class TestSplitSedCommand:
    """Tests for split_sed_command."""

    def test_basic(self):
        """Test a slash-separated command."""
        assert split_sed_command("s/foo/bar/") == ("foo", "bar", "")

    def test_custom_separator(self):
        """Test any character can act as the separator."""
        assert split_sed_command("s|a/b|c/d|g") == ("a/b", "c/d", "g")

    def test_escaped_separator(self):
        """Test an escaped separator is part of the pattern."""
        assert split_sed_command(r"s/mirror\/(.*)/docker.io\/$1/") == ("mirror/(.*)", "docker.io/$1", "")

    @pytest.mark.parametrize("command", ["s/a", "x/a/b/", "s/a/b", "s/a/b/c/d"])
    def test_invalid(self, command):
        """Test malformed commands are rejected."""
        with pytest.raises(ValueError):
            split_sed_command(command)


class TestSubstitution:
    """Tests for Substitution."""

    def test_first_match_only(self):
        """Test only the first match is replaced without the g flag."""
        sub = Substitution.from_sed_command("s/a/b/")
        assert sub.apply("aaa") == "baa"

    def test_global(self):
        """Test the g flag replaces every match."""
        sub = Substitution.from_sed_command("s/a/b/g")
        assert sub.apply("aaa") == "bbb"

    def test_group_reference(self):
        """Test $1 style group references."""
        sub = Substitution.from_sed_command(r"s/^mirror\.local\/(.*)$/docker.io\/$1/")
        assert sub.apply("mirror.local/library/nginx") == "docker.io/library/nginx"

    def test_braced_group_reference(self):
        """Test ${1} style group references."""
        sub = Substitution.from_sed_command("s|^(.*)/app$|${1}/service|")
        assert sub.apply("quay.io/org/app") == "quay.io/org/service"

    def test_no_match_unchanged(self):
        """Test values that do not match are returned unchanged."""
        sub = Substitution.from_sed_command("s/mirror/upstream/")
        assert sub.apply("nginx") == "nginx"

    def test_invalid_regex(self):
        """Test a pattern that does not compile is rejected."""
        with pytest.raises(ValueError, match="does not compile"):
            Substitution.from_sed_command("s/(/x/")

    def test_unsupported_flag(self):
        """Test flags other than g are rejected."""
        with pytest.raises(ValueError, match="'g' flag"):
            Substitution.from_sed_command("s/a/b/i")
