"""
Semantic-ish versions for container image tags.

Container tags are rarely strict semver: they carry distro suffixes, build
numbers and revision counters (``0.21.0-debian-10-r39``, ``v1.0.1-gke.3``).
SemVer keeps the numeric ``major.minor.patch`` prefix and treats everything
after it as metadata, which is compared word by word so that numeric runs
inside the metadata order numerically (``r9`` < ``r39``).
"""

import re
from dataclasses import dataclass
from typing import Union

VERSION_PATTERN = re.compile(r"^v?([0-9]+)(\.[0-9]+)?(\.[0-9]+)?(.*)$", re.DOTALL)


@dataclass(frozen=True, eq=False)
class SemVer:
    """
    Version parsed from an image tag.

    Two SemVers are equal only when their original tag strings are identical;
    ``v1.0.0`` and ``1.0.0`` are different tags and therefore not equal.
    """

    major: int
    minor: int
    patch: int
    metadata: str
    original: str

    @classmethod
    def parse(cls, tag: str) -> "SemVer":
        """
        Parse a tag string. Parsing never fails.

        Args:
            tag: Tag string like "v1.2.3", "1.2", "1.27.0-alpine" or "latest"

        Returns:
            SemVer; tags without a leading number keep the whole string as metadata
        """
        match = VERSION_PATTERN.match(tag)
        if not match:
            return cls(major=0, minor=0, patch=0, metadata=tag, original=tag)

        numbers = [int(group.lstrip(".")) if group else 0 for group in match.groups()[:3]]
        return cls(
            major=numbers[0],
            minor=numbers[1],
            patch=numbers[2],
            metadata=match.group(4),
            original=tag,
        )

    def has_metadata(self) -> bool:
        """True if anything follows the numeric prefix (e.g. v1.0.1-gke.3, v1.2.3.4)."""
        return len(self.metadata) > 0

    def equal(self, other: "SemVer") -> bool:
        """Strict tag equality."""
        return self.original == other.original

    def less_than(self, other: "SemVer") -> bool:
        """
        Return True if this version is older than ``other``.

        Rules, in order:
        1. An empty tag is less than any non-empty tag.
        2. A tag without metadata is never less than a tag with metadata, and
           a tag with metadata is always less than one without.
        3. major, minor, then patch decide.
        4. Metadata is compared word by word: digit runs numerically, other
           runs lexically, and a text word sorts before a number word. A
           metadata that runs out of words first is not less.
        """
        if not self.original or not other.original:
            return len(self.original) < len(other.original)

        if not self.has_metadata() and other.has_metadata():
            return False
        if self.has_metadata() and not other.has_metadata():
            return True

        mine = (self.major, self.minor, self.patch)
        theirs = (other.major, other.minor, other.patch)
        if mine != theirs:
            return mine < theirs

        return _metadata_less_than(self.metadata, other.metadata)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self.equal(other)

    def __hash__(self) -> int:
        return hash(self.original)

    def __lt__(self, other: "SemVer") -> bool:
        return self.less_than(other)

    def __str__(self) -> str:
        return self.original


Word = Union[int, str]


def split_words(metadata: str) -> list[Word]:
    """
    Split metadata into maximal runs of digits and non-digits.

    Examples:
        >>> split_words("-debian-10-r39")
        ['-debian-', 10, '-r', 39]
    """
    words: list[Word] = []
    for match in re.finditer(r"[0-9]+|[^0-9]+", metadata):
        word = match.group(0)
        words.append(int(word) if word[0].isdigit() else word)
    return words


def _metadata_less_than(mine: str, theirs: str) -> bool:
    my_words = split_words(mine)
    their_words = split_words(theirs)

    for index in range(max(len(my_words), len(their_words))):
        if index >= len(my_words):
            return False
        if index >= len(their_words):
            return True

        a, b = my_words[index], their_words[index]
        if type(a) is not type(b):
            # text sorts before numbers
            return isinstance(a, str)
        if a != b:
            return a < b

    return False
