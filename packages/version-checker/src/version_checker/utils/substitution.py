"""
sed-style image URL substitution.

Lets operators rewrite image URLs before lookup, e.g. to point every image
from an internal mirror back at its upstream registry:
``s/mirror.internal\\/(.*)/docker.io\\/\\1/``.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Substitution:
    """A compiled ``s/pattern/replacement/[g]`` command."""

    pattern: re.Pattern
    substitute: str
    all: bool = False

    @classmethod
    def from_sed_command(cls, command: str) -> "Substitution":
        """
        Parse a sed substitution command.

        Any single character following the leading 's' is the separator, and
        may appear escaped inside the pattern or replacement. Only the 'g'
        flag is supported.

        Raises:
            ValueError: If the command cannot be parsed or its regex is invalid
        """
        pattern, substitute, flags = split_sed_command(command)
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise ValueError(
                f"sed command for substitution has regex that does not compile: {pattern} {e}"
            ) from e

        if flags not in ("", "g"):
            raise ValueError(f"sed command for substitution only supports the 'g' flag: {flags}")

        return cls(pattern=compiled, substitute=_to_python_template(substitute), all=flags == "g")

    def apply(self, value: str) -> str:
        """Apply the substitution to ``value``."""
        return self.pattern.sub(self.substitute, value, count=0 if self.all else 1)


def split_sed_command(command: str) -> tuple[str, str, str]:
    """Split ``s<sep>pattern<sep>replacement<sep>flags`` into its three parts."""
    if len(command) < 4:
        raise ValueError(f"sed command for substitution seems too short: {command}")
    if command[0] != "s":
        raise ValueError(f"sed command for substitution should start with s: {command}")

    separator = re.escape(command[1])
    group = rf"((?:\\{separator}|(?!{separator}).)*)"
    matcher = re.compile(rf"^s{separator}{group}{separator}{group}{separator}{group}$", re.DOTALL)

    match = matcher.match(command)
    if not match:
        raise ValueError(f"sed command for substitution could not be parsed: {command}")

    escaped = "\\" + command[1]
    return (
        match.group(1).replace(escaped, command[1]),
        match.group(2).replace(escaped, command[1]),
        match.group(3),
    )


def _to_python_template(substitute: str) -> str:
    # sed and Go both write group references as $1 / ${1}; re.sub wants \g<1>.
    return re.sub(r"\$\{?(\w+)\}?", r"\\g<\1>", substitute)
