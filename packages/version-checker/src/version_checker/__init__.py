"""version-checker: is each running container on the newest image its policy allows?"""

from version_checker.constants import __version__
from version_checker.context import CheckContext, background
from version_checker.core import (
    Cache,
    Checker,
    ImageTag,
    Policy,
    Result,
    Search,
)
from version_checker.utils.semver import SemVer

__all__ = [
    "__version__",
    "background",
    "Cache",
    "CheckContext",
    "Checker",
    "ImageTag",
    "Policy",
    "Result",
    "Search",
    "SemVer",
]
