"""
Binary path resolution.

Target, sanitizer and cmplog builds are plain files that only need to
exist. The afl-fuzz engine is located through a chain of strategies:
an explicit path, a $PATH lookup, then the $AFL_PATH installation root.
"""

import os
import shutil
from pathlib import Path
from typing import Iterable, Optional, Union

from aflfleet.utils.logging import get_logger

logger = get_logger(__name__)

AFL_FUZZ = "afl-fuzz"
AFL_PATH_ENV = "AFL_PATH"

PathLike = Union[str, os.PathLike]


def resolve_file(path: Optional[PathLike]) -> Optional[Path]:
    """
    Canonicalize a path if it names an existing regular file.

    Args:
        path: Candidate path, may be None or empty

    Returns:
        Absolute resolved path, or None if the file does not exist
    """
    if not path:
        return None
    candidate = Path(path).expanduser()
    if candidate.is_file():
        return candidate.resolve()
    return None


class ExplicitPath:
    """Candidate given directly by the user."""

    def __init__(self, path: Optional[PathLike]):
        self.path = path

    def candidate(self, name: str) -> Optional[Path]:
        return Path(self.path).expanduser() if self.path else None


class PathLookup:
    """Candidate found by searching $PATH."""

    def candidate(self, name: str) -> Optional[Path]:
        found = shutil.which(name)
        return Path(found) if found else None


class EnvironmentRoot:
    """Candidate derived from an installation root in the environment."""

    def __init__(self, variable: str = AFL_PATH_ENV):
        self.variable = variable

    def candidate(self, name: str) -> Optional[Path]:
        value = os.environ.get(self.variable)
        if not value:
            return None
        root = Path(value).expanduser()
        # $AFL_PATH is usually the install dir but some setups point it at the binary
        return root if root.name == name else root / name


class BinaryResolver:
    """
    Resolve a named executable through an ordered strategy chain.

    The first strategy that produces a candidate decides. The candidate
    must exist, be a regular file and carry the expected file name.
    """

    def __init__(self, name: str, strategies: Iterable):
        self.name = name
        self.strategies = list(strategies)

    def resolve(self) -> Optional[Path]:
        for strategy in self.strategies:
            candidate = strategy.candidate(self.name)
            if candidate is None:
                continue
            logger.debug(
                f"{type(strategy).__name__} proposed {candidate} for {self.name}"
            )
            if candidate.is_file() and candidate.name == self.name:
                return candidate.resolve()
            return None
        return None


def find_afl_fuzz(afl_binary: Optional[PathLike] = None) -> Path:
    """
    Locate the afl-fuzz binary.

    Args:
        afl_binary: Optional explicit path to afl-fuzz

    Returns:
        Canonical path to afl-fuzz

    Raises:
        FileNotFoundError: If no strategy yields a valid afl-fuzz binary
    """
    resolver = BinaryResolver(
        AFL_FUZZ,
        [ExplicitPath(afl_binary), PathLookup(), EnvironmentRoot()],
    )
    path = resolver.resolve()
    if path is None:
        raise FileNotFoundError(
            f"Could not find {AFL_FUZZ} binary "
            f"(tried explicit path, $PATH and ${AFL_PATH_ENV})"
        )
    return path
