"""Core modules for binary resolution and harness description."""

from aflfleet.core.resolver import (
    BinaryResolver,
    EnvironmentRoot,
    ExplicitPath,
    PathLookup,
    find_afl_fuzz,
    resolve_file,
)
from aflfleet.core.harness import Harness

__all__ = [
    "BinaryResolver",
    "EnvironmentRoot",
    "ExplicitPath",
    "PathLookup",
    "find_afl_fuzz",
    "resolve_file",
    "Harness",
]
