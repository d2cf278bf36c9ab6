"""
Fuzzing harness description.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from aflfleet.core.resolver import PathLike, resolve_file
from aflfleet.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Harness:
    """
    Set of builds of one fuzzing target.

    Attributes:
        target_binary: Instrumented target, possibly built with AFL_HARDEN=1
        sanitizer_binary: Build with AFL_USE_*SAN=1
        cmplog_binary: Build with AFL_LLVM_CMPLOG=1
        target_args: Arguments for the target, "@@" marks the input file
    """
    target_binary: Path
    sanitizer_binary: Optional[Path] = None
    cmplog_binary: Optional[Path] = None
    target_args: Optional[str] = None

    @classmethod
    def create(
        cls,
        target_binary: PathLike,
        sanitizer_binary: Optional[PathLike] = None,
        cmplog_binary: Optional[PathLike] = None,
        target_args: Optional[str] = None,
    ) -> "Harness":
        """
        Build a harness from user supplied paths.

        Args:
            target_binary: Path to the instrumented target
            sanitizer_binary: Optional path to the sanitizer build
            cmplog_binary: Optional path to the cmplog build
            target_args: Optional raw argument string for the target

        Returns:
            Harness with canonical paths

        Raises:
            FileNotFoundError: If the target binary does not exist
        """
        target = resolve_file(target_binary)
        if target is None:
            raise FileNotFoundError(f"Could not find target binary: {target_binary}")

        sanitizer = resolve_file(sanitizer_binary)
        if sanitizer_binary and sanitizer is None:
            logger.warning(f"Sanitizer binary not found, ignoring: {sanitizer_binary}")

        cmplog = resolve_file(cmplog_binary)
        if cmplog_binary and cmplog is None:
            logger.warning(f"CMPLOG binary not found, ignoring: {cmplog_binary}")

        return cls(
            target_binary=target,
            sanitizer_binary=sanitizer,
            cmplog_binary=cmplog,
            target_args=target_args or None,
        )

    @property
    def name(self) -> str:
        """File name of the target binary."""
        return self.target_binary.name
