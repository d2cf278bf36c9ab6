"""
Per-runner AFL++ configuration records.

A runner slot is described by two records: RunnerConfig holds the
environment toggles exported before afl-fuzz starts, FuzzerInvocation
holds every command line decision for the slot. Both are rendered to
text only once, by FuzzerInvocation.to_command().

Environment variables are documented at https://aflplus.plus/docs/env_variables/
"""

import re
import shlex
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class MutationMode(Enum):
    """afl-fuzz -P mutation strategy."""
    EXPLORE = "explore"
    EXPLOIT = "exploit"


class InputFormat(Enum):
    """afl-fuzz -a input format hint."""
    BINARY = "binary"
    TEXT = "text"


class PowerSchedule(Enum):
    """afl-fuzz -p power schedules, in rotation order."""
    FAST = "fast"
    EXPLORE = "explore"
    COE = "coe"
    LIN = "lin"
    QUAD = "quad"
    EXPLOIT = "exploit"
    RARE = "rare"


SCHEDULES: List[PowerSchedule] = list(PowerSchedule)


class FuzzerRole(Enum):
    """Role of a runner inside the campaign."""
    MAIN = "-M"
    SECONDARY = "-S"


class CmplogLevel(Enum):
    """afl-fuzz -l comparison logging intensity."""
    LEVEL_2 = "2"
    LEVEL_2_AUTO_TOKEN = "2AT"
    LEVEL_3 = "3"


ENV_VARS: Dict[str, str] = {
    "autoresume": "AFL_AUTORESUME",
    "final_sync": "AFL_FINAL_SYNC",
    "disable_trim": "AFL_DISABLE_TRIM",
    "keep_timeouts": "AFL_KEEP_TIMEOUTS",
    "expand_havoc_now": "AFL_EXPAND_HAVOC_NOW",
    "ignore_seed_problems": "AFL_IGNORE_SEED_PROBLEMS",
    "import_first": "AFL_IMPORT_FIRST",
}


@dataclass
class RunnerConfig:
    """
    AFL++ environment toggles for one runner.

    Attributes:
        autoresume: Resume an existing output dir instead of refusing to start
        final_sync: Import all test cases from other fuzzers on shutdown
        disable_trim: Do not trim test cases
        keep_timeouts: Keep slow inputs if they reach new coverage
        expand_havoc_now: Start directly in the expensive havoc mode
        ignore_seed_problems: Skip crashing or hanging seeds instead of exiting
        import_first: Load test cases from other fuzzers before own seeds
    """
    autoresume: bool = True
    final_sync: bool = False
    disable_trim: bool = False
    keep_timeouts: bool = False
    expand_havoc_now: bool = False
    ignore_seed_problems: bool = False
    import_first: bool = False

    def environment(self) -> Dict[str, str]:
        """Map of environment variable to "0"/"1"."""
        return {
            ENV_VARS[f.name]: str(int(getattr(self, f.name)))
            for f in fields(self)
        }

    def env_prefix(self) -> str:
        """Render as a shell environment prefix, e.g. "AFL_AUTORESUME=1 ..."."""
        return " ".join(f"{var}={value}" for var, value in self.environment().items())


@dataclass
class FuzzerInvocation:
    """Every command line decision made for one runner slot."""
    index: int
    afl_binary: Path
    env: RunnerConfig = field(default_factory=RunnerConfig)

    # Mutation strategy
    mode: Optional[MutationMode] = None
    input_format: Optional[InputFormat] = None
    min_length: Optional[int] = None

    # Queue handling
    sequential_queue: bool = False
    power_schedule: Optional[PowerSchedule] = None

    # Shared campaign resources
    input_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    dictionary: Optional[Path] = None

    # Campaign role
    role: Optional[FuzzerRole] = None
    name: Optional[str] = None

    # Instrumentation
    cmplog_level: Optional[CmplogLevel] = None
    cmplog_binary: Optional[Path] = None
    binary: Optional[Path] = None
    target_args: Optional[str] = None

    @property
    def is_main(self) -> bool:
        return self.role is FuzzerRole.MAIN

    @property
    def uses_cmplog(self) -> bool:
        return self.cmplog_binary is not None

    def arguments(self) -> List[str]:
        """afl-fuzz arguments, up to and including the target binary."""
        if self.binary is None:
            raise ValueError(f"Runner {self.index} has no target binary bound")

        args: List[str] = []
        if self.mode:
            args += ["-P", self.mode.value]
        if self.input_format:
            args += ["-a", self.input_format.value]
        if self.min_length is not None:
            args += ["-L", str(self.min_length)]
        if self.sequential_queue:
            args.append("-Z")
        if self.power_schedule:
            args += ["-p", self.power_schedule.value]
        if self.input_dir:
            args += ["-i", str(self.input_dir)]
        if self.output_dir:
            args += ["-o", str(self.output_dir)]
        if self.role and self.name:
            args += [self.role.value, self.name]
        if self.dictionary:
            args += ["-x", str(self.dictionary)]
        if self.cmplog_level:
            args += ["-l", self.cmplog_level.value]
        if self.cmplog_binary:
            args += ["-c", str(self.cmplog_binary)]
        args += ["--", str(self.binary)]
        return args

    def to_command(self) -> str:
        """Render the full shell command line for this runner."""
        parts = [self.env.env_prefix(), shlex.quote(str(self.afl_binary))]
        parts += [shlex.quote(arg) for arg in self.arguments()]
        # Target arguments go last and are passed through untouched
        if self.target_args:
            parts.append(self.target_args)
        return " ".join(parts)


_VALUE_FLAGS = {"-P", "-a", "-L", "-p", "-i", "-o", "-M", "-S", "-x", "-l", "-c"}
_ENV_ASSIGNMENT = re.compile(r"^AFL_[A-Z0-9_]+=")


def parse_command(command: str, index: int = 0) -> FuzzerInvocation:
    """
    Recover the per-runner decisions from a generated command line.

    Target arguments are re-joined with single spaces after shell
    splitting, so quoting inside them is not preserved.

    Args:
        command: Command produced by FuzzerInvocation.to_command()
        index: Slot index to assign to the parsed record

    Returns:
        FuzzerInvocation carrying the parsed decisions

    Raises:
        ValueError: If the command does not have the generated shape
    """
    tokens = shlex.split(command)
    env_fields = {var: name for name, var in ENV_VARS.items()}

    env = RunnerConfig()
    pos = 0
    while pos < len(tokens) and _ENV_ASSIGNMENT.match(tokens[pos]):
        var, value = tokens[pos].split("=", 1)
        if var not in env_fields:
            raise ValueError(f"Unknown environment variable: {var}")
        setattr(env, env_fields[var], value == "1")
        pos += 1

    if pos >= len(tokens):
        raise ValueError("Command has no afl-fuzz binary")
    invocation = FuzzerInvocation(index=index, afl_binary=Path(tokens[pos]), env=env)
    pos += 1

    while pos < len(tokens) and tokens[pos] != "--":
        flag = tokens[pos]
        if flag == "-Z":
            invocation.sequential_queue = True
            pos += 1
            continue
        if flag not in _VALUE_FLAGS or pos + 1 >= len(tokens):
            raise ValueError(f"Unexpected token in command: {flag}")
        value = tokens[pos + 1]
        pos += 2

        if flag == "-P":
            invocation.mode = MutationMode(value)
        elif flag == "-a":
            invocation.input_format = InputFormat(value)
        elif flag == "-L":
            invocation.min_length = int(value)
        elif flag == "-p":
            invocation.power_schedule = PowerSchedule(value)
        elif flag == "-i":
            invocation.input_dir = Path(value)
        elif flag == "-o":
            invocation.output_dir = Path(value)
        elif flag in ("-M", "-S"):
            invocation.role = FuzzerRole(flag)
            invocation.name = value
        elif flag == "-x":
            invocation.dictionary = Path(value)
        elif flag == "-l":
            invocation.cmplog_level = CmplogLevel(value)
        elif flag == "-c":
            invocation.cmplog_binary = Path(value)

    if pos + 1 >= len(tokens):
        raise ValueError("Command has no target binary after '--'")
    invocation.binary = Path(tokens[pos + 1])
    rest = tokens[pos + 2:]
    invocation.target_args = " ".join(rest) if rest else None
    return invocation
