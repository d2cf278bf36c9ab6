"""Campaign synthesis for parallel AFL++ fuzzing."""

from aflfleet.fuzzing.config import (
    SCHEDULES,
    CmplogLevel,
    FuzzerInvocation,
    FuzzerRole,
    InputFormat,
    MutationMode,
    PowerSchedule,
    RunnerConfig,
    parse_command,
)
from aflfleet.fuzzing.distribution import (
    apply_args,
    apply_exclusive_args,
    apply_flags,
    sample_indices,
    share,
)
from aflfleet.fuzzing.campaign import Campaign
from aflfleet.fuzzing.tmux import TmuxSession

__all__ = [
    # Runner records
    "SCHEDULES",
    "CmplogLevel",
    "FuzzerInvocation",
    "FuzzerRole",
    "InputFormat",
    "MutationMode",
    "PowerSchedule",
    "RunnerConfig",
    "parse_command",
    # Distribution primitives
    "apply_args",
    "apply_exclusive_args",
    "apply_flags",
    "sample_indices",
    "share",
    # Campaign
    "Campaign",
    "TmuxSession",
]
