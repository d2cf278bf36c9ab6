"""
Aggregate statistics of a running campaign.

These records are filled by whatever reads the per-runner fuzzer_stats
files; the campaign synthesis never touches them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

MAX_RECENT_SOLUTIONS = 10


@dataclass
class CrashInfoDetails:
    """A single crash or hang found by one runner."""
    fuzzer_name: str = ""
    file_path: Path = field(default_factory=Path)
    id: str = ""
    sig: Optional[str] = None
    src: str = ""
    time: int = 0
    execs: int = 0
    op: str = ""
    rep: int = 0

    @classmethod
    def from_filename(cls, fuzzer_name: str, path: Path) -> "CrashInfoDetails":
        """
        Parse afl-fuzz solution file names.

        Names look like ``id:000000,sig:11,src:000002,time:1234,execs:5678,op:havoc,rep:4``.
        Unknown keys are ignored.
        """
        info = cls(fuzzer_name=fuzzer_name, file_path=Path(path))
        for part in Path(path).name.split(","):
            key, sep, value = part.partition(":")
            if not sep:
                continue
            if key == "id":
                info.id = value
            elif key == "sig":
                info.sig = value
            elif key == "src":
                info.src = value
            elif key == "time":
                info.time = int(value)
            elif key == "execs":
                info.execs = int(value)
            elif key == "op":
                info.op = value
            elif key == "rep":
                info.rep = int(value)
        return info


@dataclass
class ExecutionsInfo:
    avg: int = 0
    min: int = 0
    max: int = 0
    cum: int = 0
    ps_avg: float = 0.0
    ps_min: float = 0.0
    ps_max: float = 0.0
    ps_cum: float = 0.0


@dataclass
class PendingInfo:
    favorites_avg: int = 0
    favorites_cum: int = 0
    favorites_max: int = 0
    favorites_min: int = 0
    total_avg: int = 0
    total_cum: int = 0
    total_min: int = 0
    total_max: int = 0


@dataclass
class CorpusInfo:
    avg: int = 0
    cum: int = 0
    min: int = 0
    max: int = 0


@dataclass
class CoverageInfo:
    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0


@dataclass
class Cycles:
    done_avg: int = 0
    done_min: int = 0
    done_max: int = 0
    wo_finds_avg: int = 0
    wo_finds_min: int = 0
    wo_finds_max: int = 0


@dataclass
class StabilityInfo:
    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0


@dataclass
class Solutions:
    """Crash or hang counts across runners."""
    cum: int = 0
    avg: int = 0
    min: int = 0
    max: int = 0


@dataclass
class Levels:
    avg: int = 0
    min: int = 0
    max: int = 0


@dataclass
class Misc:
    afl_version: str = ""
    afl_banner: str = ""


@dataclass
class CampaignStatistics:
    """Snapshot of a whole campaign."""
    fuzzers_alive: int = 0
    total_run_time: float = 0.0  # seconds
    executions: ExecutionsInfo = field(default_factory=ExecutionsInfo)
    pending: PendingInfo = field(default_factory=PendingInfo)
    corpus: CorpusInfo = field(default_factory=CorpusInfo)
    coverage: CoverageInfo = field(default_factory=CoverageInfo)
    cycles: Cycles = field(default_factory=Cycles)
    stability: StabilityInfo = field(default_factory=StabilityInfo)
    crashes: Solutions = field(default_factory=Solutions)
    hangs: Solutions = field(default_factory=Solutions)
    levels: Levels = field(default_factory=Levels)
    time_without_finds: float = 0.0  # seconds
    last_crashes: List[CrashInfoDetails] = field(default_factory=list)
    last_hangs: List[CrashInfoDetails] = field(default_factory=list)
    misc: Misc = field(default_factory=Misc)

    def record_crash(self, crash: CrashInfoDetails) -> None:
        """Remember a crash, keeping only the most recent ones."""
        self._record(self.last_crashes, crash)

    def record_hang(self, hang: CrashInfoDetails) -> None:
        """Remember a hang, keeping only the most recent ones."""
        self._record(self.last_hangs, hang)

    @staticmethod
    def _record(entries: List[CrashInfoDetails], entry: CrashInfoDetails) -> None:
        entries.append(entry)
        if len(entries) > MAX_RECENT_SOLUTIONS:
            del entries[:len(entries) - MAX_RECENT_SOLUTIONS]

