"""
AFLFleet - Parallel AFL++ Campaign Generator

Synthesizes the afl-fuzz command lines for a diversified parallel
fuzzing campaign from a single instrumented target.

Key Features:
- One main fuzzer and N-1 secondaries with distinct strategy mixes
- Randomized environment toggles, mutation modes and input format hints
- Power schedule rotation across runners
- Sanitizer build on the main fuzzer, cmplog builds on a share of secondaries
- Seedable randomness for reproducible campaigns
- Optional tmux session with one window per runner
"""

__version__ = "1.0.0"
__author__ = "AFLFleet Team"

from aflfleet.core.harness import Harness
from aflfleet.core.resolver import find_afl_fuzz, resolve_file
from aflfleet.fuzzing.campaign import Campaign
from aflfleet.fuzzing.config import FuzzerInvocation, RunnerConfig, parse_command
from aflfleet.fuzzing.tmux import TmuxSession
from aflfleet.reporting.stats import CampaignStatistics

__all__ = [
    # Core
    "Harness",
    "find_afl_fuzz",
    "resolve_file",
    # Campaign
    "Campaign",
    "FuzzerInvocation",
    "RunnerConfig",
    "parse_command",
    "TmuxSession",
    # Reporting
    "CampaignStatistics",
    # Version
    "__version__",
]
