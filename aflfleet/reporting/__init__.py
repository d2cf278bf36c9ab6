"""Campaign statistics data model."""

from aflfleet.reporting.stats import (
    CampaignStatistics,
    CorpusInfo,
    CoverageInfo,
    CrashInfoDetails,
    Cycles,
    ExecutionsInfo,
    Levels,
    Misc,
    PendingInfo,
    Solutions,
    StabilityInfo,
)

__all__ = [
    "CampaignStatistics",
    "CorpusInfo",
    "CoverageInfo",
    "CrashInfoDetails",
    "Cycles",
    "ExecutionsInfo",
    "Levels",
    "Misc",
    "PendingInfo",
    "Solutions",
    "StabilityInfo",
]
