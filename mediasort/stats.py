"""
Per-file outcomes and run summary aggregation.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable


class Outcome(Enum):
    """Tagged result of processing one source file."""
    RENAMED = "renamed"
    PLACED_UNCATEGORIZED = "placed_uncategorized"
    SKIPPED_EXISTING_IDENTICAL = "skipped_existing_identical"
    SKIPPED_EXISTING_TARGET = "skipped_existing_target"
    SKIPPED_NO_TIMESTAMP = "skipped_no_timestamp"
    SKIPPED_IGNORED = "skipped_ignored"
    FAILED = "failed"

    @property
    def label(self) -> str:
        return OUTCOME_LABELS[self]


OUTCOME_LABELS = {
    Outcome.RENAMED: "Renamed",
    Outcome.PLACED_UNCATEGORIZED: "Placed in uncategorized",
    Outcome.SKIPPED_EXISTING_IDENTICAL: "Skipped (identical target exists)",
    Outcome.SKIPPED_EXISTING_TARGET: "Skipped (existing target)",
    Outcome.SKIPPED_NO_TIMESTAMP: "Skipped (no DateTimeOriginal)",
    Outcome.SKIPPED_IGNORED: "Skipped (ignored timestamp)",
    Outcome.FAILED: "Failed",
}


@dataclass
class RunSummary:
    """Counts of outcomes and bytes placed over a run."""
    counts: Counter = field(default_factory=Counter)
    total_size: int = 0

    @classmethod
    def fold(cls, outcomes: Iterable[Outcome]) -> "RunSummary":
        summary = cls()
        for outcome in outcomes:
            summary.record(outcome)
        return summary

    def record(self, outcome: Outcome, size: int = 0) -> None:
        """Count one outcome; size only counts for placed files."""
        self.counts[outcome] += 1
        if outcome in (Outcome.RENAMED, Outcome.PLACED_UNCATEGORIZED):
            self.total_size += size

    def merge(self, other: "RunSummary") -> "RunSummary":
        return RunSummary(counts=self.counts + other.counts,
                          total_size=self.total_size + other.total_size)

    def get(self, outcome: Outcome) -> int:
        return self.counts[outcome]

    def as_dict(self) -> Dict[str, int]:
        return {outcome.value: self.counts[outcome] for outcome in Outcome}

    @property
    def total_files(self) -> int:
        return sum(self.counts.values())

    @property
    def placed(self) -> int:
        return self.get(Outcome.RENAMED) + self.get(Outcome.PLACED_UNCATEGORIZED)

    @property
    def total_size_mb(self) -> float:
        return self.total_size / (1024 * 1024)

    def has_errors(self) -> bool:
        return self.get(Outcome.FAILED) > 0
