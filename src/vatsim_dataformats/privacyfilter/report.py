"""
Reporting for privacy filter runs.

Every DataFileFilter run records how many lines were processed and
changed, and every verification failure together with the strategy
that handled it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


class IssueCodes:
    """Standard codes for verification failures."""

    UNWANTED_MODIFICATION = "unwanted_modification"
    INCOMPLETE_FILTERING = "incomplete_filtering"
    UNSTABLE_RESULT = "unstable_result"
    UNPARSEABLE_ORIGINAL = "unparseable_original"
    UNPARSEABLE_RESULT = "unparseable_result"


@dataclass
class FilterIssue:
    """Represents a single verification failure."""

    error_code: str
    message: str
    section: Optional[str] = None
    filter_name: Optional[str] = None
    fields: tuple[str, ...] = ()
    strategy: Optional[str] = None
    line_content: Optional[str] = None


@dataclass
class FilterReport:
    """Report for a single filter run."""

    start_time: datetime
    end_time: Optional[datetime] = None
    format_version: Optional[int] = None
    filters: list[str] = field(default_factory=list)
    lines_processed: int = 0
    lines_modified: int = 0
    lines_removed: int = 0
    lines_restored: int = 0
    issues: list[FilterIssue] = field(default_factory=list)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

    def issues_by_code(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for issue in self.issues:
            counts[issue.error_code] = counts.get(issue.error_code, 0) + 1
        return counts

    def to_dict(self) -> dict:
        """Convert report to dictionary."""
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "format_version": self.format_version,
            "filters": list(self.filters),
            "lines_processed": self.lines_processed,
            "lines_modified": self.lines_modified,
            "lines_removed": self.lines_removed,
            "lines_restored": self.lines_restored,
            "issue_count": len(self.issues),
            "issues_by_code": self.issues_by_code(),
            "duration_seconds": self.duration_seconds,
        }
