"""
Timeline data structures.

Input records (work and education entries) and the reconciled output
(segments and the TimelineResult summary).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from quire.contexts.timeline.dates import PRESENT
from quire.contexts.timeline.requirement import ExperienceRequirement


@dataclass(frozen=True)
class WorkEntry:
    """
    One job from the candidate's real history.

    Attributes:
        company: Employer name
        title: Job title
        start_date: "YYYY-MM"
        end_date: "YYYY-MM" or a present sentinel
    """

    company: str = ""
    title: str = ""
    start_date: str = ""
    end_date: str = PRESENT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkEntry":
        """Build from a mapping, accepting both snake_case and camelCase date keys."""
        return cls(
            company=str(data.get("company") or ""),
            title=str(data.get("title") or data.get("position") or ""),
            start_date=str(data.get("start_date") or data.get("startDate") or ""),
            end_date=str(data.get("end_date") or data.get("endDate") or PRESENT),
        )


@dataclass(frozen=True)
class EducationEntry:
    """A degree or program. Only the dates matter for the timeline."""

    start_date: str = ""
    end_date: str = ""
    school: str = ""
    degree: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EducationEntry":
        return cls(
            start_date=str(data.get("start_date") or data.get("startDate") or ""),
            end_date=str(data.get("end_date") or data.get("endDate") or ""),
            school=str(data.get("school") or ""),
            degree=str(data.get("degree") or ""),
        )


class SegmentOrigin(str, Enum):
    """Where a timeline segment came from."""

    EXISTING = "existing"
    SYNTHESIZED = "synthesized"


class SynthesisReason(str, Enum):
    """Why a synthesized segment was needed."""

    NO_HISTORY = "no_history"
    GAP = "gap"
    TRAILING = "trailing"
    PREPEND = "prepend"


@dataclass(frozen=True)
class TimelineSegment:
    """
    One contiguous period of (real or synthesized) employment.

    Attributes:
        start_date: "YYYY-MM"
        end_date: "YYYY-MM" or "present"
        years: Duration in years, one decimal
        origin: EXISTING or SYNTHESIZED
        index: Position of the source entry in the caller's work list (EXISTING only)
        reason: Why the segment was synthesized (SYNTHESIZED only)
    """

    start_date: str
    end_date: str
    years: float
    origin: SegmentOrigin
    index: Optional[int] = None
    reason: Optional[SynthesisReason] = None

    @property
    def is_synthesized(self) -> bool:
        return self.origin is SegmentOrigin.SYNTHESIZED

    def __str__(self) -> str:
        source = f"existing #{self.index}" if not self.is_synthesized else f"synthesized ({self.reason.value})"
        return f"{self.start_date} -> {self.end_date} ({self.years}y, {source})"


@dataclass(frozen=True)
class TimelineResult:
    """
    Reconciled timeline plus the experience figures derived while building it.

    Attributes:
        segments: All segments, newest first
        requirement: Parsed experience requirement
        actual_years: Real history span (first start -> latest end)
        total_months: Real history span in whole months
        supplement_years: Sum of synthesized segment years
        final_total_years: Earliest segment start -> now
        floor_date: Earliest date a synthesized segment may start
        seniority_threshold_date: Senior/management titles should not predate this
    """

    segments: List[TimelineSegment] = field(default_factory=list)
    requirement: ExperienceRequirement = field(default_factory=ExperienceRequirement)
    actual_years: float = 0.0
    total_months: int = 0
    supplement_years: float = 0.0
    final_total_years: float = 0.0
    floor_date: str = ""
    seniority_threshold_date: Optional[str] = None

    @property
    def needs_supplement(self) -> bool:
        return any(segment.is_synthesized for segment in self.segments)

    @property
    def supplement_segments(self) -> List[TimelineSegment]:
        return [segment for segment in self.segments if segment.is_synthesized]

    @property
    def actual_experience_text(self) -> str:
        return f"{self.actual_years:g} years"
