"""
Timeline Reconciliation

Turns a candidate's real work history into a gap-free timeline that satisfies a
job's minimum experience requirement. Real entries are never altered; gaps and
shortfalls are covered by synthesized segments that content generation then
fills in.

Rules, in order:
- No history: cover the required years (at least one) up to now in chunks of
  at most two years.
- Between jobs: an uncovered stretch of six months or more gets a filler.
- After the last job: same rule up to the current month.
- Before the first job: if first start -> now is still shorter than required,
  extend backwards, never before the floor date.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple, Union

from quire.contexts.timeline.data_structures import (
    EducationEntry,
    SegmentOrigin,
    SynthesisReason,
    TimelineResult,
    TimelineSegment,
    WorkEntry,
)
from quire.contexts.timeline.dates import (
    PRESENT,
    YearMonth,
    is_present,
    whole_months_between,
    years_between,
)
from quire.contexts.timeline.logger import (
    _log_warning,
    log_filler_added,
    log_prepend_check,
    log_timeline_summary,
)
from quire.contexts.timeline.requirement import (
    ExperienceRequirement,
    parse_experience_requirement,
)

GAP_THRESHOLD_MONTHS = 6
FALLBACK_FLOOR_DATE = "2000-01"
ADULT_AGE = 18
SENIORITY_OFFSET_YEARS = 4
MAX_CHUNK_MONTHS = 24
SPAN_TOLERANCE_YEARS = 0.05


@dataclass(frozen=True)
class _ParsedEntry:
    index: int
    entry: WorkEntry
    start: YearMonth
    end: YearMonth


def compute_floor_date(
    education_entries: Sequence[EducationEntry],
    birthday: Optional[str] = None,
    fallback: str = FALLBACK_FLOOR_DATE,
) -> YearMonth:
    """
    Earliest month a synthesized segment may start.

    Earliest education start, else January of the year the candidate turned
    18, else the fallback constant.
    """
    starts = [YearMonth.parse(edu.start_date) for edu in education_entries]
    starts = [start for start in starts if start is not None]
    if starts:
        return min(starts)

    born = YearMonth.parse(birthday) if birthday else None
    if born is not None:
        return YearMonth(born.year + ADULT_AGE, 1)

    return YearMonth.parse(fallback) or YearMonth(2000, 1)


def compute_seniority_threshold(education_entries: Sequence[EducationEntry]) -> Optional[str]:
    """First completed degree's end date plus four years, or None without one."""
    ordered = sorted(
        education_entries,
        key=lambda edu: YearMonth.parse(edu.start_date) or YearMonth(9999, 12),
    )
    for edu in ordered:
        if not edu.end_date or is_present(edu.end_date):
            continue
        graduated = YearMonth.parse(edu.end_date, default_month=6)
        if graduated is not None:
            return str(graduated.shift(SENIORITY_OFFSET_YEARS * 12))
    return None


def _segment(
    start: YearMonth,
    end: YearMonth,
    now: YearMonth,
    reason: SynthesisReason,
) -> TimelineSegment:
    """Synthesized segment; one that reaches the current month ends "present"."""
    return TimelineSegment(
        start_date=str(start),
        end_date=PRESENT if end >= now else str(end),
        years=years_between(start, end),
        origin=SegmentOrigin.SYNTHESIZED,
        reason=reason,
    )


def _synthesize_without_history(
    requirement: ExperienceRequirement, floor: YearMonth, now: YearMonth
) -> List[TimelineSegment]:
    """Cover the required years (one if unspecified) ending now, in chunks of at most two years."""
    target_years = requirement.minimum if requirement.minimum > 0 else 1
    cursor = max(now.shift(-math.ceil(round(target_years * 12, 6))), floor)

    segments = []
    while cursor < now:
        end = min(cursor.shift(MAX_CHUNK_MONTHS - 1), now)
        segment = _segment(cursor, end, now, SynthesisReason.NO_HISTORY)
        if segment.years > 0:
            segments.append(segment)
            log_filler_added("no history", segment.start_date, segment.end_date, segment.years)
        cursor = end.shift(1)

    return segments


def _parse_entries(
    work_entries: Sequence[WorkEntry], today: Optional[date]
) -> Tuple[List[_ParsedEntry], List[int]]:
    """Split entries into those with usable dates (sorted by start) and indices of the rest."""
    parsed = []
    unparsed = []

    for index, entry in enumerate(work_entries):
        start = YearMonth.parse(entry.start_date, today)
        if start is None:
            _log_warning(
                f"Work entry #{index} ({entry.company}) has unusable start date "
                f"'{entry.start_date}'; kept as-is but ignored for gap arithmetic"
            )
            unparsed.append(index)
            continue

        end = YearMonth.parse(entry.end_date, today)
        if end is None:
            _log_warning(
                f"Work entry #{index} ({entry.company}) has unusable end date "
                f"'{entry.end_date}'; treating it as ending in its start month"
            )
            end = start

        parsed.append(_ParsedEntry(index=index, entry=entry, start=start, end=max(start, end)))

    parsed.sort(key=lambda item: item.start)
    return parsed, unparsed


def _fill_gaps(
    parsed: List[_ParsedEntry], now: YearMonth, threshold_months: int
) -> Tuple[List[TimelineSegment], YearMonth]:
    """
    Fillers between jobs and after the last one.

    Returns the fillers and the last month covered by real history. Overlapping
    jobs are handled by tracking the furthest end seen so far, so a long job
    that encloses a shorter one still counts as covering the stretch after it.
    """
    fillers = []
    covered_until = parsed[0].end

    for item in parsed[1:]:
        gap_start = covered_until.shift(1)
        gap_months = whole_months_between(gap_start, item.start)
        if gap_months >= threshold_months:
            segment = _segment(gap_start, item.start.shift(-1), now, SynthesisReason.GAP)
            fillers.append(segment)
            log_filler_added(
                "gap",
                segment.start_date,
                segment.end_date,
                segment.years,
                gap_months=gap_months,
                next_job=item.entry.company,
            )
        covered_until = max(covered_until, item.end)

    trailing_start = covered_until.shift(1)
    trailing_months = whole_months_between(trailing_start, now)
    if trailing_months >= threshold_months:
        segment = _segment(trailing_start, now, now, SynthesisReason.TRAILING)
        fillers.append(segment)
        log_filler_added(
            "trailing", segment.start_date, segment.end_date, segment.years, gap_months=trailing_months
        )

    return fillers, covered_until


def _prepend(
    first_start: YearMonth,
    requirement: ExperienceRequirement,
    floor: YearMonth,
    now: YearMonth,
) -> Optional[TimelineSegment]:
    """Segment before the first job covering the shortfall, or None if not needed or not possible."""
    span_years = years_between(first_start, now)
    will_prepend = requirement.minimum > 0 and span_years + SPAN_TOLERANCE_YEARS < requirement.minimum
    log_prepend_check(requirement.minimum, str(first_start), span_years, will_prepend)
    if not will_prepend:
        return None

    shortfall_months = math.ceil(round((requirement.minimum - span_years) * 12, 6))
    start = max(first_start.shift(-shortfall_months), floor)
    end = first_start.shift(-1)

    if not start < end:
        _log_warning(
            f"Prepend skipped: floor date {floor} leaves no room before first job ({first_start})"
        )
        return None

    segment = _segment(start, end, now, SynthesisReason.PREPEND)
    log_filler_added(
        "prepend", segment.start_date, segment.end_date, segment.years, shortfall_months=shortfall_months
    )
    return segment


def _segment_sort_key(segment: TimelineSegment) -> YearMonth:
    # Unparseable starts sort as oldest
    return YearMonth.parse(segment.start_date) or YearMonth(0, 1)


def reconcile_timeline(
    work_entries: Sequence[WorkEntry],
    education_entries: Sequence[EducationEntry] = (),
    requirement: Union[str, ExperienceRequirement, None] = None,
    birthday: Optional[str] = None,
    today: Optional[date] = None,
    gap_threshold_months: int = GAP_THRESHOLD_MONTHS,
    fallback_floor_date: str = FALLBACK_FLOOR_DATE,
) -> TimelineResult:
    """
    Build the canonical timeline handed to content generation.

    Never raises for malformed data: bad dates and requirements fall back to
    permissive defaults.

    Args:
        work_entries: Real jobs, any order
        education_entries: Degrees (for the floor date and seniority threshold)
        requirement: Free-text requirement ("3-5 years") or an already parsed one
        birthday: "YYYY-MM-DD" (used only when there is no education)
        today: Reference date (default: resolved at call time)
        gap_threshold_months: Minimum uncovered stretch that gets a filler
        fallback_floor_date: Floor when neither education nor birthday is known

    Returns:
        TimelineResult with segments sorted newest first

    Example:
        >>> result = reconcile_timeline(
        ...     [WorkEntry("Acme", "Engineer", "2021-03", "present")],
        ...     requirement="10+ years",
        ... )
        >>> [s.reason for s in result.segments]
        [None, <SynthesisReason.PREPEND: 'prepend'>]
    """
    now = YearMonth.current(today)
    if not isinstance(requirement, ExperienceRequirement):
        requirement = parse_experience_requirement(requirement)

    floor = compute_floor_date(education_entries, birthday, fallback_floor_date)
    seniority_threshold = compute_seniority_threshold(education_entries)

    parsed, unparsed = _parse_entries(work_entries, today)

    synthesized: List[TimelineSegment] = []
    actual_years = 0.0

    if not parsed:
        synthesized = _synthesize_without_history(requirement, floor, now)
    else:
        fillers, covered_until = _fill_gaps(parsed, now, gap_threshold_months)
        synthesized.extend(fillers)

        prepended = _prepend(parsed[0].start, requirement, floor, now)
        if prepended is not None:
            synthesized.append(prepended)

        actual_years = years_between(parsed[0].start, covered_until)

    existing = [
        TimelineSegment(
            start_date=item.entry.start_date,
            end_date=item.entry.end_date,
            years=years_between(item.start, item.end),
            origin=SegmentOrigin.EXISTING,
            index=item.index,
        )
        for item in parsed
    ]
    existing.extend(
        TimelineSegment(
            start_date=work_entries[index].start_date,
            end_date=work_entries[index].end_date,
            years=0.0,
            origin=SegmentOrigin.EXISTING,
            index=index,
        )
        for index in unparsed
    )

    segments = sorted(existing + synthesized, key=_segment_sort_key, reverse=True)

    starts = [YearMonth.parse(segment.start_date, today) for segment in segments]
    starts = [start for start in starts if start is not None]
    final_total_years = years_between(min(starts), now) if starts else 0.0

    result = TimelineResult(
        segments=segments,
        requirement=requirement,
        actual_years=actual_years,
        total_months=math.floor(actual_years * 12),
        supplement_years=round(sum(segment.years for segment in synthesized), 1),
        final_total_years=final_total_years,
        floor_date=str(floor),
        seniority_threshold_date=seniority_threshold,
    )
    log_timeline_summary(result)

    return result
