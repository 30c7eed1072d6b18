"""Pure aggregation over attendance records.

Nothing here mutates its inputs or talks to the backend, so the functions are
safe to call from anywhere the records are available.
"""

from __future__ import annotations

import logging
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..core.constants import DEFAULT_WARNING_THRESHOLD, HIGH_BAND_MIN, MEDIUM_BAND_MIN
from ..core.enums import AttendanceBand, Period, TrendDirection
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, AttendanceTrend, SessionStatistics, StudentAttendanceSummary

logger = logging.getLogger(__name__)


def round1(value: float) -> float:
    """Round half-up to one decimal (12.25 -> 12.3, unlike round())."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _ratio(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round1(part / whole * 100)


def present_count(record: AttendanceRecord) -> int:
    return sum(1 for e in record.entries.values() if e.present)


def percentage(record: AttendanceRecord) -> float:
    return _ratio(present_count(record), record.total)


def band(value: float) -> AttendanceBand:
    value = float(value)
    if value >= HIGH_BAND_MIN:
        return AttendanceBand.HIGH
    if value >= MEDIUM_BAND_MIN:
        return AttendanceBand.MEDIUM
    return AttendanceBand.LOW


def aggregate(records: Sequence[AttendanceRecord]) -> SessionStatistics:
    """Totals plus best/worst session.

    Best and worst use strict comparisons during a single scan, so among equal
    percentages the first record in input order is reported.
    """
    if not records:
        return SessionStatistics()

    present_total = 0
    possible_total = 0
    best = worst = None
    best_pct = worst_pct = 0.0

    for r in records:
        present_total += present_count(r)
        possible_total += r.total
        pct = percentage(r)
        if best is None or pct > best_pct:
            best, best_pct = r, pct
        if worst is None or pct < worst_pct:
            worst, worst_pct = r, pct

    return SessionStatistics(
        total_sessions=len(records),
        present_total=present_total,
        possible_total=possible_total,
        average_percentage=_ratio(present_total, possible_total),
        best_session=best,
        worst_session=worst,
    )


def dated(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    return [r for r in records if r.date.is_dated]


def sort_most_recent_first(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    """Newest first; records without a usable date follow in input order."""
    records = list(records)
    with_date = sorted(dated(records), key=lambda r: r.date.parsed, reverse=True)
    without_date = [r for r in records if not r.date.is_dated]
    return with_date + without_date


def trend(records: Sequence[AttendanceRecord]) -> AttendanceTrend:
    ordered = sorted(dated(records), key=lambda r: r.date.parsed)
    if len(ordered) < 2:
        only = percentage(ordered[0]) if ordered else 0.0
        return AttendanceTrend(direction=TrendDirection.FLAT, delta=0.0, earlier_average=only, later_average=only)

    half = len(ordered) // 2
    earlier, later = ordered[:half], ordered[half:]
    earlier_avg = round1(sum(percentage(r) for r in earlier) / len(earlier))
    later_avg = round1(sum(percentage(r) for r in later) / len(later))
    delta = round1(later_avg - earlier_avg)

    if delta > 0:
        direction = TrendDirection.UP
    elif delta < 0:
        direction = TrendDirection.DOWN
    else:
        direction = TrendDirection.FLAT
    return AttendanceTrend(direction=direction, delta=delta, earlier_average=earlier_avg, later_average=later_avg)


def _period_key(r: AttendanceRecord, period: Period) -> str:
    d = r.date.parsed
    if period == Period.DAY:
        return d.isoformat()
    if period == Period.WEEK:
        year, week, _ = d.isocalendar()
        return f"{year}-W{week:02d}"
    return f"{d.year}-{d.month:02d}"


def group_by_period(records: Sequence[AttendanceRecord], period: str = "day") -> dict[str, SessionStatistics]:
    try:
        period = Period(period)
    except ValueError:
        raise ValidationError(f"Unknown period {period!r} (day, week or month)")

    groups: dict[str, list[AttendanceRecord]] = {}
    for r in sorted(dated(records), key=lambda r: r.date.parsed):
        groups.setdefault(_period_key(r, period), []).append(r)
    return {key: aggregate(items) for key, items in groups.items()}


def student_summaries(records: Sequence[AttendanceRecord]) -> list[StudentAttendanceSummary]:
    """One summary per student, in order of first appearance."""
    totals: dict[str, list] = {}
    for r in records:
        for e in r.entries.values():
            row = totals.get(e.student_id)
            if row is None:
                row = [e.full_name, 0, 0]
                totals[e.student_id] = row
            if row[0] is None:
                row[0] = e.full_name
            row[1] += 1
            if e.present:
                row[2] += 1

    out = []
    for student_id, (full_name, total, present) in totals.items():
        pct = _ratio(present, total)
        out.append(
            StudentAttendanceSummary(
                student_id=student_id,
                full_name=full_name,
                total_classes=total,
                present_count=present,
                absent_count=total - present,
                attendance_percentage=pct,
                band=band(pct),
            )
        )
    return out


def student_summary(records: Sequence[AttendanceRecord], student_id: str) -> StudentAttendanceSummary:
    student_id = str(student_id)
    for s in student_summaries(records):
        if s.student_id == student_id:
            return s
    return StudentAttendanceSummary(
        student_id=student_id,
        full_name=None,
        total_classes=0,
        present_count=0,
        absent_count=0,
        attendance_percentage=0.0,
        band=band(0.0),
    )


def absent_reasons(records: Sequence[AttendanceRecord], student_id: Optional[str] = None) -> Counter:
    """Count absence reasons; reasons left on present entries are ignored."""
    counts: Counter = Counter()
    for r in records:
        for e in r.entries.values():
            if student_id is not None and e.student_id != str(student_id):
                continue
            reason = e.absence_reason
            if reason:
                counts[reason] += 1
    return counts


def low_attendance_warnings(
    records: Sequence[AttendanceRecord], threshold: float = DEFAULT_WARNING_THRESHOLD
) -> list[StudentAttendanceSummary]:
    low = [s for s in student_summaries(records) if s.attendance_percentage < float(threshold)]
    low.sort(key=lambda s: s.attendance_percentage)
    return low


_SERVER_FIELDS = {
    "total_sessions": ("totalSessions",),
    "present_total": ("presentTotal",),
    "possible_total": ("possibleTotal",),
    "average_percentage": ("averagePercentage", "averageAttendance"),
}


def _as_number(name: str, value: Any) -> Optional[float]:
    try:
        number = round1(float(value)) if name == "average_percentage" else int(value)
    except (TypeError, ValueError, ArithmeticError):
        return None
    # NaN survives the float and quantize steps
    if number != number:
        return None
    return number


def resolve_statistics(client: SessionStatistics, server: Optional[Mapping[str, Any]]) -> SessionStatistics:
    """Combine client-computed statistics with the backend's.

    Backend values win for every field they carry; best and worst session are
    always taken from the client computation.
    """
    if not server:
        return client

    values = {}
    for name, keys in _SERVER_FIELDS.items():
        local = getattr(client, name)
        remote = next((server[k] for k in keys if server.get(k) is not None), None)
        if remote is None:
            values[name] = local
            continue
        number = _as_number(name, remote)
        if number is None:
            logger.warning("Backend %s=%r is not a number; keeping client value %s", name, remote, local)
            values[name] = local
            continue
        if number != local:
            logger.warning("Backend %s=%s disagrees with client value %s; using backend", name, number, local)
        values[name] = number

    return SessionStatistics(
        best_session=client.best_session,
        worst_session=client.worst_session,
        **values,
    )
