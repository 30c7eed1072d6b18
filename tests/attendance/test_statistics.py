from __future__ import annotations

from datetime import date

import pytest

from club_attendance.attendance import statistics
from club_attendance.attendance.model import AttendanceEntry, AttendanceRecord, SessionStatistics
from club_attendance.common.datetime_utils import lenient_date
from club_attendance.core.enums import AttendanceBand, TrendDirection
from club_attendance.core.exceptions import ValidationError


def make_record(present: int, total: int, day="2025-01-01", *, rid=None, reasons=None) -> AttendanceRecord:
    entries = {}
    for i in range(total):
        sid = f"s{i}"
        is_present = i < present
        reason = (reasons or {}).get(sid)
        entries[sid] = AttendanceEntry(student_id=sid, present=is_present, reason=reason, full_name=f"Student {i}")
    return AttendanceRecord(club_id="c1", date=lenient_date(day), entries=entries, record_id=rid)


def test_percentage_is_rounded_to_one_decimal():
    assert statistics.percentage(make_record(2, 3)) == 66.7
    assert statistics.percentage(make_record(1, 8)) == 12.5


def test_percentage_of_empty_record_is_zero():
    assert statistics.percentage(make_record(0, 0)) == 0


@pytest.mark.parametrize("present,total", [(0, 1), (1, 1), (3, 7), (19, 20)])
def test_percentage_stays_within_bounds(present, total):
    assert 0 <= statistics.percentage(make_record(present, total)) <= 100


def test_aggregate_of_nothing():
    assert statistics.aggregate([]) == SessionStatistics(
        total_sessions=0,
        present_total=0,
        possible_total=0,
        average_percentage=0,
        best_session=None,
        worst_session=None,
    )


def test_aggregate_ties_go_to_first_record():
    records = [
        make_record(4, 5, rid="r80"),
        make_record(19, 20, rid="r95a"),
        make_record(19, 20, rid="r95b"),
        make_record(3, 5, rid="r60"),
    ]

    stats = statistics.aggregate(records)

    assert stats.best_session.record_id == "r95a"
    assert stats.worst_session.record_id == "r60"
    assert stats.total_sessions == 4
    assert stats.present_total == 45
    assert stats.possible_total == 50
    assert stats.average_percentage == 90.0


def test_worst_tie_also_keeps_first():
    records = [make_record(1, 2, rid="x"), make_record(2, 4, rid="y")]

    stats = statistics.aggregate(records)

    assert stats.best_session.record_id == "x"
    assert stats.worst_session.record_id == "x"


@pytest.mark.parametrize(
    "value,expected",
    [
        (89.9, AttendanceBand.MEDIUM),
        (90.0, AttendanceBand.HIGH),
        (74.9, AttendanceBand.LOW),
        (75.0, AttendanceBand.MEDIUM),
        (100, AttendanceBand.HIGH),
        (0, AttendanceBand.LOW),
    ],
)
def test_band_boundaries(value, expected):
    assert statistics.band(value) == expected
    assert statistics.band(value).value == expected.value


def test_sort_most_recent_first_puts_undated_last():
    records = [
        make_record(1, 1, "2025-01-02", rid="b"),
        make_record(1, 1, "garbage", rid="bad"),
        make_record(1, 1, "05.01.2025", rid="c"),
        make_record(1, 1, "2024-12-30", rid="a"),
    ]

    ordered = statistics.sort_most_recent_first(records)

    assert [r.record_id for r in ordered] == ["c", "b", "a", "bad"]


def test_trend_compares_earlier_and_later_halves_chronologically():
    records = [
        make_record(9, 10, "2025-01-20"),
        make_record(5, 10, "2025-01-06"),
        make_record(7, 10, "2025-01-13"),
        make_record(1, 1, "not a date"),
    ]

    t = statistics.trend(records)

    assert t.earlier_average == 50.0
    assert t.later_average == 80.0
    assert t.delta == 30.0
    assert t.direction == TrendDirection.UP


def test_trend_needs_two_dated_sessions():
    t = statistics.trend([make_record(3, 4)])

    assert t.direction == TrendDirection.FLAT
    assert t.delta == 0.0


def test_group_by_week_and_month():
    records = [
        make_record(1, 2, "2025-01-06"),
        make_record(2, 2, "2025-01-08"),
        make_record(0, 2, "2025-02-03"),
        make_record(2, 2, "bad"),
    ]

    weeks = statistics.group_by_period(records, "week")
    months = statistics.group_by_period(records, "month")

    assert list(weeks) == ["2025-W02", "2025-W06"]
    assert weeks["2025-W02"].average_percentage == 75.0
    assert list(months) == ["2025-01", "2025-02"]
    assert months["2025-02"].average_percentage == 0.0


def test_group_by_unknown_period():
    with pytest.raises(ValidationError):
        statistics.group_by_period([], "year")


def test_student_summary_and_warnings():
    records = [make_record(1, 2, "2025-01-01"), make_record(1, 2, "2025-01-08"), make_record(2, 2, "2025-01-15")]

    s0 = statistics.student_summary(records, "s0")
    s1 = statistics.student_summary(records, "s1")

    assert (s0.total_classes, s0.present_count, s0.attendance_percentage) == (3, 3, 100.0)
    assert (s1.absent_count, s1.attendance_percentage, s1.band) == (2, 33.3, AttendanceBand.LOW)
    assert [w.student_id for w in statistics.low_attendance_warnings(records)] == ["s1"]
    assert statistics.student_summary(records, "nobody").total_classes == 0


def test_absent_reasons_ignore_present_entries():
    records = [
        make_record(1, 3, reasons={"s0": "stale", "s1": "Kasal", "s2": "Kasal"}),
        make_record(1, 2, reasons={"s1": "Oilaviy"}),
    ]

    counts = statistics.absent_reasons(records)

    assert counts == {"Kasal": 2, "Oilaviy": 1}
    assert statistics.absent_reasons(records, "s1") == {"Kasal": 1, "Oilaviy": 1}


def test_backend_statistics_override_client_values():
    client = statistics.aggregate([make_record(1, 2, rid="only")])

    resolved = statistics.resolve_statistics(client, {"averageAttendance": "62.5", "totalSessions": 3})

    assert resolved.average_percentage == 62.5
    assert resolved.total_sessions == 3
    assert resolved.present_total == 1
    assert resolved.best_session.record_id == "only"
    assert statistics.resolve_statistics(client, None) is client


@pytest.mark.parametrize("bad", ["n/a", "", [], "nan", "inf"])
def test_non_numeric_backend_statistics_keep_client_value(bad):
    client = statistics.aggregate([make_record(1, 2, rid="only")])

    resolved = statistics.resolve_statistics(client, {"averageAttendance": bad, "presentTotal": "x", "totalSessions": 3})

    assert resolved.average_percentage == client.average_percentage
    assert resolved.present_total == client.present_total
    assert resolved.total_sessions == 3
