from __future__ import annotations

import io
from datetime import date

import pandas as pd

from club_attendance.attendance.model import AttendanceEntry, AttendanceRecord
from club_attendance.common.datetime_utils import lenient_date
from club_attendance.reports.service import AttendanceReportService


class FakeHistoryRepo:
    def __init__(self, rows):
        self._rows = rows
        self.last_args = None

    def fetch_history(self, club_id, date_range):
        self.last_args = {"club_id": club_id, "date_range": date_range}
        return self._rows


def _record(day, flags, **kwargs):
    entries = {
        sid: AttendanceEntry(student_id=sid, present=p, full_name=name)
        for sid, name, p in flags
    }
    return AttendanceRecord(club_id="c1", date=lenient_date(day), entries=entries, **kwargs)


ROWS = [
    _record("2025-01-06", [("s1", "Aliyev Jasur", True), ("s2", "Karimova Dilnoza", False)]),
    _record("2025-01-13", [("s1", "Aliyev Jasur", True), ("s2", "Karimova Dilnoza", True)], notes="Dars 2", external_link="https://t.me/a/2"),
]


def test_report_rows_newest_first_with_band():
    repo = FakeHistoryRepo(ROWS)
    report = AttendanceReportService(repo).build_history_report(club_id="c1", start=date(2025, 1, 1), end=date(2025, 1, 31))

    assert [r["date"] for r in report.rows] == ["13.01.2025", "06.01.2025"]
    assert report.rows[0]["percentage"] == 100.0
    assert report.rows[0]["band"] == "high"
    assert report.rows[1]["band"] == "low"
    assert report.rows[0]["external_link"] == "https://t.me/a/2"
    assert repo.last_args == {"club_id": "c1", "date_range": (date(2025, 1, 1), date(2025, 1, 31))}


def test_report_summary_sorted_by_percentage():
    report = AttendanceReportService(FakeHistoryRepo(ROWS)).build_history_report(
        club_id="c1", start=date(2025, 1, 1), end=date(2025, 1, 31)
    )

    assert [s["student"] for s in report.summary] == ["Aliyev Jasur", "Karimova Dilnoza"]
    assert report.summary[1]["percentage"] == 50.0


def test_export_excel_has_both_sheets():
    svc = AttendanceReportService(FakeHistoryRepo(ROWS))
    report = svc.build_history_report(club_id="c1", start=date(2025, 1, 1), end=date(2025, 1, 31))

    data = svc.export_excel(report)
    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None)

    assert set(sheets) == {"Davomat", "Studentlar"}
    assert len(sheets["Davomat"]) == 2
    assert list(sheets["Studentlar"].columns)[0] == "Student"


def test_empty_history_still_exports():
    svc = AttendanceReportService(FakeHistoryRepo([]))
    report = svc.build_history_report(club_id="c1", start=date(2025, 1, 1), end=date(2025, 1, 31))

    assert report.rows == []
    assert svc.export_excel(report)
