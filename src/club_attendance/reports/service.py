from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import date

import pandas as pd

from ..attendance import statistics
from ..attendance.repository import HistoryProvider

SESSION_COLUMNS = ["Sana", "Kelgan", "Kelmagan", "Davomat %", "Daraja", "Izoh", "Post"]
SUMMARY_COLUMNS = ["Student", "Darslar", "Kelgan", "Kelmagan", "Davomat %", "Daraja"]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class AttendanceReportService:
    def __init__(self, history: HistoryProvider):
        self._history = history

    def build_history_report(self, *, club_id: str, start: date, end: date) -> ReportData:
        records = statistics.sort_most_recent_first(self._history.fetch_history(club_id, (start, end)))

        out_rows: list[dict] = []
        for r in records:
            present = statistics.present_count(r)
            pct = statistics.percentage(r)
            out_rows.append(
                {
                    "date": r.date.display(),
                    "present": present,
                    "absent": r.total - present,
                    "percentage": pct,
                    "band": statistics.band(pct).value,
                    "notes": r.notes or "",
                    "external_link": r.external_link or "",
                }
            )

        summary = [
            {
                "student": s.full_name or s.student_id,
                "total_classes": s.total_classes,
                "present": s.present_count,
                "absent": s.absent_count,
                "percentage": s.attendance_percentage,
                "band": s.band.value,
            }
            for s in statistics.student_summaries(records)
        ]
        summary.sort(key=lambda x: x["percentage"], reverse=True)
        return ReportData(rows=out_rows, summary=summary)

    @staticmethod
    def to_dataframes(report: ReportData) -> tuple[pd.DataFrame, pd.DataFrame]:
        sessions = pd.DataFrame(report.rows, columns=["date", "present", "absent", "percentage", "band", "notes", "external_link"])
        sessions.columns = SESSION_COLUMNS
        students = pd.DataFrame(report.summary, columns=["student", "total_classes", "present", "absent", "percentage", "band"])
        students.columns = SUMMARY_COLUMNS
        return sessions, students

    def export_excel(self, report: ReportData) -> bytes:
        sessions, students = self.to_dataframes(report)
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            sessions.to_excel(writer, sheet_name="Davomat", index=False)
            students.to_excel(writer, sheet_name="Studentlar", index=False)
        return output.getvalue()
