"""Ví dụ: dùng service layer trực tiếp (không qua UI).

Mở bản nháp điểm danh, in thống kê lịch sử và xuất báo cáo Excel.
Usage: python examples/example_usage.py <club_id> [YYYY-MM-DD]
"""

import sys
from datetime import timedelta
from pathlib import Path

from club_attendance.common.datetime_utils import normalize_date, today
from club_attendance.main import create_service


def main():
    club_id = sys.argv[1]
    day = normalize_date(sys.argv[2]).parsed if len(sys.argv) > 2 else today()
    container = create_service()
    svc = container.attendance_service

    draft = svc.open_draft(club_id, day)
    print(f"{len(draft.entries)} students, locked={draft.locked}")

    start = day - timedelta(days=30)
    summary = svc.get_history_summary(club_id, start, day)
    print(summary.statistics.average_percentage, summary.trend.direction.value)

    report = container.report_service.build_history_report(club_id=club_id, start=start, end=day)
    out = Path(f"davomat_{club_id}_{day.isoformat()}.xlsx")
    out.write_bytes(container.report_service.export_excel(report))
    print(f"Saved {out}")


if __name__ == "__main__":
    main()
