from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from .api.client import ApiClient, ApiConfig
from .attendance.http_attendance_repository import HttpAttendanceRepository
from .attendance.reconciler import DraftReconciler
from .attendance.service import AttendanceService
from .attendance.submit import SubmitCoordinator
from .core.constants import DEFAULT_HISTORY_PAGE_SIZE, DEFAULT_REQUEST_TIMEOUT, DEFAULT_WARNING_THRESHOLD
from .reports.service import AttendanceReportService
from .students.http_roster_repository import HttpRosterRepository


@dataclass(frozen=True)
class Container:
    client: ApiClient

    roster_repo: HttpRosterRepository
    attendance_repo: HttpAttendanceRepository

    attendance_service: AttendanceService
    report_service: AttendanceReportService


def build_container(*, api_config: dict, session: Optional[requests.Session] = None) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        token=api_config.get("token") or None,
        timeout=float(api_config.get("timeout", DEFAULT_REQUEST_TIMEOUT)),
    )
    client = ApiClient(config, session=session)

    roster_repo = HttpRosterRepository(client)
    attendance_repo = HttpAttendanceRepository(
        client, page_size=int(api_config.get("page_size", DEFAULT_HISTORY_PAGE_SIZE))
    )

    attendance_service = AttendanceService(
        roster_repo,
        attendance_repo,
        attendance_repo,
        attendance_repo,
        links=attendance_repo,
        server_statistics=attendance_repo,
        reconciler=DraftReconciler(),
        coordinator=SubmitCoordinator(attendance_repo),
        warning_threshold=float(api_config.get("warning_threshold", DEFAULT_WARNING_THRESHOLD)),
    )
    report_service = AttendanceReportService(attendance_repo)

    return Container(
        client=client,
        roster_repo=roster_repo,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
        report_service=report_service,
    )
