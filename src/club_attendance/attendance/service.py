from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import normalize_date
from ..common.validators import blank_to_none, require_target
from ..core.constants import DEFAULT_WARNING_THRESHOLD
from ..core.exceptions import ValidationError
from ..students.repository import RosterProvider
from . import statistics
from .model import (
    AttendanceDraft,
    AttendanceEntry,
    AttendanceRecord,
    AttendanceTrend,
    SessionStatistics,
    StudentAttendanceSummary,
)
from .reconciler import DraftReconciler
from .repository import ExternalLinkWriter, HistoryProvider, RecordProvider, RecordSubmitter, StatisticsProvider
from .submit import SubmitCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistorySummary:
    records: list[AttendanceRecord]
    statistics: SessionStatistics
    trend: AttendanceTrend


class AttendanceService:
    def __init__(
        self,
        roster: RosterProvider,
        records: RecordProvider,
        submitter: RecordSubmitter,
        history: HistoryProvider,
        *,
        links: ExternalLinkWriter | None = None,
        server_statistics: StatisticsProvider | None = None,
        reconciler: DraftReconciler | None = None,
        coordinator: SubmitCoordinator | None = None,
        warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
    ):
        self._roster = roster
        self._records = records
        self._history = history
        self._links = links
        self._server_statistics = server_statistics
        self._reconciler = reconciler or DraftReconciler()
        self._coordinator = coordinator or SubmitCoordinator(submitter)
        self._warning_threshold = float(warning_threshold)

    @property
    def coordinator(self) -> SubmitCoordinator:
        return self._coordinator

    def open_draft(self, club_id: str, session_date) -> AttendanceDraft:
        require_target(club_id, session_date)
        day = normalize_date(session_date).parsed

        students = self._roster.fetch_roster(club_id)
        existing = self._records.fetch_record(club_id, day)
        draft = self._reconciler.build_draft(students, existing, club_id=club_id, session_date=day)
        self._coordinator.track(draft)
        if draft.locked:
            logger.info("Attendance for club %s on %s is locked; draft is read-only", club_id, day)
        return draft

    def search(self, draft: AttendanceDraft, query: str) -> list[AttendanceEntry]:
        return self._reconciler.filter_by_search(draft, query)

    def submit(self, draft: AttendanceDraft) -> Optional[AttendanceRecord]:
        return self._coordinator.submit(draft, draft.club_id, draft.date)

    def cancel(self, draft: AttendanceDraft) -> None:
        self._coordinator.discard(draft)

    def get_history(self, club_id: str, start: date, end: date) -> list[AttendanceRecord]:
        """History newest first; undated records at the end."""
        if start > end:
            raise ValidationError("Start date must not be after end date")
        rows = self._history.fetch_history(club_id, (start, end))
        return statistics.sort_most_recent_first(rows)

    def get_history_summary(self, club_id: str, start: date, end: date) -> HistorySummary:
        records = self.get_history(club_id, start, end)
        stats = statistics.aggregate(records)
        if self._server_statistics is not None:
            stats = statistics.resolve_statistics(stats, self._server_statistics.fetch_statistics(club_id, (start, end)))
        return HistorySummary(records=records, statistics=stats, trend=statistics.trend(records))

    def get_student_summary(self, club_id: str, student_id: str, start: date, end: date) -> StudentAttendanceSummary:
        return statistics.student_summary(self.get_history(club_id, start, end), student_id)

    def get_warnings(
        self, club_id: str, start: date, end: date, *, threshold: float | None = None
    ) -> list[StudentAttendanceSummary]:
        limit = self._warning_threshold if threshold is None else float(threshold)
        return statistics.low_attendance_warnings(self.get_history(club_id, start, end), limit)

    def attach_external_link(self, record: AttendanceRecord, link: str) -> AttendanceRecord:
        if self._links is None:
            raise ValidationError("External links are not supported by this backend")
        value = blank_to_none(link)
        if not value:
            raise ValidationError("External link must not be empty")
        if not record.record_id:
            raise ValidationError("Record has not been saved yet")
        return self._links.attach_external_link(record.record_id, value)
