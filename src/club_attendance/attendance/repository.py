from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import AttendanceRecord, SubmissionPayload

DateRange = tuple[date, date]


class RecordProvider(Protocol):
    def fetch_record(self, club_id: str, session_date: date) -> Optional[AttendanceRecord]:
        """Record for (club, date), or None when nothing was submitted yet."""

        raise NotImplementedError


class RecordSubmitter(Protocol):
    def create_record(self, payload: SubmissionPayload) -> AttendanceRecord:
        """Persist a new record.

        Raises ConflictError, ValidationError or AuthError.
        """

        raise NotImplementedError


class HistoryProvider(Protocol):
    def fetch_history(self, club_id: str, date_range: DateRange) -> Sequence[AttendanceRecord]:
        """Records in the range; ordering is not guaranteed."""

        raise NotImplementedError


class ExternalLinkWriter(Protocol):
    def attach_external_link(self, record_id: str, link: str) -> AttendanceRecord:
        raise NotImplementedError


class StatisticsProvider(Protocol):
    def fetch_statistics(
        self, club_id: Optional[str], date_range: DateRange, *, group_by: str = "day"
    ) -> Optional[Mapping[str, Any]]:
        """Backend-computed statistics, or None when the backend has none."""

        raise NotImplementedError
