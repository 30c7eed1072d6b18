from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..api.client import ApiClient
from ..core.constants import API_DATE_FORMAT, DEFAULT_HISTORY_PAGE_SIZE
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, SubmissionPayload, record_from_payload
from .repository import (
    DateRange,
    ExternalLinkWriter,
    HistoryProvider,
    RecordProvider,
    RecordSubmitter,
    StatisticsProvider,
)

logger = logging.getLogger(__name__)


def to_wire(payload: SubmissionPayload) -> dict:
    """Backend field names for a create request."""
    body = payload.as_dict()
    body["telegramPostLink"] = body.pop("externalLink")
    return body


class HttpAttendanceRepository(RecordProvider, RecordSubmitter, HistoryProvider, ExternalLinkWriter, StatisticsProvider):
    def __init__(self, client: ApiClient, *, page_size: int = DEFAULT_HISTORY_PAGE_SIZE, max_pages: int = 50):
        self._client = client
        self._page_size = int(page_size)
        self._max_pages = int(max_pages)

    def fetch_record(self, club_id: str, session_date: date) -> Optional[AttendanceRecord]:
        data = self._client.get(
            "/tutor/attendance/by-date",
            params={"date": session_date.strftime(API_DATE_FORMAT), "clubId": club_id},
        )
        if not data:
            return None
        return record_from_payload(data, club_id=club_id)

    def create_record(self, payload: SubmissionPayload) -> AttendanceRecord:
        data = self._client.post("/tutor/attendance", to_wire(payload))
        if not isinstance(data, Mapping):
            raise ValidationError("Backend did not return the saved attendance record")
        return record_from_payload(data, club_id=payload.club_id)

    def fetch_history(self, club_id: str, date_range: DateRange) -> Sequence[AttendanceRecord]:
        start, end = date_range
        out: list[AttendanceRecord] = []
        for page in range(1, self._max_pages + 1):
            rows = self._client.get(
                f"/tutor/attendance/{club_id}",
                params={
                    "startDate": start.strftime(API_DATE_FORMAT),
                    "endDate": end.strftime(API_DATE_FORMAT),
                    "page": page,
                    "limit": self._page_size,
                },
            ) or []
            out.extend(record_from_payload(r, club_id=club_id) for r in rows)
            if len(rows) < self._page_size:
                break
        else:
            logger.warning("History for club %s truncated after %d pages", club_id, self._max_pages)
        return out

    def attach_external_link(self, record_id: str, link: str) -> AttendanceRecord:
        data = self._client.post(f"/tutor/attendance/{record_id}/telegram-post", {"telegramPostLink": link})
        if not isinstance(data, Mapping):
            raise ValidationError("Backend did not return the updated attendance record")
        return record_from_payload(data)

    def fetch_statistics(
        self, club_id: Optional[str], date_range: DateRange, *, group_by: str = "day"
    ) -> Optional[Mapping[str, Any]]:
        start, end = date_range
        params = {
            "startDate": start.strftime(API_DATE_FORMAT),
            "endDate": end.strftime(API_DATE_FORMAT),
            "groupBy": group_by,
        }
        if club_id:
            params["clubId"] = club_id
        data = self._client.get("/attendance/statistics", params=params)
        return data if isinstance(data, Mapping) else None
