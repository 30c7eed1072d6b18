from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import SessionDate, lenient_date
from ..common.validators import blank_to_none
from ..core.enums import AttendanceBand, TrendDirection
from ..core.exceptions import NotFoundError
from ..students.model import Student

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceEntry:
    """Trạng thái có mặt của một sinh viên trong một buổi."""

    student_id: str
    present: bool = True
    reason: Optional[str] = None
    full_name: Optional[str] = None
    student_id_number: Optional[str] = None

    @property
    def absence_reason(self) -> Optional[str]:
        """Reason that counts for statistics; None whenever the student was present."""
        return None if self.present else blank_to_none(self.reason)


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi điểm danh của một câu lạc bộ trong một ngày."""

    club_id: str
    date: SessionDate
    entries: dict[str, AttendanceEntry]
    notes: Optional[str] = None
    external_link: Optional[str] = None
    editable: bool = False
    record_id: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.entries)


@dataclass
class AttendanceDraft:
    """Mutable, client-held attendance under construction for one editing session."""

    club_id: Optional[str]
    date: Optional[date]
    entries: dict[str, AttendanceEntry] = field(default_factory=dict)
    roster: dict[str, Student] = field(default_factory=dict)
    notes: Optional[str] = None
    external_link: Optional[str] = None
    locked: bool = False
    record_id: Optional[str] = None
    dropped_student_ids: list[str] = field(default_factory=list)
    discarded: bool = False

    def _entry(self, student_id: str) -> AttendanceEntry:
        entry = self.entries.get(str(student_id))
        if entry is None:
            raise NotFoundError(f"Student {student_id} is not on this draft")
        return entry

    def set_presence(self, student_id: str, present: bool) -> "AttendanceDraft":
        entry = self._entry(student_id)
        present = bool(present)
        # Marking present clears the reason in the same update.
        reason = None if present else entry.reason
        self.entries[entry.student_id] = AttendanceEntry(
            student_id=entry.student_id,
            present=present,
            reason=reason,
            full_name=entry.full_name,
            student_id_number=entry.student_id_number,
        )
        return self

    def set_reason(self, student_id: str, reason: Optional[str]) -> "AttendanceDraft":
        entry = self._entry(student_id)
        self.entries[entry.student_id] = AttendanceEntry(
            student_id=entry.student_id,
            present=entry.present,
            reason=reason,
            full_name=entry.full_name,
            student_id_number=entry.student_id_number,
        )
        return self

    def discard(self) -> None:
        """Close the editing session; late submit responses are then ignored."""
        self.discarded = True

    @property
    def present_count(self) -> int:
        return sum(1 for e in self.entries.values() if e.present)


def set_presence(draft: AttendanceDraft, student_id: str, present: bool) -> AttendanceDraft:
    return draft.set_presence(student_id, present)


def set_reason(draft: AttendanceDraft, student_id: str, reason: Optional[str]) -> AttendanceDraft:
    return draft.set_reason(student_id, reason)


@dataclass(frozen=True)
class SubmissionPayload:
    """Wire-neutral body of a create request."""

    club_id: str
    date: str
    students: list[dict]
    notes: Optional[str] = None
    external_link: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "clubId": self.club_id,
            "date": self.date,
            "students": [dict(s) for s in self.students],
            "notes": self.notes,
            "externalLink": self.external_link,
        }


@dataclass(frozen=True)
class SessionStatistics:
    total_sessions: int = 0
    present_total: int = 0
    possible_total: int = 0
    average_percentage: float = 0.0
    best_session: Optional[AttendanceRecord] = None
    worst_session: Optional[AttendanceRecord] = None


@dataclass(frozen=True)
class StudentAttendanceSummary:
    student_id: str
    full_name: Optional[str]
    total_classes: int
    present_count: int
    absent_count: int
    attendance_percentage: float
    band: AttendanceBand


@dataclass(frozen=True)
class AttendanceTrend:
    direction: TrendDirection
    delta: float
    earlier_average: float
    later_average: float


def _entry_from_payload(item: Mapping[str, Any]) -> AttendanceEntry:
    student = item.get("student")
    if isinstance(student, Mapping):
        return AttendanceEntry(
            student_id=str(student.get("_id") or student.get("id")),
            present=bool(item.get("present")),
            reason=item.get("reason") or None,
            full_name=student.get("full_name"),
            student_id_number=student.get("student_id_number"),
        )
    return AttendanceEntry(
        student_id=str(student),
        present=bool(item.get("present")),
        reason=item.get("reason") or None,
    )


def record_from_payload(payload: Mapping[str, Any], *, club_id: Optional[str] = None) -> AttendanceRecord:
    """Build a record from the backend shape.

    An unparseable date does not fail the record: it is kept with the raw
    string for display and left out of date-ordered computations.
    """
    session_date = lenient_date(payload.get("date"))
    if not session_date.is_dated:
        logger.warning("Attendance record %s has unrecognised date %r", payload.get("_id"), payload.get("date"))

    entries: dict[str, AttendanceEntry] = {}
    for item in payload.get("students") or []:
        entry = _entry_from_payload(item)
        entries[entry.student_id] = entry

    club = payload.get("club") or payload.get("clubId") or club_id
    if isinstance(club, Mapping):
        club = club.get("_id") or club.get("id")

    if "canEdit" in payload:
        editable = bool(payload["canEdit"])
    else:
        editable = bool(payload.get("editable", False))

    record_id = payload.get("_id") or payload.get("id")
    return AttendanceRecord(
        club_id=str(club) if club is not None else "",
        date=session_date,
        entries=entries,
        notes=blank_to_none(payload.get("notes")),
        external_link=blank_to_none(payload.get("telegramPostLink") or payload.get("externalLink")),
        editable=editable,
        record_id=str(record_id) if record_id is not None else None,
    )
