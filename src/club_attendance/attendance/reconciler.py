from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..students.model import Student
from .model import AttendanceDraft, AttendanceEntry, AttendanceRecord

logger = logging.getLogger(__name__)


class DraftReconciler:
    """Merge the current roster with an already stored record into an editable draft.

    The roster decides who is listed, the stored record decides each listed
    student's status. Students missing from the record start as present.
    """

    @staticmethod
    def is_editable(existing: Optional[AttendanceRecord]) -> bool:
        if existing is None:
            return True
        return bool(existing.editable)

    def build_draft(
        self,
        roster: Sequence[Student],
        existing: Optional[AttendanceRecord],
        *,
        club_id: Optional[str] = None,
        session_date: Optional[date] = None,
    ) -> AttendanceDraft:
        known = existing.entries if existing else {}

        entries: dict[str, AttendanceEntry] = {}
        by_id: dict[str, Student] = {}
        for s in roster:
            prior = known.get(s.student_id)
            present = prior.present if prior else True
            entries[s.student_id] = AttendanceEntry(
                student_id=s.student_id,
                present=present,
                reason=None if present else prior.reason,
                full_name=s.full_name,
                student_id_number=s.student_id_number,
            )
            by_id[s.student_id] = s

        # Not on the roster any more: not carried into the draft.
        dropped = [sid for sid in known if sid not in by_id]
        if dropped:
            logger.info("Dropping %d disenrolled student(s) from draft for club %s", len(dropped), club_id)

        if club_id is None and existing is not None:
            club_id = existing.club_id
        if session_date is None and existing is not None:
            session_date = existing.date.parsed

        return AttendanceDraft(
            club_id=club_id,
            date=session_date,
            entries=entries,
            roster=by_id,
            notes=existing.notes if existing else None,
            external_link=existing.external_link if existing else None,
            locked=not self.is_editable(existing),
            record_id=existing.record_id if existing else None,
            dropped_student_ids=dropped,
        )

    @staticmethod
    def filter_by_search(draft: AttendanceDraft, query: Optional[str]) -> list[AttendanceEntry]:
        """Entries whose name contains the query (any case) or whose id number contains it."""
        text = (query or "").strip()
        if not text:
            return list(draft.entries.values())

        needle = text.lower()
        out = []
        for sid, entry in draft.entries.items():
            student = draft.roster.get(sid)
            name = (student.full_name if student else entry.full_name) or ""
            number = (student.student_id_number if student else entry.student_id_number) or ""
            if needle in name.lower() or text in number:
                out.append(entry)
        return out
