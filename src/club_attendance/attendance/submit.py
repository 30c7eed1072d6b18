from __future__ import annotations

import itertools
import logging
from datetime import date
from typing import Optional

from ..common.datetime_utils import normalize_date
from ..common.validators import blank_to_none, require_target
from ..core.enums import SubmissionState
from ..core.exceptions import AlreadyFinalizedError, DomainError, DraftDiscardedError
from .model import AttendanceDraft, AttendanceRecord, SubmissionPayload
from .repository import RecordSubmitter

logger = logging.getLogger(__name__)

Target = tuple[str, date]


def serialize(draft: AttendanceDraft, club_id: str, session_date) -> SubmissionPayload:
    """Snapshot the draft as it is right now into a create payload."""
    students = [
        {
            "student": e.student_id,
            "present": e.present,
            "reason": None if e.present else blank_to_none(e.reason),
        }
        for e in draft.entries.values()
    ]
    return SubmissionPayload(
        club_id=str(club_id),
        date=normalize_date(session_date).api(),
        students=students,
        notes=blank_to_none(draft.notes),
        external_link=blank_to_none(draft.external_link),
    )


class SubmitCoordinator:
    """One create request per submit, at most one live attempt per (club, date).

    The backend decides the race between concurrent creators; this class only
    fails fast on local preconditions and drops responses that arrive after
    their draft was discarded or superseded.
    """

    def __init__(self, submitter: RecordSubmitter):
        self._submitter = submitter
        self._states: dict[Target, SubmissionState] = {}
        self._live: dict[Target, int] = {}
        self._ids = itertools.count(1)

    def state(self, club_id: str, session_date) -> SubmissionState:
        key = (str(club_id), normalize_date(session_date).parsed)
        return self._states.get(key, SubmissionState.NO_RECORD)

    def track(self, draft: AttendanceDraft) -> None:
        """Register an opened draft so its target moves to DRAFT (or LOCKED)."""
        if not draft.club_id or draft.date is None:
            return
        key = (str(draft.club_id), normalize_date(draft.date).parsed)
        self._states[key] = SubmissionState.SUBMITTED_LOCKED if draft.locked else SubmissionState.DRAFT

    def submit(self, draft: AttendanceDraft, club_id: Optional[str], session_date) -> Optional[AttendanceRecord]:
        """Submit the draft.

        Returns the persisted record, or None when the response was superseded
        (draft discarded or a newer attempt for the same target started).
        """
        require_target(club_id, session_date)
        if draft.discarded:
            raise DraftDiscardedError("This attendance draft was cancelled; open it again to submit")
        if draft.locked:
            raise AlreadyFinalizedError("Attendance for this date is already recorded and can no longer be changed")

        payload = serialize(draft, club_id, session_date)
        key = (str(club_id), normalize_date(session_date).parsed)
        attempt = next(self._ids)
        self._live[key] = attempt
        self._states[key] = SubmissionState.SUBMITTING
        logger.info("Submitting attendance for club %s on %s (%d students)", club_id, payload.date, len(payload.students))

        try:
            record = self._submitter.create_record(payload)
        except Exception as exc:
            if not self._is_current(key, attempt, draft):
                if not isinstance(exc, DomainError):
                    raise
                logger.info("Ignoring stale submit failure for club %s on %s: %s", club_id, payload.date, exc)
                return None
            del self._live[key]
            self._states[key] = SubmissionState.SUBMIT_FAILED
            logger.warning("Attendance submit for club %s on %s failed: %s", club_id, payload.date, exc)
            raise

        if not self._is_current(key, attempt, draft):
            logger.info("Ignoring stale submit response for club %s on %s", club_id, payload.date)
            return None

        del self._live[key]
        draft.record_id = record.record_id
        draft.locked = not record.editable
        self._states[key] = SubmissionState.DRAFT if record.editable else SubmissionState.SUBMITTED_LOCKED
        logger.info("Attendance for club %s on %s saved (record %s)", club_id, payload.date, record.record_id)
        return record

    def retry(self, club_id: str, session_date) -> None:
        """SUBMIT_FAILED goes back to DRAFT so the user can edit and resubmit."""
        key = (str(club_id), normalize_date(session_date).parsed)
        if self._states.get(key) == SubmissionState.SUBMIT_FAILED:
            self._states[key] = SubmissionState.DRAFT

    def discard(self, draft: AttendanceDraft) -> None:
        """Cancel the editing session behind the draft."""
        draft.discard()
        if not draft.club_id or draft.date is None:
            return
        key = (str(draft.club_id), normalize_date(draft.date).parsed)
        self._live.pop(key, None)
        if self._states.get(key) != SubmissionState.SUBMITTED_LOCKED:
            self._states[key] = SubmissionState.NO_RECORD

    def _is_current(self, key: Target, attempt: int, draft: AttendanceDraft) -> bool:
        return not draft.discarded and self._live.get(key) == attempt
