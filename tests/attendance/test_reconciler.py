from __future__ import annotations

from datetime import date

from club_attendance.attendance.model import AttendanceEntry, AttendanceRecord
from club_attendance.attendance.reconciler import DraftReconciler
from club_attendance.common.datetime_utils import normalize_date
from club_attendance.students.model import Student

A = Student(student_id="A", full_name="Aliyev Jasur", student_id_number="123456")
B = Student(student_id="B", full_name="Karimova Dilnoza", student_id_number="123457")
C = Student(student_id="C", full_name="Rashidov Azizbek", student_id_number="998877")


def existing(entries, *, editable=True, notes=None, link=None):
    return AttendanceRecord(
        club_id="c1",
        date=normalize_date("2025-02-01"),
        entries=entries,
        notes=notes,
        external_link=link,
        editable=editable,
        record_id="r1",
    )


def test_fresh_draft_marks_everyone_present():
    draft = DraftReconciler().build_draft([A, B, C], None, club_id="c1", session_date=date(2025, 2, 1))

    assert list(draft.entries) == ["A", "B", "C"]
    assert all(e.present and e.reason is None for e in draft.entries.values())
    assert draft.locked is False
    assert draft.record_id is None


def test_existing_status_is_copied_and_new_students_default_present():
    record = existing({"A": AttendanceEntry(student_id="A", present=False, reason="ill")}, notes="Lesson 4")

    draft = DraftReconciler().build_draft([A, B], record)

    assert draft.entries["A"].present is False
    assert draft.entries["A"].reason == "ill"
    assert draft.entries["B"].present is True
    assert draft.entries["B"].reason is None
    assert draft.notes == "Lesson 4"
    assert draft.club_id == "c1"
    assert draft.date == date(2025, 2, 1)


def test_disenrolled_students_are_dropped():
    record = existing(
        {
            "A": AttendanceEntry(student_id="A", present=True),
            "Z": AttendanceEntry(student_id="Z", present=False, reason="left"),
        }
    )

    draft = DraftReconciler().build_draft([A], record)

    assert "Z" not in draft.entries
    assert draft.dropped_student_ids == ["Z"]


def test_stray_reason_on_present_entry_is_not_carried():
    record = existing({"A": AttendanceEntry(student_id="A", present=True, reason="stale")})

    draft = DraftReconciler().build_draft([A], record)

    assert draft.entries["A"].reason is None


def test_is_editable():
    assert DraftReconciler.is_editable(None) is True
    assert DraftReconciler.is_editable(existing({}, editable=True)) is True
    assert DraftReconciler.is_editable(existing({}, editable=False)) is False


def test_locked_record_yields_locked_draft():
    draft = DraftReconciler().build_draft([A], existing({}, editable=False))

    assert draft.locked is True


def test_filter_by_search_matches_name_or_id_number():
    draft = DraftReconciler().build_draft([A, B, C], None, club_id="c1", session_date=date(2025, 2, 1))

    assert [e.student_id for e in DraftReconciler.filter_by_search(draft, "KARIM")] == ["B"]
    assert [e.student_id for e in DraftReconciler.filter_by_search(draft, "12345")] == ["A", "B"]
    assert [e.student_id for e in DraftReconciler.filter_by_search(draft, "  ")] == ["A", "B", "C"]
    assert DraftReconciler.filter_by_search(draft, "nobody") == []
    assert len(draft.entries) == 3
