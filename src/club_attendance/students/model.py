from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


def _ref(value: Any) -> Optional[str]:
    """Reduce an id-or-embedded-object reference to a plain string."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        ref = value.get("_id") or value.get("id") or value.get("name")
        return str(ref) if ref is not None else None
    return str(value)


@dataclass(frozen=True)
class Student:
    """Thực thể miền (domain): Sinh viên trong danh sách câu lạc bộ (chỉ đọc)."""

    student_id: str
    full_name: str
    student_id_number: str = ""
    group: Optional[str] = None
    department: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Student":
        return cls(
            student_id=str(payload.get("_id") or payload.get("id")),
            full_name=str(payload.get("full_name") or ""),
            student_id_number=str(payload.get("student_id_number") or ""),
            group=_ref(payload.get("group")),
            department=_ref(payload.get("department")),
            image=payload.get("image") or None,
        )
