from __future__ import annotations

from typing import Optional

from ..core.exceptions import MissingTargetError


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Trim a free-text value; empty or whitespace-only becomes None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def require_target(club_id, session_date) -> None:
    if not club_id:
        raise MissingTargetError("No club selected")
    if session_date is None or session_date == "":
        raise MissingTargetError("No session date selected")
