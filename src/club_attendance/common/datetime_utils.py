from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..core.constants import API_DATE_FORMAT, DISPLAY_DATE_FORMAT
from ..core.enums import DateKind
from ..core.exceptions import FormatError

_ISO_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ].*)?$")
_DISPLAY_RE = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")


@dataclass(frozen=True)
class SessionDate:
    """Tagged date value: the original string plus the calendar date, if any."""

    kind: DateKind
    raw: str
    parsed: Optional[date]

    @property
    def is_dated(self) -> bool:
        return self.parsed is not None

    def display(self) -> str:
        if self.parsed is None:
            return self.raw
        return self.parsed.strftime(DISPLAY_DATE_FORMAT)

    def api(self) -> str:
        if self.parsed is None:
            raise FormatError(f"Cannot send undated session {self.raw!r}")
        return self.parsed.strftime(API_DATE_FORMAT)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, API_DATE_FORMAT).date()


def normalize_date(raw: Union[str, date, SessionDate]) -> SessionDate:
    """Detect which of the two backend date shapes was given and parse it.

    ``2024-12-20`` (optionally with a time part) is ISO, ``20.12.2024`` is the
    display form. Anything else raises FormatError.
    """
    if isinstance(raw, SessionDate):
        return raw
    if isinstance(raw, datetime):
        raw = raw.date()
    if isinstance(raw, date):
        return SessionDate(kind=DateKind.ISO, raw=raw.strftime(API_DATE_FORMAT), parsed=raw)

    if not isinstance(raw, str):
        raise FormatError(f"Unrecognised date {raw!r}")
    text = raw.strip()
    try:
        if "." in text and _DISPLAY_RE.match(text):
            return SessionDate(
                kind=DateKind.DISPLAY,
                raw=text,
                parsed=datetime.strptime(text, DISPLAY_DATE_FORMAT).date(),
            )
        m = _ISO_RE.match(text)
        if m:
            return SessionDate(kind=DateKind.ISO, raw=text, parsed=parse_iso_date(m.group(1)))
    except ValueError as exc:
        # Shape matched but the calendar values are impossible (e.g. 31.02.2024).
        raise FormatError(f"Invalid date {raw!r}") from exc
    raise FormatError(f"Unrecognised date {raw!r}")


def lenient_date(raw) -> SessionDate:
    """normalize_date that keeps unparseable values as RAW instead of raising."""
    try:
        return normalize_date(raw)
    except FormatError:
        return SessionDate(kind=DateKind.RAW, raw=str(raw or ""), parsed=None)


def today() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return date.today()
