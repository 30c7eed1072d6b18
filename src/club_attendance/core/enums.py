from __future__ import annotations

from enum import Enum


class AttendanceBand(str, Enum):
    """Mức chuyên cần dùng để tô màu/cảnh báo."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DateKind(str, Enum):
    """Dạng ngày backend trả về."""

    ISO = "iso"
    DISPLAY = "display"
    RAW = "raw"


class SubmissionState(str, Enum):
    """Vòng đời điểm danh của một cặp (club, date)."""

    NO_RECORD = "NO_RECORD"
    DRAFT = "DRAFT"
    SUBMITTING = "SUBMITTING"
    SUBMITTED_LOCKED = "SUBMITTED_LOCKED"
    SUBMIT_FAILED = "SUBMIT_FAILED"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class Period(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
