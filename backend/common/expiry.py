import logging
from dataclasses import dataclass
from datetime import datetime, date, time, timedelta
from enum import Enum as PyEnum
from typing import Optional, Union

from common.config import settings

logger = logging.getLogger(__name__)

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

TimestampLike = Union[datetime, date, str]


class ExpiryError(ValueError):
    pass


class ExpiryInputError(ExpiryError):
    pass


class ExpiryPolicyError(ExpiryError):
    pass


class ExpiryBracket(PyEnum):
    immediate = "immediate"
    short = "short"
    due = "due"
    long = "long"


@dataclass(frozen=True)
class ExpiryPolicy:
    """Thresholds (whole hours of gap) and offsets for each bracket.

    Brackets are checked in ascending order: gap <= immediate_max_hours,
    then <= short_max_hours, then <= due_max_hours, otherwise long.
    """
    immediate_max_hours: int = 24
    short_max_hours: int = 72
    due_max_hours: int = 90
    immediate_offset_minutes: int = 90
    short_offset_hours: int = 16
    long_lead_hours: int = 48

    def __post_init__(self):
        if not (0 <= self.immediate_max_hours < self.short_max_hours < self.due_max_hours):
            raise ExpiryPolicyError(
                "Bracket thresholds must be strictly increasing: "
                f"{self.immediate_max_hours} < {self.short_max_hours} < {self.due_max_hours}"
            )
        for name in ("immediate_offset_minutes", "short_offset_hours", "long_lead_hours"):
            if getattr(self, name) < 0:
                raise ExpiryPolicyError(f"{name} must not be negative")

    @classmethod
    def from_settings(cls) -> "ExpiryPolicy":
        return cls(
            immediate_max_hours=settings.EXPIRY_IMMEDIATE_MAX_HOURS,
            short_max_hours=settings.EXPIRY_SHORT_MAX_HOURS,
            due_max_hours=settings.EXPIRY_DUE_MAX_HOURS,
            immediate_offset_minutes=settings.EXPIRY_IMMEDIATE_OFFSET_MINUTES,
            short_offset_hours=settings.EXPIRY_SHORT_OFFSET_HOURS,
            long_lead_hours=settings.EXPIRY_LONG_LEAD_HOURS,
        )


def parse_timestamp(value: TimestampLike) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(raw)
        except ValueError as exc:
            raise ExpiryInputError(f"Unparseable timestamp: {value!r}") from exc
    raise ExpiryInputError(f"Unsupported timestamp type: {type(value).__name__}")


def format_timestamp(value: datetime) -> str:
    return value.strftime(DISPLAY_FORMAT)


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def gap_in_hours(due_time: datetime, created_at: datetime) -> int:
    """Whole hours between created_at and due_time, sign ignored."""
    if _is_aware(due_time) != _is_aware(created_at):
        raise ExpiryInputError("due_time and created_at must both be naive or both be timezone-aware")
    return int(abs(due_time - created_at).total_seconds() // 3600)


def classify_gap(gap_hours: int, policy: Optional[ExpiryPolicy] = None) -> ExpiryBracket:
    policy = policy or ExpiryPolicy.from_settings()
    if gap_hours <= policy.immediate_max_hours:
        return ExpiryBracket.immediate
    if gap_hours <= policy.short_max_hours:
        return ExpiryBracket.short
    if gap_hours <= policy.due_max_hours:
        return ExpiryBracket.due
    return ExpiryBracket.long


def will_expire_at(due_time: datetime, created_at: datetime,
                   policy: Optional[ExpiryPolicy] = None) -> datetime:
    """Returns the instant a task created at `created_at` and due at `due_time` expires.

    Near-term tasks get a short window from creation; tasks due in a few days
    keep their due time; distant ones expire a fixed lead before the due time.
    """
    policy = policy or ExpiryPolicy.from_settings()
    gap = gap_in_hours(due_time, created_at)
    bracket = classify_gap(gap, policy)
    logger.debug("Expiry gap=%sh bracket=%s", gap, bracket.value)

    # Windows measured from creation never run past the due time.
    if bracket == ExpiryBracket.immediate:
        return min(due_time, created_at + timedelta(minutes=policy.immediate_offset_minutes))
    if bracket == ExpiryBracket.short:
        return min(due_time, created_at + timedelta(hours=policy.short_offset_hours))
    if bracket == ExpiryBracket.due:
        return due_time
    return due_time - timedelta(hours=policy.long_lead_hours)


def will_expire_at_formatted(due_time: TimestampLike, created_at: TimestampLike,
                             policy: Optional[ExpiryPolicy] = None) -> str:
    # String-in/string-out shape for callers that store display timestamps.
    expires = will_expire_at(parse_timestamp(due_time), parse_timestamp(created_at), policy)
    return format_timestamp(expires)
