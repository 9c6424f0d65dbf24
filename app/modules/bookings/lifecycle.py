"""
Booking status vocabulary and the transition policy.

Every status may currently move to every other status, and examination
status is a separate two-value workflow. The policy lives in
ALLOWED_TRANSITIONS so a stricter rule is a change to one table.
"""

import enum

from app.core.errors import ValidationError


class BookingType(str, enum.Enum):
    ONLINE = "online"
    CLINIC = "clinic"


class VisitType(str, enum.Enum):
    CHECKUP = "checkup"
    FOLLOWUP = "followup"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class ExaminationStatus(str, enum.Enum):
    WAITING = "waiting"
    DONE = "done"


EXAMINATION_NOT_SET = "not_set"

_ALL_STATUSES = frozenset(BookingStatus)

# current -> statuses it may move to (includes itself: re-applying is a no-op overwrite)
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    s: _ALL_STATUSES for s in BookingStatus
}


def parse_status(value: str) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in BookingStatus)
        raise ValidationError(f"Unknown status '{value}'", {"status": f"must be one of {allowed}"})


def parse_examination_status(value: str) -> ExaminationStatus:
    try:
        return ExaminationStatus(value)
    except ValueError:
        raise ValidationError(
            f"Unknown examination status '{value}'",
            {"examination_status": "must be one of waiting, done"},
        )


def check_transition(current: str, new: BookingStatus) -> None:
    # rows written before the vocabulary was fixed may carry an unknown status;
    # those can always be moved to a known one
    try:
        cur = BookingStatus(current)
    except ValueError:
        return
    if new not in ALLOWED_TRANSITIONS[cur]:
        raise ValidationError(f"Cannot change status from {cur.value} to {new.value}", {"status": "transition not allowed"})


def examination_label(value: str | None) -> str:
    return value if value else EXAMINATION_NOT_SET
