"""Complaint enums."""

from enum import Enum


class ComplaintType(str, Enum):
    """Payload shape: inline text or an uploaded voice recording."""

    TEXT = "text"
    VOICE = "voice"


class ComplaintStatus(str, Enum):
    """Triage status. Only these two states exist."""

    OPEN = "open"
    RESOLVED = "resolved"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


DEFAULT_COMPLAINT_STATUS = ComplaintStatus.OPEN
