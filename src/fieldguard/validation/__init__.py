"""Value-time validation: the recursive engine, the presence-aware decoder and standalone values."""

from fieldguard.validation.decoder import PresenceDecoder, presence_of, to_wire
from fieldguard.validation.engine import RecordValidator
from fieldguard.validation.value import check_value

__all__ = [
    "PresenceDecoder",
    "RecordValidator",
    "check_value",
    "presence_of",
    "to_wire",
]
