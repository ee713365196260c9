# club/exceptions.py
"""
Custom exceptions and rejection codes.

Malformed logs raise (fatal to the whole run). Business-rule rejections are
never raised: the processor turns an ErrorCode into an ERROR output event and
moves on to the next input event.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Rejection reasons, valued by the text written to the output."""

    NOT_OPEN_YET = "NotOpenYet"
    ALREADY_PRESENT = "YouShallNotPass"
    UNKNOWN_CLIENT = "ClientUnknown"
    TABLE_BUSY = "PlaceIsBusy"
    CANNOT_WAIT_LONGER = "ICanWaitNoLonger!"


class ClubError(Exception):
    """Base class for every error raised by this package."""
    pass


class EmptyQueueError(ClubError):
    """pop()/peek() on an empty waiting queue."""

    def __init__(self):
        super().__init__("queue is empty")


# ============ Log errors (fatal) ============

class LogError(ClubError):
    """A row of the input log could not be turned into a config or event."""

    prefix = "failed to parse row"

    def __init__(self, row_number: int, message: str, cause: Optional[Exception] = None):
        self.row_number = row_number
        self.message = message
        self.cause = cause
        super().__init__(f"{self.prefix} {row_number}: {message}")


class LogParseError(LogError):
    """The row is not shaped like what the format expects."""
    pass


class LogValidationError(LogError):
    """The row is well-formed but carries an out-of-range value."""

    prefix = "validation error at row"


# Reason texts carried by LogError.message
TABLES_COUNT_NOT_SPECIFIED = "tables count are not specified"
TABLES_COUNT_INVALID_FORMAT = "tables count are not integer"
PRICE_PER_HOUR_NOT_SPECIFIED = "price per hour are not specified"
PRICE_PER_HOUR_INVALID_FORMAT = "price per hour are not integer"
WORKING_TIME_NOT_SPECIFIED = "working time are not specified"
WORKING_TIME_INVALID_FORMAT = "working time are not time interval"
START_TIME_INVALID = "failed to parse start time"
END_TIME_INVALID = "failed to parse end time"
EVENT_INVALID_FORMAT = "event must be in format: <time> <event-type> <client-data>"
EVENT_TIME_INVALID = "failed to parse event happened time"
EVENT_TYPE_INVALID = "failed to parse event type"
EVENT_TYPE_UNKNOWN = "unknown event type"
EVENT_OUT_OF_ORDER = "event happens before the previous one"
CLIENT_DATA_INVALID_FORMAT = "invalid client data format for event type"
CLIENT_NAME_INVALID = "invalid client name"
TABLE_NUMBER_INVALID = "failed to parse client table number"
VALUE_MUST_BE_POSITIVE = "value must be more than zero"
VALUE_TOO_BIG = "value is too big"
