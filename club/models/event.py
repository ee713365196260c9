# club/models/event.py
"""
Input events (read from the log) and output events (derived by the processor).
Both render to "<time> <numeric-kind> <payload>".
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Optional

from club.exceptions import ErrorCode
from club.models.client import ClientPayload


class EventKind(IntEnum):
    ARRIVE = 1
    SIT = 2
    WAIT = 3
    LEAVE = 4


class OutputKind(IntEnum):
    CLIENT_LEFT = 11
    CLIENT_SAT = 12
    ERROR = 13


# Number of client data fields each input kind carries
CLIENT_FIELD_COUNT = {
    EventKind.ARRIVE: 1,
    EventKind.SIT: 2,
    EventKind.WAIT: 1,
    EventKind.LEAVE: 1,
}


@dataclass(frozen=True)
class InputEvent:
    happens_at: datetime    # may fall outside working hours
    kind: EventKind
    client: ClientPayload

    def render(self, time_format: str, separator: str = " ") -> str:
        return separator.join(
            (self.happens_at.strftime(time_format), str(int(self.kind)), *self.client.fields())
        )


@dataclass(frozen=True)
class OutputEvent:
    happens_at: datetime
    kind: OutputKind
    client: Optional[ClientPayload] = None
    error: Optional[ErrorCode] = None

    @classmethod
    def client_left(cls, happens_at: datetime, client: ClientPayload) -> "OutputEvent":
        return cls(happens_at=happens_at, kind=OutputKind.CLIENT_LEFT, client=client)

    @classmethod
    def client_sat(cls, happens_at: datetime, client: ClientPayload) -> "OutputEvent":
        return cls(happens_at=happens_at, kind=OutputKind.CLIENT_SAT, client=client)

    @classmethod
    def rejected(cls, happens_at: datetime, error: ErrorCode) -> "OutputEvent":
        return cls(happens_at=happens_at, kind=OutputKind.ERROR, error=error)

    def render(self, time_format: str, separator: str = " ") -> str:
        if self.error is not None:
            payload = (self.error.value,)
        else:
            payload = self.client.fields()
        return separator.join((self.happens_at.strftime(time_format), str(int(self.kind)), *payload))
