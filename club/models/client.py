# club/models/client.py
"""
Client payloads carried by input events.

The set is closed: one frozen dataclass per input event kind. All of them
expose `name`, a textual form (str()) and validate(table_count), which returns
the reason text of the first problem found or None.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from club.exceptions import CLIENT_NAME_INVALID, VALUE_MUST_BE_POSITIVE, VALUE_TOO_BIG

NAME_PATTERN = re.compile(r"^[a-z0-9_]+$")


def validate_name(name: str) -> Optional[str]:
    if not NAME_PATTERN.match(name):
        return CLIENT_NAME_INVALID
    return None


@dataclass(frozen=True)
class ArriveClient:
    name: str

    def fields(self):
        return (self.name,)

    def __str__(self):
        return self.name

    def validate(self, table_count: int) -> Optional[str]:
        return validate_name(self.name)


@dataclass(frozen=True)
class SitClient:
    name: str
    table: int

    def fields(self):
        return (self.name, str(self.table))

    def __str__(self):
        return " ".join(self.fields())

    def validate(self, table_count: int) -> Optional[str]:
        reason = validate_name(self.name)
        if reason:
            return reason
        if self.table <= 0:
            return VALUE_MUST_BE_POSITIVE
        if self.table > table_count:
            return VALUE_TOO_BIG
        return None


@dataclass(frozen=True)
class WaitClient:
    name: str

    def fields(self):
        return (self.name,)

    def __str__(self):
        return self.name

    def validate(self, table_count: int) -> Optional[str]:
        return validate_name(self.name)


@dataclass(frozen=True)
class LeaveClient:
    name: str

    def fields(self):
        return (self.name,)

    def __str__(self):
        return self.name

    def validate(self, table_count: int) -> Optional[str]:
        return validate_name(self.name)


ClientPayload = Union[ArriveClient, SitClient, WaitClient, LeaveClient]
