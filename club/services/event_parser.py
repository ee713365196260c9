# club/services/event_parser.py
"""
Parses the textual club log into a ClubConfig and a stream of InputEvents.

Layout:
    <table count>
    <opening time><TIME_SEPARATOR><closing time>
    <price per hour>
    <time> <kind> <client data...>      (one event per line, chronological)

The first malformed row raises LogParseError / LogValidationError carrying
its 1-based row number; nothing after it is read.
"""

import re
from datetime import datetime, timedelta
from typing import Iterable, Iterator, Optional

from club import exceptions as errors
from club.config import Settings, settings as default_settings
from club.exceptions import LogParseError, LogValidationError
from club.models import (
    ArriveClient, ClubConfig, EventKind, InputEvent, LeaveClient, SitClient, WaitClient, WorkingHours,
)
from club.models.event import CLIENT_FIELD_COUNT
from club.models.working_hours import ONE_DAY
from club.utils.logger import get_logger

logger = get_logger(__name__)

_INTEGER = re.compile(r"[+-]?\d+")

_PAYLOADS = {
    EventKind.ARRIVE: ArriveClient,
    EventKind.WAIT: WaitClient,
    EventKind.LEAVE: LeaveClient,
}


def _to_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


class LogParser:
    def __init__(self, lines: Iterable[str], settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._lines: Iterator[str] = iter(lines)
        self._row = 0
        self._text = ""
        self._last_at: Optional[datetime] = None
        self._day_offset = timedelta(0)

    # ── Rows ──────────────────────────────────────────────────────────────
    def _next_row(self) -> bool:
        """Advance to the next row. The row counter moves even at end of input."""
        self._row += 1
        try:
            self._text = next(self._lines).rstrip("\r\n")
        except StopIteration:
            return False
        return True

    def _parse_error(self, message: str, cause: Optional[Exception] = None) -> LogParseError:
        return LogParseError(self._row, message, cause)

    def _validation_error(self, message: str) -> LogValidationError:
        return LogValidationError(self._row, message)

    # ── Header ────────────────────────────────────────────────────────────
    def read_config(self) -> ClubConfig:
        """Read the three header rows."""
        table_count = self._read_positive_int(
            errors.TABLES_COUNT_NOT_SPECIFIED, errors.TABLES_COUNT_INVALID_FORMAT,
        )
        hours = self._read_working_hours()
        price = self._read_positive_int(
            errors.PRICE_PER_HOUR_NOT_SPECIFIED, errors.PRICE_PER_HOUR_INVALID_FORMAT,
        )
        config = ClubConfig(table_count=table_count, price_per_hour=price, hours=hours)
        logger.info(
            f"[CONFIG] tables={table_count} price={price} "
            f"hours={hours.start:%H:%M}-{hours.end:%H:%M}"
        )
        return config

    def _read_positive_int(self, missing: str, malformed: str) -> int:
        if not self._next_row():
            raise self._parse_error(missing)
        try:
            value = _to_int(self._text)
        except ValueError as e:
            raise self._parse_error(malformed, e)
        if value <= 0:
            raise self._validation_error(errors.VALUE_MUST_BE_POSITIVE)
        return value

    def _read_working_hours(self) -> WorkingHours:
        if not self._next_row():
            raise self._parse_error(errors.WORKING_TIME_NOT_SPECIFIED)

        parts = self._text.split(self.settings.TIME_SEPARATOR)
        if len(parts) != 2:
            raise self._parse_error(errors.WORKING_TIME_INVALID_FORMAT)

        try:
            start = datetime.strptime(parts[0], self.settings.TIME_FORMAT)
        except ValueError as e:
            raise self._parse_error(errors.START_TIME_INVALID, e)
        try:
            end = datetime.strptime(parts[1], self.settings.TIME_FORMAT)
        except ValueError as e:
            raise self._parse_error(errors.END_TIME_INVALID, e)

        return WorkingHours.between(start, end)

    # ── Events ────────────────────────────────────────────────────────────
    def iter_events(self, config: ClubConfig) -> Iterator[InputEvent]:
        """Yield events one row at a time; raises on the first bad row."""
        while self._next_row():
            yield self._read_event(config)

    def _read_event(self, config: ClubConfig) -> InputEvent:
        count = self.settings.DISTINCT_EVENT_INFO_COUNT
        fields = self._text.split(self.settings.EVENT_INFO_SEPARATOR, count - 1)
        if len(fields) != count:
            raise self._parse_error(errors.EVENT_INVALID_FORMAT)
        time_text, kind_text, client_text = fields[0], fields[1], fields[-1]

        try:
            happens_at = datetime.strptime(time_text, self.settings.TIME_FORMAT)
        except ValueError as e:
            raise self._parse_error(errors.EVENT_TIME_INVALID, e)
        happens_at = self._in_sequence(happens_at, config.hours)

        kind = self._parse_kind(kind_text)
        client = self._parse_client(kind, client_text, config.table_count)
        return InputEvent(happens_at=happens_at, kind=kind, client=client)

    def _in_sequence(self, happens_at: datetime, hours: WorkingHours) -> datetime:
        """
        Place the event on the right day and check it does not go back in time.
        Only a club open past midnight may roll over, and only once.
        """
        moment = happens_at + self._day_offset
        if self._last_at is not None and moment < self._last_at:
            if not hours.wraps_midnight or self._day_offset:
                raise self._validation_error(errors.EVENT_OUT_OF_ORDER)
            self._day_offset = ONE_DAY
            moment = happens_at + ONE_DAY
        self._last_at = moment
        return moment

    def _parse_kind(self, text: str) -> EventKind:
        try:
            value = _to_int(text)
        except ValueError as e:
            raise self._parse_error(errors.EVENT_TYPE_INVALID, e)
        try:
            return EventKind(value)
        except ValueError:
            raise self._validation_error(errors.EVENT_TYPE_UNKNOWN)

    def _parse_client(self, kind: EventKind, text: str, table_count: int):
        content = text.split(self.settings.EVENT_INFO_SEPARATOR)
        if len(content) != CLIENT_FIELD_COUNT[kind]:
            raise self._parse_error(errors.CLIENT_DATA_INVALID_FORMAT)

        name = content[0]
        if kind == EventKind.SIT:
            try:
                table = _to_int(content[1])
            except ValueError as e:
                raise self._parse_error(errors.TABLE_NUMBER_INVALID, e)
            client = SitClient(name=name, table=table)
        else:
            client = _PAYLOADS[kind](name=name)

        reason = client.validate(table_count)
        if reason:
            raise self._validation_error(reason)
        return client
