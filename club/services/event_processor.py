# club/services/event_processor.py
"""
The club state machine.

A client's state is never stored explicitly, it follows from membership in
three stores:
  - clients:  name  → table number, or None while present without a table
  - tables:   table → the SIT event that occupied it (who and since when)
  - waiting:  FIFO of names waiting for a table
Revenue per table is accumulated on every release of that table.

Every input event is applied in arrival order. Rejections become ERROR output
events; nothing here raises for a business rule.
"""

import asyncio
from typing import List, Optional, Tuple, Union

from club.exceptions import ErrorCode
from club.models import (
    ClubConfig, EventKind, InputEvent, LeaveClient, OutputEvent, RevenueStats, SitClient, accrue,
)
from club.services.storage import KeyValueStore, WaitingQueue
from club.utils.logger import get_logger

logger = get_logger(__name__)

JournalEntry = Union[InputEvent, OutputEvent]


class EventProcessor:
    def __init__(
        self,
        config: ClubConfig,
        echo_orphan_leaves: bool = False,
        clients: Optional[KeyValueStore] = None,
        tables: Optional[KeyValueStore] = None,
        revenue: Optional[KeyValueStore] = None,
        waiting: Optional[WaitingQueue] = None,
    ):
        self.config = config
        self.echo_orphan_leaves = echo_orphan_leaves
        self.clients = clients if clients is not None else KeyValueStore()
        self.tables = tables if tables is not None else KeyValueStore()
        self.revenue = revenue if revenue is not None else KeyValueStore()
        self.waiting = waiting if waiting is not None else WaitingQueue()
        # Echoed input events and derived output events, in output order
        self.journal: List[JournalEntry] = []

    # ── Stream ────────────────────────────────────────────────────────────
    async def drain(self, events: asyncio.Queue):
        """
        Consume events until the producer sends None (end of stream), then run
        the closing procedure. An exception taken from the queue is re-raised
        as is and nothing more is processed.
        """
        while True:
            item = await events.get()
            if item is None:
                break
            if isinstance(item, Exception):
                logger.debug(f"[DRAIN] producer failed: {item}")
                raise item
            self.journal.append(item)
            self.process(item)
        self.close()

    def process(self, event: InputEvent) -> List[OutputEvent]:
        """Apply one input event. Returns the output events it produced."""
        start = len(self.journal)
        if event.kind == EventKind.ARRIVE:
            self._arrive(event)
        elif event.kind == EventKind.SIT:
            self._sit(event, announce=False)
        elif event.kind == EventKind.WAIT:
            self._wait(event)
        elif event.kind == EventKind.LEAVE:
            self._leave(event.client.name, event.happens_at, announce=False)
        return self.journal[start:]

    def close(self) -> List[OutputEvent]:
        """
        Closing time: every client still inside leaves, in name order.
        A queued name that is no longer present (it already left, or shows up
        a second time) finds nobody and is dropped, or echoed raw when
        echo_orphan_leaves is set.
        """
        start = len(self.journal)
        closing = self.config.hours.end

        names = [name for name, _ in self.clients.entries()]
        while len(self.waiting):
            names.append(self.waiting.pop())
        names.sort()

        for name in names:
            if name in self.clients:
                self._leave(name, closing, announce=True)
            elif self.echo_orphan_leaves:
                self.journal.append(InputEvent(closing, EventKind.LEAVE, LeaveClient(name)))

        logger.debug(f"[CLOSE] {len(names)} forced leaves at {closing:%H:%M}")
        return self.journal[start:]

    def revenue_report(self) -> List[Tuple[int, RevenueStats]]:
        """Revenue of every table that was billed at least once, by table number."""
        report = []
        for table in range(1, self.config.table_count + 1):
            stats, found = self.revenue.get(table)
            if found:
                report.append((table, stats))
        return report

    # ── Transitions ───────────────────────────────────────────────────────
    def _arrive(self, event: InputEvent):
        name = event.client.name
        if not self.config.hours.contains(event.happens_at):
            self._reject(event, ErrorCode.NOT_OPEN_YET)
            return
        if name in self.clients:
            self._reject(event, ErrorCode.ALREADY_PRESENT)
            return
        self.clients.set(name, None)

    def _sit(self, event: InputEvent, announce: bool):
        client: SitClient = event.client
        if client.name not in self.clients:
            self._reject(event, ErrorCode.UNKNOWN_CLIENT)
            return
        if client.table in self.tables:
            self._reject(event, ErrorCode.TABLE_BUSY)
            return

        current, _ = self.clients.get(client.name)
        if current is not None:
            self._release(current, event.happens_at)

        self.tables.set(client.table, event)
        self.clients.set(client.name, client.table)
        logger.debug(f"[SIT] {client.name} → table {client.table}")

        if announce:
            self._emit(OutputEvent.client_sat(event.happens_at, client))

    def _wait(self, event: InputEvent):
        name = event.client.name
        if len(self.tables) < self.config.table_count:
            self._reject(event, ErrorCode.CANNOT_WAIT_LONGER)
            return
        if len(self.waiting) >= self.config.table_count:
            # Queue is full: the client gives up. They stay registered as present.
            self._emit(OutputEvent.client_left(event.happens_at, event.client))
            return
        if name in self.waiting:
            logger.debug(f"[WAIT] {name} already queued")
            return
        self.waiting.push(name)

    def _leave(self, name: str, happens_at, announce: bool):
        table, found = self.clients.get(name)
        if not found:
            self._emit(OutputEvent.rejected(happens_at, ErrorCode.UNKNOWN_CLIENT))
            return

        self.clients.delete(name)
        if announce:
            self._emit(OutputEvent.client_left(happens_at, LeaveClient(name)))

        if table is None:
            return

        self._release(table, happens_at)

        # Hand the freed table to the head of the queue; one client per leave
        if len(self.waiting):
            successor = self.waiting.pop()
            # A seated successor moves (and is billed for the old table)
            if successor not in self.clients:
                self.clients.set(successor, None)
            seat = InputEvent(happens_at, EventKind.SIT, SitClient(successor, table))
            self._sit(seat, announce=True)

    def _release(self, table: int, released_at):
        seating, found = self.tables.get(table)
        if not found:
            return
        stats, found = self.revenue.get(table)
        if not found:
            stats = RevenueStats()
        stats = accrue(stats, seating.happens_at, released_at, self.config.price_per_hour)
        self.revenue.set(table, stats)
        self.tables.delete(table)
        logger.debug(f"[RELEASE] table {table} by {seating.client.name}: {stats}")

    # ── Output ────────────────────────────────────────────────────────────
    def _reject(self, event: InputEvent, error: ErrorCode):
        logger.debug(f"[REJECT] {event.kind.name} {event.client}: {error.value}")
        self._emit(OutputEvent.rejected(event.happens_at, error))

    def _emit(self, output: OutputEvent):
        self.journal.append(output)
