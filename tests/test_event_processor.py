# tests/test_event_processor.py
"""Unit tests for the club state machine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import pytest
from datetime import datetime, timedelta
from club.exceptions import LogParseError
from club.models import (
    ArriveClient, ClubConfig, EventKind, InputEvent, LeaveClient, OutputKind, RevenueStats, SitClient,
    WaitClient, WorkingHours,
)
from club.services.event_processor import EventProcessor


def at(text):
    return datetime.strptime(text, "%H:%M")


def make_processor(tables=1, price=10, opens="10:00", closes="20:00", **kwargs):
    config = ClubConfig(
        table_count=tables,
        price_per_hour=price,
        hours=WorkingHours.between(at(opens), at(closes)),
    )
    return EventProcessor(config, **kwargs)


def arrive(time, name):
    return InputEvent(at(time), EventKind.ARRIVE, ArriveClient(name))


def sit(time, name, table):
    return InputEvent(at(time), EventKind.SIT, SitClient(name, table))


def wait(time, name):
    return InputEvent(at(time), EventKind.WAIT, WaitClient(name))


def leave(time, name):
    return InputEvent(at(time), EventKind.LEAVE, LeaveClient(name))


def rendered(events):
    return [e.render("%H:%M") for e in events]


def run(processor, *events):
    out = []
    for event in events:
        out.extend(processor.process(event))
    return out


class TestArrive:
    def test_before_opening(self):
        p = make_processor()
        assert rendered(p.process(arrive("09:00", "client1"))) == ["09:00 13 NotOpenYet"]
        assert "client1" not in p.clients

    def test_after_closing(self):
        p = make_processor()
        assert rendered(p.process(arrive("20:30", "client1"))) == ["20:30 13 NotOpenYet"]

    def test_at_opening_time(self):
        p = make_processor()
        assert p.process(arrive("10:00", "client1")) == []
        assert p.clients.get("client1") == (None, True)

    def test_already_present(self):
        p = make_processor()
        run(p, arrive("12:00", "client1"))
        assert rendered(p.process(arrive("12:05", "client1"))) == ["12:05 13 YouShallNotPass"]


class TestSit:
    def test_unknown_client(self):
        p = make_processor()
        assert rendered(p.process(sit("12:00", "client1", 1))) == ["12:00 13 ClientUnknown"]
        assert len(p.tables) == 0

    def test_sit_occupies_table(self):
        p = make_processor()
        out = run(p, arrive("12:00", "client1"), sit("12:00", "client1", 1))
        assert out == []
        assert p.clients.get("client1") == (1, True)
        seating, found = p.tables.get(1)
        assert found and seating.client.name == "client1" and seating.happens_at == at("12:00")

    def test_busy_table_rejected_twice_without_state_change(self):
        p = make_processor(tables=2)
        run(p, arrive("11:00", "client1"), sit("11:00", "client1", 1), arrive("11:10", "client2"))
        before = (p.clients.entries(), p.tables.entries())

        first = p.process(sit("11:20", "client2", 1))
        second = p.process(sit("11:20", "client2", 1))

        assert rendered(first) == rendered(second) == ["11:20 13 PlaceIsBusy"]
        assert (p.clients.entries(), p.tables.entries()) == before

    def test_own_table_is_busy(self):
        p = make_processor()
        run(p, arrive("11:00", "client1"), sit("11:00", "client1", 1))
        assert rendered(p.process(sit("11:30", "client1", 1))) == ["11:30 13 PlaceIsBusy"]

    def test_moving_bills_previous_table(self):
        p = make_processor(tables=2)
        out = run(p, arrive("11:00", "client1"), sit("11:00", "client1", 1), sit("11:30", "client1", 2))
        assert out == []
        assert 1 not in p.tables
        assert p.clients.get("client1") == (2, True)
        assert p.revenue.get(1) == (RevenueStats(income=10, usage=timedelta(minutes=30)), True)


class TestWait:
    def test_absent_client_with_free_tables(self):
        p = make_processor()
        assert rendered(p.process(wait("12:00", "client1"))) == ["12:00 13 ICanWaitNoLonger!"]
        assert "client1" not in p.clients

    def test_free_tables(self):
        p = make_processor(tables=2)
        run(p, arrive("11:00", "client1"), sit("11:00", "client1", 1), arrive("11:10", "client2"))
        assert rendered(p.process(wait("11:15", "client2"))) == ["11:15 13 ICanWaitNoLonger!"]
        assert len(p.waiting) == 0

    def test_enqueued_when_full(self):
        p = make_processor()
        out = run(p, arrive("11:00", "client1"), sit("11:00", "client1", 1),
                  arrive("11:10", "client2"), wait("11:15", "client2"))
        assert out == []
        assert list(p.waiting) == ["client2"]

    def test_full_queue_sends_client_away(self):
        p = make_processor()
        run(p, arrive("11:00", "client1"), sit("11:00", "client1", 1),
            arrive("11:10", "client2"), wait("11:15", "client2"), arrive("11:20", "client3"))

        out = p.process(wait("11:25", "client3"))

        assert rendered(out) == ["11:25 11 client3"]
        assert list(p.waiting) == ["client2"]
        assert "client3" in p.clients

    def test_queue_never_exceeds_table_count(self):
        p = make_processor(tables=2)
        run(p, arrive("11:00", "a"), sit("11:00", "a", 1), arrive("11:00", "b"), sit("11:00", "b", 2))
        for name in ("c", "d", "e", "f"):
            run(p, arrive("11:30", name), wait("11:31", name))
            assert len(p.waiting) <= 2
        assert list(p.waiting) == ["c", "d"]

    def test_waiting_twice_queues_once(self):
        p = make_processor(tables=2)
        run(p, arrive("10:00", "a"), sit("10:00", "a", 1), arrive("10:00", "b"), sit("10:00", "b", 2),
            arrive("10:10", "c"), wait("10:10", "c"))

        assert p.process(wait("10:20", "c")) == []
        assert list(p.waiting) == ["c"]

        run(p, leave("11:00", "a"), leave("12:00", "c"))
        out = p.process(leave("13:00", "b"))

        assert out == []
        assert "c" not in p.clients
        assert len(p.tables) == 0


class TestLeave:
    def test_unknown_client(self):
        p = make_processor()
        assert rendered(p.process(leave("12:00", "client1"))) == ["12:00 13 ClientUnknown"]

    def test_leave_without_table(self):
        p = make_processor()
        out = run(p, arrive("11:00", "client1"), leave("11:30", "client1"))
        assert out == []
        assert "client1" not in p.clients
        assert p.revenue_report() == []

    def test_leave_releases_and_bills(self):
        p = make_processor()
        run(p, arrive("11:00", "client1"), sit("11:00", "client1", 1), leave("13:00", "client1"))
        assert len(p.tables) == 0
        assert p.revenue_report() == [(1, RevenueStats(income=20, usage=timedelta(hours=2)))]

    def test_leave_seats_head_of_queue(self):
        p = make_processor()
        run(p, arrive("10:00", "client1"), sit("10:00", "client1", 1),
            arrive("10:30", "client2"), wait("10:31", "client2"))

        out = p.process(leave("12:00", "client1"))

        assert rendered(out) == ["12:00 12 client2 1"]
        assert p.clients.get("client2") == (1, True)
        assert p.tables.get(1)[0].happens_at == at("12:00")
        assert len(p.waiting) == 0

    def test_only_one_client_seated_per_leave(self):
        p = make_processor(tables=2)
        run(p, arrive("10:00", "a"), sit("10:00", "a", 1), arrive("10:00", "b"), sit("10:00", "b", 2),
            arrive("10:10", "c"), wait("10:10", "c"), arrive("10:20", "d"), wait("10:20", "d"))

        out = p.process(leave("11:00", "b"))

        assert rendered(out) == ["11:00 12 c 2"]
        assert list(p.waiting) == ["d"]

    def test_queued_client_who_left_is_readmitted_when_popped(self):
        p = make_processor()
        run(p, arrive("10:00", "client1"), sit("10:00", "client1", 1),
            arrive("10:30", "client2"), wait("10:31", "client2"), leave("10:45", "client2"))
        assert "client2" not in p.clients
        assert list(p.waiting) == ["client2"]

        out = p.process(leave("12:00", "client1"))

        assert rendered(out) == ["12:00 12 client2 1"]
        assert p.clients.get("client2") == (1, True)
        assert len(p.waiting) == 0

    def test_seated_successor_moves_to_freed_table(self):
        p = make_processor(tables=2)
        run(p, arrive("10:00", "a"), sit("10:00", "a", 1), arrive("10:00", "b"), sit("10:00", "b", 2),
            wait("10:30", "b"))
        assert list(p.waiting) == ["b"]

        out = p.process(leave("11:00", "a"))

        assert rendered(out) == ["11:00 12 b 1"]
        assert p.clients.get("b") == (1, True)
        assert 2 not in p.tables
        assert p.revenue.get(2) == (RevenueStats(income=10, usage=timedelta(hours=1)), True)

        p.close()
        assert len(p.clients) == 0 and len(p.tables) == 0
        assert p.revenue_report() == [
            (1, RevenueStats(income=100, usage=timedelta(hours=10))),
            (2, RevenueStats(income=10, usage=timedelta(hours=1))),
        ]


class TestClose:
    def test_scenario_single_table(self):
        p = make_processor()
        out = run(p, arrive("10:00", "client1"), sit("10:00", "client1", 1), arrive("10:30", "client2"),
                  wait("10:31", "client2"), leave("12:00", "client1"))
        assert rendered(out) == ["12:00 12 client2 1"]

        assert rendered(p.close()) == ["20:00 11 client2"]
        assert p.revenue_report() == [(1, RevenueStats(income=100, usage=timedelta(hours=10)))]

    def test_forced_leaves_are_sorted(self):
        p = make_processor(tables=3)
        for name, table in (("zed", 1), ("amy", 2), ("bob", 3)):
            run(p, arrive("11:00", name), sit("11:00", name, table))
        run(p, arrive("11:00", "carl"))

        names = [e.client.name for e in p.close()]

        assert names == sorted(names) == ["amy", "bob", "carl", "zed"]
        assert all(e.kind == OutputKind.CLIENT_LEFT for e in p.journal)
        assert len(p.clients) == 0 and len(p.tables) == 0

    def test_queued_client_leaves_once(self):
        p = make_processor()
        run(p, arrive("10:00", "client1"), sit("10:00", "client1", 1),
            arrive("10:30", "client2"), wait("10:31", "client2"))
        assert rendered(p.close()) == ["20:00 11 client1", "20:00 11 client2"]

    def test_queued_client_raw_echo_when_enabled(self):
        p = make_processor(echo_orphan_leaves=True)
        run(p, arrive("10:00", "client1"), sit("10:00", "client1", 1),
            arrive("10:30", "client2"), wait("10:31", "client2"))
        assert rendered(p.close()) == ["20:00 11 client1", "20:00 11 client2", "20:00 4 client2"]

    def test_closing_does_not_reseat_from_queue(self):
        p = make_processor()
        run(p, arrive("10:00", "client1"), sit("10:00", "client1", 1),
            arrive("10:30", "client2"), wait("10:31", "client2"))
        out = p.close()
        assert OutputKind.CLIENT_SAT not in [e.kind for e in out]
        assert p.revenue_report() == [(1, RevenueStats(income=100, usage=timedelta(hours=10)))]

    def test_round_trip_single_client(self):
        p = make_processor(tables=2, price=15)
        run(p, arrive("10:00", "client1"), sit("10:05", "client1", 2), leave("12:10", "client1"))
        assert p.close() == []
        assert p.revenue_report() == [(2, RevenueStats(income=45, usage=timedelta(hours=2, minutes=5)))]


class TestDrain:
    @pytest.mark.asyncio
    async def test_drain_echoes_and_closes(self):
        p = make_processor()
        queue = asyncio.Queue()
        for event in (arrive("09:00", "client1"), arrive("10:00", "client1"), sit("10:00", "client1", 1)):
            queue.put_nowait(event)
        queue.put_nowait(None)

        await p.drain(queue)

        assert rendered(p.journal) == [
            "09:00 1 client1",
            "09:00 13 NotOpenYet",
            "10:00 1 client1",
            "10:00 2 client1 1",
            "20:00 11 client1",
        ]

    @pytest.mark.asyncio
    async def test_drain_stops_on_error(self):
        p = make_processor()
        queue = asyncio.Queue()
        queue.put_nowait(arrive("10:00", "client1"))
        queue.put_nowait(LogParseError(5, "failed to parse event type"))
        queue.put_nowait(arrive("10:05", "client2"))

        with pytest.raises(LogParseError):
            await p.drain(queue)

        assert "client2" not in p.clients
        assert queue.qsize() == 1
