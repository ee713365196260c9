# club/services/club_runner.py
"""
Runs one log end to end.

The header is read synchronously since everything else depends on it. Events
are then produced by a separate task into a bounded asyncio.Queue and drained
by the EventProcessor, strictly in order:

    producer ──(InputEvent … None | LogError)──▶ EventProcessor.drain

The producer blocks while the queue is full. The first parse failure stops
the run; the lines already processed are discarded along with it.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from club.config import Settings, settings as default_settings
from club.exceptions import LogError
from club.models import ClubConfig, RevenueStats
from club.services.event_parser import LogParser
from club.services.event_processor import EventProcessor
from club.services.formatter import render_journal, render_report
from club.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RunResult:
    config: ClubConfig
    lines: List[str] = field(default_factory=list)          # opening time … closing time
    report: List[Tuple[int, RevenueStats]] = field(default_factory=list)
    report_lines: List[str] = field(default_factory=list)

    @property
    def output(self) -> List[str]:
        return self.lines + self.report_lines


async def _produce(parser: LogParser, config: ClubConfig, queue: asyncio.Queue):
    """Push every event, then None; or push the first LogError and stop."""
    try:
        for event in parser.iter_events(config):
            await queue.put(event)
    except LogError as e:
        logger.info(f"[PARSE] run aborted: {e}")
        await queue.put(e)
        return
    except Exception as e:
        logger.error(f"[PARSE] unexpected producer failure: {e}", exc_info=True)
        await queue.put(e)
        return
    await queue.put(None)


async def replay(lines: Iterable[str], settings: Optional[Settings] = None) -> RunResult:
    """Parse and process a whole log. Raises LogError on the first bad row."""
    settings = settings or default_settings
    parser = LogParser(lines, settings)
    config = parser.read_config()

    processor = EventProcessor(config, echo_orphan_leaves=settings.ECHO_ORPHAN_LEAVES)
    queue: asyncio.Queue = asyncio.Queue(maxsize=settings.EVENTS_QUEUE_SIZE)

    producer = asyncio.create_task(_produce(parser, config, queue), name="log-producer")
    try:
        await processor.drain(queue)
    finally:
        producer.cancel()
        await asyncio.gather(producer, return_exceptions=True)

    report = processor.revenue_report()
    result = RunResult(
        config=config,
        lines=render_journal(config, processor.journal, settings),
        report=report,
        report_lines=render_report(report, settings),
    )
    logger.info(f"[RUN] {len(processor.journal)} journal entries, {len(report)} billed tables")
    return result


def run_log(lines: Iterable[str], settings: Optional[Settings] = None) -> RunResult:
    """Blocking wrapper around replay() for callers without an event loop."""
    return asyncio.run(replay(lines, settings))
