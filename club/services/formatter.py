# club/services/formatter.py
"""Turns a finished run into the text lines printed to the user."""

from typing import Iterable, List, Tuple

from club.config import Settings
from club.models import ClubConfig, RevenueStats


def render_journal(config: ClubConfig, journal: Iterable, settings: Settings) -> List[str]:
    """Opening time, every journal entry, closing time."""
    fmt, sep = settings.TIME_FORMAT, settings.EVENT_INFO_SEPARATOR
    lines = [config.hours.start.strftime(fmt)]
    lines.extend(entry.render(fmt, sep) for entry in journal)
    lines.append(config.hours.end.strftime(fmt))
    return lines


def render_report(report: Iterable[Tuple[int, RevenueStats]], settings: Settings) -> List[str]:
    sep = settings.EVENT_INFO_SEPARATOR
    return [sep.join((str(table), str(stats.income), stats.usage_text)) for table, stats in report]
