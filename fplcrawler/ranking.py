"""Weekly highest-score scan and cumulative ranking."""

from .models import Entry, WeekSummary


def scan_weekly_highest(entries: list[Entry], current_week: int) -> list[WeekSummary]:
    """
    Find the highest net score of every week up to the current week.

    An entry without a score for a week did not play it and is left out
    of that week. The highest score never drops below 0, so a week with
    no data (or only negative scores) reports 0 and no winners.

    Args:
        entries: Entries of one league
        current_week: Last week to scan (inclusive)

    Returns:
        One WeekSummary per week from 1 to current_week; winners keep the
        order of ``entries``
    """
    summaries = []
    for week in range(1, current_week + 1):
        played = [(e, e.points[week]) for e in entries if week in e.points]
        highest = max((p for _, p in played), default=0)
        highest = max(highest, 0)
        winners = [e for e, p in played if p == highest]
        summaries.append(WeekSummary(week=week, highest=highest, winners=winners))
    return summaries


def rank_entries(entries: list[Entry], positional: bool = False) -> list[Entry]:
    """
    Sort entries by total (highest first) and assign ranks in place.

    The sort is stable: entries with equal totals keep their relative
    order. Equal totals share a rank. By default the next distinct total
    takes the next rank (100, 100, 90 -> 1, 1, 2); with ``positional``
    it takes its 1-based position instead (1, 1, 3).

    Returns:
        The same list, sorted and ranked
    """
    entries.sort(key=lambda e: e.total, reverse=True)

    previous = None
    for position, entry in enumerate(entries, 1):
        if previous is None:
            entry.rank = 1
        elif entry.total == previous.total:
            entry.rank = previous.rank
        elif positional:
            entry.rank = position
        else:
            entry.rank = previous.rank + 1
        previous = entry

    return entries
