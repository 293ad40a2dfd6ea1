"""Concurrent retrieval of per-entrant histories."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Sequence

from .aggregator import SafeAggregator
from .errors import DecodeError, TransportError
from .models import Entry, PartialFailure
from .schemas import EntryHistory, StandingsRow
from .utils import decode_payload

logger = logging.getLogger('fplcrawler.dispatcher')

# Terminal states of one fetch unit (failures are raised instead)
APPENDED = 'appended'
FILTERED = 'filtered'
CANCELLED = 'cancelled'

HistoryFetcher = Callable[[int], Any]


@dataclass
class DispatchResult:
    """What happened to each standings row of one dispatch."""
    appended: int = 0
    filtered: list[int] = field(default_factory=list)
    cancelled: int = 0
    failures: list[PartialFailure] = field(default_factory=list)


def build_entry(row: StandingsRow, history: EntryHistory) -> Entry:
    """
    Build an Entry from a standings row and its decoded history.

    Each history week becomes ``points[event] = points - transfers cost``.
    The total comes from the standings row as-is.
    """
    return Entry(
        id=row.id,
        entry_num=row.entry,
        entry_name=row.entry_name,
        player_name=row.player_name,
        points={h.event: h.net_points for h in history.current},
        total=row.total,
    )


def dispatch_entries(
    rows: Sequence[StandingsRow],
    fetch_history: HistoryFetcher,
    aggregator: SafeAggregator,
    ignore_entries: Iterable[int] = (),
    max_workers: int | None = None,
    abort_on_error: bool = False,
) -> DispatchResult:
    """
    Fetch every row's history in parallel and aggregate the entries.

    One task is submitted per row. Rows whose entry number is in
    ``ignore_entries`` end without a fetch and never reach the aggregator.
    A TransportError or DecodeError ends only its own task and is recorded
    as a PartialFailure.

    With ``abort_on_error`` the first failure cancels the tasks that have
    not started, running tasks stop before publishing their entry, and the
    first failure's error kind is raised once every task has finished.

    The call returns only after all tasks reached a terminal state, so the
    aggregated league is complete when it is read.

    Args:
        rows: Standings rows to fetch
        fetch_history: Callable taking an entry number and returning the
            history payload (bytes, str, mapping, or EntryHistory)
        aggregator: Destination for built entries
        ignore_entries: Entry numbers to drop
        max_workers: Optional cap on concurrent tasks (default: one per row)
        abort_on_error: Treat any failure as fatal for the whole dispatch

    Returns:
        DispatchResult with counts and the recorded failures
    """
    result = DispatchResult()
    if not rows:
        return result

    ignored = frozenset(ignore_entries)
    cancel = threading.Event()
    first_error: TransportError | DecodeError | None = None
    workers = len(rows) if not max_workers else max(1, min(max_workers, len(rows)))

    def fetch_one(row: StandingsRow) -> str:
        if row.entry in ignored:
            return FILTERED
        if cancel.is_set():
            return CANCELLED
        payload = fetch_history(row.entry)
        history = decode_payload(payload, EntryHistory, source=f'history of entry {row.entry}')
        entry = build_entry(row, history)
        if cancel.is_set():
            return CANCELLED
        aggregator.append(entry)
        return APPENDED

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='fetch') as executor:
        future_to_row = {executor.submit(fetch_one, row): row for row in rows}
        for future in as_completed(future_to_row):
            row = future_to_row[future]
            if future.cancelled():
                result.cancelled += 1
                continue
            try:
                outcome = future.result()
            except (TransportError, DecodeError) as e:
                if first_error is None:
                    first_error = e
                failure = PartialFailure('entry', str(row.entry), type(e).__name__, str(e))
                logger.error(f'Skipping entry {row.entry} [{row.entry_name}]: {e}')
                result.failures.append(failure)
                if abort_on_error and not cancel.is_set():
                    cancel.set()
                    for pending in future_to_row:
                        pending.cancel()
                continue

            if outcome == APPENDED:
                result.appended += 1
            elif outcome == FILTERED:
                logger.debug(f'Entry {row.entry} is ignored')
                result.filtered.append(row.entry)
            else:
                result.cancelled += 1

    if abort_on_error and first_error is not None:
        first = result.failures[0]
        raise type(first_error)(
            f'{len(result.failures)} of {len(rows)} entries failed, first: {first}'
        ) from first_error

    return result
