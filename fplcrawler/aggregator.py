"""Thread-safe accumulation of fetched entries into a league."""

import threading

from .models import Entry, League


class SafeAggregator:
    """
    Collects entries from concurrent fetch tasks into one League.

    Every append takes the same lock, so no append is lost and the final
    length equals the number of append() calls. Appends are kept in
    arrival order; callers must not rely on it. Excluded entries are
    filtered by the dispatcher before append() is called.
    """

    def __init__(self, league: League):
        self.league = league
        self._lock = threading.Lock()

    def append(self, entry: Entry) -> None:
        with self._lock:
            self.league.entries.append(entry)

    def snapshot(self) -> list[Entry]:
        """Copy of the entries collected so far."""
        with self._lock:
            return list(self.league.entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self.league.entries)
