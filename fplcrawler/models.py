"""Data models for the FPL crawler."""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class Entry:
    """One league participant's aggregated season record."""
    id: int
    entry_num: int  # account id, used for history lookup and exclusion
    entry_name: str
    player_name: str
    points: Dict[int, int] = field(default_factory=dict)  # week -> net score
    total: int = 0  # as reported by the standings, not summed from points
    rank: int = 0  # assigned by rank_entries()


@dataclass
class League:
    """A classic league and the entries fetched for it."""
    id: int
    name: str
    entries: List[Entry] = field(default_factory=list)


@dataclass
class WeekSummary:
    """Highest net score of one game week and the entries that scored it."""
    week: int
    highest: int = 0
    winners: List[Entry] = field(default_factory=list)


@dataclass
class PartialFailure:
    """A failure scoped to one league or one entry."""
    scope: str  # 'league' or 'entry'
    key: str
    kind: str
    message: str

    def __str__(self) -> str:
        return f'{self.scope} {self.key}: {self.kind}: {self.message}'


@dataclass
class RunSummary:
    """Outcome of a full crawl over every configured league."""
    current_week: int
    leagues: List[League] = field(default_factory=list)
    failures: List[PartialFailure] = field(default_factory=list)
    skipped_leagues: List[str] = field(default_factory=list)
