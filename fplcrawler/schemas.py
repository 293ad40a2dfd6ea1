"""Pydantic schemas for config files and FPL API payloads."""

from pydantic import BaseModel, Field, field_validator

from .constants import DEFAULT_BACKOFF, DEFAULT_RETRIES, DEFAULT_TIMEOUT_SEC

# Log levels as written in the [app] section (0 = fatal ... 5 = debug)
LOG_LEVEL_FATAL = 0
LOG_LEVEL_DEBUG = 5
LOG_LEVEL_INFO = 4


class AppConfig(BaseModel):
    """[app] section of the config file."""

    loglevel: int = LOG_LEVEL_INFO
    directorytoexport: str = ''
    logdir: str = ''
    maxworkers: int = Field(default=0, ge=0)
    requesttimeout: float = Field(default=DEFAULT_TIMEOUT_SEC, gt=0)
    retries: int = Field(default=DEFAULT_RETRIES, ge=0, le=10)
    backoff: float = Field(default=DEFAULT_BACKOFF, ge=0)
    allpages: bool = True
    abortonerror: bool = False
    positionalrank: bool = False

    @field_validator('loglevel', mode='before')
    @classmethod
    def default_invalid_loglevel(cls, v):
        """Fall back to INFO for anything that is not a known level."""
        if isinstance(v, bool) or not isinstance(v, int):
            return LOG_LEVEL_INFO
        if v < LOG_LEVEL_FATAL or v > LOG_LEVEL_DEBUG:
            return LOG_LEVEL_INFO
        return v

    class Config:
        extra = 'forbid'


class FplConfig(BaseModel):
    """[fpl] section of the config file."""

    username: str = ''
    password: str = ''
    leagueids: list[str] = Field(default_factory=list)
    ignoreentries: list[int] = Field(default_factory=list)

    @field_validator('leagueids', mode='before')
    @classmethod
    def coerce_league_ids(cls, v):
        """League ids may be written as numbers or strings."""
        if isinstance(v, list):
            return [str(item) for item in v]
        return v

    class Config:
        extra = 'forbid'


class CrawlerConfig(BaseModel):
    """Complete config file structure."""

    app: AppConfig
    fpl: FplConfig

    @property
    def ignore_entries(self) -> frozenset[int]:
        return frozenset(self.fpl.ignoreentries)

    class Config:
        extra = 'allow'


class GameEvent(BaseModel):
    """One game week in bootstrap-static."""

    id: int
    is_current: bool = False


class GameMetadata(BaseModel):
    """bootstrap-static payload (only the fields the crawler reads)."""

    events: list[GameEvent] = Field(default_factory=list)

    def current_week(self) -> int:
        """Id of the current event, or 1 before the season starts."""
        for event in self.events:
            if event.is_current:
                return event.id
        return 1


class StandingsRow(BaseModel):
    """One entrant in a classic league standings page."""

    id: int
    entry: int
    entry_name: str = ''
    player_name: str = ''
    event_total: int = 0
    total: int = 0
    rank: int = 0


class LeagueInfo(BaseModel):
    id: int
    name: str = ''


class Standings(BaseModel):
    has_next: bool = False
    page: int = 1
    results: list[StandingsRow] = Field(default_factory=list)


class StandingsPage(BaseModel):
    """leagues-classic standings payload."""

    league: LeagueInfo
    standings: Standings


class HistoryEvent(BaseModel):
    """One game week of an entrant's history."""

    event: int
    points: int = 0
    event_transfers_cost: int = 0

    @property
    def net_points(self) -> int:
        return self.points - self.event_transfers_cost


class EntryHistory(BaseModel):
    """entry/{id}/history payload."""

    current: list[HistoryEvent] = Field(default_factory=list)
