"""HTTP client for the Fantasy Premier League API.

This module centralizes HTTP concerns:
- A cookie-carrying requests.Session authenticated through the login form
- A fixed browser User-Agent (the API rejects unknown agents)
- An explicit urllib3 retry policy for transient errors (off by default)
- Typed helpers for the bootstrap, standings and history endpoints

Everything here raises the crawler's own error kinds so callers never see
requests exceptions.
"""

from __future__ import annotations

import logging
from typing import Iterator

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import (
    BOOTSTRAP_URL,
    DEFAULT_BACKOFF,
    DEFAULT_POOL_SIZE,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_SEC,
    HISTORY_URL,
    LOGIN_APP,
    LOGIN_REDIRECT_URI,
    LOGIN_URL,
    RETRY_STATUSES,
    STANDINGS_URL,
    USER_AGENT,
)
from .errors import AuthError, DecodeError, TransportError
from .schemas import CrawlerConfig, GameMetadata, LeagueInfo, StandingsPage, StandingsRow
from .utils import decode_payload

logger = logging.getLogger('fplcrawler.client')


def build_retry(retries: int = DEFAULT_RETRIES, backoff: float = DEFAULT_BACKOFF) -> Retry:
    """Retry policy for idempotent GETs; ``retries=0`` disables retrying."""
    return Retry(
        total=retries,
        connect=retries,
        read=retries,
        backoff_factor=backoff,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=('GET',),
        raise_on_status=False,
    )


class FPLClient:
    """Thin wrapper around requests.Session for the FPL API.

    One client is shared by every fetch task of a run; requests.Session is
    used read-only after login, so concurrent GETs are safe.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        retries: int = DEFAULT_RETRIES,
        backoff: float = DEFAULT_BACKOFF,
        pool_size: int = DEFAULT_POOL_SIZE,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})
        adapter = HTTPAdapter(
            pool_connections=pool_size,
            pool_maxsize=pool_size,
            max_retries=build_retry(retries, backoff),
        )
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)

    @classmethod
    def from_config(cls, config: CrawlerConfig, session: requests.Session | None = None) -> FPLClient:
        return cls(
            timeout=config.app.requesttimeout,
            retries=config.app.retries,
            backoff=config.app.backoff,
            pool_size=config.app.maxworkers or DEFAULT_POOL_SIZE,
            session=session,
        )

    def login(self, username: str, password: str) -> None:
        """Post the login form; the session keeps the resulting cookies.

        Raises AuthError if the request fails or the server answers with an
        error status.
        """
        logger.debug('Login...')
        try:
            r = self.session.post(
                LOGIN_URL,
                data={
                    'login': username,
                    'password': password,
                    'app': LOGIN_APP,
                    'redirect_uri': LOGIN_REDIRECT_URI,
                },
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            raise AuthError(f'Login failed: {e}') from e

    def fetch(self, url: str) -> bytes:
        """GET ``url`` and return the (already decompressed) body.

        Raises TransportError on connection problems, timeouts and non-2xx
        responses (after the retry policy is exhausted).
        """
        logger.debug(f'Fetch {url}')
        try:
            r = self.session.get(url, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f'GET {url} failed: {e}') from e
        return r.content

    def get_current_week(self) -> int:
        """Current game week from bootstrap-static (1 if none is current)."""
        payload = self.fetch(BOOTSTRAP_URL)
        metadata = decode_payload(payload, GameMetadata, source=BOOTSTRAP_URL)
        return metadata.current_week()

    def get_standings_page(self, league_id: str, page: int = 1) -> StandingsPage:
        url = STANDINGS_URL.format(league_id=league_id, page=page)
        return decode_payload(self.fetch(url), StandingsPage, source=url)

    def iter_standings(self, league_id: str, all_pages: bool = True) -> Iterator[StandingsPage]:
        """Yield standings pages, following ``has_next``.

        With ``all_pages=False`` only the first page is yielded and the rows
        on later pages are left out of the league.
        A page that does not advance past its predecessor raises DecodeError.
        """
        page = self.get_standings_page(league_id, 1)
        yield page
        if page.standings.has_next and not all_pages:
            logger.warning(
                f'League {league_id} has more standings pages; only page 1 is used'
            )
            return
        while page.standings.has_next:
            previous = page.standings.page
            page = self.get_standings_page(league_id, previous + 1)
            if page.standings.page <= previous:
                raise DecodeError(
                    f'Standings of league {league_id} did not advance past page {previous}'
                )
            yield page

    def get_standings(
        self, league_id: str, all_pages: bool = True
    ) -> tuple[LeagueInfo, list[StandingsRow]]:
        """League identity plus every standings row (see iter_standings)."""
        info = None
        rows: list[StandingsRow] = []
        for page in self.iter_standings(league_id, all_pages=all_pages):
            if info is None:
                info = page.league
            rows.extend(page.standings.results)
        return info, rows

    def get_entry_history(self, entry_num: int) -> bytes:
        """Raw history payload for one entrant; decoded by the dispatcher."""
        return self.fetch(HISTORY_URL.format(entry=entry_num))
