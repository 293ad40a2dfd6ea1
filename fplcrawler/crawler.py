"""Per-league crawl: standings, concurrent history fetch, ranking, reports."""

import logging
from pathlib import Path

from .aggregator import SafeAggregator
from .client import FPLClient
from .config import worker_limit
from .constants import FINAL_REPORT_FILE, WEEKLY_REPORT_FILE
from .dispatcher import dispatch_entries
from .errors import DecodeError, TransportError
from .models import League, PartialFailure, RunSummary
from .ranking import rank_entries, scan_weekly_highest
from .report import format_final_report, format_weekly_report
from .schemas import CrawlerConfig
from .utils import save_text

logger = logging.getLogger('fplcrawler.crawler')


class ReportSink:
    """Logs report strings and optionally writes them to text files."""

    def __init__(self, export_dir: Path | str | None = None):
        self.export_dir = Path(export_dir) if export_dir else None

    def emit(self, league_id: str, weekly_report: str, final_report: str) -> None:
        logger.info(weekly_report)
        logger.info(final_report)

        if self.export_dir is None:
            return

        for template, text in (
            (WEEKLY_REPORT_FILE, weekly_report),
            (FINAL_REPORT_FILE, final_report),
        ):
            path = self.export_dir / template.format(league_id=league_id)
            try:
                save_text(path, text)
            except OSError as e:
                logger.critical(f'Can not write report {path}: {e}')


def crawl_league(
    client: FPLClient,
    league_id: str,
    current_week: int,
    config: CrawlerConfig,
    sink: ReportSink | None = None,
    failures: list[PartialFailure] | None = None,
) -> League | None:
    """
    Crawl one league and emit its weekly and final reports.

    Standings rows are fetched first (every page unless the config asks
    for page 1 only), then every entrant's history is fetched in parallel.
    Once all fetch tasks have finished the entries are ranked, scanned and
    rendered.

    Args:
        client: Authenticated FPL client
        league_id: League id as written in the config
        current_week: Last week to report
        config: Crawler config
        sink: Report destination (default: log only)
        failures: List that entry-level failures are appended to

    Returns:
        The ranked League, or None when no entry survived the fetch phase

    Raises:
        TransportError, DecodeError: If the standings can not be read, or
            an entry fails while ``abortonerror`` is set
    """
    sink = sink or ReportSink()

    info, rows = client.get_standings(league_id, all_pages=config.app.allpages)
    league = League(id=info.id, name=info.name)
    logger.debug(f'League {league_id} [{league.name}] has {len(rows)} standings rows')

    result = dispatch_entries(
        rows,
        client.get_entry_history,
        SafeAggregator(league),
        ignore_entries=config.ignore_entries,
        max_workers=worker_limit(config),
        abort_on_error=config.app.abortonerror,
    )
    if failures is not None:
        failures.extend(result.failures)

    if not league.entries:
        logger.warning(f'League {league_id} has no entries to report')
        return None

    # Weekly winners are listed in ranked order
    rank_entries(league.entries, positional=config.app.positionalrank)
    summaries = scan_weekly_highest(league.entries, current_week)

    sink.emit(
        league_id,
        format_weekly_report(league, summaries, current_week),
        format_final_report(league, current_week),
    )
    return league


def crawl(config: CrawlerConfig, client: FPLClient, sink: ReportSink | None = None) -> RunSummary:
    """
    Crawl every configured league, one at a time.

    The current week is read once; failing to read it is fatal. A league
    whose standings (or, with ``abortonerror``, any entry) can not be read
    is recorded as a PartialFailure and the run moves on.

    Raises:
        TransportError, DecodeError: If the game metadata can not be read
    """
    if sink is None:
        sink = ReportSink(config.app.directorytoexport or None)

    current_week = client.get_current_week()
    logger.info(f'Current week: {current_week}')

    summary = RunSummary(current_week=current_week)
    for league_id in config.fpl.leagueids:
        try:
            league = crawl_league(
                client, league_id, current_week, config, sink=sink, failures=summary.failures
            )
        except (TransportError, DecodeError) as e:
            logger.error(f'Skipping league {league_id}: {e}')
            summary.failures.append(
                PartialFailure('league', league_id, type(e).__name__, str(e))
            )
            continue

        if league is None:
            summary.skipped_leagues.append(league_id)
        else:
            summary.leagues.append(league)

    if summary.failures:
        logger.warning(f'{len(summary.failures)} failure(s) during crawl:')
        for failure in summary.failures:
            logger.warning(f'  - {failure}')

    return summary
