from .models import Entry, League, WeekSummary, PartialFailure, RunSummary
from .errors import CrawlerError, ConfigError, AuthError, TransportError, DecodeError
from .config import load_config
from .client import FPLClient
from .aggregator import SafeAggregator
from .dispatcher import DispatchResult, build_entry, dispatch_entries
from .ranking import scan_weekly_highest, rank_entries
from .report import format_weekly_report, format_final_report
from .crawler import ReportSink, crawl, crawl_league

__all__ = [
    # Models
    'Entry',
    'League',
    'WeekSummary',
    'PartialFailure',
    'RunSummary',
    # Errors
    'CrawlerError',
    'ConfigError',
    'AuthError',
    'TransportError',
    'DecodeError',
    # Config
    'load_config',
    # HTTP
    'FPLClient',
    # Fetch and aggregate
    'SafeAggregator',
    'DispatchResult',
    'build_entry',
    'dispatch_entries',
    # Scan and rank
    'scan_weekly_highest',
    'rank_entries',
    # Reports
    'format_weekly_report',
    'format_final_report',
    'ReportSink',
    'crawl',
    'crawl_league',
]
