"""Integration tests for the league crawl and the CLI."""

import json
import logging
from unittest.mock import patch

import pytest

import fantasypl_crawler
from fplcrawler.crawler import ReportSink, crawl, crawl_league
from fplcrawler.errors import AuthError, DecodeError, TransportError
from fplcrawler.schemas import CrawlerConfig, LeagueInfo, StandingsRow


def history(*weeks: tuple[int, int, int]) -> bytes:
    return json.dumps({
        'current': [
            {'event': e, 'points': p, 'event_transfers_cost': c} for e, p, c in weeks
        ]
    }).encode()


class FakeClient:
    """Stands in for FPLClient with canned leagues and histories."""

    def __init__(self, current_week=3, leagues=None, histories=None, broken_leagues=()):
        self.current_week = current_week
        self.leagues = leagues or {}
        self.histories = histories or {}
        self.broken_leagues = set(broken_leagues)
        self.standings_calls = []

    def get_current_week(self):
        if self.current_week is None:
            raise TransportError('GET bootstrap-static failed')
        return self.current_week

    def get_standings(self, league_id, all_pages=True):
        self.standings_calls.append((league_id, all_pages))
        if league_id in self.broken_leagues:
            raise DecodeError(f'Invalid JSON in standings of {league_id}')
        name, rows = self.leagues[league_id]
        return LeagueInfo(id=int(league_id), name=name), rows

    def get_entry_history(self, entry_num):
        payload = self.histories[entry_num]
        if isinstance(payload, Exception):
            raise payload
        return payload


def row(entry: int, name: str, player: str, total: int) -> StandingsRow:
    return StandingsRow(id=entry, entry=entry, entry_name=name, player_name=player, total=total)


@pytest.fixture
def fake_client():
    return FakeClient(
        current_week=3,
        leagues={
            '314': ('Office League', [
                row(101, 'A Team', 'Alice', 200),
                row(102, 'B Team', 'Bob', 180),
                row(103, 'C Team', 'Carol', 150),
            ]),
            '2718': ('Family', [
                row(201, 'D Team', 'Dan', 90),
            ]),
        },
        histories={
            101: history((1, 60, 0), (2, 70, 0), (3, 80, 0)),
            102: history((1, 64, 4), (2, 60, 0), (3, 60, 0)),
            103: history((1, 50, 0), (2, 50, 0), (3, 50, 0)),
            201: history((1, 30, 0), (2, 30, 0), (3, 30, 0)),
        },
    )


def make_config(tmp_path, **app) -> CrawlerConfig:
    return CrawlerConfig.model_validate({
        'app': {'directorytoexport': str(tmp_path / 'reports'), **app},
        'fpl': {'leagueids': ['314', '2718'], 'ignoreentries': [103]},
    })


class TestReportSink:
    """Tests for the report output sink."""

    @pytest.mark.parametrize('as_str', [True, False])
    def test_export_dir_accepts_str_or_path(self, tmp_path, as_str):
        export_dir = str(tmp_path / 'out') if as_str else tmp_path / 'out'

        ReportSink(export_dir).emit('314', 'weekly', 'final')

        assert (tmp_path / 'out' / '314-weekly.txt').read_text(encoding='utf-8') == 'weekly'
        assert (tmp_path / 'out' / '314-final.txt').read_text(encoding='utf-8') == 'final'

    def test_no_export_dir_writes_nothing(self, tmp_path):
        sink = ReportSink(None)
        sink.emit('314', 'weekly', 'final')

        assert sink.export_dir is None
        assert list(tmp_path.iterdir()) == []


class TestCrawlLeague:
    """Tests for crawl_league."""

    def test_reports_written(self, tmp_path, fake_client):
        """Weekly and final reports land in the export directory."""
        config = make_config(tmp_path)

        league = crawl_league(
            fake_client, '314', 3, config, sink=ReportSink(tmp_path / 'reports')
        )

        assert [e.entry_num for e in league.entries] == [101, 102]
        assert [e.rank for e in league.entries] == [1, 2]

        weekly = (tmp_path / 'reports' / '314-weekly.txt').read_text(encoding='utf-8')
        final = (tmp_path / 'reports' / '314-final.txt').read_text(encoding='utf-8')
        assert weekly == (
            '\n[314] Office League\nCurrent week: 3'
            '\n- Week 1\n\tHighest point: 60\n\t+ [A Team] Alice\n\t+ [B Team] Bob'
            '\n- Week 2\n\tHighest point: 70\n\t+ [A Team] Alice'
            '\n- Week 3\n\tHighest point: 80\n\t+ [A Team] Alice'
        )
        assert final == (
            '\n[314] Office League\nCurrent week: 3'
            '\n+ Top  1: 200: [A Team] Alice'
            '\n+ Top  2: 180: [B Team] Bob'
        )

    def test_ignored_entry_not_reported(self, tmp_path, fake_client):
        """Excluded entrants appear in neither report."""
        crawl_league(fake_client, '314', 3, make_config(tmp_path), sink=ReportSink(tmp_path))

        for name in ('314-weekly.txt', '314-final.txt'):
            assert 'Carol' not in (tmp_path / name).read_text(encoding='utf-8')

    def test_empty_league_is_skipped(self, tmp_path, fake_client):
        """A league with no entries left produces no report."""
        config = CrawlerConfig.model_validate({
            'app': {}, 'fpl': {'leagueids': ['2718'], 'ignoreentries': [201]},
        })

        league = crawl_league(fake_client, '2718', 3, config, sink=ReportSink(tmp_path))

        assert league is None
        assert list(tmp_path.iterdir()) == []

    def test_page_policy_passed_to_client(self, tmp_path, fake_client):
        """allpages = false asks the client for page 1 only."""
        config = make_config(tmp_path, allpages=False)

        crawl_league(fake_client, '2718', 3, config, sink=ReportSink())

        assert fake_client.standings_calls == [('2718', False)]

    @pytest.mark.parametrize('positional, ranks', [(False, [1, 1, 2]), (True, [1, 1, 3])])
    def test_rank_numbering_from_config(self, tmp_path, positional, ranks):
        """positionalrank switches tied totals from dense to positional numbering."""
        client = FakeClient(
            current_week=1,
            leagues={'42': ('Ties', [
                row(1, 'One', 'Ann', 100),
                row(2, 'Two', 'Ben', 100),
                row(3, 'Three', 'Cid', 90),
            ])},
            histories={n: history((1, 10, 0)) for n in (1, 2, 3)},
        )
        config = make_config(tmp_path, positionalrank=positional)

        league = crawl_league(client, '42', 1, config, sink=ReportSink(tmp_path))

        assert [e.rank for e in league.entries] == ranks
        final = (tmp_path / '42-final.txt').read_text(encoding='utf-8')
        assert final.endswith(f'+ Top {ranks[2]:2d}: 90: [Three] Cid')


class TestCrawl:
    """Tests for the full crawl over every league."""

    def test_all_leagues_reported(self, tmp_path, fake_client):
        summary = crawl(make_config(tmp_path), fake_client)

        assert summary.current_week == 3
        assert [league.id for league in summary.leagues] == [314, 2718]
        assert summary.failures == []
        assert sorted(p.name for p in (tmp_path / 'reports').iterdir()) == [
            '2718-final.txt', '2718-weekly.txt', '314-final.txt', '314-weekly.txt',
        ]

    def test_broken_league_does_not_stop_the_run(self, tmp_path, fake_client):
        """A league whose standings fail is recorded and skipped."""
        fake_client.broken_leagues.add('314')

        summary = crawl(make_config(tmp_path), fake_client)

        assert [league.id for league in summary.leagues] == [2718]
        assert len(summary.failures) == 1
        assert summary.failures[0].scope == 'league'
        assert summary.failures[0].key == '314'

    def test_failed_entry_recorded_in_summary(self, tmp_path, fake_client):
        """An entry failure drops only that entrant."""
        fake_client.histories[102] = TransportError('GET history of 102 failed')

        summary = crawl(make_config(tmp_path), fake_client)

        office = summary.leagues[0]
        assert [e.entry_num for e in office.entries] == [101]
        assert [(f.scope, f.key) for f in summary.failures] == [('entry', '102')]

    def test_abort_on_error_skips_whole_league(self, tmp_path, fake_client):
        """With abortonerror one failed entry fails its league."""
        fake_client.histories[102] = TransportError('GET history of 102 failed')

        summary = crawl(make_config(tmp_path, abortonerror=True), fake_client)

        assert [league.id for league in summary.leagues] == [2718]
        assert [(f.scope, f.key) for f in summary.failures] == [('league', '314')]

    def test_empty_league_listed_as_skipped(self, tmp_path, fake_client):
        config = CrawlerConfig.model_validate({
            'app': {}, 'fpl': {'leagueids': ['314', '2718'], 'ignoreentries': [201]},
        })

        summary = crawl(config, fake_client, sink=ReportSink())

        assert summary.skipped_leagues == ['2718']

    def test_metadata_failure_is_fatal(self, tmp_path, fake_client):
        fake_client.current_week = None

        with pytest.raises(TransportError):
            crawl(make_config(tmp_path), fake_client)


class TestCli:
    """Tests for the fantasypl_crawler entry point."""

    @pytest.fixture(autouse=True)
    def reset_logging(self):
        yield
        logging.getLogger('fplcrawler').handlers = []

    @pytest.fixture
    def config_file(self, tmp_path):
        path = tmp_path / 'crawler.conf'
        path.write_text(
            '[app]\nloglevel = 5\ndirectorytoexport = "%s"\n'
            '[fpl]\nusername = "u"\npassword = "p"\nleagueids = ["314"]\n'
            % (tmp_path / 'out').as_posix(),
            encoding='utf-8',
        )
        return path

    def test_success_exit_code(self, config_file, fake_client, tmp_path):
        fake_client.login = lambda username, password: None
        with patch.object(fantasypl_crawler.FPLClient, 'from_config', return_value=fake_client):
            code = fantasypl_crawler.main(['-c', str(config_file)])

        assert code == 0
        assert (tmp_path / 'out' / '314-final.txt').exists()

    def test_missing_config_exit_code(self, tmp_path):
        code = fantasypl_crawler.main(['-c', str(tmp_path / 'missing.conf')])

        assert code == 1

    def test_non_utf8_config_exit_code(self, tmp_path):
        """A config file that is not UTF-8 exits 1 instead of raising."""
        path = tmp_path / 'crawler.conf'
        path.write_bytes(b'[app]\n[fpl]\nusername = "\xff"\n')

        code = fantasypl_crawler.main(['-c', str(path)])

        assert code == 1

    def test_auth_failure_exit_code(self, config_file, fake_client):
        def fail_login(username, password):
            raise AuthError('Login failed: 403')

        fake_client.login = fail_login
        with patch.object(fantasypl_crawler.FPLClient, 'from_config', return_value=fake_client):
            code = fantasypl_crawler.main(['--config', str(config_file)])

        assert code == 1
