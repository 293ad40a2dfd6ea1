"""Text rendering of the weekly and final league reports."""

from .models import League, WeekSummary


def _header(league: League, current_week: int) -> str:
    return f'\n[{league.id}] {league.name}\nCurrent week: {current_week}'


def format_weekly_report(league: League, summaries: list[WeekSummary], current_week: int) -> str:
    """
    Render the highest score of each week and who scored it.

    Week detail lines are indented with a tab.

    Example output:

        [314] Office League
        Current week: 2
        - Week 1
            Highest point: 70
            + [Team B] Bob
    """
    lines = [_header(league, current_week)]
    for summary in summaries:
        lines.append(f'- Week {summary.week}')
        lines.append(f'\tHighest point: {summary.highest}')
        for entry in summary.winners:
            lines.append(f'\t+ [{entry.entry_name}] {entry.player_name}')
    return '\n'.join(lines)


def format_final_report(league: League, current_week: int) -> str:
    """Render the ranked entries of a league, in their current order."""
    lines = [_header(league, current_week)]
    for entry in league.entries:
        lines.append(
            f'+ Top {entry.rank:2d}: {entry.total}: [{entry.entry_name}] {entry.player_name}'
        )
    return '\n'.join(lines)
