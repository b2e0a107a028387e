"""
Rich-based CLI rendering for schedules, match results and standings.

This is the ONLY place where terminal output happens for the rotation CLI.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pickleharness.rotation import (
    Match,
    Participant,
    Round,
    Schedule,
    StandingEntry,
    StandingsOrdering,
)

console = Console(legacy_windows=False)


def display_lineup(event_name: str, participants: list[Participant], schedule: Schedule) -> None:
    names = "  •  ".join(p.name for p in participants)
    mode = f"{schedule.mode} mode" if schedule.mode else "full rotation"
    console.print()
    console.print(
        Panel(
            f"[bold]{event_name}[/]\n\n"
            f"[dim]Participants ({len(participants)}):[/]\n{names}\n\n"
            f"[dim]{mode}  •  Rounds: {schedule.total_rounds}  •  "
            f"Matches: {schedule.total_matches}  •  "
            f"{schedule.generated_at.strftime('%Y-%m-%d %H:%M:%S')}[/]",
            title="[bold green] Pickleball Rotation [/]",
            border_style="green",
            expand=False,
        )
    )


def display_round(round_: Round, total_rounds: int) -> None:
    console.print()
    console.rule(
        f"[bold]Round {round_.number} of {total_rounds}[/]",
        style="bright_blue",
    )
    console.print()

    table = Table(show_header=True, header_style="bold", border_style="dim", show_lines=False)
    table.add_column("Match", style="dim", width=8)
    table.add_column("Team A", min_width=20)
    table.add_column("", width=3, justify="center")
    table.add_column("Team B", min_width=20)
    table.add_column("Result", justify="center", width=8)

    for match in round_.matches:
        table.add_row(
            match.match_id,
            f"[bold]{match.team_a.name}[/]",
            "vs",
            f"[bold]{match.team_b.name}[/]",
            _result_cell(match),
        )

    console.print(table)
    sitting = [p.name for p in round_.byes] + [p.name for pair in round_.idle_pairs for p in pair.participants]
    if sitting:
        console.print(f"  [dim]Sitting out: {', '.join(sitting)}[/]")


def display_schedule(schedule: Schedule) -> None:
    for round_ in schedule.rounds:
        display_round(round_, schedule.total_rounds)
    if schedule.unplaced_pairs:
        names = ", ".join(p.name for p in schedule.unplaced_pairs)
        console.print(f"\n  [yellow]Not scheduled (no opponent pair): {names}[/]")
    console.print()


def display_match_result(match: Match) -> None:
    winner = match.winner
    if winner is None:
        console.print(f"  [yellow]•[/] {match.match_id} recorded without a winner")
        return
    if _is_rally(match):
        loser = match.team_b if winner is match.team_a else match.team_a
        detail = f"{winner.score}:{loser.score}"
    else:
        detail = f"{winner.games_won}:{winner.games_lost}, +{winner.points} pts"
    console.print(
        f"  [green]✓[/] [bold]{winner.name}[/] win {match.match_id}  [dim]({detail})[/]"
    )


def display_standings(
    standings: list[StandingEntry],
    title: str = "Standings",
    ordering: StandingsOrdering = "rotation",
) -> None:
    if not standings:
        return

    table = Table(
        title=title,
        show_header=True,
        header_style="bold",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Name", min_width=16)
    table.add_column("W", justify="center", width=4)
    table.add_column("L", justify="center", width=4)
    if ordering == "traditional":
        table.add_column("Score", justify="center", width=9)
    else:
        table.add_column("Pts", justify="right", width=5)
        table.add_column("Games", justify="center", width=7)
    table.add_column("Net", justify="right", width=5)
    table.add_column("Win %", justify="right", width=6)

    for entry in standings:
        style = "bold yellow" if entry.rank == 1 and entry.total_matches else ""
        if ordering == "traditional":
            middle = [f"{entry.total_score}-{entry.against_score}", f"{entry.net_score:+d}"]
        else:
            middle = [
                str(entry.total_points),
                f"{entry.games_won}-{entry.games_lost}",
                f"{entry.net_games:+d}",
            ]
        table.add_row(
            str(entry.rank),
            entry.participant.name,
            str(entry.wins),
            str(entry.losses),
            *middle,
            f"{entry.win_rate:.1f}",
            style=style,
        )

    console.print()
    console.print(table)
    console.print()


def _is_rally(match: Match) -> bool:
    return match.team_a.games_won + match.team_b.games_won == 0


def _result_cell(match: Match) -> str:
    if match.status == "completed":
        if _is_rally(match):
            return f"{match.team_a.score}:{match.team_b.score}"
        return f"{match.team_a.games_won}:{match.team_b.games_won}"
    if match.status == "in_progress":
        return "[yellow]live[/]"
    return "[dim]—[/]"
