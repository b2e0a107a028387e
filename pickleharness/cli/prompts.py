"""
Interactive score entry for the rotation CLI.

Follows the prompt pattern of the line-up selector: one question per match,
blank input skips, invalid input is reported and asked again.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Prompt

from pickleharness.errors import InvalidScoreError
from pickleharness.rotation import Match, Round, record_score

console = Console(legacy_windows=False)


def prompt_round_scores(round_: Round) -> list[Match]:
    """
    Ask for a best-of-3 result for every match in the round.

    Scores are entered from team A's point of view ("2:1" means team A won
    two games to one).  Returns the matches that were scored.
    """
    scored: list[Match] = []
    for match in round_.matches:
        completed = prompt_match_score(match)
        if completed is not None:
            scored.append(completed)
    return scored


def prompt_match_score(match: Match) -> Match | None:
    label = f"  {match.match_id}  {match.team_a.name} vs {match.team_b.name}"
    while True:
        raw = Prompt.ask(f"{label} [dim](e.g. 2:1, Enter to skip)[/]", default="", show_default=False)
        raw = raw.strip()
        if raw == "":
            return None
        try:
            won, lost = (part.strip() for part in raw.split(":", 1))
            return record_score(match, f"{won}:{lost}", f"{lost}:{won}")
        except ValueError:
            console.print('  [red]Enter the score as "won:lost", e.g. 2:0.[/]')
        except InvalidScoreError as exc:
            console.print(f"  [red]{exc}[/]")


def prompt_round_rally_scores(round_: Round) -> list[tuple[Match, int, int]]:
    """Ask for a rally score ("11:7", team A first) for every match in the round."""
    scored: list[tuple[Match, int, int]] = []
    for match in round_.matches:
        score = prompt_rally_score(match)
        if score is not None:
            scored.append((match, *score))
    return scored


def prompt_rally_score(match: Match) -> tuple[int, int] | None:
    label = f"  {match.match_id}  {match.team_a.name} vs {match.team_b.name}"
    while True:
        raw = Prompt.ask(f"{label} [dim](rally score e.g. 11:7, Enter to skip)[/]", default="", show_default=False)
        raw = raw.strip()
        if raw == "":
            return None
        try:
            score_a, score_b = (int(part.strip()) for part in raw.split(":", 1))
        except ValueError:
            console.print('  [red]Enter the score as "teamA:teamB", e.g. 11:7.[/]')
            continue
        if score_a < 0 or score_b < 0:
            console.print("  [red]Scores cannot be negative.[/]")
            continue
        return score_a, score_b
