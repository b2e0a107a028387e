"""
Pickleball rotation — CLI entry point.

Usage:
    python rotation_main.py [config.yaml]

Wires together:
    config → roster → schedule → per-round score entry → standings display
"""

from __future__ import annotations

import sys
from pathlib import Path

from pickleharness.cli.display import (
    console,
    display_lineup,
    display_match_result,
    display_round,
    display_schedule,
    display_standings,
)
from pickleharness.cli.prompts import prompt_round_rally_scores, prompt_round_scores
from pickleharness.config import load_config
from pickleharness.errors import InvalidScoreError, PickleHarnessError
from pickleharness.store import EventStore


def _main(config_path: Path) -> None:
    try:
        config = load_config(config_path)
    except FileNotFoundError as exc:
        console.print(f"[red]Error:[/] {exc}")
        sys.exit(1)
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        sys.exit(1)

    event_cfg = config.event
    if not event_cfg.participants:
        console.print("[red]Config error:[/] event.participants is empty.")
        sys.exit(1)

    # ── Build the event and its schedule ─────────────────────────────── #
    store = EventStore()
    rotation = config.scoring.ordering == "rotation"
    event = store.create_event(
        event_cfg.name,
        rotation=rotation,
        rally_target=config.scoring.rally_target,
        handicap=config.scoring.handicap,
    )
    for participant in event_cfg.participants:
        store.register(event.event_id, participant)

    try:
        schedule = store.generate(event.event_id, mode=event_cfg.mode, randomize=event_cfg.randomize)
    except PickleHarnessError as exc:
        console.print(f"[red]Cannot build schedule:[/] {exc}")
        sys.exit(1)

    display_lineup(event_cfg.name, list(schedule.participants), schedule)
    display_schedule(schedule)

    # ── Play round by round ──────────────────────────────────────────── #
    ordering = config.scoring.ordering
    for round_ in schedule.rounds:
        display_round(round_, schedule.total_rounds)
        if rotation:
            for match in prompt_round_scores(round_):
                stored = store.record_game_score(
                    event.event_id,
                    match.match_id,
                    f"{match.team_a.games_won}:{match.team_a.games_lost}",
                    f"{match.team_b.games_won}:{match.team_b.games_lost}",
                )
                display_match_result(stored)
        else:
            for match, score_a, score_b in prompt_round_rally_scores(round_):
                stored = store.record_rally_score(event.event_id, match.match_id, score_a, score_b)
                if not stored.is_completed:
                    # Time called: the side ahead takes the match.
                    try:
                        stored = store.complete_match(event.event_id, match.match_id)
                    except InvalidScoreError as exc:
                        console.print(f"  [yellow]•[/] {exc}")
                        continue
                display_match_result(stored)
        display_standings(
            store.standings(event.event_id),
            title=f"Standings after Round {round_.number}",
            ordering=ordering,
        )

    console.rule("[bold green]Final standings[/]", style="green")
    display_standings(store.standings(event.event_id), title="Final Standings", ordering=ordering)


def main() -> None:
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.yaml")
    try:
        _main(config_path)
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped.[/]")
        sys.exit(130)


if __name__ == "__main__":
    main()
