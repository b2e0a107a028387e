"""
Configuration loading from config.yaml.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from pickleharness.rotation.base import HandicapRules, Participant, SpecialMode, StandingsOrdering
from pickleharness.rotation.pairs import SPECIAL_MODE_TARGETS
from pickleharness.rotation.scheduler import MAX_PARTICIPANTS, MIN_PARTICIPANTS


@dataclass
class EventConfig:
    name: str = "Rotation"
    mode: SpecialMode | None = None       # 6/7 players only
    randomize: bool = True
    participants: list[Participant] = field(default_factory=list)


@dataclass
class ScoringConfig:
    rally_target: int = 11                # traditional scoring: first to N, win by 2
    ordering: StandingsOrdering = "rotation"
    handicap: HandicapRules = field(default_factory=HandicapRules)   # rally scores only


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "./logs/pickleharness.log"
    log_level: str = "INFO"


@dataclass
class Config:
    event: EventConfig = field(default_factory=EventConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @property
    def log_path(self) -> Path:
        return Path(self.server.log_file)


def load_config(path: str | Path = "config.yaml") -> Config:
    """
    Load and validate config.yaml.

    Raises:
        FileNotFoundError: config.yaml is missing.
        ValueError: required fields are absent or invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to config.yaml and list your participants."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return parse_config(raw)


def parse_config(raw: dict) -> Config:
    """Build a Config from an already-parsed mapping (e.g. yaml.safe_load output)."""
    try:
        event_raw = raw.get("event") or {}
        participants = [
            _parse_participant(p, i) for i, p in enumerate(event_raw.get("participants") or [], 1)
        ]
        event_cfg = EventConfig(
            name=str(event_raw.get("name", "Rotation")),
            mode=event_raw.get("mode"),
            randomize=bool(event_raw.get("randomize", True)),
            participants=participants,
        )

        scoring_raw = raw.get("scoring") or {}
        scoring_cfg = ScoringConfig(
            rally_target=int(scoring_raw.get("rally_target", 11)),
            ordering=scoring_raw.get("ordering", "rotation"),
            handicap=_parse_handicap(scoring_raw.get("handicap")),
        )

        server_raw = raw.get("server") or {}
        server_cfg = ServerConfig(
            host=str(server_raw.get("host", "0.0.0.0")),
            port=int(server_raw.get("port", 8000)),
            log_file=str(server_raw.get("log_file", "./logs/pickleharness.log")),
            log_level=str(server_raw.get("log_level", "INFO")).upper(),
        )

        config = Config(event=event_cfg, scoring=scoring_cfg, server=server_cfg)
        _validate(config)
        return config

    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid config.yaml structure: {exc}") from exc


def _parse_participant(value: object, index: int) -> Participant:
    # Accept either a bare name or an {id, name, gender} mapping.
    if isinstance(value, str):
        return Participant(id=f"p{index}", name=value)
    if isinstance(value, dict):
        return Participant.from_dict(
            {"id": value.get("id") or f"p{index}", "name": value["name"], "gender": value.get("gender")}
        )
    raise ValueError(f"event.participants[{index - 1}] must be a name or a mapping, got {value!r}")


def _parse_handicap(value: dict | None) -> HandicapRules:
    # scoring.handicap: {enabled, type, points}
    if not value:
        return HandicapRules()
    return HandicapRules.from_dict(
        {
            "enabled": value.get("enabled", False),
            "genderHandicap": {"type": value.get("type"), "points": value.get("points", 0)},
        }
    )


def _validate(config: Config) -> None:
    event = config.event
    if event.mode is not None:
        valid_modes = sorted({m for modes in SPECIAL_MODE_TARGETS.values() for m in modes})
        if event.mode not in valid_modes:
            raise ValueError(f"event.mode must be one of {valid_modes} or empty, got '{event.mode}'")

    if event.participants:
        count = len(event.participants)
        if not MIN_PARTICIPANTS <= count <= MAX_PARTICIPANTS:
            raise ValueError(
                f"event.participants must list {MIN_PARTICIPANTS}-{MAX_PARTICIPANTS} players, got {count}"
            )
        ids = [p.id for p in event.participants]
        if len(set(ids)) != len(ids):
            raise ValueError("event.participants ids must be unique")

    if config.scoring.rally_target < 1:
        raise ValueError("scoring.rally_target must be >= 1")
    valid_orderings = ("rotation", "traditional")
    if config.scoring.ordering not in valid_orderings:
        raise ValueError(
            f"scoring.ordering must be one of {valid_orderings}, got '{config.scoring.ordering}'"
        )
    if not 0 < config.server.port < 65536:
        raise ValueError("server.port must be between 1 and 65535")
