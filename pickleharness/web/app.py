"""
FastAPI application — the REST backend for the event mini-program.

Exposes:
  GET  /api/config                                 Scoring settings
  POST /api/events                                 Create an event
  GET  /api/events/{event_id}                      Event + roster
  POST /api/events/{event_id}/participants         Register a participant
  POST /api/rotation/generate                      Generate / regenerate the schedule
  GET  /api/rotation/schedule/{event_id}           Matches grouped by round
  GET  /api/rotation/description?count=N           What a rotation of N looks like
  GET  /api/matches/event/{event_id}               All matches of an event
  POST /api/matches                                Add a match outside the rotation
  PUT  /api/matches/{event_id}/{match_id}/start    Mark a match in progress
  PUT  /api/matches/{event_id}/{match_id}/score    Record a score
  PUT  /api/matches/{event_id}/{match_id}/complete End a rally-scored match early
  GET  /api/handicap/templates                     Preset handicap rules
  GET  /api/handicap/event/{event_id}              Event handicap rules
  PUT  /api/handicap/event/{event_id}              Set event handicap rules
  GET  /api/ranking/event/{event_id}               Standings + match counts

Rosters and matches live in an in-memory EventStore.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from pickleharness.config import Config, load_config
from pickleharness.errors import PickleHarnessError, StoreError
from pickleharness.rotation import (
    HANDICAP_TEMPLATES,
    HandicapRules,
    Participant,
    Schedule,
    describe_rotation,
)
from pickleharness.store import EventStore

# --------------------------------------------------------------------------- #
# Config                                                                       #
# --------------------------------------------------------------------------- #

_CONFIG_PATH = Path("config.yaml")

config = load_config(_CONFIG_PATH) if _CONFIG_PATH.exists() else Config()

# --------------------------------------------------------------------------- #
# Logging                                                                      #
# --------------------------------------------------------------------------- #

_LOG_FILE = config.log_path
_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

logging.basicConfig(
    level=getattr(logging, config.server.log_level, logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    handlers=[
        logging.StreamHandler(),                                   # server console
        logging.handlers.RotatingFileHandler(
            _LOG_FILE, maxBytes=2 * 1024 * 1024, backupCount=3,  # 2 MB × 3 files
            encoding="utf-8",
        ),
    ],
)
logger = logging.getLogger("pickleharness")


app = FastAPI(title="pickleharness")
store = EventStore()


# --------------------------------------------------------------------------- #
# Error translation                                                            #
# --------------------------------------------------------------------------- #

@app.exception_handler(StoreError)
async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.exception_handler(PickleHarnessError)
async def _domain_error(request: Request, exc: PickleHarnessError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


# --------------------------------------------------------------------------- #
# REST                                                                         #
# --------------------------------------------------------------------------- #

@app.get("/api/config")
def get_config():
    return {
        "rallyTarget": config.scoring.rally_target,
        "ordering": config.scoring.ordering,
        "randomize": config.event.randomize,
    }


@app.post("/api/events", status_code=201)
def create_event(payload: dict):
    name = str(payload.get("name", "")).strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")
    rotation = bool(payload.get("rotation", True))
    rally_target = _int_field(payload, "rallyTarget", config.scoring.rally_target)
    record = store.create_event(
        name,
        rotation=rotation,
        rally_target=rally_target,
        event_id=payload.get("eventId"),
        handicap=config.scoring.handicap,
    )
    return record.to_dict()


@app.get("/api/events/{event_id}")
def get_event(event_id: str):
    return store.get_event(event_id).to_dict()


@app.post("/api/events/{event_id}/participants", status_code=201)
def register_participant(event_id: str, payload: dict):
    participant_id = str(payload.get("id", "")).strip()
    name = str(payload.get("name", "")).strip()
    if not participant_id or not name:
        raise HTTPException(status_code=400, detail="id and name are required")
    try:
        participant = Participant.from_dict(
            {"id": participant_id, "name": name, "gender": payload.get("gender")}
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    record = store.register(event_id, participant)
    return record.to_dict()


@app.post("/api/rotation/generate")
def generate_rotation(payload: dict):
    event_id = str(payload.get("eventId", "")).strip()
    if not event_id:
        raise HTTPException(status_code=400, detail="eventId is required")
    mode = payload.get("mode") or None
    randomize = payload.get("randomize", config.event.randomize) is not False

    schedule = store.generate(event_id, mode=mode, randomize=randomize)
    return {
        "eventId": event_id,
        **_schedule_payload(schedule),
    }


@app.get("/api/rotation/schedule/{event_id}")
def get_schedule(event_id: str):
    matches = store.matches(event_id)
    rounds: dict[str, list[dict]] = {}
    for match in matches:
        rounds.setdefault(str(match.round), []).append(match.to_record())
    return {
        "eventId": event_id,
        "schedule": rounds,
        "totalRounds": len(rounds),
        "totalMatches": len(matches),
    }


@app.get("/api/rotation/description")
def get_description(count: int):
    return describe_rotation(count)


@app.get("/api/matches/event/{event_id}")
def list_matches(event_id: str):
    return {"matches": [m.to_record() for m in store.matches(event_id)]}


@app.post("/api/matches", status_code=201)
def add_match(payload: dict):
    event_id = str(payload.get("eventId", "")).strip()
    if not event_id:
        raise HTTPException(status_code=400, detail="eventId is required")
    team_a = _team_ids(payload, "teamA")
    team_b = _team_ids(payload, "teamB")
    match = store.add_match(
        event_id,
        team_a,
        team_b,
        round_num=_int_field(payload, "round", 1),
        match_number=_int_field(payload, "matchNumber", 1),
    )
    return match.to_record()


@app.put("/api/matches/{event_id}/{match_id}/start")
def start_match(event_id: str, match_id: str):
    return store.start_match(event_id, match_id).to_record()


@app.put("/api/matches/{event_id}/{match_id}/score")
def update_score(event_id: str, match_id: str, payload: dict):
    record = store.get_event(event_id)
    game_a = payload.get("gameScoreA")
    game_b = payload.get("gameScoreB")

    if record.rotation:
        # Rotation matches are decided on games; a rally score carries no points.
        if game_a is None or game_b is None:
            raise HTTPException(status_code=400, detail="gameScoreA and gameScoreB are both required")
        match = store.record_game_score(event_id, match_id, str(game_a), str(game_b))
    else:
        score_a = _int_field(payload, "scoreA", 0)
        score_b = _int_field(payload, "scoreB", 0)
        match = store.record_rally_score(event_id, match_id, score_a, score_b)
    return match.to_record()


@app.put("/api/matches/{event_id}/{match_id}/complete")
def finish_match(event_id: str, match_id: str):
    return store.complete_match(event_id, match_id).to_record()


@app.get("/api/handicap/templates")
def get_handicap_templates():
    return {"templates": HANDICAP_TEMPLATES}


@app.get("/api/handicap/event/{event_id}")
def get_handicap(event_id: str):
    return store.get_event(event_id).handicap.to_dict()


@app.put("/api/handicap/event/{event_id}")
def set_handicap(event_id: str, payload: dict):
    try:
        rules = HandicapRules.from_dict(
            {"enabled": payload.get("enabled", False), "genderHandicap": payload.get("rules")}
        )
    except (TypeError, ValueError, AttributeError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid handicap rules: {exc}") from None
    record = store.set_handicap(event_id, rules)
    return {"eventId": event_id, **record.handicap.to_dict()}


@app.get("/api/ranking/event/{event_id}")
def get_ranking(event_id: str):
    record = store.get_event(event_id)
    standings = store.standings(event_id)
    return {
        "ranking": [entry.to_dict() for entry in standings],
        "stats": store.summary(event_id),
        "ordering": record.ordering,
    }


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def _int_field(payload: dict, key: str, default: int) -> int:
    value = payload.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"{key} must be an integer") from None


def _team_ids(payload: dict, key: str) -> list[str]:
    # Accepts ["p1", "p2"] or {"participants": ["p1", "p2"]}.
    team = payload.get(key)
    if isinstance(team, dict):
        team = team.get("participants")
    if not isinstance(team, list):
        raise HTTPException(status_code=400, detail=f"{key} must list two participant ids")
    return [str(pid) for pid in team]


def _schedule_payload(schedule: Schedule) -> dict:
    return {
        "mode": schedule.mode,
        "randomized": schedule.randomized,
        "participants": [p.to_dict() for p in schedule.participants],
        "totalRounds": schedule.total_rounds,
        "totalMatches": schedule.total_matches,
        "rounds": [
            {
                "round": r.number,
                "matches": [m.to_record() for m in r.matches],
                "byes": [p.to_dict() for p in r.byes],
                "idlePairs": [pair.name for pair in r.idle_pairs],
            }
            for r in schedule.rounds
        ],
        "unplacedPairs": [pair.name for pair in schedule.unplaced_pairs],
    }
