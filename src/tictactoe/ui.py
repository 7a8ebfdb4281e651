"""FastAPI-powered web interface driving one GameController per session."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import difficulty_description, difficulty_name
from .controller import GameController, GameObserver
from .game import AIDifficulty, CellState, GameMode
from .stats import InMemoryStatistics


logger = logging.getLogger(__name__)


class MoveLogObserver(GameObserver):
    """Keeps the move history the browser needs to replay a match."""

    def __init__(self) -> None:
        self.moves: List[Dict[str, int | str]] = []

    def on_match_started(self) -> None:
        self.moves.clear()

    def on_move_made(self, index: int, symbol: CellState) -> None:
        self.moves.append({"player": symbol.value, "cellIndex": index})


@dataclass
class GameSession:
    """Container for an active match and its move history."""

    controller: GameController
    log: MoveLogObserver = field(default_factory=MoveLogObserver)


SESSIONS: Dict[str, GameSession] = {}
STATISTICS = InMemoryStatistics()
app = FastAPI(title="Tic-Tac-Toe", description="3x3 tic-tac-toe against the computer")


AI_THINK_DELAY: Tuple[float, float] = (0.3, 0.8)


class NewGameRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mode: GameMode = GameMode.VS_AI
    difficulty: AIDifficulty = AIDifficulty.HARD
    player_is_x: bool = Field(default=True, alias="playerIsX")
    seed: Optional[int] = None

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, value: GameMode) -> GameMode:
        if value is GameMode.NETWORK_MULTIPLAYER:
            raise ValueError("Network multiplayer is not available")
        return value


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(request: NewGameRequest) -> Tuple[str, GameSession]:
    """Create a controller, start its match and register the session."""

    session_log = MoveLogObserver()
    controller = GameController(
        observers=[session_log],
        statistics=STATISTICS,
        think_delay=AI_THINK_DELAY,
    )
    session = GameSession(controller=controller, log=session_log)
    if request.mode is GameMode.VS_AI:
        controller.start_vs_ai(
            request.difficulty, player_is_x=request.player_is_x, seed=request.seed
        )
    else:
        controller.start_local_multiplayer()
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created session %s (%s)", session_id, request.mode.value)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    controller = session.controller
    board = controller.board
    result = controller.last_result
    state: Dict[str, object] = {
        "id": game_id,
        "state": controller.state.value,
        "mode": controller.mode.value if controller.mode else None,
        "difficulty": (
            difficulty_name(controller.difficulty) if controller.difficulty else None
        ),
        "playerSymbol": controller.player_symbol.value,
        "currentTurn": controller.current_turn.value,
        "cells": [c.value if c is not CellState.EMPTY else "" for c in board.cells],
        "result": result.value,
        "outcome": controller.last_outcome.value if controller.last_outcome else None,
        "winningLine": controller.winning_line if result.is_terminal else None,
        "moveLog": list(session.log.moves),
        "aiPending": controller.is_ai_thinking,
    }
    if session.log.moves:
        state["lastMove"] = session.log.moves[-1]
    return state


@app.post("/api/game")
async def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
async def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
async def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    if not session.controller.make_move(request.cell_index):
        raise HTTPException(status_code=400, detail="Move is not allowed on this turn")
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/pause")
async def pause_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    session.controller.pause()
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/resume")
async def resume_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    session.controller.resume()
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
async def restart_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    session.controller.restart()
    return _serialize_session(game_id, session)


@app.delete("/api/game/{game_id}")
async def quit_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    session.controller.quit_to_menu()
    del SESSIONS[game_id]
    return {"id": game_id, "state": session.controller.state.value}


@app.get("/api/stats")
async def get_stats() -> Dict[str, object]:
    return STATISTICS.read_statistics().summary()


@app.get("/api/difficulties")
async def list_difficulties() -> List[Dict[str, str]]:
    return [
        {
            "id": d.value,
            "name": difficulty_name(d),
            "description": difficulty_description(d),
        }
        for d in AIDifficulty
    ]
