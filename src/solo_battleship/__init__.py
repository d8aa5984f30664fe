"""Single-player Battleship: find the hidden fleet within a fixed guess budget."""

from .config import GameConfig
from .engine import (
    BattleshipModel,
    CellState,
    GamePhase,
    GameStateError,
    InvalidGuessError,
    ShipKind,
)

__all__ = [
    "BattleshipModel",
    "CellState",
    "GameConfig",
    "GamePhase",
    "GameStateError",
    "InvalidGuessError",
    "ShipKind",
]
