"""Game-state model: ships, board and session rules."""

from .board import BOARD_SIZE, Board, CellState
from .errors import FleetPlacementError, GameStateError, InvalidGuessError
from .game import BattleshipModel, GamePhase, GameState
from .instrumented_game import InstrumentedBattleshipModel
from .ship import FLEET, Coordinate, Orientation, Ship, ShipKind

__all__ = [
    "BOARD_SIZE",
    "FLEET",
    "BattleshipModel",
    "Board",
    "CellState",
    "Coordinate",
    "FleetPlacementError",
    "GamePhase",
    "GameState",
    "GameStateError",
    "InstrumentedBattleshipModel",
    "InvalidGuessError",
    "Orientation",
    "Ship",
    "ShipKind",
]
