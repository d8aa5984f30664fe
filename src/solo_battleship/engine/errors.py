"""Exceptions raised by the Battleship engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .game import GamePhase


class InvalidGuessError(ValueError):
    """A guess targeted a cell outside the board or one already guessed."""

    def __init__(self, row: int, col: int, reason: str) -> None:
        super().__init__(f"Invalid guess at ({row}, {col}): {reason}")
        self.row = row
        self.col = col
        self.reason = reason


class GameStateError(RuntimeError):
    """An operation is not allowed in the current phase of the session."""

    def __init__(self, message: str, phase: GamePhase) -> None:
        super().__init__(message)
        self.phase = phase


class FleetPlacementError(RuntimeError):
    """A ship could not be placed within the configured attempt budget."""
