"""Single-player Battleship game model."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum

from solo_battleship.telemetry import get_meter, get_tracer

from .board import BOARD_SIZE, Board, CellState
from .errors import GameStateError
from .ship import Coordinate, ShipKind

logger = logging.getLogger(__name__)
tracer = get_tracer("solo_battleship.engine.game")
meter = get_meter("solo_battleship.engine.game")

SESSION_COUNTER = meter.create_counter(
    "battleship_engine_sessions",
    unit="1",
    description="Sessions started by BattleshipModel",
)

_CELL_LABELS = {
    CellState.UNKNOWN: "_",
    CellState.MISS: "MISS",
    CellState.HIT: "HIT",
}


class GamePhase(Enum):
    """Lifecycle of a session."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    OVER = "over"


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of the current session."""

    phase: GamePhase
    guess_count: int
    max_guesses: int
    all_ships_sunk: bool
    cells: tuple[tuple[CellState, ...], ...]


class BattleshipModel:
    """Owns the board and enforces the rules of a single-player session.

    The player has ``max_guesses`` guesses to find the fleet. The ship layout
    stays hidden until the session is over.
    """

    def __init__(
        self,
        max_guesses: int,
        rng_seed: int | None = None,
        rng: random.Random | None = None,
        max_placement_attempts: int | None = None,
    ) -> None:
        if max_guesses <= 0:
            raise ValueError("max_guesses must be positive.")
        self._max_guesses = max_guesses
        self._rng = rng if rng is not None else random.Random(rng_seed)
        self._max_placement_attempts = max_placement_attempts
        self.board = Board()
        self.phase: GamePhase = GamePhase.NOT_STARTED
        self._guess_count = 0
        self._game_over = False
        self._all_ships_sunk = False

    def start_game(self) -> None:
        """Discard any session in progress and place a fresh fleet."""
        with tracer.start_as_current_span("game.start_game"):
            self._guess_count = 0
            self._game_over = False
            self._all_ships_sunk = False
            self.phase = GamePhase.NOT_STARTED
            self.board.random_placement(self._rng, max_attempts=self._max_placement_attempts)
            self.phase = GamePhase.IN_PROGRESS
            SESSION_COUNTER.add(1)
            logger.info(
                "game_started",
                extra={"max_guesses": self._max_guesses, "ships": len(self.board.ships)},
            )

    def make_guess(self, row: int, col: int) -> bool:
        """Resolve a guess at (row, col) and return True on a hit.

        Raises:
            GameStateError: the session is over or was never started.
            InvalidGuessError: the cell is off the board or already guessed.
        """
        with tracer.start_as_current_span("game.make_guess") as span:
            span.set_attribute("row", row)
            span.set_attribute("col", col)
            if self.phase is GamePhase.NOT_STARTED:
                logger.error("guess_rejected_not_started", extra={"row": row, "col": col})
                raise GameStateError("The game has not been started.", self.phase)
            if self._game_over:
                logger.error(
                    "guess_rejected_game_over",
                    extra={"row": row, "col": col, "guess_count": self._guess_count},
                )
                raise GameStateError("The game is already over.", self.phase)

            state, ship = self.board.receive_guess(Coordinate(row, col))
            self._guess_count += 1
            span.set_attribute("outcome", state.value)

            if ship is not None and self.board.all_ships_sunk():
                self._all_ships_sunk = True
            self.is_game_over()
            if self._game_over:
                span.set_attribute("game.won", self._all_ships_sunk)
            return state is CellState.HIT

    def is_game_over(self) -> bool:
        """Return True once the fleet is sunk or the guess budget is spent."""
        if not self._game_over and self.phase is GamePhase.IN_PROGRESS:
            if self._guess_count >= self._max_guesses or self._all_ships_sunk:
                self._game_over = True
                self.phase = GamePhase.OVER
                logger.info(
                    "game_over",
                    extra={"won": self._all_ships_sunk, "guess_count": self._guess_count},
                )
        return self._game_over

    def are_all_ships_sunk(self) -> bool:
        return self._all_ships_sunk

    def get_guess_count(self) -> int:
        return self._guess_count

    def get_max_guesses(self) -> int:
        return self._max_guesses

    def remaining_guesses(self) -> int:
        return max(self._max_guesses - self._guess_count, 0)

    def get_cell_grid(self) -> list[list[CellState]]:
        """Return a copy of the player-visible guess grid."""
        return self.board.cell_grid()

    def get_ship_grid(self) -> list[list[ShipKind | None]]:
        """Return a copy of the ship layout; only allowed once the game is over."""
        if not self._game_over:
            logger.error("ship_grid_requested_early", extra={"phase": self.phase.value})
            raise GameStateError(
                "The ship grid can only be accessed after the game is over.", self.phase
            )
        return self.board.ship_grid()

    def ships_sunk(self) -> list[ShipKind]:
        return [ship.kind for ship in self.board.ships if ship.is_sunk()]

    def unguessed_cells(self) -> list[Coordinate]:
        """Return every coordinate the player can still legally target."""
        if self.phase is not GamePhase.IN_PROGRESS:
            return []
        return [
            Coordinate(row, col)
            for row in range(BOARD_SIZE)
            for col in range(BOARD_SIZE)
            if self.board.get_cell_state(Coordinate(row, col)) is CellState.UNKNOWN
        ]

    def get_state(self) -> GameState:
        """Return an immutable view of the current session."""
        return GameState(
            phase=self.phase,
            guess_count=self._guess_count,
            max_guesses=self._max_guesses,
            all_ships_sunk=self._all_ships_sunk,
            cells=tuple(tuple(row) for row in self.board.guesses),
        )

    def __str__(self) -> str:
        lines = ["User Grid:"]
        for row in self.board.guesses:
            lines.append(" ".join(_CELL_LABELS[cell] for cell in row))

        if self._game_over:
            lines.append("")
            lines.append("Ship Grid:")
            for row in self.board.layout:
                lines.append(" ".join(kind.symbol if kind else "_" for kind in row))
        else:
            lines.append("")
            lines.append("(Ship grid is hidden until the game is over.)")
        return "\n".join(lines)
