"""Board state for the single-player Battleship engine."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from solo_battleship.telemetry import get_meter, get_tracer

from .errors import FleetPlacementError, InvalidGuessError
from .ship import FLEET, Coordinate, Orientation, Ship, ShipKind

logger = logging.getLogger(__name__)
tracer = get_tracer("solo_battleship.engine.board")
meter = get_meter("solo_battleship.engine.board")

BOARD_SIZE = 10

PLACEMENT_COUNTER = meter.create_counter(
    "battleship_engine_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)

GUESS_COUNTER = meter.create_counter(
    "battleship_engine_guesses",
    unit="1",
    description="Guesses resolved against a board",
)


class CellState(Enum):
    """State of a cell as seen by the player."""

    UNKNOWN = "unknown"
    HIT = "hit"
    MISS = "miss"


def _empty_layout(size: int) -> list[list[ShipKind | None]]:
    return [[None] * size for _ in range(size)]


def _unknown_guesses(size: int) -> list[list[CellState]]:
    return [[CellState.UNKNOWN] * size for _ in range(size)]


@dataclass
class Board:
    """The hidden ship layout and the player-visible guess grid."""

    size: int = BOARD_SIZE
    ships: list[Ship] = field(default_factory=list)
    layout: list[list[ShipKind | None]] = field(init=False, repr=False)
    guesses: list[list[CellState]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.layout = _empty_layout(self.size)
        self.guesses = _unknown_guesses(self.size)

    def reset(self) -> None:
        """Drop every ship and guess."""
        self.ships.clear()
        self.layout = _empty_layout(self.size)
        self.guesses = _unknown_guesses(self.size)

    def is_valid_coordinate(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= coord.row < self.size and 0 <= coord.col < self.size

    def can_place_ship(self, ship: Ship) -> bool:
        """Return True if every cell of ``ship`` is on the board and empty."""
        for coord in ship.coordinates():
            if not self.is_valid_coordinate(coord):
                return False
            if self.layout[coord.row][coord.col] is not None:
                return False
        return True

    def place_ship(self, ship: Ship) -> bool:
        """Add ship to the board if placement is valid."""
        with tracer.start_as_current_span("board.place_ship") as span:
            span.set_attribute("ship.kind", ship.kind.name)
            span.set_attribute("ship.size", ship.kind.size)
            span.set_attribute("ship.start.row", ship.start.row)
            span.set_attribute("ship.start.col", ship.start.col)
            details = {
                "ship_kind": ship.kind.name,
                "orientation": ship.orientation.name,
                "row": ship.start.row,
                "col": ship.start.col,
            }
            if not self.can_place_ship(ship):
                PLACEMENT_COUNTER.add(1, attributes={"result": "rejected"})
                logger.debug("ship_placement_rejected", extra=details)
                return False

            for coord in ship.coordinates():
                self.layout[coord.row][coord.col] = ship.kind
            self.ships.append(ship)
            PLACEMENT_COUNTER.add(1, attributes={"result": "success"})
            logger.info("ship_placed", extra=details)
            return True

    def random_placement(
        self,
        rng: random.Random,
        fleet: tuple[ShipKind, ...] = FLEET,
        max_attempts: int | None = None,
    ) -> None:
        """Clear the board and place each fleet member at a random free spot.

        Candidates are resampled until one fits. With ``max_attempts`` set, a
        ship that still does not fit raises ``FleetPlacementError`` and the
        board is left empty.
        """
        with tracer.start_as_current_span("board.random_placement") as span:
            self.reset()
            orientations = list(Orientation)
            for kind in fleet:
                attempts = 0
                placed = False
                while not placed:
                    if max_attempts is not None and attempts >= max_attempts:
                        self.reset()
                        logger.error(
                            "fleet_placement_exhausted",
                            extra={"ship_kind": kind.name, "attempts": attempts},
                        )
                        raise FleetPlacementError(
                            f"Could not place {kind.name} after {attempts} attempts."
                        )
                    start = Coordinate(rng.randrange(self.size), rng.randrange(self.size))
                    orientation = rng.choice(orientations)
                    placed = self.place_ship(Ship(kind, start, orientation))
                    attempts += 1
                logger.debug(
                    "random_ship_placed",
                    extra={"ship_kind": kind.name, "attempts": attempts},
                )
            span.set_attribute("board.ships", len(self.ships))

    def receive_guess(self, coord: Coordinate) -> tuple[CellState, Ship | None]:
        """Resolve a guess and return its outcome with the ship hit, if any."""
        with tracer.start_as_current_span("board.receive_guess") as span:
            span.set_attribute("guess.row", coord.row)
            span.set_attribute("guess.col", coord.col)
            if not self.is_valid_coordinate(coord):
                logger.error(
                    "guess_rejected_out_of_bounds",
                    extra={"row": coord.row, "col": coord.col},
                )
                raise InvalidGuessError(coord.row, coord.col, "coordinates out of bounds")
            if self.guesses[coord.row][coord.col] is not CellState.UNKNOWN:
                logger.error(
                    "guess_rejected_repeat",
                    extra={"row": coord.row, "col": coord.col},
                )
                raise InvalidGuessError(coord.row, coord.col, "cell has already been guessed")

            for ship in self.ships:
                if ship.register_hit(coord):
                    self.guesses[coord.row][coord.col] = CellState.HIT
                    span.set_attribute("guess.outcome", "hit")
                    GUESS_COUNTER.add(1, attributes={"outcome": "hit"})
                    logger.info(
                        "guess_hit",
                        extra={"row": coord.row, "col": coord.col, "ship_kind": ship.kind.name},
                    )
                    return CellState.HIT, ship

            self.guesses[coord.row][coord.col] = CellState.MISS
            span.set_attribute("guess.outcome", "miss")
            GUESS_COUNTER.add(1, attributes={"outcome": "miss"})
            logger.info("guess_miss", extra={"row": coord.row, "col": coord.col})
            return CellState.MISS, None

    def get_cell_state(self, coord: Coordinate) -> CellState:
        return self.guesses[coord.row][coord.col]

    def all_ships_sunk(self) -> bool:
        """Check whether a fleet is placed and every ship in it is sunk."""
        return bool(self.ships) and all(ship.is_sunk() for ship in self.ships)

    def cell_grid(self) -> list[list[CellState]]:
        """Return an independent copy of the guess grid."""
        return [list(row) for row in self.guesses]

    def ship_grid(self) -> list[list[ShipKind | None]]:
        """Return an independent copy of the layout grid."""
        return [list(row) for row in self.layout]
