"""Ship domain model for the single-player Battleship engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate."""

    row: int
    col: int


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ShipKind(Enum):
    """Members of the fixed fleet with their lengths and display symbols."""

    CARRIER = (5, "A")
    BATTLESHIP = (4, "B")
    SUBMARINE = (3, "S")
    DESTROYER = (3, "D")
    PATROL_BOAT = (2, "P")

    @property
    def size(self) -> int:
        """Return the number of contiguous cells the ship occupies."""
        return self.value[0]

    @property
    def symbol(self) -> str:
        return self.value[1]


# Placement order for every new session.
FLEET: tuple[ShipKind, ...] = (
    ShipKind.CARRIER,
    ShipKind.BATTLESHIP,
    ShipKind.SUBMARINE,
    ShipKind.DESTROYER,
    ShipKind.PATROL_BOAT,
)


def ship_coordinates(kind: ShipKind, start: Coordinate, orientation: Orientation) -> tuple[Coordinate, ...]:
    """Return the cells a ship of ``kind`` would cover from ``start``."""
    coords: list[Coordinate] = []
    for offset in range(kind.size):
        if orientation is Orientation.HORIZONTAL:
            coords.append(Coordinate(start.row, start.col + offset))
        else:
            coords.append(Coordinate(start.row + offset, start.col))
    return tuple(coords)


@dataclass
class Ship:
    """A placed fleet member.

    A single recorded hit anywhere on the ship counts as sinking it.
    """

    kind: ShipKind
    start: Coordinate
    orientation: Orientation
    hits: int = field(default=0, init=False)
    _coordinates: tuple[Coordinate, ...] = field(init=False, repr=False)
    _coordinate_set: frozenset[Coordinate] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._coordinates = ship_coordinates(self.kind, self.start, self.orientation)
        self._coordinate_set = frozenset(self._coordinates)

    def coordinates(self) -> list[Coordinate]:
        """Return the ordered list of coordinates occupied by this ship."""
        return list(self._coordinates)

    def occupies(self, coord: Coordinate) -> bool:
        return coord in self._coordinate_set

    def register_hit(self, coord: Coordinate) -> bool:
        """Record a hit if the coordinate belongs to this ship."""
        if not self.occupies(coord):
            return False
        self.hits += 1
        return True

    def is_sunk(self) -> bool:
        return self.hits > 0
