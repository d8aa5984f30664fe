"""Tests for Ship domain logic."""

from solo_battleship.engine.ship import FLEET, Coordinate, Orientation, Ship, ShipKind


def test_ship_coordinates_horizontal() -> None:
    ship = Ship(ShipKind.PATROL_BOAT, Coordinate(0, 0), Orientation.HORIZONTAL)
    assert ship.coordinates() == [Coordinate(0, 0), Coordinate(0, 1)]


def test_ship_coordinates_vertical() -> None:
    ship = Ship(ShipKind.SUBMARINE, Coordinate(4, 7), Orientation.VERTICAL)
    assert ship.coordinates() == [Coordinate(4, 7), Coordinate(5, 7), Coordinate(6, 7)]


def test_single_hit_sinks_ship() -> None:
    ship = Ship(ShipKind.CARRIER, Coordinate(2, 2), Orientation.HORIZONTAL)
    assert not ship.is_sunk()
    assert ship.register_hit(Coordinate(2, 4)) is True
    assert ship.hits == 1
    assert ship.is_sunk()


def test_register_hit_ignores_foreign_cells() -> None:
    ship = Ship(ShipKind.DESTROYER, Coordinate(0, 0), Orientation.VERTICAL)
    assert ship.occupies(Coordinate(2, 0))
    assert not ship.occupies(Coordinate(0, 1))
    assert ship.register_hit(Coordinate(0, 1)) is False
    assert ship.hits == 0
    assert not ship.is_sunk()


def test_fleet_roster() -> None:
    assert [kind.size for kind in FLEET] == [5, 4, 3, 3, 2]
    symbols = [kind.symbol for kind in FLEET]
    assert len(set(symbols)) == len(FLEET)
    assert all(len(symbol) == 1 for symbol in symbols)

