"""Session-level gameplay tests."""

import random

import pytest

from solo_battleship.engine.board import BOARD_SIZE, Board, CellState
from solo_battleship.engine.errors import FleetPlacementError, GameStateError, InvalidGuessError
from solo_battleship.engine.game import BattleshipModel, GamePhase
from solo_battleship.engine.ship import FLEET, Coordinate


def _ship_cells(model: BattleshipModel) -> list[Coordinate]:
    return [coord for ship in model.board.ships for coord in ship.coordinates()]


def _empty_cells(model: BattleshipModel) -> list[Coordinate]:
    occupied = set(_ship_cells(model))
    return [
        Coordinate(row, col)
        for row in range(BOARD_SIZE)
        for col in range(BOARD_SIZE)
        if Coordinate(row, col) not in occupied
    ]


def test_start_game_places_valid_fleet() -> None:
    model = BattleshipModel(30, rng_seed=7)
    model.start_game()
    assert model.phase is GamePhase.IN_PROGRESS
    ships = model.board.ships
    assert [ship.kind for ship in ships] == list(FLEET)
    for index, ship in enumerate(ships):
        coords = ship.coordinates()
        assert len(coords) == ship.kind.size
        rows = {coord.row for coord in coords}
        cols = {coord.col for coord in coords}
        assert len(rows) == 1 or len(cols) == 1
        if len(rows) == 1:
            assert sorted(cols) == list(range(min(cols), min(cols) + ship.kind.size))
        else:
            assert sorted(rows) == list(range(min(rows), min(rows) + ship.kind.size))
        assert all(0 <= c.row < BOARD_SIZE and 0 <= c.col < BOARD_SIZE for c in coords)
        for other in ships[index + 1 :]:
            assert not set(coords) & set(other.coordinates())


def test_same_seed_gives_same_layout() -> None:
    first = BattleshipModel(30, rng_seed=2024)
    second = BattleshipModel(30, rng_seed=2024)
    first.start_game()
    second.start_game()
    assert first.board.ship_grid() == second.board.ship_grid()


def test_injected_rng_is_used() -> None:
    first = BattleshipModel(30, rng=random.Random(5))
    second = BattleshipModel(30, rng_seed=5)
    first.start_game()
    second.start_game()
    assert first.board.ship_grid() == second.board.ship_grid()


def test_max_guesses_must_be_positive() -> None:
    with pytest.raises(ValueError):
        BattleshipModel(0)


def test_guess_count_tracks_valid_guesses_only() -> None:
    model = BattleshipModel(100, rng_seed=3)
    model.start_game()
    targets = _empty_cells(model)[:5]
    for expected, coord in enumerate(targets, start=1):
        assert model.make_guess(coord.row, coord.col) is False
        assert model.get_guess_count() == expected

    with pytest.raises(InvalidGuessError):
        model.make_guess(targets[0].row, targets[0].col)
    with pytest.raises(InvalidGuessError):
        model.make_guess(BOARD_SIZE, 0)
    assert model.get_guess_count() == len(targets)
    assert model.get_max_guesses() == 100


@pytest.mark.parametrize("row, col", [(-1, 0), (10, 5), (0, 10)])
def test_out_of_bounds_guess_rejected(row: int, col: int) -> None:
    model = BattleshipModel(30, rng_seed=11)
    model.start_game()
    before = model.get_cell_grid()
    with pytest.raises(InvalidGuessError) as excinfo:
        model.make_guess(row, col)
    assert (excinfo.value.row, excinfo.value.col) == (row, col)
    assert model.get_guess_count() == 0
    assert model.get_cell_grid() == before
    assert not model.is_game_over()


def test_repeat_guess_rejected() -> None:
    model = BattleshipModel(30, rng_seed=12)
    model.start_game()
    model.make_guess(4, 4)
    with pytest.raises(InvalidGuessError):
        model.make_guess(4, 4)
    assert model.get_guess_count() == 1


def test_hit_and_miss_are_recorded_in_cell_grid() -> None:
    model = BattleshipModel(30, rng_seed=13)
    model.start_game()
    hit_cell = _ship_cells(model)[0]
    miss_cell = _empty_cells(model)[0]
    assert model.make_guess(hit_cell.row, hit_cell.col) is True
    assert model.make_guess(miss_cell.row, miss_cell.col) is False
    grid = model.get_cell_grid()
    assert grid[hit_cell.row][hit_cell.col] is CellState.HIT
    assert grid[miss_cell.row][miss_cell.col] is CellState.MISS


def test_win_after_hitting_every_ship_cell() -> None:
    model = BattleshipModel(100, rng_seed=21)
    model.start_game()
    for coord in _ship_cells(model):
        if model.is_game_over():
            break
        model.make_guess(coord.row, coord.col)
    assert model.are_all_ships_sunk()
    assert model.is_game_over()
    assert model.phase is GamePhase.OVER


def test_one_hit_per_ship_wins() -> None:
    model = BattleshipModel(30, rng_seed=22)
    model.start_game()
    ships = model.board.ships
    for ship in ships[:-1]:
        first = ship.coordinates()[-1]
        model.make_guess(first.row, first.col)
        assert not model.are_all_ships_sunk()
        assert not model.is_game_over()
    last = ships[-1].coordinates()[0]
    assert model.make_guess(last.row, last.col) is True
    assert model.are_all_ships_sunk()
    assert model.is_game_over()
    assert model.get_guess_count() == len(FLEET)
    assert model.ships_sunk() == list(FLEET)


def test_loss_when_guess_limit_reached() -> None:
    model = BattleshipModel(3, rng_seed=31)
    model.start_game()
    for coord in _empty_cells(model)[:3]:
        model.make_guess(coord.row, coord.col)
    assert model.is_game_over()
    assert not model.are_all_ships_sunk()
    assert model.remaining_guesses() == 0


def test_are_all_ships_sunk_is_idempotent() -> None:
    model = BattleshipModel(30, rng_seed=32)
    model.start_game()
    ship = model.board.ships[0]
    coord = ship.coordinates()[0]
    model.make_guess(coord.row, coord.col)
    for _ in range(5):
        assert model.are_all_ships_sunk() is False
    assert ship.hits == 1


def test_ship_grid_hidden_until_game_over() -> None:
    model = BattleshipModel(2, rng_seed=41)
    with pytest.raises(GameStateError):
        model.get_ship_grid()
    model.start_game()
    with pytest.raises(GameStateError):
        model.get_ship_grid()

    empties = _empty_cells(model)
    model.make_guess(empties[0].row, empties[0].col)
    with pytest.raises(GameStateError):
        model.get_ship_grid()
    model.make_guess(empties[1].row, empties[1].col)

    assert model.is_game_over()
    layout = model.get_ship_grid()
    assert layout == model.board.ship_grid()
    occupied = sum(cell is not None for row in layout for cell in row)
    assert occupied == sum(kind.size for kind in FLEET)


def test_ship_grid_revealed_after_win() -> None:
    model = BattleshipModel(30, rng_seed=42)
    model.start_game()
    for ship in model.board.ships:
        coord = ship.coordinates()[0]
        model.make_guess(coord.row, coord.col)
    assert model.is_game_over()
    assert model.get_ship_grid() == model.board.ship_grid()


def test_no_guesses_after_game_over() -> None:
    model = BattleshipModel(1, rng_seed=51)
    model.start_game()
    empties = _empty_cells(model)
    model.make_guess(empties[0].row, empties[0].col)
    before = model.get_cell_grid()
    with pytest.raises(GameStateError):
        model.make_guess(empties[1].row, empties[1].col)
    assert model.get_cell_grid() == before
    assert model.get_guess_count() == 1


def test_guess_before_start_rejected() -> None:
    model = BattleshipModel(30)
    assert model.phase is GamePhase.NOT_STARTED
    with pytest.raises(GameStateError):
        model.make_guess(0, 0)
    assert not model.is_game_over()
    assert not model.are_all_ships_sunk()
    assert model.unguessed_cells() == []


def test_start_game_resets_session() -> None:
    model = BattleshipModel(1, rng_seed=61)
    model.start_game()
    empty = _empty_cells(model)[0]
    model.make_guess(empty.row, empty.col)
    assert model.is_game_over()

    model.start_game()
    assert model.phase is GamePhase.IN_PROGRESS
    assert not model.is_game_over()
    assert model.get_guess_count() == 0
    assert all(cell is CellState.UNKNOWN for row in model.get_cell_grid() for cell in row)
    assert len(model.board.ships) == len(FLEET)
    assert len(model.unguessed_cells()) == BOARD_SIZE * BOARD_SIZE


def test_cell_grid_is_a_copy() -> None:
    model = BattleshipModel(30, rng_seed=71)
    model.start_game()
    grid = model.get_cell_grid()
    grid[0][0] = CellState.HIT
    assert model.get_cell_grid()[0][0] is CellState.UNKNOWN


def test_state_snapshot_and_rendering() -> None:
    model = BattleshipModel(1, rng_seed=81)
    model.start_game()
    assert "hidden until the game is over" in str(model)

    empty = _empty_cells(model)[0]
    model.make_guess(empty.row, empty.col)
    state = model.get_state()
    assert state.phase is GamePhase.OVER
    assert state.guess_count == 1
    assert state.cells[empty.row][empty.col] is CellState.MISS

    rendered = str(model)
    assert "MISS" in rendered
    assert "Ship Grid:" in rendered
    assert "A" in rendered.split("Ship Grid:")[1]


@pytest.mark.parametrize("finish_first", [False, True])
def test_failed_placement_leaves_session_unstarted(finish_first: bool) -> None:
    model = BattleshipModel(1, rng_seed=91, max_placement_attempts=1000)
    model.start_game()
    if finish_first:
        empty = _empty_cells(model)[0]
        model.make_guess(empty.row, empty.col)
        assert model.is_game_over()

    # A carrier cannot fit on a 3x3 board.
    model.board = Board(size=3)
    with pytest.raises(FleetPlacementError):
        model.start_game()

    assert model.phase is GamePhase.NOT_STARTED
    assert model.board.ships == []
    with pytest.raises(GameStateError):
        model.make_guess(0, 0)
    with pytest.raises(GameStateError):
        model.get_ship_grid()
    assert model.get_guess_count() == 0
    assert not model.is_game_over()
    assert not model.are_all_ships_sunk()

    model.board = Board()
    model.start_game()
    assert model.phase is GamePhase.IN_PROGRESS
    assert len(model.board.ships) == len(FLEET)
