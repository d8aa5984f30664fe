"""Command-line driver for single-player Battleship."""

from __future__ import annotations

import argparse
import logging
from typing import Callable, Sequence

from solo_battleship.config import GameConfig
from solo_battleship.engine.board import BOARD_SIZE, CellState
from solo_battleship.engine.errors import InvalidGuessError
from solo_battleship.engine.game import BattleshipModel
from solo_battleship.engine.ship import Coordinate, ShipKind
from solo_battleship.telemetry import configure_console_logging, init_telemetry, shutdown_tracing

logger = logging.getLogger(__name__)

ROW_LABELS = "ABCDEFGHIJ"

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


class QuitGame(Exception):
    """Raised when the player asks to leave."""


def _coordinate_from_input(text: str) -> Coordinate:
    cleaned = text.strip().upper()
    if not cleaned:
        raise ValueError("Empty coordinate.")
    if cleaned[0].isalpha():
        if cleaned[0] not in ROW_LABELS:
            raise ValueError("Row must be between A and J.")
        row = ROW_LABELS.index(cleaned[0])
        try:
            col = int(cleaned[1:]) - 1
        except ValueError as exc:
            raise ValueError("Column must be a number between 1 and 10.") from exc
    else:
        parts = cleaned.split()
        if len(parts) != 2:
            raise ValueError("Use formats like A5 or 'row col' such as '1 5'.")
        try:
            row, col = (int(part) - 1 for part in parts)
        except ValueError as exc:
            raise ValueError("Row and column must be numbers between 1 and 10.") from exc
    return Coordinate(row, col)


def _label(coord: Coordinate) -> str:
    return f"{ROW_LABELS[coord.row]}{coord.col + 1}"


def _header() -> str:
    return "    " + " ".join(f"{col + 1:>2}" for col in range(BOARD_SIZE))


def format_cell_grid(grid: Sequence[Sequence[CellState]]) -> str:
    symbols = {CellState.UNKNOWN: ".", CellState.HIT: "X", CellState.MISS: "o"}
    rows = [_header()]
    for row_index, row in enumerate(grid):
        cells = " ".join(f"{symbols[cell]:>2}" for cell in row)
        rows.append(f"{ROW_LABELS[row_index]} |{cells}")
    return "\n".join(rows)


def format_ship_grid(grid: Sequence[Sequence[ShipKind | None]]) -> str:
    rows = [_header()]
    for row_index, row in enumerate(grid):
        cells = " ".join(f"{kind.symbol if kind else '.':>2}" for kind in row)
        rows.append(f"{ROW_LABELS[row_index]} |{cells}")
    return "\n".join(rows)


GUESS_PROMPT = "Enter target as A5 or 'row col' (both 1-10, e.g. '1 5'), or 'q' to quit: "


def _prompt_for_guess(input_fn: InputFn, output: OutputFn) -> Coordinate:
    while True:
        try:
            raw = input_fn(GUESS_PROMPT).strip()
        except EOFError:
            raise QuitGame from None
        if raw.lower() == "q":
            raise QuitGame
        try:
            return _coordinate_from_input(raw)
        except ValueError as exc:
            output(f"Invalid input: {exc}")


def play_game(
    model: BattleshipModel,
    input_fn: InputFn | None = None,
    output: OutputFn | None = None,
) -> bool | None:
    """Run one session against ``model``.

    Returns True on a win, False on a loss and None if the player quit.
    """
    input_fn = input_fn or input
    output = output or print
    model.start_game()
    output("Welcome to Battleship!")
    output(f"Sink the fleet within {model.get_max_guesses()} guesses.\n")

    while not model.is_game_over():
        output(format_cell_grid(model.get_cell_grid()))
        output(f"Guesses: {model.get_guess_count()}/{model.get_max_guesses()}")
        try:
            coord = _prompt_for_guess(input_fn, output)
        except QuitGame:
            output("Goodbye!")
            return None
        try:
            hit = model.make_guess(coord.row, coord.col)
        except InvalidGuessError as exc:
            output(f"Invalid guess: {exc.reason}.")
            continue
        output(f"{_label(coord)}: {'hit!' if hit else 'miss.'}")

    won = model.are_all_ships_sunk()
    output("")
    output(format_cell_grid(model.get_cell_grid()))
    if won:
        output(f"\nCongratulations, you sank the fleet in {model.get_guess_count()} guesses!")
    else:
        output("\nOut of guesses. Better luck next battle!")
    output("\nThe fleet was here:")
    output(format_ship_grid(model.get_ship_grid()))
    return won


def _prompt_play_again(input_fn: InputFn) -> bool:
    try:
        answer = input_fn("\nPlay again? [y/N]: ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play single-player Battleship via the CLI.")
    parser.add_argument(
        "--max-guesses", type=int, default=None, help="Number of guesses allowed per game."
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducible layouts."
    )
    parser.add_argument(
        "--instrumented",
        action="store_true",
        default=None,
        help="Record traces and metrics for each session.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Console log level.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_console_logging(args.log_level.upper())
    init_telemetry()
    config = GameConfig.from_env(
        max_guesses=args.max_guesses,
        seed=args.seed,
        instrumented=args.instrumented,
    )
    logger.info("cli_start", extra={"max_guesses": config.max_guesses, "seed": config.seed})
    model = config.build_model()
    try:
        while True:
            if play_game(model) is None:
                break
            if not _prompt_play_again(input):
                break
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    main()
