"""Instrumented Battleship model with telemetry hooks."""

from __future__ import annotations

import time

from solo_battleship.engine.errors import FleetPlacementError, GameStateError, InvalidGuessError
from solo_battleship.engine.game import BattleshipModel
from solo_battleship.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedBattleshipModel(BattleshipModel):
    """Wraps BattleshipModel with a per-session span, metrics, and logging."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._logger = get_logger("solo_battleship.engine")
        self._tracer = get_tracer("solo_battleship.engine")
        self._session_span_cm = None
        self._session_span = None
        self._session_start_time: float | None = None
        self._session_id_counter = 0

    def start_game(self) -> None:
        self._start_session_span()
        with self._tracer.start_as_current_span("battleship.engine.start_game") as span:
            self._logger.info("Session %d setup started", self._session_id_counter)
            try:
                super().start_game()
            except FleetPlacementError as exc:
                span.record_exception(exc)
                record_game_metric("battleship_session_setup_failures_total", 1)
                self._logger.error("Session %d setup failed: %s", self._session_id_counter, exc)
                self._close_session_span()
                raise
            span.set_attribute("ships", len(self.board.ships))
            span.set_attribute("max_guesses", self.get_max_guesses())
            record_game_metric(
                "battleship_sessions_started_total",
                1,
                {"max_guesses": self.get_max_guesses()},
            )
            self._logger.info("Session %d setup finished", self._session_id_counter)

    def make_guess(self, row: int, col: int) -> bool:
        with self._tracer.start_as_current_span("battleship.engine.make_guess") as span:
            span.set_attribute("session.id", self._session_id_counter)
            span.set_attribute("coord.row", row)
            span.set_attribute("coord.col", col)

            try:
                hit = super().make_guess(row, col)
            except (InvalidGuessError, GameStateError) as exc:
                reason = "invalid_argument" if isinstance(exc, InvalidGuessError) else "invalid_state"
                record_game_metric("battleship_invalid_guesses_total", 1, {"reason": reason})
                span.record_exception(exc)
                span.set_attribute("error", True)
                self._logger.error("Invalid guess at (%d,%d): %s", row, col, exc)
                raise

            span.set_attribute("hit", hit)
            record_game_metric("battleship_guesses_total", 1)
            record_game_metric(
                "battleship_guesses_by_result_total",
                1,
                {"result": "hit" if hit else "miss"},
            )
            self._logger.info(
                "make_guess coord=(%d,%d) outcome=%s guesses=%d/%d",
                row,
                col,
                "HIT" if hit else "MISS",
                self.get_guess_count(),
                self.get_max_guesses(),
            )

            if self.is_game_over():
                span.set_attribute("won", self.are_all_ships_sunk())
                self._finish_session()

            return hit

    def _start_session_span(self) -> None:
        self._close_session_span()
        self._session_start_time = time.perf_counter()
        self._session_id_counter += 1
        self._session_span_cm = self._tracer.start_as_current_span("battleship.engine.session")
        self._session_span = self._session_span_cm.__enter__()
        self._session_span.set_attribute("session.id", self._session_id_counter)

    def _finish_session(self) -> None:
        duration = (
            (time.perf_counter() - self._session_start_time) if self._session_start_time else 0.0
        )
        outcome = "win" if self.are_all_ships_sunk() else "loss"
        guesses = self.get_guess_count()

        record_game_metric("battleship_sessions_completed_total", 1, {"outcome": outcome})
        record_game_metric("battleship_session_duration_seconds", duration, {"outcome": outcome})

        with self._tracer.start_as_current_span("battleship.engine.session_complete") as span:
            span.set_attribute("session.id", self._session_id_counter)
            span.set_attribute("outcome", outcome)
            span.set_attribute("guesses", guesses)
            span.set_attribute("duration_ms", duration * 1000)

        if self._session_span is not None:
            self._session_span.set_attribute("outcome", outcome)
            self._session_span.set_attribute("guesses", guesses)
            self._session_span.set_attribute("duration_ms", duration * 1000)

        self._logger.info(
            "Session finished. outcome=%s guesses=%d duration_s=%.3f", outcome, guesses, duration
        )
        self._close_session_span()

    def _close_session_span(self) -> None:
        if self._session_span_cm is not None:
            self._session_span_cm.__exit__(None, None, None)
            self._session_span_cm = None
            self._session_span = None
