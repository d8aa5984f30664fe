"""Game configuration."""

from __future__ import annotations

import os
from typing import Any, Dict

from pydantic import BaseModel, Field

from solo_battleship.engine.game import BattleshipModel
from solo_battleship.engine.instrumented_game import InstrumentedBattleshipModel
from solo_battleship.telemetry.config import ENV_PREFIX, env_flag

DEFAULT_MAX_GUESSES = 30


class GameConfig(BaseModel):
    """Settings fixed for the lifetime of a model."""

    max_guesses: int = Field(default=DEFAULT_MAX_GUESSES, gt=0)
    seed: int | None = None
    max_placement_attempts: int | None = Field(default=None, gt=0)
    instrumented: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "GameConfig":
        """Read `SOLO_BATTLESHIP_*` env vars; non-None overrides take precedence."""

        data: Dict[str, Any] = {}
        int_fields = {
            "max_guesses": f"{ENV_PREFIX}MAX_GUESSES",
            "seed": f"{ENV_PREFIX}SEED",
            "max_placement_attempts": f"{ENV_PREFIX}MAX_PLACEMENT_ATTEMPTS",
        }
        for name, env_name in int_fields.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                data[name] = value.strip()

        instrumented = env_flag(f"{ENV_PREFIX}INSTRUMENTED")
        if instrumented is not None:
            data["instrumented"] = instrumented

        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)

    def build_model(self) -> BattleshipModel:
        """Construct the model this configuration describes."""
        model_cls = InstrumentedBattleshipModel if self.instrumented else BattleshipModel
        return model_cls(
            self.max_guesses,
            rng_seed=self.seed,
            max_placement_attempts=self.max_placement_attempts,
        )
