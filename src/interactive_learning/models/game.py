"""Mini-game level and state models."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class GameStatus(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETE = "complete"
    TIMED_OUT = "timed_out"


class GameLevel(BaseModel):
    """One timed challenge: a target arc in degrees and the efficiency to reach.

    ``range_end`` may be smaller than ``range_start`` when the arc wraps
    through 0°, e.g. 350° → 10°.
    """

    model_config = ConfigDict(frozen=True)

    number: int = Field(ge=1)
    range_start: float = Field(ge=0, le=360)
    range_end: float = Field(ge=0, le=360)
    parameter: str | float  # season label or wind speed (m/s)
    target_efficiency: float = Field(gt=0, le=100)


class GameState(BaseModel):
    """Transient state of one play session."""

    current_level: int = 1
    user_angle: float = 0.0
    driven_angle: float = 0.0
    efficiency: float = 0.0
    score: int = 0
    level_complete: bool = False
    running: bool = False
    time_remaining: float = 30.0
    sweep_elapsed: float = 0.0
