"""Angle-alignment game simulation shared by the solar and wind games.

The player rotates a control (solar panel or turbine) towards the centre of
the level's target arc while a reference (sun or wind direction) sweeps
across that arc. Efficiency falls linearly with circular distance from the
arc centre and reaches 0 at 90° off. Reaching the level's target
efficiency before the countdown ends clears the level, with a bonus of ten
points per remaining second.
"""

import math
from collections.abc import Sequence

import structlog

from interactive_learning.games.levels import LEVELS, NEUTRAL_ANGLES, GameKind
from interactive_learning.models.game import GameLevel, GameState, GameStatus

logger = structlog.get_logger()

MAX_ANGLE_OFF = 90.0
BONUS_PER_SECOND = 10


def wrap_angle(angle: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    wrapped = angle % 360.0
    return 0.0 if wrapped == 360.0 else wrapped


def angular_distance(a: float, b: float) -> float:
    """Shortest distance between two angles on the circle (0-180)."""
    diff = abs(a - b) % 360.0
    return min(diff, 360.0 - diff)


def arc_span(level: GameLevel) -> float:
    """Degrees swept going the positive way from range_start to range_end."""
    return (level.range_end - level.range_start) % 360.0


def midpoint_angle(level: GameLevel) -> float:
    """Centre of the level's target arc."""
    return wrap_angle(level.range_start + arc_span(level) / 2.0)


def efficiency(user_angle: float, level: GameLevel) -> float:
    """Alignment score 0-100 of ``user_angle`` against the arc centre."""
    off = angular_distance(user_angle, midpoint_angle(level))
    return max(0.0, 100.0 - (off / MAX_ANGLE_OFF) * 100.0)


def pointer_angle(x: float, y: float, center_x: float, center_y: float) -> float:
    """Map a pointer position to a control angle, with "up" as 0°.

    Screen coordinates: y grows downwards.
    """
    angle = math.degrees(math.atan2(y - center_y, x - center_x)) + 90.0
    return wrap_angle(angle)


class GameSimulation:
    """Per-session state and rules of one angle-alignment game.

    Args:
        levels: Ordered level list, numbered from 1.
        neutral_angle: Angle the user control resets to.
        level_time: Countdown budget per level in seconds.
        sweep_duration: Seconds for the driven angle to cross the arc.
    """

    def __init__(
        self,
        levels: Sequence[GameLevel],
        neutral_angle: float = 0.0,
        level_time: float = 30.0,
        sweep_duration: float = 30.0,
    ):
        if not levels:
            raise ValueError("A game needs at least one level")
        self.levels = list(levels)
        self.neutral_angle = wrap_angle(neutral_angle)
        self.level_time = level_time
        self.sweep_duration = sweep_duration
        self.state = GameState(time_remaining=level_time)
        self._reset_transient()

    @classmethod
    def for_kind(
        cls, kind: GameKind, level_time: float = 30.0, sweep_duration: float = 30.0
    ) -> "GameSimulation":
        return cls(
            LEVELS[kind],
            neutral_angle=NEUTRAL_ANGLES[kind],
            level_time=level_time,
            sweep_duration=sweep_duration,
        )

    @property
    def level(self) -> GameLevel:
        """The current level, clamped to the last one on overrun."""
        index = self.state.current_level - 1
        if 0 <= index < len(self.levels):
            return self.levels[index]
        return self.levels[-1]

    @property
    def is_last_level(self) -> bool:
        return self.state.current_level >= len(self.levels)

    @property
    def timed_out(self) -> bool:
        return self.state.time_remaining <= 0 and not self.state.level_complete

    @property
    def accepts_input(self) -> bool:
        return self.state.running and not self.state.level_complete

    @property
    def status(self) -> GameStatus:
        if self.state.level_complete:
            return GameStatus.COMPLETE
        if self.timed_out:
            return GameStatus.TIMED_OUT
        if self.state.running:
            return GameStatus.RUNNING
        if self._started:
            return GameStatus.PAUSED
        return GameStatus.IDLE

    def start(self) -> bool:
        """Start or resume the current level.

        Returns:
            True if the simulation is now running.
        """
        if self.state.level_complete or self.timed_out:
            return False
        self.state.running = True
        self._started = True
        logger.info("game_level_started", level=self.state.current_level)
        return True

    def pause(self) -> None:
        self.state.running = False

    def set_user_angle(self, angle: float) -> None:
        if not self.accepts_input:
            return
        self.state.user_angle = wrap_angle(angle)

    def drag(self, x: float, y: float, center_x: float, center_y: float) -> None:
        """Rotate the control towards a pointer position on the circular dial."""
        if not self.accepts_input:
            return
        self.state.user_angle = pointer_angle(x, y, center_x, center_y)

    def advance_sweep(self, elapsed: float) -> None:
        """Move the driven angle along the arc by ``elapsed`` seconds of time.

        Pausing keeps the elapsed sweep, so resuming continues from the
        current position rather than restarting at the arc's start.
        """
        if not self.state.running or elapsed <= 0:
            return
        self.state.sweep_elapsed = min(self.sweep_duration, self.state.sweep_elapsed + elapsed)
        self.state.driven_angle = self._driven_angle_at(self.state.sweep_elapsed)

    def tick(self, dt: float) -> bool:
        """Advance the countdown by one tick and re-score the alignment.

        Returns:
            True while the level is still being played.
        """
        state = self.state
        if not state.running or state.level_complete or state.time_remaining <= 0:
            return False

        state.time_remaining = max(0.0, round(state.time_remaining - dt, 6))
        state.efficiency = efficiency(state.user_angle, self.level)

        if state.efficiency >= self.level.target_efficiency:
            state.level_complete = True
            bonus = math.floor(round(state.time_remaining * BONUS_PER_SECOND, 6))
            state.score += bonus
            logger.info(
                "game_level_complete",
                level=state.current_level,
                efficiency=round(state.efficiency, 1),
                bonus=bonus,
                score=state.score,
            )
            return False

        if state.time_remaining <= 0:
            state.running = False
            logger.info("game_level_timed_out", level=state.current_level)
            return False
        return True

    def next_level(self) -> bool:
        """Move to the following level. At the last level nothing changes.

        Returns:
            True if the level index advanced.
        """
        if self.is_last_level:
            return False
        self.state.current_level += 1
        self._reset_transient()
        return True

    def reset_level(self) -> None:
        self._reset_transient()

    def _driven_angle_at(self, elapsed: float) -> float:
        level = self.level
        if self.sweep_duration <= 0:
            fraction = 1.0
        else:
            fraction = min(1.0, elapsed / self.sweep_duration)
        return wrap_angle(level.range_start + arc_span(level) * fraction)

    def _reset_transient(self) -> None:
        state = self.state
        state.user_angle = self.neutral_angle
        state.driven_angle = wrap_angle(self.level.range_start)
        state.efficiency = 0.0
        state.level_complete = False
        state.running = False
        state.time_remaining = self.level_time
        state.sweep_elapsed = 0.0
        self._started = False
