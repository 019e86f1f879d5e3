"""Level tables for the solar-angle and wind-alignment games."""

from enum import StrEnum

from interactive_learning.models.game import GameLevel


class GameKind(StrEnum):
    SOLAR = "solar"
    WIND = "wind"

    @property
    def title(self) -> str:
        return "Solar Angle Optimizer" if self is GameKind.SOLAR else "Wind Alignment Game"


SOLAR_LEVELS: list[GameLevel] = [
    GameLevel(number=1, range_start=60, range_end=120, parameter="Summer", target_efficiency=60),
    GameLevel(number=2, range_start=45, range_end=135, parameter="Summer", target_efficiency=65),
    GameLevel(number=3, range_start=30, range_end=150, parameter="Spring", target_efficiency=70),
    GameLevel(number=4, range_start=20, range_end=160, parameter="Winter", target_efficiency=70),
    GameLevel(number=5, range_start=15, range_end=165, parameter="Winter", target_efficiency=75),
]

WIND_LEVELS: list[GameLevel] = [
    GameLevel(number=1, range_start=45, range_end=90, parameter=5.0, target_efficiency=60),
    GameLevel(number=2, range_start=30, range_end=100, parameter=6.0, target_efficiency=65),
    GameLevel(number=3, range_start=0, range_end=180, parameter=7.0, target_efficiency=70),
    GameLevel(number=4, range_start=270, range_end=360, parameter=8.0, target_efficiency=75),
    GameLevel(number=5, range_start=350, range_end=10, parameter=9.0, target_efficiency=80),
]

# Angle the user's control returns to whenever a level resets
NEUTRAL_ANGLES: dict[GameKind, float] = {
    GameKind.SOLAR: 45.0,
    GameKind.WIND: 0.0,
}

LEVELS: dict[GameKind, list[GameLevel]] = {
    GameKind.SOLAR: SOLAR_LEVELS,
    GameKind.WIND: WIND_LEVELS,
}
