"""Cancellable asyncio tick loop driving a GameSimulation."""

import asyncio
import time
from collections.abc import Callable, Coroutine
from typing import Any

import structlog

from interactive_learning.games.simulation import GameSimulation
from interactive_learning.models.game import GameState

logger = structlog.get_logger()

# Type alias for tick callbacks
TickHandler = Callable[[GameState], Coroutine[Any, Any, None]]


class GameLoop:
    """Runs the simulation's timer while it is running.

    The countdown advances by the fixed tick interval; the driven angle
    advances by measured monotonic time. Pausing or stopping cancels the
    task, so no loop keeps mutating state after its screen is gone.

    Args:
        simulation: Game to drive.
        tick_interval: Seconds between ticks.
        on_tick: Optional async callback receiving the state after each tick.
    """

    def __init__(
        self,
        simulation: GameSimulation,
        tick_interval: float = 0.1,
        on_tick: TickHandler | None = None,
    ):
        self.simulation = simulation
        self.tick_interval = tick_interval
        self._on_tick = on_tick
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """Start (or resume) the simulation and its timer task."""
        if not self.simulation.start():
            return False
        if not self.is_running:
            self._task = asyncio.create_task(self._run())
        return True

    async def pause(self) -> None:
        self.simulation.pause()
        await self._cancel()

    async def stop(self) -> None:
        """Stop the timer for good, e.g. when leaving the game screen."""
        self.simulation.pause()
        await self._cancel()
        logger.debug("game_loop_stopped")

    async def restart_level(self, advance: bool = False) -> None:
        """Stop the timer and reset, optionally moving to the next level."""
        await self._cancel()
        if advance:
            self.simulation.next_level()
        else:
            self.simulation.reset_level()

    async def _cancel(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        if task is asyncio.current_task():
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    async def _run(self) -> None:
        sim = self.simulation
        last = time.monotonic()
        try:
            while True:
                await asyncio.sleep(self.tick_interval)
                now = time.monotonic()
                sim.advance_sweep(now - last)
                last = now
                playing = sim.tick(self.tick_interval)
                if self._on_tick:
                    await self._on_tick(sim.state)
                if not playing:
                    break
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("game_loop_error")
