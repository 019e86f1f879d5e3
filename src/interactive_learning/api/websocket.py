"""Host WebSocket handler - connects the UI to the flow, games and chat."""

import asyncio

import numpy as np
import structlog
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from interactive_learning.chat.service import ChatService, OpenAIChatService
from interactive_learning.chat.talk_to_me import TalkToMeSession
from interactive_learning.config import Settings
from interactive_learning.games.loop import GameLoop
from interactive_learning.games.simulation import GameSimulation, midpoint_angle
from interactive_learning.learning.actions import parse_action
from interactive_learning.learning.flow import LearningFlowController, Stage, snapshot
from interactive_learning.models.chat import ChatMessage
from interactive_learning.models.game import GameState
from interactive_learning.plugin import InteractiveLearningTask
from interactive_learning.storage.profile_store import ProfileStore

logger = structlog.get_logger()


class LearningSession:
    """One learner's connection: flow controller plus the active game or chat.

    Args:
        settings: Application settings.
        browser_ws: WebSocket connection to the UI.
        store: Profile persistence (built from settings when omitted).
        chat_service: Chat engine (OpenAI-backed when omitted).
    """

    def __init__(
        self,
        settings: Settings,
        browser_ws: WebSocket,
        store: ProfileStore | None = None,
        chat_service: ChatService | None = None,
    ):
        self.settings = settings
        self.browser_ws = browser_ws
        self.store = store or ProfileStore(
            settings.storage_dir,
            db_name=settings.profile_db_name,
            backup_name=settings.backup_file_name,
        )
        self.chat_service = chat_service or OpenAIChatService(
            api_key=settings.openai_api_key,
            model=settings.chat_model,
            audio_model=settings.chat_audio_model,
        )
        self.model_id = settings.default_model_id
        self.task = InteractiveLearningTask()
        self.controller: LearningFlowController | None = None
        self.game: GameLoop | None = None
        self.talk: TalkToMeSession | None = None

    async def start(self) -> None:
        """Record the login, bring the model up and send the first screen."""
        self.controller = await asyncio.to_thread(LearningFlowController, self.store)

        ready_signal: list[str] = []
        await self.task.initialize_model(self.model_id, ready_signal.append)
        error = ready_signal[0] if ready_signal else ""
        await self._send_to_browser({
            "type": "model_state",
            "model_id": self.model_id,
            "ready": not error and self.chat_service.is_ready(self.model_id),
            "error": error,
        })
        await self._send_flow_state()

    async def stop(self) -> None:
        """Tear down anything still running for this connection."""
        await self._close_game()
        await self._close_talk()
        await self.task.cleanup_model(self.model_id, lambda: None)
        logger.info("learning_session_stopped")

    async def handle(self, data: dict) -> None:
        """Route one UI message."""
        msg_type = str(data.get("type", ""))
        try:
            if msg_type.startswith("game."):
                await self._handle_game(msg_type, data)
            elif msg_type.startswith("chat."):
                await self._handle_chat(msg_type, data)
            else:
                await self._handle_flow(data)
        except (TypeError, ValueError) as e:
            await self.send_error("invalid_message", str(e))

    async def _handle_flow(self, data: dict) -> None:
        try:
            action = parse_action(data)
        except ValidationError as e:
            await self.send_error("invalid_action", str(e.errors()[:1]))
            return
        # Persistence happens inside dispatch; keep it off the event loop
        await asyncio.to_thread(self.controller.dispatch, action)
        await self._sync_resources()
        await self._send_flow_state()

    async def _sync_resources(self) -> None:
        """Open or close the game loop and chat session to match the stage."""
        state = self.controller.state
        if state.stage is Stage.GAME and self.game is None:
            simulation = GameSimulation.for_kind(
                state.game,
                level_time=self.settings.level_time_seconds,
                sweep_duration=self.settings.sweep_duration_seconds,
            )
            self.game = GameLoop(
                simulation,
                tick_interval=self.settings.game_tick_seconds,
                on_tick=self._send_game_state,
            )
            await self._send_game_state(simulation.state)
        elif state.stage is not Stage.GAME:
            await self._close_game()

        if state.stage is Stage.TALK_TO_ME:
            if self.talk is None:
                self.talk = TalkToMeSession(
                    self.chat_service, self.model_id, listener=self._send_chat_message
                )
            self.talk.select_tab(state.chat_tab)
        else:
            await self._close_talk()

    async def _handle_game(self, msg_type: str, data: dict) -> None:
        if self.game is None:
            await self.send_error("no_active_game", msg_type)
            return
        sim = self.game.simulation
        if msg_type == "game.start":
            self.game.start()
        elif msg_type == "game.pause":
            await self.game.pause()
        elif msg_type == "game.drag":
            sim.drag(
                float(data.get("x", 0)),
                float(data.get("y", 0)),
                float(data.get("center_x", 0)),
                float(data.get("center_y", 0)),
            )
        elif msg_type == "game.set_angle":
            sim.set_user_angle(float(data.get("angle", 0)))
        elif msg_type == "game.next_level":
            await self.game.restart_level(advance=True)
        elif msg_type == "game.reset_level":
            await self.game.restart_level()
        else:
            await self.send_error("unknown_game_command", msg_type)
            return
        await self._send_game_state(sim.state)

    async def _handle_chat(self, msg_type: str, data: dict) -> None:
        if self.talk is None:
            await self.send_error("chat_not_open", msg_type)
            return
        if msg_type == "chat.text":
            sent = await self.talk.send_text(str(data.get("text", "")))
        elif msg_type == "chat.image":
            sent = await self.talk.send_image(
                str(data.get("image_base64", "")),
                prompt=str(data.get("prompt", "")),
                mime_type=str(data.get("mime_type", "image/png")),
            )
        elif msg_type == "chat.audio":
            samples = np.asarray(data.get("samples", []), dtype=np.float32)
            sent = await self.talk.send_audio(
                samples,
                sample_rate=int(data.get("sample_rate", 16000)),
                prompt=str(data.get("prompt", "")),
            )
        elif msg_type == "chat.reset":
            await self.talk.reset()
            sent = True
        else:
            await self.send_error("unknown_chat_command", msg_type)
            return
        if not sent:
            await self.send_error("chat_input_rejected", msg_type)

    async def _close_game(self) -> None:
        if self.game is not None:
            await self.game.stop()
            self.game = None

    async def _close_talk(self) -> None:
        if self.talk is not None:
            await self.talk.close()
            self.talk = None

    async def _send_flow_state(self) -> None:
        await self._send_to_browser({"type": "flow_state", "state": snapshot(self.controller)})

    async def _send_game_state(self, state: GameState) -> None:
        if self.game is None:
            return
        sim = self.game.simulation
        await self._send_to_browser({
            "type": "game_state",
            **state.model_dump(),
            "status": sim.status.value,
            "target_efficiency": sim.level.target_efficiency,
            "parameter": sim.level.parameter,
            "midpoint": midpoint_angle(sim.level),
            "levels": len(sim.levels),
        })

    async def _send_chat_message(self, message: ChatMessage) -> None:
        await self._send_to_browser({
            "type": "chat_message",
            **message.model_dump(mode="json", exclude={"image_base64", "audio_base64"}),
        })

    async def send_error(self, reason: str, detail: str = "") -> None:
        await self._send_to_browser({"type": "error", "reason": reason, "detail": detail})

    async def _send_to_browser(self, data: dict) -> None:
        """Send a message to the browser WebSocket."""
        try:
            await self.browser_ws.send_json(data)
        except Exception:
            logger.warning("browser_send_failed")


async def handle_browser_websocket(
    websocket: WebSocket, settings: Settings
) -> None:
    """Handle a UI WebSocket connection."""
    await websocket.accept()
    session = LearningSession(settings, websocket)

    try:
        await session.start()
        while True:
            data = await websocket.receive_json()
            if not isinstance(data, dict):
                await session.send_error("invalid_message")
                continue
            await session.handle(data)

    except WebSocketDisconnect:
        logger.info("browser_disconnected")
    except Exception:
        logger.exception("websocket_handler_error")
    finally:
        try:
            await session.stop()
        except Exception:
            logger.exception("learning_session_stop_failed")
