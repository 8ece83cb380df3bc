"""WebSocket session handler for the tab-based UI."""

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import WebSocket
from pydantic import ValidationError as PydanticValidationError

from models.database import get_database, get_users_collection
from models.document_store import DocumentStore
from schemas.auth import AuthUser
from schemas.websocket import WebSocketMessage, WebSocketResponse
from services.auth_service import AuthService, AuthSession
from services.log_store import LogStoreAdapter
from services.notifications import Notifier
from services.plan_generator import PlanGenerator
from services.profile_store import ProfileStoreAdapter
from services.view_controller import ViewController
from utils.errors import TrainingDiaryError
from utils.logger import setup_logger

logger = setup_logger(__name__)

_STATE = object()


def build_view_controller(user: AuthUser, notifier: Notifier, on_change: Callable[[], None]) -> ViewController:
    """Wire a controller to the MongoDB-backed adapters."""
    store = DocumentStore(get_database())
    return ViewController(
        user=user,
        profile_store=ProfileStoreAdapter(store),
        log_store=LogStoreAdapter(store),
        plan_generator=PlanGenerator(),
        notifier=notifier,
        on_change=on_change,
    )


class ClientSession:
    """State of one connected client.

    Outgoing events go through a single queue so sends never interleave.
    State pushes are coalesced: several changes before the sender runs
    produce one ``state`` event.
    """

    def __init__(
        self,
        websocket: WebSocket,
        session_id: str,
        auth: AuthSession,
        controller_factory: Callable[..., ViewController] = build_view_controller,
    ):
        self.websocket = websocket
        self.session_id = session_id
        self.auth = auth
        self.controller_factory = controller_factory
        self.controller: Optional[ViewController] = None
        self.notifier = Notifier(on_change=self._on_notification)
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._state_pending = False
        self._tasks = []

    # Outgoing

    def _on_notification(self, notification) -> None:
        self.send(WebSocketResponse(
            event="notification",
            data=notification.to_dict() if notification else None,
            session_id=self.session_id,
        ))
        self.mark_dirty()

    def mark_dirty(self) -> None:
        if not self._state_pending:
            self._state_pending = True
            self._outbox.put_nowait(_STATE)

    def send(self, response: WebSocketResponse) -> None:
        self._outbox.put_nowait(response)

    def send_error(self, message: str) -> None:
        self.send(WebSocketResponse(event="error", data={"message": message}, session_id=self.session_id))

    async def _sender(self) -> None:
        while True:
            item = await self._outbox.get()
            if item is _STATE:
                self._state_pending = False
                if self.controller is None:
                    continue
                item = WebSocketResponse(event="state", data=self.controller.render(), session_id=self.session_id)
            await self.websocket.send_json(item.model_dump(mode="json"))

    # Auth gate

    async def _watch_auth(self) -> None:
        async for user in self.auth.observe_auth_state():
            if self.controller is not None and (user is None or user.uid != self.controller.user.uid):
                await self.controller.stop()
                self.controller = None
            if user is not None and self.controller is None:
                self.controller = self.controller_factory(user, self.notifier, self.mark_dirty)
                await self.controller.start()
            self.send(WebSocketResponse(
                event="auth",
                data={"user": user.model_dump() if user else None},
                session_id=self.session_id,
            ))
            self.mark_dirty()

    async def start(self) -> None:
        self._tasks = [
            asyncio.create_task(self._sender()),
            asyncio.create_task(self._watch_auth()),
        ]

    async def close(self) -> None:
        if self.controller is not None:
            await self.controller.stop()
            self.controller = None
        self.notifier.close()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

    # Incoming

    def _require_controller(self) -> ViewController:
        if self.controller is None:
            raise TrainingDiaryError("Please sign in first.")
        return self.controller

    async def _sign_up(self, payload: Dict[str, Any]) -> None:
        await self.auth.sign_up(payload.get("email", ""), payload.get("password", ""))

    async def _sign_in(self, payload: Dict[str, Any]) -> None:
        await self.auth.sign_in(payload.get("email", ""), payload.get("password", ""))

    async def _sign_out(self, payload: Dict[str, Any]) -> None:
        await self.auth.sign_out()

    async def _select_screen(self, payload: Dict[str, Any]) -> None:
        self._require_controller().select_screen(payload.get("screen"))

    async def _select_workout_day(self, payload: Dict[str, Any]) -> None:
        self._require_controller().select_workout_day(payload.get("day", ""))

    async def _save_workout(self, payload: Dict[str, Any]) -> None:
        await self._require_controller().save_workout(payload.get("form", {}))

    async def _add_food(self, payload: Dict[str, Any]) -> None:
        await self._require_controller().add_food(payload.get("form", {}))

    async def _remove_food(self, payload: Dict[str, Any]) -> None:
        await self._require_controller().remove_food(payload.get("entry_id", ""))

    async def _edit_plan(self, payload: Dict[str, Any]) -> None:
        self._require_controller().edit_plan(payload.get("operation", ""), **payload.get("arguments", {}))

    async def _update_goals(self, payload: Dict[str, Any]) -> None:
        self._require_controller().update_goals(**payload.get("goals", {}))

    async def _reset_draft(self, payload: Dict[str, Any]) -> None:
        self._require_controller().reset_draft()

    async def _save_settings(self, payload: Dict[str, Any]) -> None:
        await self._require_controller().save_settings()

    async def _retry(self, payload: Dict[str, Any]) -> None:
        self._require_controller().retry()

    async def _generate_plan(self, payload: Dict[str, Any]) -> None:
        controller = self._require_controller()
        # Runs in the background so other actions stay responsive meanwhile
        task = asyncio.create_task(controller.generate_plan(payload.get("request", "")))
        self._tasks.append(task)
        task.add_done_callback(self._forget_task)

    def _forget_task(self, task: asyncio.Task) -> None:
        if task in self._tasks:
            self._tasks.remove(task)

    @property
    def actions(self) -> Dict[str, Callable[[Dict[str, Any]], Awaitable[None]]]:
        return {
            "sign_up": self._sign_up,
            "sign_in": self._sign_in,
            "sign_out": self._sign_out,
            "select_screen": self._select_screen,
            "select_workout_day": self._select_workout_day,
            "save_workout": self._save_workout,
            "add_food": self._add_food,
            "remove_food": self._remove_food,
            "edit_plan": self._edit_plan,
            "update_goals": self._update_goals,
            "reset_draft": self._reset_draft,
            "save_settings": self._save_settings,
            "generate_plan": self._generate_plan,
            "retry": self._retry,
        }

    async def handle_message(self, message: str) -> None:
        """Dispatch one client action; errors are reported, never raised."""
        try:
            ws_message = WebSocketMessage(**json.loads(message))
        except (json.JSONDecodeError, TypeError, PydanticValidationError) as e:
            logger.error(f"Invalid WebSocket message from {self.session_id}: {e}")
            self.send_error("Invalid message format")
            return

        logger.info(f"Action {ws_message.action} from {self.session_id}")
        handler = self.actions.get(ws_message.action)
        if handler is None:
            self.send_error(f"Unknown action '{ws_message.action}'")
            return

        try:
            await handler(ws_message.payload)
        except TrainingDiaryError as e:
            logger.warning(f"Action {ws_message.action} failed for {self.session_id}: {e.message}")
            self.notifier.show(e.message, is_error=True)
        except Exception as e:
            logger.error(f"Error handling action {ws_message.action}: {e}", exc_info=True)
            self.send_error("Error processing request")


class WebSocketHandler:
    """Registry of connected client sessions."""

    def __init__(self, auth_service_factory: Callable[[], AuthService] = None):
        self.active_sessions: Dict[str, ClientSession] = {}
        self.auth_service_factory = auth_service_factory or (lambda: AuthService(get_users_collection()))

    async def connect(self, websocket: WebSocket, session_id: str, **session_options) -> ClientSession:
        """Accept a WebSocket connection and start its session."""
        await websocket.accept()
        session = ClientSession(websocket, session_id, AuthSession(self.auth_service_factory()), **session_options)
        self.active_sessions[session_id] = session
        await session.start()
        logger.info(f"WebSocket connected: {session_id}")
        return session

    async def disconnect(self, session_id: str) -> None:
        """Tear down a session and its live subscriptions."""
        session = self.active_sessions.pop(session_id, None)
        if session is not None:
            await session.close()
            logger.info(f"WebSocket disconnected: {session_id}")


# Global WebSocket handler instance
ws_handler = WebSocketHandler()
