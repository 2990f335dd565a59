"""
Session and Session Supervisor

A Session owns one world connection from connect to end and wires the auth
handshake, scripted chat, fixed-position movement, wandering and anti-idle
behaviour to its spawn. The supervisor keeps exactly one Session alive,
replacing it after a fixed delay when it ends and auto-reconnect is on.
"""

import asyncio
import logging
import random
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from ..config.bot_config import BotConfig
from ..exceptions import AuthFailedError, WorldConnectionError
from ..session.events import EventType
from ..world.connection import WorldConnection
from ..world.goals import MoveToExact, MovementProfile
from .auth import AuthHandshake
from .chat_messages import ChatMessenger
from .movement import MovementArbiter, OWNER_POSITION
from .wander import WanderScheduler

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[BotConfig], WorldConnection]


class SessionState(Enum):
    """Session lifecycle"""
    CONNECTING = "connecting"
    SPAWNED = "spawned"
    ENDED = "ended"


class Session:
    """One lifetime of a world connection and everything hanging off it"""

    def __init__(self, session_id: int, connection: WorldConnection, config: BotConfig,
                 on_end: Callable[['Session', str], None],
                 rng: Optional[random.Random] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.id = session_id
        self.connection = connection
        self.config = config
        self.loop = loop or asyncio.get_running_loop()
        self.rng = rng
        self._on_end_callback = on_end

        self.state = SessionState.CONNECTING
        self.end_reason: Optional[str] = None
        self.movement_profile: Optional[MovementProfile] = None
        self.arbiter = MovementArbiter(connection.planner)
        self.auth = AuthHandshake(connection, config.auto_auth.timeout)
        self.auth_task: Optional[asyncio.Task] = None
        self.wander: Optional[WanderScheduler] = None
        self.chat: Optional[ChatMessenger] = None

        self._subscriptions: List[Tuple[EventType, Callable]] = []

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self):
        """Subscribe to the connection and start connecting"""
        self._listen(EventType.SPAWN, self._on_spawn)
        self._listen(EventType.CHAT_MESSAGE, self._on_chat)
        self._listen(EventType.GOAL_REACHED, self._on_goal_reached)
        self._listen(EventType.DEATH, self._on_death)
        self._listen(EventType.KICKED, self._on_kicked)
        self._listen(EventType.ERROR, self._on_error)
        self._listen(EventType.SESSION_END, self._on_session_end)

        try:
            self.connection.connect()
        except (WorldConnectionError, OSError) as e:
            logger.error(f"Session #{self.id} could not connect: {e}")
            self._end(str(e))

    def close(self):
        """Tear everything down. Idempotent."""
        if self.wander is not None:
            self.wander.stop()
        if self.chat is not None:
            self.chat.stop()

        self.auth.cancel()
        if self.auth_task is not None and not self.auth_task.done():
            self.auth_task.cancel()

        for event_type, handler in self._subscriptions:
            self.connection.events.unsubscribe(event_type, handler)
        self._subscriptions.clear()

    def disconnect(self):
        """Close the session and drop the connection"""
        self.close()
        try:
            self.connection.disconnect()
        except WorldConnectionError as e:
            logger.debug(f"Disconnect failed: {e}")

    @property
    def ended(self) -> bool:
        return self.state == SessionState.ENDED

    def _listen(self, event_type: EventType, handler: Callable):
        self.connection.events.subscribe(event_type, handler)
        self._subscriptions.append((event_type, handler))

    def _end(self, reason: str):
        if self.state == SessionState.ENDED:
            logger.debug(f"Session #{self.id} already ended, ignoring repeat end ({reason})")
            return
        self.state = SessionState.ENDED
        self.end_reason = reason
        logger.info(f"Session #{self.id} ended: {reason}")
        self.close()
        self._on_end_callback(self, reason)

    # =========================================================================
    # Spawn
    # =========================================================================

    def _on_spawn(self, event):
        # Respawns after death fire spawn again; behaviours start only once
        if self.state != SessionState.CONNECTING:
            return
        self.state = SessionState.SPAWNED
        logger.info(f"Bot joined the server at {self.connection.position}")

        try:
            self.movement_profile = self.connection.create_movement_profile()
        except WorldConnectionError as e:
            logger.warning(f"Could not init movement profile immediately: {e}")

        config = self.config

        if config.auto_auth.enabled:
            logger.info("Started auto-auth module")
            self.auth_task = self.loop.create_task(self._authenticate(config.auto_auth.password))

        if config.chat_messages.enabled:
            logger.info("Started chat-messages module")
            self.chat = ChatMessenger(self.connection, config.chat_messages, self.loop)
            self.chat.start()

        if config.movement_conflict:
            logger.warning("Both position and wander movement are enabled; the latest goal wins")

        if config.position.enabled:
            self._move_to_position()

        if config.wander.enabled:
            logger.info("Mob-like movement enabled")
            self.wander = WanderScheduler(
                self.connection, self.arbiter, self.movement_profile, rng=self.rng, loop=self.loop
            )
            self.wander.start(config.wander)

        if config.anti_afk.enabled:
            self._apply_anti_afk()

    async def _authenticate(self, secret: str):
        try:
            await self.auth.authenticate(secret)
        except (AuthFailedError, ValueError) as e:
            logger.error(f"Auto-auth failed: {e}")

    def _move_to_position(self):
        pos = self.config.position
        if self.movement_profile is None:
            logger.warning(f"Could not set position goal ({pos.x}, {pos.y}, {pos.z}) yet: no movement profile")
            return
        logger.info(f"Moving to ({pos.x}, {pos.y}, {pos.z})")
        try:
            self.arbiter.claim(OWNER_POSITION, MoveToExact(pos.x, pos.y, pos.z), self.movement_profile)
        except WorldConnectionError as e:
            logger.warning(f"Could not set position goal yet: {e}")

    def _apply_anti_afk(self):
        try:
            self.connection.set_control_state('jump', True)
            if self.config.anti_afk.sneak:
                self.connection.set_control_state('sneak', True)
        except WorldConnectionError as e:
            logger.warning(f"Could not apply anti-afk controls: {e}")

    # =========================================================================
    # Informational events
    # =========================================================================

    def _on_chat(self, event: Any):
        logger.info(f"<{event.get('sender')}> {event.get('message')}")

    def _on_goal_reached(self, event: Any):
        owner = self.arbiter.goal_reached()
        logger.info(f"Goal reached ({owner or 'unowned'}) at {self.connection.position}")

    def _on_death(self, event: Any):
        logger.info(f"Bot died and respawned at {self.connection.position}")

    def _on_kicked(self, event: Any):
        reason = event.get('reason') if isinstance(event, dict) else event
        logger.warning(f"Kicked: {reason}")

    def _on_error(self, event: Any):
        error = event.get('error') if isinstance(event, dict) else event
        logger.error(f"Connection error: {error}")

    def _on_session_end(self, event: Any):
        reason = event.get('reason') if isinstance(event, dict) else None
        self._end(reason or "connection closed")


class SessionSupervisor:
    """Keeps one Session alive and recreates it after it ends"""

    def __init__(self, config: BotConfig, connection_factory: ConnectionFactory,
                 rng: Optional[random.Random] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.config = config
        self.connection_factory = connection_factory
        self.rng = rng
        self.loop = loop or asyncio.get_running_loop()

        self.session: Optional[Session] = None
        self.sessions_created = 0
        self.reconnects_scheduled = 0
        self._reconnect_handle: Optional[asyncio.TimerHandle] = None
        self._stopped = False
        self._closed: asyncio.Future = self.loop.create_future()

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_handle is not None

    @property
    def closed(self) -> bool:
        return self._closed.done()

    def start(self) -> Optional[Session]:
        """Create the first session"""
        return self._create_session()

    def stop(self):
        """Cancel any pending reconnect and drop the current session"""
        if self._stopped:
            return
        self._stopped = True
        self._cancel_reconnect()
        if self.session is not None:
            self.session.disconnect()
        self._close()
        logger.info("Supervisor stopped")

    async def wait_closed(self):
        """Wait until stopped, or until a session ends with auto-reconnect off"""
        await asyncio.shield(self._closed)

    def _create_session(self) -> Optional[Session]:
        self._reconnect_handle = None
        if self._stopped:
            return None

        self.sessions_created += 1
        server = self.config.server
        logger.info(f"Creating session #{self.sessions_created} for {server.host}:{server.port}")

        try:
            connection = self.connection_factory(self.config)
        except WorldConnectionError as e:
            logger.error(f"Could not create connection: {e}")
            connection = None
        except Exception:
            # Factories come from user code
            logger.exception("Connection factory failed")
            connection = None

        if connection is None:
            self.session = None
            self._schedule_reconnect()
            return None

        session = Session(
            self.sessions_created, connection, self.config, self._on_session_end,
            rng=self.rng, loop=self.loop
        )
        self.session = session
        session.open()
        return session

    def _on_session_end(self, session: Session, reason: str):
        if session is not self.session or self._stopped:
            logger.debug(f"Ignoring end of inactive session #{session.id}")
            return
        self._schedule_reconnect()

    def _schedule_reconnect(self):
        if not self.config.auto_reconnect.enabled:
            logger.info("Auto-reconnect disabled, staying offline")
            self._close()
            return

        if self._reconnect_handle is not None:
            logger.debug("Reconnect already scheduled")
            return

        delay = self.config.auto_reconnect.delay / 1000.0
        self.reconnects_scheduled += 1
        logger.info(f"Reconnecting in {delay:g}s")
        self._reconnect_handle = self.loop.call_later(delay, self._create_session)

    def _cancel_reconnect(self):
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    def _close(self):
        if not self._closed.done():
            self._closed.set_result(None)
