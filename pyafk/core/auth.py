"""
Auth Handshake Coordinator
==========================

Registers and logs in through chat commands, the way auth plugins on most
servers expect. Replies arrive on the shared chat stream mixed with
unrelated traffic, so each step listens for a fixed set of phrases:

- a success phrase settles the step successfully
- a failure phrase fails the step immediately
- nothing decisive within the timeout settles it successfully (fail open),
  so an unfamiliar wording never stalls the session

Each step holds exactly one chat subscription, and it is removed before the
step settles whatever the outcome.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..exceptions import AuthFailedError, WorldConnectionError
from ..session.events import EventType
from ..world.connection import WorldConnection

logger = logging.getLogger(__name__)

DEFAULT_AUTH_TIMEOUT = 8.0


class AuthState(Enum):
    """Handshake progress for one session"""
    IDLE = "idle"
    AWAITING_REGISTER_REPLY = "awaiting_register_reply"
    REGISTERED = "registered"
    AWAITING_LOGIN_REPLY = "awaiting_login_reply"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


@dataclass(frozen=True)
class PhraseSet:
    """Lower-case phrases that decide one handshake step"""
    step: str
    success: Tuple[str, ...]
    failures: Tuple[Tuple[str, str], ...]  # (phrase, reason)

    def match(self, message: str) -> Tuple[Optional[bool], Optional[str]]:
        """Classify a chat line: (True, None) success, (False, reason)
        failure, (None, None) undecided"""
        lower = message.lower()
        if any(phrase in lower for phrase in self.success):
            return True, None
        for phrase, reason in self.failures:
            if phrase in lower:
                return False, reason
        return None, None


REGISTER_PHRASES = PhraseSet(
    step="registration",
    success=("successfully registered", "registered successfully", "already registered"),
    failures=(("invalid command", "Invalid command"),),
)

LOGIN_PHRASES = PhraseSet(
    step="login",
    success=("successfully logged in", "logged in successfully", "login successful"),
    failures=(
        ("invalid password", "Invalid password"),
        ("not registered", "Not registered"),
    ),
)


class ReplyWaiter:
    """Single-resolution cell for one handshake step.

    Settled by the first of {decisive chat line, timeout}. Settling cancels
    the timer and removes the chat listener in the same call.
    """

    def __init__(self, connection: WorldConnection, phrases: PhraseSet, timeout: float,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.connection = connection
        self.phrases = phrases
        self.timeout = timeout
        self.loop = loop or asyncio.get_running_loop()
        self.future: asyncio.Future = self.loop.create_future()
        self.timed_out = False
        self._timer: Optional[asyncio.TimerHandle] = None
        self._listening = False

    def arm(self) -> asyncio.Future:
        self.connection.events.subscribe(EventType.CHAT_MESSAGE, self._on_chat)
        self._listening = True
        self._timer = self.loop.call_later(self.timeout, self._on_timeout)
        return self.future

    def _on_chat(self, event):
        message = event.get('message', '') if isinstance(event, dict) else str(event)
        decided, reason = self.phrases.match(message)
        if decided is True:
            self._settle()
        elif decided is False:
            self._settle(AuthFailedError(self.phrases.step, reason, message))

    def _on_timeout(self):
        self._timer = None
        self.timed_out = True
        self._settle()

    def _settle(self, error: Optional[Exception] = None):
        self.dispose()
        if self.future.done():
            return
        if error is not None:
            self.future.set_exception(error)
        else:
            self.future.set_result(None)

    def dispose(self):
        """Drop the timer and the listener. Safe to call more than once."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._listening:
            self.connection.events.unsubscribe(EventType.CHAT_MESSAGE, self._on_chat)
            self._listening = False


def _require_secret(secret: str):
    if not isinstance(secret, str) or not secret:
        raise ValueError("Auth secret must be a non-empty string")


class AuthHandshake:
    """Register-then-login exchange for one session"""

    def __init__(self, connection: WorldConnection, timeout: float = DEFAULT_AUTH_TIMEOUT):
        self.connection = connection
        self.timeout = timeout
        self.state = AuthState.IDLE
        self.failure_reason: Optional[str] = None
        self.commands_sent: List[str] = []
        self._waiter: Optional[ReplyWaiter] = None

    @property
    def pending(self) -> bool:
        """True while a step is waiting for its reply"""
        return self._waiter is not None

    async def register(self, secret: str) -> None:
        """Send /register and wait for the verdict"""
        _require_secret(secret)
        self.state = AuthState.AWAITING_REGISTER_REPLY
        await self._run_step(f"/register {secret} {secret}", REGISTER_PHRASES)
        self.state = AuthState.REGISTERED

    async def login(self, secret: str) -> None:
        """Send /login and wait for the verdict"""
        _require_secret(secret)
        self.state = AuthState.AWAITING_LOGIN_REPLY
        await self._run_step(f"/login {secret}", LOGIN_PHRASES)
        self.state = AuthState.AUTHENTICATED

    async def authenticate(self, secret: str) -> None:
        """Register, then log in. Raises AuthFailedError from the first
        step that fails; login is never attempted after a failed register."""
        await self.register(secret)
        await self.login(secret)
        logger.info("Authentication complete")

    def cancel(self):
        """Abandon the step in flight: listener and timer go now, the
        awaiting coroutine sees CancelledError."""
        waiter = self._waiter
        if waiter is None:
            return
        waiter.dispose()
        waiter.future.cancel()

    async def _run_step(self, command: str, phrases: PhraseSet) -> None:
        name = command.split()[0]
        waiter = ReplyWaiter(self.connection, phrases, self.timeout)
        self._waiter = waiter
        future = waiter.arm()
        try:
            try:
                self.connection.chat(command)
                self.commands_sent.append(name)
                logger.info(f"Sent {name} command.")
            except WorldConnectionError as e:
                logger.warning(f"Could not send {name}: {e}")

            await future
        except AuthFailedError as e:
            self.state = AuthState.FAILED
            self.failure_reason = e.reason
            raise
        finally:
            waiter.dispose()
            self._waiter = None

        if waiter.timed_out:
            logger.warning(f"No {phrases.step} reply within {self.timeout:g}s, assuming success")
        else:
            logger.info(f"{phrases.step.capitalize()} accepted")
