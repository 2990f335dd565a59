"""
Scripted chat messages sent after spawning
"""

import asyncio
import logging
from typing import Optional

from ..config.bot_config import ChatMessagesConfig
from ..exceptions import WorldConnectionError
from ..world.connection import WorldConnection
from .timers import TimerSet

logger = logging.getLogger(__name__)

REPEAT_SLOT = "repeat"


class ChatMessenger:
    """Sends the configured lines once, or one at a time on a repeating timer"""

    def __init__(self, connection: WorldConnection, config: ChatMessagesConfig,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.connection = connection
        self.config = config
        self.timers = TimerSet(loop)
        self.sent = 0
        self._index = 0

    def start(self):
        messages = self.config.messages
        if not messages:
            logger.info("No chat messages configured")
            return

        if self.config.repeat:
            logger.info(f"Repeating {len(messages)} message(s) every {self.config.repeat_delay:g}s")
            self.timers.set(REPEAT_SLOT, self.config.repeat_delay, self._send_next)
        else:
            for message in messages:
                self._say(message)

    def stop(self):
        self.timers.cancel_all()

    def _send_next(self):
        messages = self.config.messages
        self._say(messages[self._index])
        self._index = (self._index + 1) % len(messages)
        self.timers.set(REPEAT_SLOT, self.config.repeat_delay, self._send_next)

    def _say(self, message: str):
        try:
            self.connection.chat(message)
            self.sent += 1
        except WorldConnectionError as e:
            logger.warning(f"Could not send chat message: {e}")
