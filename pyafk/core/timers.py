"""
Owned timer set

Every component that arms timers owns one TimerSet. A timer leaves the set
either by firing or by being cancelled, never both.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Set

logger = logging.getLogger(__name__)


class TimerSet:
    """Named timer slots plus fire-and-forget ephemeral timers on one loop"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()
        self._named: Dict[str, asyncio.TimerHandle] = {}
        self._ephemeral: Set[asyncio.TimerHandle] = set()

    def set(self, name: str, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        """Arm the named slot, cancelling whatever it held before"""
        self.cancel(name)
        handle = None

        def fire():
            if self._named.get(name) is handle:
                del self._named[name]
            callback()

        handle = self.loop.call_later(delay, fire)
        self._named[name] = handle
        return handle

    def add(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        """Arm an anonymous timer that is only tracked until it fires"""
        handle = None

        def fire():
            self._ephemeral.discard(handle)
            callback()

        handle = self.loop.call_later(delay, fire)
        self._ephemeral.add(handle)
        return handle

    def cancel(self, name: str) -> bool:
        handle = self._named.pop(name, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> int:
        """Cancel every outstanding timer. Returns how many were pending."""
        handles = list(self._named.values()) + list(self._ephemeral)
        self._named.clear()
        self._ephemeral.clear()
        for handle in handles:
            handle.cancel()
        if handles:
            logger.debug(f"Cancelled {len(handles)} timer(s)")
        return len(handles)

    def is_armed(self, name: str) -> bool:
        return name in self._named

    def get(self, name: str) -> Optional[asyncio.TimerHandle]:
        return self._named.get(name)

    @property
    def armed(self) -> List[str]:
        """Names of the armed slots"""
        return sorted(self._named)

    def __len__(self) -> int:
        return len(self._named) + len(self._ephemeral)
