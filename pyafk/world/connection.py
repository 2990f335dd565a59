"""
World connection interface

The low-level world client lives outside this package. Anything that can
connect, relay events through an EventManager and accept chat / control
commands can drive a Session.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..session.events import EventManager
from .goals import GoalPlanner, MovementProfile


# Control state names understood by set_control_state
CONTROL_STATES = ('forward', 'back', 'left', 'right', 'jump', 'sprint', 'sneak')


@dataclass(frozen=True)
class Vec3:
    """World position"""
    x: float
    y: float
    z: float

    def offset(self, dx: float, dy: float, dz: float) -> 'Vec3':
        return Vec3(self.x + dx, self.y + dy, self.z + dz)


class WorldConnection(ABC):
    """One connection to the world server.

    Events emitted on `events` (payload in braces):
        SPAWN, CHAT_MESSAGE {sender, message}, GOAL_REACHED, DEATH,
        KICKED {reason}, ERROR {error}, SESSION_END {reason}

    Commands raise WorldConnectionError when the transport is gone.
    """

    def __init__(self):
        self.events = EventManager()

    @property
    @abstractmethod
    def connected(self) -> bool:
        pass

    @property
    @abstractmethod
    def position(self) -> Optional[Vec3]:
        """Current position, None before spawn"""
        pass

    @property
    @abstractmethod
    def planner(self) -> GoalPlanner:
        pass

    @abstractmethod
    def connect(self) -> None:
        """Start connecting. Progress is reported through events."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        pass

    @abstractmethod
    def chat(self, text: str) -> None:
        pass

    @abstractmethod
    def set_control_state(self, name: str, state: bool) -> None:
        pass

    @abstractmethod
    def clear_control_states(self) -> None:
        pass

    @abstractmethod
    def look(self, yaw: float, pitch: float) -> None:
        pass

    @abstractmethod
    def create_movement_profile(self) -> MovementProfile:
        """Build the planner profile. Raises WorldConnectionError before the
        world version is known."""
        pass
