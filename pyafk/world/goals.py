"""
Movement goals and the planner interface

The planner owns a single "current goal" slot. Setting a new goal replaces
the old one, setting None stops pathing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class MoveNear:
    """Get within `radius` blocks of a point"""
    x: float
    y: float
    z: float
    radius: float = 1


@dataclass(frozen=True)
class MoveToExact:
    """Stand on an exact block"""
    x: float
    y: float
    z: float


Goal = Union[MoveNear, MoveToExact]


@dataclass
class MovementProfile:
    """Movement capabilities the planner needs to build paths.

    Only meaningful once the world version is known.
    """
    version: str
    can_dig: bool = False
    allow_parkour: bool = True
    allow_sprinting: bool = True
    extra: Dict[str, Any] = field(default_factory=dict)


class GoalPlanner(ABC):
    """Goal-directed movement collaborator.

    Drives the agent towards the current goal on its own and emits
    GOAL_REACHED on the owning connection's events when it gets there.
    """

    @property
    @abstractmethod
    def movement_profile(self) -> Optional[MovementProfile]:
        pass

    @property
    @abstractmethod
    def goal(self) -> Optional[Goal]:
        pass

    @abstractmethod
    def set_movement_profile(self, profile: MovementProfile) -> None:
        pass

    @abstractmethod
    def set_goal(self, goal: Optional[Goal]) -> None:
        pass
