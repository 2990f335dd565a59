"""
Movement arbiter - single owner for the planner's goal slot

Fixed-position movement and wandering both steer through the same planner
goal. The arbiter records who holds the slot so a takeover is logged and a
release by a stale owner cannot wipe somebody else's goal. The last writer
still wins.
"""

import logging
from typing import Optional

from ..world.goals import Goal, GoalPlanner, MovementProfile

logger = logging.getLogger(__name__)

OWNER_WANDER = "wander"
OWNER_POSITION = "position"


class MovementArbiter:
    """Tracks the owner of the planner's current goal"""

    def __init__(self, planner: GoalPlanner):
        self.planner = planner
        self._owner: Optional[str] = None
        self._goal: Optional[Goal] = None
        self.takeovers = 0

    @property
    def owner(self) -> Optional[str]:
        return self._owner

    @property
    def goal(self) -> Optional[Goal]:
        return self._goal

    def claim(self, owner: str, goal: Goal, profile: Optional[MovementProfile] = None) -> None:
        """Hand `goal` to the planner on behalf of `owner`"""
        if self._owner is not None and self._owner != owner:
            self.takeovers += 1
            logger.warning(f"{owner} goal supersedes active {self._owner} goal {self._goal}")

        if profile is not None:
            self.planner.set_movement_profile(profile)
        self.planner.set_goal(goal)
        self._owner = owner
        self._goal = goal
        logger.debug(f"{owner} -> {goal}")

    def release(self, owner: str) -> bool:
        """Clear the goal if `owner` still holds it"""
        if self._owner != owner:
            return False
        self._owner = None
        self._goal = None
        self.planner.set_goal(None)
        logger.debug(f"{owner} released the goal slot")
        return True

    def goal_reached(self) -> Optional[str]:
        """The planner finished; the slot is free again. Returns the former owner."""
        owner = self._owner
        self._owner = None
        self._goal = None
        return owner
