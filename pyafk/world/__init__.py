"""
World collaborators: connection and goal planner interfaces
"""

from .connection import WorldConnection, Vec3, CONTROL_STATES
from .goals import GoalPlanner, MovementProfile, MoveNear, MoveToExact, Goal

__all__ = [
    'WorldConnection',
    'Vec3',
    'CONTROL_STATES',
    'GoalPlanner',
    'MovementProfile',
    'MoveNear',
    'MoveToExact',
    'Goal',
]
