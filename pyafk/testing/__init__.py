"""
Testing utilities: an in-memory world to run sessions against
"""

from .simulated_world import (
    ServerScenario,
    SimulatedConnection,
    SimulatedPlanner,
    simulated_connection_factory,
)

__all__ = [
    'ServerScenario',
    'SimulatedConnection',
    'SimulatedPlanner',
    'simulated_connection_factory',
]
