"""
pyafk - Keep an idle bot session alive in a multi-user world

Usage:
    import asyncio
    from pyafk import BotConfig, SessionSupervisor

    async def main():
        config = BotConfig.load("settings.json")
        supervisor = SessionSupervisor(config, my_connection_factory)
        supervisor.start()
        await supervisor.wait_closed()

    asyncio.run(main())

Try it without a server:
    from pyafk.testing import simulated_connection_factory

    supervisor = SessionSupervisor(config, simulated_connection_factory)

Or from the shell:
    pyafk settings.json --simulate
"""

__version__ = "1.0.0"

from .config import BotConfig, ConfigValidationError
from .core import AuthHandshake, AuthState, WanderScheduler, Session, SessionSupervisor
from .exceptions import PyAfkError, AuthFailedError, WorldConnectionError
from .session import EventType, EventManager, configure_logging
from .world import WorldConnection, GoalPlanner, MovementProfile, MoveNear, MoveToExact, Vec3

__all__ = [
    "BotConfig",
    "ConfigValidationError",
    "AuthHandshake",
    "AuthState",
    "WanderScheduler",
    "Session",
    "SessionSupervisor",
    "PyAfkError",
    "AuthFailedError",
    "WorldConnectionError",
    "EventType",
    "EventManager",
    "configure_logging",
    "WorldConnection",
    "GoalPlanner",
    "MovementProfile",
    "MoveNear",
    "MoveToExact",
    "Vec3",
]
