#!/usr/bin/env python3
"""
pyafk command line entry point

    pyafk settings.json --simulate
    pyafk settings.json --connection mypackage.world:create_connection
"""

import argparse
import asyncio
import importlib
import logging
import sys
from typing import List, Optional

from .config import BotConfig, ConfigValidationError
from .core.session import ConnectionFactory, SessionSupervisor
from .health import HealthServer
from .session.logging_config import configure_logging

logger = logging.getLogger(__name__)


def load_connection_factory(spec: str) -> ConnectionFactory:
    """Resolve a `module:callable` connection factory"""
    module_name, _, attr = spec.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Connection factory must look like module:callable, got '{spec}'")
    module = importlib.import_module(module_name)
    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ValueError(f"{spec} is not callable")
    return factory


async def run_bot(config: BotConfig, factory: ConnectionFactory):
    """Run the supervisor (and liveness server, if enabled) until it closes"""
    health = HealthServer(config.health) if config.health.enabled else None
    if health is not None:
        await health.start()

    supervisor = SessionSupervisor(config, factory)
    supervisor.start()
    try:
        await supervisor.wait_closed()
    finally:
        supervisor.stop()
        if health is not None:
            await health.stop()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Keep an idle bot session alive in a multi-user world")
    parser.add_argument("settings", help="Path to settings.json")
    parser.add_argument("--connection", help="World connection factory as module:callable")
    parser.add_argument("--simulate", action="store_true", help="Run against the built-in simulated world")
    parser.add_argument("--debug", default="", help="Comma separated debug subsystems (or 'all')")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args(argv)

    subsystems = {s.strip() for s in args.debug.split(",") if s.strip()}
    configure_logging(getattr(logging, args.log_level), subsystems)

    try:
        config = BotConfig.load(args.settings)
    except (OSError, ConfigValidationError) as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 1

    if args.simulate:
        from .testing.simulated_world import simulated_connection_factory
        factory = simulated_connection_factory
    elif args.connection:
        try:
            factory = load_connection_factory(args.connection)
        except (ImportError, ValueError) as e:
            print(f"Cannot load connection factory: {e}", file=sys.stderr)
            return 1
    else:
        parser.error("no world connection: pass --connection module:callable or --simulate")

    logger.info(f"Starting bot {config.account.username}")
    try:
        asyncio.run(run_bot(config, factory))
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
