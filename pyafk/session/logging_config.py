"""
Logging configuration for pyafk with clear module prefixes and debug controls
"""

import logging
import os
from typing import Optional, Set


class ModuleLogger:
    """Custom logger that adds module-specific prefixes and debug control"""

    # Module prefix mapping
    MODULE_PREFIXES = {
        # Coordination core
        'pyafk.core.auth': '[AUTH]',
        'pyafk.core.wander': '[WANDER]',
        'pyafk.core.session': '[SESSION]',
        'pyafk.core.movement': '[MOVEMENT]',
        'pyafk.core.chat_messages': '[CHAT]',

        # Plumbing
        'pyafk.session.events': '[EVENT]',
        'pyafk.health': '[HEALTH]',
        'pyafk.testing': '[SIM]',
        'pyafk.cli': '[AFKBOT]',
    }

    # Debug subsystem -> module it switches to DEBUG
    DEBUG_SUBSYSTEMS = {
        'auth': 'pyafk.core.auth',
        'wander': 'pyafk.core.wander',
        'session': 'pyafk.core.session',
        'movement': 'pyafk.core.movement',
        'chat': 'pyafk.core.chat_messages',
        'events': 'pyafk.session.events',
        'health': 'pyafk.health',
        'testing': 'pyafk.testing',
    }

    # Track which debug subsystems are enabled
    _enabled_debug_subsystems: Set[str] = set()

    @classmethod
    def enable_debug_subsystem(cls, subsystem: str) -> None:
        """Enable debug logging for a specific subsystem"""
        if subsystem in cls.DEBUG_SUBSYSTEMS:
            cls._enabled_debug_subsystems.add(subsystem)

    @classmethod
    def disable_debug_subsystem(cls, subsystem: str) -> None:
        """Disable debug logging for a specific subsystem"""
        cls._enabled_debug_subsystems.discard(subsystem)

    @classmethod
    def is_debug_enabled(cls, subsystem: str) -> bool:
        """Check if debug is enabled for a subsystem"""
        return subsystem in cls._enabled_debug_subsystems

    @classmethod
    def get_debug_level_for_module(cls, module_name: str, default: int = logging.INFO) -> int:
        """Get appropriate level for a module based on enabled subsystems"""
        for subsystem in cls._enabled_debug_subsystems:
            module_prefix = cls.DEBUG_SUBSYSTEMS[subsystem]
            if module_name == module_prefix or module_name.startswith(module_prefix + '.'):
                return logging.DEBUG
        return default

    @classmethod
    def get_prefix(cls, name: str) -> str:
        for module_name, module_prefix in cls.MODULE_PREFIXES.items():
            if name.startswith(module_name):
                return module_prefix
        return '[UNKNOWN]'

    @classmethod
    def get_logger(cls, name: str, level: int = logging.INFO) -> logging.Logger:
        """Get a logger with appropriate prefix and level for the module"""
        logger = logging.getLogger(name)

        # Don't add handler if already configured
        if logger.handlers:
            return logger

        handler = logging.StreamHandler()
        handler.setFormatter(ModulePrefixFormatter(cls.get_prefix(name)))
        logger.addHandler(handler)

        logger.setLevel(cls.get_debug_level_for_module(name, level))
        logger.propagate = False  # Don't propagate to root logger

        return logger


class ModulePrefixFormatter(logging.Formatter):
    """Custom formatter that adds module prefix to log messages"""

    def __init__(self, prefix: str):
        self.prefix = prefix
        # Include time, module prefix, level, and message
        super().__init__(
            fmt='%(asctime)s - %(prefix)s %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

    def format(self, record):
        record.prefix = self.prefix
        return super().format(record)


def configure_logging(level: int = logging.INFO, debug_subsystems: Optional[Set[str]] = None):
    """Configure logging for the whole bot

    Args:
        level: Base logging level for all modules
        debug_subsystems: Set of subsystems to enable debug logging for,
            'all' enables every subsystem
    """
    logging.getLogger().setLevel(level)

    requested = set(debug_subsystems or ())

    # Check environment variables for debug flags
    debug_env = os.environ.get('PYAFK_DEBUG', '').lower()
    if debug_env:
        requested.update(s.strip() for s in debug_env.split(','))

    for subsystem in requested:
        if subsystem == 'all':
            for s in ModuleLogger.DEBUG_SUBSYSTEMS:
                ModuleLogger.enable_debug_subsystem(s)
        else:
            ModuleLogger.enable_debug_subsystem(subsystem)

    for module_name in ModuleLogger.MODULE_PREFIXES:
        ModuleLogger.get_logger(module_name, level)
