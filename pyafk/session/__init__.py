"""
Session plumbing: event dispatch and logging setup
"""

from .events import EventType, EventManager
from .logging_config import ModuleLogger, configure_logging

__all__ = ['EventType', 'EventManager', 'ModuleLogger', 'configure_logging']
