"""
Configuration system for pyafk
"""

from .bot_config import (
    BotConfig,
    AccountConfig,
    ServerConfig,
    AutoAuthConfig,
    ChatMessagesConfig,
    PositionConfig,
    WanderConfig,
    AntiAfkConfig,
    AutoReconnectConfig,
    HealthConfig,
)
from .validation import ConfigValidationError

__all__ = [
    'BotConfig',
    'AccountConfig',
    'ServerConfig',
    'AutoAuthConfig',
    'ChatMessagesConfig',
    'PositionConfig',
    'WanderConfig',
    'AntiAfkConfig',
    'AutoReconnectConfig',
    'HealthConfig',
    'ConfigValidationError',
]
