"""
Bot Configuration - settings.json loading and feature blocks
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from .validation import (
    ConfigValidationError,
    validate_host,
    validate_port,
    validate_timeout,
    validate_radius,
    validate_delay_range,
    validate_secret,
)


@dataclass
class AccountConfig:
    """Account the bot logs in with"""
    username: str = "AfkBot"
    password: str = ""
    auth_type: str = "offline"


@dataclass
class ServerConfig:
    """World server address"""
    host: str = "localhost"
    port: int = 25565
    version: Optional[str] = None

    def validate(self):
        self.host = validate_host(self.host)
        self.port = validate_port(self.port)


@dataclass
class AutoAuthConfig:
    """Register/login over chat with a shared secret"""
    enabled: bool = False
    password: str = ""
    timeout: float = 8.0

    def validate(self):
        if self.enabled:
            validate_secret(self.password)
        self.timeout = validate_timeout(self.timeout, "Auth timeout")


@dataclass
class ChatMessagesConfig:
    """Scripted chat lines sent after spawning"""
    enabled: bool = False
    repeat: bool = False
    repeat_delay: float = 60.0
    messages: List[str] = field(default_factory=list)

    def validate(self):
        self.repeat_delay = validate_timeout(self.repeat_delay, "Repeat delay")
        if not all(isinstance(m, str) for m in self.messages):
            raise ConfigValidationError("Chat messages must be strings")


@dataclass
class PositionConfig:
    """Fixed point to walk to after spawning"""
    enabled: bool = False
    x: int = 0
    y: int = 0
    z: int = 0

    def validate(self):
        for axis in ('x', 'y', 'z'):
            value = getattr(self, axis)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ConfigValidationError(f"Position {axis} must be a number")


@dataclass
class WanderConfig:
    """Mob-like wandering around the current position"""
    enabled: bool = False
    radius: int = 8
    min_delay: float = 5.0
    max_delay: float = 12.0
    wander_timeout: float = 20.0

    def validate(self):
        self.radius = validate_radius(self.radius)
        validate_delay_range(self.min_delay, self.max_delay)
        self.wander_timeout = validate_timeout(self.wander_timeout, "Wander timeout")


@dataclass
class AntiAfkConfig:
    """Static control state held for the whole session"""
    enabled: bool = False
    sneak: bool = False


@dataclass
class AutoReconnectConfig:
    """Recreate the session after it ends. Delay is in milliseconds."""
    enabled: bool = False
    delay: int = 5000

    def validate(self):
        if not isinstance(self.delay, (int, float)) or self.delay < 0:
            raise ConfigValidationError("Reconnect delay must be a non-negative number of milliseconds")


@dataclass
class HealthConfig:
    """HTTP liveness endpoint"""
    enabled: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    def validate(self):
        self.host = validate_host(self.host)
        self.port = validate_port(self.port)


@dataclass
class BotConfig:
    """Complete bot configuration. Every feature defaults to disabled."""

    account: AccountConfig = field(default_factory=AccountConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    position: PositionConfig = field(default_factory=PositionConfig)
    auto_auth: AutoAuthConfig = field(default_factory=AutoAuthConfig)
    chat_messages: ChatMessagesConfig = field(default_factory=ChatMessagesConfig)
    wander: WanderConfig = field(default_factory=WanderConfig)
    anti_afk: AntiAfkConfig = field(default_factory=AntiAfkConfig)
    auto_reconnect: AutoReconnectConfig = field(default_factory=AutoReconnectConfig)
    health: HealthConfig = field(default_factory=HealthConfig)

    def validate(self) -> 'BotConfig':
        """Validate every block, raising ConfigValidationError on the first problem"""
        for block in (self.server, self.position, self.auto_auth, self.chat_messages,
                      self.wander, self.auto_reconnect, self.health):
            block.validate()
        return self

    @property
    def movement_conflict(self) -> bool:
        """Fixed-position and wander movement both want the planner's goal slot"""
        return self.position.enabled and self.wander.enabled

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BotConfig':
        """Create from the settings.json layout"""
        if not isinstance(data, dict):
            raise ConfigValidationError("Settings must be a JSON object")

        account = data.get('bot-account', {})
        server = data.get('server', {})
        position = data.get('position', {})
        utils = data.get('utils', {})
        auth = utils.get('auto-auth', {})
        chat = utils.get('chat-messages', {})
        wander = utils.get('mob-movement', {})
        anti_afk = utils.get('anti-afk', {})
        reconnect = utils.get('auto-reconnect', {})
        health = utils.get('health', {})

        config = cls(
            account=AccountConfig(
                username=account.get('username', AccountConfig.username),
                password=account.get('password', AccountConfig.password),
                auth_type=account.get('type', AccountConfig.auth_type),
            ),
            server=ServerConfig(
                host=server.get('ip', ServerConfig.host),
                port=server.get('port', ServerConfig.port),
                version=server.get('version'),
            ),
            position=PositionConfig(
                enabled=bool(position.get('enabled', False)),
                x=position.get('x', 0),
                y=position.get('y', 0),
                z=position.get('z', 0),
            ),
            auto_auth=AutoAuthConfig(
                enabled=bool(auth.get('enabled', False)),
                password=auth.get('password', ''),
                timeout=auth.get('timeoutSeconds', AutoAuthConfig.timeout),
            ),
            chat_messages=ChatMessagesConfig(
                enabled=bool(chat.get('enabled', False)),
                repeat=bool(chat.get('repeat', False)),
                repeat_delay=chat.get('repeat-delay', ChatMessagesConfig.repeat_delay),
                messages=list(chat.get('messages', [])),
            ),
            wander=WanderConfig(
                enabled=bool(wander.get('enabled', False)),
                radius=wander.get('radius', WanderConfig.radius),
                min_delay=wander.get('minDelaySeconds', WanderConfig.min_delay),
                max_delay=wander.get('maxDelaySeconds', WanderConfig.max_delay),
                wander_timeout=wander.get('wanderTimeoutSeconds', WanderConfig.wander_timeout),
            ),
            anti_afk=AntiAfkConfig(
                enabled=bool(anti_afk.get('enabled', False)),
                sneak=bool(anti_afk.get('sneak', False)),
            ),
            auto_reconnect=AutoReconnectConfig(
                enabled=bool(reconnect.get('enabled', False)),
                delay=reconnect.get('delay', AutoReconnectConfig.delay),
            ),
            health=HealthConfig(
                enabled=bool(health.get('enabled', False)),
                host=health.get('host', HealthConfig.host),
                port=health.get('port', HealthConfig.port),
            ),
        )
        return config.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the settings.json layout"""
        return {
            'bot-account': {
                'username': self.account.username,
                'password': self.account.password,
                'type': self.account.auth_type,
            },
            'server': {
                'ip': self.server.host,
                'port': self.server.port,
                'version': self.server.version,
            },
            'position': {
                'enabled': self.position.enabled,
                'x': self.position.x,
                'y': self.position.y,
                'z': self.position.z,
            },
            'utils': {
                'auto-auth': {
                    'enabled': self.auto_auth.enabled,
                    'password': self.auto_auth.password,
                    'timeoutSeconds': self.auto_auth.timeout,
                },
                'chat-messages': {
                    'enabled': self.chat_messages.enabled,
                    'repeat': self.chat_messages.repeat,
                    'repeat-delay': self.chat_messages.repeat_delay,
                    'messages': list(self.chat_messages.messages),
                },
                'mob-movement': {
                    'enabled': self.wander.enabled,
                    'radius': self.wander.radius,
                    'minDelaySeconds': self.wander.min_delay,
                    'maxDelaySeconds': self.wander.max_delay,
                    'wanderTimeoutSeconds': self.wander.wander_timeout,
                },
                'anti-afk': {
                    'enabled': self.anti_afk.enabled,
                    'sneak': self.anti_afk.sneak,
                },
                'auto-reconnect': {
                    'enabled': self.auto_reconnect.enabled,
                    'delay': self.auto_reconnect.delay,
                },
                'health': {
                    'enabled': self.health.enabled,
                    'host': self.health.host,
                    'port': self.health.port,
                },
            },
        }

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'BotConfig':
        """Load and validate a settings file"""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"{path} is not valid JSON: {e}") from e
        return cls.from_dict(data)
