"""
Session coordination core
"""

from .auth import AuthHandshake, AuthState, PhraseSet, ReplyWaiter, REGISTER_PHRASES, LOGIN_PHRASES
from .chat_messages import ChatMessenger
from .movement import MovementArbiter, OWNER_WANDER, OWNER_POSITION
from .session import Session, SessionState, SessionSupervisor
from .timers import TimerSet
from .wander import WanderScheduler, WanderTarget

__all__ = [
    'AuthHandshake',
    'AuthState',
    'PhraseSet',
    'ReplyWaiter',
    'REGISTER_PHRASES',
    'LOGIN_PHRASES',
    'ChatMessenger',
    'MovementArbiter',
    'OWNER_WANDER',
    'OWNER_POSITION',
    'Session',
    'SessionState',
    'SessionSupervisor',
    'TimerSet',
    'WanderScheduler',
    'WanderTarget',
]
