"""
Exceptions raised by pyafk
"""


class PyAfkError(Exception):
    """Base class for pyafk errors"""
    pass


class WorldConnectionError(PyAfkError):
    """Raised when the world connection cannot carry out a command"""
    pass


class AuthFailedError(PyAfkError):
    """Raised when the server answers a handshake step with a failure phrase"""

    def __init__(self, step: str, reason: str, message: str):
        self.step = step
        self.reason = reason
        self.message = message
        super().__init__(f"{step.capitalize()} failed: {reason}. Message: \"{message}\"")
