"""
Configuration validation utilities
"""

class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""
    pass


def validate_host(host: str) -> str:
    """Validate host address"""
    if not host or not isinstance(host, str):
        raise ConfigValidationError("Host must be a non-empty string")

    if len(host.strip()) == 0:
        raise ConfigValidationError("Host cannot be empty or whitespace")

    return host.strip()


def validate_port(port: int) -> int:
    """Validate port number"""
    if not isinstance(port, int) or isinstance(port, bool):
        raise ConfigValidationError("Port must be an integer")

    if port < 1 or port > 65535:
        raise ConfigValidationError("Port must be between 1 and 65535")

    return port


def validate_timeout(timeout: float, name: str = "Timeout") -> float:
    """Validate a strictly positive duration"""
    if not isinstance(timeout, (int, float)) or isinstance(timeout, bool):
        raise ConfigValidationError(f"{name} must be a number")

    if timeout <= 0:
        raise ConfigValidationError(f"{name} must be greater than 0")

    return float(timeout)


def validate_radius(radius: int) -> int:
    """Validate wander radius"""
    if not isinstance(radius, int) or isinstance(radius, bool):
        raise ConfigValidationError("Radius must be an integer")

    if radius < 0:
        raise ConfigValidationError("Radius cannot be negative")

    return radius


def validate_delay_range(min_delay: float, max_delay: float) -> None:
    """Validate a [min, max] delay window in seconds"""
    validate_timeout(min_delay, "Minimum delay")
    validate_timeout(max_delay, "Maximum delay")

    if min_delay > max_delay:
        raise ConfigValidationError(
            f"Minimum delay ({min_delay}) cannot exceed maximum delay ({max_delay})"
        )


def validate_secret(secret: str) -> str:
    """Validate auto-auth secret"""
    if not isinstance(secret, str) or not secret:
        raise ConfigValidationError("Auto-auth password must be a non-empty string")

    return secret
