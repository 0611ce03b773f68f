"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines all custom exceptions for the survey shell.

- Provides clear exception hierarchy
- Enables specific error handling
- Carries context for debugging and structured logging

============================================================
EXCEPTION HIERARCHY
============================================================
ShellException (base)
├── ConfigurationError
│   └── InvalidConfigError
├── InitializationError
│   ├── LoadFailure
│   └── RegistrationTimeout
├── CallbackFailure
├── PublishError
└── StorageError

Include-order findings (missing / duplicate / order) are NOT
exceptions. They are reported as data on ValidationResult.

============================================================
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels."""

    LOW = "low"
    """Minor issue, informational."""

    MEDIUM = "medium"
    """Moderate issue, requires attention."""

    HIGH = "high"
    """Serious issue, page features unavailable."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class ShellException(Exception):
    """
    Base exception for all survey shell errors.

    All exceptions carry:
    - severity: for log level selection
    - context: for debugging
    - recoverable: whether a later attempt may succeed
    - timestamp: when the error occurred
    """

    default_severity: Severity = Severity.MEDIUM
    default_recoverable: bool = True

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.recoverable = recoverable if recoverable is not None else self.default_recoverable
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "recoverable": self.recoverable,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def to_log_format(self) -> str:
        """Format exception for structured logging."""
        ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        line = (
            f"[{self.severity.value.upper()}] {type(self).__name__}: {self.message}"
            f" | recoverable={self.recoverable}"
        )
        if ctx_str:
            line += f" | {ctx_str}"
        return line


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(ShellException):
    """Error in configuration."""

    default_severity = Severity.HIGH
    default_recoverable = False

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if config_key:
            context["config_key"] = config_key
        if actual_value is not None:
            context["actual_value"] = str(actual_value)[:100]

        super().__init__(message, context=context, **kwargs)


class InvalidConfigError(ConfigurationError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid configuration for {key}: {reason}",
            config_key=key,
            actual_value=value,
            context={"reason": reason},
        )


# ============================================================
# INITIALIZATION ERRORS
# ============================================================

class InitializationError(ShellException):
    """
    Base class for settings-system bootstrap failures.

    Always local to one attempt: a later call to initialize()
    may succeed.
    """

    default_severity = Severity.HIGH
    default_recoverable = True


class LoadFailure(InitializationError):
    """A step in the load chain failed."""

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        resource: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if step:
            context["step"] = step
        if resource:
            context["resource"] = resource

        super().__init__(message, context=context, **kwargs)


class RegistrationTimeout(InitializationError):
    """The expected element registration was not observed in time."""

    def __init__(
        self,
        message: str,
        element: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if element:
            context["element"] = element
        if timeout_seconds is not None:
            context["timeout_seconds"] = timeout_seconds

        super().__init__(message, context=context, **kwargs)


# ============================================================
# RUNTIME ERRORS
# ============================================================

class CallbackFailure(ShellException):
    """A readiness subscriber raised while being notified."""

    default_severity = Severity.MEDIUM

    def __init__(
        self,
        message: str,
        callback: Optional[str] = None,
        position: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if callback:
            context["callback"] = callback
        if position is not None:
            context["position"] = position

        super().__init__(message, context=context, **kwargs)


class PublishError(ShellException):
    """The global manager slot was already holding a different handle."""

    default_severity = Severity.HIGH
    default_recoverable = False


class StorageError(ShellException):
    """Key/value storage could not be read or written."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        location: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if key:
            context["key"] = key
        if location:
            context["location"] = location

        super().__init__(message, context=context, **kwargs)


# ============================================================
# EXCEPTION UTILITIES
# ============================================================

def wrap_exception(
    exc: BaseException,
    wrapper_class: type = ShellException,
    message: Optional[str] = None,
    **kwargs,
) -> ShellException:
    """Wrap a standard exception in a ShellException."""
    msg = message or f"{type(exc).__name__}: {exc}"
    return wrapper_class(message=msg, cause=exc, **kwargs)


__all__ = [
    "Severity",
    "ShellException",
    "ConfigurationError",
    "InvalidConfigError",
    "InitializationError",
    "LoadFailure",
    "RegistrationTimeout",
    "CallbackFailure",
    "PublishError",
    "StorageError",
    "wrap_exception",
]
