from __future__ import annotations
from typing import Any


class RunnerError(RuntimeError):
    """Base runner error."""


class ArgumentError(RunnerError):
    """Raised when a CLI argument breaks the grammar or has the wrong shape."""

    def __init__(self, message: str, name: str | None = None, value: Any = None):
        super().__init__(message)
        self.name = name
        self.value = value


class UnknownArgumentError(ArgumentError):
    def __init__(self, name: str, value: Any = None):
        super().__init__(f"Unknown argument: {name}", name, value)


class DuplicateArgumentError(ArgumentError):
    def __init__(self, name: str, count: int):
        super().__init__(f"Argument --{name} can only be given once (got {count})", name)
        self.count = count


class MissingRequiredArgumentError(ArgumentError):
    """Raised when --url is not supplied."""


class InvalidArgumentTypeError(ArgumentError):
    def __init__(self, name: str, expected: str, value: Any = None):
        super().__init__(f"{name} must be a {expected}", name, value)
        self.expected = expected


class MissingValueError(ArgumentError):
    def __init__(self, name: str, value: Any = None):
        super().__init__(f"missing {name}", name, value)


class OutOfOrderArgumentError(ArgumentError):
    def __init__(self, name: str, value: Any = None):
        super().__init__(
            f"You cannot put --{name} here. Please change the order of the arguments.",
            name, value,
        )


class AgentCapabilityError(RunnerError):
    """Raised when the automation agent cannot satisfy an action, assertion or query."""


class LLMUnavailableError(AgentCapabilityError):
    """Raised when the model endpoint is unreachable or returns something unusable."""


class BrowserLaunchError(RunnerError):
    """Raised when the browser cannot be launched or the start URL cannot be opened."""
