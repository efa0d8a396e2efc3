"""Shared data model for argument sequences and run preferences."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union

ArgumentValue = Union[str, int, float, bool, None]

PREFERENCE_NAMES = frozenset({
    "url",
    "headed",
    "viewport-width",
    "viewport-height",
    "viewport-scale",
    "user-agent",
})

ACTION_NAMES = frozenset({
    "action",
    "assert",
    "query-output",
    "query",
    "sleep",
})


def is_number(value: ArgumentValue) -> bool:
    # bool is an int subclass; --headed=true must never pass as a number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def has_value(value: ArgumentValue) -> bool:
    return value is not None and value != ""


@dataclass(frozen=True)
class Argument:
    """One parsed CLI token pair."""

    name: str
    value: ArgumentValue = None

    @property
    def is_preference(self) -> bool:
        return self.name in PREFERENCE_NAMES

    @property
    def is_action(self) -> bool:
        return self.name in ACTION_NAMES


ArgumentSequence = Tuple[Argument, ...]


@dataclass(frozen=True)
class ViewportConfig:
    width: int = 1280
    height: int = 1280
    device_scale_factor: float = 1

    def as_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "deviceScaleFactor": self.device_scale_factor,
        }


@dataclass(frozen=True)
class Preferences:
    """Immutable run-level configuration derived from preference arguments."""

    url: str
    user_agent: str
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    headed: bool = False

    @property
    def headless(self) -> bool:
        return not self.headed