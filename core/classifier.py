# core/classifier.py
from __future__ import annotations
from typing import Sequence

from core.args import find_only_item, is_known_name
from core.config import DEFAULT_USER_AGENT, DEFAULT_VIEWPORT
from core.exceptions import (
    DuplicateArgumentError,
    InvalidArgumentTypeError,
    MissingRequiredArgumentError,
    UnknownArgumentError,
)
from core.models import Argument, ArgumentValue, Preferences, ViewportConfig, has_value, is_number


def check_known_names(sequence: Sequence[Argument]) -> None:
    for arg in sequence:
        if not is_known_name(arg.name):
            raise UnknownArgumentError(arg.name, arg.value)


def preference_value(sequence: Sequence[Argument], name: str) -> ArgumentValue:
    """Value of the only occurrence of a preference, None if it is not given."""
    found = find_only_item(
        sequence,
        lambda a: a.name == name,
        on_many=lambda matches: DuplicateArgumentError(name, len(matches)),
    )
    return found.value if found else None


def _number_or(value: ArgumentValue, default):
    # non-numeric viewport values silently fall back to the default
    return value if is_number(value) else default


def classify(sequence: Sequence[Argument]) -> Preferences:
    """Validate the argument grammar and derive the run preferences.

    Pure: no browser, no filesystem. Raises an ArgumentError subclass on the first problem.
    """
    check_known_names(sequence)

    headed = preference_value(sequence, "headed")
    width = preference_value(sequence, "viewport-width")
    height = preference_value(sequence, "viewport-height")
    scale = preference_value(sequence, "viewport-scale")
    viewport = ViewportConfig(
        width=int(_number_or(width, DEFAULT_VIEWPORT.width)),
        height=int(_number_or(height, DEFAULT_VIEWPORT.height)),
        device_scale_factor=_number_or(scale, DEFAULT_VIEWPORT.device_scale_factor),
    )

    url = preference_value(sequence, "url")
    if not has_value(url):
        raise MissingRequiredArgumentError("URL is required", "url", url)
    if not isinstance(url, str):
        raise InvalidArgumentTypeError("url", "string", url)

    ua = preference_value(sequence, "user-agent")
    user_agent = ua if isinstance(ua, str) and ua else DEFAULT_USER_AGENT

    return Preferences(
        url=url,
        user_agent=user_agent,
        viewport=viewport,
        headed=bool(headed),
    )
