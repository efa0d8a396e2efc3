from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any


class AutomationAgent(ABC):
    """The three things the executor needs from an agent. Each raises on failure."""

    @abstractmethod
    def perform_action(self, instruction: str) -> None:
        """Carry out a natural-language action on the page."""

    @abstractmethod
    def perform_assertion(self, instruction: str) -> None:
        """Raise unless the natural-language statement holds for the page."""

    @abstractmethod
    def perform_query(self, instruction: str) -> Any:
        """Return a string or JSON-like value extracted from the page."""
