"""Single-pass executor for an ordered argument sequence."""

from __future__ import annotations

import enum
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from agents.base import AutomationAgent
from core.exceptions import (
    AgentCapabilityError,
    InvalidArgumentTypeError,
    MissingValueError,
    OutOfOrderArgumentError,
)
from core.models import ACTION_NAMES, Argument, has_value, is_number
from core.reporting import RunReporter


class Phase(enum.Enum):
    CONFIGURING = "configuring"
    ACTING = "acting"


class RunStatus(enum.Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def advance_phase(phase: Phase, name: str) -> Phase:
    """Phase after seeing ``name``. Once acting, only action arguments are allowed."""
    if phase is Phase.ACTING and name not in ACTION_NAMES:
        raise OutOfOrderArgumentError(name)
    if name in ACTION_NAMES:
        return Phase.ACTING
    return phase


@dataclass
class RunState:
    phase: Phase = Phase.CONFIGURING
    status: RunStatus = RunStatus.RUNNING
    pending_output_path: Optional[str] = None
    last_error: Optional[BaseException] = None
    failed_argument: Optional[Argument] = None
    completed_steps: int = 0

    @property
    def exit_code(self) -> int:
        return 1 if self.last_error is not None else 0


def format_query_result(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, indent=2, default=str)


def write_query_output(path: str, value: Any) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(format_query_result(value), encoding="utf-8")


def _require_string(arg: Argument) -> str:
    if not has_value(arg.value):
        raise MissingValueError(arg.name, arg.value)
    if not isinstance(arg.value, str):
        raise InvalidArgumentTypeError(arg.name, "string", arg.value)
    return arg.value


class SequenceExecutor:
    """Walks the argument sequence once, dispatching action arguments to the agent in order.

    The first failure stops the walk; effects of steps that already ran are kept.
    """

    def __init__(
        self,
        agent: AutomationAgent,
        reporter: Optional[RunReporter] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        writer: Callable[[str, Any], None] = write_query_output,
    ):
        self.agent = agent
        self.reporter = reporter or RunReporter()
        self.sleep = sleep
        self.writer = writer
        self._handlers = {
            "action": self._do_action,
            "assert": self._do_assert,
            "query-output": self._do_query_output,
            "query": self._do_query,
            "sleep": self._do_sleep,
        }

    def run(self, sequence: Sequence[Argument], state: Optional[RunState] = None) -> RunState:
        state = state or RunState()
        for arg in sequence:
            self.reporter.progress(arg)
            try:
                state.phase = advance_phase(state.phase, arg.name)
                handler = self._handlers.get(arg.name)
                result = handler(arg, state) if handler is not None else None
            except Exception as e:
                state.last_error = e
                state.failed_argument = arg
                state.status = RunStatus.FAILED
                self.reporter.failed(arg, e)
                return state
            state.completed_steps += 1
            self.reporter.completed(arg)
            if arg.name == "query":
                self.reporter.answer(result)
        state.status = RunStatus.COMPLETED
        return state

    def _call_agent(self, fn: Callable[[str], Any], instruction: str) -> Any:
        try:
            return fn(instruction)
        except AgentCapabilityError:
            raise
        except Exception as e:
            raise AgentCapabilityError(str(e)) from e

    def _do_action(self, arg: Argument, state: RunState) -> None:
        self._call_agent(self.agent.perform_action, _require_string(arg))

    def _do_assert(self, arg: Argument, state: RunState) -> None:
        self._call_agent(self.agent.perform_assertion, _require_string(arg))

    def _do_query_output(self, arg: Argument, state: RunState) -> None:
        state.pending_output_path = _require_string(arg)

    def _do_query(self, arg: Argument, state: RunState) -> Any:
        value = self._call_agent(self.agent.perform_query, _require_string(arg))
        if state.pending_output_path:
            self.writer(state.pending_output_path, value)
            state.pending_output_path = None
        return value

    def _do_sleep(self, arg: Argument, state: RunState) -> None:
        if not has_value(arg.value):
            return
        if not is_number(arg.value):
            raise InvalidArgumentTypeError(arg.name, "number", arg.value)
        self.sleep(max(0.0, float(arg.value)) / 1000.0)
