"""LLM-driven agent that carries out natural-language actions, asserts and queries on a Playwright page."""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from agents.base import AutomationAgent
from agents.ollama_client import DEFAULT_MODEL, generate
from agents.schemas import ActionPlan, AssertionVerdict, Observation, PlannedStep, QueryAnswer
from core.actions import ACTION_REGISTRY
from core.exceptions import AgentCapabilityError, LLMUnavailableError
from core.perception import perceive

ACTION_PROMPT = """You operate a web browser page for a user.
Translate the INSTRUCTION into low-level steps on the PAGE below.
Allowed step types: {types}.
- click: selector (CSS) or value (visible text of the button/link)
- fill: selector + value
- press: value is a key like "Enter", selector optional (focused element otherwise)
- select_option: selector + value
- wait_for_selector: selector, value one of visible|attached|hidden|detached
- goto: value is a url or path
- scroll: value is "up" or "down"
Prefer selector_hint values from the PAGE. Keep the order the instruction implies.
Return ONLY JSON: {{"steps": [{{"type": "...", "selector": "... or null", "value": "... or null"}}]}}

PAGE:
{page}

INSTRUCTION:
{instruction}
"""

ASSERT_PROMPT = """You check statements about a web page.
Decide whether the ASSERTION is true for the PAGE below.
Return ONLY JSON: {{"pass": true|false, "thought": "one short sentence explaining why"}}

PAGE:
{page}

ASSERTION:
{assertion}
"""

QUERY_PROMPT = """You extract data from a web page.
The DEMAND may start with a type description such as {{name: string, status: string}}[] followed by what to extract.
Shape the answer to match that description; without one, answer with a short string.
Return ONLY JSON: {{"data": <the extracted value>}}

PAGE:
{page}

DEMAND:
{demand}
"""

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9]*\s*|\s*```$")


def extract_json(raw: str) -> Any:
    """Parse model output leniently: strip code fences, then fall back to the outermost block opened first."""
    s = _FENCE_RE.sub("", (raw or "").strip()).strip()
    try:
        return json.loads(s)
    except ValueError:
        pass
    starts = sorted(i for i in (s.find("{"), s.find("[")) if i >= 0)
    for start in starts:
        end = s.rfind("}" if s[start] == "{" else "]")
        if end <= start:
            continue
        try:
            return json.loads(s[start:end + 1])
        except ValueError:
            continue
    raise LLMUnavailableError(f"Model reply is not JSON: {s[:200]!r}")


def observation_json(obs: Observation) -> str:
    return json.dumps(obs.model_dump(exclude_none=True), ensure_ascii=False, separators=(",", ":"))


class OllamaPageAgent(AutomationAgent):
    """
    Looks at the page, asks a local Ollama model what to do, then does it.

    ``complete`` replaces the model call (prompt -> raw text); ``registry`` the page operations.
    """

    def __init__(
        self,
        page,
        *,
        model: str = DEFAULT_MODEL,
        timeout_ms: int = 7000,
        llm_timeout_s: int = 60,
        complete: Optional[Callable[[str], str]] = None,
        registry: Optional[Dict[str, Callable[..., Any]]] = None,
    ):
        self.page = page
        self.model = model
        self.timeout_ms = timeout_ms
        self.llm_timeout_s = llm_timeout_s
        self._complete = complete or self._generate
        self.registry = registry if registry is not None else ACTION_REGISTRY

    def _generate(self, prompt: str) -> str:
        return generate(prompt, model=self.model, timeout=self.llm_timeout_s)

    def _ask(self, prompt: str) -> Any:
        return extract_json(self._complete(prompt))

    def _page(self) -> str:
        return observation_json(perceive(self.page))

    def plan(self, instruction: str) -> ActionPlan:
        reply = self._ask(ACTION_PROMPT.format(
            types=", ".join(sorted(self.registry)), page=self._page(), instruction=instruction))
        if isinstance(reply, list):
            reply = {"steps": reply}
        try:
            plan = ActionPlan.model_validate(reply)
        except ValidationError as e:
            raise AgentCapabilityError(f"Could not understand the plan for {instruction!r}: {e}") from e
        if not plan.steps:
            raise AgentCapabilityError(f"No steps planned for action {instruction!r}")
        return plan

    def run_step(self, step: PlannedStep) -> None:
        fn = self.registry.get(step.type)
        if fn is None:
            raise AgentCapabilityError(f"Unsupported step type planned: {step.type!r}")
        fn(self.page, selector=step.selector, value=step.value, timeout_ms=self.timeout_ms)

    def perform_action(self, instruction: str) -> None:
        for step in self.plan(instruction).steps:
            print(f"[agent] {step.type} selector={step.selector!r} value={step.value!r}")
            self.run_step(step)

    def perform_assertion(self, instruction: str) -> None:
        reply = self._ask(ASSERT_PROMPT.format(page=self._page(), assertion=instruction))
        try:
            verdict = AssertionVerdict.model_validate(reply)
        except ValidationError as e:
            raise AgentCapabilityError(f"Could not understand the verdict for {instruction!r}: {e}") from e
        if not verdict.passed:
            reason = f", reason: {verdict.thought}" if verdict.thought else ""
            raise AgentCapabilityError(f"Assertion failed: {instruction}{reason}")

    def perform_query(self, instruction: str) -> Any:
        reply = self._ask(QUERY_PROMPT.format(page=self._page(), demand=instruction))
        if isinstance(reply, dict) and "data" in reply:
            return QueryAnswer.model_validate(reply).data
        # some models skip the envelope and return the value directly
        return reply
