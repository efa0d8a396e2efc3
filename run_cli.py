from __future__ import annotations
import json
import time
from typing import Any, Callable, Dict, Optional, Sequence

from agents.base import AutomationAgent
from agents.page_agent import OllamaPageAgent
from core.args import parse_argv
from core.browser import BrowserSession, open_browser
from core.classifier import classify
from core.config import load_options
from core.exceptions import AgentCapabilityError, ArgumentError, BrowserLaunchError
from core.executor import RunState, RunStatus, SequenceExecutor
from core.models import Argument, Preferences
from core.reporting import RunReporter, attach_artifact, finalize_run, print_step, start_run

WELCOME = "\nWelcome to ai-runner\n"


def default_agent(page, options: Dict[str, Any]) -> AutomationAgent:
    return OllamaPageAgent(
        page,
        model=options.get("ollama_model") or "llama3",
        timeout_ms=int(options.get("timeout_ms") or 30000),
        llm_timeout_s=int(options.get("ollama_timeout_s") or 60),
    )


def _print_preferences(prefs: Preferences) -> None:
    print_step("url", prefs.url)
    print_step("user-agent", prefs.user_agent)
    print_step("viewport", json.dumps(prefs.viewport.as_dict()))
    if prefs.headed:
        print_step("headed", "true")


def _close_quietly(session: BrowserSession) -> None:
    try:
        session.close()
    except Exception as e:
        print(f"[warn] browser did not close cleanly: {e}")


def run(
    sequence: Sequence[Argument],
    options: Dict[str, Any],
    *,
    browser_factory: Callable[[Preferences, Dict[str, Any]], BrowserSession] = open_browser,
    agent_factory: Callable[[Any, Dict[str, Any]], AutomationAgent] = default_agent,
) -> int:
    """Validate, launch, execute. Returns the process exit code."""
    try:
        prefs = classify(sequence)
    except ArgumentError as e:
        print(f"[error] {e}")
        return 1

    _print_preferences(prefs)
    reports_dir = options.get("reports_dir")
    results = start_run(prefs.url, options.get("browser", "chromium"), prefs.headed)

    print(f"[run] launch {options.get('browser', 'chromium')}")
    try:
        session = browser_factory(prefs, options)
    except BrowserLaunchError as e:
        print(f"[error] {e}")
        finalize_run(results, "failed", str(e), reports_dir)
        return 1

    state: Optional[RunState] = None
    error: Optional[str] = None
    try:
        print(f"[run] open {prefs.url}")
        session.navigate(prefs.url)
        print_step("launched", prefs.url)

        try:
            agent = agent_factory(session.page, options)
        except Exception as e:
            raise AgentCapabilityError(f"Could not start the agent: {e}") from e
        state = SequenceExecutor(agent, RunReporter(results)).run(sequence)
        if state.status is RunStatus.FAILED:
            error = str(state.last_error)
            if reports_dir is not None:
                try:
                    shot = session.screenshot(reports_dir / f"fail_{int(time.time())}.png")
                    attach_artifact(results, "screenshot", shot)
                    print(f"[run] failure screenshot: {shot}")
                except Exception as e:
                    print(f"[warn] could not take failure screenshot: {e}")
    except (BrowserLaunchError, AgentCapabilityError) as e:
        print(f"[error] {e}")
        error = str(e)
    finally:
        _close_quietly(session)
        passed = error is None and state is not None and state.status is RunStatus.COMPLETED
        finalize_run(results, "passed" if passed else "failed", error, reports_dir)

    return 1 if error or state is None else state.exit_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    print(WELCOME)
    sequence = parse_argv(argv)
    return run(sequence, load_options())


if __name__ == "__main__":
    raise SystemExit(main())
