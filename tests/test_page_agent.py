import json

import pytest

from agents import page_agent
from agents.page_agent import OllamaPageAgent, extract_json
from agents.schemas import Observation
from core.exceptions import AgentCapabilityError, LLMUnavailableError


@pytest.fixture(autouse=True)
def fake_perception(monkeypatch):
    obs = Observation(url="https://example.com", title="Example", visible_texts=["Status: ok"])
    monkeypatch.setattr(page_agent, "perceive", lambda page: obs)
    return obs


def scripted(*replies):
    prompts = []
    queue = list(replies)

    def complete(prompt):
        prompts.append(prompt)
        return queue.pop(0)

    complete.prompts = prompts
    return complete


def recording_registry(calls):
    def make(kind):
        def fn(page, **kwargs):
            calls.append((kind, kwargs.get("selector"), kwargs.get("value")))
        return fn
    return {"click": make("click"), "fill": make("fill"), "press": make("press")}


def test_extract_json_variants():
    assert extract_json('{"a": 1}') == {"a": 1}
    assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert extract_json('Sure! here it is: {"data": [1, 2]} hope it helps') == {"data": [1, 2]}
    assert extract_json('steps: [{"type": "click"}]') == [{"type": "click"}]


def test_extract_json_rejects_prose():
    with pytest.raises(LLMUnavailableError):
        extract_json("I cannot help with that")


def test_action_runs_planned_steps_in_order():
    calls = []
    complete = scripted(json.dumps({"steps": [
        {"type": "fill", "selector": "#q", "value": "weather today"},
        {"type": "press", "selector": None, "value": "Enter"},
    ]}))
    agent = OllamaPageAgent(object(), complete=complete, registry=recording_registry(calls))
    agent.perform_action("type 'weather today' in search box, hit enter")
    assert calls == [("fill", "#q", "weather today"), ("press", None, "Enter")]
    assert "weather today" in complete.prompts[0]
    assert "click, fill, press" in complete.prompts[0]
    assert '"title":"Example"' in complete.prompts[0]


def test_action_accepts_bare_list_plan():
    calls = []
    agent = OllamaPageAgent(object(), complete=scripted('[{"type": "Click", "value": "Log in"}]'),
                            registry=recording_registry(calls))
    agent.perform_action("log in")
    assert calls == [("click", None, "Log in")]


def test_action_with_empty_plan_fails():
    agent = OllamaPageAgent(object(), complete=scripted('{"steps": []}'), registry={})
    with pytest.raises(AgentCapabilityError, match="No steps planned"):
        agent.perform_action("do something impossible")


def test_action_with_unknown_step_type_fails():
    agent = OllamaPageAgent(object(), complete=scripted('{"steps": [{"type": "teleport"}]}'),
                            registry=recording_registry([]))
    with pytest.raises(AgentCapabilityError, match="teleport"):
        agent.perform_action("teleport")


def test_assertion_passes():
    agent = OllamaPageAgent(object(), complete=scripted('{"pass": true, "thought": "status is ok"}'))
    agent.perform_assertion("the status is ok")


def test_assertion_failure_carries_reason():
    agent = OllamaPageAgent(object(), complete=scripted('{"pass": false, "thought": "status is down"}'))
    with pytest.raises(AgentCapabilityError) as exc:
        agent.perform_assertion("the status is ok")
    assert "the status is ok" in str(exc.value)
    assert "status is down" in str(exc.value)


def test_assertion_with_malformed_verdict():
    agent = OllamaPageAgent(object(), complete=scripted('{"verdict": "yes"}'))
    with pytest.raises(AgentCapabilityError):
        agent.perform_assertion("anything")


def test_query_returns_data():
    agent = OllamaPageAgent(object(), complete=scripted('{"data": {"status": "ok"}}'))
    assert agent.perform_query("{status: string}, get status") == {"status": "ok"}


def test_query_without_envelope_returns_reply():
    agent = OllamaPageAgent(object(), complete=scripted('[{"name": "API", "status": "ok"}]'))
    assert agent.perform_query("{name: string, status: string}[], services") == [{"name": "API", "status": "ok"}]


def test_default_completion_goes_through_ollama(monkeypatch):
    seen = {}

    def fake_generate(prompt, model, timeout):
        seen.update(model=model, timeout=timeout)
        return '{"data": "hello"}'

    monkeypatch.setattr(page_agent, "generate", fake_generate)
    agent = OllamaPageAgent(object(), model="mistral", llm_timeout_s=5)
    assert agent.perform_query("greeting") == "hello"
    assert seen == {"model": "mistral", "timeout": 5}
