from __future__ import annotations
import os, time, requests

from core.exceptions import LLMUnavailableError

OLLAMA_HOST = os.environ.get("OLLAMA_HOST", "http://localhost:11434")
GEN_URL  = f"{OLLAMA_HOST}/api/generate"
TAGS_URL = f"{OLLAMA_HOST}/api/tags"

DEFAULT_MODEL = os.environ.get("OLLAMA_MODEL", "llama3")


def _healthcheck(timeout: float = 3.0) -> bool:
    try:
        r = requests.get(TAGS_URL, timeout=timeout)
        r.raise_for_status()
        return True
    except requests.RequestException as e:
        print(f"[Ollama] healthcheck failed: {e}")
        return False


def _post_json(url: str, payload: dict, *, timeout_connect=5, timeout_read=60, retries=1, backoff=0.7) -> dict:
    # retries only cover the transport; a bad answer is never re-asked
    last_err: Exception | None = None
    for attempt in range(1, max(1, retries) + 1):
        try:
            r = requests.post(url, json=payload, timeout=(timeout_connect, timeout_read))
            r.raise_for_status()
            return r.json()
        except (requests.ConnectionError, requests.Timeout) as e:
            last_err = e
            print(f"[Ollama] POST attempt {attempt}/{retries} failed: {e}")
            if attempt < retries:
                time.sleep(backoff * attempt)
        except (requests.RequestException, ValueError) as e:
            raise LLMUnavailableError(f"Ollama request failed: {e}") from e
    raise LLMUnavailableError(f"Ollama request failed: {last_err}") from last_err


def generate(prompt: str, model: str = DEFAULT_MODEL, temperature: float = 0.1,
             timeout: int = 60, retries: int = 1, json_mode: bool = True) -> str:
    """
    Single-shot completion via /api/generate. Returns the raw response text.
    """
    if not _healthcheck():
        raise LLMUnavailableError(f"Ollama server not reachable at {OLLAMA_HOST}")

    payload = {
        "model": model,
        "prompt": prompt,
        "options": {"temperature": temperature},
        "stream": False,
    }
    if json_mode:
        payload["format"] = "json"
    data = _post_json(GEN_URL, payload, timeout_read=timeout, retries=retries)
    text = data.get("response")
    if not text:
        raise LLMUnavailableError(f"Ollama returned an empty response (model={model})")
    return text
