from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, Optional

from core.models import ViewportConfig

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36"
)
DEFAULT_VIEWPORT = ViewportConfig(width=1280, height=1280, device_scale_factor=1)

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


def _int_env(env, key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def _reports_dir(raw: Optional[str]) -> Optional[Path]:
    if not raw or not raw.strip():
        return None
    return Path(raw.strip())


def load_options(env=os.environ) -> Dict[str, Any]:
    """Runtime options that are not part of the argument grammar (browser engine, timeouts, model)."""
    browser = str(env.get("BROWSER", "chromium")).strip().lower() or "chromium"
    if browser not in SUPPORTED_BROWSERS:
        browser = "chromium"

    return {
        "browser": browser,
        "timeout_ms": _int_env(env, "TIMEOUT_MS", 30000),
        "slow_mo": max(0, _int_env(env, "SLOW_MO", 0)),
        "reports_dir": _reports_dir(env.get("REPORTS_DIR")),
        "ollama_model": env.get("OLLAMA_MODEL") or "llama3",
        "ollama_timeout_s": _int_env(env, "OLLAMA_TIMEOUT_S", 60),
    }


def resolve_url(base_url: Optional[str], target: str) -> str:
    if not target: return ""
    if target.startswith("http://") or target.startswith("https://"):
        return target
    if base_url and base_url.startswith(("http://", "https://")):
        parts = base_url.split("/", 3)
        origin = "/".join(parts[:3])
        return origin + "/" + target.lstrip("/")
    return target
