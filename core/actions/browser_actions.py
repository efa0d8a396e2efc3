from __future__ import annotations
import re
from typing import Optional
from playwright.sync_api import Error as PWError

from core.config import resolve_url

MODAL_CSS = "[role=dialog]:visible, .modal.show, .modal:visible"


def action_goto(page, *, selector=None, value=None, base_url=None, timeout_ms=7000, **_):
    url = resolve_url(base_url or page.url, selector or value or "")
    if not url:
        raise ValueError("goto needs a url in 'value' or 'selector'")
    page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)


def action_press(page, *, selector=None, value, timeout_ms=7000, **_):
    """Press a key on the element, or on the focused element when no selector is given."""
    if selector:
        page.locator(selector).first.press(str(value), timeout=timeout_ms)
    else:
        page.keyboard.press(str(value))


def action_scroll(page, *, value=None, **_):
    direction = str(value or "down").strip().lower()
    page.mouse.wheel(0, -600 if direction == "up" else 600)


def pick_visible_candidate(page, selector: str, timeout_ms: int):
    """First visible, enabled match; an open modal wins over the page behind it."""
    half = max(500, int(timeout_ms * 0.5))
    modal = page.locator(MODAL_CSS).first
    scopes = [modal, page] if modal.count() else [page]
    for scope in scopes:
        cand = scope.locator(f"{selector}:visible").filter(has_not=page.locator(":disabled")).first
        try:
            cand.wait_for(state="visible", timeout=half)
            return cand
        except PWError:
            continue
    return None


def _click_by_text(page, text: str, timeout_ms: int) -> bool:
    pattern = re.compile(re.escape(text), re.I)
    for locator in (page.get_by_role("button", name=pattern),
                    page.get_by_role("link", name=pattern),
                    page.get_by_text(pattern)):
        try:
            locator.first.click(timeout=max(500, timeout_ms // 3))
            return True
        except PWError:
            continue
    return False


def action_click(page, *, selector: Optional[str] = None, value=None, timeout_ms=7000, **_):
    """
    Click by selector; without one, click the first button/link whose text matches value.
    """
    if selector:
        cand = pick_visible_candidate(page, selector, timeout_ms)
        if cand is None:
            raise RuntimeError(f"Element not found for selector: {selector}")
        cand.click(timeout=timeout_ms)
        return
    text = (value or "").strip()
    if not text or not _click_by_text(page, text, timeout_ms):
        raise RuntimeError(f"No clickable element matches {value!r}")
