from __future__ import annotations
from playwright.sync_api import Error as PWError, TimeoutError as PWTimeoutError

from core.actions.browser_actions import pick_visible_candidate


def action_fill(page, *, selector, value, timeout_ms=7000, **_):
    target = pick_visible_candidate(page, selector, timeout_ms) or page.locator(selector).first
    try:
        target.fill(str(value), timeout=timeout_ms)
    except PWTimeoutError:
        # custom inputs sometimes reject fill(); typing usually works
        target.click(timeout=min(1000, timeout_ms))
        page.keyboard.type(str(value), delay=10)


def action_select_option(page, *, selector, value, timeout_ms=7000, **_):
    dropdown = page.locator(selector).first
    dropdown.wait_for(state="visible", timeout=timeout_ms)
    try:
        dropdown.select_option(value=str(value), timeout=timeout_ms)
    except PWError:
        dropdown.select_option(label=str(value), timeout=timeout_ms)


def action_wait_for_selector(page, *, selector, value="visible", timeout_ms=7000, **_):
    """
    value: one of 'visible' | 'attached' | 'hidden' | 'detached'
    """
    state = str(value or "visible").strip().lower()
    if state not in ("visible", "attached", "hidden", "detached"):
        state = "visible"
    page.locator(selector).first.wait_for(state=state, timeout=timeout_ms)
