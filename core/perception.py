# core/perception.py
from __future__ import annotations
from typing import List, Optional
from playwright.sync_api import Page, Error as PWError
from agents.schemas import Observation, ElementMini

MAX_BUTTONS = 60
MAX_INPUTS = 60
MAX_TEXTS = 80


def _safe_text(s: Optional[str]) -> str:
    return " ".join((s or "").split())


def _build_selector_hint(el) -> Optional[str]:
    try:
        el_id = el.get_attribute("id")
        if el_id:
            return f"#{el_id}"
        name = el.get_attribute("name")
        if name:
            return f"[name='{name}']"
        testid = el.get_attribute("data-testid")
        if testid:
            return f"[data-testid='{testid}']"
    except PWError:
        pass
    return None


def _element(el, role: str, text: Optional[str]) -> Optional[ElementMini]:
    try:
        return ElementMini(
            role=role,
            text=text or None,
            id=el.get_attribute("id"),
            name=el.get_attribute("name"),
            aria_label=el.get_attribute("aria-label"),
            data_testid=el.get_attribute("data-testid"),
            selector_hint=_build_selector_hint(el),
        )
    except PWError:
        return None


def _collect_buttons(page: Page) -> List[ElementMini]:
    out = []
    loc = page.locator("button, [role=button], input[type=submit], a")
    for i in range(min(loc.count(), MAX_BUTTONS)):
        el = loc.nth(i)
        try:
            txt = _safe_text(el.inner_text(timeout=300))
        except PWError:
            txt = ""
        item = _element(el, "button", txt)
        if item:
            out.append(item)
    return out


def _collect_inputs(page: Page) -> List[ElementMini]:
    out = []
    loc = page.locator("input, textarea, [role=textbox], select")
    for i in range(min(loc.count(), MAX_INPUTS)):
        el = loc.nth(i)
        try:
            label = (el.get_attribute("placeholder") or el.get_attribute("aria-label")
                     or el.get_attribute("name") or el.get_attribute("type"))
        except PWError:
            label = None
        item = _element(el, "input", _safe_text(label))
        if item:
            out.append(item)
    return out


def perceive(page: Page) -> Observation:
    """Compact description of the current page for the agent prompts."""
    try:
        title = page.title()
    except PWError:
        title = None

    flags = {}
    try:
        flags["modal_open"] = page.locator("[role=dialog]:visible, .modal.show, .modal:visible").count() > 0
    except PWError:
        flags["modal_open"] = False

    visible_texts: List[str] = []
    try:
        for line in page.locator("body").inner_text(timeout=700).splitlines():
            line = _safe_text(line)
            if 2 <= len(line) <= 200:
                visible_texts.append(line)
    except PWError:
        pass

    return Observation(
        url=page.url,
        title=title,
        visible_texts=visible_texts[:MAX_TEXTS],
        buttons=_collect_buttons(page),
        inputs=_collect_inputs(page),
        flags=flags,
    )
