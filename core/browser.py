from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
from playwright.sync_api import sync_playwright, Playwright, Browser, BrowserContext, Page, Error as PWError

from core.exceptions import BrowserLaunchError
from core.models import Preferences


def _browser_ctor(p: Playwright, name: str):
    name = (name or "chromium").strip().lower()
    if name in ("firefox", "ff"):    return p.firefox
    if name in ("webkit", "safari"): return p.webkit
    return p.chromium


class BrowserSession:
    """One browser, one context, one page, driven strictly in sequence."""

    def __init__(self, playwright: Playwright, browser: Browser, context: BrowserContext, page: Page):
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self.page = page

    def navigate(self, url: str) -> None:
        try:
            self.page.goto(url)
            self.page.wait_for_load_state("networkidle")
        except PWError as e:
            raise BrowserLaunchError(f"Could not open {url}: {e}") from e

    def screenshot(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.page.screenshot(path=str(path))
        return path

    def close(self) -> None:
        close_browser(self.playwright, self.browser, self.context)


def open_browser(preferences: Preferences, options: Dict[str, Any]) -> BrowserSession:
    """
    Launch the configured engine and open a page with the run's viewport and user agent.
    """
    p: Optional[Playwright] = None
    browser: Optional[Browser] = None
    try:
        p = sync_playwright().start()
        launch_kwargs: Dict[str, Any] = {"headless": preferences.headless}
        slow_mo = int(options.get("slow_mo") or 0)
        if slow_mo > 0:
            launch_kwargs["slow_mo"] = slow_mo
        browser = _browser_ctor(p, options.get("browser", "chromium")).launch(**launch_kwargs)

        vp = preferences.viewport
        context_kwargs: Dict[str, Any] = {
            "viewport": {"width": int(vp.width), "height": int(vp.height)},
            "device_scale_factor": float(vp.device_scale_factor),
            "user_agent": preferences.user_agent,
        }
        ctx = browser.new_context(**context_kwargs)
        page = ctx.new_page()

        timeout_ms = int(options.get("timeout_ms") or 0)
        if timeout_ms > 0:
            page.set_default_timeout(timeout_ms)
            page.set_default_navigation_timeout(timeout_ms)
    except Exception as e:
        if browser is not None:
            try:
                browser.close()
            except Exception:
                pass
        if p is not None:
            p.stop()
        raise BrowserLaunchError(f"Could not launch browser: {e}") from e

    return BrowserSession(p, browser, ctx, page)


def close_browser(p: Playwright, browser: Browser, ctx: BrowserContext) -> None:
    try:
        ctx.close()
    finally:
        try:
            browser.close()
        finally:
            try:
                p.stop()
            except Exception:
                pass
