import pytest

from core import browser
from core.exceptions import BrowserLaunchError
from core.models import Preferences


class FakeEngine:
    def __init__(self, error):
        self.error = error

    def launch(self, **kwargs):
        raise self.error


class FakePlaywright:
    def __init__(self, error):
        self.chromium = FakeEngine(error)
        self.stopped = False

    def stop(self):
        self.stopped = True


class FakeStarter:
    def __init__(self, playwright=None, error=None):
        self.playwright = playwright
        self.error = error

    def start(self):
        if self.error is not None:
            raise self.error
        return self.playwright


PREFS = Preferences(url="https://example.com", user_agent="test-agent")


def test_launch_error_stops_the_driver(monkeypatch):
    p = FakePlaywright(ValueError("bad launch option"))
    monkeypatch.setattr(browser, "sync_playwright", lambda: FakeStarter(p))
    with pytest.raises(BrowserLaunchError, match="bad launch option"):
        browser.open_browser(PREFS, {"browser": "chromium"})
    assert p.stopped


def test_driver_start_failure_is_a_launch_error(monkeypatch):
    monkeypatch.setattr(browser, "sync_playwright", lambda: FakeStarter(error=OSError("driver not found")))
    with pytest.raises(BrowserLaunchError, match="driver not found"):
        browser.open_browser(PREFS, {})
