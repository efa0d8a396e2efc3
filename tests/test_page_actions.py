import pytest

from core.actions import ACTION_REGISTRY
from core.actions.browser_actions import action_click, action_goto, action_press, action_scroll
from core.actions.form_actions import action_wait_for_selector


class FakeKeyboard:
    def __init__(self):
        self.pressed = []

    def press(self, key):
        self.pressed.append(key)


class FakeMouse:
    def __init__(self):
        self.wheel_calls = []

    def wheel(self, dx, dy):
        self.wheel_calls.append((dx, dy))


class FakeLocator:
    def __init__(self, page, selector):
        self.page = page
        self.selector = selector

    @property
    def first(self):
        return self

    def wait_for(self, state, timeout):
        self.page.waits.append((self.selector, state))


class FakePage:
    url = "https://example.com/home"

    def __init__(self):
        self.keyboard = FakeKeyboard()
        self.mouse = FakeMouse()
        self.visited = []
        self.waits = []

    def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)

    def locator(self, selector):
        return FakeLocator(self, selector)


def test_registry_covers_planned_step_types():
    assert set(ACTION_REGISTRY) == {"goto", "click", "press", "scroll", "fill", "select_option", "wait_for_selector"}


def test_goto_resolves_relative_paths():
    page = FakePage()
    action_goto(page, value="/pricing")
    action_goto(page, selector="https://other.org")
    assert page.visited == ["https://example.com/pricing", "https://other.org"]


def test_goto_needs_a_target():
    with pytest.raises(ValueError):
        action_goto(FakePage())


def test_press_without_selector_uses_keyboard():
    page = FakePage()
    action_press(page, value="Enter")
    assert page.keyboard.pressed == ["Enter"]


def test_scroll_direction():
    page = FakePage()
    action_scroll(page, value="up")
    action_scroll(page)
    assert page.mouse.wheel_calls == [(0, -600), (0, 600)]


def test_wait_for_selector_normalizes_state():
    page = FakePage()
    action_wait_for_selector(page, selector="#done", value="HIDDEN")
    action_wait_for_selector(page, selector="#x", value="whatever")
    assert page.waits == [("#done", "hidden"), ("#x", "visible")]


def test_click_without_selector_or_text_fails():
    with pytest.raises(RuntimeError, match="No clickable element"):
        action_click(FakePage(), value="  ")
