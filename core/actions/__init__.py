from .browser_actions import action_goto, action_click, action_press, action_scroll
from .form_actions import action_fill, action_select_option, action_wait_for_selector

# step type -> page operation; the agent may only plan these
ACTION_REGISTRY = {
    "goto": action_goto,
    "click": action_click,
    "press": action_press,
    "scroll": action_scroll,
    "fill": action_fill,
    "select_option": action_select_option,
    "wait_for_selector": action_wait_for_selector,
}
