# Copyright (c) 2026 termui contributors
# SPDX-License-Identifier: ISC
#
# Modal dialogs: message box, drop-down box and string prompt.

import pytest
from conftest import ScriptedScreen, find_text, style_at

from rawterm import Box, Key
from termui import (
    MULTIPLE_ELEMENTS,
    Button,
    Label,
    TooLong,
    TooManyChoices,
    Window,
    drop_down_box,
    enter_string,
    message_box,
)

OPTIONS = ["a", "b", "c", "d", "e"]


def _window(*events):
    return Window(ScriptedScreen(events), "Dialogs")


def _closed(window):
    """True if only the window's own region is left on the screen."""
    return len(window.screen._regions) == 1


# -- message box -------------------------------------------------------------


@pytest.mark.parametrize("choices", [None, [], ["Ok"]])
def test_message_box_defaults_to_ok(choices):
    window = _window(Key.ENTER)
    assert message_box(window, "Hello", choices) == "Ok"
    assert _closed(window)


def test_message_box_too_many_choices():
    window = _window()
    with pytest.raises(TooManyChoices) as e:
        message_box(window, "Hello", ["A", "B", "C", "D"])
    assert e.value.choices == ["A", "B", "C", "D"]
    assert _closed(window)


def test_message_box_navigation():
    window = _window(Key.RIGHT, Key.ENTER)
    assert message_box(window, "Pick", ["A", "B", "C"]) == "B"

    window = _window(Key.LEFT, Key.ENTER)
    assert message_box(window, "Pick", ["A", "B", "C"]) == "C"

    window = _window(Key.RIGHT, Key.RIGHT, Key.RIGHT, Key.ENTER)
    assert message_box(window, "Pick", ["A", "B", "C"]) == "A"


def test_message_box_escape_picks_cancel():
    window = _window(Key.ESC)
    assert message_box(window, "Sure?", ["Yes", "No", "Cancel"]) == "Cancel"


def test_message_box_escape_without_cancel_is_ignored():
    window = _window(Key.ESC, Key.ENTER)
    assert message_box(window, "Sure?", ["Yes", "No"]) == "Yes"
    assert window.screen.events == []


def test_message_box_returns_choices_as_given():
    window = _window(Key.RIGHT, Key.ENTER)
    assert message_box(window, "Color?", ["${green}Green", "${red}Red"]) == "${red}Red"


def test_message_box_drawing():
    window = _window(Key.RIGHT, Key.ENTER)
    message_box(window, "Hello", ["A", "B"])

    first, second = window.screen.frames
    # 9 columns wide and 7 rows high, centered on the 24x80 screen
    assert find_text(window.screen, "Hello", first) == (10, 37)
    assert find_text(window.screen, "[A] B", first) == (12, 36)
    assert find_text(window.screen, "A [B]", second) == (12, 37)
    assert first[8][35][0] == Box.ULCORNER
    assert first[14][43][0] == Box.LRCORNER


def test_message_box_recenters_on_resize():
    window = _window(lambda s: s.set_size(40, 120), Key.RESIZE, Key.ENTER)
    message_box(window, "Hello")
    assert find_text(window.screen, "Hello", window.screen.frames[-1]) == (18, 57)


def test_message_box_from_a_button():
    window = _window(Key.ENTER, Key.RIGHT, Key.ENTER, Key.ESC)
    answer = window.menu.add(Label(0, 0, "no answer"))

    def ask():
        answer.set_text(message_box(window, "Save?", ["Yes", "No"]))

    button = window.menu.add(Button(2, 0, "[ask]", ask))
    window.menu.focus(button)
    window.start()

    assert answer.text == "No"
    assert _closed(window)
    # The window is drawn again without the dialog
    assert find_text(window.screen, "Save?", window.screen.frames[-1]) is None


# -- drop-down box -----------------------------------------------------------


def test_drop_down_single():
    window = _window(Key.DOWN, Key.DOWN, Key.ENTER)
    assert drop_down_box(window, OPTIONS, 3, 2, 5) == [2]
    assert _closed(window)


def test_drop_down_wraps_up():
    window = _window(Key.UP, Key.ENTER)
    assert drop_down_box(window, OPTIONS, 3, 2, 5) == [4]


def test_drop_down_escape():
    window = _window(Key.DOWN, Key.ESC)
    assert drop_down_box(window, OPTIONS, 3, 2, 5) == []
    assert _closed(window)


def test_drop_down_without_options():
    window = _window()
    assert drop_down_box(window, [], 3, 2, 5) == []


def test_drop_down_space_ignored_in_single_mode():
    window = _window(" ", Key.ENTER)
    assert drop_down_box(window, OPTIONS, 3, 2, 5) == [0]


def test_drop_down_multiple():
    window = _window(" ", Key.DOWN, Key.DOWN, " ", Key.UP, " ", " ", Key.ENTER)
    assert drop_down_box(window, OPTIONS, 3, 2, 5, MULTIPLE_ELEMENTS) == [0, 2]


def test_drop_down_multiple_nothing_marked():
    window = _window(Key.DOWN, Key.ENTER)
    assert drop_down_box(window, OPTIONS, 3, 2, 5, MULTIPLE_ELEMENTS) == [1]


def test_drop_down_drawing():
    window = _window(Key.ENTER)
    drop_down_box(window, OPTIONS, 3, 2, 5)
    screen = window.screen
    frame = screen.frames[0]

    # 5 rows high and 4 columns wide at (2, 5)
    assert frame[2][5][0] == Box.ULCORNER
    assert frame[6][8][0] == Box.LRCORNER
    assert frame[3][6][0] == "a"
    assert style_at(screen, 3, 6, frame).standout
    assert frame[5][6][0] == "c"
    assert frame[5][8][0] == Box.DARROW
    assert frame[3][8][0] == Box.VLINE


def test_drop_down_drawing_marks():
    window = _window(" ", Key.ENTER)
    drop_down_box(window, OPTIONS, 3, 2, 5, MULTIPLE_ELEMENTS)
    first, second = window.screen.frames

    assert first[3][6][0] == " "
    assert second[3][6][0] == "*"
    assert second[3][8][0] == "a"


# -- string prompt -----------------------------------------------------------


def test_enter_string():
    window = _window("a", "b", Key.ENTER)
    assert enter_string(window, "", "Name", 8) == "ab"
    assert _closed(window)


def test_enter_string_editing():
    window = _window(Key.BACKSPACE, "z", Key.LEFT, Key.LEFT, "$", "w", Key.ENTER)
    assert enter_string(window, "xy", "Name", 8) == "wxz"


def test_enter_string_max_length():
    window = _window(*"abcdef", Key.ENTER)
    assert enter_string(window, "", "", 3) == "abc"


def test_enter_string_escape():
    window = _window("a", Key.ESC)
    assert enter_string(window, "", "Name") is None
    assert _closed(window)


def test_enter_string_initial_text_too_long():
    window = _window()
    with pytest.raises(TooLong):
        enter_string(window, "far too long", "Name", 4)
    assert _closed(window)


def test_enter_string_drawing():
    window = _window("a", Key.ENTER)
    enter_string(window, "", "Name", 8)
    frame = window.screen.frames[-1]

    # 18 columns wide and 5 rows high, centered
    assert find_text(window.screen, "Name: a ______", frame) == (11, 33)
    assert style_at(window.screen, 11, 40, frame).standout
    assert frame[11][46][0] == "_"
    assert frame[11][48][0] == Box.VLINE


# -- background updates ------------------------------------------------------


@pytest.mark.parametrize(
    "open_dialog",
    [
        lambda window: message_box(window, "Hello"),
        lambda window: drop_down_box(window, OPTIONS, 3, 2, 5),
        lambda window: enter_string(window, "", "Name", 8),
    ],
)
def test_posted_updates_show_behind_dialogs(open_dialog):
    window = _window()
    label = window.menu.add(Label(0, 0, "before"))
    window.screen.feed(
        lambda s: window.post(lambda: label.set_text("after")), Key.WAKEUP, Key.ENTER
    )
    open_dialog(window)

    first, second = window.screen.frames
    assert find_text(window.screen, "before", first) == (1, 1)
    assert find_text(window.screen, "after", second) == (1, 1)
    assert _closed(window)
