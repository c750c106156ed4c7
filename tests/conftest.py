# Copyright (c) 2026 termui contributors
# SPDX-License-Identifier: ISC
#
# Shared fixtures and helpers for the termui pytest suite. Everything runs
# against a headless rawterm.Screen fed from a scripted list of events.

import os
import sys

import pytest

# Ensure termui and rawterm are importable from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import rawterm  # noqa: E402
import termui  # noqa: E402

# ---------------------------------------------------------------------------
# Scripted screen
# ---------------------------------------------------------------------------


class ScriptedScreen(rawterm.Screen):
    """A headless Screen whose read_key() replays 'events'.

    An event is a key (a Key constant or a character), a ("click", y, x)
    tuple that reports a left click at screen position (y, x), or a
    callable, which is called with the screen (to change things between
    frames) and then skipped. Running out of events is an error, so a test
    can't hang in an input loop.
    """

    def __init__(self, events=(), height=24, width=80):
        super().__init__(height, width)
        self.events = list(events)
        self.frames = []
        self.wakeups = 0

    def feed(self, *events):
        self.events.extend(events)

    def read_key(self):
        while self.events:
            event = self.events.pop(0)
            if callable(event):
                event(self)
                continue
            if isinstance(event, tuple):
                _, y, x = event
                self.mouse_position = (y, x)
                return rawterm.Key.MOUSE
            return event
        raise AssertionError("ran out of scripted events")

    def update(self):
        super().update()
        self.frames.append(self._prev_frame)

    def wakeup(self):
        self.wakeups += 1

    def set_size(self, height, width):
        self._height = height
        self._width = width


def click(y, x):
    return ("click", y, x)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_style(monkeypatch):
    """Start every test from the default color scheme."""
    monkeypatch.delenv("TERMUI_STYLE", raising=False)
    termui._init_colors()
    yield


@pytest.fixture
def screen():
    return ScriptedScreen()


@pytest.fixture
def canvas(screen):
    """A Canvas over the whole screen, using the screen's pair cache."""
    region = screen.region(screen.height, screen.width)
    return termui.Canvas(region, termui.ColorPairCache.for_screen(screen))


@pytest.fixture
def window(screen):
    return termui.Window(screen, "Test")


# ---------------------------------------------------------------------------
# Frame helpers
# ---------------------------------------------------------------------------


def row_text(screen, y, frame=None):
    """Return the characters on row 'y' of 'frame' (default: a fresh
    composite), with trailing blanks stripped."""
    if frame is None:
        frame = screen.compose()
    return "".join(ch for ch, _ in frame[y]).rstrip()


def screen_text(screen, frame=None):
    """Return all rows of 'frame' joined by newlines."""
    if frame is None:
        frame = screen.compose()
    return "\n".join(row_text(screen, y, frame) for y in range(len(frame)))


def find_text(screen, text, frame=None):
    """Return the (y, x) of the first occurrence of 'text', or None."""
    if frame is None:
        frame = screen.compose()
    for y in range(len(frame)):
        x = row_text(screen, y, frame).find(text)
        if x != -1:
            return y, x
    return None


def style_at(screen, y, x, frame=None):
    if frame is None:
        frame = screen.compose()
    return frame[y][x][1]
