#!/usr/bin/env python3

# Copyright (c) 2026 termui contributors
# SPDX-License-Identifier: ISC

"""
Overview
========

A character-cell widget toolkit on top of rawterm. A Window shows one Menu at
a time inside a bordered screen; a Menu holds widgets (labels, buttons,
separators, lists, line edits, word choices, progress bars and pie charts),
keeps track of which one has the focus, and routes keys and mouse clicks to
it. Modal dialogs (message box, drop-down box, string prompt) run their own
input loop on top of the window and return a single result.

Minimal usage:

  def main(term):
      window = termui.Window(term, "${red}Hello")
      ok = window.menu.add(termui.Button(1, 1, "[quit]", window.exit))
      window.menu.focus(ok)
      window.start()

  rawterm.run(main, mouse=True)


Color markup
============

Every text handed to the toolkit may contain color directives:

  "${red}Error: ${normal}file ${yellow-blue}foo.txt${normal} not found"

A directive is ${fg} or ${fg-bg} and colors the text up to the next
directive or the end of the string. Text before the first directive uses
${normal}, the terminal's default colors. Color names are case-sensitive:
black, red, green, yellow, blue, magenta, cyan, white, gray, pink, orange,
the numbers 0-255 (xterm palette), and normal. ${fg} means ${fg-normal}.

An unknown color name raises UnknownColor and a malformed directive raises
InvalidColorPairFormat. Each distinct pair is registered with the terminal
once, the first time it is drawn.


Keys
====

  Up/Down     Move the focus along the links set up with Menu.link()
  Enter       Click the focused button or list item
  Left/Right  Move the cursor of a line edit, cycle a word choice
  < / >       Scroll a list
  Esc         Leave the window (or cancel a dialog)

A left click on an unfocused widget focuses it. A click on the focused widget
is passed to it as Key.MOUSE, which clicks buttons.


Color schemes
=============

The colors used when a widget is created without explicit colors can be
customized with the TERMUI_STYLE environment variable, a space-separated list
of <element>=<color pair> assignments, for example:

  TERMUI_STYLE="border=cyan dialog=white-blue arrow=yellow"

Elements:

    - border        Window border
    - separator     Separator lines
    - arrow         Word choice arrows
    - scrollbar     List frame, scroll arrows and scrollbar track
    - dialog        Frame of pop-up dialogs
    - edit          Line edit text
    - bar           Filled part of progress bars
    - info          Progress bar frame and counters

Bad assignments are ignored with a warning on stderr.
"""

import math
import os
import queue
import re
import string
import sys
import threading
import weakref
from collections import namedtuple

from rawterm import Box, Key, Style

#
# Configuration variables
#

# Widget coordinates are relative to the inside of the window border
_Y_OFFSET = 1
_X_OFFSET = 1

# Attribute used for the focused widget, the selected list row and the line
# edit cursor
_HIGHLIGHT = Style(standout=True)

# Glyph shown in the unused positions of a line edit
_LINE_EDIT_FILLER = "_"

# Characters accepted by line edits, besides ASCII letters and digits
_LINE_EDIT_SYMBOLS = '=" '

# Glyph for the filled part of a progress bar
_PROGRESS_BAR_UNIT = "#"

# First palette index used for pie chart sectors when no colors are given
_PIE_CHART_START_COLOR = 10

# Most choices a message box can show
_MESSAGE_BOX_MAX_CHOICES = 3

_MESSAGE_BOX_HEIGHT = 7

_ENTER_STRING_HEIGHT = 5

# Word choice alignment modes
ALIGN_LEFT = 0
ALIGN_RIGHT = 1
ALIGN_CENTER = 2

# Drop-down box choice modes
SINGLE_ELEMENT = 0
MULTIPLE_ELEMENTS = 1


#
# Errors
#


class TermUIError(Exception):
    """Base class for all errors raised by termui."""


class UnknownColor(TermUIError):
    """A color name in a color pair isn't in the palette."""

    def __init__(self, color, directive):
        super().__init__(f"can't recognize color '{color}' in color pair '{directive}'")
        self.color = color
        self.directive = directive


class InvalidColorPairFormat(TermUIError):
    """A color pair isn't of the form 'fg' or 'fg-bg'."""

    def __init__(self, spec):
        super().__init__(f"'{spec}' is not a valid color pair")
        self.spec = spec


class TooLong(TermUIError):
    """Text doesn't fit in a widget."""

    def __init__(self, text, max_length):
        super().__init__(
            f"can't set text to '{text}': longer than {max_length} characters"
        )
        self.text = text
        self.max_length = max_length


class TooManyChoices(TermUIError):
    def __init__(self, choices):
        super().__init__(
            f"{choices} can't be choices for a message box (at most "
            f"{_MESSAGE_BOX_MAX_CHOICES})"
        )
        self.choices = choices


class EmptyOptions(TermUIError):
    def __init__(self, what):
        super().__init__(f"can't create a {what} with no options")


class NotAMember(TermUIError):
    def __init__(self, widget):
        super().__init__(f"{widget!r} was not added to this menu")
        self.widget = widget


class ValueCountMismatch(TermUIError):
    def __init__(self, n_values, n_colors):
        super().__init__(
            f"amount of colors and values has to be the same "
            f"(values: {n_values}, colors: {n_colors})"
        )


#
# Color markup
#

# Palette index of the terminal's default color
_NORMAL = -1

_PALETTE = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    "gray": 245,
    "pink": 219,
    "orange": 202,
    "normal": _NORMAL,
}
_PALETTE.update((str(i), i) for i in range(256))

# ${spec}
_DIRECTIVE_RE = re.compile(r"\$\{([^}]*)\}")


class ColorPair(namedtuple("ColorPair", "fg bg")):
    """Foreground and background palette indexes. -1 is the default color."""

    __slots__ = ()

    def reversed(self):
        return ColorPair(self.bg, self.fg)


NORMAL_PAIR = ColorPair(_NORMAL, _NORMAL)


def parse_color_pair(spec):
    """
    Parses a "fg" or "fg-bg" color pair into a ColorPair. "fg" is the same as
    "fg-normal".

    Raises InvalidColorPairFormat if 'spec' isn't one or two names joined by
    '-', and UnknownColor if a name isn't in the palette.
    """
    names = spec.split("-")
    if len(names) == 1:
        names.append("normal")

    if len(names) != 2 or not all(names):
        raise InvalidColorPairFormat(spec)

    indexes = []
    for name in names:
        if name not in _PALETTE:
            raise UnknownColor(name, spec)
        indexes.append(_PALETTE[name])

    return ColorPair(*indexes)


def reverse_color_pair(spec):
    """
    Returns the color pair 'spec' with foreground and background swapped.
    "fg" turns into "normal-fg".
    """
    names = spec.split("-")
    if len(names) == 1:
        return "normal-" + spec
    return "-".join(reversed(names))


class ColoredRun:
    """
    Text split into (text, ColorPair) segments, as produced by
    parse_markup(). len() is the number of characters without the markup and
    str() is the text without the markup.
    """

    __slots__ = ("segments",)

    def __init__(self, segments):
        self.segments = segments

    def __len__(self):
        return sum(len(text) for text, _ in self.segments)

    def __str__(self):
        return "".join(text for text, _ in self.segments)

    def __eq__(self, other):
        if not isinstance(other, ColoredRun):
            return NotImplemented
        return self.segments == other.segments

    def __repr__(self):
        return f"ColoredRun({self.segments!r})"


def parse_markup(text):
    """
    Parses color markup (see the module docstring) into a ColoredRun.

    Raises UnknownColor or InvalidColorPairFormat for bad directives. Any bad
    directive fails the whole parse.
    """
    if isinstance(text, ColoredRun):
        return text

    if not _DIRECTIVE_RE.match(text):
        text = "${normal}" + text

    matches = list(_DIRECTIVE_RE.finditer(text))
    ends = [match.start() for match in matches[1:]] + [len(text)]

    return ColoredRun(
        [
            (text[match.end() : end], parse_color_pair(match.group(1)))
            for match, end in zip(matches, ends)
        ]
    )


def parse_markups(lines):
    """Like parse_markup(), for a list of strings."""
    return [parse_markup(line) for line in lines]


class ColorPairCache:
    """
    Hands out terminal color pairs for ColorPairs.

    Each distinct pair is registered with the screen once, the first time it
    is asked for, under the next free pair number (starting at 1). Pair
    numbers are never reused, so a screen must only ever have one cache. Get
    it with ColorPairCache.for_screen(screen). The cache is locked, but other
    threads should still stick to pairs that have been drawn before, as
    registration also touches the screen.
    """

    def __init__(self, screen):
        self._screen = screen
        self._handles = {}
        self._lock = threading.Lock()

    @classmethod
    def for_screen(cls, screen):
        """Returns the cache of 'screen', creating it on first use."""
        with _caches_lock:
            cache = _caches.get(screen)
            if cache is None:
                # A proxy, so that the cache doesn't keep its screen alive
                cache = _caches[screen] = cls(weakref.proxy(screen))
            return cache

    def __len__(self):
        return len(self._handles)

    def resolve(self, pair):
        """
        Returns the pair number for 'pair' (a ColorPair or a "fg-bg" string),
        registering it with the screen first if needed.
        """
        if isinstance(pair, str):
            pair = parse_color_pair(pair)

        with self._lock:
            handle = self._handles.get(pair)
            if handle is None:
                handle = len(self._handles) + 1
                self._screen.init_pair(handle, pair.fg, pair.bg)
                self._handles[pair] = handle
            return handle

    def style(self, pair):
        """Returns the rawterm.Style for 'pair'."""
        return self._screen.pair_style(self.resolve(pair))


# Screen -> ColorPairCache, filled in by ColorPairCache.for_screen()
_caches = weakref.WeakKeyDictionary()
_caches_lock = threading.Lock()


#
# Drawing
#


class Canvas:
    """
    A rawterm.Region together with the ColorPairCache used to color it.
    Widgets and dialogs draw through this.
    """

    def __init__(self, region, pairs):
        self.region = region
        self.pairs = pairs

    @property
    def height(self):
        return self.region.height

    @property
    def width(self):
        return self.region.width

    def clear(self):
        self.region.clear()

    def style(self, pair, *attrs):
        # The style for 'pair' combined with the extra attributes in 'attrs'
        # (rawterm.Style instances, e.g. _HIGHLIGHT)
        style = self.pairs.style(pair)
        for attr in attrs:
            style = style | attr
        return style

    def put(self, y, x, text, pair=NORMAL_PAIR, *attrs):
        """Writes plain 'text' at (y, x) in color 'pair' plus 'attrs'."""
        self.region.write(y, x, text, self.style(pair, *attrs))

    def put_char(self, y, x, ch, pair=NORMAL_PAIR, *attrs):
        self.region.write_char(y, x, ch, self.style(pair, *attrs))

    def draw_run(self, run, y, x, *attrs):
        """
        Draws a ColoredRun at (y, x), one segment after the other. 'attrs' is
        added to the color of every segment.
        """
        for text, pair in run.segments:
            self.put(y, x, text, pair, *attrs)
            x += len(text)

    def box(self, y, x, height, width, pair=NORMAL_PAIR):
        """Draws a rectangle with line-drawing characters."""
        last_row = y + height - 1
        last_col = x + width - 1

        self.put_char(y, x, Box.ULCORNER, pair)
        self.put_char(y, last_col, Box.URCORNER, pair)
        self.put_char(last_row, x, Box.LLCORNER, pair)
        self.put_char(last_row, last_col, Box.LRCORNER, pair)

        for i in range(y + 1, last_row):
            self.put_char(i, x, Box.VLINE, pair)
            self.put_char(i, last_col, Box.VLINE, pair)

        for j in range(x + 1, last_col):
            self.put_char(y, j, Box.HLINE, pair)
            self.put_char(last_row, j, Box.HLINE, pair)

    def borders(self, pair=NORMAL_PAIR):
        """Draws a box along the edges of the canvas."""
        self.box(0, 0, self.height, self.width, pair)


#
# Styling
#

_DEFAULT_COLORS = """
border=normal
separator=normal
arrow=normal
scrollbar=normal
dialog=normal
edit=normal
bar=normal
info=normal
"""

# Dictionary mapping element names to ColorPairs
_colors = {}


def _parse_colors(colors_str, screen=None):
    # Parses a string with '<element>=<color pair>' assignments into _colors.
    # Assignments to unknown elements and unparsable pairs are warned about and
    # skipped.

    for assignment in colors_str.split():
        if "=" not in assignment:
            _warn("Ignoring malformed color assignment", assignment, screen=screen)
            continue

        element, spec = assignment.split("=", 1)
        if element not in _colors:
            _warn("Ignoring non-existent style element", element, screen=screen)
            continue

        try:
            _colors[element] = parse_color_pair(spec)
        except TermUIError as e:
            _warn(f"Ignoring color for {element}:", e, screen=screen)


def _init_colors(screen=None):
    # Sets up the default colors, then applies TERMUI_STYLE from the
    # environment

    _colors.clear()
    for assignment in _DEFAULT_COLORS.split():
        element, spec = assignment.split("=")
        _colors[element] = parse_color_pair(spec)

    if "TERMUI_STYLE" in os.environ:
        _parse_colors(os.environ["TERMUI_STYLE"], screen)


def _color(spec, element):
    # Returns the ColorPair for 'spec', or the configured default for
    # 'element' if 'spec' is None

    if spec is not None:
        return parse_color_pair(spec)
    if not _colors:
        _init_colors()
    return _colors[element]


def _warn(*args, screen=None):
    # Prints a warning to stderr, temporarily getting the terminal out of the
    # way if there is one. The warning would get lost on the alternate screen.

    suspend = getattr(screen, "suspend", None)
    if suspend:
        suspend()
    print("termui warning: ", end="", file=sys.stderr)
    print(*args, file=sys.stderr)
    if suspend:
        screen.resume()


#
# Shared widget state
#


class ScrollableListState:
    """
    Cursor, page and choice bookkeeping for a list showing at most
    'window_size' options at a time.

    options:
      The ColoredRuns in the list

    cursor:
      Row of the selected option within the visible rows

    page:
      Index of the first visible option

    choice:
      Index of the selected option. Always page + cursor.

    Scrolling moves one row at a time and wraps around at both ends.
    """

    def __init__(self, options, window_size):
        self.options = list(options)
        self.window_size = window_size
        self.cursor = 0
        self.page = 0
        self.choice = 0

    def set_options(self, options):
        # Shrinking the list could leave the counters out of range. Start
        # over from the top instead of clamping.
        if len(options) < len(self.options):
            self.cursor = self.page = self.choice = 0
        self.options = list(options)

    def add_option(self, option):
        self.options.append(option)

    @property
    def paged(self):
        """True if not all options fit in the window."""
        return len(self.options) > self.window_size

    def can_scroll_up(self):
        return self.paged and self.page != 0

    def can_scroll_down(self):
        return self.paged and self.page != len(self.options) - self.window_size

    def scroll_up(self):
        if not self.options:
            return

        self.choice -= 1
        self.cursor -= 1
        if self.cursor >= 0:
            return

        if not self.paged:
            self.cursor = self.choice = len(self.options) - 1
        elif self.page == 0:
            # Wrap around to the last page
            self.cursor = self.window_size - 1
            self.choice = len(self.options) - 1
            self.page = len(self.options) - self.window_size
        else:
            self.page -= 1
            self.cursor += 1

    def scroll_down(self):
        if not self.options:
            return

        self.choice += 1
        self.cursor += 1

        if not self.paged:
            if self.cursor >= len(self.options):
                self.cursor = self.choice = 0
        elif self.cursor >= self.window_size:
            self.cursor -= 1
            self.page += 1
            if self.choice == len(self.options):
                self.cursor = self.page = self.choice = 0

    def visible(self):
        """Returns the options currently in the window, top to bottom."""
        return self.options[self.page : self.page + self.window_size]

    def draw(self, canvas, y, x, focused):
        """
        Draws the visible options starting at (y, x). The option under the
        cursor is highlighted if 'focused' is True.
        """
        for i, option in enumerate(self.visible()):
            if i == self.cursor and focused:
                canvas.draw_run(option, y + i, x, _HIGHLIGHT)
            else:
                canvas.draw_run(option, y + i, x)


class LineEditState:
    """
    Text of at most 'max_length' characters with a cursor. Only ASCII letters,
    digits and the characters in _LINE_EDIT_SYMBOLS can be typed; anything
    else is dropped.
    """

    def __init__(self, text, max_length):
        self.max_length = max_length
        self.content = ""
        self.cursor = 0
        if text:
            self.set_text(text)

    @staticmethod
    def accepts(ch):
        """True if 'ch' may be typed into a line edit."""
        return len(ch) == 1 and (
            ch in string.ascii_letters or ch in string.digits or ch in _LINE_EDIT_SYMBOLS
        )

    def add_char(self, ch):
        """
        Inserts 'ch' at the cursor and moves the cursor past it. Returns True
        if the character was added, and False if it was rejected (full, or not
        an accepted character).
        """
        if len(self.content) >= self.max_length or not self.accepts(ch):
            return False

        self.content = self.content[: self.cursor] + ch + self.content[self.cursor :]
        self.cursor += 1
        return True

    def delete_selected(self):
        # Backspace: removes the character before the cursor
        if self.cursor == 0:
            return
        self.content = self.content[: self.cursor - 1] + self.content[self.cursor :]
        self.cursor -= 1

    def move_cursor_left(self):
        self.cursor = max(self.cursor - 1, 0)

    def move_cursor_right(self):
        self.cursor = min(self.cursor + 1, len(self.content))

    def set_text(self, text):
        """Replaces the text and puts the cursor at its end."""
        if len(text) > self.max_length:
            raise TooLong(text, self.max_length)
        self.content = text
        self.cursor = len(text)

    def draw(self, canvas, y, x, pair, focused):
        # Filler first, so that the free positions show up, then the text,
        # then the cursor cell
        canvas.put(y, x, _LINE_EDIT_FILLER * self.max_length, pair)
        canvas.put(y, x, self.content, pair)
        if focused and self.cursor < self.max_length:
            ch = self.content[self.cursor] if self.cursor < len(self.content) else " "
            canvas.put(y, x + self.cursor, ch, pair, _HIGHLIGHT)


class ChoiceCycleState:
    """A current option among 'options' that cycles in both directions."""

    def __init__(self, options):
        if not options:
            raise EmptyOptions("word choice")
        self.options = list(options)
        self.index = 0
        self.max_length = max(len(option) for option in self.options)

    @property
    def selected(self):
        return self.options[self.index]

    def focus_next(self):
        self.index = (self.index + 1) % len(self.options)

    def focus_prev(self):
        self.index = (self.index - 1) % len(self.options)

    def offset(self, alignment):
        """Column of the selected option within a 'max_length' wide field."""
        free = self.max_length - len(self.selected)
        if alignment == ALIGN_CENTER:
            return free // 2
        if alignment == ALIGN_RIGHT:
            return free
        return 0


class ProgressBarState:
    """A value between 0 and 'maximum', shown as a 'bar_length' wide bar."""

    def __init__(self, bar_length, maximum, show_info):
        self.bar_length = bar_length
        self.maximum = maximum
        self.show_info = show_info
        self.current = 0

    def set(self, value):
        self.current = max(min(value, self.maximum), 0)

    def filled(self):
        """Number of filled cells in the bar."""
        if self.maximum <= 0:
            return self.bar_length
        return self.current * self.bar_length // self.maximum

    def template(self):
        # "[          ] (   /   )": the frame drawn before the bar and the
        # counters
        result = "[" + " " * self.bar_length + "]"
        if self.show_info:
            space = " " * len(str(self.maximum))
            result += " (" + space + "/" + space + ")"
        return result


#
# Focus handling
#


class FocusRing:
    """
    The widgets of a menu, in the order they were added, plus the focus.

    Widgets are referred to by their index in the addition order. Next/previous
    relations are kept as index tables, set up with link(). Widgets that were
    never linked can be focused (with focus() or a click) but not left with
    the keyboard.
    """

    def __init__(self):
        self._widgets = []
        self._next = {}
        self._prev = {}
        self._focused = None

    def __iter__(self):
        return iter(self._widgets)

    def __len__(self):
        return len(self._widgets)

    def __contains__(self, widget):
        return any(w is widget for w in self._widgets)

    def add(self, widget):
        """Adds 'widget' and returns its index. Adding twice is a no-op."""
        for i, w in enumerate(self._widgets):
            if w is widget:
                return i
        self._widgets.append(widget)
        return len(self._widgets) - 1

    def index(self, widget):
        for i, w in enumerate(self._widgets):
            if w is widget:
                return i
        raise NotAMember(widget)

    def link(self, *widgets):
        """
        Links 'widgets' into a ring in the given order: each one's next is the
        following one, and the last one's next is the first one. Earlier links
        of these widgets are overwritten.
        """
        indexes = [self.index(widget) for widget in widgets]
        for i, index in enumerate(indexes):
            self._next[index] = indexes[(i + 1) % len(indexes)]
            self._prev[index] = indexes[i - 1]

    def next_of(self, widget):
        i = self._next.get(self.index(widget))
        return None if i is None else self._widgets[i]

    def prev_of(self, widget):
        i = self._prev.get(self.index(widget))
        return None if i is None else self._widgets[i]

    def focus(self, widget):
        """
        Moves the focus to 'widget'. Raises NotAMember, leaving the focus
        alone, if 'widget' was not added.
        """
        self._focused = self.index(widget)

    def unfocus(self):
        self._focused = None

    @property
    def focused(self):
        """The focused widget, or None."""
        return None if self._focused is None else self._widgets[self._focused]

    def is_focused(self, widget):
        return self._focused is not None and self._widgets[self._focused] is widget

    def dispatch(self, key):
        # Moves the focus if 'key' is the focused widget's next/prev key, and
        # passes the key to the widget otherwise. One hop per key.

        if self._focused is None:
            return

        widget = self._widgets[self._focused]
        if key == widget.next_key:
            self._focused = self._next.get(self._focused, self._focused)
        elif key == widget.prev_key:
            self._focused = self._prev.get(self._focused, self._focused)
        else:
            widget.handle_key(key)

    def hit_test(self, y, x):
        """
        Returns the first visible widget (in addition order) whose box
        contains (y, x), or None. The far edges of the box are included, so
        neighbouring widgets can overlap by one cell; the earlier one wins.
        """
        for widget in self._widgets:
            if widget.visible and widget.contains(y, x):
                return widget
        return None


#
# Widgets
#


class Widget:
    """
    Base class for everything that can be added to a Menu.

    y/x:
      Position of the top-left corner, relative to the inside of the window
      border

    visible:
      Invisible widgets are neither drawn nor hit by clicks

    next_key/prev_key:
      Keys that move the focus to the next/previous linked widget while this
      one is focused
    """

    def __init__(self, y, x):
        self.move(y, x)
        self.visible = True
        self.next_key = Key.DOWN
        self.prev_key = Key.UP

    def move(self, y, x):
        self.y = y + _Y_OFFSET
        self.x = x + _X_OFFSET

    def height(self):
        return 1

    def width(self):
        return 0

    def contains(self, y, x):
        return (
            self.y <= y <= self.y + self.height()
            and self.x <= x <= self.x + self.width()
        )

    def draw(self, canvas, focused):
        raise NotImplementedError

    def handle_key(self, key):
        # Most widgets ignore keys
        pass


class Label(Widget):
    """A line of (markup) text."""

    def __init__(self, y, x, text):
        super().__init__(y, x)
        self.set_text(text)

    def set_text(self, text):
        self._text = parse_markup(text)

    @property
    def text(self):
        return str(self._text)

    def width(self):
        return len(self._text)

    def draw(self, canvas, focused):
        canvas.draw_run(self._text, self.y, self.x)


class Button(Widget):
    """
    Text that calls 'click' when 'click_key' is pressed while it's focused,
    or when it's clicked with the mouse while focused.
    """

    def __init__(self, y, x, text, click, click_key=Key.ENTER):
        super().__init__(y, x)
        self.set_text(text)
        self.click = click
        self.click_key = click_key

    def set_text(self, text):
        self._text = parse_markup(text)

    @property
    def text(self):
        return str(self._text)

    def width(self):
        return len(self._text)

    def draw(self, canvas, focused):
        if focused:
            canvas.draw_run(self._text, self.y, self.x, _HIGHLIGHT)
        else:
            canvas.draw_run(self._text, self.y, self.x)

    def handle_key(self, key):
        if key in (self.click_key, Key.MOUSE):
            self.click()


class Separator(Widget):
    """A horizontal line across the whole window, joined to its border."""

    def __init__(self, y, color=None):
        super().__init__(y, 0)
        self.x = 0
        self._pair = _color(color, "separator")

    def width(self):
        # Spans the window; never hit by clicks
        return -1

    def draw(self, canvas, focused):
        canvas.put_char(self.y, 0, Box.LTEE, self._pair)
        canvas.put(self.y, 1, Box.HLINE * (canvas.width - 2), self._pair)
        canvas.put_char(self.y, canvas.width - 1, Box.RTEE, self._pair)


class List(Widget):
    """
    A framed, scrollable list of options.

    options:
      Strings with color markup, or ColoredRuns. Must not be empty.

    max_display:
      Number of options shown at a time

    click:
      Called as click(choice, cursor, option) when 'click_key' is pressed.
      'choice' is the index of the selected option, 'cursor' its row, and
      'option' its ColoredRun.

    The list scrolls with 'scroll_up_key'/'scroll_down_key' ('<' and '>' by
    default), leaving the arrow keys for moving the focus.
    """

    def __init__(self, y, x, options, max_display, click=None, border_color=None):
        super().__init__(y, x)
        self._state = ScrollableListState([], max_display)
        self._pair = _color(border_color, "scrollbar")
        self.click = click
        self.scroll_up_key = "<"
        self.scroll_down_key = ">"
        self.click_key = Key.ENTER
        self.set_options(options)

    @property
    def state(self):
        return self._state

    @property
    def choice(self):
        return self._state.choice

    def set_options(self, options):
        if not options:
            raise EmptyOptions("list")
        self._state.set_options(parse_markups(options))
        self._max_width = max(len(option) for option in self._state.options)

    def add_option(self, option):
        option = parse_markup(option)
        self._state.add_option(option)
        self._max_width = max(self._max_width, len(option))

    def height(self):
        return self._state.window_size + 2

    def width(self):
        return self._max_width + 4

    def _draw_scroller(self, canvas):
        state = self._state
        if not state.paged:
            return

        height = self.height()
        col = self.x + self.width() - 2

        if state.can_scroll_up():
            canvas.put_char(self.y + 1, col, Box.UARROW, self._pair)
        if state.can_scroll_down():
            canvas.put_char(self.y + height - 2, col, Box.DARROW, self._pair)

        # Track between the arrows, then the thumb on top of it
        track = height - 4
        if track <= 0:
            return

        for i in range(track):
            canvas.put_char(self.y + 2 + i, col, Box.VLINE, self._pair)

        n = len(state.options)
        thumb_height = state.window_size * track // n + 1
        thumb_offset = state.page * track // n
        for i in range(thumb_height):
            canvas.put_char(
                self.y + 2 + thumb_offset + i, col, " ", self._pair, _HIGHLIGHT
            )

    def draw(self, canvas, focused):
        canvas.box(self.y, self.x, self.height(), self.width(), self._pair)
        self._draw_scroller(canvas)
        self._state.draw(canvas, self.y + 1, self.x + 1, focused)

    def handle_key(self, key):
        state = self._state
        if key == self.scroll_down_key:
            state.scroll_down()
        elif key == self.scroll_up_key:
            state.scroll_up()
        elif key == self.click_key and self.click and state.options:
            self.click(state.choice, state.cursor, state.options[state.choice])


class WordChoice(Widget):
    """
    One option out of several, shown between arrows as "<option>".
    'inc_key'/'dec_key' (Right/Left) cycle through the options.
    """

    def __init__(self, y, x, options, alignment=ALIGN_LEFT, arrow_color=None):
        super().__init__(y, x)
        self._state = ChoiceCycleState(parse_markups(options))
        self.alignment = alignment
        self._arrow_pair = _color(arrow_color, "arrow")
        self.inc_key = Key.RIGHT
        self.dec_key = Key.LEFT

    @property
    def selected(self):
        """ColoredRun of the current option."""
        return self._state.selected

    @property
    def index(self):
        return self._state.index

    def reset(self):
        self._state.index = 0

    def width(self):
        return self._state.max_length + 2

    def draw(self, canvas, focused):
        attrs = (_HIGHLIGHT,) if focused else ()
        right = self.x + self._state.max_length + 1

        # Clear the field, as options can have different lengths
        canvas.put(self.y, self.x + 1, " " * self._state.max_length)
        canvas.put_char(self.y, self.x, "<", self._arrow_pair, *attrs)
        canvas.put_char(self.y, right, ">", self._arrow_pair, *attrs)
        canvas.draw_run(
            self.selected, self.y, self.x + 1 + self._state.offset(self.alignment)
        )

    def handle_key(self, key):
        if key == self.inc_key:
            self._state.focus_next()
        elif key == self.dec_key:
            self._state.focus_prev()


class LineEdit(Widget):
    """
    An editable line of at most 'max_length' characters. Left/Right move the
    cursor, Backspace deletes the character before it, and accepted
    characters are inserted at it.
    """

    def __init__(self, y, x, text, max_length, text_color=None):
        super().__init__(y, x)
        self._state = LineEditState(text, max_length)
        self._pair = _color(text_color, "edit")

    @property
    def text(self):
        return self._state.content

    def set_text(self, text):
        self._state.set_text(text)

    def width(self):
        return self._state.max_length

    def draw(self, canvas, focused):
        self._state.draw(canvas, self.y, self.x, self._pair, focused)

    def handle_key(self, key):
        if key == Key.LEFT:
            self._state.move_cursor_left()
        elif key == Key.RIGHT:
            self._state.move_cursor_right()
        elif key == Key.BACKSPACE:
            self._state.delete_selected()
        else:
            self._state.add_char(key)


class ProgressBar(Widget):
    """
    A bar showing a value out of 'maximum', optionally followed by a
    "(value/maximum)" counter.

    Values may be produced on another thread. Pass updates through
    Window.post() so that they happen between frames.
    """

    def __init__(
        self, y, x, bar_length, maximum, show_info=True, bar_color=None, info_color=None
    ):
        super().__init__(y, x)
        self._state = ProgressBarState(bar_length, maximum, show_info)
        self._bar_pair = _color(bar_color, "bar")
        self._info_pair = _color(info_color, "info")

    @property
    def value(self):
        return self._state.current

    def set(self, value):
        self._state.set(value)

    def width(self):
        return len(self._state.template())

    def draw(self, canvas, focused):
        state = self._state

        canvas.put(self.y, self.x, state.template(), self._info_pair)
        if state.show_info:
            max_str = str(state.maximum)
            canvas.put(
                self.y,
                self.x + state.bar_length + 4,
                str(state.current).rjust(len(max_str)),
                self._info_pair,
            )
            canvas.put(
                self.y,
                self.x + state.bar_length + 5 + len(max_str),
                max_str,
                self._info_pair,
            )

        canvas.put(
            self.y, self.x + 1, _PROGRESS_BAR_UNIT * state.filled(), self._bar_pair
        )


class PieChart(Widget):
    """
    A framed pie chart with one sector per value.

    colors:
      Color pairs of the sectors, one per value. By default, consecutive
      palette entries starting at _PIE_CHART_START_COLOR are used.
    """

    def __init__(self, y, x, height, width, values, colors=None, border_color=None):
        super().__init__(y, x)
        self._height = height
        self._width = width
        self._border_pair = _color(border_color, "border")
        self._explicit_colors = colors is not None
        if colors is not None:
            self._colors = [parse_color_pair(spec) for spec in colors]
        self.set_values(values)

    @property
    def values(self):
        return list(self._values)

    def set_values(self, values):
        if self._explicit_colors:
            if len(values) != len(self._colors):
                raise ValueCountMismatch(len(values), len(self._colors))
        else:
            self._colors = [
                parse_color_pair(f"{_PIE_CHART_START_COLOR + i}-normal")
                for i in range(len(values))
            ]

        self._values = list(values)
        self._total = sum(values)

        # Upper angle of each sector, from -pi to pi
        self._bounds = []
        acc = 0
        for value in values:
            acc += value
            if self._total:
                self._bounds.append(acc * 2 * math.pi / self._total - math.pi)

    def height(self):
        return self._height

    def width(self):
        return self._width

    def _sector(self, angle):
        for i, bound in enumerate(self._bounds):
            if angle <= bound:
                return i
        return 0

    def draw(self, canvas, focused):
        canvas.box(self.y, self.x, self._height, self._width, self._border_pair)

        center_y = self._height // 2 + self.y
        center_x = self._width // 2 + self.x
        radius = min(self._height // 2, self._width // 2) - 1

        for y in range(self.y, self.y + self._height):
            for x in range(self.x, self.x + self._width):
                # Cells are about twice as high as they are wide
                dy = center_y - y
                dx = (center_x - x) / 2
                if math.sqrt(dy * dy + dx * dx) >= radius:
                    continue

                if not self._total:
                    canvas.put_char(y, x, Box.BLOCK)
                    continue

                angle = math.atan2((y - center_y) * 2, x - center_x)
                canvas.put_char(y, x, Box.BLOCK, self._colors[self._sector(angle)])


#
# Menus and windows
#


class Menu:
    """
    A set of widgets shown together, with its own title, border color and
    focus. A Window shows one menu at a time.
    """

    def __init__(self, title="", border_color=None):
        self._ring = FocusRing()
        self.set_title(title)
        self.set_border_color(border_color)

    def set_title(self, title):
        self._title = parse_markup(title)

    @property
    def title(self):
        return str(self._title)

    def set_border_color(self, color):
        self._border_pair = _color(color, "border")

    @property
    def widgets(self):
        return list(self._ring)

    @property
    def focus_ring(self):
        return self._ring

    def add(self, widget):
        """Adds 'widget' to the menu and returns it."""
        self._ring.add(widget)
        return widget

    def link(self, *widgets):
        """See FocusRing.link(). The widgets must have been added."""
        self._ring.link(*widgets)

    def focus(self, widget):
        """See FocusRing.focus()."""
        self._ring.focus(widget)

    @property
    def focused(self):
        return self._ring.focused

    def draw(self, canvas):
        canvas.borders(self._border_pair)
        canvas.draw_run(self._title, 0, 1)
        for widget in self._ring:
            if widget.visible:
                widget.draw(canvas, self._ring.is_focused(widget))

    def handle_key(self, key):
        self._ring.dispatch(key)

    def click(self, y, x):
        # A click on the focused widget is passed on to it. A click on another
        # widget focuses it. Clicks elsewhere are ignored.

        widget = self._ring.hit_test(y, x)
        if widget is None:
            return

        if self._ring.is_focused(widget):
            widget.handle_key(Key.MOUSE)
        else:
            self._ring.focus(widget)


class Window:
    """
    The full-screen window on 'screen' (a rawterm.Screen, normally the
    rawterm.Terminal passed to the function given to rawterm.run()).

    Draws the current menu and handles input until exit() is called or Esc is
    pressed. All Windows on a screen share its ColorPairCache, available as
    'pairs'.
    """

    def __init__(self, screen, title="", border_color=None):
        self._screen = screen
        _init_colors(screen)

        self.pairs = ColorPairCache.for_screen(screen)
        self._region = screen.region(screen.height, screen.width)
        self._canvas = Canvas(self._region, self.pairs)
        self.menu = Menu(title, border_color)
        self.running = False
        self._posted = queue.SimpleQueue()

    @property
    def screen(self):
        return self._screen

    @property
    def canvas(self):
        return self._canvas

    def get_max_yx(self):
        return self._region.height, self._region.width

    def start(self):
        """
        Runs the draw/read/dispatch loop until exit(). Exceptions raised by
        widget callbacks propagate out of here.
        """
        self.running = True
        try:
            while self.running:
                self._run_posted()
                self.draw()
                self.handle_key(self._screen.read_key())
        finally:
            self.running = False

    def exit(self):
        self.running = False

    def post(self, fn):
        """
        Queues 'fn' to be called by the main loop before the next frame is
        drawn, and wakes the loop up. Safe to call from any thread; this is how
        background work should change widget state.
        """
        self._posted.put(fn)
        self._screen.wakeup()

    def _run_posted(self):
        while True:
            try:
                fn = self._posted.get_nowait()
            except queue.Empty:
                return
            fn()

    def render(self):
        # Draws the current menu into the window region without flushing it

        self._canvas.clear()
        self.menu.draw(self._canvas)

    def draw(self):
        self.render()
        self._screen.update()

    def resize(self):
        self._region.resize(self._screen.height, self._screen.width)

    def handle_key(self, key):
        if key == Key.ESC:
            self.exit()
        elif key == Key.RESIZE:
            self.resize()
        elif key == Key.MOUSE:
            self.menu.click(*self._screen.mouse_position)
        elif key != Key.WAKEUP:
            self.menu.handle_key(key)

    def beep(self):
        self._screen.beep()

    def flash(self):
        self._screen.flash()


#
# Dialogs
#


def _dialog_canvas(window, height, width, y=None, x=None):
    # Returns a Canvas on a new region on top of everything else. The region
    # is centered on the screen unless a position is given.

    screen = window.screen
    if y is None:
        y = (screen.height - height) // 2
    if x is None:
        x = (screen.width - width) // 2
    return Canvas(screen.region(height, width, y, x), window.pairs)


def _center(window, canvas):
    screen = window.screen
    canvas.region.move(
        (screen.height - canvas.height) // 2, (screen.width - canvas.width) // 2
    )


def message_box(window, message, choices=None, border_color=None):
    """
    Pops up a message with up to three choices below it, and returns the
    chosen one (as given in 'choices').

    window:
      The Window to show the dialog over

    message:
      Text with color markup

    choices:
      Labels with color markup. Defaults to ["Ok"]. If one of them is
      "Cancel", Esc picks it.

    Left/Right select a choice and Enter picks it. Raises TooManyChoices for
    more than three choices.
    """
    if not choices:
        choices = ["Ok"]
    if len(choices) > _MESSAGE_BOX_MAX_CHOICES:
        raise TooManyChoices(choices)

    has_cancel = "Cancel" in choices
    choice_runs = parse_markups(choices)
    message_run = parse_markup(message)
    pair = _color(border_color, "dialog")

    choices_len = (len(choice_runs) + 1) * 2 + sum(len(run) for run in choice_runs)
    height = _MESSAGE_BOX_HEIGHT
    width = max(choices_len, len(message_run) + 4)
    button_y = height - 3

    canvas = _dialog_canvas(window, height, width)
    selected = 0
    try:
        while True:
            window._run_posted()
            window.render()

            canvas.clear()
            canvas.borders(pair)
            canvas.draw_run(message_run, 2, 2)

            pos = 3
            for i, run in enumerate(choice_runs):
                if i == selected:
                    canvas.put(button_y, pos - 2, "[" + " " * len(run) + "]")
                canvas.draw_run(run, button_y, pos - 1)
                pos += len(run) + 2

            window.screen.update()

            c = window.screen.read_key()

            if c == Key.RESIZE:
                window.resize()
                _center(window, canvas)

            elif c == Key.LEFT:
                selected = (selected - 1) % len(choices)

            elif c == Key.RIGHT:
                selected = (selected + 1) % len(choices)

            elif c == Key.ENTER:
                return choices[selected]

            elif c == Key.ESC and has_cancel:
                return "Cancel"
    finally:
        canvas.region.close()


def drop_down_box(
    window, options, max_display, y, x, choice_type=SINGLE_ELEMENT, border_color=None
):
    """
    Pops up a list of options at screen position (y, x) and returns the
    indices of the picked ones. An empty list means the box was dismissed
    with Esc (or there were no options).

    max_display:
      Number of options shown at a time

    choice_type:
      SINGLE_ELEMENT: Enter picks the highlighted option.

      MULTIPLE_ELEMENTS: Space marks/unmarks the highlighted option, and
      Enter picks the marked ones (or the highlighted one if none are
      marked).
    """
    if not options:
        return []

    multiple = choice_type == MULTIPLE_ELEMENTS
    runs = parse_markups(options)
    pair = _color(border_color, "dialog")

    # Room for the marks in multiple-choice mode
    text_x = 3 if multiple else 1

    height = max_display + 2
    width = max(len(run) for run in runs) + text_x + 2

    state = ScrollableListState(runs, max_display)
    marked = set()

    canvas = _dialog_canvas(window, height, width, y, x)
    try:
        while True:
            window._run_posted()
            window.render()

            canvas.clear()
            canvas.borders(pair)
            state.draw(canvas, 1, text_x, True)
            if multiple:
                for i in range(len(state.visible())):
                    if state.page + i in marked:
                        canvas.put_char(1 + i, 1, "*")
            if state.can_scroll_up():
                canvas.put_char(1, width - 1, Box.UARROW, pair)
            if state.can_scroll_down():
                canvas.put_char(height - 2, width - 1, Box.DARROW, pair)

            window.screen.update()

            c = window.screen.read_key()

            if c == Key.ESC:
                return []

            if c == Key.UP:
                state.scroll_up()

            elif c == Key.DOWN:
                state.scroll_down()

            elif c == " " and multiple:
                marked ^= {state.choice}

            elif c == Key.ENTER:
                if multiple and marked:
                    return sorted(marked)
                return [state.choice]

            elif c == Key.RESIZE:
                window.resize()
    finally:
        canvas.region.close()


def enter_string(window, text="", prompt="", max_length=20, border_color=None):
    """
    Pops up a prompt with a line edit and returns the entered string when
    Enter is pressed, or None if Esc is pressed.

    text:
      Initial contents. Raises TooLong if longer than 'max_length'.

    prompt:
      Text with color markup shown before the line edit
    """
    prompt_run = parse_markup(prompt)
    state = LineEditState(text, max_length)
    pair = _color(border_color, "dialog")
    edit_pair = _color(None, "edit")

    height = _ENTER_STRING_HEIGHT
    width = len(prompt_run) + max_length + 6
    edit_y = 2
    edit_x = len(prompt_run) + 4

    canvas = _dialog_canvas(window, height, width)
    try:
        while True:
            window._run_posted()
            window.render()

            canvas.clear()
            canvas.borders(pair)
            canvas.draw_run(prompt_run, edit_y, 2)
            canvas.put(edit_y, edit_x - 2, ": ")
            state.draw(canvas, edit_y, edit_x, edit_pair, True)

            window.screen.update()

            c = window.screen.read_key()

            if c == Key.ENTER:
                return state.content

            if c == Key.ESC:
                return None

            if c == Key.LEFT:
                state.move_cursor_left()

            elif c == Key.RIGHT:
                state.move_cursor_right()

            elif c == Key.BACKSPACE:
                state.delete_selected()

            elif c == Key.RESIZE:
                window.resize()
                _center(window, canvas)

            else:
                state.add_char(c)
    finally:
        canvas.region.close()
