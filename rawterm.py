#!/usr/bin/env python3

# Copyright (c) 2026 termui contributors
# SPDX-License-Identifier: ISC

"""
rawterm -- pure-Python terminal I/O for termui

The terminal collaborator of the widget toolkit: rectangular screen regions,
styled text output, color-pair registration, staged updates with frame
diffing, and blocking input that reports keys and left mouse clicks.

Zero external dependencies. Uses only Python stdlib: termios, select,
signal, shutil, os, sys, codecs on Unix; msvcrt and ctypes on Windows.

Platform support:
  - Unix (Linux, macOS): termios cbreak mode, poll(2)-based input
  - Windows 10 build 1511+: VT100 output and input via SetConsoleMode

Text is treated as one cell per character. Wide characters and combining
marks are not measured.
"""

import atexit
import codecs
import collections
import os
import shutil
import signal
import sys
import threading

_IS_WINDOWS = os.name == "nt"

if not _IS_WINDOWS:
    import select
    import termios


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


class Color:
    """Terminal color: default, named constant, or 256-color index."""

    __slots__ = ("_kind", "_value")

    # kind: "default", "named", "index"
    def __init__(self, kind, value):
        self._kind = kind
        self._value = value

    DEFAULT = None  # assigned below

    @staticmethod
    def index(n):
        """Create a color from the xterm 256-color palette."""
        return Color("index", n)

    @staticmethod
    def from_index(n):
        """Map a palette index to a Color.

        -1 is the terminal default, 0-15 are the named colors, and anything
        else up to 255 is an xterm palette entry.
        """
        if n < 0:
            return Color.DEFAULT
        if n < 16:
            return Color("named", n)
        return Color("index", n)

    def _sgr_fg(self):
        if self._kind == "default":
            return "39"
        if self._kind == "named":
            if self._value < 8:
                return str(30 + self._value)
            return str(90 + self._value - 8)
        return f"38;5;{self._value}"

    def _sgr_bg(self):
        if self._kind == "default":
            return "49"
        if self._kind == "named":
            if self._value < 8:
                return str(40 + self._value)
            return str(100 + self._value - 8)
        return f"48;5;{self._value}"

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return self._kind == other._kind and self._value == other._value

    def __hash__(self):
        return hash((self._kind, self._value))

    def __repr__(self):
        if self._kind == "default":
            return "Color.DEFAULT"
        return f"Color.from_index({self._value})"


Color.DEFAULT = Color("default", None)


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------


class Style:
    """Immutable style combining foreground, background, and attributes."""

    __slots__ = ("fg", "bg", "bold", "standout", "underline", "_sgr_cache")

    def __init__(self, fg=None, bg=None, bold=False, standout=False, underline=False):
        self.fg = fg if fg is not None else Color.DEFAULT
        self.bg = bg if bg is not None else Color.DEFAULT
        self.bold = bold
        self.standout = standout
        self.underline = underline
        self._sgr_cache = None

    def __or__(self, other):
        """Combine two styles. 'other' overrides non-default colors."""
        if not isinstance(other, Style):
            return NotImplemented
        return Style(
            fg=other.fg if other.fg != Color.DEFAULT else self.fg,
            bg=other.bg if other.bg != Color.DEFAULT else self.bg,
            bold=self.bold or other.bold,
            standout=self.standout or other.standout,
            underline=self.underline or other.underline,
        )

    def sgr(self):
        """Return the SGR escape sequence string for this style."""
        if self._sgr_cache is None:
            parts = ["0", self.fg._sgr_fg(), self.bg._sgr_bg()]
            if self.bold:
                parts.append("1")
            if self.underline:
                parts.append("4")
            if self.standout:
                parts.append("7")
            self._sgr_cache = "\x1b[{}m".format(";".join(parts))
        return self._sgr_cache

    def _key(self):
        return (self.fg, self.bg, self.bold, self.standout, self.underline)

    def __eq__(self, other):
        if not isinstance(other, Style):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        parts = []
        if self.fg != Color.DEFAULT:
            parts.append(f"fg={self.fg}")
        if self.bg != Color.DEFAULT:
            parts.append(f"bg={self.bg}")
        for attr in ("bold", "standout", "underline"):
            if getattr(self, attr):
                parts.append(attr)
        return "Style({})".format(", ".join(parts))


# Default style (terminal defaults, no attributes)
STYLE_DEFAULT = Style()


# ---------------------------------------------------------------------------
# Input constants
# ---------------------------------------------------------------------------


class Key:
    """Named constants for special keys and input events."""

    UP = "key_up"
    DOWN = "key_down"
    LEFT = "key_left"
    RIGHT = "key_right"
    PAGE_UP = "key_page_up"
    PAGE_DOWN = "key_page_down"
    HOME = "key_home"
    END = "key_end"
    BACKSPACE = "key_backspace"
    DELETE = "key_delete"
    RESIZE = "key_resize"

    # Left button press. The position is in Screen.mouse_position.
    MOUSE = "key_mouse"

    # Screen.wakeup() was called, possibly from another thread
    WAKEUP = "key_wakeup"

    # Plain characters, named for readability
    ESC = "\x1b"
    ENTER = "\n"
    TAB = "\t"


# ---------------------------------------------------------------------------
# Box-drawing characters
# ---------------------------------------------------------------------------


class Box:
    HLINE = "\u2500"  # ─
    VLINE = "\u2502"  # │
    ULCORNER = "\u250c"  # ┌
    URCORNER = "\u2510"  # ┐
    LLCORNER = "\u2514"  # └
    LRCORNER = "\u2518"  # ┘
    LTEE = "\u251c"  # ├
    RTEE = "\u2524"  # ┤
    DARROW = "\u2193"  # ↓
    UARROW = "\u2191"  # ↑
    BLOCK = "\u2588"  # █


# ---------------------------------------------------------------------------
# Input decoding
# ---------------------------------------------------------------------------

# Map escape sequences to Key constants. Multiple entries per key to
# handle terminal variants (xterm, rxvt, tmux, application mode).
_ESCAPE_SEQUENCES = {
    "\x1b[A": Key.UP,
    "\x1bOA": Key.UP,
    "\x1b[B": Key.DOWN,
    "\x1bOB": Key.DOWN,
    "\x1b[C": Key.RIGHT,
    "\x1bOC": Key.RIGHT,
    "\x1b[D": Key.LEFT,
    "\x1bOD": Key.LEFT,
    "\x1b[5~": Key.PAGE_UP,
    "\x1b[6~": Key.PAGE_DOWN,
    "\x1b[H": Key.HOME,
    "\x1bOH": Key.HOME,
    "\x1b[1~": Key.HOME,
    "\x1b[7~": Key.HOME,
    "\x1b[F": Key.END,
    "\x1bOF": Key.END,
    "\x1b[4~": Key.END,
    "\x1b[8~": Key.END,
    "\x1b[3~": Key.DELETE,
}

# SGR (1006) mouse reports start with this prefix and continue with
# "<button>;<column>;<row>" and a final 'M' (press) or 'm' (release)
_MOUSE_PREFIX = "\x1b[<"


def _build_trie(sequences):
    """Build a trie (nested dict) from an escape sequence table."""
    root = {}
    for seq, key in sequences.items():
        node = root
        for ch in seq[:-1]:
            node = node.setdefault(ch, {})
        node[seq[-1]] = key
    return root


_ESCAPE_TRIE = _build_trie(_ESCAPE_SEQUENCES)
# The mouse prefix is a branch of its own. _MOUSE_PREFIX[-1] maps to a
# sentinel so the parser knows to switch to collecting report parameters.
_ESCAPE_TRIE["\x1b"]["["]["<"] = _MOUSE_PREFIX


class InputParser:
    """Incremental decoder from characters to key events.

    feed() returns a Key constant, a single-character string, or None when
    more input is needed. Left-button presses are returned as Key.MOUSE,
    with the zero-based (y, x) position stored in 'mouse_position'. Other
    mouse reports (releases, other buttons, wheel) are dropped.

    decode() feeds a whole chunk of input and queues every resulting key in
    'keys'.
    """

    def __init__(self):
        self._esc_buf = []
        self._esc_node = None
        self._mouse_buf = None
        self.mouse_position = (0, 0)
        # Key buffered after an escape dead-end
        self.pending = None
        # Keys decoded by decode() but not yet consumed, as
        # (key, mouse position) pairs
        self.keys = collections.deque()

    @property
    def partial(self):
        """True while in the middle of an escape sequence."""
        return bool(self._esc_buf) or self._mouse_buf is not None

    def feed(self, ch):
        if self._mouse_buf is not None:
            return self._feed_mouse(ch)

        if self._esc_node is not None:
            if ch not in self._esc_node:
                # Dead end. Flush ESC first (before _feed_char can overwrite
                # _esc_buf when ch is ESC), then buffer ch.
                result = self.flush()
                self.pending = self._feed_char(ch)
                return result

            val = self._esc_node[ch]
            if isinstance(val, dict):
                self._esc_buf.append(ch)
                self._esc_node = val
                return None

            self._esc_buf = []
            self._esc_node = None
            if val is _MOUSE_PREFIX:
                self._mouse_buf = []
                return None
            return val

        return self._feed_char(ch)

    def decode(self, chars):
        """Feeds every character in 'chars' and appends the resulting keys
        to 'keys'. A paste or a burst of mouse reports decodes to several
        keys at once, and none of them are lost."""
        for ch in chars:
            result = self.feed(ch)
            if result is not None:
                self.keys.append((result, self.mouse_position))
            if self.pending is not None:
                self.keys.append((self.pending, self.mouse_position))
                self.pending = None

    def _feed_char(self, ch):
        if ch == "\x1b":
            self._esc_buf = [ch]
            self._esc_node = _ESCAPE_TRIE["\x1b"]
            return None

        if ch in ("\x7f", "\x08"):
            return Key.BACKSPACE

        # Normalize CR to LF so callers can check "\n" for Enter
        if ch == "\r":
            return "\n"

        return ch

    def _feed_mouse(self, ch):
        if ch not in "Mm":
            if not (ch.isdigit() or ch == ";") or len(self._mouse_buf) > 32:
                # Garbage; give up on the report
                self._mouse_buf = None
                return None
            self._mouse_buf.append(ch)
            return None

        fields = "".join(self._mouse_buf).split(";")
        self._mouse_buf = None

        if len(fields) != 3 or not all(fields):
            return None

        button, col, row = (int(field) for field in fields)
        if ch == "m" or button != 0:
            return None

        # Reports are one-based
        self.mouse_position = (row - 1, col - 1)
        return Key.MOUSE

    def flush(self):
        """Flush a partial escape sequence, returning ESC if there was one."""
        if self._mouse_buf is not None:
            self._mouse_buf = None
            return None

        if not self._esc_buf:
            return None

        self._esc_buf = []
        self._esc_node = None
        return "\x1b"


# ---------------------------------------------------------------------------
# Region -- rectangular cell buffer
# ---------------------------------------------------------------------------


class Region:
    """Rectangular cell buffer with position and size.

    Created via Screen.region(), not standalone constructor.
    """

    def __init__(self, screen, height, width, y, x):
        self._screen = screen
        self._height = height
        self._width = width
        self._y = y
        self._x = x
        self._fill_style = STYLE_DEFAULT
        # Cell buffer: list of rows, each row is a list of (char, style)
        self._cells = self._make_cells(height, width)

    def _make_cells(self, height, width):
        default = (" ", self._fill_style)
        return [[default] * width for _ in range(height)]

    @property
    def height(self):
        return self._height

    @property
    def width(self):
        return self._width

    @property
    def y(self):
        return self._y

    @property
    def x(self):
        return self._x

    def close(self):
        """Unregister from the compositor."""
        if self._screen:
            if self in self._screen._regions:
                self._screen._regions.remove(self)
            self._screen = None

    def resize(self, height, width):
        """Resize the region, clearing its contents."""
        self._height = height
        self._width = width
        self._cells = self._make_cells(height, width)

    def move(self, y, x):
        self._y = y
        self._x = x

    def clear(self):
        """Clear the region to spaces using the stored fill style."""
        self.fill(self._fill_style)

    def fill(self, style):
        """Set the background style for the region and remember it."""
        self._fill_style = style
        cell = (" ", style)
        for row in self._cells:
            row[:] = [cell] * len(row)

    def write(self, y, x, text, style=None):
        """Write text at (y, x) with optional style. Clips to region bounds.

        Returns the number of cells written.
        """
        if style is None:
            style = STYLE_DEFAULT
        if y < 0 or y >= self._height:
            return 0

        row = self._cells[y]
        written = 0
        for col, ch in enumerate(text.expandtabs(), x):
            if col >= self._width:
                break
            if col < 0 or ch < " ":
                continue
            row[col] = (ch, style)
            written += 1
        return written

    def write_char(self, y, x, char, style=None):
        """Write a single character at (y, x)."""
        if 0 <= y < self._height and 0 <= x < self._width:
            self._cells[y][x] = (char, style if style is not None else STYLE_DEFAULT)

    def cell(self, y, x):
        """Return the (char, style) tuple at (y, x)."""
        return self._cells[y][x]


# ---------------------------------------------------------------------------
# Screen -- compositor and capability surface, no tty attached
# ---------------------------------------------------------------------------


class Screen:
    """Region compositor, color-pair table, and input interface.

    This class knows nothing about a tty, which makes it usable on its own
    for headless rendering. Terminal adds the real device. Subclasses must
    implement read_key().
    """

    def __init__(self, height=24, width=80):
        self._height = height
        self._width = width
        self._regions = []
        self._mouse = False
        self._prev_frame = None
        # Pair 0 is always the terminal default, like in curses
        self._pairs = {0: STYLE_DEFAULT}
        self.mouse_position = (0, 0)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    def region(self, height, width, y=0, x=0):
        """Create and register a new Region on top of the existing ones."""
        r = Region(self, height, width, y, x)
        self._regions.append(r)
        return r

    # --- Color pairs ---

    def init_pair(self, n, fg, bg):
        """Register color pair 'n' from palette indexes (-1 = default)."""
        if n <= 0:
            raise ValueError(f"color pair {n} is reserved")
        self._pairs[n] = Style(fg=Color.from_index(fg), bg=Color.from_index(bg))

    def pair_style(self, n):
        """Return the Style registered for color pair 'n'."""
        return self._pairs[n]

    # --- Pointer ---

    def enable_mouse(self):
        self._mouse = True

    # --- Output ---

    def compose(self):
        """Composite all regions into a frame: rows of (char, style).

        Painter's algorithm: regions are painted in registration order, so
        later regions end up on top.
        """
        h = self._height
        w = self._width

        default_cell = (" ", STYLE_DEFAULT)
        frame = [[default_cell] * w for _ in range(h)]

        for region in self._regions:
            ry, rx = region._y, region._x
            row_start = max(0, -ry)
            row_end = min(region._height, h - ry)
            col_start = max(0, -rx)
            col_end = min(region._width, w - rx)
            for row in range(row_start, row_end):
                frame_row = frame[ry + row]
                region_row = region._cells[row]
                frame_row[rx + col_start : rx + col_end] = region_row[
                    col_start:col_end
                ]

        return frame

    def update(self):
        """Composite all regions and flush them to the output."""
        self._prev_frame = self.compose()

    def beep(self):
        pass

    def flash(self):
        pass

    # --- Input ---

    def read_key(self):
        """Block and return the next key event."""
        raise NotImplementedError

    def wakeup(self):
        """Make a blocked read_key() return Key.WAKEUP. Thread-safe."""


# ---------------------------------------------------------------------------
# Terminal
# ---------------------------------------------------------------------------


class Terminal(Screen):
    """Screen bound to the process's controlling terminal."""

    def __init__(self):
        if not _IS_WINDOWS:
            if not os.isatty(sys.stdin.fileno()):
                raise RuntimeError("stdin is not a terminal")
            if not os.isatty(sys.stdout.fileno()):
                raise RuntimeError("stdout is not a terminal")

        sz = shutil.get_terminal_size()
        super().__init__(sz.lines, sz.columns)

        self._suspended = False
        self._resize_pending = False
        self._wakeup_pending = threading.Event()
        self._parser = InputParser()
        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")

        if _IS_WINDOWS:
            self._init_windows()
        else:
            self._init_unix()

        self._enter()

    @staticmethod
    def _set_cbreak():
        """Apply cbreak terminal settings: no echo, no canonical mode."""
        fd = sys.stdin.fileno()
        new = termios.tcgetattr(fd)
        # LFLAG: clear ICANON, ECHO, IEXTEN; keep ISIG for Ctrl-C
        new[3] &= ~(termios.ICANON | termios.ECHO | termios.IEXTEN)
        # IFLAG: clear IXON, IXOFF, ICRNL, INLCR, IGNCR
        new[1] &= ~(
            termios.IXON | termios.IXOFF | termios.ICRNL | termios.INLCR | termios.IGNCR
        )
        new[6][termios.VMIN] = 1
        new[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSANOW, new)

    def _init_unix(self):
        """Set up Unix terminal: cbreak mode, SIGWINCH, wakeup pipe."""
        self._old_termios = termios.tcgetattr(sys.stdin.fileno())
        self._set_cbreak()

        # Self-pipe: written by wakeup() and the SIGWINCH handler so that a
        # blocked poll() returns
        self._wake_r, self._wake_w = os.pipe()
        os.set_blocking(self._wake_r, False)
        os.set_blocking(self._wake_w, False)

        self._old_sigwinch = signal.getsignal(signal.SIGWINCH)
        signal.signal(signal.SIGWINCH, self._sigwinch_handler)

        self._poller = select.poll()
        self._poller.register(sys.stdin.fileno(), select.POLLIN)
        self._poller.register(self._wake_r, select.POLLIN)

    def _init_windows(self):
        """Set up Windows terminal: VT100 output and input."""
        import ctypes
        from ctypes import wintypes

        kernel32 = ctypes.windll.kernel32

        self._stdin_handle = kernel32.GetStdHandle(-10)  # STD_INPUT_HANDLE
        self._stdout_handle = kernel32.GetStdHandle(-11)  # STD_OUTPUT_HANDLE

        self._old_out_mode = wintypes.DWORD()
        kernel32.GetConsoleMode(self._stdout_handle, ctypes.byref(self._old_out_mode))
        self._old_in_mode = wintypes.DWORD()
        kernel32.GetConsoleMode(self._stdin_handle, ctypes.byref(self._old_in_mode))

        # ENABLE_VIRTUAL_TERMINAL_PROCESSING
        kernel32.SetConsoleMode(self._stdout_handle, self._old_out_mode.value | 0x0004)
        # ENABLE_VIRTUAL_TERMINAL_INPUT, minus ECHO, LINE and PROCESSED input
        kernel32.SetConsoleMode(
            self._stdin_handle, (self._old_in_mode.value | 0x0200) & ~0x0007
        )

        self._kernel32 = kernel32

    def _enter(self):
        # Alternate screen, hidden cursor
        self._write_raw("\x1b[?1049h\x1b[?25l")
        if self._mouse:
            self._write_raw("\x1b[?1000h\x1b[?1006h")
        self._flush()

    def _leave(self):
        if self._mouse:
            self._write_raw("\x1b[?1006l\x1b[?1000l")
        self._write_raw("\x1b[?25h\x1b[?1049l\x1b[0m")
        self._flush()

    def close(self):
        """Restore terminal state."""
        self._leave()

        if _IS_WINDOWS:
            self._kernel32.SetConsoleMode(self._stdout_handle, self._old_out_mode)
            self._kernel32.SetConsoleMode(self._stdin_handle, self._old_in_mode)
        else:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSANOW, self._old_termios)
            signal.signal(signal.SIGWINCH, self._old_sigwinch)
            os.close(self._wake_r)
            os.close(self._wake_w)

    def suspend(self):
        """Temporarily leave terminal mode, e.g. to print to stderr."""
        self._suspended = True
        self._leave()
        if not _IS_WINDOWS:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSANOW, self._old_termios)

    def resume(self):
        """Re-enter terminal mode after suspend()."""
        if not _IS_WINDOWS:
            self._set_cbreak()
        self._enter()

        # Force full repaint and pick up size changes made meanwhile
        self._prev_frame = None
        self._suspended = False
        self._resize_pending = True

    def enable_mouse(self):
        if not self._mouse:
            self._write_raw("\x1b[?1000h\x1b[?1006h")
            self._flush()
        super().enable_mouse()

    def beep(self):
        self._write_raw("\a")
        self._flush()

    def flash(self):
        # Reverse-video the whole screen for a moment
        self._write_raw("\x1b[?5h")
        self._flush()
        threading.Event().wait(0.1)
        self._write_raw("\x1b[?5l")
        self._flush()

    def _sigwinch_handler(self, signum, frame):
        # Don't resize mid-render, just flag it and wake up the reader
        self._resize_pending = True
        try:
            os.write(self._wake_w, b"r")
        except OSError:
            pass

    def wakeup(self):
        self._wakeup_pending.set()
        if not _IS_WINDOWS:
            try:
                os.write(self._wake_w, b"w")
            except OSError:
                # Pipe full: a wakeup is already pending
                pass

    def _check_resize(self):
        if not self._resize_pending:
            return False

        self._resize_pending = False
        sz = shutil.get_terminal_size()
        self._width = sz.columns
        self._height = sz.lines
        self._prev_frame = None
        # Terminal emulators may garble the alternate screen on resize
        self._write_raw("\x1b[2J")
        self._flush()
        return True

    def _check_wakeup(self):
        if self._wakeup_pending.is_set():
            self._wakeup_pending.clear()
            return True
        return False

    # --- Output ---

    def _write_raw(self, s):
        """Append raw string to output. Caller must call _flush()."""
        try:
            sys.stdout.buffer.write(s.encode("utf-8"))
        except OSError:
            pass

    def _flush(self):
        try:
            sys.stdout.buffer.flush()
        except OSError:
            pass

    def update(self):
        """Composite all regions and emit the cells that changed."""
        if self._suspended:
            return

        frame = self.compose()
        prev = self._prev_frame

        buf = []
        last_style = None
        last_row = last_col = -1

        for row, frame_row in enumerate(frame):
            for col, cell in enumerate(frame_row):
                if prev and prev[row][col] == cell:
                    continue

                ch, style = cell

                if row != last_row or col != last_col:
                    buf.append(f"\x1b[{row + 1};{col + 1}H")

                if style != last_style:
                    buf.append(style.sgr())
                    last_style = style

                buf.append(ch)
                last_row = row
                last_col = col + 1

        self._write_raw("".join(buf))
        self._flush()

        self._prev_frame = frame

    # --- Input ---

    def read_key(self):
        """Block and return the next event: a Key constant or a character.

        Esc is returned as "\\x1b" after a short timeout that separates it
        from escape sequences. Regular characters are returned as str.
        """
        if self._suspended:
            raise RuntimeError("terminal is suspended")

        # Keys left over from an earlier chunk of input come first
        key = self._next_key()
        if key is not None:
            return key

        if self._check_resize():
            return Key.RESIZE
        if self._check_wakeup():
            return Key.WAKEUP

        if _IS_WINDOWS:
            return self._read_key_windows()
        return self._read_key_unix()

    def _feed(self, chars):
        self._parser.decode(chars)
        return self._next_key()

    def _next_key(self):
        if not self._parser.keys:
            return None
        key, position = self._parser.keys.popleft()
        if key == Key.MOUSE:
            self.mouse_position = position
        return key

    def _read_key_unix(self):
        fd = sys.stdin.fileno()

        while True:
            for ready_fd, _ in self._poller.poll():
                if ready_fd == self._wake_r:
                    try:
                        os.read(self._wake_r, 1024)
                    except BlockingIOError:
                        pass

            if self._check_resize():
                return Key.RESIZE
            if self._check_wakeup():
                return Key.WAKEUP

            if not self._poller_has_input(fd):
                continue

            data = os.read(fd, 1024)
            if not data:
                continue

            result = self._feed(self._decoder.decode(data))
            if result is not None:
                return result

            # Partial escape sequence: wait briefly for the rest
            if self._parser.partial and not self._poller_has_input(fd, 25):
                result = self._parser.flush()
                if result is not None:
                    return result

    @staticmethod
    def _poller_has_input(fd, timeout=0):
        readable, _, _ = select.select([fd], [], [], timeout / 1000)
        return bool(readable)

    def _read_key_windows(self):
        import msvcrt

        while True:
            if msvcrt.kbhit():
                result = self._feed(msvcrt.getwch())
                if result is not None:
                    return result
                continue

            if self._parser.partial:
                result = self._parser.flush()
                if result is not None:
                    return result
            if self._check_resize():
                return Key.RESIZE
            if self._check_wakeup():
                return Key.WAKEUP

            # Small sleep to avoid busy-waiting
            self._wakeup_pending.wait(0.01)


# ---------------------------------------------------------------------------
# Safe entry point
# ---------------------------------------------------------------------------


def run(fn, mouse=False):
    """Safe wrapper: init terminal, call fn(terminal), restore on exit.

    mouse:
      If True, left clicks are reported as Key.MOUSE events.

    Catches KeyboardInterrupt (Ctrl-C via SIGINT) and always restores
    terminal state.
    """
    term = None
    try:
        term = Terminal()
        atexit.register(lambda: term.close() if term else None)
        if mouse:
            term.enable_mouse()
        return fn(term)
    except KeyboardInterrupt:
        pass
    finally:
        if term:
            term.close()
            term = None
