# Copyright (c) 2026 termui contributors
# SPDX-License-Identifier: ISC
#
# Color markup parsing, color pair resolution, the pair cache and the
# TERMUI_STYLE color scheme.

import threading

import pytest

import termui
from rawterm import Color, Screen, Style
from termui import (
    NORMAL_PAIR,
    ColoredRun,
    ColorPair,
    ColorPairCache,
    InvalidColorPairFormat,
    UnknownColor,
    parse_color_pair,
    parse_markup,
    parse_markups,
    reverse_color_pair,
)

RED = ColorPair(1, -1)
BLUE = ColorPair(4, -1)

# -- markup ------------------------------------------------------------------


def test_two_directives():
    run = parse_markup("${red}Hi ${blue}there")
    assert run.segments == [("Hi ", RED), ("there", BLUE)]


def test_unprefixed_text_is_normal():
    assert parse_markup("plain").segments == [("plain", NORMAL_PAIR)]
    assert parse_markup("abc${red}def").segments == [
        ("abc", NORMAL_PAIR),
        ("def", RED),
    ]


def test_empty_and_directive_only():
    assert parse_markup("").segments == [("", NORMAL_PAIR)]
    assert parse_markup("${red}").segments == [("", RED)]
    assert len(parse_markup("${red}${blue}")) == 0


@pytest.mark.parametrize(
    "text, visible",
    [
        ("Hello", "Hello"),
        ("${red}Error: ${normal}file ${yellow-blue}foo.txt${normal} gone", "Error: file foo.txt gone"),
        ("a${1}b${2-3}c${gray-pink}d", "abcd"),
        ("${orange}", ""),
        ("$ and {} and $x{y}", "$ and {} and $x{y}"),
    ],
)
def test_segments_concatenate_to_visible_text(text, visible):
    run = parse_markup(text)
    assert str(run) == visible
    assert len(run) == len(visible)
    assert len(run) == sum(len(segment) for segment, _ in run.segments)


def test_parse_markups_and_passthrough():
    runs = parse_markups(["a", "${red}b"])
    assert [str(run) for run in runs] == ["a", "b"]
    # Already parsed runs are returned as they are
    assert parse_markup(runs[1]) is runs[1]


def test_colored_run_equality():
    assert parse_markup("${red}x") == ColoredRun([("x", RED)])
    assert parse_markup("${red}x") != parse_markup("${blue}x")


# -- color pairs -------------------------------------------------------------


@pytest.mark.parametrize(
    "spec, pair",
    [
        ("red", ColorPair(1, -1)),
        ("red-normal", ColorPair(1, -1)),
        ("yellow-blue", ColorPair(3, 4)),
        ("normal", NORMAL_PAIR),
        ("gray", ColorPair(245, -1)),
        ("pink-orange", ColorPair(219, 202)),
        ("0-255", ColorPair(0, 255)),
        ("white-black", ColorPair(7, 0)),
    ],
)
def test_parse_color_pair(spec, pair):
    assert parse_color_pair(spec) == pair


def test_unknown_color():
    with pytest.raises(UnknownColor) as e:
        parse_markup("fine ${red-purple}not fine")
    assert e.value.color == "purple"
    assert e.value.directive == "red-purple"


@pytest.mark.parametrize("spec", ["Red", "256", "bright", "red-Blue"])
def test_unknown_color_names(spec):
    with pytest.raises(UnknownColor):
        parse_color_pair(spec)


@pytest.mark.parametrize("spec", ["", "red-", "-red", "red-blue-green", "red--blue"])
def test_invalid_color_pair_format(spec):
    with pytest.raises(InvalidColorPairFormat) as e:
        parse_color_pair(spec)
    assert e.value.spec == spec


def test_bad_directive_fails_whole_parse():
    with pytest.raises(InvalidColorPairFormat):
        parse_markup("${red}ok ${}bad")


def test_errors_share_a_base_class():
    for spec in ("nope", "a-b-c"):
        with pytest.raises(termui.TermUIError):
            parse_color_pair(spec)


def test_reverse_color_pair():
    assert reverse_color_pair("red-blue") == "blue-red"
    assert reverse_color_pair("red") == "normal-red"
    assert ColorPair(1, 4).reversed() == ColorPair(4, 1)


# -- pair cache --------------------------------------------------------------


class _CountingScreen(Screen):
    def __init__(self):
        super().__init__()
        self.registered = []

    def init_pair(self, n, fg, bg):
        super().init_pair(n, fg, bg)
        self.registered.append((n, fg, bg))


def test_resolve_allocates_in_first_use_order():
    screen = _CountingScreen()
    cache = ColorPairCache(screen)

    assert cache.resolve("red-blue") == 1
    assert cache.resolve("green") == 2
    assert cache.resolve(NORMAL_PAIR) == 3
    assert screen.registered == [(1, 1, 4), (2, 2, -1), (3, -1, -1)]


def test_resolve_is_idempotent():
    screen = _CountingScreen()
    cache = ColorPairCache(screen)

    first = cache.resolve("yellow")
    # Same pair, different spellings
    assert cache.resolve("yellow") == first
    assert cache.resolve("yellow-normal") == first
    assert cache.resolve(ColorPair(3, -1)) == first
    assert len(screen.registered) == 1
    assert len(cache) == 1


def test_cache_style():
    screen = Screen()
    cache = ColorPairCache(screen)
    assert cache.style("red-blue") == Style(
        fg=Color.from_index(1), bg=Color.from_index(4)
    )
    assert cache.style("200") == Style(fg=Color.index(200))


def test_resolve_from_many_threads():
    screen = _CountingScreen()
    cache = ColorPairCache(screen)
    specs = [f"{i}-{j}" for i in range(8) for j in range(8)]
    results = []

    def resolve_all():
        results.append([cache.resolve(spec) for spec in specs])

    threads = [threading.Thread(target=resolve_all) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert all(result == results[0] for result in results)
    assert sorted(results[0]) == list(range(1, len(specs) + 1))
    assert len(screen.registered) == len(specs)


def test_draw_run(canvas, screen):
    canvas.draw_run(parse_markup("ab${red}cd"), 2, 3)
    frame = screen.compose()
    assert "".join(ch for ch, _ in frame[2][3:7]) == "abcd"
    assert frame[2][3][1] == Style()
    assert frame[2][5][1] == Style(fg=Color.from_index(1))


# -- color scheme ------------------------------------------------------------


def test_style_env(monkeypatch, capsys):
    monkeypatch.setenv(
        "TERMUI_STYLE", "border=cyan bogus=red dialog=nonsense arrow=white-blue junk"
    )
    termui._init_colors()

    assert termui._colors["border"] == ColorPair(6, -1)
    assert termui._colors["arrow"] == ColorPair(7, 4)
    assert termui._colors["dialog"] == NORMAL_PAIR

    err = capsys.readouterr().err
    assert "bogus" in err
    assert "nonsense" in err
    assert "junk" in err


def test_explicit_color_beats_style(monkeypatch):
    monkeypatch.setenv("TERMUI_STYLE", "edit=red")
    termui._init_colors()

    assert termui._color(None, "edit") == RED
    assert termui._color("blue", "edit") == BLUE
