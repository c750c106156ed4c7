#!/usr/bin/env python3

# Copyright (c) 2026 termui contributors
# SPDX-License-Identifier: ISC

"""
Runs one of the termui example programs.

Sample usage:

  $ termui-demo list
  $ termui-demo progressbar --no-mouse

Each example opens a full-screen window. Press Esc to leave it. Up/Down move
between widgets and Enter activates buttons and list items.

Mouse clicks are enabled unless --no-mouse is given or the TERMUI_MOUSE
environment variable is set to 0.

Colors can be customized with TERMUI_STYLE (see the termui module).
"""

import argparse
import os
import threading

import rawterm
import termui
from termui import Button, Label, List, Window


def _label(term):
    window = Window(term, "${red}Labels")
    window.menu.add(Label(1, 1, "Plain text"))
    window.menu.add(Label(2, 1, "${red}Red ${green}green ${blue}blue"))
    window.menu.add(Label(3, 1, "${white-red}White on red${normal} and back"))
    window.menu.add(Label(4, 1, "${orange}Orange, ${pink}pink and ${gray}gray"))
    window.menu.add(Label(5, 1, "${208}Palette index 208"))
    window.start()


def _button(term):
    window = Window(term, "${cyan}Buttons")
    count = Label(1, 1, "Clicked 0 times")
    clicks = 0

    def click():
        nonlocal clicks
        clicks += 1
        count.set_text(f"Clicked ${{yellow}}{clicks}${{normal}} times")

    button = Button(3, 1, "[click me]", click)
    quit_button = Button(4, 1, "[quit]", window.exit)

    window.menu.add(count)
    window.menu.add(button)
    window.menu.add(quit_button)
    window.menu.link(button, quit_button)
    window.menu.focus(button)
    window.start()


def _list(term):
    window = Window(term, "${green}List")
    selected = Label(1, 1, "Nothing selected yet (scroll with < and >)")

    def click(choice, cursor, option):
        selected.set_text(f"Selected ${{green}}{option}${{normal}} (#{choice})")

    options = [f"Item number {i}" for i in range(1, 21)]
    options[3] = "${red}Red item"
    lst = List(3, 1, options, 8, click)

    window.menu.add(selected)
    window.menu.add(lst)
    window.menu.focus(lst)
    window.start()


def _lineedit(term):
    window = Window(term, "${yellow}Line edit")
    edit = termui.LineEdit(1, 8, "hello", 20)

    def show():
        termui.message_box(window, f"You typed: ${{yellow}}{edit.text}")

    button = Button(3, 1, "[show]", show)

    window.menu.add(Label(1, 1, "Text: "))
    window.menu.add(edit)
    window.menu.add(button)
    window.menu.link(edit, button)
    window.menu.focus(edit)
    window.start()


def _wordchoice(term):
    window = Window(term, "${magenta}Word choice")
    fruits = ["apple", "${red}cherry", "fig", "${yellow}banana"]
    choices = [
        termui.WordChoice(1, 10, fruits, termui.ALIGN_LEFT),
        termui.WordChoice(2, 10, fruits, termui.ALIGN_CENTER, "cyan"),
        termui.WordChoice(3, 10, fruits, termui.ALIGN_RIGHT, "yellow"),
    ]

    for i, name in enumerate(("left", "center", "right"), 1):
        window.menu.add(Label(i, 1, name))
    for choice in choices:
        window.menu.add(choice)

    window.menu.link(*choices)
    window.menu.focus(choices[0])
    window.start()


def _progressbar(term):
    window = Window(term, "${blue}Progress bar")
    bar = termui.ProgressBar(1, 1, 30, 100, True, "green", "white")
    done = threading.Event()

    def produce():
        # Values are handed to the main loop, which applies them between
        # frames
        for value in range(101):
            if done.wait(0.05):
                return
            window.post(lambda value=value: bar.set(value))

    window.menu.add(bar)
    window.menu.add(Label(3, 1, "Press Esc to stop"))

    producer = threading.Thread(target=produce, daemon=True)
    producer.start()
    try:
        window.start()
    finally:
        done.set()
        producer.join()


def _piechart(term):
    window = Window(term, "${pink}Pie chart")
    chart = termui.PieChart(1, 1, 15, 30, [1, 2, 3], ["red", "green", "blue"])
    legend = Label(1, 33, "${red}one ${green}two ${blue}three")

    def rotate():
        values = chart.values
        chart.set_values(values[1:] + values[:1])

    button = Button(3, 33, "[rotate]", rotate)

    window.menu.add(chart)
    window.menu.add(legend)
    window.menu.add(button)
    window.menu.focus(button)
    window.start()


def _messagebox(term):
    window = Window(term, "${red}Message box")
    answer = Label(1, 1, "No answer yet")

    def ask():
        choice = termui.message_box(
            window, "Save ${yellow}changes${normal}?", ["Yes", "No", "Cancel"]
        )
        answer.set_text(f"You answered: {choice}")

    button = Button(3, 1, "[ask]", ask)

    window.menu.add(answer)
    window.menu.add(button)
    window.menu.focus(button)
    window.start()


def _dropdownbox(term):
    window = Window(term, "${cyan}Drop-down box")
    answer = Label(1, 1, "Nothing chosen")
    colors = ["red", "green", "yellow", "blue", "magenta", "cyan", "white"]
    options = [f"${{{color}}}{color}" for color in colors]

    def pick(choice_type):
        indices = termui.drop_down_box(window, options, 4, 5, 20, choice_type)
        if indices:
            answer.set_text("Chosen: " + ", ".join(colors[i] for i in indices))
        else:
            answer.set_text("Nothing chosen")

    single = Button(3, 1, "[one]", lambda: pick(termui.SINGLE_ELEMENT))
    multiple = Button(4, 1, "[many]", lambda: pick(termui.MULTIPLE_ELEMENTS))

    window.menu.add(answer)
    window.menu.add(single)
    window.menu.add(multiple)
    window.menu.link(single, multiple)
    window.menu.focus(single)
    window.start()


def _enterstring(term):
    window = Window(term, "${green}Enter string")
    name = Label(1, 1, "Hello, stranger")

    def ask():
        text = termui.enter_string(window, "", "${green}Your name", 16)
        if text:
            name.set_text(f"Hello, ${{green}}{text}")

    button = Button(3, 1, "[change name]", ask)

    window.menu.add(name)
    window.menu.add(button)
    window.menu.focus(button)
    window.start()


def _multipleelements(term):
    window = Window(term, "${yellow}Many widgets", "blue")
    status = Label(1, 1, "")

    edit = termui.LineEdit(3, 1, "", 15)
    size = termui.WordChoice(4, 1, ["small", "medium", "large"], termui.ALIGN_CENTER)
    lst = List(5, 1, ["alpha", "beta", "gamma", "delta", "epsilon"], 3)

    def submit():
        status.set_text(
            f"${{green}}{edit.text or '(empty)'}${{normal}}, {size.selected}, "
            f"{lst.state.options[lst.choice]}"
        )

    ok = Button(11, 1, "[submit]", submit)
    quit_button = Button(11, 12, "[quit]", window.exit)

    for widget in (status, edit, size, lst, ok, quit_button):
        window.menu.add(widget)
    window.menu.add(termui.Separator(10))
    window.menu.link(edit, size, lst, ok, quit_button)
    window.menu.focus(edit)
    window.start()


def _multiplemenus(term):
    window = Window(term, "${red}First menu")
    first = window.menu
    second = termui.Menu("${green}Second menu", "green")

    to_second = Button(1, 1, "[go to second menu]", lambda: setattr(window, "menu", second))
    to_first = Button(1, 1, "[go to first menu]", lambda: setattr(window, "menu", first))

    first.add(to_second)
    first.add(Label(3, 1, "This is the first menu"))
    first.focus(to_second)

    second.add(to_first)
    second.add(Label(3, 1, "This is the ${green}second${normal} menu"))
    second.focus(to_first)

    window.start()


_DEMOS = {
    "label": _label,
    "button": _button,
    "list": _list,
    "lineedit": _lineedit,
    "wordchoice": _wordchoice,
    "progressbar": _progressbar,
    "piechart": _piechart,
    "messagebox": _messagebox,
    "dropdownbox": _dropdownbox,
    "enterstring": _enterstring,
    "multipleelements": _multipleelements,
    "multiplemenus": _multiplemenus,
}


def main():
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawDescriptionHelpFormatter, description=__doc__
    )

    parser.add_argument("demo", choices=sorted(_DEMOS), help="Example to run")

    parser.add_argument(
        "--no-mouse",
        dest="mouse",
        action="store_false",
        default=os.environ.get("TERMUI_MOUSE", "1") != "0",
        help="Don't report mouse clicks to the widgets",
    )

    args = parser.parse_args()

    rawterm.run(_DEMOS[args.demo], mouse=args.mouse)


if __name__ == "__main__":
    main()
