import textwrap

from colorama import Fore, Style

from wirth import (
    WirthRule,
    build,
    render,
    render_colored,
    render_moves,
    render_trace,
)


def test_render_nfa():
    assert render(build("n.")) == "initial: 0\nfinal: 1\n(0, n) -> 1\n"
    assert render(build("{n}.")) == textwrap.dedent("""\
        initial: 0
        final: 1
        (0, ε) -> 1
        (1, n) -> 2
        (2, ε) -> 1
    """)


def test_render_dfa():
    assert render(WirthRule("a|b|c.").dfa()) == textwrap.dedent("""\
        initial: 0
        final: 1
        (0, a) -> 1
        (0, b) -> 1
        (0, c) -> 1
    """)


def test_render_several_finals():
    assert render(build("a|b|c.")).splitlines()[1] == "final: 1, 2, 3"


def test_render_moves():
    assert render_moves(build('(n|"x").')) == [
        "initial (0, n) -> 2",
        "initial (0, x) -> 3",
        " accept (2, ε) -> 1",
        " accept (3, ε) -> 1",
    ]
    assert render_moves(build("a b c.")) == [
        "initial (0, a) -> 1",
        "        (1, b) -> 2",
        " accept (2, c) -> 3",
    ]


def test_accept_tag_wins_over_initial():
    assert render_moves(build("n.")) == [" accept (0, n) -> 1"]


def test_render_colored():
    lines = render_colored(build("a b.")).splitlines()
    assert len(lines) == 2
    assert lines[0].startswith(Style.BRIGHT + Fore.CYAN + "initial ")
    assert lines[1].startswith(Style.BRIGHT + Fore.GREEN + " accept ")
    assert lines[1].endswith(Style.RESET_ALL + "(1, b) -> 2")


def test_render_trace():
    rule = WirthRule('[ "<" N ] T.')
    assert render_trace(rule.trace) == '0 [ 0 "<" 2 N 3 ] 1 T 4'
    colored = rule.render_trace(color=True)
    assert colored.count(Style.RESET_ALL) == len(rule.trace)
    assert Fore.YELLOW + "N" in colored
