from collections.abc import Iterable, Iterator
from typing import Final

from colorama import Fore, Style

from .automaton import EPSILON, Automaton, Symbol
from .defs import TraceItem

EPSILON_MARK: Final[str] = "ε"

_INITIAL: Final[str] = "initial "
_ACCEPT: Final[str] = " accept "
_PLAIN: Final[str] = " " * 8


def _symbol(symbol: Symbol) -> str:
    return EPSILON_MARK if symbol is EPSILON else symbol


def _move(origin: int, symbol: Symbol, target: int) -> str:
    return f"({origin}, {_symbol(symbol)}) -> {target}"


def _tag(fa: Automaton, origin: int, target: int) -> str:
    if target in fa.final:
        return _ACCEPT
    if origin == fa.initial:
        return _INITIAL
    return _PLAIN


def render(fa: Automaton) -> str:
    """
    Renders `fa` as text: the initial state, the final states and one line per
    transition, origins in state order.
    """
    lines = [
        f"initial: {fa.initial}",
        f"final: {', '.join(str(state) for state in sorted(fa.final))}",
        *(_move(origin, symbol, target) for origin, symbol, target in fa.moves()),
    ]
    return "".join(f"{line}\n" for line in lines)


def render_moves(fa: Automaton) -> list[str]:
    """One line per transition, tagged `initial` or `accept` where that applies."""
    return [_tag(fa, origin, target) + _move(origin, symbol, target) for origin, symbol, target in fa.moves()]


_TAG_STYLES: Final[dict[str, str]] = {
    _INITIAL: Style.BRIGHT + Fore.CYAN,
    _ACCEPT: Style.BRIGHT + Fore.GREEN,
    _PLAIN: Style.RESET_ALL,
}


def _colored_moves(fa: Automaton) -> Iterator[str]:
    for origin, symbol, target in fa.moves():
        tag = _tag(fa, origin, target)
        yield f"{_TAG_STYLES[tag]}{tag}{Style.RESET_ALL}{_move(origin, symbol, target)}"


def render_colored(fa: Automaton) -> str:
    return "".join(f"{line}\n" for line in _colored_moves(fa))


def render_trace(trace: Iterable[TraceItem], *, color: bool = False) -> str:
    if not color:
        return " ".join(item.text for item in trace)
    return " ".join(f"{''.join(item.kind.value.get_style())}{item.text}{Style.RESET_ALL}" for item in trace)
