import dataclasses
import logging
import string
import sys
from typing import Final, Self, final

from .algebra import DEFAULT_ALGEBRA, AutomatonAlgebra
from .automaton import EPSILON, Automaton
from .context import BuildContext
from .cursor import Cursor
from .defs import Opts, TraceItem, TraceKind
from .exc import (
    EmptyTerminal,
    InvalidToken,
    MissingTerminator,
    NestingTooDeep,
    UnbalancedGroup,
    UnterminatedTerminal,
)
from .render import render_trace

logger = logging.getLogger(__name__)

_END_MARKS: Final[dict[str, str]] = {"(": ")", "[": "]", "{": "}"}

_LETTERS: Final[frozenset[str]] = frozenset(string.ascii_letters)


@final
@dataclasses.dataclass(frozen=True)
class _Options:
    max_depth: int = 256
    require_terminator: bool = True
    reject_trailing: bool = False

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")

    def override(self, opts: Opts | None) -> Self:
        if opts is None:
            return self
        return _Options(
            max_depth=opts.max_depth if opts.max_depth is not None else self.max_depth,
            require_terminator=(
                opts.require_terminator if opts.require_terminator is not None else self.require_terminator
            ),
            reject_trailing=opts.reject_trailing if opts.reject_trailing is not None else self.reject_trailing,
        )


@final
class _Scanner:
    """
    Straightforward lexer and syntax pass over a single Wirth rule, marking
    states and emitting transitions as it goes.

    Two stacks are kept in the context: `groups` for balancing the group marks
    () [] {}, and `states` for the states tokens originate from.  Inside a
    group the state stack holds two entries for that group, the state after
    the group and the state the next token starts from:

        n ( n ... ) e        states: [..., e, n]
        n { e ... } e        states: [..., e, e]

    Outside of a group a single entry is kept, the state the next token
    starts from:

        ... n T t ...        states: [..., t]
    """

    __slots__ = ("_cursor", "_ctx", "_opts", "_max_depth", "_terminated")

    def __init__(self, text: str, opts: _Options):
        self._cursor: Final[Cursor] = Cursor(text)
        self._ctx: Final[BuildContext] = BuildContext()
        self._opts: Final[_Options] = opts
        # every open group holds a frame of `_scan`, so stay well below the interpreter's limit
        self._max_depth: Final[int] = min(opts.max_depth, sys.getrecursionlimit() // 2)
        self._terminated: bool = False

    @property
    def context(self) -> BuildContext:
        return self._ctx

    def run(self) -> BuildContext:
        ctx = self._ctx
        self._scan(entry=0, depth=0)
        if ctx.groups:
            raise UnbalancedGroup(self._cursor.pos, still_open=ctx.groups)
        if not self._terminated and self._opts.require_terminator:
            raise MissingTerminator(self._cursor.pos)
        ctx.finals.add(ctx.accept_state)
        return ctx

    def _scan(self, entry: int, depth: int) -> None:
        cursor = self._cursor
        ctx = self._ctx
        while (ch := cursor.read()) is not None:
            pos = cursor.pos - 1
            match ch:
                case "(" | "[" | "{":
                    if depth >= self._max_depth:
                        raise NestingTooDeep(self._max_depth, pos)
                    self._open_group(ch)
                    self._scan(entry=ctx.states.peek(), depth=depth + 1)
                case ")" | "]" | "}":
                    self._close_group(ch, pos)
                    return
                case "|":
                    self._alternative(entry)
                case ".":
                    if ctx.groups:
                        raise UnbalancedGroup(pos, still_open=ctx.groups)
                    # whatever follows the terminator is not part of the rule
                    if self._opts.reject_trailing:
                        self._expect_end()
                    self._terminated = True
                    return
                case '"':
                    symbol = self._read_terminal(pos)
                    self._token(TraceKind.TERMINAL, symbol, cursor.text[pos : cursor.pos])
                case _ if ch in _LETTERS:
                    symbol = self._read_nonterminal(ch)
                    self._token(TraceKind.NONTERMINAL, symbol, symbol)
                case _ if ch.isspace():
                    continue
                case _:
                    raise InvalidToken(ch, pos)

    def _open_group(self, mark: str) -> None:
        ctx = self._ctx
        # the state the group is entered from, and the state reserved for after it
        origin = ctx.states.pop()
        exit_ = ctx.new_state()
        ctx.states.push(exit_)
        if mark == "{":
            # the body starts and loops back at the state after the group
            ctx.states.push(exit_)
            ctx.add_transition(origin, EPSILON, exit_)
            ctx.mark(TraceKind.OPEN, mark, exit_)
        else:
            ctx.states.push(origin)
            if mark == "[":
                ctx.add_transition(origin, EPSILON, exit_)
            ctx.mark(TraceKind.OPEN, mark, origin)
        ctx.groups.push(_END_MARKS[mark])

    def _close_group(self, mark: str, pos: int) -> None:
        ctx = self._ctx
        expected = ctx.groups.top()
        if mark != expected:
            raise UnbalancedGroup(pos, found=mark, expected=expected)
        ctx.groups.pop()
        origin = ctx.states.pop()
        exit_ = ctx.states.peek()
        ctx.add_transition(origin, EPSILON, exit_)
        ctx.accept_state = exit_
        ctx.mark(TraceKind.CLOSE, mark, exit_)

    def _alternative(self, entry: int) -> None:
        ctx = self._ctx
        origin = ctx.states.pop()
        if ctx.groups:
            # the alternative ends in the state after the enclosing group
            ctx.add_transition(origin, EPSILON, ctx.states.peek())
        else:
            # the alternative to the left may end the rule
            ctx.finals.add(ctx.accept_state)
        ctx.states.push(entry)
        ctx.mark(TraceKind.ALT, "|", entry)

    def _token(self, kind: TraceKind, symbol: str, text: str) -> None:
        ctx = self._ctx
        ctx.add_symbol(symbol)
        origin = ctx.states.pop()
        target = ctx.new_state()
        ctx.states.push(target)
        ctx.add_transition(origin, symbol, target)
        ctx.mark(kind, text, target)
        if not ctx.groups:
            ctx.accept_state = target

    def _read_terminal(self, start: int) -> str:
        cursor = self._cursor
        chars: list[str] = list()
        while True:
            ch = cursor.read()
            if ch is None:
                raise UnterminatedTerminal(start)
            if ch == '"':
                lookahead = cursor.read()
                if lookahead == '"':
                    chars.append(ch)
                    continue
                if lookahead is not None:
                    cursor.undo()
                break
            chars.append(ch)
        if not chars:
            raise EmptyTerminal(start)
        return "".join(chars)

    def _read_nonterminal(self, first: str) -> str:
        cursor = self._cursor
        chars: list[str] = [first]
        while (ch := cursor.read()) is not None:
            if ch not in _LETTERS:
                cursor.undo()
                break
            chars.append(ch)
        return "".join(chars)

    def _expect_end(self) -> None:
        cursor = self._cursor
        while (ch := cursor.read()) is not None:
            if not ch.isspace():
                raise InvalidToken(ch, cursor.pos - 1, after_end=True)


def _scan(rule: str, opts: Opts | None) -> BuildContext:
    if not isinstance(rule, str):
        raise TypeError(f"rule must be a str, got {type(rule).__name__}")
    ctx = _Scanner(rule, _Options().override(opts)).run()
    logger.debug(
        "built nfa for %r: %d states, %d transitions, final states %s",
        rule,
        ctx.last_state + 1,
        sum(len(moves) for moves in ctx.transitions.values()),
        sorted(ctx.finals),
    )
    return ctx


def build(rule: str, /, *, opts: Opts | None = None) -> Automaton:
    """
    Builds the NFA accepting the token sequences described by `rule`, a single
    rule in Wirth syntax notation terminated by '.'.

    Raises a `RuleSyntaxError` subclass if the rule is malformed.
    """
    return _scan(rule, opts).freeze()


@final
class WirthRule:
    """
    A single Wirth rule together with its automata.  The NFA is built when the
    rule is constructed; the minimized DFA is derived from it on first use of
    `dfa()` and cached from then on.
    """

    __slots__ = ("_text", "_nfa", "_trace", "_algebra", "_dfa")

    def __init__(
        self,
        rule: str,
        *,
        opts: Opts | None = None,
        algebra: AutomatonAlgebra | None = None,
    ):
        ctx = _scan(rule, opts)
        self._text: Final[str] = rule
        self._nfa: Final[Automaton] = ctx.freeze()
        self._trace: Final[tuple[TraceItem, ...]] = tuple(ctx.trace)
        self._algebra: Final[AutomatonAlgebra] = DEFAULT_ALGEBRA if algebra is None else algebra
        self._dfa: Automaton | None = None

    def __repr__(self) -> str:
        return f"WirthRule({self._text!r})"

    @property
    def text(self) -> str:
        return self._text

    @property
    def nfa(self) -> Automaton:
        return self._nfa

    @property
    def trace(self) -> tuple[TraceItem, ...]:
        return self._trace

    def render_trace(self, *, color: bool = False) -> str:
        return render_trace(self._trace, color=color)

    def dfa(self) -> Automaton:
        if self._dfa is None:
            self._dfa = self._algebra.minimize_dfa(self._algebra.nfa_to_dfa(self._nfa))
        return self._dfa
