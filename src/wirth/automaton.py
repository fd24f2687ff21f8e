from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import NamedTuple, Final, final

from frozenintset import FrozenIntSet

from .exc import MalformedAutomaton

type Symbol = str | None

EPSILON: Final[None] = None


@final
class Automaton(NamedTuple):
    """
    A finite automaton over tokens (terminal texts and non-terminal names).

    The same structure describes both the NFA built from a rule and the DFA
    derived from it.  `transitions` maps an origin state to its moves in
    insertion order; a move labelled `EPSILON` consumes no token.
    """

    initial: int
    final: frozenset[int]
    symbols: tuple[str, ...]
    states: range
    transitions: Mapping[int, tuple[tuple[Symbol, int], ...]]

    @staticmethod
    def of(
        initial: int,
        final: Iterable[int],
        symbols: Iterable[str],
        n_states: int,
        transitions: Mapping[int, Iterable[tuple[Symbol, int]]],
    ) -> "Automaton":
        return Automaton(
            initial=initial,
            final=frozenset(final),
            symbols=tuple(dict.fromkeys(symbols)),
            states=range(n_states),
            transitions=MappingProxyType({origin: tuple(moves) for origin, moves in transitions.items() if moves}),
        )

    def moves(self) -> Iterator[tuple[int, Symbol, int]]:
        for origin in self.states:
            for symbol, target in self.transitions.get(origin, ()):
                yield origin, symbol, target

    def is_deterministic(self) -> bool:
        seen: set[tuple[int, str]] = set()
        for origin, symbol, _ in self.moves():
            if symbol is EPSILON or (origin, symbol) in seen:
                return False
            seen.add((origin, symbol))
        return True

    def check(self) -> None:
        if self.states.start != 0 or self.states.step != 1:
            raise MalformedAutomaton(f"states must be a contiguous range from 0, got {self.states}")
        if self.initial not in self.states:
            raise MalformedAutomaton(f"initial state {self.initial} is not a state")
        if not self.final:
            raise MalformedAutomaton("no final states")
        if stray := self.final.difference(self.states):
            raise MalformedAutomaton(f"final states {sorted(stray)} are not states")
        if stray := set(self.transitions).difference(self.states):
            raise MalformedAutomaton(f"transitions from unknown states {sorted(stray)}")
        symbols = frozenset(self.symbols)
        for origin, symbol, target in self.moves():
            if target not in self.states:
                raise MalformedAutomaton(f"transition ({origin}, {symbol}) -> {target} leads to an unknown state")
            if symbol is not EPSILON and symbol not in symbols:
                raise MalformedAutomaton(f"transition ({origin}, {symbol}) -> {target} uses an unknown symbol")

    def accepts(self, tokens: Iterable[str]) -> bool:
        current = epsilon_closure(self, (self.initial,))
        for token in tokens:
            step = {
                target
                for origin in members(current)
                for symbol, target in self.transitions.get(origin, ())
                if symbol == token
            }
            if not step:
                return False
            current = epsilon_closure(self, step)
        return any(state in self.final for state in members(current))


def members(states: FrozenIntSet) -> Iterator[int]:
    for rng in states.ranges:
        yield from rng


def epsilon_closure(fa: Automaton, states: Iterable[int]) -> FrozenIntSet:
    """All states reachable from `states` without consuming a token, `states` included."""
    closure: set[int] = set(states)
    todo: list[int] = list(closure)
    while todo:
        state = todo.pop()
        for symbol, target in fa.transitions.get(state, ()):
            if symbol is EPSILON and target not in closure:
                closure.add(target)
                todo.append(target)
    return FrozenIntSet(sorted(closure))
