import logging
from collections import deque
from collections.abc import Hashable
from typing import Final, Protocol, final

from frozenintset import FrozenIntSet

from .automaton import EPSILON, Automaton, Symbol, epsilon_closure, members

logger = logging.getLogger(__name__)

__all__ = (
    "AutomatonAlgebra",
    "DefaultAlgebra",
    "DEFAULT_ALGEBRA",
    "epsilon_closure",
    "minimize_dfa",
    "nfa_to_dfa",
)


class AutomatonAlgebra(Protocol):
    def nfa_to_dfa(self, nfa: Automaton, /) -> Automaton: ...

    def minimize_dfa(self, dfa: Automaton, /) -> Automaton: ...


@final
class DefaultAlgebra:
    __slots__ = ()

    def nfa_to_dfa(self, nfa: Automaton, /) -> Automaton:
        return nfa_to_dfa(nfa)

    def minimize_dfa(self, dfa: Automaton, /) -> Automaton:
        return minimize_dfa(dfa)


DEFAULT_ALGEBRA: Final[DefaultAlgebra] = DefaultAlgebra()


def nfa_to_dfa(nfa: Automaton) -> Automaton:
    """
    Subset construction.  Each DFA state stands for the epsilon closure of a
    set of NFA states; DFA states are numbered in the order they are discovered,
    starting with the closure of the initial state as state 0.
    """
    start = epsilon_closure(nfa, (nfa.initial,))
    index: dict[FrozenIntSet, int] = {start: 0}
    queue: deque[FrozenIntSet] = deque([start])
    transitions: dict[int, list[tuple[Symbol, int]]] = dict()
    final: set[int] = set()
    while queue:
        subset = queue.popleft()
        origin = index[subset]
        step: dict[str, set[int]] = dict()
        for state in members(subset):
            if state in nfa.final:
                final.add(origin)
            for symbol, target in nfa.transitions.get(state, ()):
                if symbol is not EPSILON:
                    step.setdefault(symbol, set()).add(target)
        for symbol in nfa.symbols:
            if (targets := step.get(symbol)) is None:
                continue
            closure = epsilon_closure(nfa, targets)
            if closure not in index:
                index[closure] = len(index)
                queue.append(closure)
            transitions.setdefault(origin, []).append((symbol, index[closure]))
    logger.debug("subset construction: %d nfa states -> %d dfa states", len(nfa.states), len(index))
    return Automaton.of(
        initial=0,
        final=final,
        symbols=nfa.symbols,
        n_states=len(index),
        transitions=transitions,
    )


def minimize_dfa(dfa: Automaton) -> Automaton:
    """
    Merge equivalent states by partition refinement.  The partition starts out
    as final/non-final and is split by the blocks each state's moves lead to
    until it no longer changes.  Unreachable states are dropped and the result
    is renumbered breadth-first from the initial state.
    """
    table: dict[int, tuple[tuple[Symbol, int], ...]] = {
        state: tuple(sorted(dfa.transitions.get(state, ()), key=lambda move: str(move[0])))
        for state in dfa.states
    }
    reachable = _reachable(table, dfa.initial)

    blocks: dict[int, int] = {state: 0 if state in dfa.final else 1 for state in reachable}
    n_blocks = len(set(blocks.values()))
    while True:
        signatures: dict[Hashable, int] = dict()
        refined = {
            state: signatures.setdefault(
                (blocks[state], tuple((symbol, blocks[target]) for symbol, target in table[state])),
                len(signatures),
            )
            for state in reachable
        }
        blocks = refined
        if len(signatures) == n_blocks:
            break
        n_blocks = len(signatures)

    representative: dict[int, int] = dict()
    for state in reachable:
        representative.setdefault(blocks[state], state)

    order: dict[int, int] = {blocks[dfa.initial]: 0}
    queue: deque[int] = deque([blocks[dfa.initial]])
    while queue:
        block = queue.popleft()
        for _, target in dfa.transitions.get(representative[block], ()):
            if blocks[target] not in order:
                order[blocks[target]] = len(order)
                queue.append(blocks[target])

    logger.debug("minimization: %d dfa states -> %d dfa states", len(dfa.states), len(order))
    return Automaton.of(
        initial=0,
        final=(order[blocks[state]] for state in reachable if state in dfa.final),
        symbols=dfa.symbols,
        n_states=len(order),
        transitions={
            order[block]: [
                (symbol, order[blocks[target]]) for symbol, target in dfa.transitions.get(representative[block], ())
            ]
            for block in order
        },
    )


def _reachable(table: dict[int, tuple[tuple[Symbol, int], ...]], initial: int) -> list[int]:
    seen: set[int] = {initial}
    todo: list[int] = [initial]
    while todo:
        state = todo.pop()
        for _, target in table[state]:
            if target not in seen:
                seen.add(target)
                todo.append(target)
    return sorted(seen)
