from collections.abc import Iterator
from typing import final

from .automaton import Automaton, Symbol
from .defs import TraceItem, TraceKind
from .exc import EmptyStack


@final
class Stack[T]:
    __slots__ = ("_name", "_items")

    def __init__(self, name: str, *items: T):
        self._name: str = name
        self._items: list[T] = list(items)

    @property
    def name(self) -> str:
        return self._name

    def push(self, value: T) -> None:
        self._items.append(value)

    def pop(self) -> T:
        if not self._items:
            raise EmptyStack(self._name)
        return self._items.pop()

    def top(self) -> T | None:
        if not self._items:
            return None
        return self._items[-1]

    def peek(self) -> T:
        if not self._items:
            raise EmptyStack(self._name)
        return self._items[-1]

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"Stack({self._name!r}, {self._items!r})"


@final
class BuildContext:
    """
    Everything the scan accumulates while building an automaton.

    `groups` holds the closers expected for the currently open groups, `states`
    holds the state the next token at the current depth originates from
    (topmost) and, below it, the exit states of the enclosing groups.
    """

    __slots__ = (
        "groups",
        "states",
        "transitions",
        "symbols",
        "finals",
        "last_state",
        "accept_state",
        "trace",
    )

    def __init__(self) -> None:
        self.groups: Stack[str] = Stack("groups")
        self.states: Stack[int] = Stack("states", 0)
        self.transitions: dict[int, list[tuple[Symbol, int]]] = dict()
        self.symbols: dict[str, None] = dict()
        self.finals: set[int] = set()
        self.last_state: int = 0
        self.accept_state: int = 0
        self.trace: list[TraceItem] = [TraceItem(TraceKind.STATE, "0")]

    def new_state(self) -> int:
        self.last_state += 1
        return self.last_state

    def add_transition(self, origin: int, symbol: Symbol, target: int) -> None:
        self.transitions.setdefault(origin, []).append((symbol, target))

    def add_symbol(self, symbol: str) -> None:
        self.symbols.setdefault(symbol, None)

    def mark(self, kind: TraceKind, text: str, state: int) -> None:
        self.trace.append(TraceItem(kind, text))
        self.trace.append(TraceItem(TraceKind.STATE, str(state)))

    def freeze(self) -> Automaton:
        return Automaton.of(
            initial=0,
            final=self.finals,
            symbols=self.symbols,
            n_states=self.last_state + 1,
            transitions=self.transitions,
        )
