import itertools

import pytest

from wirth import (
    Automaton,
    WirthRule,
    build,
    minimize_dfa,
    nfa_to_dfa,
)
from wirth.algebra import epsilon_closure
from wirth.automaton import members
from wirth.exc import MalformedAutomaton


class RecordingAlgebra:
    def __init__(self) -> None:
        self.calls: list[str] = list()

    def nfa_to_dfa(self, nfa: Automaton, /) -> Automaton:
        self.calls.append("nfa_to_dfa")
        return nfa_to_dfa(nfa)

    def minimize_dfa(self, dfa: Automaton, /) -> Automaton:
        self.calls.append("minimize_dfa")
        return minimize_dfa(dfa)


def test_dfa_is_computed_once():
    algebra = RecordingAlgebra()
    rule = WirthRule('(n|"x") {n}.', algebra=algebra)
    assert algebra.calls == []
    first = rule.dfa()
    assert algebra.calls == ["nfa_to_dfa", "minimize_dfa"]
    second = rule.dfa()
    assert second is first
    assert algebra.calls == ["nfa_to_dfa", "minimize_dfa"]


def test_dfa_leaves_nfa_untouched():
    rule = WirthRule("{n}.")
    before = dict(rule.nfa.transitions)
    rule.dfa()
    assert dict(rule.nfa.transitions) == before
    assert rule.nfa.final == {1}


def test_epsilon_closure():
    nfa = build("[a] {b}.")
    # 0 [ 0 a 2 ] 1 { 3 b 4 } 3
    assert list(members(epsilon_closure(nfa, [0]))) == [0, 1, 3]
    assert list(members(epsilon_closure(nfa, [2]))) == [1, 2, 3]
    assert list(members(epsilon_closure(nfa, [4]))) == [3, 4]


def test_subset_construction():
    dfa = nfa_to_dfa(build('(n|"x").'))
    assert dfa.is_deterministic()
    assert dfa.states == range(3)
    assert dfa.transitions == {0: (("n", 1), ("x", 2))}
    assert dfa.final == {1, 2}


def test_minimize_merges_equivalent_finals():
    dfa = minimize_dfa(nfa_to_dfa(build("a|b|c.")))
    assert dfa.states == range(2)
    assert dfa.transitions == {0: (("a", 1), ("b", 1), ("c", 1))}
    assert dfa.final == {1}


def test_minimize_repetition():
    dfa = WirthRule("{n}.").dfa()
    assert dfa.states == range(1)
    assert dfa.transitions == {0: (("n", 0),)}
    assert dfa.final == {0}


def test_minimize_optional():
    dfa = WirthRule("[n].").dfa()
    assert dfa.states == range(2)
    assert dfa.transitions == {0: (("n", 1),)}
    assert dfa.final == {0, 1}


def test_minimize_drops_unreachable_states():
    dfa = Automaton.of(
        initial=0,
        final=[1, 3],
        symbols=["a"],
        n_states=4,
        transitions={0: [("a", 1)], 2: [("a", 3)]},
    )
    minimized = minimize_dfa(dfa)
    assert minimized.states == range(2)
    assert minimized.transitions == {0: (("a", 1),)}


@pytest.mark.parametrize(
    "rule",
    [
        "n.",
        'n { "," n }.',
        '( n | "<" T ">" ) { "*" ( n | "<" T ">" ) }.',
        'T I [ "<" N { "," N } ">" ] { "," I [ "<" N { "," N } ">" ] }.',
        '(a (b) | c) [ d | { e } ].',
    ],
)
def test_same_language(rule: str):
    """
    The NFA and its minimized DFA agree on every token sequence up to length 4
    over the rule's symbols.
    """
    wr = WirthRule(rule)
    dfa = wr.dfa()
    dfa.check()
    assert dfa.is_deterministic()
    assert dfa.initial == 0
    for n in range(5):
        for tokens in itertools.product(wr.nfa.symbols, repeat=n):
            assert wr.nfa.accepts(tokens) == dfa.accepts(tokens), tokens


def test_check_rejects_malformed():
    fa = Automaton.of(initial=0, final=[1], symbols=["a"], n_states=2, transitions={0: [("b", 1)]})
    with pytest.raises(MalformedAutomaton):
        fa.check()
    fa = Automaton.of(initial=0, final=[], symbols=[], n_states=1, transitions={})
    with pytest.raises(MalformedAutomaton):
        fa.check()
    fa = Automaton.of(initial=0, final=[0], symbols=["a"], n_states=1, transitions={0: [("a", 4)]})
    with pytest.raises(MalformedAutomaton):
        fa.check()
