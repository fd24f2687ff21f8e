from .algebra import (
    AutomatonAlgebra,
    DefaultAlgebra,
    minimize_dfa,
    nfa_to_dfa,
)
from .automaton import (
    EPSILON,
    Automaton,
)
from .builder import (
    WirthRule,
    build,
)
from .defs import (
    Opts,
    TraceItem,
    TraceKind,
)
from .exc import (
    EmptyTerminal,
    InvalidToken,
    MissingTerminator,
    NestingTooDeep,
    RuleSyntaxError,
    UnbalancedGroup,
    UnterminatedTerminal,
)
from .render import (
    render,
    render_colored,
    render_moves,
    render_trace,
)

__all__ = (
    "EPSILON",
    "Automaton",
    "AutomatonAlgebra",
    "DefaultAlgebra",
    "EmptyTerminal",
    "InvalidToken",
    "MissingTerminator",
    "NestingTooDeep",
    "Opts",
    "RuleSyntaxError",
    "TraceItem",
    "TraceKind",
    "UnbalancedGroup",
    "UnterminatedTerminal",
    "WirthRule",
    "build",
    "minimize_dfa",
    "nfa_to_dfa",
    "render",
    "render_colored",
    "render_moves",
    "render_trace",
)
