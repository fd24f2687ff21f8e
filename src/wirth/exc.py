from collections.abc import Iterable
from typing import final


class RuleSyntaxError(SyntaxError):
    def __init__(self, msg: str, pos: int):
        super().__init__(f"{msg}; pos={pos}")
        self.pos = pos


@final
class UnbalancedGroup(RuleSyntaxError):
    def __init__(
        self,
        pos: int,
        *,
        found: str | None = None,
        expected: str | None = None,
        still_open: Iterable[str] = (),
    ):
        if found is None:
            super().__init__(f"end marks missing for open groups: {','.join(still_open)}", pos)
        elif expected is None:
            super().__init__(f"invalid end mark '{found}', no group is open", pos)
        else:
            super().__init__(f"invalid end mark '{found}' expected '{expected}'", pos)


@final
class UnterminatedTerminal(RuleSyntaxError):
    def __init__(self, pos: int):
        super().__init__("end of rule reached inside a terminal, unbalanced quotes", pos)


@final
class EmptyTerminal(RuleSyntaxError):
    def __init__(self, pos: int):
        super().__init__("terminal can't be empty", pos)


@final
class InvalidToken(RuleSyntaxError):
    def __init__(self, ch: str, pos: int, *, after_end: bool = False):
        if after_end:
            super().__init__(f"unexpected '{ch}' after end of rule", pos)
        else:
            super().__init__(f"invalid name, can't start with '{ch}'", pos)


@final
class MissingTerminator(RuleSyntaxError):
    def __init__(self, pos: int):
        super().__init__("rule must end with '.'", pos)


@final
class NestingTooDeep(RuleSyntaxError):
    def __init__(self, max_depth: int, pos: int):
        super().__init__(f"groups nested deeper than {max_depth}", pos)


@final
class EmptyStack(IndexError):
    def __init__(self, name: str):
        super().__init__(f"pop from empty stack {name}")


@final
class MalformedAutomaton(ValueError):
    pass
