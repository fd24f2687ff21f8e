from enum import Enum
from typing import NamedTuple, final

from colorama import Back, Fore, Style


@final
class Opts(NamedTuple):
    max_depth: int | None = None
    require_terminator: bool | None = None
    reject_trailing: bool | None = None

    def __call__(
        self,
        *,
        max_depth: int | None = None,
        require_terminator: bool | None = None,
        reject_trailing: bool | None = None,
    ):
        return Opts(
            max_depth=self.max_depth if max_depth is None else max_depth,
            require_terminator=self.require_terminator if require_terminator is None else require_terminator,
            reject_trailing=self.reject_trailing if reject_trailing is None else reject_trailing,
        )


@final
class TraceStyle(NamedTuple):
    style: str | tuple[str, ...] = Style.RESET_ALL

    def get_style(self) -> tuple[str, ...]:
        if isinstance(self.style, tuple):
            return self.style
        return (self.style,)


@final
class TraceKind(Enum):
    STATE = TraceStyle((Style.BRIGHT, Fore.LIGHTWHITE_EX))
    OPEN = TraceStyle((Back.BLACK, Fore.GREEN))
    CLOSE = TraceStyle((Back.BLACK, Fore.LIGHTGREEN_EX))
    ALT = TraceStyle((Back.BLACK, Fore.CYAN))
    TERMINAL = TraceStyle((Back.BLACK, Fore.BLUE))
    NONTERMINAL = TraceStyle((Back.BLACK, Fore.YELLOW))


@final
class TraceItem(NamedTuple):
    kind: TraceKind
    text: str
