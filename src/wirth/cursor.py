from typing import final


@final
class Cursor:
    """
    Sequential reader over the rule text.  Lookahead is limited to a single
    character, obtained by calling `read()` followed by `undo()`.
    """

    __slots__ = ("_text", "_len", "_pos")

    def __init__(self, text: str = ""):
        self._text: str = text
        self._len: int = len(text)
        self._pos: int = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def pos(self) -> int:
        return self._pos

    def finished(self) -> bool:
        return self._pos >= self._len

    def read(self) -> str | None:
        if self.finished():
            return None
        self._pos += 1
        return self._text[self._pos - 1]

    def undo(self) -> None:
        if self._pos > 0:
            self._pos -= 1
