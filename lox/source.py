"""Positioned, backtrackable input cursors for the lexer and parser.

Both the character source and the token stream only ever need to look one
item ahead of the current one, and to step back a single item. `Cursor`
keeps exactly those slots (previous, current, next, plus a spill slot that
is filled by `back`) instead of buffering the whole input.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Tuple

Position = Tuple[int, int]

_END = object()    # the wrapped iterator is exhausted
_EMPTY = object()  # slot holds nothing


class Cursor:
    """One-item-lookback, one-item-lookahead cursor over any iterable."""
    def __init__(self, iterable: Iterable[Any]):
        self._iterator: Iterator[Any] = iter(iterable)
        self._previous: Any = _EMPTY
        self._current: Any = self._pull()
        self._next: Any = self._pull()
        self._future: Any = _EMPTY

    def _pull(self) -> Any:
        return next(self._iterator, _END)

    @staticmethod
    def _value(slot: Any) -> Any:
        return None if slot is _END or slot is _EMPTY else slot

    def advance(self) -> Any:
        """Move forward one item and return the raw slot that was current."""
        self._previous = self._current
        self._current = self._next
        if self._future is not _EMPTY:
            self._next = self._future
            self._future = _EMPTY
        else:
            self._next = self._pull()
        return self._previous

    def consume(self) -> Any:
        """Advance and return the consumed item, or None past the end."""
        return self._value(self.advance())

    def back(self) -> None:
        """Undo exactly one advance."""
        if self._previous is _EMPTY:
            raise RuntimeError("exceeded step-back buffer")
        self._future = self._next
        self._next = self._current
        self._current = self._previous
        self._previous = _EMPTY

    def incomplete(self) -> bool:
        return self._current is not _END

    def peek(self) -> Any:
        return self._value(self._current)

    def peek_next(self) -> Any:
        return self._value(self._next)

    def previous(self) -> Any:
        return self._value(self._previous)

    def __iter__(self) -> 'Cursor':
        return self

    def __next__(self) -> Any:
        if not self.incomplete():
            raise StopIteration
        return self.consume()


class CharSource(Cursor):
    """Cursor over source text that tracks the (line, column) of the next char.

    Lines and columns are both counted from zero.
    """
    def __init__(self, text: str):
        super().__init__(text)
        self._position: Position = (0, 0)
        self._previous_position: Position = (0, 0)

    def advance(self) -> Any:
        slot = super().advance()
        self._previous_position = self._position
        if slot is not _END:
            line, column = self._position
            self._position = (line + 1, 0) if slot == '\n' else (line, column + 1)
        return slot

    def back(self) -> None:
        super().back()
        self._position, self._previous_position = self._previous_position, self._position

    def position(self) -> Position:
        return self._position


class TextBuffer:
    """Growable accumulator for the text of the token being scanned."""
    def __init__(self):
        self._chars: List[str] = []

    def push(self, text: str) -> None:
        self._chars.extend(text)

    def __len__(self) -> int:
        return len(self._chars)

    def consume(self) -> str:
        """Return the accumulated text and reset the buffer."""
        text = ''.join(self._chars)
        self._chars.clear()
        return text
