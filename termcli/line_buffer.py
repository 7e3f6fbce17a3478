"""Fixed-capacity editable line with an independent cursor."""

from __future__ import annotations

DEFAULT_MAX_LINE_LENGTH = 128

WHITESPACE = (ord(" "), ord("\t"))


def is_printable(ch: str) -> bool:
    return len(ch) == 1 and 0x20 <= ord(ch) <= 0x7E


class LineBuffer:
    """Printable-ASCII line stored in a preallocated ``bytearray``.

    One of the ``capacity`` slots is reserved for the terminator, so at most
    ``capacity - 1`` characters are ever held. The cursor always stays within
    ``[0, length]``.
    """

    def __init__(self, capacity: int = DEFAULT_MAX_LINE_LENGTH) -> None:
        if capacity < 2:
            raise ValueError("Line buffer capacity must be at least 2")
        self._data = bytearray(capacity)
        self._length = 0
        self._cursor = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def length(self) -> int:
        return self._length

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def remaining(self) -> int:
        return self.capacity - 1 - self._length

    @property
    def is_full(self) -> bool:
        return self._length >= self.capacity - 1

    def __len__(self) -> int:
        return self._length

    def text(self) -> str:
        return self._data[: self._length].decode("ascii")

    def tail(self) -> str:
        """Characters from the cursor to the end of the line."""

        return self._data[self._cursor : self._length].decode("ascii")

    def has_whitespace(self) -> bool:
        return any(byte in WHITESPACE for byte in self._data[: self._length])

    def insert(self, ch: str) -> bool:
        """Insert *ch* at the cursor; returns ``False`` when the line is full."""

        if not is_printable(ch):
            raise ValueError(f"Not a printable character: {ch!r}")
        if self.is_full:
            return False
        pos = self._cursor
        self._data[pos + 1 : self._length + 1] = self._data[pos : self._length]
        self._data[pos] = ord(ch)
        self._cursor += 1
        self._length += 1
        return True

    def delete_before_cursor(self) -> bool:
        if self._cursor == 0:
            return False
        pos = self._cursor
        self._data[pos - 1 : self._length - 1] = self._data[pos : self._length]
        self._length -= 1
        self._cursor -= 1
        self._data[self._length] = 0
        return True

    def move_left(self) -> bool:
        if self._cursor == 0:
            return False
        self._cursor -= 1
        return True

    def move_right(self) -> bool:
        if self._cursor >= self._length:
            return False
        self._cursor += 1
        return True

    def splice(self, at: int, text: str) -> bool:
        """Insert *text* at offset *at* and leave the cursor after it.

        Returns ``False`` without touching the buffer when it would not fit.
        """

        if at < 0 or at > self._length:
            raise IndexError(f"Splice offset {at} outside line of length {self._length}")
        if not all(is_printable(ch) for ch in text):
            raise ValueError(f"Not printable text: {text!r}")
        size = len(text)
        if size > self.remaining:
            return False
        self._data[at + size : self._length + size] = self._data[at : self._length]
        self._data[at : at + size] = text.encode("ascii")
        self._length += size
        self._cursor = at + size
        return True

    def clear(self) -> None:
        self._data[:] = bytes(self.capacity)
        self._length = 0
        self._cursor = 0


__all__ = ["DEFAULT_MAX_LINE_LENGTH", "LineBuffer", "is_printable"]
