"""Split a finished command line into an argument vector."""

from __future__ import annotations

from typing import List

DEFAULT_MAX_ARGS = 16

_SEPARATORS = " \t"


def split_line(line: str, max_args: int = DEFAULT_MAX_ARGS) -> List[str]:
    """Return at most *max_args* tokens from *line*.

    Tokens are separated by spaces or tabs. A token that opens with ``"``
    runs to the next unescaped ``"`` (or the end of the line when the quote
    is never closed); inside it ``\\"`` stands for a literal quote. Tokens
    past *max_args* are dropped.
    """

    argv: List[str] = []
    pos = 0
    end = len(line)
    while pos < end and len(argv) < max_args:
        while pos < end and line[pos] in _SEPARATORS:
            pos += 1
        if pos >= end:
            break

        if line[pos] == '"':
            pos += 1
            chars: List[str] = []
            while pos < end and line[pos] != '"':
                if line[pos] == "\\" and pos + 1 < end and line[pos + 1] == '"':
                    pos += 1
                chars.append(line[pos])
                pos += 1
            pos += 1  # closing quote, if any
            argv.append("".join(chars))
        else:
            start = pos
            while pos < end and line[pos] not in _SEPARATORS:
                pos += 1
            argv.append(line[start:pos])
    return argv


__all__ = ["DEFAULT_MAX_ARGS", "split_line"]
