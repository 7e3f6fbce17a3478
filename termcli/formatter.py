"""Minimal printf-style formatter that streams one character at a time."""

from __future__ import annotations

from typing import Any, Callable, List

_UINT_MASK = 0xFFFFFFFF


class FormatArgumentError(ValueError):
    """Raised when a format string consumes more arguments than were given."""


def _digits(value: int, base: int) -> str:
    out: List[str] = []
    while True:
        value, digit = divmod(value, base)
        out.append("0123456789abcdef"[digit])
        if value == 0:
            break
    return "".join(reversed(out))


def _emit(write_char: Callable[[str], Any], text: str) -> None:
    for ch in text:
        write_char(ch)


def format_to(write_char: Callable[[str], Any], fmt: str, *args: Any) -> None:
    """Render *fmt* through *write_char*.

    Supports ``%d %u %x %s %c %%``. Unknown specifiers are echoed as-is.
    Output already written stays written if a later specifier fails.
    """

    remaining = iter(args)

    def next_arg(spec: str) -> Any:
        try:
            return next(remaining)
        except StopIteration:
            raise FormatArgumentError(f"Missing argument for %{spec}") from None

    index = 0
    size = len(fmt)
    while index < size:
        ch = fmt[index]
        index += 1
        if ch != "%":
            write_char(ch)
            continue
        if index >= size:
            write_char("%")
            break
        spec = fmt[index]
        index += 1
        if spec == "d":
            value = int(next_arg(spec))
            if value < 0:
                write_char("-")
                value = -value
            _emit(write_char, _digits(value, 10))
        elif spec == "u":
            _emit(write_char, _digits(int(next_arg(spec)) & _UINT_MASK, 10))
        elif spec == "x":
            _emit(write_char, _digits(int(next_arg(spec)) & _UINT_MASK, 16))
        elif spec == "s":
            value = next_arg(spec)
            _emit(write_char, "(null)" if value is None else str(value))
        elif spec == "c":
            value = next_arg(spec)
            write_char(chr(value & 0xFF) if isinstance(value, int) else str(value)[:1])
        elif spec == "%":
            write_char("%")
        else:
            write_char("%")
            write_char(spec)


def format_string(fmt: str, *args: Any) -> str:
    out: List[str] = []
    format_to(out.append, fmt, *args)
    return "".join(out)


__all__ = ["FormatArgumentError", "format_string", "format_to"]
