"""Tab completion of the command token against the registry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List

from termcli.line_buffer import LineBuffer
from termcli.registry import CommandEntry, CommandRegistry

if TYPE_CHECKING:
    from termcli.engine import TerminalIO

BELL = "\a"
CRLF = "\r\n"


class CompletionOutcome(Enum):
    BLOCKED = "blocked"
    NO_MATCH = "no_match"
    COMPLETED = "completed"
    EXACT = "exact"
    OVERFLOW = "overflow"
    LISTED = "listed"


@dataclass(frozen=True)
class CompletionMatch:
    entry: CommandEntry
    alias: str


def find_matches(registry: CommandRegistry, prefix: str) -> List[CompletionMatch]:
    """Entries whose long or short name starts with *prefix*.

    Each entry appears at most once; the long name wins when both match.
    """

    matches: List[CompletionMatch] = []
    for entry in registry:
        if entry.name.startswith(prefix):
            matches.append(CompletionMatch(entry, entry.name))
        elif entry.short_name is not None and entry.short_name.startswith(prefix):
            matches.append(CompletionMatch(entry, entry.short_name))
    return matches


def redraw(terminal: "TerminalIO", prompt: str, buffer: LineBuffer) -> None:
    """Print prompt and line, then step back to the logical cursor column."""

    terminal.write(prompt)
    terminal.write(buffer.text())
    terminal.write("\b" * (buffer.length - buffer.cursor))


class CompletionEngine:
    """Single-token completion: the whole line is the prefix."""

    def __init__(self, registry: CommandRegistry) -> None:
        self.registry = registry

    def complete(
        self, buffer: LineBuffer, terminal: "TerminalIO", prompt: str
    ) -> CompletionOutcome:
        if buffer.has_whitespace():
            terminal.write_char(BELL)
            return CompletionOutcome.BLOCKED

        prefix = buffer.text()
        matches = find_matches(self.registry, prefix)

        if not matches:
            terminal.write_char(BELL)
            return CompletionOutcome.NO_MATCH

        if len(matches) == 1:
            full = matches[0].alias
            if len(full) <= len(prefix):
                return CompletionOutcome.EXACT
            suffix = full[len(prefix) :]
            # the completed line may not reach the last usable slot
            if buffer.length + len(suffix) >= buffer.capacity - 1:
                terminal.write_char(BELL)
                return CompletionOutcome.OVERFLOW
            buffer.splice(len(prefix), suffix)
            terminal.write("\r")
            redraw(terminal, prompt, buffer)
            return CompletionOutcome.COMPLETED

        terminal.write(CRLF)
        for match in matches:
            line = "  " + match.entry.name
            if match.entry.short_name is not None:
                line += f" ({match.entry.short_name})"
            terminal.write(line + CRLF)
        redraw(terminal, prompt, buffer)
        return CompletionOutcome.LISTED


__all__ = [
    "BELL",
    "CompletionEngine",
    "CompletionMatch",
    "CompletionOutcome",
    "find_matches",
    "redraw",
]
