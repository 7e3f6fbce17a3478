"""Prompt session: escape-sequence state machine, line editing and dispatch."""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Union

from termcli.completion import CRLF, CompletionEngine, CompletionOutcome
from termcli.config import EngineConfig
from termcli.formatter import format_to
from termcli.line_buffer import LineBuffer, is_printable
from termcli.registry import (
    CommandEntry,
    CommandRegistrationError,
    CommandRegistry,
    RegistrationStatus,
)
from termcli.tokenizer import split_line

ESC = "\x1b"
DEL = "\x7f"
CURSOR_RIGHT = ESC + "[C"
CURSOR_LEFT = ESC + "[D"


# ---------------------------------------------------------------------------
# Terminal capability
# ---------------------------------------------------------------------------


class TerminalIO(Protocol):
    def read_char(self) -> Optional[str]:
        """Return one pending character, or ``None`` without blocking."""

    def write_char(self, ch: str) -> None: ...

    def write(self, text: str) -> None: ...


class CaptureTerminal:
    """In-memory terminal: queued input and recorded output."""

    def __init__(self, pending: str = "") -> None:
        self._pending: deque[str] = deque(pending)
        self.chunks: List[str] = []

    def push(self, text: str) -> None:
        self._pending.extend(text)

    def read_char(self) -> Optional[str]:
        if not self._pending:
            return None
        return self._pending.popleft()

    def write_char(self, ch: str) -> None:
        self.chunks.append(ch)

    def write(self, text: str) -> None:
        self.chunks.append(text)

    @property
    def output(self) -> str:
        return "".join(self.chunks)

    def take_output(self) -> str:
        text = self.output
        self.chunks.clear()
        return text


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class InputState(Enum):
    NORMAL = "normal"
    ESC = "esc"
    CSI = "csi"


class PromptSession:
    """One interactive console bound to a terminal and a command registry."""

    def __init__(
        self,
        terminal: TerminalIO,
        config: Optional[EngineConfig] = None,
        registry: Optional[CommandRegistry] = None,
    ) -> None:
        self.terminal = terminal
        self.config = config or EngineConfig()
        if registry is None:
            registry = CommandRegistry(self.config.max_commands)
        self.registry = registry
        self.buffer = LineBuffer(self.config.max_line_length)
        self.completion = CompletionEngine(self.registry)
        self.state = InputState.NORMAL
        self.logger = logging.getLogger("termcli.session")

    @property
    def prompt(self) -> str:
        return self.config.prompt

    @property
    def line(self) -> str:
        return self.buffer.text()

    @property
    def cursor(self) -> int:
        return self.buffer.cursor

    def start(self) -> None:
        self.puts(self.prompt)

    # -------------------- registry helpers --------------------
    def register(self, entry: CommandEntry) -> None:
        self.registry.register(entry)

    def try_register(self, entry: CommandEntry) -> RegistrationStatus:
        """Register *entry*, returning a status code instead of raising."""

        try:
            self.registry.register(entry)
        except CommandRegistrationError as exc:
            self.logger.warning("Command registration rejected: %s", exc)
            return exc.status
        return RegistrationStatus.SUCCESS

    def command_count(self) -> int:
        return self.registry.count()

    def command_at(self, index: int) -> Optional[CommandEntry]:
        return self.registry.by_index(index)

    # -------------------- output helpers ----------------------
    def putchar(self, ch: str) -> None:
        self.terminal.write_char(ch)

    def puts(self, text: str) -> None:
        self.terminal.write(text)

    def printf(self, fmt: str, *args: Any) -> None:
        format_to(self.terminal.write_char, fmt, *args)

    def newline(self) -> None:
        self.puts(CRLF)

    # -------------------- input -------------------------------
    def tick(self) -> bool:
        """Poll the terminal once; returns ``True`` if a character was handled."""

        ch = self.terminal.read_char()
        if ch is None:
            return False
        self.feed_char(ch)
        return True

    def feed(self, text: Iterable[Union[str, int]]) -> None:
        for ch in text:
            self.feed_char(ch)

    def feed_char(self, ch: Union[str, int]) -> None:
        if isinstance(ch, int):
            if not 0 <= ch <= 0xFF:
                raise ValueError(f"Byte value out of range: {ch}")
            ch = chr(ch)

        if self.state is InputState.ESC:
            self.state = InputState.CSI if ch == "[" else InputState.NORMAL
            return
        if self.state is InputState.CSI:
            self._handle_csi(ch)
            self.state = InputState.NORMAL
            return

        if ch in ("\r", "\n"):
            self.newline()
            self.execute()
            self.puts(self.prompt)
        elif ch in ("\b", DEL):
            self._backspace()
        elif ch == "\t":
            self.complete()
        elif ch == ESC:
            self.state = InputState.ESC
        elif is_printable(ch):
            self._insert(ch)

    def _handle_csi(self, final: str) -> None:
        # A and B are reserved for history, which is not kept.
        if final == "C":
            if self.buffer.move_right():
                self.puts(CURSOR_RIGHT)
        elif final == "D":
            if self.buffer.move_left():
                self.puts(CURSOR_LEFT)

    # -------------------- editing -----------------------------
    def _redraw_tail(self) -> None:
        tail = self.buffer.tail()
        if tail:
            self.puts(tail)
            self.puts("\b" * len(tail))

    def _insert(self, ch: str) -> None:
        if not self.buffer.insert(ch):
            return
        self.putchar(ch)
        self._redraw_tail()

    def _backspace(self) -> None:
        if not self.buffer.delete_before_cursor():
            return
        self.puts("\b \b")
        self._redraw_tail()

    def complete(self) -> CompletionOutcome:
        return self.completion.complete(self.buffer, self.terminal, self.prompt)

    # -------------------- execution ---------------------------
    def execute(self) -> None:
        """Run the buffered line and clear the buffer, whatever the outcome."""

        try:
            self.run_line(self.buffer.text())
        finally:
            self.buffer.clear()

    def run_line(self, line: str) -> Optional[int]:
        argv = split_line(line, self.config.max_args)
        if not argv:
            return None
        entry = self.registry.find_by_token(argv[0])
        if entry is None:
            self.logger.info("Unknown command: %s", argv[0])
            self.puts("Unknown command: " + argv[0])
            self.newline()
            return None
        status = self._invoke(entry, argv)
        if status:
            self.puts("Command returned error" + CRLF)
        return status

    def _invoke(self, entry: CommandEntry, argv: Sequence[str]) -> int:
        self.logger.debug("Dispatching %s with %d argument(s)", entry.name, len(argv))
        try:
            result = entry.handler(self, argv)
        except Exception:
            self.logger.exception("Command %s raised", entry.name)
            return 1
        if result:
            self.logger.info("Command %s returned %s", entry.name, result)
            return result if isinstance(result, int) else 1
        return 0


def init(terminal: TerminalIO, config: Optional[EngineConfig] = None) -> PromptSession:
    """Create a session on *terminal* and show the first prompt."""

    session = PromptSession(terminal, config)
    session.start()
    return session


__all__ = [
    "CaptureTerminal",
    "InputState",
    "PromptSession",
    "TerminalIO",
    "init",
]
