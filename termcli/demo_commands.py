"""Sample command set for the demo console."""

from __future__ import annotations

from typing import List, Sequence

from termcli.engine import PromptSession
from termcli.registry import RegistrationStatus, collect_commands, command, register_all

VERSION_TEXT = "CLI Framework version 1.0"
CLEAR_SCREEN = "\x1b[2J\x1b[H"


@command(name="help", short_name="h", help="Show this help message")
def help_command(session: PromptSession, argv: Sequence[str]) -> int:
    session.puts("\r\nAvailable commands:\r\n")
    for index in range(session.command_count()):
        entry = session.command_at(index)
        if entry is None:
            continue
        line = "  " + entry.name
        if entry.short_name is not None:
            line += f" ({entry.short_name})"
        line += " - " + (entry.help or "")
        session.puts(line + "\r\n")
    return 0


@command(name="echo", short_name="e", help="Echo the arguments")
def echo_command(session: PromptSession, argv: Sequence[str]) -> int:
    session.puts(" ".join(argv[1:]))
    session.newline()
    return 0


@command(name="clear", short_name="c", help="Clear the screen")
def clear_command(session: PromptSession, argv: Sequence[str]) -> int:
    session.puts(CLEAR_SCREEN)
    return 0


@command(name="version", short_name="v", help="Show version information")
def version_command(session: PromptSession, argv: Sequence[str]) -> int:
    session.puts(VERSION_TEXT)
    session.newline()
    return 0


@command(name="led", short_name="l", help="Control and change the state of an LED light")
def led_command(session: PromptSession, argv: Sequence[str]) -> int:
    if len(argv) > 2:
        session.printf("LED %s %s\r\n", argv[1], argv[2])
    else:
        session.puts("Incomplete parameter.\r\n")
    return 0


def register_demo_commands(session: PromptSession) -> List[RegistrationStatus]:
    return register_all(session, collect_commands(globals()))


__all__ = ["register_demo_commands"]
