from __future__ import annotations

from typing import List, Optional, Sequence

import pytest

from termcli.config import EngineConfig
from termcli.engine import CaptureTerminal, InputState, PromptSession, init
from termcli.registry import CommandEntry


class _Recorder:
    def __init__(self, status: int = 0) -> None:
        self.calls: List[List[str]] = []
        self.status = status

    def __call__(self, session: PromptSession, argv: Sequence[str]) -> int:
        self.calls.append(list(argv))
        return self.status


def _boom(session: PromptSession, argv: Sequence[str]) -> int:
    raise RuntimeError("handler failure")


def _session(config: Optional[EngineConfig] = None):
    terminal = CaptureTerminal()
    session = init(terminal, config)
    return session, terminal


def test_init_shows_prompt() -> None:
    session, terminal = _session()
    assert terminal.output == "CLI> "
    assert session.state is InputState.NORMAL


def test_quoted_arguments_reach_handler() -> None:
    session, terminal = _session()
    echo = _Recorder()
    session.register(CommandEntry(name="echo", handler=echo, short_name="e"))

    session.feed('echo "a b" c\r')

    assert echo.calls == [["echo", "a b", "c"]]
    assert "Unknown command" not in terminal.output
    assert session.line == ""
    assert session.cursor == 0


def test_short_name_dispatches() -> None:
    session, terminal = _session()
    echo = _Recorder()
    session.register(CommandEntry(name="echo", handler=echo, short_name="e"))

    session.feed("e hi\n")
    assert echo.calls == [["e", "hi"]]


def test_unknown_command_is_reported() -> None:
    session, terminal = _session()
    session.feed("foo")
    terminal.take_output()

    session.feed_char("\r")
    assert terminal.output == "\r\nUnknown command: foo\r\nCLI> "


def test_empty_line_only_reprompts() -> None:
    session, terminal = _session()
    terminal.take_output()
    session.feed("   \r")
    assert terminal.take_output() == "   \r\nCLI> "


@pytest.mark.parametrize("handler", [_Recorder(status=3), _boom])
def test_failing_handler_is_reported_and_engine_survives(handler) -> None:
    session, terminal = _session()
    session.register(CommandEntry(name="fail", handler=handler))
    ok = _Recorder()
    session.register(CommandEntry(name="ok", handler=ok))

    session.feed("fail now\r")
    assert "Command returned error\r\nCLI> " in terminal.take_output()
    assert session.line == ""

    session.feed("ok\r")
    assert ok.calls == [["ok"]]
    assert "Command returned error" not in terminal.output


def test_argument_count_is_capped() -> None:
    session, terminal = _session(EngineConfig(max_args=3))
    recorder = _Recorder()
    session.register(CommandEntry(name="cmd", handler=recorder))

    session.feed("cmd a b c d\r")
    assert recorder.calls == [["cmd", "a", "b"]]


def test_overflowing_character_is_dropped_silently() -> None:
    session, terminal = _session(EngineConfig(max_line_length=8))
    session.feed("a" * 7)
    terminal.take_output()

    session.feed_char("b")
    assert session.line == "aaaaaaa"
    assert session.buffer.length == 7
    assert terminal.output == ""


def test_insert_in_middle_redraws_tail() -> None:
    session, terminal = _session()
    session.feed("ac\x1b[D")
    terminal.take_output()

    session.feed_char("b")
    assert session.line == "abc"
    assert session.cursor == 2
    assert terminal.output == "bc\b"


def test_backspace_in_middle_redraws_tail() -> None:
    session, terminal = _session()
    session.feed("abc\x1b[D")
    terminal.take_output()

    session.feed_char("\x7f")
    assert session.line == "ac"
    assert session.cursor == 1
    assert terminal.output == "\b \bc\b"


def test_backspace_at_line_end_and_start() -> None:
    session, terminal = _session()
    session.feed("ab")
    terminal.take_output()

    session.feed_char("\b")
    assert terminal.take_output() == "\b \b"
    session.feed("\b\b")
    assert terminal.take_output() == "\b \b"
    assert session.line == ""
    assert session.cursor == 0


def test_arrow_keys_move_cursor_and_echo_controls() -> None:
    session, terminal = _session()
    session.feed("ab")
    terminal.take_output()

    session.feed("\x1b[C")
    assert terminal.take_output() == ""
    session.feed("\x1b[D")
    assert terminal.take_output() == "\x1b[D"
    assert session.cursor == 1
    session.feed("\x1b[C")
    assert terminal.take_output() == "\x1b[C"
    assert session.cursor == 2


@pytest.mark.parametrize("sequence", ["\x1b[A", "\x1b[B", "\x1b[Z", "\x1bx"])
def test_other_escape_sequences_are_swallowed(sequence: str) -> None:
    session, terminal = _session()
    session.feed("ab")
    terminal.take_output()

    session.feed(sequence)
    assert session.state is InputState.NORMAL
    assert session.line == "ab"
    assert terminal.output == ""

    session.feed_char("c")
    assert session.line == "abc"


def test_escape_state_carries_across_characters() -> None:
    session, terminal = _session()
    session.feed_char("\x1b")
    assert session.state is InputState.ESC
    session.feed_char("[")
    assert session.state is InputState.CSI
    session.feed_char("A")
    assert session.state is InputState.NORMAL


def test_control_characters_are_ignored() -> None:
    session, terminal = _session()
    terminal.take_output()
    session.feed("\x01\x02\x80")
    assert session.line == ""
    assert terminal.output == ""


def test_tick_reads_at_most_one_character() -> None:
    terminal = CaptureTerminal("v\r")
    session = PromptSession(terminal)
    version = _Recorder()
    session.register(CommandEntry(name="v", handler=version))

    assert session.tick() is True
    assert session.line == "v"
    assert version.calls == []
    assert session.tick() is True
    assert version.calls == [["v"]]
    assert session.tick() is False


def test_feed_char_accepts_byte_values() -> None:
    session, terminal = _session()
    session.feed([0x68, 0x69])
    assert session.line == "hi"


def test_handler_can_write_through_session() -> None:
    session, terminal = _session()

    def greet(session: PromptSession, argv: Sequence[str]) -> int:
        session.printf("hello %s%c", argv[1], "!")
        session.newline()
        return 0

    session.register(CommandEntry(name="greet", handler=greet))
    terminal.take_output()
    session.feed("greet bob\r")
    assert terminal.output == "greet bob\r\nhello bob!\r\nCLI> "


def test_custom_prompt() -> None:
    session, terminal = _session(EngineConfig(prompt="> "))
    session.feed("\r")
    assert terminal.output == "> \r\n> "


@pytest.mark.parametrize("value", [0x10D, -1, 256])
def test_feed_char_rejects_values_outside_byte_range(value: int) -> None:
    session, terminal = _session()
    recorder = _Recorder()
    session.register(CommandEntry(name="ls", handler=recorder))
    session.feed("ls")

    with pytest.raises(ValueError):
        session.feed_char(value)
    assert recorder.calls == []
    assert session.line == "ls"
