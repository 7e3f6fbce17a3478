#!/usr/bin/env python3
"""POSIX host for the console: raw terminal I/O and the polling loop."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import select
import signal
import sys
import termios
import time
from typing import Any, List, Optional, Sequence

from termcli.config import EngineConfig
from termcli.demo_commands import register_demo_commands
from termcli.engine import PromptSession, init


class RawTerminal:
    """Character-at-a-time terminal on a pair of file descriptors.

    Entering the context switches the input to non-canonical mode without
    echo and with ``VMIN``/``VTIME`` at zero; leaving restores the saved
    attributes. Input that is not a terminal is used as-is.
    """

    def __init__(self, in_fd: Optional[int] = None, out_fd: Optional[int] = None) -> None:
        self.in_fd = sys.stdin.fileno() if in_fd is None else in_fd
        self.out_fd = sys.stdout.fileno() if out_fd is None else out_fd
        self._saved: Optional[List[Any]] = None

    @property
    def is_raw(self) -> bool:
        return self._saved is not None

    def __enter__(self) -> "RawTerminal":
        self.enable_raw_mode()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.restore()

    def enable_raw_mode(self) -> None:
        try:
            saved = termios.tcgetattr(self.in_fd)
        except termios.error:
            return
        attrs = termios.tcgetattr(self.in_fd)
        attrs[3] &= ~(termios.ICANON | termios.ECHO)
        attrs[6][termios.VMIN] = 0
        attrs[6][termios.VTIME] = 0
        termios.tcsetattr(self.in_fd, termios.TCSANOW, attrs)
        self._saved = saved

    def restore(self) -> None:
        if self._saved is None:
            return
        termios.tcsetattr(self.in_fd, termios.TCSANOW, self._saved)
        self._saved = None

    def read_char(self) -> Optional[str]:
        ready, _, _ = select.select([self.in_fd], [], [], 0)
        if not ready:
            return None
        data = os.read(self.in_fd, 1)
        if not data:
            raise EOFError("Terminal input closed")
        return data.decode("latin-1")

    def write_char(self, ch: str) -> None:
        self.write(ch)

    def write(self, text: str) -> None:
        if text:
            os.write(self.out_fd, text.encode("ascii", errors="replace"))


def run(session: PromptSession, poll_interval: float) -> None:
    """Poll the session until its input reaches end of file."""

    while True:
        try:
            busy = session.tick()
        except EOFError:
            session.logger.info("Input closed, leaving console loop")
            return
        if not busy and poll_interval:
            time.sleep(poll_interval)


def _handle_signal(signum: int, _frame: Any) -> None:
    raise SystemExit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termcli", add_help=True)
    parser.add_argument("--prompt", help="Prompt text shown before each line")
    parser.add_argument("--max-line-length", type=int, help="Line buffer capacity, terminator slot included")
    parser.add_argument("--max-commands", type=int, help="Command table capacity")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging threshold",
    )
    parser.add_argument("--log-file", metavar="PATH", help="Write log records to PATH instead of stderr")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args_list = list(sys.argv[1:] if argv is None else argv)
    parsed = build_parser().parse_args(args_list)

    logging.basicConfig(
        level=getattr(logging, parsed.log_level),
        format="[%(asctime)s] %(levelname)s: %(message)s",
        filename=parsed.log_file,
    )

    config = EngineConfig.from_env()
    if parsed.prompt:
        config.prompt = parsed.prompt
    try:
        if parsed.max_line_length is not None:
            config = dataclasses.replace(config, max_line_length=parsed.max_line_length)
        if parsed.max_commands is not None:
            config = dataclasses.replace(config, max_commands=parsed.max_commands)
    except ValueError as exc:
        print(f"termcli: {exc}", file=sys.stderr)
        return 2

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    with RawTerminal() as terminal:
        session = init(terminal, config)
        register_demo_commands(session)
        run(session, config.poll_interval)
        terminal.write("\r\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
