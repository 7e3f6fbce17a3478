"""Fixed-capacity command table with long and short command names."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
)

if TYPE_CHECKING:
    from termcli.engine import PromptSession

DEFAULT_MAX_COMMANDS = 16


class CommandHandler(Protocol):
    """Entry point implemented by every registered command.

    ``argv[0]`` is the token the command was invoked with. A return value of
    ``0`` (or ``None``) means success; anything else is reported as a failure.
    """

    def __call__(self, session: "PromptSession", argv: Sequence[str]) -> Optional[int]: ...


class RegistrationStatus(IntEnum):
    SUCCESS = 0
    INVALID_PARAM = -1
    TABLE_FULL = -2
    DUPLICATE = -3


class CommandRegistrationError(RuntimeError):
    """Raised when a command cannot be added to the registry."""

    status = RegistrationStatus.INVALID_PARAM


class InvalidCommandError(CommandRegistrationError):
    """Raised when a command lacks a name or a handler."""

    status = RegistrationStatus.INVALID_PARAM


class CommandTableFullError(CommandRegistrationError):
    """Raised when the registry has no free slot left."""

    status = RegistrationStatus.TABLE_FULL


class DuplicateCommandError(CommandRegistrationError):
    """Raised when a long or short name is already taken."""

    status = RegistrationStatus.DUPLICATE


@dataclass(frozen=True)
class CommandEntry:
    name: str
    handler: CommandHandler
    short_name: Optional[str] = None
    help: Optional[str] = None

    def aliases(self) -> Iterator[str]:
        yield self.name
        if self.short_name:
            yield self.short_name

    def matches(self, token: str) -> bool:
        return token == self.name or (self.short_name is not None and token == self.short_name)


class CommandRegistry:
    """Insertion-ordered, append-only command table."""

    def __init__(self, capacity: int = DEFAULT_MAX_COMMANDS) -> None:
        if capacity <= 0:
            raise ValueError("Registry capacity must be positive")
        self._capacity = capacity
        self._entries: List[CommandEntry] = []
        self.logger = logging.getLogger("termcli.registry")

    @property
    def capacity(self) -> int:
        return self._capacity

    def register(self, entry: CommandEntry) -> None:
        """Append *entry*, raising a :class:`CommandRegistrationError` on failure."""

        if entry is None or not entry.name or entry.handler is None:
            raise InvalidCommandError("Command requires a name and a handler")
        if not callable(entry.handler):
            raise InvalidCommandError(f"Handler for {entry.name!r} is not callable")
        if entry.short_name == "":
            raise InvalidCommandError(f"Short name for {entry.name!r} must not be empty")
        if len(self._entries) >= self._capacity:
            raise CommandTableFullError(
                f"Command table is full ({self._capacity} entries)"
            )
        for alias in set(entry.aliases()):
            clash = self.find_by_token(alias)
            if clash is not None:
                raise DuplicateCommandError(
                    f"Command name {alias!r} is already used by {clash.name!r}"
                )
        self._entries.append(entry)
        self.logger.debug("Registered command %s (%s)", entry.name, entry.short_name or "-")

    def count(self) -> int:
        return len(self._entries)

    def by_index(self, index: int) -> Optional[CommandEntry]:
        if index < 0 or index >= len(self._entries):
            return None
        return self._entries[index]

    def find_by_token(self, token: str) -> Optional[CommandEntry]:
        for entry in self._entries:
            if entry.matches(token):
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(list(self._entries))


# ---------------------------------------------------------------------------
# Decorator based definitions
# ---------------------------------------------------------------------------


def command(
    name: str,
    help: Optional[str] = None,
    short_name: Optional[str] = None,
) -> Callable[[CommandHandler], CommandHandler]:
    """Attach a :class:`CommandEntry` to the decorated handler."""

    def decorator(func: CommandHandler) -> CommandHandler:
        func.__command_definition__ = CommandEntry(  # type: ignore[attr-defined]
            name=name,
            handler=func,
            short_name=short_name,
            help=help,
        )
        return func

    return decorator


def collect_commands(namespace: Mapping[str, Any]) -> List[CommandEntry]:
    """Return the command definitions found in *namespace*, in definition order."""

    return [
        obj.__command_definition__
        for obj in namespace.values()
        if callable(obj) and hasattr(obj, "__command_definition__")
    ]


def register_all(target: Any, entries: Iterable[CommandEntry]) -> List[RegistrationStatus]:
    """Register *entries* on a registry or session, collecting per-entry status."""

    statuses: List[RegistrationStatus] = []
    for entry in entries:
        try:
            target.register(entry)
        except CommandRegistrationError as exc:
            logging.getLogger("termcli.registry").warning(
                "Failed to register %s: %s", entry.name, exc
            )
            statuses.append(exc.status)
        else:
            statuses.append(RegistrationStatus.SUCCESS)
    return statuses


__all__ = [
    "DEFAULT_MAX_COMMANDS",
    "CommandEntry",
    "CommandHandler",
    "CommandRegistrationError",
    "CommandRegistry",
    "CommandTableFullError",
    "DuplicateCommandError",
    "InvalidCommandError",
    "RegistrationStatus",
    "collect_commands",
    "command",
    "register_all",
]
