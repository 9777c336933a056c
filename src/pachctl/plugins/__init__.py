"""Subcommand group contracts for pachctl."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata
from typing import Callable, Iterable, Protocol

from pachctl.settings import RuntimeSettings

ENTRY_POINT_GROUP = "pachctl.commands"


@dataclass(frozen=True)
class CommandContext:
    address: str
    settings: RuntimeSettings


class SubparserBuilder(Protocol):  # pragma: no cover
    def __call__(self, parser, context: CommandContext) -> Callable[[object], int]:
        ...


class CommandRegistrar(Protocol):  # pragma: no cover
    def add_subparser(self, name: str, help_text: str, builder: SubparserBuilder) -> None:
        ...


class CommandGroup(Protocol):  # pragma: no cover
    name: str

    def register(self, registrar: CommandRegistrar, context: CommandContext) -> None:
        ...


def iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=ENTRY_POINT_GROUP)
