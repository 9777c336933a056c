"""Composition of independently supplied subcommand groups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, ItemsView, Iterable

from pachctl.errors import RegistryError, sanitize_error
from pachctl.plugins import CommandContext, CommandGroup, CommandRegistrar, SubparserBuilder, iter_entry_points

RESERVED_COMMANDS = frozenset({"version", "delete-all", "port-forward", "garbage-collect", "migrate"})


@dataclass
class RegisteredCommand:
    name: str
    help: str
    builder: SubparserBuilder


class Registry(CommandRegistrar):
    def __init__(self, context: CommandContext) -> None:
        self._context = context
        self._commands: Dict[str, RegisteredCommand] = {}

    def add_subparser(self, name: str, help_text: str, builder: SubparserBuilder) -> None:
        if name in self._commands or name in RESERVED_COMMANDS:
            raise RegistryError(f"command {name} already registered")
        self._commands[name] = RegisteredCommand(name=name, help=help_text, builder=builder)

    @property
    def context(self) -> CommandContext:
        return self._context

    def items(self) -> ItemsView[str, RegisteredCommand]:
        return self._commands.items()


def discover_groups() -> list[CommandGroup]:
    groups: list[CommandGroup] = []
    for entry_point in iter_entry_points():
        try:
            groups.append(entry_point.load())
        except Exception as exc:
            raise RegistryError(f"unable to load command group {entry_point.name}: {sanitize_error(exc)}") from exc
    return groups


def load_groups(context: CommandContext, groups: Iterable[CommandGroup] | None = None) -> Registry:
    """Register every group or none of them."""

    registry = Registry(context)
    for group in discover_groups() if groups is None else groups:
        register = getattr(group, "register", None)
        if not callable(register):
            continue
        try:
            register(registry, context)
        except RegistryError:
            raise
        except Exception as exc:
            raise RegistryError(sanitize_error(exc)) from exc
    return registry
