from __future__ import annotations

import argparse

import pytest

from pachctl.cli import main as cli_main
from pachctl.errors import RegistryError
from pachctl.plugins import CommandContext
from pachctl.plugins.loader import load_groups
from pachctl.settings import RuntimeSettings


class InspectGroup:
    name = "pfs"

    def __init__(self) -> None:
        self.seen: list[argparse.Namespace] = []

    def register(self, registrar, context: CommandContext) -> None:
        def builder(parser: argparse.ArgumentParser, ctx: CommandContext):
            parser.add_argument("repo")

            def handler(args: argparse.Namespace) -> int:
                self.seen.append(args)
                return 0

            return handler

        registrar.add_subparser("inspect-repo", "Inspect a repo", builder)


class BrokenGroup:
    name = "pps"

    def register(self, registrar, context: CommandContext) -> None:
        raise RuntimeError("pipeline spec schema unavailable")


class ClashingGroup:
    name = "deploy"

    def register(self, registrar, context: CommandContext) -> None:
        registrar.add_subparser("migrate", "Shadow migrate", lambda parser, ctx: (lambda args: 0))


def test_groups_join_local_commands(runtime_settings: RuntimeSettings) -> None:
    group = InspectGroup()
    parser = cli_main.build_parser("pachd:650", settings=runtime_settings, groups=[group])
    args = parser.parse_args(["inspect-repo", "images"])
    assert args.func(args) == 0
    assert group.seen[0].repo == "images"
    assert group.seen[0].address == "pachd:650"
    for local in ("version", "delete-all", "port-forward", "garbage-collect", "migrate"):
        assert parser.parse_args([local]).command == local


def test_failing_group_aborts_composition(runtime_settings: RuntimeSettings) -> None:
    with pytest.raises(RegistryError) as excinfo:
        cli_main.build_parser("pachd:650", settings=runtime_settings, groups=[InspectGroup(), BrokenGroup()])
    assert str(excinfo.value) == "pipeline spec schema unavailable"


def test_local_command_names_are_reserved(runtime_settings: RuntimeSettings) -> None:
    context = CommandContext(address="pachd:650", settings=runtime_settings)
    with pytest.raises(RegistryError):
        load_groups(context, [ClashingGroup()])


def test_entry_point_groups(monkeypatch: pytest.MonkeyPatch, runtime_settings: RuntimeSettings) -> None:
    class EntryPoint:
        name = "pfs"

        def load(self):
            return InspectGroup()

    monkeypatch.setattr("pachctl.plugins.loader.iter_entry_points", lambda: [EntryPoint()])
    registry = load_groups(CommandContext(address="pachd:650", settings=runtime_settings))
    assert "inspect-repo" in dict(registry.items())


def test_main_reports_broken_group(monkeypatch: pytest.MonkeyPatch, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    class EntryPoint:
        name = "pps"

        def load(self):
            return BrokenGroup()

    monkeypatch.setattr(cli_main, "SETTINGS", runtime_settings)
    monkeypatch.setattr("pachctl.plugins.loader.iter_entry_points", lambda: [EntryPoint()])
    assert cli_main.main(["version"]) == 1
    assert "pipeline spec schema unavailable" in capsys.readouterr().err
