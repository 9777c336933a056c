#!/usr/bin/env python3
"""Entry point for the pachctl CLI."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from textwrap import dedent
from typing import Iterable

import grpc

from pachctl import __version__
from pachctl.adapters.grpc_client import GrpcClusterAdmin, GrpcVersionSource
from pachctl.adapters.kubectl import KubectlForwarder
from pachctl.adapters.stream_confirmer import StreamConfirmer
from pachctl.adapters.subprocess_runner import SubprocessRunner
from pachctl.app.guard import DELETE_ALL_PROMPT, confirm_and_run
from pachctl.app.migration import MigrationDispatcher
from pachctl.app.portforward import (
    DEFAULT_PORT,
    DEFAULT_PROXY_PORT,
    DEFAULT_UI_PORT,
    PortForwardSupervisor,
    default_forward_tasks,
    forward_banner,
)
from pachctl.app.version import VersionService
from pachctl.domain.version import Version
from pachctl.errors import ConnectivityError, PachctlError, RegistryError, sanitize_error
from pachctl.logging_setup import LogConfig, setup_logging
from pachctl.plugins import CommandContext, CommandGroup
from pachctl.plugins.loader import load_groups
from pachctl.ports.cluster import ClusterAdmin, VersionSource
from pachctl.ports.confirm import Confirmer
from pachctl.ports.process import ProcessRunner
from pachctl.settings import SETTINGS, RuntimeSettings
from pachctl.utils.telemetry import track_command

LOGGER = logging.getLogger("pachctl.cli")

HELP_OVERVIEW = dedent(
    """
    Access the Pachyderm API.

    Environment variables:
      ADDRESS=<host>:<port>, the pachd server to connect to (e.g. 127.0.0.1:30650).
      PACHCTL_HOME=<dir>, where pachctl keeps its local state (default: ~/.pachctl).
      PACHCTL_METRICS=0, disable usage events (same as --no-metrics).
    """
)

GARBAGE_COLLECT_HELP = dedent(
    """
    Garbage collect unused data.

    When a file/commit/repo is deleted, the data is not immediately removed from
    the underlying storage system (e.g. S3). To actually remove the data, invoke
    garbage collection. It can only be started when there are no active jobs
    running and no ongoing "put-file"; the cluster is read-only while it runs.
    """
)

MIGRATE_HELP = dedent(
    """
    Migrate the internal state of Pachyderm from one version to another.
    Most updates don't require a migration; refer to the docs for your version.
    Only run migrations when there is no activity in the cluster.

    If --from is not provided, pachctl discovers the current version of the
    cluster. If --to is not provided, pachctl uses its own version.

    Example:

      # Migrate Pachyderm from 1.4.8 to 1.5.0
      $ pachctl migrate --from 1.4.8 --to 1.5.0
    """
)


def _client_version() -> Version:
    return Version.parse(__version__)


def _log_config(args: argparse.Namespace) -> LogConfig:
    return getattr(args, "log_config", None) or LogConfig(verbose=getattr(args, "verbose", False))


def _version_source(args: argparse.Namespace) -> VersionSource:
    return GrpcVersionSource(args.address, _log_config(args))


def _cluster_admin(args: argparse.Namespace) -> ClusterAdmin:
    return GrpcClusterAdmin(args.address, _log_config(args))


def _process_runner() -> ProcessRunner:
    return SubprocessRunner()


def _confirmer() -> Confirmer:
    return StreamConfirmer(sys.stdin, sys.stdout)


_CONNECTIVITY_CODES = (grpc.StatusCode.UNAVAILABLE, grpc.StatusCode.DEADLINE_EXCEEDED)


def _cluster_error(args: argparse.Namespace, exc: grpc.RpcError) -> PachctlError:
    code = getattr(exc, "code", None)
    if callable(code) and code() in _CONNECTIVITY_CODES:
        return ConnectivityError(
            f"error connecting to pachd server at address ({args.address}): {sanitize_error(exc)}",
            address=args.address,
        )
    return PachctlError(sanitize_error(exc))


def _global_flags(*, suppress: bool) -> argparse.ArgumentParser:
    flags = argparse.ArgumentParser(add_help=False)
    default = argparse.SUPPRESS if suppress else False
    flags.add_argument("-v", "--verbose", action="store_true", default=default, help="Output verbose logs")
    flags.add_argument(
        "--no-metrics",
        action="store_true",
        default=default,
        help="Don't report user metrics for this command",
    )
    return flags


def _version_cmd(args: argparse.Namespace) -> int:
    service = VersionService(_version_source(args), _client_version(), args.address)
    service.report(sys.stdout)
    return 0


def _delete_all_cmd(args: argparse.Namespace) -> int:
    admin = _cluster_admin(args)

    def _delete() -> None:
        try:
            admin.delete_all()
        except grpc.RpcError as exc:
            raise _cluster_error(args, exc) from exc

    confirm_and_run(_confirmer(), DELETE_ALL_PROMPT, _delete)
    return 0


def _port_forward_cmd(args: argparse.Namespace) -> int:
    forwarder = KubectlForwarder(_process_runner(), args.kubectl_flags, stderr=sys.stderr)
    supervisor = PortForwardSupervisor(forwarder, sys.stdout)
    tasks = default_forward_tasks(args.port, args.ui_port, args.proxy_port)
    print(forward_banner(args.ui_port), flush=True)
    supervisor.run(tasks)
    return 0


def _garbage_collect_cmd(args: argparse.Namespace) -> int:
    try:
        _cluster_admin(args).garbage_collect()
    except grpc.RpcError as exc:
        raise _cluster_error(args, exc) from exc
    return 0


def _migrate_cmd(args: argparse.Namespace) -> int:
    dispatcher = MigrationDispatcher(
        _version_source(args),
        _process_runner(),
        _client_version(),
        args.address,
        sys.stdout,
    )
    if args.dry_run:
        outcome = dispatcher.render(args.from_version, args.to_version, args.namespace)
        sys.stdout.write(outcome.manifest)
        return 0
    dispatcher.dispatch(args.from_version, args.to_version, args.namespace)
    return 0


def build_parser(
    address: str | None = None,
    *,
    settings: RuntimeSettings | None = None,
    groups: Iterable[CommandGroup] | None = None,
) -> argparse.ArgumentParser:
    settings = settings or SETTINGS
    address = address or settings.address
    parser = argparse.ArgumentParser(
        prog="pachctl",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
        parents=[_global_flags(suppress=False)],
    )
    parser.add_argument("--version", action="version", version=f"pachctl {__version__}")
    local_flags = [_global_flags(suppress=True)]
    parser.set_defaults(address=address)

    context = CommandContext(address=address, settings=settings)
    registry = load_groups(context, groups)

    sub = parser.add_subparsers(dest="command", required=True)

    for name, entry in registry.items():
        group_parser = sub.add_parser(name, help=entry.help)
        handler = entry.builder(group_parser, context)

        def _group_dispatch(ns: argparse.Namespace, group_handler=handler) -> int:
            return group_handler(ns)

        group_parser.set_defaults(func=_group_dispatch)

    version_cmd = sub.add_parser("version", help="Return version information.", parents=local_flags)
    version_cmd.set_defaults(func=_version_cmd)

    delete_all = sub.add_parser(
        "delete-all",
        parents=local_flags,
        help="Delete everything.",
        description="Delete all repos, commits, files, pipelines and jobs.\nThis resets the cluster to its initial state.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    delete_all.set_defaults(func=_delete_all_cmd)

    port_forward = sub.add_parser(
        "port-forward",
        parents=local_flags,
        help="Forward a port on the local machine to pachd. This command blocks.",
    )
    port_forward.add_argument("-p", "--port", type=int, default=DEFAULT_PORT, help="The local port to bind to.")
    port_forward.add_argument("-u", "--ui-port", type=int, default=DEFAULT_UI_PORT, help="The local port to bind the dashboard UI to.")
    port_forward.add_argument("-x", "--proxy-port", type=int, default=DEFAULT_PROXY_PORT, help="The local port to bind the dashboard websocket to.")
    port_forward.add_argument(
        "-k",
        "--kubectlflags",
        dest="kubectl_flags",
        default="",
        help="Any kubectl flags to proxy, e.g. --kubectlflags='--kubeconfig /some/path/kubeconfig'",
    )
    port_forward.set_defaults(func=_port_forward_cmd)

    garbage_collect = sub.add_parser(
        "garbage-collect",
        parents=local_flags,
        help="Garbage collect unused data.",
        description=GARBAGE_COLLECT_HELP,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    garbage_collect.set_defaults(func=_garbage_collect_cmd)

    migrate = sub.add_parser(
        "migrate",
        parents=local_flags,
        help="Migrate the internal state of Pachyderm from one version to another.",
        description=MIGRATE_HELP,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    migrate.add_argument(
        "--from",
        dest="from_version",
        default="",
        help="The current version of the cluster. If not specified, pachctl will attempt to discover it.",
    )
    migrate.add_argument(
        "--to",
        dest="to_version",
        default="",
        help="The version of Pachyderm to migrate to. If not specified, pachctl will use its own version.",
    )
    migrate.add_argument(
        "--namespace",
        default="default",
        help="The kubernetes namespace under which Pachyderm is deployed.",
    )
    migrate.add_argument("--dry-run", action="store_true", help="Print the migration job manifest without submitting it")
    migrate.set_defaults(func=_migrate_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    settings = SETTINGS
    try:
        parser = build_parser(settings.address, settings=settings)
    except RegistryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    log_config = LogConfig(verbose=args.verbose)
    setup_logging(log_config)
    args.log_config = log_config
    LOGGER.debug("pachctl %s: command=%s address=%s", __version__, args.command, args.address)
    if args.no_metrics:
        settings = replace(settings, metrics_enabled=False)

    try:
        with track_command(settings, args.command):
            return args.func(args)
    except PachctlError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
