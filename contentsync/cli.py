"""CLI entrypoints for contentsync commands."""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from .config import SyncConfig, load_config
from .connectivity import ConnectivityMonitor
from .errors import ConfigError, ContentSyncError
from .logging import configure_logging
from .models import ConnectivityState
from .queries import apply_filter
from .sync import ContentSynchronizer, SyncResult


def _add_common_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    verbose_kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
        "default": argparse.SUPPRESS if suppress_default else False,
    }
    parser.add_argument("-v", "--verbose", **verbose_kwargs)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--config",
        default=argparse.SUPPRESS if suppress_default else ".",
        help="Path to .contentsync.yml or the directory holding it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contentsync",
        description="Synchronize cached app content with the content server.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Load a resource through the fetch policy and print its list items.",
    )
    _add_common_options(fetch_parser, suppress_default=True)
    fetch_parser.add_argument("query_type", help="Query type, e.g. newsItems or eventRecords.")
    fetch_parser.add_argument(
        "--var",
        dest="variables",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query variable; may be repeated. Values are parsed as YAML scalars.",
    )
    fetch_parser.add_argument(
        "--filter",
        dest="filter_value",
        default=None,
        help="Select a list filter (data provider for news, category id for events).",
    )
    fetch_parser.add_argument(
        "--more",
        type=int,
        default=0,
        metavar="N",
        help="Load up to N additional pages after the first one.",
    )
    fetch_parser.add_argument(
        "--refresh",
        action="store_true",
        help="Behave like pull-to-refresh and skip the cached answer when online.",
    )
    fetch_parser.add_argument(
        "--offline",
        action="store_true",
        help="Pretend the device is offline; only cached content is served.",
    )

    status_parser = subparsers.add_parser(
        "status",
        help="Show when each resource was last refreshed.",
    )
    _add_common_options(status_parser, suppress_default=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing synchronization operations.",
    )
    _add_common_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for contentsync commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "fetch":
        try:
            variables = dict(_parse_variable(raw) for raw in args.variables)
        except ValueError as exc:
            parser.error(str(exc))
        synchronizer = _build_synchronizer(config, offline=bool(args.offline))
        try:
            if args.filter_value is not None:
                variables = apply_filter(args.query_type, variables, args.filter_value)
            result = asyncio.run(
                _fetch(
                    synchronizer,
                    config,
                    args.query_type,
                    variables,
                    more=max(args.more, 0),
                    refresh=bool(args.refresh),
                )
            )
        except (ContentSyncError, ValueError) as exc:
            parser.exit(1, f"contentsync fetch failed: {exc}\nRun with --verbose for more details.\n")
        _print_result(result)
    elif args.command == "status":
        synchronizer = _build_synchronizer(config, offline=True)
        now = datetime.now(UTC)
        records = synchronizer.tracker.records()
        if not records:
            print("No resources refreshed yet")
        for record in records:
            window = config.freshness.window_for(record.resource_key)
            if record.last_refreshed_at is None:
                print(f"{record.resource_key}: unreadable timestamp")
                continue
            state = "stale" if now - record.last_refreshed_at > window else "fresh"
            print(f"{record.resource_key}: {record.last_refreshed_at.isoformat()} ({state})")
    elif args.command == "serve":
        from .service.app import run_service

        run_service(args.host, args.port, config_path=Path(args.config))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


async def _fetch(
    synchronizer: ContentSynchronizer,
    config: SyncConfig,
    query_type: str,
    variables: Dict[str, Any],
    *,
    more: int,
    refresh: bool,
) -> SyncResult:
    load = synchronizer.refresh if refresh else synchronizer.load
    result = await load(query_type, variables, context=config.filters.to_context())
    for _ in range(more):
        if not result.has_more:
            break
        result = await synchronizer.load_more(result.resource_key)
    return result


def _build_synchronizer(config: SyncConfig, *, offline: bool) -> ContentSynchronizer:
    monitor = ConnectivityMonitor(ConnectivityState(is_connected=not offline))
    if not offline and config.server.health_url:
        monitor.probe(config.server.health_url, timeout=config.server.request_timeout)
    return ContentSynchronizer.from_config(config, connectivity=monitor)


def _parse_variable(raw: str) -> Tuple[str, Any]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise ValueError(f"Invalid variable '{raw}'; expected KEY=VALUE")
    try:
        parsed = yaml.safe_load(value) if value else ""
    except yaml.YAMLError:
        parsed = value
    if not isinstance(parsed, (str, int, float, bool)):
        parsed = value
    return key.strip(), parsed


def _print_result(result: SyncResult) -> None:
    for item in result.items:
        line = f"[{item.kind.value}] {item.title}"
        if item.subtitle:
            line += f" ({item.subtitle})"
        print(line)
    summary = f"{len(result.items)} item(s) from {result.source.value}"
    if result.stale:
        summary += ", stale"
    if result.has_more:
        summary += ", more available"
    print(summary)
    if result.error:
        print(f"warning: {result.error}", file=sys.stderr)


if __name__ == "__main__":
    main(sys.argv[1:])
