"""CLI tool for inspecting persisted traces."""

import argparse
import asyncio
import sys
from pathlib import Path

from xray_core.exceptions import StorageError, TraceNotFoundError
from xray_core.records import Trace, TraceListItem
from xray_core.settings import settings
from xray_core.trace_store.local import LocalTraceStore


def _format_item(item: TraceListItem) -> str:
    duration = f"{item.duration}ms" if item.duration is not None else "-"
    started = item.start_time.strftime("%Y-%m-%d %H:%M:%S")
    return f"{item.id}  {started}  {item.status:<9}  {duration:>8}  {item.steps_count:>3} steps  {item.name}"


async def _require(store: LocalTraceStore, trace_id: str) -> Trace:
    trace = await store.get(trace_id)
    if trace is None:
        raise TraceNotFoundError(trace_id)
    return trace


def _cmd_list(store: LocalTraceStore, args: argparse.Namespace) -> int:
    items = asyncio.run(store.list())
    if not items:
        print("No traces found.")
        return 0
    for item in items[: args.limit] if args.limit else items:
        print(_format_item(item))
    return 0


def _cmd_show(store: LocalTraceStore, args: argparse.Namespace) -> int:
    trace = asyncio.run(_require(store, args.trace_id))
    print(trace.to_json())
    return 0


def _cmd_delete(store: LocalTraceStore, args: argparse.Namespace) -> int:
    if not asyncio.run(store.delete(args.trace_id)):
        raise TraceNotFoundError(args.trace_id)
    print(f"Deleted {args.trace_id}")
    return 0


def _cmd_clear(store: LocalTraceStore, args: argparse.Namespace) -> int:
    removed = asyncio.run(store.clear())
    print(f"Removed {removed} trace(s)")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for trace inspection."""
    parser = argparse.ArgumentParser(prog="xray", description="Inspect persisted X-Ray traces")
    parser.add_argument("--dir", type=Path, default=settings.xray_dir, help="Trace store root directory")
    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser("list", help="List traces, newest first")
    list_parser.add_argument("--limit", type=int, default=0, help="Show at most this many traces")

    show_parser = subparsers.add_parser("show", help="Print the full JSON record of a trace")
    show_parser.add_argument("trace_id")

    delete_parser = subparsers.add_parser("delete", help="Delete a trace")
    delete_parser.add_argument("trace_id")

    subparsers.add_parser("clear", help="Delete all traces")

    args = parser.parse_args(argv)

    handlers = {"list": _cmd_list, "show": _cmd_show, "delete": _cmd_delete, "clear": _cmd_clear}
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    store = LocalTraceStore(args.dir)
    try:
        return handler(store, args)
    except (TraceNotFoundError, StorageError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())


__all__ = ["main"]
