"""CLI entry point for the board demo and reports.

Usage:
  python -m sprintboard demo [--seed board.yaml] [--config board.yaml] [--user u-alice] [--seconds 60]
  python -m sprintboard report [--seed board.yaml] [--sprint "Sprint 1"]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys


def main() -> None:
    parser = argparse.ArgumentParser(description="Sprint board CLI")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command")

    demo_parser = subparsers.add_parser("demo", help="Run the simulated realtime feed and print toasts")
    demo_parser.add_argument("--seed", default=None, help="YAML board seed (default: built-in demo board)")
    demo_parser.add_argument("--config", default=None, help="YAML board config")
    demo_parser.add_argument("--user", default="u-alice", help="Current user id")
    demo_parser.add_argument("--seconds", type=float, default=60.0, help="How long to run the feed")

    report_parser = subparsers.add_parser("report", help="Print board reports")
    report_parser.add_argument("--seed", default=None, help="YAML board seed (default: built-in demo board)")
    report_parser.add_argument("--config", default=None, help="YAML board config")
    report_parser.add_argument("--sprint", default=None, help="Sprint name for the burndown")

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "demo":
        asyncio.run(_demo_command(args))
    elif args.command == "report":
        asyncio.run(_report_command(args))


async def _load_store(args):
    from pathlib import Path

    from sprintboard.config import BoardConfig, load_config
    from sprintboard.seed import DEMO_SEED, build_store, read_seed

    config = load_config(Path(args.config)) if args.config else BoardConfig()
    seed = read_seed(Path(args.seed)) if args.seed else DEMO_SEED
    return await build_store(seed, config)


async def _demo_command(args) -> None:
    from sprintboard.realtime import (
        NotificationPipeline,
        SimulatedEventSource,
        ToastCoalescer,
        ToastQueue,
    )

    try:
        store = await _load_store(args)
        user = store.get_user(args.user)
    except (OSError, KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    queue = ToastQueue()

    def on_toast(action, toast):
        if action == "pushed":
            print(f"[{toast.item_id}] {toast.title}")
            for change in toast.changes:
                print(f"    - {change}")

    queue.add_listener(on_toast)
    coalescer = ToastCoalescer(queue, store.config)
    pipeline = NotificationPipeline(user, coalescer)
    source = SimulatedEventSource(store, user.id)

    print(f"Listening for changes relevant to {user.name} for {args.seconds:.0f}s...")
    task = asyncio.create_task(pipeline.attach(source))
    try:
        await asyncio.sleep(args.seconds)
    finally:
        source.stop()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        delivered = coalescer.flush()
    print(f"Done. {len(queue)} toast(s) shown, {delivered} flushed at shutdown.")


async def _report_command(args) -> None:
    from sprintboard.tools.handlers import get_reports_handler

    try:
        store = await _load_store(args)
    except (OSError, KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    result = await get_reports_handler({"sprint": args.sprint}, store)
    print(result["content"][0]["text"])


if __name__ == "__main__":
    main()
