"""Terminal CLI entrypoint for guided hangboard sessions."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from sesh.core.config import SessionConfig, load_config
from sesh.ui.controller import UIController
from sesh.workout.engine import WARMUP_LABELS, WORKOUT_LABELS, PhaseLabels, SessionProgress
from sesh.workout.estimator import format_clock
from sesh.workout.library import CatalogLookupError
from sesh.workout.model import Filter, TimedItem
from sesh.workout.parser import CatalogParseError
from sesh.workout.selector import SessionPlan


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Guided hangboard session timer")
    parser.add_argument("--list", action="store_true", help="List protocols, levels and durations")
    parser.add_argument("--protocol", default=None, help="Protocol name, e.g. 'Short Maximal Hangs'")
    parser.add_argument("--intensity", default=None, help="Intensity level: Low, Medium or High")
    parser.add_argument("--duration", type=int, default=None, help="Session length in minutes")
    parser.add_argument(
        "--warmup",
        action="store_true",
        help="Prepend a randomly selected warm-up sized to the session length",
    )
    parser.add_argument(
        "--run",
        action="store_true",
        help="Run the session in the terminal (one status line per second)",
    )
    parser.add_argument(
        "--prep",
        type=int,
        default=None,
        help="Seconds of preparation before each exercise",
    )
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument("--web-host", default="127.0.0.1", help="Host bind for --ui-web")
    parser.add_argument("--web-port", type=int, default=8090, help="Port for --ui-web")
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file")
    parser.add_argument("--catalog", type=Path, default=None, help="Alternate catalog JSON")
    parser.add_argument("--warmups", type=Path, default=None, help="Alternate warm-up pool JSON")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log phase transitions and catalog loading to stderr",
    )
    return parser


def setup_logging(debug: bool = False) -> None:
    logger.remove()
    logger.add(
        lambda message: sys.stderr.write(message),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level="DEBUG" if debug else "WARNING",
    )


def describe_item(item: TimedItem) -> str:
    detail = f" on {item.secondary_label}" if item.secondary_label else ""
    rest_set = f", {format_clock(item.rest_set_sec)} between sets" if item.sets > 1 else ""
    return (
        f"{item.label}{detail}: {item.sets}x{item.reps} x {item.work_sec}s,"
        f" rest {item.rest_rep_sec}s{rest_set}"
    )


def format_progress_line(progress: SessionProgress) -> str:
    if progress.finished:
        return f"{progress.phase_label} | total {progress.total_display}"
    paused = " [paused]" if progress.paused else ""
    return (
        f"[{progress.item_index + 1}/{progress.item_total}] {progress.item_label}"
        f" | set {progress.current_set}/{progress.set_total}"
        f" rep {progress.current_rep}/{progress.rep_total}"
        f" | {progress.phase_label} {progress.phase_display}"
        f" | left {progress.total_display}{paused}"
    )


def run_list(controller: UIController) -> int:
    catalog = controller.catalog
    for protocol in catalog.protocols():
        print(protocol)
        for level in catalog.intensity_levels(protocol):
            durations = ", ".join(str(d) for d in catalog.durations(protocol, level))
            print(f"  {level:<8} {durations or '-'}")
    return 0


def print_plan(plan: SessionPlan, prep_sec: int) -> None:
    if plan.warmups:
        print("Warm-up:")
        for item in plan.warmups:
            print(f"  - {describe_item(item)}")
    print("Exercises:")
    for item in plan.exercises:
        print(f"  - {describe_item(item)}")
    print(f"Estimated time: {format_clock(plan.estimated_total_sec(prep_sec))}")


async def run_session(controller: UIController, plan: SessionPlan) -> int:
    stages: list[tuple[tuple[TimedItem, ...], PhaseLabels]] = []
    if plan.warmups:
        stages.append((plan.warmups, WARMUP_LABELS))
    stages.append((plan.exercises, WORKOUT_LABELS))

    for items, labels in stages:
        done = asyncio.Event()
        results: list[bool] = []

        def on_finish(completed: bool) -> None:
            results.append(completed)
            done.set()

        await controller.start_session(
            items,
            labels,
            on_progress=lambda p: print(format_progress_line(p)),
            on_finish=on_finish,
        )
        try:
            await done.wait()
        finally:
            await controller.stop_session()
        if not results or not results[-1]:
            return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug)

    try:
        config: SessionConfig = load_config(args.config).with_overrides(
            prep_sec=args.prep,
            catalog_path=args.catalog,
            warmups_path=args.warmups,
        )
        controller = UIController(config=config)
    except (CatalogParseError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.ui_web:
        from sesh.ui.web_app import run_web_ui

        return run_web_ui(controller, host=args.web_host, port=args.web_port)

    if args.list:
        return run_list(controller)

    if args.protocol is None or args.intensity is None or args.duration is None:
        parser.print_help()
        return 1

    flt = Filter(
        protocol_name=args.protocol,
        intensity_level=args.intensity,
        duration=args.duration,
    )
    try:
        plan = controller.plan(flt, with_warmup=args.warmup)
    except CatalogLookupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print_plan(plan, config.prep_sec)
    if not args.run:
        return 0
    try:
        return asyncio.run(run_session(controller, plan))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
