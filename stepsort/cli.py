"""stepsort CLI: watch a sorting run in the terminal.

Usage::

    stepsort list
    stepsort run bubble --values "5, 3, 8, 1" --delay 50
    stepsort run quick --size 60 --seed 7 --quiet
    stepsort demo --rounds 1

Each step is drawn as one line of bars (``^`` under the active indices, ``=``
under settled ones) followed by the running comparison and write counts.
On a terminal the frame is redrawn in place.

Environment variables ``STEPSORT_DELAY_MS``, ``STEPSORT_SIZE`` and
``STEPSORT_SEED`` provide defaults for the matching options.
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from typing import TextIO

from stepsort import __version__
from stepsort.algorithms import ALGORITHMS
from stepsort.common import AlgorithmInfo, RunResult, StepEvent
from stepsort.config import RunConfig
from stepsort.dispatch import Dispatcher

BARS = " ▁▂▃▄▅▆▇█"


def render_event(event: StepEvent) -> str:
    """Render one step as bars, a marker row and the running counters."""
    values = event.snapshot
    if not values:
        return f"(empty)  comparisons={event.comparisons} writes={event.writes}"
    low = min(min(values), 0)
    span = max(values) - low or 1
    bars = "".join(BARS[1 + (v - low) * (len(BARS) - 2) // span] for v in values)
    marks = "".join(
        "^" if i in event.active_indices else "=" if i in event.sorted_marks else " " for i in range(len(values))
    )
    return f"{bars}|{marks}|  comparisons={event.comparisons} writes={event.writes}"


def summarize(result: RunResult) -> str:
    values = ", ".join(str(v) for v in result.sequence)
    return (
        f"{result.algorithm}: {result.status.value} "
        f"comparisons={result.counters.comparisons} writes={result.counters.writes} "
        f"[{values}]"
    )


class _Printer:
    """Step listener writing frames to a stream."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.in_place = stream.isatty()
        self.lock = threading.Lock()

    def __call__(self, event: StepEvent) -> None:
        with self.lock:
            if self.in_place:
                self.stream.write("\r\x1b[2K" + render_event(event))
            else:
                self.stream.write(render_event(event) + "\n")
            self.stream.flush()

    def finish(self) -> None:
        if self.in_place:
            self.stream.write("\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stepsort", description="Step-by-step sorting visualizer")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="default: WARNING"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="list the available algorithms")

    run = subparsers.add_parser("run", help="sort one array with one algorithm")
    run.add_argument("algorithm", choices=list(ALGORITHMS))
    run.add_argument("--values", default=None, help='comma-separated integers, e.g. "10, 45, 2, 99"')
    run.add_argument("--size", type=int, default=None, help="length of the random array")
    run.add_argument("--delay", type=float, default=None, help="milliseconds between steps")
    run.add_argument("--seed", type=int, default=None)
    run.add_argument("--quiet", action="store_true", help="print only the summary")

    demo = subparsers.add_parser("demo", help="cycle through every algorithm on random arrays")
    demo.add_argument("--rounds", type=int, default=None, help="passes over all algorithms (default: forever)")
    demo.add_argument("--size", type=int, default=None)
    demo.add_argument("--delay", type=float, default=None)
    demo.add_argument("--seed", type=int, default=None)
    demo.add_argument("--rest", type=float, default=None, help="seconds to rest before each run, twice that after")
    demo.add_argument("--quiet", action="store_true")
    return parser


def _list_algorithms(out: TextIO) -> None:
    for info in ALGORITHMS.values():
        stable = "stable" if info.stable else "unstable"
        print(
            f"{info.key:<10} {info.label:<15} best {info.best:<11} average {info.average:<11} "
            f"worst {info.worst:<11} {stable}",
            file=out,
        )


def main(argv: list[str] | None = None, out: TextIO | None = None) -> int:
    """Entry point for the ``stepsort`` CLI command."""
    out = out if out is not None else sys.stdout
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "list":
        _list_algorithms(out)
        return 0

    try:
        config = RunConfig.from_env(delay_ms=args.delay, size=args.size, seed=args.seed)
        if args.command == "demo" and args.rest is not None:
            config = config.with_changes(pause_before=args.rest, pause_after=2 * args.rest)
    except ValueError as e:
        print(f"stepsort: {e}", file=sys.stderr)
        return 2

    dispatcher = Dispatcher(config)
    printer = _Printer(out)
    if not args.quiet:
        dispatcher.add_listener(printer)

    try:
        if args.command == "run":
            dispatcher.select(args.algorithm)
            if args.values is not None and not dispatcher.set_custom_input(args.values):
                print("stepsort: no integers in --values; using a random array", file=sys.stderr)
            result = dispatcher.run()
            printer.finish()
            print(summarize(result), file=out)
        else:

            def announce(info: AlgorithmInfo) -> None:
                print(f"== {info.label} ({info.best} / {info.average} / {info.worst})", file=out)

            def report(result: RunResult) -> None:
                printer.finish()
                print(summarize(result), file=out)

            dispatcher.demo(rounds=args.rounds, on_algorithm=announce, on_result=report)
    except KeyboardInterrupt:
        dispatcher.cancel()
        printer.finish()
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
