"""Command-line interface for Transitory.

Replays a scripted sequence of input collections through a TransitionDriver
on a manual clock and prints every state the engine produces, including the
ones triggered by scheduled wakes between scripted ticks.
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from pathlib import Path
import sys
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from transitory.core.config.loader import configure_logging, load_app_config, load_config
from transitory.core.transitions import (
    IMMEDIATE,
    CollectionState,
    ManualClock,
    ManualScheduler,
    TransitionConfig,
    TransitionDriver,
    TransitionError,
)
from transitory.core.utils.json import dumps_json

console = Console()

# Upper bound on wakes honored between two scripted ticks.
MAX_WAKES = 10_000

# Used when neither --log-level nor a logging section is given.
DEFAULT_LOG_LEVEL = "WARNING"


class ScriptTick(BaseModel):
    """One scripted input collection."""

    model_config = ConfigDict(extra="forbid")

    at_ms: float = Field(ge=0.0, description="Offset from the script start (ms)")
    items: list[str | dict[str, Any]] = Field(default_factory=list)


class SimulationScript(BaseModel):
    """Sequence of input collections to replay."""

    model_config = ConfigDict(extra="forbid")

    start_ms: float = Field(default=1000.0, gt=0.0, description="Clock reading at offset 0")
    ticks: list[ScriptTick]


class Frame(BaseModel):
    """A state produced during the replay."""

    at_ms: float
    state: CollectionState


def item_key(item: Any) -> str:
    """Key of a script item: the string itself or its ``key`` field."""
    if isinstance(item, Mapping):
        return str(item["key"])
    return str(item)


def simulate(script: SimulationScript, config: TransitionConfig) -> list[Frame]:
    """Replay ``script`` and collect every produced state.

    Wakes requested by the engine are honored between scripted ticks and
    after the last one, until the collection settles.

    Args:
        script: Ticks to replay, in time order.
        config: Transition styles and timings.

    Returns:
        Frames in the order they were produced.
    """
    clock = ManualClock(script.start_ms)
    scheduler = ManualScheduler(clock)
    frames: list[Frame] = []

    def record(state: CollectionState) -> None:
        frames.append(Frame(at_ms=clock.now() - script.start_ms, state=state))

    driver = TransitionDriver(
        item_key, config, scheduler=scheduler, clock=clock, on_change=record
    )

    def run_wakes(before_ms: float | None) -> None:
        for _ in range(MAX_WAKES):
            pending = scheduler.pending
            if not pending:
                return
            due = pending[0].due_ms
            if before_ms is not None and due >= before_ms:
                return
            clock.set(max(due, clock.now()))
            scheduler.run_due()
        raise RuntimeError(f"Collection did not settle after {MAX_WAKES} wakes")

    try:
        for tick in sorted(script.ticks, key=lambda t: t.at_ms):
            target = script.start_ms + tick.at_ms
            # A wake due at the tick itself is superseded by the tick.
            run_wakes(before_ms=target)
            clock.set(max(target, clock.now()))
            driver.update(tick.items)
        run_wakes(before_ms=None)
    finally:
        driver.close()

    return frames


def render_frame(frame: Frame) -> Table:
    """Render one frame as a rich table."""
    state = frame.state
    if state.next_wake is None:
        wake = "-"
    elif state.next_wake == IMMEDIATE:
        wake = "now"
    else:
        wake = f"{state.next_wake:.0f}"

    table = Table(title=f"t={frame.at_ms:.0f}ms  next wake: {wake}")
    table.add_column("key", style="bold")
    table.add_column("stage")
    table.add_column("order", justify="right")
    table.add_column("style")
    table.add_column("wake at", justify="right")

    for record in state.records:
        if record.wake_at is None:
            wake_at = "-"
        elif record.wake_at == IMMEDIATE:
            wake_at = "now"
        else:
            wake_at = f"{record.wake_at:.0f}"
        table.add_row(
            record.key, record.stage.value, str(record.order), escape(repr(record.style)), wake_at
        )
    return table


def run_simulate(args: argparse.Namespace) -> int:
    """Run the ``simulate`` command.

    Logging follows the config file's ``logging`` section; ``--log-level``
    overrides its level.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    config_path = Path(args.config).resolve()
    script_path = Path(args.script).resolve()

    try:
        app_config = load_app_config(config_path)
        script = SimulationScript.model_validate(load_config(script_path))
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1

    level = args.log_level
    if level is None and "logging" not in app_config.model_fields_set:
        level = DEFAULT_LOG_LEVEL
    configure_logging(app_config, level=level)

    try:
        frames = simulate(script, app_config.transitions)
    except (TransitionError, RuntimeError) as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1

    if args.json:
        payload = [
            frame.model_dump(mode="json", exclude={"state": {"by_key"}}) for frame in frames
        ]
        print(dumps_json(payload))
        return 0

    for frame in frames:
        console.print(render_frame(frame))
    console.print(f"[green]{len(frames)} frame(s) produced[/green]")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="transitory",
        description="Transitory - keyed collection transition engine",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sim = sub.add_parser("simulate", help="Replay a scripted tick sequence")
    sim.add_argument(
        "--config", required=True, help="Path to transition config (JSON or YAML)"
    )
    sim.add_argument("--script", required=True, help="Path to tick script (JSON or YAML)")
    sim.add_argument("--json", action="store_true", help="Print frames as JSON")
    sim.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: config file, else WARNING)",
    )

    return p


def main() -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args()

    if args.cmd == "simulate":
        sys.exit(run_simulate(args))


if __name__ == "__main__":
    main()
