#!/usr/bin/env python3
"""
Interactive console routine runner.

Loads a routine file, ticks once per second and maps single-letter
commands to runner operations:

    s  start / resume      p  pause          d  done
    k  skip                r  reset task     b  background
    f  foreground          q  quit

Run: python scripts/run_routine.py config/routines/morning.yaml
"""

import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from momentum_app.config.loader import ConfigLoader
from momentum_app.config.validation import ConfigValidator
from momentum_app.data.task_normalizer import TaskNormalizer
from momentum_app.errors import TaskDefinitionError
from momentum_app.logging.config import configure_logging
from momentum_app.presentation.factory import create_consumers
from momentum_app.runner import RoutineRunner
from momentum_app.ticker import TickDriver
from momentum_app.utils.time import format_wall_time


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a routine in the console")
    parser.add_argument("routine", type=Path, help="YAML routine file")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory holding runner.yaml")
    parser.add_argument("--log-level", default=None, help="Override logging level")
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    loader = ConfigLoader.create(args.config_dir)
    overrides = {"logging": {"level": args.log_level}} if args.log_level else None
    merged = loader.merge_config(overrides)
    errors = ConfigValidator.validate_config(merged)
    if errors:
        for error in errors:
            print(f"config error: {error.field}: {error.message} (value: {error.value})")
        return 2
    config = loader.build(merged)

    configure_logging(
        level=config.logging.level,
        format_json=config.logging.format_json,
        include_timestamp=config.logging.include_timestamp,
    )

    try:
        tasks = TaskNormalizer().load_routine_file(args.routine)
    except (TaskDefinitionError, OSError) as e:
        print(f"cannot load routine: {e}")
        return 2

    runner = RoutineRunner(config.runner)
    for consumer in create_consumers(config.presentation):
        runner.subscribe(consumer)

    commands = {
        "s": runner.start,
        "p": runner.pause,
        "d": runner.mark_done,
        "k": runner.skip_current,
        "r": runner.reset_current,
        "b": runner.app_did_enter_background,
        "f": runner.app_did_enter_foreground,
    }

    driver = TickDriver(runner.tick, interval=config.runner.tick_interval_seconds)
    first = runner.start_run(tasks)
    if first.estimated_finish is not None:
        print(f"Estimated finish {format_wall_time(first.estimated_finish.astimezone())}")
    driver.start()
    try:
        for line in sys.stdin:
            command = line.strip().lower()
            if command == "q":
                break
            action = commands.get(command)
            if action is None:
                print("commands: s p d k r b f q")
                continue
            snapshot = action()
            if snapshot.is_routine_complete:
                break
    except KeyboardInterrupt:
        pass
    finally:
        driver.stop()

    final = runner.snapshot()
    print(f"{final.task_name} {final.drift_display}")
    for completion in runner.completions():
        marker = "skipped" if completion.skipped else "done"
        print(
            f"  {completion.name}: {completion.actual_seconds:.0f}s of "
            f"{completion.planned_seconds:.0f}s ({marker})"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
