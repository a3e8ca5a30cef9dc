from __future__ import annotations

import argparse
import logging
import os
import time
from datetime import timedelta
from typing import Any, Dict, Optional

from .config import load_config
from .context import InstallCtx
from .lib.command import CommandError
from .logging_utils import configure_logging
from .phases import PHASES
from .pipeline import run_pipeline
from .state_store import load_state, new_run_record, record_error, save_state

logger = logging.getLogger(__name__)


def default_paths(log_dir: str, log_name: str) -> tuple[str, str]:
    return (
        os.path.join(log_dir, f"{log_name}.log"),
        os.path.join(log_dir, f"{log_name}.state.json"),
    )


def run(
    phase_name: str,
    *,
    config_path: Optional[str] = None,
    log_dir: Optional[str] = None,
    state_path: Optional[str] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """Run one installation phase, saving a run record next to the log."""

    phase = PHASES[phase_name]
    cfg = load_config(config_path)
    log_path, default_state = default_paths(log_dir or cfg.log_dir, phase.log_name)
    state_path = state_path or default_state

    actual_log_path = configure_logging(log_path=log_path)

    state = new_run_record(phase.name)
    state["log_path"] = actual_log_path
    state["dry_run"] = dry_run
    ctx = InstallCtx(cfg=cfg, in_chroot=phase.in_chroot, dry_run=dry_run, state=state)
    steps = phase.build_steps(cfg)

    started = time.monotonic()
    logger.info("%s...", phase.title)
    try:
        result = run_pipeline(ctx=ctx, steps=steps, start_at=start_at, stop_after=stop_after)
        state["ran_steps"] = result.ran_steps
        logger.info("%s...done", phase.title)
        return state
    except Exception as e:
        logger.exception("%s failed at step %s", phase.title, state.get("current_step"))
        record_error(state, e)
        if state.get("current_step"):
            logger.info("After fixing the cause, continue with --start-at %s", state["current_step"])
        raise
    finally:
        elapsed = timedelta(seconds=round(time.monotonic() - started))
        state["elapsed"] = str(elapsed)
        logger.info("Elapsed time: %s", elapsed)
        save_state(state_path, state)


def list_steps(phase_name: str, *, config_path: Optional[str], state_path: Optional[str]) -> int:
    phase = PHASES[phase_name]
    cfg = load_config(config_path)
    state_path = state_path or default_paths(cfg.log_dir, phase.log_name)[1]
    completed = set(load_state(state_path).get("completed_steps") or [])
    for step in phase.build_steps(cfg):
        mark = "x" if step.step_id in completed else " "
        print(f"[{mark}] {step.step_id:45} {step.title}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="riuos-installer")
    p.add_argument("phase", choices=sorted(PHASES), help="base: from install media; programs: on the installed system")
    p.add_argument("--config", default=None, help="YAML file overriding the built-in settings")
    p.add_argument("--log-dir", default=None, help="Directory for the phase log and run record")
    p.add_argument("--state", default=None, help="Path to the run record (json|yaml)")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. get_stage3_tarball)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--dry-run", action="store_true", help="Log commands and file edits without running them")
    p.add_argument("--list-steps", action="store_true", help="Print the phase's steps and exit")

    args = p.parse_args(argv)

    if args.list_steps:
        return list_steps(args.phase, config_path=args.config, state_path=args.state)

    try:
        run(
            args.phase,
            config_path=args.config,
            log_dir=args.log_dir,
            state_path=args.state,
            start_at=args.start_at,
            stop_after=args.stop_after,
            dry_run=bool(args.dry_run),
        )
    except CommandError as e:
        # Same exit status as the command that failed.
        return e.returncode or 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
