from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .context import InstallCtx
from .state_store import mark_step_completed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """One labeled unit of work, e.g. "Create swap partition"."""

    step_id: str
    title: str
    fn: Callable[[InstallCtx], None]

    def run(self, ctx: InstallCtx) -> None:
        logger.info("%s...", self.title)
        self.fn(ctx)
        logger.info("%s...done", self.title)


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]


def step_ids(steps: Sequence[Step]) -> List[str]:
    return [s.step_id for s in steps]


def run_pipeline(
    *,
    ctx: InstallCtx,
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order; the first exception aborts the run.

    start_at/stop_after let the operator continue by hand after fixing a
    failed step. Steps are not re-entrant, so nothing is skipped implicitly.
    """

    known = step_ids(steps)
    for name, value in (("start_at", start_at), ("stop_after", stop_after)):
        if value is not None and value not in known:
            raise ValueError(f"Unknown step for {name}: {value}")

    ran: List[str] = []
    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        ctx.state["current_step"] = step.step_id
        step.run(ctx)
        mark_step_completed(ctx.state, step.step_id)
        ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    ctx.state["current_step"] = None
    return PipelineResult(ran_steps=ran)
