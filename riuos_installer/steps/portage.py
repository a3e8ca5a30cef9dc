from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.files import append_line
from ..lib.portage import emerge, eselect_set

logger = logging.getLogger(__name__)


def select_profile(ctx: InstallCtx) -> None:
    eselect_set(ctx, "profile", str(ctx.cfg.get("portage.profile")))


def set_use_flags(ctx: InstallCtx) -> None:
    flags = " ".join(ctx.cfg.get("portage.use_flags") or [])
    append_line(ctx.path("/etc/portage/make.conf"), f'USE="{flags}"', dry_run=ctx.dry_run)


def update_world_set(ctx: InstallCtx) -> None:
    emerge(ctx, ["@world"], options=["--update", "--deep", "--newuse"])
