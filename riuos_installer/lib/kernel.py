from __future__ import annotations

import logging
from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from ..context import InstallCtx

logger = logging.getLogger(__name__)


def kernel_make(ctx: "InstallCtx", targets: Sequence[str] = (), *, jobs: bool = False) -> None:
    """Run make in the kernel source tree of the target system."""

    argv = ["make", "-C", ctx.cfg.kernel_src]
    if jobs:
        argv += str(ctx.cfg.get("portage.makeopts", "")).split()
    ctx.target_cmd([*argv, *targets])


def kernel_config(ctx: "InstallCtx", *, enable: Sequence[str] = (), set_str: dict | None = None) -> None:
    """Edit .config with the tree's scripts/config, then resolve dependencies."""

    script = f"{ctx.cfg.kernel_src}/scripts/config"
    argv = [script, "--file", f"{ctx.cfg.kernel_src}/.config"]
    for option in enable:
        argv += ["--enable", option]
    for option, value in (set_str or {}).items():
        argv += ["--set-str", option, value]
    if len(argv) == 3:
        return
    ctx.target_cmd(argv)
    kernel_make(ctx, ["olddefconfig"])
    logger.info("Kernel options set: %s", ", ".join([*enable, *(set_str or {})]))


def genkernel_initramfs(ctx: "InstallCtx", *extra: str) -> None:
    ctx.target_cmd(["genkernel", *extra, "--install", "initramfs"])
