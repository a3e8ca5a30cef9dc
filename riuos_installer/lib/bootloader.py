from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .files import read_var_value, replace_var_value

if TYPE_CHECKING:
    from ..context import InstallCtx

logger = logging.getLogger(__name__)

GRUB_DEFAULTS = "/etc/default/grub"


def install_grub(ctx: "InstallCtx", disk: str) -> None:
    """Install GRUB (BIOS/MBR) onto disk."""

    ctx.target_cmd(["grub-install", disk])
    logger.info("GRUB installed on %s", disk)


def grub_mkconfig(ctx: "InstallCtx") -> None:
    ctx.target_cmd(["grub-mkconfig", "-o", "/boot/grub/grub.cfg"])


def append_kernel_cmdline(ctx: "InstallCtx", params: str) -> str:
    """Append params to GRUB_CMDLINE_LINUX; takes effect after grub-mkconfig."""

    path = ctx.path(GRUB_DEFAULTS)
    if ctx.dry_run:
        logger.info("Would append kernel parameters: %s", params)
        return params

    current = read_var_value("GRUB_CMDLINE_LINUX", path) or ""
    merged = " ".join(p for p in [current, params] if p)
    replace_var_value("GRUB_CMDLINE_LINUX", path, merged, quoted=True)
    return merged
