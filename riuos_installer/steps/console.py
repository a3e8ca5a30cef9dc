"""Console programs: file manager, terminal multiplexer, audio."""

from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.portage import emerge, rc_update_add
from .user import install_dotfile

logger = logging.getLogger(__name__)


def install_ranger(ctx: InstallCtx) -> None:
    emerge(ctx, ["app-misc/ranger"])


def install_tmux(ctx: InstallCtx) -> None:
    emerge(ctx, ["app-misc/tmux"])


def install_tmuxconf_dotfile(ctx: InstallCtx) -> None:
    install_dotfile(ctx, ".tmux.conf")


def install_alsa(ctx: InstallCtx) -> None:
    emerge(ctx, ["media-sound/alsa-utils"])


def configure_alsa(ctx: InstallCtx) -> None:
    rc_update_add(ctx, "alsasound", "boot")
    # Mixer channels start muted.
    ctx.target_cmd(["amixer", "-q", "sset", "Master", "unmute"], check=False)
    ctx.target_cmd(["alsactl", "store"], check=False)


def install_cmus(ctx: InstallCtx) -> None:
    emerge(ctx, ["media-sound/cmus"])
