from __future__ import annotations

from ..context import InstallCtx
from ..lib.portage import emerge


def install_gentoolkit(ctx: InstallCtx) -> None:
    emerge(ctx, ["app-portage/gentoolkit"])


def install_pciutils(ctx: InstallCtx) -> None:
    emerge(ctx, ["sys-apps/pciutils"])
