from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.files import replace_var_value, uncomment_var, write_file
from ..lib.portage import emerge, env_update, eselect_set

logger = logging.getLogger(__name__)


def set_time_zone(ctx: InstallCtx) -> None:
    tz = str(ctx.cfg.get("localization.timezone"))
    write_file(ctx.path("/etc/timezone"), tz + "\n", dry_run=ctx.dry_run)
    emerge(ctx, ["sys-libs/timezone-data"], options=["--config"])


def set_locales(ctx: InstallCtx) -> None:
    locale_gen = ctx.path("/etc/locale.gen")
    for entry in ctx.cfg.get("localization.locale_gen") or []:
        uncomment_var(entry, locale_gen, dry_run=ctx.dry_run)
    ctx.target_cmd(["locale-gen"])
    eselect_set(ctx, "locale", str(ctx.cfg.get("localization.locale")))
    env_update(ctx)


def set_keymap(ctx: InstallCtx) -> None:
    replace_var_value(
        "keymap",
        ctx.path("/etc/conf.d/keymaps"),
        str(ctx.cfg.get("localization.keymap")),
        quoted=True,
        dry_run=ctx.dry_run,
    )
