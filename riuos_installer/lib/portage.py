from __future__ import annotations

import logging
import re
from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from ..context import InstallCtx

logger = logging.getLogger(__name__)


def emerge(ctx: "InstallCtx", atoms: Sequence[str], *, options: Sequence[str] = ()) -> None:
    if not atoms:
        return
    ctx.target_cmd(["emerge", *options, *atoms])


def emerge_noreplace(ctx: "InstallCtx", atoms: Sequence[str]) -> None:
    emerge(ctx, atoms, options=["--noreplace"])


def rc_update_add(ctx: "InstallCtx", service: str, runlevel: str = "default") -> None:
    ctx.target_cmd(["rc-update", "add", service, runlevel])


def parse_eselect_index(listing: str, name: str) -> int | None:
    """Return the number of the entry called name in `eselect <module> list`.

    Lines look like `  [12]  default/linux/x86/13.0/desktop *`; the trailing
    star marks the current selection and is ignored. name matches the whole
    entry or its trailing path components ("desktop", "13.0/desktop"), so
    "13.0" does not pick "13.0/desktop".
    """

    for line in listing.splitlines():
        m = re.match(r"^\s*\[(\d+)\]\s+(\S+)", line)
        if not m:
            continue
        entry = m.group(2)
        if entry == name or entry.endswith("/" + name):
            return int(m.group(1))
    return None


def eselect_set(ctx: "InstallCtx", module: str, name: str) -> int | None:
    """Select the entry called name for an eselect module (profile, locale)."""

    r = ctx.target_cmd(["eselect", module, "list"], quiet=True)
    if ctx.dry_run:
        logger.info("Would select %s %s", module, name)
        return None

    index = parse_eselect_index(r.output, name)
    if index is None:
        raise RuntimeError(f"eselect {module}: no entry named {name!r}")

    logger.info("Selected %s %s has number %d", module, name, index)
    ctx.target_cmd(["eselect", module, "set", str(index)])
    ctx.decide(f"eselect_{module}", {"name": name, "index": index})
    return index


def parse_mirrorselect_output(output: str) -> list[str]:
    """Return the hosts of the GENTOO_MIRRORS assignment printed by `mirrorselect -o`.

    mirrorselect puts every host on its own line, joined with ` \\`
    continuations, so the value runs until the line closing the quote.
    Progress messages around the assignment are ignored.
    """

    value: list[str] = []
    collecting = False
    for line in output.splitlines():
        if not collecting:
            if not line.startswith("GENTOO_MIRRORS="):
                continue
            collecting = True
            line = line[len("GENTOO_MIRRORS=") :].lstrip()
            if line[:1] in ('"', "'"):
                line = line[1:]
        if line.rstrip().endswith(('"', "'")):
            value.append(line.rstrip()[:-1])
            break
        value.append(line)
    else:
        if collecting:
            raise RuntimeError("mirrorselect: unterminated GENTOO_MIRRORS value")

    hosts = " ".join(value).replace("\\", " ").split()
    if not hosts:
        raise RuntimeError("mirrorselect: no GENTOO_MIRRORS in output")
    return hosts


def env_update(ctx: "InstallCtx") -> None:
    ctx.target_cmd(["env-update"])
