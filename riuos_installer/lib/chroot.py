from __future__ import annotations

import logging
from typing import Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


def chroot_cmd(target_root: str, argv: Sequence[str], **kwargs) -> CmdResult:
    """Run a command inside target root."""

    return run_cmd(["chroot", target_root, *argv], **kwargs)


def mount_live_filesystems(target_root: str, *, dry_run: bool = False) -> None:
    # proc for emerge/gcc; rbind+rslave so nested mounts (/dev/pts, /dev/shm,
    # efivars) come along and unmounts do not propagate back to the host
    run_cmd(["mount", "-t", "proc", "proc", f"{target_root}/proc"], dry_run=dry_run)
    for src in ("/sys", "/dev"):
        dst = f"{target_root}{src}"
        run_cmd(["mount", "--rbind", src, dst], dry_run=dry_run)
        run_cmd(["mount", "--make-rslave", dst], dry_run=dry_run)


def umount_live_filesystems(target_root: str, *, dry_run: bool = False) -> None:
    for p in [f"{target_root}/dev", f"{target_root}/sys", f"{target_root}/proc"]:
        run_cmd(["umount", "-lR", p], check=False, dry_run=dry_run)
