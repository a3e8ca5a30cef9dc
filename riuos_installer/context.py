from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

from .config import InstallConfig
from .lib.chroot import chroot_cmd
from .lib.command import CmdResult, run_cmd


@dataclass
class InstallCtx:
    """What every step gets: config, dry-run flag and where the target lives.

    The base phase runs from the live medium and reaches the new system
    through chroot; the programs phase runs on the booted system itself.
    """

    cfg: InstallConfig
    in_chroot: bool
    dry_run: bool = False
    state: Dict[str, Any] = field(default_factory=dict)

    def path(self, target_path: str) -> str:
        """Host path of a file that lives at target_path on the new system."""

        if not self.in_chroot:
            return target_path
        return self.cfg.target_root.rstrip("/") + "/" + target_path.lstrip("/")

    def target_cmd(self, argv: Sequence[str], **kwargs) -> CmdResult:
        kwargs.setdefault("dry_run", self.dry_run)
        if self.in_chroot:
            return chroot_cmd(self.cfg.target_root, argv, **kwargs)
        return run_cmd(argv, **kwargs)

    def host_cmd(self, argv: Sequence[str], **kwargs) -> CmdResult:
        kwargs.setdefault("dry_run", self.dry_run)
        return run_cmd(argv, **kwargs)

    def decide(self, key: str, value: Any) -> None:
        """Record a value picked at run time (tarball name, eselect index)."""

        self.state.setdefault("decisions", {})[key] = value
