from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class FstabEntry:
    spec: str
    mountpoint: str
    fstype: str
    options: str = "defaults"
    dump: int = 0
    passno: int = 0

    def render(self) -> str:
        return f"{self.spec}\t{self.mountpoint}\t{self.fstype}\t{self.options}\t{self.dump} {self.passno}"


def render_fstab(entries: Iterable[FstabEntry]) -> str:
    return "".join(e.render() + "\n" for e in entries)
