from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionSpec:
    number: int
    size: str  # fdisk size, e.g. "+128M"; "" takes the remaining space
    code: str  # fdisk type code, e.g. "82" for swap, "83" for Linux
    kind: str = "p"  # p=primary, e=extended
    fs: str | None = None

    @classmethod
    def from_config(cls, raw: dict) -> "PartitionSpec":
        return cls(
            number=int(raw["number"]),
            size=str(raw.get("size") or ""),
            code=str(raw["code"]),
            kind=str(raw.get("kind", "p")),
            fs=raw.get("fs"),
        )


def part_device(disk: str, n: int) -> str:
    # nvme/mmcblk devices use p suffix
    if disk.endswith(tuple("0123456789")):
        return f"{disk}p{n}"
    return f"{disk}{n}"


def fdisk_new_partition_script(spec: PartitionSpec) -> str:
    """fdisk keystrokes creating one partition and setting its type.

    When the disk holds a single partition fdisk does not ask which one to
    change, so the partition number is left out for partition 1.
    """

    type_nb = "" if spec.number == 1 else str(spec.number)
    return "\n".join(
        [
            "n",
            spec.kind,
            str(spec.number),
            "",  # default first sector
            spec.size,
            "t",
            type_nb,
            spec.code,
            "w",
            "",
        ]
    )


def create_partition(disk: str, spec: PartitionSpec, *, settle_seconds: float = 10, dry_run: bool = False) -> str:
    logger.info(
        "Creating partition %s on %s (type=%s size=%s code=%s)",
        spec.number,
        disk,
        spec.kind,
        spec.size or "rest",
        spec.code,
    )
    run_cmd(["fdisk", disk], input_text=fdisk_new_partition_script(spec), dry_run=dry_run)
    if not dry_run and settle_seconds:
        # Re-reading the partition table right away fails with
        # "Device or resource busy".
        time.sleep(settle_seconds)
    return part_device(disk, spec.number)


def set_partition_bootable(disk: str, number: int, *, dry_run: bool = False) -> None:
    """Toggle the bootable flag; best run once all partitions exist."""

    run_cmd(["fdisk", disk], input_text=f"a\n{number}\nw\n", dry_run=dry_run)


def count_partitions(lsblk_output: str) -> int:
    """Partitions listed by `lsblk -ln -o TYPE <disk>`."""

    return sum(1 for line in lsblk_output.splitlines() if line.strip() == "part")


def check_partitions_count(disk: str, expected: int, *, dry_run: bool = False) -> None:
    r = run_cmd(["lsblk", "-ln", "-o", "TYPE", disk], quiet=True, dry_run=dry_run)
    if dry_run:
        return

    found = count_partitions(r.output)
    if found != expected:
        raise RuntimeError(f"Wrong partition count on {disk}. Expected:{expected}; found:{found}")
    logger.info("Partition count on %s: %d", disk, found)
