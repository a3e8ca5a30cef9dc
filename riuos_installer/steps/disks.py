"""Partitions, file systems and mounts of the system disk."""

from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.chroot import umount_live_filesystems
from ..lib.storage import PartitionSpec, check_partitions_count, create_partition, part_device, set_partition_bootable

logger = logging.getLogger(__name__)


def _spec(ctx: InstallCtx, name: str) -> PartitionSpec:
    return PartitionSpec.from_config(ctx.cfg.partition(name))


def _device(ctx: InstallCtx, name: str) -> str:
    return part_device(ctx.cfg.disk, _spec(ctx, name).number)


def _create(ctx: InstallCtx, name: str) -> None:
    dev = create_partition(
        ctx.cfg.disk,
        _spec(ctx, name),
        settle_seconds=float(ctx.cfg.get("disk.settle_seconds", 10)),
        dry_run=ctx.dry_run,
    )
    ctx.decide(f"{name}_part", dev)


def check_initial_partitions_count(ctx: InstallCtx) -> None:
    # Existing partitions are never removed: refuse to touch a used disk.
    check_partitions_count(ctx.cfg.disk, 0, dry_run=ctx.dry_run)


def create_mbr_partition(ctx: InstallCtx) -> None:
    # No file system; reserves the space after the MBR for the bootloader.
    _create(ctx, "mbr")


def create_boot_partition(ctx: InstallCtx) -> None:
    _create(ctx, "boot")


def create_swap_partition(ctx: InstallCtx) -> None:
    _create(ctx, "swap")


def create_root_partition(ctx: InstallCtx) -> None:
    _create(ctx, "root")


def check_created_partitions_count(ctx: InstallCtx) -> None:
    expected = len(ctx.cfg.get("disk.partitions") or {})
    check_partitions_count(ctx.cfg.disk, expected, dry_run=ctx.dry_run)


def set_boot_partition_bootable(ctx: InstallCtx) -> None:
    set_partition_bootable(ctx.cfg.disk, _spec(ctx, "boot").number, dry_run=ctx.dry_run)


def create_boot_file_system(ctx: InstallCtx) -> None:
    fs = _spec(ctx, "boot").fs or "ext2"
    ctx.host_cmd([f"mkfs.{fs}", _device(ctx, "boot")])


def create_swap(ctx: InstallCtx) -> None:
    ctx.host_cmd(["mkswap", _device(ctx, "swap")])


def activate_swap(ctx: InstallCtx) -> None:
    ctx.host_cmd(["swapon", _device(ctx, "swap")])


def create_root_file_system(ctx: InstallCtx) -> None:
    fs = _spec(ctx, "root").fs or "ext4"
    ctx.host_cmd([f"mkfs.{fs}", _device(ctx, "root")])


def mount_root_partition(ctx: InstallCtx) -> None:
    ctx.host_cmd(["mkdir", "-p", ctx.cfg.target_root])
    ctx.host_cmd(["mount", _device(ctx, "root"), ctx.cfg.target_root])


def mount_boot_partition(ctx: InstallCtx) -> None:
    # Has to be mounted under the root partition file system.
    mnt = ctx.path("/boot")
    ctx.host_cmd(["mkdir", "-p", mnt])
    ctx.host_cmd(["mount", _device(ctx, "boot"), mnt])


def unmount_partitions(ctx: InstallCtx) -> None:
    umount_live_filesystems(ctx.cfg.target_root, dry_run=ctx.dry_run)
    ctx.host_cmd(["umount", ctx.path("/boot")])
    ctx.host_cmd(["umount", ctx.cfg.target_root])
    logger.info("Target unmounted; the system can be rebooted from %s", ctx.cfg.disk)
