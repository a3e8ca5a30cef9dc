"""fstab, networking, system logger, bootloader and root account."""

from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.accounts import set_password
from ..lib.bootloader import grub_mkconfig, install_grub
from ..lib.files import append_line, copy_tree, replace_var_value
from ..lib.fstab import FstabEntry, render_fstab
from ..lib.portage import emerge, emerge_noreplace, rc_update_add
from ..lib.storage import PartitionSpec, part_device

logger = logging.getLogger(__name__)


def fstab_entries(ctx: InstallCtx) -> list[FstabEntry]:
    disk = ctx.cfg.disk
    boot = PartitionSpec.from_config(ctx.cfg.partition("boot"))
    swap = PartitionSpec.from_config(ctx.cfg.partition("swap"))
    root = PartitionSpec.from_config(ctx.cfg.partition("root"))
    return [
        FstabEntry(part_device(disk, boot.number), "/boot", boot.fs or "ext2", "noauto,noatime", 0, 2),
        FstabEntry(part_device(disk, swap.number), "none", "swap", "sw", 0, 0),
        FstabEntry(part_device(disk, root.number), "/", root.fs or "ext4", "noatime", 0, 1),
    ]


def configure_fstab(ctx: InstallCtx) -> None:
    path = ctx.path("/etc/fstab")
    for line in render_fstab(fstab_entries(ctx)).splitlines():
        append_line(path, line, dry_run=ctx.dry_run)


def set_hostname(ctx: InstallCtx) -> None:
    replace_var_value(
        "hostname",
        ctx.path("/etc/conf.d/hostname"),
        str(ctx.cfg.get("network.hostname")),
        quoted=True,
        dry_run=ctx.dry_run,
    )


def install_netifrc(ctx: InstallCtx) -> None:
    emerge_noreplace(ctx, ["net-misc/netifrc"])


def set_dhcp(ctx: InstallCtx) -> None:
    iface = str(ctx.cfg.get("network.interface"))
    append_line(ctx.path("/etc/conf.d/net"), f'config_{iface}="dhcp"', dry_run=ctx.dry_run)


def set_network_starting(ctx: InstallCtx) -> None:
    iface = str(ctx.cfg.get("network.interface"))
    ctx.target_cmd(["ln", "-sf", "net.lo", f"/etc/init.d/net.{iface}"])
    rc_update_add(ctx, f"net.{iface}", "default")


def install_dhcpcd(ctx: InstallCtx) -> None:
    emerge(ctx, ["net-misc/dhcpcd"])


def install_system_logger(ctx: InstallCtx) -> None:
    emerge(ctx, ["app-admin/syslog-ng"])
    rc_update_add(ctx, "syslog-ng", "default")


def install_bootloader(ctx: InstallCtx) -> None:
    emerge(ctx, ["sys-boot/grub"])
    install_grub(ctx, ctx.cfg.disk)


def configure_bootloader(ctx: InstallCtx) -> None:
    grub_mkconfig(ctx)


def regenerate_bootloader_config(ctx: InstallCtx) -> None:
    # Picks up boot parameters appended by the framebuffer steps.
    grub_mkconfig(ctx)


def set_root_password(ctx: InstallCtx) -> None:
    set_password(ctx, "root")


def copy_riuos_files(ctx: InstallCtx) -> None:
    """Copy the installer tree, logs included, onto the new system."""

    copy_tree(ctx.cfg.source_dir, ctx.path(str(ctx.cfg.get("riuos.install_dir"))), dry_run=ctx.dry_run)
