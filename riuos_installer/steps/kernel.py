"""Kernel sources, configuration, build and initramfs.

The same steps serve both phases: the base phase builds the first kernel
inside the chroot, the programs phase rebuilds it on the booted system after
framebuffer options were added.
"""

from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.kernel import genkernel_initramfs, kernel_config, kernel_make
from ..lib.portage import emerge

logger = logging.getLogger(__name__)


def install_kernel_sources(ctx: InstallCtx) -> None:
    emerge(ctx, [str(ctx.cfg.get("kernel.sources"))])


def generate_default_kernel_config(ctx: InstallCtx) -> None:
    kernel_make(ctx, ["defconfig"])


def backup_default_kernel_config(ctx: InstallCtx) -> None:
    src = ctx.cfg.kernel_src
    ctx.target_cmd(["cp", f"{src}/.config", f"{src}/.config.default"])


def set_kernel_config_for_alsa(ctx: InstallCtx) -> None:
    kernel_config(ctx, enable=list(ctx.cfg.get("kernel.alsa_options") or []))


def compile_kernel(ctx: InstallCtx) -> None:
    kernel_make(ctx, jobs=True)


def install_kernel_modules(ctx: InstallCtx) -> None:
    kernel_make(ctx, ["modules_install"])


def install_kernel(ctx: InstallCtx) -> None:
    kernel_make(ctx, ["install"])


def install_genkernel(ctx: InstallCtx) -> None:
    emerge(ctx, ["sys-kernel/genkernel"])


def build_initramfs(ctx: InstallCtx) -> None:
    genkernel_initramfs(ctx)


def install_firmware(ctx: InstallCtx) -> None:
    emerge(ctx, ["sys-kernel/linux-firmware"])


def recompile_kernel(ctx: InstallCtx) -> None:
    kernel_make(ctx, ["olddefconfig"])
    kernel_make(ctx, jobs=True)


def reinstall_kernel(ctx: InstallCtx) -> None:
    install_kernel(ctx)


def reinstall_kernel_modules(ctx: InstallCtx) -> None:
    install_kernel_modules(ctx)
