"""Framebuffer console: uvesafb driver, yaft terminal and fbsplash theme.

Kernel options and boot parameters set here take effect once the kernel,
initramfs and grub.cfg are rebuilt at the end of the programs phase.
"""

from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.bootloader import append_kernel_cmdline
from ..lib.files import copy_tree, replace_line, write_file
from ..lib.git import git_clone
from ..lib.kernel import genkernel_initramfs, kernel_config
from ..lib.portage import emerge

logger = logging.getLogger(__name__)

SRC_DIR = "/usr/local/src"


def _gfx(ctx: InstallCtx, key: str) -> str:
    return str(ctx.cfg.get(f"graphics.{key}"))


def _yaft_dir() -> str:
    return f"{SRC_DIR}/yaft"


def _theme(ctx: InstallCtx) -> str:
    return _gfx(ctx, "fbsplash_theme")


def rebuild_klibc_with_uvesafb_support(ctx: InstallCtx) -> None:
    # klibc is built against the configured kernel tree v86d runs on.
    emerge(ctx, ["dev-libs/klibc"], options=["--oneshot"])


def install_v86d(ctx: InstallCtx) -> None:
    emerge(ctx, ["sys-apps/v86d"])


def set_v86d_kernel_options(ctx: InstallCtx) -> None:
    kernel_config(
        ctx,
        enable=["CONFIG_CONNECTOR", "CONFIG_FB", "CONFIG_FB_UVESA"],
        set_str={"CONFIG_INITRAMFS_SOURCE": "/usr/share/v86d/initramfs"},
    )


def set_uvesafb_boot_params(ctx: InstallCtx) -> None:
    append_kernel_cmdline(ctx, f"video=uvesafb:{_gfx(ctx, 'resolution')},{_gfx(ctx, 'uvesafb_options')}")


def add_user_to_video_group(ctx: InstallCtx) -> None:
    ctx.target_cmd(["gpasswd", "-a", ctx.cfg.username, "video"])


def install_idump_dependencies(ctx: InstallCtx) -> None:
    emerge(ctx, ["media-libs/libpng", "media-libs/libjpeg-turbo"])


def install_idump(ctx: InstallCtx) -> None:
    dst = f"{SRC_DIR}/idump"
    git_clone(ctx, _gfx(ctx, "idump_repo"), dst)
    ctx.target_cmd(["make", "-C", dst])
    ctx.target_cmd(["make", "-C", dst, "install"])


def clone_yaft_repo(ctx: InstallCtx) -> None:
    git_clone(ctx, _gfx(ctx, "yaft_repo"), _yaft_dir())


def configure_yaft_font(ctx: InstallCtx) -> None:
    fonts = " ".join(ctx.cfg.get("graphics.yaft_fonts") or [])
    replace_line(
        ctx.path(f"{_yaft_dir()}/makefile"),
        r"^\s*\./mkfont_bdf ",
        f"\t./mkfont_bdf table/alias {fonts} > glyph.h",
        dry_run=ctx.dry_run,
    )


def configure_yaft_colors(ctx: InstallCtx) -> None:
    src = f"{ctx.cfg.riuos_dir}/{_gfx(ctx, 'yaft_color_file')}"
    ctx.target_cmd(["cp", src, f"{_yaft_dir()}/color.h"])


def build_and_install_yaft(ctx: InstallCtx) -> None:
    ctx.target_cmd(["make", "-C", _yaft_dir()])
    ctx.target_cmd(["make", "-C", _yaft_dir(), "install"])


def install_fbsplash(ctx: InstallCtx) -> None:
    write_file(
        ctx.path("/etc/portage/package.use/splashutils"),
        "media-gfx/splashutils fbcondecor png truetype\n",
        dry_run=ctx.dry_run,
    )
    emerge(ctx, ["media-gfx/splashutils"])


def install_custom_fbsplash_theme(ctx: InstallCtx) -> None:
    src = f"{ctx.cfg.riuos_dir}/{_gfx(ctx, 'fbsplash_theme_dir')}/{_theme(ctx)}"
    copy_tree(ctx.path(src), ctx.path(f"/etc/splash/{_theme(ctx)}"), dry_run=ctx.dry_run)


def enable_splash_theme_inclusion_to_initramfs(ctx: InstallCtx) -> None:
    # Both settings ship commented out.
    conf = ctx.path("/etc/genkernel.conf")
    replace_line(conf, r"^#?\s*SPLASH=", 'SPLASH="yes"', dry_run=ctx.dry_run)
    replace_line(conf, r"^#?\s*SPLASH_THEME=", f'SPLASH_THEME="{_theme(ctx)}"', dry_run=ctx.dry_run)


def set_fbsplash_boot_params(ctx: InstallCtx) -> None:
    append_kernel_cmdline(ctx, f"splash=silent,theme:{_theme(ctx)} console=tty1 quiet")


def set_login_message(ctx: InstallCtx) -> None:
    write_file(ctx.path("/etc/issue"), _gfx(ctx, "login_message"), dry_run=ctx.dry_run)


def disable_last_login_message(ctx: InstallCtx) -> None:
    ctx.target_cmd(["touch", f"{ctx.cfg.home_dir}/.hushlogin"])


def rebuild_initramfs(ctx: InstallCtx) -> None:
    genkernel_initramfs(ctx, f"--splash={_theme(ctx)}")
