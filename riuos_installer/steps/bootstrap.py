"""Stage3 unpacking and the Portage configuration needed before chrooting."""

from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib import chroot
from ..lib.files import append_line, replace_var_value
from ..lib.net import download_file, fetch_text
from ..lib.portage import parse_mirrorselect_output
from ..lib.stage3 import find_tarball_name, verify_tarball

logger = logging.getLogger(__name__)

MAKE_CONF = "/etc/portage/make.conf"


def _stage3_name(ctx: InstallCtx, url: str) -> str:
    configured = str(ctx.cfg.get("stage3.tarball") or "")
    if configured:
        logger.info("Using stage3 tarball specified in config: %s", configured)
        return configured

    listing = fetch_text(url, dry_run=ctx.dry_run)
    if ctx.dry_run:
        logger.info("Would pick the current stage3 tarball from %s", url)
        return "stage3-current.tar.bz2"

    name = find_tarball_name(listing, str(ctx.cfg.get("stage3.pattern")))
    logger.info("Using current stage3 tarball found in web: %s", name)
    return name


def get_stage3_tarball(ctx: InstallCtx) -> None:
    url = str(ctx.cfg.get("stage3.url")).rstrip("/")
    root = ctx.cfg.target_root

    name = _stage3_name(ctx, url)
    ctx.decide("stage3_tarball", name)

    local_tarball = f"{root}/{name}"
    local_digests = f"{local_tarball}.DIGESTS"

    logger.info("Downloading stage3 tarball file")
    download_file(f"{url}/{name}", local_tarball, dry_run=ctx.dry_run)
    logger.info("Downloading stage3 tarball digest file")
    download_file(f"{url}/{name}.DIGESTS", local_digests, dry_run=ctx.dry_run)

    logger.info("Verifying tarball integrity")
    if not ctx.dry_run:
        verify_tarball(local_tarball, local_digests)

    logger.info("Unpack stage3 tarball")
    ctx.host_cmd(["tar", "xjpf", local_tarball, "-C", root, "--xattrs", "--numeric-owner"], quiet=True)

    ctx.host_cmd(["rm", local_tarball])
    ctx.host_cmd(["rm", local_digests])


def set_compilation_options(ctx: InstallCtx) -> None:
    path = ctx.path(MAKE_CONF)
    logger.info("Replace CFLAGS")
    replace_var_value("CFLAGS", path, str(ctx.cfg.get("portage.cflags")), quoted=True, dry_run=ctx.dry_run)
    logger.info("Set MAKEOPTS")
    append_line(path, f'MAKEOPTS="{ctx.cfg.get("portage.makeopts")}"', dry_run=ctx.dry_run)


def select_mirrors(ctx: InstallCtx) -> None:
    servers = " ".join(ctx.cfg.mirrors)
    append_line(ctx.path(MAKE_CONF), f'GENTOO_MIRRORS="{servers}"', dry_run=ctx.dry_run)


def select_mirrors_automatically(ctx: InstallCtx) -> None:
    r = ctx.host_cmd(
        [
            "mirrorselect",
            "-c",
            str(ctx.cfg.get("portage.mirrorselect_country")),
            "-s",
            str(ctx.cfg.get("portage.mirrorselect_count", 3)),
            "-o",
        ],
    )
    if ctx.dry_run:
        logger.info("Would append the mirrors picked by mirrorselect to %s", MAKE_CONF)
        return
    hosts = parse_mirrorselect_output(r.output)
    ctx.decide("mirrors", hosts)
    append_line(ctx.path(MAKE_CONF), f'GENTOO_MIRRORS="{" ".join(hosts)}"')


def setup_gentoo_repos(ctx: InstallCtx) -> None:
    ctx.host_cmd(["mkdir", "-p", ctx.path("/etc/portage/repos.conf")])
    ctx.host_cmd(
        [
            "cp",
            ctx.path("/usr/share/portage/config/repos.conf"),
            ctx.path("/etc/portage/repos.conf/gentoo.conf"),
        ]
    )


def copy_dns_info(ctx: InstallCtx) -> None:
    ctx.host_cmd(["cp", "-L", "/etc/resolv.conf", ctx.path("/etc/")])


def mount_live_filesystems(ctx: InstallCtx) -> None:
    chroot.mount_live_filesystems(ctx.cfg.target_root, dry_run=ctx.dry_run)


def install_portage_snapshot(ctx: InstallCtx) -> None:
    ctx.target_cmd(["emerge-webrsync"])
