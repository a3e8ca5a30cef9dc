import hashlib
import os
import stat
from pathlib import Path

import pytest

from riuos_installer.lib import bootloader
from riuos_installer.steps import bootstrap, disks, graphics, localization, system, user

LISTING = '<a href="stage3-i686-20140320.tar.bz2">stage3-i686-20140320.tar.bz2</a>\n'
TARBALL = "stage3-i686-20140320.tar.bz2"


def test_partitioning_commands(procs, make_ctx):
    ctx = make_ctx()
    procs.respond(["lsblk"], output="disk\npart\npart\npart\npart\n")

    disks.create_swap_partition(ctx)
    disks.check_created_partitions_count(ctx)
    disks.set_boot_partition_bootable(ctx)

    assert procs.argvs[0] == ["fdisk", "/dev/sda"]
    assert procs.calls[0].input == "n\np\n3\n\n+1G\nt\n3\n82\nw\n"
    assert procs.argvs[1] == ["lsblk", "-ln", "-o", "TYPE", "/dev/sda"]
    assert procs.calls[2].input == "a\n2\nw\n"
    assert ctx.state["decisions"]["swap_part"] == "/dev/sda3"


def test_used_disk_is_refused(procs, make_ctx):
    procs.respond(["lsblk"], output="disk\npart\n")

    with pytest.raises(RuntimeError, match="Expected:0; found:1"):
        disks.check_initial_partitions_count(make_ctx())


def test_file_systems_and_mounts(procs, make_ctx):
    ctx = make_ctx()
    root = ctx.cfg.target_root

    disks.create_boot_file_system(ctx)
    disks.create_root_file_system(ctx)
    disks.mount_root_partition(ctx)
    disks.mount_boot_partition(ctx)

    assert procs.argvs == [
        ["mkfs.ext2", "/dev/sda2"],
        ["mkfs.ext4", "/dev/sda4"],
        ["mkdir", "-p", root],
        ["mount", "/dev/sda4", root],
        ["mkdir", "-p", f"{root}/boot"],
        ["mount", "/dev/sda2", f"{root}/boot"],
    ]


def _fake_download(payload, digest=None):
    def download(url, dst, *, dry_run=False):
        p = Path(dst)
        p.parent.mkdir(parents=True, exist_ok=True)
        if dst.endswith(".DIGESTS"):
            p.write_text(f"# SHA512 HASH\n{digest}  {TARBALL}\n", encoding="utf-8")
        else:
            p.write_bytes(payload)

    return download


def test_get_stage3_tarball(procs, make_ctx, monkeypatch):
    ctx = make_ctx()
    root = ctx.cfg.target_root
    procs.respond(["curl", "-sL"], output=LISTING)
    good = hashlib.sha512(b"tarball").hexdigest()
    monkeypatch.setattr(bootstrap, "download_file", _fake_download(b"tarball", good))

    bootstrap.get_stage3_tarball(ctx)

    assert ctx.state["decisions"]["stage3_tarball"] == TARBALL
    assert procs.find("tar", "xjpf", f"{root}/{TARBALL}", "-C", root)
    assert procs.argvs[-2:] == [["rm", f"{root}/{TARBALL}"], ["rm", f"{root}/{TARBALL}.DIGESTS"]]


def test_get_stage3_tarball_aborts_on_bad_digest(procs, make_ctx, monkeypatch):
    ctx = make_ctx(stage3={"tarball": TARBALL})
    monkeypatch.setattr(bootstrap, "download_file", _fake_download(b"tarball", "0" * 128))

    with pytest.raises(RuntimeError, match="aborting"):
        bootstrap.get_stage3_tarball(ctx)

    assert not procs.find("tar")
    assert not procs.find("curl")


def test_make_conf_edits(make_ctx, target_file):
    ctx = make_ctx()
    conf = target_file(ctx, bootstrap.MAKE_CONF, 'CFLAGS="-O2 -pipe"\nCXXFLAGS="${CFLAGS}"\n')

    bootstrap.set_compilation_options(ctx)
    bootstrap.select_mirrors(ctx)

    lines = conf.read_text(encoding="utf-8").splitlines()
    assert lines[0] == f'CFLAGS="{ctx.cfg.get("portage.cflags")}"'
    assert lines[1] == 'CXXFLAGS="${CFLAGS}"'
    assert lines[2] == 'MAKEOPTS="-j2"'
    assert lines[3] == f'GENTOO_MIRRORS="{" ".join(ctx.cfg.mirrors)}"'


def test_make_conf_without_cflags_fails(make_ctx, target_file):
    ctx = make_ctx()
    target_file(ctx, bootstrap.MAKE_CONF, 'CHOST="i686-pc-linux-gnu"\n')

    with pytest.raises(RuntimeError, match="CFLAGS"):
        bootstrap.set_compilation_options(ctx)


MIRRORSELECT_OUTPUT = (
    "* Downloading a list of mirrors...\n"
    "Got 3 mirrors.\n"
    'GENTOO_MIRRORS="http://a/ \\\n'
    "    http://b/ \\\n"
    '    http://c/"\n'
)


def test_automatic_mirror_selection_writes_every_mirror(procs, make_ctx, target_file):
    ctx = make_ctx()
    conf = target_file(ctx, bootstrap.MAKE_CONF, 'CFLAGS="-O2"\n')
    procs.respond(["mirrorselect"], output=MIRRORSELECT_OUTPUT)

    bootstrap.select_mirrors_automatically(ctx)

    assert conf.read_text(encoding="utf-8") == 'CFLAGS="-O2"\nGENTOO_MIRRORS="http://a/ http://b/ http://c/"\n'
    assert procs.argvs == [["mirrorselect", "-c", "Poland", "-s", "3", "-o"]]
    assert ctx.state["decisions"]["mirrors"] == ["http://a/", "http://b/", "http://c/"]


def test_automatic_mirror_selection_without_mirrors_fails(procs, make_ctx, target_file):
    ctx = make_ctx()
    conf = target_file(ctx, bootstrap.MAKE_CONF, "")
    procs.respond(["mirrorselect"], output="No mirrors found\n")

    with pytest.raises(RuntimeError, match="no GENTOO_MIRRORS"):
        bootstrap.select_mirrors_automatically(ctx)

    assert conf.read_text(encoding="utf-8") == ""


def test_configure_fstab(make_ctx, target_file):
    ctx = make_ctx()
    fstab = target_file(ctx, "/etc/fstab", "# <fs> <mountpoint> <type> <opts> <dump/pass>\n")

    system.configure_fstab(ctx)

    assert fstab.read_text(encoding="utf-8").splitlines()[1:] == [
        "/dev/sda2\t/boot\text2\tnoauto,noatime\t0 2",
        "/dev/sda3\tnone\tswap\tsw\t0 0",
        "/dev/sda4\t/\text4\tnoatime\t0 1",
    ]


def test_set_locales(procs, make_ctx, target_file):
    ctx = make_ctx()
    locale_gen = target_file(
        ctx,
        "/etc/locale.gen",
        "#en_US ISO-8859-1\n#en_US.UTF-8 UTF-8\n#de_DE.UTF-8 UTF-8\n#pl_PL.UTF-8 UTF-8\n",
    )
    procs.respond(["eselect", "locale", "list"], output="  [1]   C\n  [2]   en_US.utf8\n")

    localization.set_locales(ctx)

    assert locale_gen.read_text(encoding="utf-8") == (
        "en_US ISO-8859-1\nen_US.UTF-8 UTF-8\n#de_DE.UTF-8 UTF-8\npl_PL.UTF-8 UTF-8\n"
    )
    root = ctx.cfg.target_root
    assert procs.argvs == [
        ["chroot", root, "locale-gen"],
        ["chroot", root, "eselect", "locale", "list"],
        ["chroot", root, "eselect", "locale", "set", "2"],
        ["chroot", root, "env-update"],
    ]


def test_kernel_cmdline_accumulates(make_ctx, target_file):
    ctx = make_ctx()
    grub = target_file(ctx, bootloader.GRUB_DEFAULTS, 'GRUB_TIMEOUT=5\nGRUB_CMDLINE_LINUX=""\n')

    graphics.set_uvesafb_boot_params(ctx)
    graphics.set_fbsplash_boot_params(ctx)

    text = grub.read_text(encoding="utf-8")
    assert text.startswith("GRUB_TIMEOUT=5\n")
    assert text.count("GRUB_CMDLINE_LINUX=") == 1
    assert 'GRUB_CMDLINE_LINUX="video=uvesafb:' in text
    assert text.rstrip().endswith('splash=silent,theme:riuos console=tty1 quiet"')


def test_splash_settings_in_genkernel_conf(make_ctx, target_file):
    ctx = make_ctx()
    conf = target_file(ctx, "/etc/genkernel.conf", '# SPLASH="no"\n#SPLASH_THEME="gentoo"\nOTHER=1\n')

    graphics.enable_splash_theme_inclusion_to_initramfs(ctx)

    assert conf.read_text(encoding="utf-8") == 'SPLASH="yes"\nSPLASH_THEME="riuos"\nOTHER=1\n'


def test_sudoers_drop_in(make_ctx):
    ctx = make_ctx()

    user.add_regular_user_to_sudoers(ctx)

    p = Path(ctx.path("/etc/sudoers.d/adam"))
    assert p.read_text(encoding="utf-8") == "adam ALL=(ALL) ALL\n"
    assert stat.S_IMODE(os.stat(p).st_mode) == 0o440


def test_install_dotfile(procs, make_ctx):
    ctx = make_ctx(in_chroot=False)

    user.install_bashrc_dotfile(ctx)

    riuos_dir = ctx.cfg.riuos_dir
    dotfiles = ctx.cfg.get("riuos.dotfiles_dir")
    assert procs.argvs == [["ln", "-sfn", f"{riuos_dir}/{dotfiles}/.bashrc", "/home/adam/.bashrc"]]


def test_copy_riuos_files(make_ctx, tmp_path):
    src = tmp_path / "src"
    (src / "logs").mkdir(parents=True)
    (src / "logs" / "01_install_base_system.log").write_text("done\n", encoding="utf-8")
    ctx = make_ctx()

    system.copy_riuos_files(ctx)

    copied = Path(ctx.path(ctx.cfg.get("riuos.install_dir"))) / "logs" / "01_install_base_system.log"
    assert copied.read_text(encoding="utf-8") == "done\n"


def test_dry_run_touches_nothing(procs, make_ctx):
    ctx = make_ctx(dry_run=True)

    bootstrap.get_stage3_tarball(ctx)
    system.configure_fstab(ctx)
    localization.set_locales(ctx)

    assert procs.calls == []
    assert not Path(ctx.cfg.target_root).exists()


def test_copy_riuos_files_refuses_target_inside_source(make_ctx, tmp_path):
    ctx = make_ctx(riuos={"source_dir": str(tmp_path)})

    with pytest.raises(RuntimeError, match="into itself"):
        system.copy_riuos_files(ctx)

    assert not Path(ctx.cfg.target_root).exists()
