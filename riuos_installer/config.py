from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import yaml

# Relative paths in the config (log_dir, riuos.source_dir) are taken from
# here, the directory holding the installer, never from the cwd.
INSTALLER_DIR = Path(__file__).resolve().parent.parent

DEFAULTS: Dict[str, Any] = {
    "target_root": "/mnt/gentoo",
    "log_dir": "../logs",
    "disk": {
        "device": "sda",
        # fdisk re-reads the partition table asynchronously; sync/partprobe
        # did not avoid "Device or resource busy".
        "settle_seconds": 10,
        "partitions": {
            "mbr": {"number": 1, "size": "+2M", "code": "83"},
            "boot": {"number": 2, "size": "+128M", "code": "83", "fs": "ext2"},
            "swap": {"number": 3, "size": "+1G", "code": "82"},
            "root": {"number": 4, "size": "", "code": "83", "fs": "ext4"},
        },
    },
    "stage3": {
        "url": "http://distfiles.gentoo.org/releases/x86/autobuilds/current-install-x86-minimal",
        # Empty: pick the current tarball from the directory listing.
        "tarball": "",
        "pattern": r"stage3-i686-[0-9]*\.tar\.bz2",
    },
    "portage": {
        "cflags": "-march=pentium2 -mno-accumulate-outgoing-args -mno-fxsr -mno-sahf -O2",
        "makeopts": "-j2",
        # manual | auto
        "mirror_select": "manual",
        "mirrorselect_country": "Poland",
        "mirrorselect_count": 3,
        "mirrors": [
            "rsync://gentoo.prz.rzeszow.pl/gentoo",
            "http://gentoo.prz.rzeszow.pl",
            "rsync://ftp.vectranet.pl/gentoo/",
            "ftp://ftp.vectranet.pl/gentoo/",
            "http://ftp.vectranet.pl/gentoo/",
        ],
        "profile": "default/linux/x86/13.0",
        "use_flags": ["-X", "-gnome", "-kde", "alsa", "unicode", "bash-completion"],
    },
    "localization": {
        "timezone": "Europe/Warsaw",
        "locale_gen": ["en_US ISO-8859-1", "en_US.UTF-8 UTF-8", "pl_PL.UTF-8 UTF-8"],
        "locale": "en_US.utf8",
        "keymap": "pl",
    },
    "kernel": {
        "sources": "sys-kernel/gentoo-sources",
        "src_dir": "/usr/src/linux",
        "alsa_options": [
            "CONFIG_SOUND",
            "CONFIG_SND",
            "CONFIG_SND_PCI",
            "CONFIG_SND_HDA_INTEL",
            "CONFIG_SND_INTEL8X0",
        ],
    },
    "network": {
        "hostname": "riuos",
        "interface": "eth0",
    },
    "accounts": {
        "password_attempts": 3,
        "username": "adam",
        "groups": ["users", "wheel", "audio", "cdrom", "usb", "portage"],
        "shell": "/bin/bash",
        "git_name": "lypant",
        "git_email": "lypant@tlen.pl",
    },
    "riuos": {
        "repo_url": "https://github.com/lypant/riuos",
        "branch": "master",
        # Tree the installer runs from; copied into the target by the base
        # phase, then merged over a fresh clone by the programs phase.
        "source_dir": "..",
        "install_dir": "/riuos",
        "bin_dir": "bin",
        "dotfiles_dir": "dotfiles",
    },
    "vim": {
        "pathogen_url": "https://tpo.pe/pathogen.vim",
        "plugins": {
            "nerdtree": "https://github.com/scrooloose/nerdtree.git",
            "nerdcommenter": "https://github.com/scrooloose/nerdcommenter.git",
            "tagbar": "https://github.com/majutsushi/tagbar.git",
        },
    },
    "graphics": {
        "resolution": "1024x768-32",
        "uvesafb_options": "mtrr:3,ywrap",
        "idump_repo": "https://github.com/uobikiemukot/idump.git",
        "yaft_repo": "https://github.com/uobikiemukot/yaft.git",
        "yaft_fonts": [
            "fonts/milkjf/milkjf_k16.bdf",
            "fonts/milkjf/milkjf_8x16r.bdf",
            "fonts/terminus/ter-u16n.bdf",
        ],
        "yaft_color_file": "yaft/color.h",
        "fbsplash_theme": "riuos",
        "fbsplash_theme_dir": "fbsplash",
        "login_message": "Welcome to riuos\n\n",
    },
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


@dataclass(frozen=True)
class InstallConfig:
    raw: Dict[str, Any]

    def get(self, dotted: str, default: Any = None) -> Any:
        node: Any = self.raw
        for part in dotted.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def partition(self, name: str) -> Dict[str, Any]:
        p = self.get(f"disk.partitions.{name}")
        if not p:
            raise RuntimeError(f"disk.partitions.{name} is not configured")
        return p

    @property
    def target_root(self) -> str:
        return str(self.raw.get("target_root") or "/mnt/gentoo")

    @property
    def log_dir(self) -> str:
        return installer_path(str(self.raw.get("log_dir") or "../logs"))

    @property
    def source_dir(self) -> str:
        """riuos tree the installer runs from."""
        return installer_path(str(self.get("riuos.source_dir") or ".."))

    @property
    def disk(self) -> str:
        return "/dev/" + str(self.get("disk.device", "sda")).replace("/dev/", "", 1)

    @property
    def username(self) -> str:
        return str(self.get("accounts.username"))

    @property
    def home_dir(self) -> str:
        return f"/home/{self.username}"

    @property
    def riuos_dir(self) -> str:
        """Clone of the riuos repository in the regular user's home."""
        return f"{self.home_dir}/riuos"

    @property
    def kernel_src(self) -> str:
        return str(self.get("kernel.src_dir", "/usr/src/linux"))

    @property
    def mirrors(self) -> List[str]:
        return list(self.get("portage.mirrors") or [])


def installer_path(path: str) -> str:
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = INSTALLER_DIR / p
    return os.path.normpath(str(p))


def load_config(path: str | None = None) -> InstallConfig:
    """Return the defaults, overridden by the YAML file at path if given."""

    if not path:
        return InstallConfig(raw=copy.deepcopy(DEFAULTS))

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("install config must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    return InstallConfig(raw=deep_merge(DEFAULTS, raw))
