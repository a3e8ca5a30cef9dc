"""Vim with pathogen-managed plugins."""

from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.git import git_clone
from ..lib.net import download_file
from ..lib.portage import emerge
from .user import install_dotfile

logger = logging.getLogger(__name__)


def _bundle_dir(ctx: InstallCtx) -> str:
    return f"{ctx.cfg.home_dir}/.vim/bundle"


def _install_plugin(ctx: InstallCtx, name: str) -> None:
    url = (ctx.cfg.get("vim.plugins") or {}).get(name)
    if not url:
        raise RuntimeError(f"vim.plugins.{name} is not configured")
    git_clone(ctx, str(url), f"{_bundle_dir(ctx)}/{name}")


def install_vim(ctx: InstallCtx) -> None:
    emerge(ctx, ["app-editors/vim"])


def install_pathogen(ctx: InstallCtx) -> None:
    ctx.target_cmd(["mkdir", "-p", _bundle_dir(ctx)])
    download_file(
        str(ctx.cfg.get("vim.pathogen_url")),
        ctx.path(f"{ctx.cfg.home_dir}/.vim/autoload/pathogen.vim"),
        dry_run=ctx.dry_run,
    )


def install_nerd_tree(ctx: InstallCtx) -> None:
    _install_plugin(ctx, "nerdtree")


def install_nerd_commenter(ctx: InstallCtx) -> None:
    _install_plugin(ctx, "nerdcommenter")


def install_tagbar(ctx: InstallCtx) -> None:
    # tagbar is a front end to ctags
    emerge(ctx, ["dev-util/ctags"])
    _install_plugin(ctx, "tagbar")


def install_vimrc_dotfile(ctx: InstallCtx) -> None:
    install_dotfile(ctx, ".vimrc")
