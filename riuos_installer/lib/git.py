from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..context import InstallCtx


def git_clone(ctx: "InstallCtx", url: str, dst: str) -> None:
    ctx.target_cmd(["git", "clone", url, dst])


def git_checkout(ctx: "InstallCtx", repo: str, ref: str) -> None:
    ctx.target_cmd(["git", "-C", repo, "checkout", ref])


def git_config_global(ctx: "InstallCtx", home: str, key: str, value: str) -> None:
    ctx.target_cmd(["git", "config", "--file", f"{home}/.gitconfig", key, value])
