"""Regular user account, sudo, the riuos repository and home directory layout."""

from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.accounts import set_password
from ..lib.files import copy_tree, write_file
from ..lib.git import git_checkout, git_clone, git_config_global
from ..lib.portage import emerge, env_update

logger = logging.getLogger(__name__)


def create_regular_user_account(ctx: InstallCtx) -> None:
    groups = ",".join(ctx.cfg.get("accounts.groups") or [])
    ctx.target_cmd(
        [
            "useradd",
            "-m",
            "-G",
            groups,
            "-s",
            str(ctx.cfg.get("accounts.shell")),
            ctx.cfg.username,
        ]
    )


def set_regular_user_password(ctx: InstallCtx) -> None:
    set_password(ctx, ctx.cfg.username)


def install_sudo(ctx: InstallCtx) -> None:
    emerge(ctx, ["app-admin/sudo"])


def add_regular_user_to_sudoers(ctx: InstallCtx) -> None:
    user = ctx.cfg.username
    # sudo refuses drop-ins that are group/world writable.
    write_file(
        ctx.path(f"/etc/sudoers.d/{user}"),
        f"{user} ALL=(ALL) ALL\n",
        mode=0o440,
        dry_run=ctx.dry_run,
    )


def install_git(ctx: InstallCtx) -> None:
    emerge(ctx, ["dev-vcs/git"])


def configure_git_user(ctx: InstallCtx) -> None:
    home = ctx.cfg.home_dir
    git_config_global(ctx, home, "user.name", str(ctx.cfg.get("accounts.git_name")))
    git_config_global(ctx, home, "user.email", str(ctx.cfg.get("accounts.git_email")))


def clone_riuos_repo(ctx: InstallCtx) -> None:
    git_clone(ctx, str(ctx.cfg.get("riuos.repo_url")), ctx.cfg.riuos_dir)


def checkout_current_riuos_branch(ctx: InstallCtx) -> None:
    git_checkout(ctx, ctx.cfg.riuos_dir, str(ctx.cfg.get("riuos.branch")))


def copy_over_riuos_files(ctx: InstallCtx) -> None:
    """Merge the tree copied by the base phase (logs, local edits) over the clone."""

    copy_tree(
        ctx.path(str(ctx.cfg.get("riuos.install_dir"))),
        ctx.path(ctx.cfg.riuos_dir),
        dry_run=ctx.dry_run,
    )


def create_forge_dir(ctx: InstallCtx) -> None:
    ctx.target_cmd(["mkdir", "-p", f"{ctx.cfg.home_dir}/forge"])


def add_riuos_bin_dir_to_path(ctx: InstallCtx) -> None:
    bin_dir = f"{ctx.cfg.riuos_dir}/{ctx.cfg.get('riuos.bin_dir')}"
    write_file(ctx.path("/etc/env.d/99riuos"), f'PATH="{bin_dir}"\n', dry_run=ctx.dry_run)
    env_update(ctx)


def install_dotfile(ctx: InstallCtx, name: str) -> None:
    """Symlink ~/<name> to the copy kept in the riuos repository."""

    src = f"{ctx.cfg.riuos_dir}/{ctx.cfg.get('riuos.dotfiles_dir')}/{name}"
    ctx.target_cmd(["ln", "-sfn", src, f"{ctx.cfg.home_dir}/{name}"])


def install_bashrc_dotfile(ctx: InstallCtx) -> None:
    install_dotfile(ctx, ".bashrc")


def install_bash_profile_dotfile(ctx: InstallCtx) -> None:
    install_dotfile(ctx, ".bash_profile")


def change_home_ownership(ctx: InstallCtx) -> None:
    user = ctx.cfg.username
    ctx.target_cmd(["chown", "-R", f"{user}:{user}", ctx.cfg.home_dir])
