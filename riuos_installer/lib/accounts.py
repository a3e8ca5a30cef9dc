from __future__ import annotations

import getpass
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..context import InstallCtx

logger = logging.getLogger(__name__)


def prompt_new_password(username: str, *, attempts: int = 3) -> str:
    """Ask for a password twice until both entries match.

    Raises RuntimeError after `attempts` failed rounds.
    """

    for attempt in range(1, attempts + 1):
        first = getpass.getpass(f"New password for {username}: ")
        second = getpass.getpass(f"Retype new password for {username}: ")
        if not first:
            logger.info("Empty password for %s (attempt %d/%d)", username, attempt, attempts)
        elif first != second:
            logger.info("Passwords for %s do not match (attempt %d/%d)", username, attempt, attempts)
        else:
            return first
    raise RuntimeError(f"Failed to set password for {username} after {attempts} attempts")


def set_password(ctx: "InstallCtx", username: str) -> None:
    """Prompt for and set the password of username on the target system."""

    if ctx.dry_run:
        logger.info("Would set password for %s", username)
        return

    password = prompt_new_password(username, attempts=int(ctx.cfg.get("accounts.password_attempts", 3)))
    # stdin is not logged
    ctx.target_cmd(["chpasswd"], input_text=f"{username}:{password}\n")
    logger.info("Password set for %s", username)
