from __future__ import annotations

import logging

from .command import run_cmd

logger = logging.getLogger(__name__)


def download_file(url: str, dst: str, *, dry_run: bool = False) -> None:
    """Download url to dst, creating missing directories in dst."""

    logger.info("Downloading file from %s to %s...", url, dst)
    run_cmd(["curl", "-LS", "--fail", "-o", dst, "--create-dirs", url], quiet=True, dry_run=dry_run)
    logger.info("Downloading file from %s to %s...done", url, dst)


def fetch_text(url: str, *, dry_run: bool = False) -> str:
    """Return the body of url (e.g. a mirror directory listing)."""

    r = run_cmd(["curl", "-sL", "--fail", url], quiet=True, dry_run=dry_run)
    return r.output
