"""Stage3 tarball discovery and integrity check."""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)


def find_tarball_name(listing: str, pattern: str) -> str:
    """Return the first tarball name matching pattern in a mirror listing."""

    m = re.search(pattern, listing)
    if not m:
        raise RuntimeError(f"No stage3 tarball matching {pattern!r} found in listing")
    return m.group(0)


def expected_digest(digests: str, tarball: str, algorithm: str = "SHA512") -> str:
    """Return the hash recorded for tarball in a .DIGESTS file.

    Entries are grouped under `# <ALGO> HASH` headers (BLAKE2B, SHA512,
    WHIRLPOOL, in any order); only the section for algorithm counts. The
    .CONTENTS entry has another name and is skipped.
    """

    section = None
    for line in digests.splitlines():
        header = re.match(r"^#\s*(\S+)\s+HASH\s*$", line, re.IGNORECASE)
        if header:
            section = header.group(1).upper()
            continue
        if line.startswith("#") or section != algorithm.upper():
            continue
        fields = line.split()
        if len(fields) == 2 and fields[1] == tarball:
            return fields[0].lower()
    raise RuntimeError(f"No {algorithm} digest for {tarball} in DIGESTS file")


def sha512_of(path: str, chunk_size: int = 1024 * 1024) -> str:
    h = hashlib.sha512()
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def verify_tarball(tarball_path: str, digests_path: str) -> str:
    name = Path(tarball_path).name
    expected = expected_digest(Path(digests_path).read_text(encoding="utf-8"), name)
    calculated = sha512_of(tarball_path)
    if calculated != expected:
        raise RuntimeError(
            f"Calculated hash {calculated} is different than expected hash {expected}; aborting"
        )
    logger.info("Tarball hash ok")
    return calculated
