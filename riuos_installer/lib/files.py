"""In-place edits of configuration files (make.conf, conf.d/*, locale.gen, ...)."""

from __future__ import annotations

import logging
import os
import re
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def write_file(path: str, contents: str, *, mode: int | None = None, dry_run: bool = False) -> None:
    p = Path(path)
    if dry_run:
        logger.info("Would write %s", str(p))
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    if mode is not None:
        p.chmod(mode)
    logger.info("Wrote %s", str(p))


def append_line(path: str, line: str, *, dry_run: bool = False) -> None:
    p = Path(path)
    if dry_run:
        logger.info("Would append to %s: %s", str(p), line)
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("a", encoding="utf-8") as f:
        f.write(line.rstrip("\n") + "\n")
    logger.info("Appended to %s: %s", str(p), line)


def replace_var_value(
    var: str,
    path: str,
    new_value: str,
    *,
    quoted: bool = False,
    dry_run: bool = False,
) -> int:
    """Set every `var=...` assignment in path to new_value.

    Raises RuntimeError when the file holds no assignment of var, so a typo
    in a variable name aborts the install instead of passing silently.
    Returns the number of replaced lines.
    """

    value = f'"{new_value}"' if quoted else new_value
    if dry_run:
        logger.info("Would set %s=%s in %s", var, value, path)
        return 0

    p = Path(path)
    pattern = re.compile(rf"^(\s*){re.escape(var)}=.*$")
    lines = p.read_text(encoding="utf-8").splitlines(keepends=True)

    count = 0
    for i, line in enumerate(lines):
        m = pattern.match(line.rstrip("\n"))
        if m:
            ending = "\n" if line.endswith("\n") else ""
            lines[i] = f"{m.group(1)}{var}={value}{ending}"
            count += 1

    if not count:
        raise RuntimeError(f"Failed to replace variable {var} in {path}: not found")

    p.write_text("".join(lines), encoding="utf-8")
    logger.info("Set %s=%s in %s (%d line(s))", var, value, path, count)
    return count


def read_var_value(var: str, path: str) -> str | None:
    """Return the (unquoted) value of the last `var=...` assignment in path."""

    value = None
    pattern = re.compile(rf"^\s*{re.escape(var)}=(.*)$")
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        m = pattern.match(line)
        if m:
            value = m.group(1).strip().strip("\"'")
    return value


def uncomment_var(var: str, path: str, *, dry_run: bool = False) -> int:
    """Drop the leading '#' of lines starting with '#<var>'.

    Raises RuntimeError when no such line exists.
    """

    if dry_run:
        logger.info("Would uncomment %s in %s", var, path)
        return 0

    p = Path(path)
    prefix = "#" + var
    lines = p.read_text(encoding="utf-8").splitlines(keepends=True)

    count = 0
    for i, line in enumerate(lines):
        if line.startswith(prefix):
            lines[i] = line[1:]
            count += 1

    if not count:
        raise RuntimeError(f"Failed to uncomment {var} in {path}: not found")

    p.write_text("".join(lines), encoding="utf-8")
    logger.info("Uncommented %s in %s", var, path)
    return count


def replace_line(path: str, regex: str, new_line: str, *, dry_run: bool = False) -> int:
    """Replace whole lines matching regex with new_line."""

    if dry_run:
        logger.info("Would replace /%s/ in %s", regex, path)
        return 0

    p = Path(path)
    pattern = re.compile(regex)
    lines = p.read_text(encoding="utf-8").splitlines(keepends=True)

    count = 0
    for i, line in enumerate(lines):
        if pattern.search(line):
            lines[i] = new_line.rstrip("\n") + "\n"
            count += 1

    if not count:
        raise RuntimeError(f"No line matching /{regex}/ in {path}")

    p.write_text("".join(lines), encoding="utf-8")
    logger.info("Replaced %d line(s) matching /%s/ in %s", count, regex, path)
    return count


def copy_tree(src: str, dst: str, *, dry_run: bool = False) -> None:
    s = Path(src)
    d = Path(dst)
    real_src = os.path.realpath(s)
    if os.path.commonpath([real_src, os.path.realpath(d)]) == real_src:
        raise RuntimeError(f"Refusing to copy {src} into itself ({dst})")
    if dry_run:
        logger.info("Would copy tree %s -> %s", str(s), str(d))
        return

    if not s.exists():
        raise FileNotFoundError(src)

    d.mkdir(parents=True, exist_ok=True)
    for item in s.rglob("*"):
        rel = item.relative_to(s)
        out = d / rel
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)
    logger.info("Copied tree %s -> %s", str(s), str(d))
