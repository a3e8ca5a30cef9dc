from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    output: str


class CommandError(RuntimeError):
    """A wrapped command exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(f"Command failed ({returncode}): {fmt_argv(self.argv)}")


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    quiet: bool = False,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command before running it.
    - Streams combined stdout/stderr to the log line by line, so long
      builds (emerge, make) show progress on the console and in the file.
    - quiet logs output at DEBUG; used when the output is parsed, not read.
    - input_text is written to stdin and never logged.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s", fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, output="")

    p = subprocess.Popen(
        argv_list,
        stdin=subprocess.PIPE if input_text is not None else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
    )

    if input_text is not None:
        try:
            p.stdin.write(input_text)
            p.stdin.close()
        except BrokenPipeError:
            # Exited before reading its input; the exit status says why.
            logger.debug("stdin of %s closed early", argv_list[0])

    level = logging.DEBUG if quiet else logging.INFO
    lines: list[str] = []
    for line in p.stdout:
        lines.append(line)
        logger.log(level, "%s", line.rstrip("\n"))
    p.stdout.close()
    returncode = p.wait()

    if check and returncode != 0:
        raise CommandError(argv_list, returncode)

    return CmdResult(argv=argv_list, returncode=returncode, output="".join(lines))
