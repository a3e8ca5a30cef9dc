from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def _open_log_file(log_path: str) -> Tuple[logging.FileHandler, str]:
    """Append to log_path; on a read-only medium use the working directory."""

    p = Path(log_path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(p, mode="a", encoding="utf-8"), str(p)
    except OSError:
        fallback = Path.cwd() / p.name
        return logging.FileHandler(fallback, mode="a", encoding="utf-8"), str(fallback)


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Send every record to the phase log file and, by default, the console.

    One file per phase (e.g. ../logs/01_install_base_system.log), appended to
    across runs. Only the first call per process installs handlers.
    Returns the path actually written.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_riuos_handlers", None):
        return getattr(root, "_riuos_log_path")

    file_handler, chosen_path = _open_log_file(log_path)
    handlers: list[logging.Handler] = [file_handler]
    if also_console:
        handlers.append(logging.StreamHandler())

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)

    setattr(root, "_riuos_handlers", handlers)
    setattr(root, "_riuos_log_path", chosen_path)

    logging.getLogger(__name__).info("Logging to %s (requested %s)", chosen_path, log_path)
    return chosen_path


def reset_logging() -> None:
    """Drop handlers installed by configure_logging()."""

    root = logging.getLogger()
    for h in getattr(root, "_riuos_handlers", None) or []:
        root.removeHandler(h)
        h.close()
    setattr(root, "_riuos_handlers", [])
    setattr(root, "_riuos_log_path", None)
