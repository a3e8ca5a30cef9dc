from . import bootstrap, console, disks, editor, graphics, kernel, localization, portage, system, user, utilities

__all__ = [
    "bootstrap",
    "console",
    "disks",
    "editor",
    "graphics",
    "kernel",
    "localization",
    "portage",
    "system",
    "user",
    "utilities",
]
