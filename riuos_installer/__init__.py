"""riuos installer: Gentoo Linux installation, step by step.

Two phases, each run once:
- base: from the Gentoo install medium; partitions the disk, unpacks stage3,
  configures Portage, builds the kernel and installs the bootloader
- programs: on the installed system; user account, dotfiles, editor,
  audio and framebuffer console

Every step and every command is logged to the console and the phase log.
"""

__all__ = []
