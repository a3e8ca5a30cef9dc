"""Step order of each installation phase."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

from .config import InstallConfig
from .pipeline import Step
from .steps import bootstrap, console, disks, editor, graphics, kernel, localization, portage, system, user, utilities


@dataclass(frozen=True)
class Phase:
    name: str
    title: str
    log_name: str
    in_chroot: bool
    build_steps: Callable[[InstallConfig], List[Step]]


def _s(fn, title: str) -> Step:
    return Step(step_id=fn.__name__, title=title, fn=fn)


def base_system_steps(cfg: InstallConfig) -> List[Step]:
    if str(cfg.get("portage.mirror_select", "manual")) == "auto":
        mirrors = _s(bootstrap.select_mirrors_automatically, "Select mirrors automatically")
    else:
        mirrors = _s(bootstrap.select_mirrors, "Select mirrors")

    return [
        # Partitions
        _s(disks.check_initial_partitions_count, "Check initial partitions count"),
        _s(disks.create_mbr_partition, "Create MBR partition"),
        _s(disks.create_boot_partition, "Create boot partition"),
        _s(disks.create_swap_partition, "Create swap partition"),
        _s(disks.create_root_partition, "Create root partition"),
        _s(disks.check_created_partitions_count, "Check created partitions"),
        _s(disks.set_boot_partition_bootable, "Set boot partition bootable"),
        # File systems
        _s(disks.create_boot_file_system, "Create boot file system"),
        _s(disks.create_swap, "Create swap"),
        _s(disks.activate_swap, "Activate swap"),
        _s(disks.create_root_file_system, "Create root file system"),
        # Mounting
        _s(disks.mount_root_partition, "Mount root partition"),
        _s(disks.mount_boot_partition, "Mount boot partition"),
        # Gentoo-specific configuration
        _s(bootstrap.get_stage3_tarball, "Get stage3 tarball"),
        _s(bootstrap.set_compilation_options, "Set compilation options"),
        mirrors,
        _s(bootstrap.setup_gentoo_repos, "Setup Gentoo repos"),
        _s(bootstrap.copy_dns_info, "Copy DNS info"),
        # Portage
        _s(bootstrap.mount_live_filesystems, "Mount live filesystems"),
        _s(bootstrap.install_portage_snapshot, "Install Portage snapshot"),
        _s(portage.select_profile, "Select profile"),
        _s(portage.set_use_flags, "Set USE flags"),
        _s(portage.update_world_set, "Update world set"),
        # Localization
        _s(localization.set_time_zone, "Set time zone"),
        _s(localization.set_locales, "Set locales"),
        _s(localization.set_keymap, "Set keymap"),
        # Kernel
        _s(kernel.install_kernel_sources, "Install kernel sources"),
        _s(kernel.generate_default_kernel_config, "Generate default kernel config"),
        _s(kernel.backup_default_kernel_config, "Backup default kernel config"),
        _s(kernel.set_kernel_config_for_alsa, "Set kernel config for ALSA"),
        _s(kernel.compile_kernel, "Compile kernel"),
        _s(kernel.install_kernel_modules, "Install kernel modules"),
        _s(kernel.install_kernel, "Install kernel"),
        _s(kernel.install_genkernel, "Install genkernel"),
        _s(kernel.build_initramfs, "Build initramfs"),
        _s(kernel.install_firmware, "Install firmware"),
        # Fstab
        _s(system.configure_fstab, "Configure fstab"),
        # Networking
        _s(system.set_hostname, "Set hostname"),
        _s(system.install_netifrc, "Install netifrc"),
        _s(system.set_dhcp, "Set DHCP"),
        _s(system.set_network_starting, "Set network starting"),
        _s(system.install_dhcpcd, "Install dhcpcd"),
        # System logger
        _s(system.install_system_logger, "Install system logger"),
        # Bootloader
        _s(system.install_bootloader, "Install bootloader"),
        _s(system.configure_bootloader, "Configure bootloader"),
        # Root account
        _s(system.set_root_password, "Set root password"),
        # Post-install
        _s(system.copy_riuos_files, "Copy riuos files"),
        _s(disks.unmount_partitions, "Unmount partitions"),
    ]


def programs_steps(cfg: InstallConfig) -> List[Step]:
    return [
        # Regular user account
        _s(user.create_regular_user_account, "Create regular user account"),
        _s(user.set_regular_user_password, "Set regular user password"),
        _s(user.install_sudo, "Install sudo"),
        _s(user.add_regular_user_to_sudoers, "Add regular user to sudoers"),
        # Git and riuos files
        _s(user.install_git, "Install git"),
        _s(user.configure_git_user, "Configure git user"),
        _s(user.clone_riuos_repo, "Clone riuos repo"),
        _s(user.checkout_current_riuos_branch, "Checkout current riuos branch"),
        _s(user.copy_over_riuos_files, "Copy over riuos files"),
        # Custom home directories
        _s(user.create_forge_dir, "Create forge dir"),
        _s(user.add_riuos_bin_dir_to_path, "Add riuos bin dir to PATH"),
        _s(user.install_bashrc_dotfile, "Install .bashrc dotfile"),
        _s(user.install_bash_profile_dotfile, "Install .bash_profile dotfile"),
        # Vim
        _s(editor.install_vim, "Install vim"),
        _s(editor.install_pathogen, "Install pathogen"),
        _s(editor.install_nerd_tree, "Install NERD tree"),
        _s(editor.install_nerd_commenter, "Install NERD commenter"),
        _s(editor.install_tagbar, "Install tagbar"),
        _s(editor.install_vimrc_dotfile, "Install .vimrc dotfile"),
        # Console based user interface programs
        _s(console.install_ranger, "Install ranger"),
        _s(console.install_tmux, "Install tmux"),
        _s(console.install_tmuxconf_dotfile, "Install .tmux.conf dotfile"),
        # Sound
        _s(console.install_alsa, "Install ALSA"),
        _s(console.configure_alsa, "Configure ALSA"),
        _s(console.install_cmus, "Install cmus"),
        # Uvesafb
        _s(graphics.rebuild_klibc_with_uvesafb_support, "Rebuild klibc with uvesafb support"),
        _s(graphics.install_v86d, "Install v86d"),
        _s(graphics.set_v86d_kernel_options, "Set v86d kernel options"),
        _s(graphics.set_uvesafb_boot_params, "Set uvesafb boot params"),
        _s(graphics.add_user_to_video_group, "Add user to video group"),
        # Yaft
        _s(graphics.install_idump_dependencies, "Install idump dependencies"),
        _s(graphics.install_idump, "Install idump"),
        _s(graphics.clone_yaft_repo, "Clone yaft repo"),
        _s(graphics.configure_yaft_font, "Configure yaft font"),
        _s(graphics.configure_yaft_colors, "Configure yaft colors"),
        _s(graphics.build_and_install_yaft, "Build and install yaft"),
        # Fbsplash
        _s(graphics.install_fbsplash, "Install fbsplash"),
        _s(graphics.install_custom_fbsplash_theme, "Install custom fbsplash theme"),
        _s(graphics.enable_splash_theme_inclusion_to_initramfs, "Enable splash theme inclusion to initramfs"),
        _s(graphics.set_fbsplash_boot_params, "Set fbsplash boot params"),
        _s(graphics.set_login_message, "Set login message"),
        _s(graphics.disable_last_login_message, "Disable last login message"),
        # Utilities
        _s(utilities.install_gentoolkit, "Install gentoolkit"),
        _s(utilities.install_pciutils, "Install pciutils"),
        # Kernel, modules, initramfs, bootloader config
        _s(graphics.rebuild_initramfs, "Rebuild initramfs"),
        _s(kernel.recompile_kernel, "Recompile kernel"),
        _s(kernel.reinstall_kernel, "Reinstall kernel"),
        _s(kernel.reinstall_kernel_modules, "Reinstall kernel modules"),
        _s(system.regenerate_bootloader_config, "Regenerate bootloader config"),
        # Final steps
        _s(user.change_home_ownership, "Change home ownership"),
    ]


PHASES = {
    "base": Phase(
        name="base",
        title="Install base system",
        log_name="01_install_base_system",
        in_chroot=True,
        build_steps=base_system_steps,
    ),
    "programs": Phase(
        name="programs",
        title="Install programs",
        log_name="02_install_programs",
        in_chroot=False,
        build_steps=programs_steps,
    ),
}
