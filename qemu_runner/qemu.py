"""qemu command line synthesis for linuxkit-run-qemu."""

from __future__ import annotations

import dataclasses
import os
from typing import List, Tuple

from qemu_runner.constants import (
    CMDLINE_SUFFIX,
    DEFAULT_CMDLINE,
    DEFAULT_MACHINE,
    EFI_ISO_SUFFIX,
    INITRD_SUFFIX,
    ISO_SUFFIX,
    KERNEL_SUFFIX,
    MACHINE_TYPES,
)
from qemu_runner.exceptions import ImageMissingError
from qemu_runner.models import BootMode, RunConfig
from qemu_runner.network import build_qemu_forwardings
from qemu_runner.utils import kvm_available, log


def resolve_boot_mode(iso: bool, uefi: bool, kernel: bool) -> BootMode:
    """Pick exactly one boot mode from the -iso/-uefi/-kernel flags.

    UEFI takes priority over ISO; kernel boot is only used when neither is set.
    """
    if uefi and iso:
        log("WARN", "Both -iso and -uefi have been used; booting from the UEFI ISO")
    if uefi:
        return BootMode.UEFI
    if iso:
        return BootMode.ISO
    if kernel:
        return BootMode.KERNEL
    return BootMode.DISK


def build_path(prefix: str, suffix: str) -> str:
    path = prefix + suffix
    if os.path.isabs(path) and not os.path.exists(path):
        raise ImageMissingError(f"File [{path}] does not exist")
    return path


def read_kernel_cmdline(cfg: RunConfig) -> str:
    """Return the contents of <prefix>-cmdline, or the default console cmdline."""
    path = cfg.prefix + CMDLINE_SUFFIX
    if cfg.image_dir:
        path = os.path.join(cfg.image_dir, path)
    try:
        with open(path) as f:
            return f.read().strip()
    except OSError as exc:
        log("INFO", f"{exc}; defaulting to console output")
        return DEFAULT_CMDLINE


def build_qemu_cmdline(cfg: RunConfig) -> Tuple[RunConfig, List[str]]:
    args: List[str] = ["-device", "virtio-rng-pci", "-smp", cfg.cpus, "-m", cfg.memory]

    if kvm_available():
        cfg = dataclasses.replace(cfg, kvm=True)
        args.append("-enable-kvm")
    args.extend(["-machine", MACHINE_TYPES.get(cfg.arch, DEFAULT_MACHINE)])

    if cfg.disk_path:
        args.extend(["-drive", f"file={cfg.disk_path},format=qcow2,index=0,media=disk"])

    if cfg.boot_mode is BootMode.ISO:
        args.extend(["-cdrom", build_path(cfg.prefix, ISO_SUFFIX)])
    elif cfg.boot_mode is BootMode.UEFI:
        args.extend(["-pflash", cfg.firmware_path])
        args.extend(["-cdrom", build_path(cfg.prefix, EFI_ISO_SUFFIX)])
        args.extend(["-boot", "d"])
    elif cfg.boot_mode is BootMode.KERNEL:
        args.extend(["-kernel", build_path(cfg.prefix, KERNEL_SUFFIX)])
        args.extend(["-initrd", build_path(cfg.prefix, INITRD_SUFFIX)])
        args.extend(["-append", read_kernel_cmdline(cfg)])

    if cfg.published_ports:
        args.extend(["-net", build_qemu_forwardings(cfg.published_ports, cfg.containerized)])
        args.extend(["-net", "nic"])

    if not cfg.gui:
        args.append("-nographic")

    return cfg, args
