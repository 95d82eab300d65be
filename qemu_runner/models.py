"""Data models for linuxkit-run-qemu."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional

from qemu_runner.constants import (
    CONTAINER_RUNTIME,
    DEFAULT_ARCH,
    DEFAULT_CPUS,
    DEFAULT_FIRMWARE,
    DEFAULT_MEMORY,
    QEMU_IMAGE,
    QEMU_SYSTEM_PREFIX,
)


class PortMapping(NamedTuple):
    host_port: int
    guest_port: int
    protocol: str = "tcp"


class BootMode(Enum):
    KERNEL = "kernel"
    ISO = "iso"
    UEFI = "uefi"
    DISK = "disk"  # no boot media, boot from the attached disk


@dataclass
class RunConfig:
    prefix: str
    boot_mode: BootMode = BootMode.KERNEL
    gui: bool = False
    disk_path: str = ""
    disk_size: str = ""
    firmware_path: str = DEFAULT_FIRMWARE
    arch: str = DEFAULT_ARCH
    cpus: str = DEFAULT_CPUS
    memory: str = DEFAULT_MEMORY
    published_ports: List[str] = field(default_factory=list)
    qemu_image: str = QEMU_IMAGE
    container_runtime: str = CONTAINER_RUNTIME
    # Directory holding the image set on the host when prefix has been made relative
    image_dir: Optional[str] = None
    # Derived by discover_backend / build_qemu_cmdline
    containerized: bool = False
    kvm: bool = False
    qemu_bin_path: Optional[str] = None
    qemu_img_path: Optional[str] = None

    @property
    def qemu_binary(self) -> str:
        return f"{QEMU_SYSTEM_PREFIX}{self.arch}"
