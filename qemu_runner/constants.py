"""Global constants and defaults for linuxkit-run-qemu."""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(os.path.expanduser("~/.linuxkit/qemu.yml"))

# Container image used when qemu is not installed locally
QEMU_IMAGE = "linuxkit/aarch64/qemu:47d8f0e7191e1b5bbb366fb80e9a0ee9ab2bd01d"
CONTAINER_RUNTIME = "docker"
# The image directory is mounted here and used as the container working directory
CONTAINER_WORKDIR = "/tmp"

KVM_DEVICE = Path("/dev/kvm")
QEMU_IMG = "qemu-img"
QEMU_SYSTEM_PREFIX = "qemu-system-"

DEFAULT_CMDLINE = "console=ttyS0 console=tty0 page_poison=1"
DEFAULT_FIRMWARE = "/usr/share/ovmf/bios.bin"
DEFAULT_ARCH = "x86_64"
DEFAULT_CPUS = "1"
DEFAULT_MEMORY = "1024"

# Suffixes appended to the image prefix
ISO_SUFFIX = ".iso"
EFI_ISO_SUFFIX = "-efi.iso"
KERNEL_SUFFIX = "-kernel"
INITRD_SUFFIX = "-initrd.img"
CMDLINE_SUFFIX = "-cmdline"

MACHINE_TYPES = {
    "x86_64": "q35",
}
DEFAULT_MACHINE = "virt"

VALID_PROTOCOLS = ("tcp", "udp")
MIN_PORT = 1
MAX_PORT = 65535

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}

_LOG_VERBOSE = os.environ.get("LOG_VERBOSE", "").lower() in TRUTHY
