"""Utility functions for linuxkit-run-qemu."""

from __future__ import annotations

import os
import subprocess
from typing import List, Optional

from qemu_runner import constants
from qemu_runner.constants import FALSY, KVM_DEVICE, TRUTHY
from qemu_runner.exceptions import ConfigError


def set_verbose(enabled: bool = True) -> None:
    constants._LOG_VERBOSE = enabled


def log(level: str, message: str) -> None:
    """Lightweight structured logging with coloured level tags."""
    if level == "DEBUG" and not constants._LOG_VERBOSE:
        return
    colours = {
        "INFO": "\033[0;34m",
        "WARN": "\033[1;33m",
        "ERROR": "\033[0;31m",
        "SUCCESS": "\033[0;32m",
        "DEBUG": "\033[0;90m",
    }
    colour = colours.get(level, "")
    reset = "\033[0m" if colour else ""
    print(f"{colour}[{level}]{reset} {message}", flush=True)


def get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(name, default)


def parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in TRUTHY:
        return True
    if value in FALSY:
        return False
    raise ConfigError(f"Invalid boolean value '{raw}' for {name}")


def kvm_available() -> bool:
    """Return True if the KVM device node is present on this host."""
    return KVM_DEVICE.exists()


def run(cmd: List[str], check: bool = True, **kwargs) -> subprocess.CompletedProcess:
    """Run command with logging."""
    log("DEBUG", f"Running: {' '.join(cmd)}")
    return subprocess.run(cmd, check=check, **kwargs)
