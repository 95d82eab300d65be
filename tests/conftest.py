"""Shared test fixtures."""

from __future__ import annotations

import pytest

from qemu_runner import constants
from qemu_runner.models import RunConfig

_ENV_VARS = [
    "LOG_VERBOSE",
    "LINUXKIT_QEMU_CONFIG",
    "QEMU_IMAGE",
    "CONTAINER_RUNTIME",
]


@pytest.fixture(autouse=True)
def quiet_debug(monkeypatch):
    """Keep DEBUG output off unless a test turns it on."""
    monkeypatch.setattr(constants, "_LOG_VERBOSE", False)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Clear the environment variables read at run time and hide any user config file."""
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(constants, "DEFAULT_CONFIG_PATH", tmp_path / "no-such-config.yml")


@pytest.fixture
def default_run_config() -> RunConfig:
    """Return a RunConfig for a relative image prefix with default settings."""
    return RunConfig(prefix="linuxkit")


@pytest.fixture
def kernel_image_set(tmp_path):
    """Create <tmp>/linuxkit-kernel and -initrd.img and return the absolute prefix."""
    prefix = tmp_path / "linuxkit"
    (tmp_path / "linuxkit-kernel").write_bytes(b"kernel")
    (tmp_path / "linuxkit-initrd.img").write_bytes(b"initrd")
    return str(prefix)
