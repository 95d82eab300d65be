"""Backend discovery for linuxkit-run-qemu."""

from __future__ import annotations

import dataclasses
import shutil

from qemu_runner.constants import QEMU_IMG
from qemu_runner.models import RunConfig
from qemu_runner.utils import log


def discover_backend(cfg: RunConfig) -> RunConfig:
    """Locate qemu on the PATH, falling back to a container when it is missing.

    A single missing tool switches the whole run to the container; resolved
    paths are only recorded for a local run.
    """
    qemu_bin = cfg.qemu_binary
    qemu_bin_path = shutil.which(qemu_bin)
    qemu_img_path = shutil.which(QEMU_IMG)

    missing = None
    if qemu_bin_path is None:
        missing = qemu_bin
    elif qemu_img_path is None:
        missing = QEMU_IMG

    if missing is not None:
        log("INFO", f"Unable to find {missing} within the $PATH. Using a container")
        return dataclasses.replace(cfg, containerized=True, qemu_bin_path=None, qemu_img_path=None)

    log("DEBUG", f"Using {qemu_bin_path} and {qemu_img_path}")
    return dataclasses.replace(
        cfg,
        containerized=False,
        qemu_bin_path=qemu_bin_path,
        qemu_img_path=qemu_img_path,
    )
