"""Local and containerized qemu execution for linuxkit-run-qemu."""

from __future__ import annotations

import dataclasses
import os
import shutil
import subprocess
from typing import List, Tuple

from qemu_runner.constants import CONTAINER_WORKDIR, KVM_DEVICE, QEMU_IMG
from qemu_runner.exceptions import (
    DiskCreationError,
    FirmwareMissingError,
    GuiUnsupportedError,
    RuntimeNotFoundError,
    SubprocessFailure,
)
from qemu_runner.models import BootMode, RunConfig
from qemu_runner.network import build_docker_forwardings
from qemu_runner.qemu import build_qemu_cmdline
from qemu_runner.utils import log, run


def qemu_img_create_args(cfg: RunConfig) -> List[str]:
    args = ["create", "-f", "qcow2", cfg.disk_path]
    if cfg.disk_size:
        args.append(cfg.disk_size)
    return args


def ensure_disk(disk_path: str, create_cmd: List[str]) -> None:
    """Create the qcow2 disk with ``create_cmd`` unless it already exists."""
    try:
        os.stat(disk_path)
    except FileNotFoundError:
        log("INFO", f"Creating new qemu disk [{disk_path}]")
        try:
            run(create_cmd)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise DiskCreationError(f"Error creating disk [{disk_path}]: {exc}")
        return
    log("INFO", f"Using existing disk [{disk_path}]")


def check_firmware(path: str) -> None:
    try:
        os.stat(path)
    except FileNotFoundError:
        raise FirmwareMissingError(f"File [{path}] does not exist, please ensure OVMF is installed")


def invoke(cmd: List[str], interactive: bool = True) -> None:
    """Run ``cmd`` to completion.

    Interactive runs share this process's stdin/stdout/stderr so the VM
    console is usable; otherwise the streams are detached.
    """
    kwargs = {}
    if not interactive:
        kwargs = {"stdin": subprocess.DEVNULL, "stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}
    try:
        run(cmd, **kwargs)
    except subprocess.CalledProcessError as exc:
        raise SubprocessFailure(cmd, returncode=exc.returncode)
    except OSError as exc:
        raise SubprocessFailure(cmd, reason=str(exc))


def run_qemu_local(cfg: RunConfig) -> None:
    cfg, args = build_qemu_cmdline(cfg)

    if cfg.disk_path:
        ensure_disk(cfg.disk_path, [cfg.qemu_img_path or QEMU_IMG] + qemu_img_create_args(cfg))

    if cfg.boot_mode is BootMode.UEFI:
        check_firmware(cfg.firmware_path)

    invoke([cfg.qemu_bin_path or cfg.qemu_binary] + args, interactive=not cfg.gui)


def split_prefix(cfg: RunConfig) -> Tuple[str, RunConfig]:
    """Return the directory to mount and a config whose prefix is relative to it."""
    if os.path.isabs(cfg.prefix):
        wd, base = os.path.split(cfg.prefix)
        log("DEBUG", f"Prefix: {base}")
        return wd, dataclasses.replace(cfg, prefix=base, image_dir=wd)
    return os.getcwd(), cfg


def container_run_args(cfg: RunConfig, wd: str) -> List[str]:
    args = ["run", "-i", "--rm", "-v", f"{wd}:{CONTAINER_WORKDIR}", "-w", CONTAINER_WORKDIR]
    if cfg.kvm:
        args.extend(["--device", str(KVM_DEVICE)])
    if cfg.published_ports:
        args.extend(build_docker_forwardings(cfg.published_ports))
    return args


def run_qemu_container(cfg: RunConfig) -> None:
    if cfg.gui:
        raise GuiUnsupportedError("GUI mode is only supported when running locally, not in a container")

    wd, cfg = split_prefix(cfg)
    cfg, args = build_qemu_cmdline(cfg)
    runtime_args = container_run_args(cfg, wd)

    runtime_path = shutil.which(cfg.container_runtime)
    if runtime_path is None:
        raise RuntimeNotFoundError(f"Unable to find {cfg.container_runtime} in the $PATH")

    if cfg.disk_path:
        ensure_disk(
            os.path.join(wd, cfg.disk_path),
            [runtime_path] + runtime_args + [cfg.qemu_image, QEMU_IMG] + qemu_img_create_args(cfg),
        )

    invoke([runtime_path] + runtime_args + [cfg.qemu_image, cfg.qemu_binary] + args)
