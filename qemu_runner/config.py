"""Configuration loading for linuxkit-run-qemu.

Flag defaults can be overridden by a YAML file (``LINUXKIT_QEMU_CONFIG``,
default ``~/.linuxkit/qemu.yml``); the container image and runtime come from
the ``QEMU_IMAGE`` and ``CONTAINER_RUNTIME`` environment variables.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import yaml  # type: ignore
except ImportError as exc:  # pragma: no cover
    raise SystemExit("PyYAML is required but not installed") from exc

from qemu_runner import constants
from qemu_runner.constants import CONTAINER_RUNTIME, QEMU_IMAGE
from qemu_runner.exceptions import ConfigError
from qemu_runner.models import RunConfig
from qemu_runner.qemu import resolve_boot_mode
from qemu_runner.utils import get_env, log, parse_bool

BOOL_KEYS = {"gui", "uefi", "iso", "kernel"}
STRING_KEYS = {"disk", "disk_size", "fw", "arch", "cpus", "mem"}
LIST_KEYS = {"publish"}


def _coerce(key: str, value: Any) -> Any:
    if key in BOOL_KEYS:
        if isinstance(value, bool):
            return value
        return parse_bool(key, str(value))
    if key in LIST_KEYS:
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            raise ConfigError(f"'{key}' must be a list of host:guest[/proto] strings")
        for item in value:
            if not isinstance(item, str):
                raise ConfigError(
                    f"'{key}' entries must be quoted host:guest[/proto] strings, got {item!r}"
                )
        return list(value)
    return str(value)


def load_defaults(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Read flag defaults from the YAML config file, if there is one."""
    if config_path is None:
        env_path = get_env("LINUXKIT_QEMU_CONFIG")
        config_path = Path(env_path) if env_path else constants.DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return {}

    try:
        data = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"{config_path} contains invalid YAML: {exc}")
    except OSError as exc:
        raise ConfigError(f"Cannot read {config_path}: {exc}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a YAML mapping, got {type(data).__name__}")

    defaults: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).replace("-", "_")
        if key not in BOOL_KEYS | STRING_KEYS | LIST_KEYS:
            log("WARN", f"Ignoring unknown setting '{raw_key}' in {config_path}")
            continue
        defaults[key] = _coerce(key, value)
    log("DEBUG", f"Loaded defaults from {config_path}: {sorted(defaults)}")
    return defaults


def build_config(args: argparse.Namespace) -> RunConfig:
    """Assemble the RunConfig for one invocation from parsed flags."""
    return RunConfig(
        prefix=args.prefix,
        boot_mode=resolve_boot_mode(args.iso, args.uefi, args.kernel),
        gui=args.gui,
        disk_path=args.disk,
        disk_size=args.disk_size,
        firmware_path=args.fw,
        arch=args.arch,
        cpus=args.cpus,
        memory=args.mem,
        published_ports=list(args.publish or []),
        qemu_image=get_env("QEMU_IMAGE") or QEMU_IMAGE,
        container_runtime=get_env("CONTAINER_RUNTIME") or CONTAINER_RUNTIME,
    )
