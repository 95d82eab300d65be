"""CLI entry point for linuxkit-run-qemu."""

from __future__ import annotations

import argparse
import re
import sys
from typing import Any, Dict, List, Optional

from qemu_runner.backend import discover_backend
from qemu_runner.config import build_config, load_defaults
from qemu_runner.constants import (
    DEFAULT_ARCH,
    DEFAULT_CPUS,
    DEFAULT_FIRMWARE,
    DEFAULT_MEMORY,
)
from qemu_runner.exceptions import RunnerError
from qemu_runner.runner import run_qemu_container, run_qemu_local
from qemu_runner.utils import log, parse_bool, set_verbose

_BOOL_ASSIGN_RE = re.compile(r"^--?(gui|uefi|iso|kernel)=(.*)$")


def expand_bool_flags(argv: List[str]) -> List[str]:
    """Rewrite Go-style ``-flag=false`` booleans into ``-flag`` / ``-no-flag``."""
    expanded: List[str] = []
    for idx, arg in enumerate(argv):
        if arg == "--":
            expanded.extend(argv[idx:])
            break
        match = _BOOL_ASSIGN_RE.match(arg)
        if match:
            name, value = match.groups()
            expanded.append(f"-{name}" if parse_bool(f"-{name}", value) else f"-no-{name}")
        else:
            expanded.append(arg)
    return expanded


def _add_bool_flag(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    parser.add_argument(f"-{name}", f"--{name}", dest=name, action="store_true", help=help_text)
    parser.add_argument(f"-no-{name}", f"--no-{name}", dest=name, action="store_false", help=argparse.SUPPRESS)


def build_parser(defaults: Optional[Dict[str, Any]] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linuxkit run qemu",
        usage="%(prog)s [options] prefix",
        description="'prefix' specifies the path to the VM image.",
        allow_abbrev=False,
    )
    _add_bool_flag(parser, "gui", "Set qemu to use video output instead of stdio")
    _add_bool_flag(parser, "uefi", "Set UEFI boot from 'prefix'-efi.iso")
    _add_bool_flag(parser, "iso", "Set Legacy BIOS boot from 'prefix'.iso")
    _add_bool_flag(parser, "kernel", "Set boot using 'prefix'-kernel/-initrd/-cmdline (default)")

    parser.add_argument("-disk", "--disk", default="", help="Path to disk image to use")
    parser.add_argument(
        "-disk-size",
        "--disk-size",
        dest="disk_size",
        default="",
        help="Size of disk to create, only created if it doesn't exist",
    )
    parser.add_argument("-fw", "--fw", default=DEFAULT_FIRMWARE, help="Path to OVMF firmware for UEFI boot")
    parser.add_argument("-arch", "--arch", default=DEFAULT_ARCH, help="Type of architecture to use, e.g. x86_64, aarch64")
    parser.add_argument("-cpus", "--cpus", default=DEFAULT_CPUS, help="Number of CPUs")
    parser.add_argument("-mem", "--mem", default=DEFAULT_MEMORY, help="Amount of memory in MB")
    parser.add_argument(
        "-publish",
        "--publish",
        action="append",
        metavar="SPEC",
        help="Publish a vm's port(s) to the host, <host>:<guest>[/<tcp|udp>] (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug output, including qemu arguments")
    parser.add_argument("prefix", nargs="?", help="Path prefix of the VM image set")

    parser.set_defaults(gui=False, uefi=False, iso=False, kernel=True, publish=None)
    if defaults:
        parser.set_defaults(**defaults)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    try:
        defaults = load_defaults()
        argv = expand_bool_flags(argv)
    except RunnerError as exc:
        log("ERROR", str(exc))
        return 1

    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    if args.verbose:
        set_verbose(True)

    if not args.prefix:
        print("Please specify the prefix to the image to boot")
        parser.print_help()
        return 1

    try:
        cfg = discover_backend(build_config(args))
        if cfg.containerized:
            run_qemu_container(cfg)
        else:
            run_qemu_local(cfg)
    except RunnerError as exc:
        log("ERROR", str(exc))
        return 1
    except KeyboardInterrupt:
        log("WARN", "Interrupted")
        return 130
    except Exception as exc:
        log("ERROR", f"Unexpected error: {exc}")
        import traceback

        traceback.print_exc()
        return 1
    return 0
