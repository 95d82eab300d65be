"""Port publishing for linuxkit-run-qemu.

Published ports are given as ``host:guest[/proto]``. They are turned into a
single qemu user-mode ``-net`` forwarding spec and, when qemu runs inside a
container, into container runtime ``-p`` flags as well.
"""

from __future__ import annotations

import re
from typing import List

from qemu_runner.constants import MAX_PORT, MIN_PORT, VALID_PROTOCOLS
from qemu_runner.exceptions import (
    InvalidPortError,
    InvalidProtocolError,
    MalformedSpecError,
    PortOutOfRangeError,
)
from qemu_runner.models import PortMapping

_PORT_RE = re.compile(r"[+-]?[0-9]+")


def _parse_port(raw: str, label: str) -> int:
    if not _PORT_RE.fullmatch(raw):
        raise InvalidPortError(f"The provided {label} port '{raw}' can't be converted to int")
    return int(raw)


def parse_port_spec(spec: str) -> PortMapping:
    """Parse a ``host:guest[/proto]`` string into a validated PortMapping."""
    parts = spec.split(":")
    if len(parts) < 2:
        raise MalformedSpecError(
            f"Unable to parse the ports to be published '{spec}', "
            "should be in format <host>:<guest> or <host>:<guest>/<tcp|udp>"
        )

    host_port = _parse_port(parts[0], "host")

    right = parts[1].split("/")
    if len(right) > 2:
        raise MalformedSpecError(f"Unable to parse the ports to be published '{spec}', too many '/' separators")
    protocol = "tcp"
    if len(right) == 2:
        protocol = right[1].strip().lower()
    if protocol not in VALID_PROTOCOLS:
        raise InvalidProtocolError(
            f"Provided protocol '{protocol}' is not valid, valid options are: udp and tcp"
        )

    guest_port = _parse_port(right[0], "guest")

    if not (MIN_PORT <= host_port <= MAX_PORT):
        raise PortOutOfRangeError(f"Invalid host port: {host_port} (must be {MIN_PORT}-{MAX_PORT})")
    if not (MIN_PORT <= guest_port <= MAX_PORT):
        raise PortOutOfRangeError(f"Invalid guest port: {guest_port} (must be {MIN_PORT}-{MAX_PORT})")

    return PortMapping(host_port=host_port, guest_port=guest_port, protocol=protocol)


def build_qemu_forwardings(published_ports: List[str], containerized: bool) -> str:
    """Build the user-mode networking spec with one hostfwd clause per port.

    Inside a container the runtime already maps host to guest port, so qemu
    listens on the guest port.
    """
    forwardings = "user"
    for spec in published_ports:
        pm = parse_port_spec(spec)
        host_port = pm.guest_port if containerized else pm.host_port
        forwardings += f",hostfwd={pm.protocol}::{host_port}-:{pm.guest_port}"
    return forwardings


def build_docker_forwardings(published_ports: List[str]) -> List[str]:
    pmap: List[str] = []
    for spec in published_ports:
        pm = parse_port_spec(spec)
        pmap.extend(["-p", f"{pm.host_port}:{pm.guest_port}/{pm.protocol}"])
    return pmap
