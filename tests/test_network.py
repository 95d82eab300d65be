"""Tests for qemu_runner.network module."""

from __future__ import annotations

import pytest

from qemu_runner.exceptions import (
    InvalidPortError,
    InvalidProtocolError,
    MalformedSpecError,
    PortOutOfRangeError,
    PortSpecError,
)
from qemu_runner.models import PortMapping
from qemu_runner.network import build_docker_forwardings, build_qemu_forwardings, parse_port_spec


class TestParsePortSpec:
    def test_host_and_guest_default_to_tcp(self):
        assert parse_port_spec("8080:80") == PortMapping(host_port=8080, guest_port=80, protocol="tcp")

    def test_explicit_udp(self):
        assert parse_port_spec("5353:53/udp").protocol == "udp"

    @pytest.mark.parametrize("proto", ["UDP", "Udp", " udp ", "udp\n"])
    def test_protocol_is_normalized(self, proto):
        assert parse_port_spec(f"5353:53/{proto}").protocol == "udp"

    def test_explicit_tcp(self):
        assert parse_port_spec("2222:22/TCP") == PortMapping(2222, 22, "tcp")

    @pytest.mark.parametrize("spec", ["8080", "", "8080/udp"])
    def test_single_part_is_malformed(self, spec):
        with pytest.raises(MalformedSpecError):
            parse_port_spec(spec)

    def test_extra_protocol_separator_is_malformed(self):
        with pytest.raises(MalformedSpecError):
            parse_port_spec("8080:80/tcp/udp")

    def test_unknown_protocol(self):
        with pytest.raises(InvalidProtocolError, match="valid options are: udp and tcp"):
            parse_port_spec("8080:80/sctp")

    def test_empty_protocol(self):
        with pytest.raises(InvalidProtocolError):
            parse_port_spec("8080:80/")

    @pytest.mark.parametrize(
        "spec",
        [
            "http:80", ":80", "80:ssh", "80:", "80:abc/udp", "8o:80",
            "80_80:80", "80:8_0", " 8080:80", "8080: 80", "８０:80",
        ],
    )
    def test_non_numeric_port(self, spec):
        with pytest.raises(InvalidPortError):
            parse_port_spec(spec)

    @pytest.mark.parametrize("spec", ["0:80", "65536:80", "-1:80", "80:0", "80:65536", "80:70000/udp"])
    def test_port_out_of_range(self, spec):
        with pytest.raises(PortOutOfRangeError):
            parse_port_spec(spec)

    def test_range_boundaries_accepted(self):
        assert parse_port_spec("1:65535") == PortMapping(1, 65535, "tcp")
        assert parse_port_spec("65535:1/udp") == PortMapping(65535, 1, "udp")

    def test_errors_share_base_class(self):
        for spec in ["8080", "x:80", "80:80/icmp", "0:80"]:
            with pytest.raises(PortSpecError):
                parse_port_spec(spec)

    def test_deterministic(self):
        assert parse_port_spec("8080:80/udp") == parse_port_spec("8080:80/udp")

    def test_mapping_is_immutable(self):
        pm = parse_port_spec("8080:80")
        with pytest.raises(AttributeError):
            pm.host_port = 9090


class TestBuildQemuForwardings:
    def test_local_uses_host_ports_in_order(self):
        fwd = build_qemu_forwardings(["2222:22", "8080:80/udp"], containerized=False)
        assert fwd == "user,hostfwd=tcp::2222-:22,hostfwd=udp::8080-:80"

    def test_containerized_listens_on_guest_port(self):
        fwd = build_qemu_forwardings(["2222:22", "8080:80/udp"], containerized=True)
        assert fwd == "user,hostfwd=tcp::22-:22,hostfwd=udp::80-:80"

    def test_duplicates_are_all_forwarded(self):
        fwd = build_qemu_forwardings(["2222:22", "2222:22"], containerized=False)
        assert fwd.count("hostfwd=tcp::2222-:22") == 2

    def test_no_ports(self):
        assert build_qemu_forwardings([], containerized=False) == "user"

    def test_invalid_spec_aborts(self):
        with pytest.raises(InvalidProtocolError):
            build_qemu_forwardings(["2222:22", "8080:80/sctp"], containerized=False)


class TestBuildDockerForwardings:
    def test_publish_flags(self):
        flags = build_docker_forwardings(["2222:22", "8080:80/UDP"])
        assert flags == ["-p", "2222:22/tcp", "-p", "8080:80/udp"]

    def test_empty(self):
        assert build_docker_forwardings([]) == []

    def test_invalid_spec_raises(self):
        with pytest.raises(MalformedSpecError):
            build_docker_forwardings(["2222"])
