"""Custom exceptions for linuxkit-run-qemu."""

from __future__ import annotations

from typing import List, Optional


class RunnerError(RuntimeError):
    """Raised on unrecoverable configuration or runtime errors."""


class ConfigError(RunnerError):
    """The defaults file or a flag value could not be understood."""


class PortSpecError(RunnerError):
    """Base class for errors raised while parsing a host:guest[/proto] spec."""


class MalformedSpecError(PortSpecError):
    pass


class InvalidPortError(PortSpecError):
    pass


class InvalidProtocolError(PortSpecError):
    pass


class PortOutOfRangeError(PortSpecError):
    pass


class FirmwareMissingError(RunnerError):
    pass


class ImageMissingError(RunnerError):
    pass


class DiskCreationError(RunnerError):
    pass


class RuntimeNotFoundError(RunnerError):
    pass


class GuiUnsupportedError(RunnerError):
    pass


class SubprocessFailure(RunnerError):
    """A launched process could not be started or exited with a non-zero status."""

    def __init__(self, cmd: List[str], returncode: Optional[int] = None, reason: str = "") -> None:
        self.cmd = cmd
        self.returncode = returncode
        if returncode is not None:
            message = f"{cmd[0]} exited with status {returncode}"
        else:
            message = f"Failed to launch {cmd[0]}: {reason}"
        super().__init__(message)
