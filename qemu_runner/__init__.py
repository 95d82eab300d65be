"""linuxkit-run-qemu package."""

__all__ = [
    "backend",
    "cli",
    "config",
    "constants",
    "exceptions",
    "models",
    "network",
    "qemu",
    "runner",
    "utils",
]
