"""Shared utilities for Transitory."""

from transitory.core.utils.json import dumps_json, read_json, write_json

# Note: logging module not imported here; it shadows the stdlib name.
# Import directly: from transitory.core.utils.logging import configure_logging

__all__ = [
    "dumps_json",
    "read_json",
    "write_json",
]
