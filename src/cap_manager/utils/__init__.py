"""Shared utilities for cap-manager."""

from ._logging import build_file_logger, create_cli_logger, create_server_logger
from ._paths import get_cli_log_file, get_log_dir, get_server_log_file

__all__ = [
    "build_file_logger",
    "create_cli_logger",
    "create_server_logger",
    "get_cli_log_file",
    "get_log_dir",
    "get_server_log_file",
]
