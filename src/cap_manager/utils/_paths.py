from pathlib import Path

import platformdirs

APP_NAME = "cap-manager"


def get_log_dir() -> Path:
    """Get the platform-specific log directory for cap-manager."""
    return platformdirs.user_log_path(APP_NAME)


def get_cli_log_file() -> Path:
    """Get the path to the CLI log file."""
    return get_log_dir() / "cli.log"


def get_server_log_file() -> Path:
    """Get the path to the HTTP server log file."""
    return get_log_dir() / "server.log"
