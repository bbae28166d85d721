"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "store": {
        "file": "progress.json",
        "prompt_file": "agent_prompt.txt",
    },
    "server": {
        "host": "127.0.0.1",
        "port": 3005,
        "session_timeout": 900,
        "check_interval": 60,
        "open_browser": True,
    },
}
