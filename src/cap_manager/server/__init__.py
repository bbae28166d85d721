"""HTTP API and web UI for cap-manager."""

from ._app import create_app
from ._session import ServerSession

__all__ = ["ServerSession", "create_app"]
