# pyright: reportUnusedCallResult=false
"""Web UI server command."""

from typing import Annotated

from cyclopts import Parameter

from cap_manager.cli._context import CLIContext

from ._shared import exit_with_error


def serve(
    *,
    port: Annotated[
        int | None, Parameter(name=["--port", "-p"], help="Port to listen on")
    ] = None,
    host: Annotated[str | None, Parameter(help="Interface to bind")] = None,
    no_open: Annotated[
        bool,
        Parameter(name="--no-open", negative="", help="Do not open a browser"),
    ] = False,
) -> None:
    """Start the web UI and HTTP API

    The server exits on its own after the configured period without
    activity from the UI.

    Args:
        port: Port to listen on (default from config, 3005).
        host: Interface to bind (default from config, 127.0.0.1).
        no_open: Skip opening the UI in a browser.
    """
    import webbrowser

    import uvicorn

    from cap_manager.server import ServerSession, create_app
    from cap_manager.store import store_exists
    from cap_manager.utils import create_server_logger

    ctx = CLIContext.get_current()
    settings = ctx.config.server
    store_path = ctx.store_path

    if not store_exists(store_path):
        exit_with_error(
            f"{store_path.name} not found at {store_path}. Run 'init' to create it."
        )

    logging_config = ctx.config.logging
    logger = create_server_logger(
        level=logging_config.level.value,
        log_format=logging_config.format.value,
        log_file=logging_config.file,
    )

    effective_host = host or settings.host
    effective_port = port or settings.port
    session = ServerSession(
        timeout=settings.session_timeout,
        check_interval=settings.check_interval,
        logger=logger,
    )
    app = create_app(store_path.resolve(), session=session, logger=logger)

    server = uvicorn.Server(
        uvicorn.Config(app, host=effective_host, port=effective_port, log_level="warning")
    )

    def _on_timeout() -> None:
        print(
            f"\nSession timeout: no activity for {settings.session_timeout:g} seconds"
        )
        print("Shutting down server...")
        server.should_exit = True

    session.set_timeout_handler(_on_timeout)

    url = f"http://localhost:{effective_port}"
    print(f"\nServer started on port {effective_port}")
    print(f"Web UI: {url}")
    print(f"Session timeout: {settings.session_timeout:g} seconds of inactivity")
    print("\nPress Ctrl+C to stop the server\n")

    if settings.open_browser and not no_open:
        try:
            opened = webbrowser.open(url)
        except webbrowser.Error:
            opened = False
        if not opened:
            print(f"Please open {url} manually")

    server.run()
    print("Server stopped")
