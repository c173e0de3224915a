"""Development server.

Starts a pounce ASGI server with the live App object, single worker,
reloading on file changes.
"""


def run_dev_server(app: object, host: str, port: int, *, reload: bool = True) -> None:
    """Serve *app* with pounce (``pip install pagewire[server]``)."""
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(host=host, port=port, workers=1, reload=reload)
    Server(config, app).run()
