"""
Server lifecycle: start the API on a given database, and stop it again.
"""

import asyncio
import logging
from typing import Optional

from uvicorn import Config, Server

from blog_api.app import app
from blog_api.config.settings import DATABASE_URL, LOG_LEVEL, PORT
from blog_api.database.connection import close_database, init_database

logger = logging.getLogger(__name__)

_server: Optional[Server] = None
_server_task: Optional["asyncio.Task[None]"] = None


async def _serve(server: Server) -> None:
    # uvicorn calls sys.exit() when it cannot bind; keep that inside the task
    try:
        await server.serve()
    except SystemExit as e:
        raise RuntimeError(f"uvicorn exited with status {e.code}") from e


async def run_server(
    database_url: Optional[str] = None,
    port: int = PORT,
    host: str = "127.0.0.1",
    startup_timeout: float = 10.0
) -> Server:
    """Connect the store, then serve the app in a background task.

    Returns once uvicorn reports it has started. Raises RuntimeError if a
    server is already running or uvicorn fails to come up.
    """
    global _server, _server_task

    if _server is not None:
        raise RuntimeError("Server is already running")

    await init_database(database_url or DATABASE_URL)

    config = Config(app=app, host=host, port=port, log_level=LOG_LEVEL.lower())
    server = Server(config)
    task = asyncio.create_task(_serve(server))

    loop = asyncio.get_running_loop()
    deadline = loop.time() + startup_timeout
    while not server.started:
        if task.done() or loop.time() > deadline:
            server.should_exit = True
            await asyncio.gather(task, return_exceptions=True)
            await close_database()
            raise RuntimeError(f"Server failed to start on {host}:{port}")
        await asyncio.sleep(0.05)

    _server, _server_task = server, task
    logger.info(f"Blog Posts API listening on http://{host}:{port}")
    return server


async def close_server() -> None:
    """Stop the running server and close the store. No-op when not running."""
    global _server, _server_task

    if _server is None:
        return

    logger.info("Closing server")
    _server.should_exit = True
    try:
        await _server_task
    finally:
        _server, _server_task = None, None
        await close_database()
