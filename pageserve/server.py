"""
Listener and process entry point.

The listening socket is bound before uvicorn starts so that an occupied
port is reported as a clear error and a non-zero exit status, then handed to
uvicorn, which serves requests concurrently and shuts down on SIGINT/SIGTERM.
"""

from __future__ import annotations

import argparse
import socket
import sys
from typing import List, Optional

import structlog
import uvicorn

from .config import Settings, get_settings
from .logs import LOG_LEVELS, setup_logging
from .main import create_app

logger = structlog.get_logger(__name__)

LISTEN_BACKLOG = 128


class ListenerBindError(RuntimeError):
    """The listener could not be bound to the requested address."""

    def __init__(self, host: str, port: int, cause: OSError):
        self.host = host
        self.port = port
        self.reason = cause.strerror or str(cause)
        super().__init__(f"cannot listen on {host}:{port}: {self.reason}")


def bind_listener(host: str, port: int, backlog: int = LISTEN_BACKLOG) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError as exc:
        sock.close()
        raise ListenerBindError(host, port, exc) from exc
    sock.set_inheritable(True)
    return sock


def build_server(settings: Settings) -> uvicorn.Server:
    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level,
        access_log=False,
    )
    return uvicorn.Server(config)


def serve(settings: Settings) -> int:
    setup_logging(settings.log_level)

    try:
        sock = bind_listener(settings.host, settings.port)
    except ListenerBindError as exc:
        logger.error("startup failed", host=exc.host, port=exc.port, reason=exc.reason)
        return 1

    host, port = sock.getsockname()[:2]
    logger.info("listening", url=f"http://{host}:{port}/", document=settings.index_file)
    try:
        server = build_server(settings)
        server.run(sockets=[sock])
    except KeyboardInterrupt:
        pass
    finally:
        sock.close()
        logger.info("listener closed", port=port)
    return 0


def parse_args(argv: Optional[List[str]], settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pageserve", description="Serve a single HTML page on '/'.")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port to listen on (default {settings.port})")
    parser.add_argument(
        "--file",
        dest="index_file",
        default=settings.index_file,
        help=f"Document served on '/' (default {settings.index_file})",
    )
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help="Logging level (default %(default)s)",
    )
    args = parser.parse_args(argv)
    if not 0 <= args.port <= 65535:
        parser.error(f"port out of range: {args.port}")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    args = parse_args(argv, settings)
    settings = settings.model_copy(update=vars(args))
    return serve(settings)


if __name__ == "__main__":
    sys.exit(main())
