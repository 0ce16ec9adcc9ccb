import logging
import threading
import time

import pytest
import structlog
from fastapi.testclient import TestClient

from pageserve.config import Settings
from pageserve.main import create_app
from pageserve.server import bind_listener, build_server

PAGE = "<!doctype html>\n<html><body><h1>Hello été</h1></body></html>\n".encode("utf-8")


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def page(tmp_path):
    path = tmp_path / "index.html"
    path.write_bytes(PAGE)
    return path


@pytest.fixture
def settings(page):
    return Settings(_env_file=None, host="127.0.0.1", port=0, index_file=str(page))


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


@pytest.fixture
def live_server(settings):
    sock = bind_listener(settings.host, 0)
    server = build_server(settings)
    thread = threading.Thread(target=server.run, kwargs={"sockets": [sock]}, daemon=True)
    thread.start()

    deadline = time.monotonic() + 10
    while not server.started:
        if time.monotonic() > deadline or not thread.is_alive():
            raise RuntimeError("server did not start")
        time.sleep(0.05)

    yield f"http://127.0.0.1:{sock.getsockname()[1]}"

    server.should_exit = True
    thread.join(10)
    sock.close()
