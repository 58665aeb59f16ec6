"""
Test doubles for the HTTP session and the Docker container.
"""

import requests


def docker_available() -> bool:
    try:
        import docker

        client = docker.from_env()
        client.ping()
        available = True
    except Exception:
        available = False
    return available


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class ScriptedSession:
    """
    Stands in for requests.Session. Each get() returns (or raises) the next scripted item - the last one repeats.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.urls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.urls.append(url)
        item = self.script[min(len(self.urls), len(self.script)) - 1]
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def polls(self) -> int:
        return len(self.urls)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def connection_refused() -> requests.ConnectionError:
    return requests.ConnectionError("[Errno 111] Connection refused")


class FakeWrappedContainer:
    def __init__(self):
        self.status = "created"

    def reload(self):
        pass


class FakeContainer:
    """
    Stands in for testcontainers' DockerContainer.
    """

    mapped_port = 49153

    def __init__(self, image: str):
        self.image = image
        self.ports = []
        self.env = {}
        self.started = False
        self.stopped = False
        self.wrapped = FakeWrappedContainer()

    def with_exposed_ports(self, *ports):
        self.ports.extend(ports)
        return self

    def with_env(self, key, value):
        self.env[key] = value
        return self

    def start(self):
        self.started = True
        self.wrapped.status = "running"
        return self

    def stop(self):
        self.stopped = True
        self.wrapped.status = "exited"

    def get_container_host_ip(self) -> str:
        return "127.0.0.1"

    def get_exposed_port(self, port) -> str:
        return str(self.mapped_port)

    def get_wrapped_container(self):
        return self.wrapped
