"""Shared fixtures and fake sockets for udp2tcp tests."""

import socket

import pytest


class FakeUpstream:
    """A stream socket whose send() results are scripted.

    Each script entry is either an int (the most bytes to accept) or an
    exception instance to raise. Once the script runs out every send is
    accepted in full.
    """

    def __init__(self, script=(), fd: int = 7):
        self.script = list(script)
        self.fd = fd
        self.received = bytearray()
        self.calls = []

    def fileno(self):
        return self.fd

    def send(self, data, flags=0):
        self.calls.append((bytes(data), flags))
        if self.script:
            step = self.script.pop(0)
            if isinstance(step, BaseException):
                raise step
            accepted = min(step, len(data))
        else:
            accepted = len(data)
        self.received += bytes(data[:accepted])
        return accepted

    def close(self):
        self.fd = -1


class FakeListener:
    """A datagram socket whose recv_into() replays scripted datagrams or errors."""

    def __init__(self, script=(), fd: int = 5):
        self.script = list(script)
        self.fd = fd

    def fileno(self):
        return self.fd

    def recv_into(self, buffer):
        step = self.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        n = min(len(step), len(buffer))
        buffer[:n] = step[:n]
        return n

    def close(self):
        self.fd = -1


@pytest.fixture
def created_sockets(monkeypatch):
    """Record every socket created through socket.socket during the test."""
    created = []
    real_socket = socket.socket

    class RecordingSocket(real_socket):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    monkeypatch.setattr(socket, "socket", RecordingSocket)
    yield created
    for sock in created:
        sock.close()


@pytest.fixture
def tcp_server():
    """A loopback TCP listening socket; yields (socket, port)."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    server.settimeout(5)
    yield server, server.getsockname()[1]
    server.close()


@pytest.fixture
def closed_port():
    """A loopback TCP port nothing is listening on."""
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port
