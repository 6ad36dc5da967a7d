"""Blocking bridge from one UDP listening socket to one TCP upstream connection."""

import errno
import logging
import socket

from udp2tcp.config import DEFAULT_BUFFER_SIZE
from udp2tcp.errors import BridgeError, FatalReceiveError, FatalWriteError
from udp2tcp.sockets import connect_tcp, listen_udp

logger = logging.getLogger("udp2tcp")

# Report a vanished peer as EPIPE instead of raising SIGPIPE.
SEND_FLAGS = getattr(socket, "MSG_NOSIGNAL", 0)

# The listening socket itself is gone; retrying would spin forever.
FATAL_RECV_ERRNOS = frozenset({errno.EBADF, errno.ENOTSOCK})


class Bridge:
    """The two long-lived sockets and the reusable transfer buffer.

    Built once at startup and passed to the forward loop. Closing the bridge
    closes both sockets.
    """

    def __init__(self, listener, upstream, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.listener = listener
        self.upstream = upstream
        self.buffer = bytearray(buffer_size)
        self.view = memoryview(self.buffer)

    @classmethod
    def open(
        cls,
        udp_host: str,
        udp_port: str,
        tcp_host: str,
        tcp_port: str,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> "Bridge":
        """Bind the UDP listener, then connect upstream."""
        listener = listen_udp(udp_host, udp_port)
        try:
            upstream = connect_tcp(tcp_host, tcp_port)
        except BaseException:
            listener.close()
            raise
        return cls(listener, upstream, buffer_size)

    def close(self):
        self.listener.close()
        self.upstream.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def send_all(sock, data) -> int:
    """Write every byte of data to sock, or raise FatalWriteError.

    Short writes resume from the unsent suffix and interrupted calls are
    retried unchanged. There is a single upstream and no reconnect, so any
    other failure is fatal.
    """
    view = memoryview(data)
    total = len(view)
    offset = 0
    while offset < total:
        try:
            sent = sock.send(view[offset:], SEND_FLAGS)
        except InterruptedError:
            logger.debug("send on fd %d interrupted, retrying", sock.fileno())
            continue
        except OSError as e:
            raise FatalWriteError(sock.fileno(), e) from e
        if sent == 0:
            error = BrokenPipeError(errno.EPIPE, "connection closed by peer")
            raise FatalWriteError(sock.fileno(), error)
        offset += sent
    return offset


def forward_once(bridge: Bridge):
    """Receive one datagram and write it upstream.

    Returns the number of bytes forwarded, or None when the receive failed
    and was logged. Raises FatalReceiveError if the listener is unusable and
    FatalWriteError if the upstream write fails.
    """
    listener = bridge.listener
    while True:
        try:
            n = listener.recv_into(bridge.buffer)
            break
        except InterruptedError:
            logger.debug("recv on fd %d interrupted, retrying", listener.fileno())
        except OSError as e:
            if e.errno in FATAL_RECV_ERRNOS:
                raise FatalReceiveError(listener.fileno(), e) from e
            logger.error("recv on fd %d: %s", listener.fileno(), e)
            return None
    send_all(bridge.upstream, bridge.view[:n])
    return n


def forward(bridge: Bridge):
    """Forward datagrams until a fatal error is raised."""
    while True:
        forward_once(bridge)


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run_bridge(
    udp_host: str,
    udp_port: str,
    tcp_host: str,
    tcp_port: str,
    verbose: bool = False,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Synchronous entry: run the bridge and return the process exit status."""
    configure_logging(verbose)
    try:
        with Bridge.open(udp_host, udp_port, tcp_host, tcp_port, buffer_size) as bridge:
            logger.info(
                "Forwarding UDP %s:%s -> TCP %s:%s", udp_host, udp_port, tcp_host, tcp_port
            )
            forward(bridge)
    except BridgeError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        pass
    return 0
