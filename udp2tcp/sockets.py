"""Address resolution and socket setup for the UDP listener and the TCP upstream."""

import logging
import socket
from typing import Callable, List, Optional, Tuple

from udp2tcp.errors import AttachExhaustionError, ResolutionError

logger = logging.getLogger("udp2tcp")

Candidate = Tuple[int, int, int, str, tuple]
Attach = Callable[[Candidate], socket.socket]


def format_address(sockaddr: tuple) -> str:
    """Render a getaddrinfo sockaddr as host:port, bracketing IPv6 hosts."""
    host, port = sockaddr[0], sockaddr[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def resolve(host: str, port: str, socktype: int) -> List[Candidate]:
    """Resolve host/port to candidate addresses of any family, in resolver order."""
    try:
        candidates = socket.getaddrinfo(host, port, socket.AF_UNSPEC, socktype)
    except socket.gaierror as e:
        raise ResolutionError(host, port, e.strerror or str(e)) from e
    except UnicodeError as e:
        raise ResolutionError(host, port, str(e)) from e
    if not candidates:
        raise ResolutionError(host, port, "no addresses returned")
    return candidates


def udp_listener(candidate: Candidate) -> socket.socket:
    """Bind a UDP socket to the candidate with SO_REUSEPORT set.

    SO_REUSEPORT lets the kernel spread datagrams for one address/port across
    every process bound with the option, so bridges can run side by side.
    """
    family, socktype, proto, _, sockaddr = candidate
    try:
        sock = socket.socket(family, socktype, proto)
    except OSError as e:
        logger.warning("udp_listener socket() for %s: %s", format_address(sockaddr), e)
        raise
    step = "setsockopt()"
    try:
        reuseport = getattr(socket, "SO_REUSEPORT", None)
        if reuseport is None:
            raise OSError("SO_REUSEPORT is not supported on this platform")
        sock.setsockopt(socket.SOL_SOCKET, reuseport, 1)
        step = "bind()"
        sock.bind(sockaddr)
    except OSError as e:
        logger.warning("udp_listener %s for %s: %s", step, format_address(sockaddr), e)
        sock.close()
        raise
    return sock


def tcp_client(candidate: Candidate) -> socket.socket:
    """Connect a TCP socket to the candidate."""
    family, socktype, proto, _, sockaddr = candidate
    try:
        sock = socket.socket(family, socktype, proto)
    except OSError as e:
        logger.warning("tcp_client socket() for %s: %s", format_address(sockaddr), e)
        raise
    try:
        sock.connect(sockaddr)
    except OSError as e:
        logger.warning("tcp_client connect() to %s: %s", format_address(sockaddr), e)
        sock.close()
        raise
    return sock


def attach_first(candidates: List[Candidate], attach: Attach) -> Optional[socket.socket]:
    """Return the socket from the first candidate that attaches, or None."""
    for candidate in candidates:
        try:
            return attach(candidate)
        except OSError:
            continue
    return None


def setup_socket(host: str, port: str, socktype: int, attach: Attach) -> socket.socket:
    """Resolve host/port and attach a socket to the first candidate that works.

    Raises ResolutionError when nothing resolves and AttachExhaustionError when
    every candidate fails.
    """
    candidates = resolve(host, port, socktype)
    sock = attach_first(candidates, attach)
    if sock is None:
        raise AttachExhaustionError(host, port)
    return sock


def listen_udp(host: str, port: str) -> socket.socket:
    sock = setup_socket(host, port, socket.SOCK_DGRAM, udp_listener)
    logger.info("UDP listening on %s", format_address(sock.getsockname()))
    return sock


def connect_tcp(host: str, port: str) -> socket.socket:
    sock = setup_socket(host, port, socket.SOCK_STREAM, tcp_client)
    logger.info("TCP connected to %s", format_address(sock.getpeername()))
    return sock
