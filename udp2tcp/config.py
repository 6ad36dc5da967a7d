"""Configuration and command-line argument parsing for the UDP-to-TCP bridge."""

import argparse


DEFAULT_BUFFER_SIZE = 1024


def parse_args(argv=None):
    """Parse command-line arguments and return a validated namespace."""
    parser = argparse.ArgumentParser(
        prog="udp2tcp",
        description=(
            "Forward UDP datagrams byte-for-byte to a single TCP connection. "
            "Run one process per core; SO_REUSEPORT spreads datagrams between them."
        ),
    )
    parser.add_argument("udp_host", help="UDP host to listen on")
    parser.add_argument("udp_port", help="UDP port or service name to listen on")
    parser.add_argument("tcp_host", help="TCP host to forward to")
    parser.add_argument("tcp_port", help="TCP port or service name to forward to")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (resolved and attached endpoints)",
    )
    args = parser.parse_args(argv)
    _validate(args)
    return args


def _validate(args):
    """Validate parsed arguments; raise ValueError on invalid values."""
    for name in ("udp_host", "udp_port", "tcp_host", "tcp_port"):
        if not getattr(args, name).strip():
            raise ValueError(f"{name} must be non-empty")
