"""Entry point: parse the four endpoints and run the bridge until it fails or is interrupted."""

import sys

from udp2tcp.config import parse_args
from udp2tcp.bridge import run_bridge


def main(argv=None):
    try:
        args = parse_args(argv)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    try:
        status = run_bridge(
            udp_host=args.udp_host,
            udp_port=args.udp_port,
            tcp_host=args.tcp_host,
            tcp_port=args.tcp_port,
            verbose=args.verbose,
        )
    except KeyboardInterrupt:
        status = 0
    sys.exit(status)


if __name__ == "__main__":
    main()
