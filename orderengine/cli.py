"""Command line entry point of the order gateway."""

from __future__ import annotations

import argparse
import sys

from .manager import SymbolOrderBookManager
from .server import SocketServer


def main(argv: list[str] | None = None) -> int:
    """Run the gateway until a line is read from standard input."""
    parser = argparse.ArgumentParser(description="Order matching gateway.")
    parser.add_argument("--port", type=int, default=9000, help="TCP port to listen on")
    parser.add_argument("--host", default="", help="address to bind to")
    parser.add_argument("--threads", type=int, default=5, help="client worker threads")
    args = parser.parse_args(argv)

    manager = SymbolOrderBookManager()
    server = SocketServer(args.port, manager, n_threads=args.threads, host=args.host)
    server.start()
    try:
        sys.stdin.readline()
    finally:
        server.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())