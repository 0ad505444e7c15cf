"""Command-line listener: ``pyupi --api-dir ./api --port 3030``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .config import load_serve_options
from .server import serve

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pyupi", description="Serve a directory of Python modules over UPI")
    parser.add_argument("--host", default=None, help="Interface to bind (env UPI_HOST)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (env UPI_PORT)")
    parser.add_argument("--api-dir", default=None, help="Directory of modules to serve (env UPI_API_DIR)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        options = load_serve_options(host=args.host, port=args.port, api_dir=args.api_dir)
    except ValueError as exc:
        logging.getLogger("pyupi").error("%s", exc)
        return 2

    try:
        asyncio.run(serve(options))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
