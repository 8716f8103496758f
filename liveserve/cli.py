import argparse
import sys

from liveserve.api import LiveServer, configure_logging
from liveserve.api.app import api_logger
from liveserve.api.config import (
    DEBUG_LOG_LEVEL,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_ROOT,
    QUIET_LOG_LEVEL,
)
from liveserve.api.errors import WatchError


def build_parser():
    parser = argparse.ArgumentParser(
        prog="liveserve",
        description="Serve a directory and reload connected browsers when files change.",
    )
    parser.add_argument(
        "--dir",
        type=str,
        default=DEFAULT_ROOT,
        help="The directory to serve files from",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help="Port to serve on",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=DEFAULT_HOST,
        help="Interface to bind to",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Log connections and every filesystem event",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        default=False,
        help="Only log warnings and errors",
    )
    return parser


def get_log_level(args):
    if args.debug:
        return DEBUG_LOG_LEVEL
    if args.quiet:
        return QUIET_LOG_LEVEL
    return DEFAULT_LOG_LEVEL


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(get_log_level(args))

    server = LiveServer(root=args.dir, host=args.host, port=args.port)
    try:
        server.start()
    except (WatchError, OSError, RuntimeError) as e:
        # Startup errors are fatal
        api_logger.critical(f"Startup failed: {e}")
        server.stop()
        sys.exit(1)

    try:
        server.wait()
    except KeyboardInterrupt:
        print("\nServer stopped")
    finally:
        server.stop()
