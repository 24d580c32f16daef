"""Command-line entry point of the HTTP server."""

from __future__ import annotations

import contextlib
import os
import signal
import sys
from collections.abc import Iterator, Sequence

from webserv.config_parser import ConfigError, ConfigParser, default_config_path
from webserv.logger import LogLevel, Logger, destroy_logger, get_logger
from webserv.server import Server

LOG_FILE = "webserv.log"


def _print_usage(program: str) -> None:
    print(f"Usage: {program} [configuration_file]")
    print("  configuration_file: Path to server configuration file (optional)")
    print(f"                     Default: {default_config_path()}")


@contextlib.contextmanager
def _shutdown_signals(server: Server, logger: Logger) -> Iterator[None]:
    """Stop the server on SIGINT/SIGTERM and ignore SIGPIPE while active."""

    def handle(signum: int, frame: object) -> None:
        logger.info("Received shutdown signal")
        server.stop()
        destroy_logger()
        sys.exit(0)

    previous = {
        signal.SIGINT: signal.signal(signal.SIGINT, handle),
        signal.SIGTERM: signal.signal(signal.SIGTERM, handle),
    }
    if hasattr(signal, "SIGPIPE"):
        previous[signal.SIGPIPE] = signal.signal(signal.SIGPIPE, signal.SIG_IGN)
    try:
        yield
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server with an optional configuration file argument."""
    program = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "webserv"
    args = list(sys.argv[1:] if argv is None else argv)

    if len(args) > 1:
        print("Error: Too many arguments", file=sys.stderr)
        _print_usage(program)
        return 1
    if args and args[0] in ("-h", "--help"):
        _print_usage(program)
        return 0
    config_file = args[0] if args else default_config_path()

    logger = get_logger()
    logger.min_level = LogLevel.INFO
    logger.console_enabled = True
    logger.set_log_file(LOG_FILE)
    logger.file_enabled = True

    logger.info("=== Webserv HTTP Server ===")
    logger.info(f"Configuration file: {config_file}")

    try:
        try:
            configs = ConfigParser(config_file).parse()
        except ConfigError as exc:
            logger.error(f"Failed to parse configuration file: {exc}")
            return 1

        server = Server()
        for config in configs:
            server.add_server_config(config)

        with _shutdown_signals(server, logger):
            server.init()
            logger.info("Server initialized successfully")
            logger.info("Starting server...")
            server.run()

        logger.info("Server stopped gracefully")
        return 0
    except Exception as exc:
        logger.fatal(f"Fatal error: {exc}")
        return 1
    finally:
        destroy_logger()


if __name__ == "__main__":
    sys.exit(main())