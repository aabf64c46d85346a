#!/usr/bin/env python3
"""
anytra MCP server entry point.

Loads configuration from the environment (and a .env file), sets up logging,
builds the OpenRouter provider and the enhancement orchestrator, and serves
JSON-RPC requests over stdin/stdout until EOF or SIGINT/SIGTERM.
"""

import argparse
import asyncio
import logging
import logging.handlers
import signal
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from anytra import __version__
from anytra.config import DEFAULT_SHUTDOWN_TIMEOUT, LOG_FORMAT, SERVER_NAME, Config
from anytra.exceptions import ConfigurationError, NotConfiguredError
from anytra.handlers.enhance_prompt import EnhancePrompt
from anytra.providers.openrouter import OpenRouterProvider
from anytra.server import run_stdio_server

logger = logging.getLogger(SERVER_NAME)


def setup_logging(level: str) -> logging.Logger:
    """
    Logging setup with a rotating file under ~/.anytra/logs and a console
    handler. Everything goes to stderr or the file; stdout carries protocol
    lines only.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    try:
        log_dir = Path.home() / ".anytra" / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "anytra.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"Warning: Could not create file logger: {e}", file=sys.stderr)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME, description="MCP server that enhances prompts"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (error, warning, info, debug); overrides LOG_LEVEL",
    )
    parser.add_argument(
        "--shutdown-timeout",
        type=float,
        default=DEFAULT_SHUTDOWN_TIMEOUT,
        help="Seconds an in-flight request may run after SIGINT/SIGTERM",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def install_signal_handlers(stop_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops have no signal handler support.
            logger.debug(f"Signal handler for {sig.name} not supported")


async def serve(config: Config, shutdown_timeout: float) -> None:
    provider = OpenRouterProvider(config.openrouter)
    usecase = EnhancePrompt(provider, config)
    stop_event = asyncio.Event()
    install_signal_handlers(stop_event)

    try:
        await run_stdio_server(usecase, shutdown_timeout, stop_event)
    finally:
        await provider.aclose()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    load_dotenv()

    try:
        config = Config.from_env()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or config.logging.level)
    logger.info(f"Starting {SERVER_NAME} {__version__}")
    logger.info(
        f"Sequential thinking default: "
        f"{'enabled' if config.sequential_thinking_enabled else 'disabled'}"
    )

    try:
        asyncio.run(serve(config, args.shutdown_timeout))
    except NotConfiguredError as e:
        print(f"Failed to create OpenRouter client: {e}", file=sys.stderr)
        return 1

    logger.info(f"Shutting down {SERVER_NAME}")
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
