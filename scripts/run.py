#!/usr/bin/env python3
"""Service entrypoint — wires the breaker and serves the alert webhook.

Usage::

    # Run with default config
    python scripts/run.py

    # Custom config file
    python scripts/run.py --config config/settings.yaml

    # Override log level / listen port
    python scripts/run.py --log-level DEBUG --port 7071

Inside an Azure Functions custom handler the listen port comes from
``FUNCTIONS_CUSTOMHANDLER_PORT`` and takes precedence over the config file.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import signal
import sys

import structlog

from tmbreaker.breaker.engine import TrafficManagerBreaker
from tmbreaker.core.config import Settings, load_settings
from tmbreaker.core.logging import setup_logging
from tmbreaker.server.app import create_web_app, start_server
from tmbreaker.server.tasks import CycleScheduler
from tmbreaker.trafficmanager.client import TrafficManagerClient
from tmbreaker.trafficmanager.credentials import create_credential
from tmbreaker.trafficmanager.exceptions import CredentialError

logger = structlog.get_logger(__name__)


def resolve_port(settings: Settings, cli_port: int | None = None) -> int:
    """CLI flag, then the Functions host variable, then the config file."""
    if cli_port is not None:
        return cli_port
    env_port = os.environ.get(settings.server.port_env)
    if env_port:
        return int(env_port)
    return settings.server.port


async def run(args: argparse.Namespace) -> int:
    """Start the webhook server and run until interrupted."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level)

    host = args.host or settings.server.host
    port = resolve_port(settings, args.port)

    logger.info(
        "breaker_starting",
        host=host,
        port=port,
        path=settings.server.path,
        cycle_timeout_secs=settings.breaker.cycle_timeout_secs,
    )

    # ── Credential (fatal on failure) ────────────────────────────
    try:
        credential = await create_credential(settings.azure)
    except CredentialError:
        logger.critical("azure_credential_failed", exc_info=True)
        return 1

    # ── Control plane + decision engine ──────────────────────────
    client = TrafficManagerClient(credential)
    breaker = TrafficManagerBreaker(client, settings.breaker)
    scheduler = CycleScheduler(breaker)

    # ── Webhook server ───────────────────────────────────────────
    app = create_web_app(
        scheduler,
        path=settings.server.path,
        shutdown_grace_secs=settings.server.shutdown_grace_secs,
    )
    runner = await start_server(app, host=host, port=port)

    # ── Wait for shutdown signal ─────────────────────────────────
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("shutdown_signal_received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows: signal handlers not supported on ProactorEventLoop
            pass

    try:
        await stop_event.wait()
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt")

    # ── Graceful shutdown ────────────────────────────────────────
    logger.info("breaker_shutting_down", pending_cycles=scheduler.pending)

    # Cleanup drains in-flight cycles before the client goes away.
    await runner.cleanup()
    await client.close()
    close = getattr(credential, "close", None)
    if close is not None:
        close()

    logger.info("breaker_stopped")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the Traffic Manager circuit breaker webhook.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Listen address override",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listen port override",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
