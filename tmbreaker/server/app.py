"""Webhook receiver — accepts alerts over HTTP and schedules breaker cycles.

Runs as an ``aiohttp`` web server.  Exposes:
- ``POST /api/breaker`` → validate the alert, answer at once, trip in the background

Responses:
- ``202 Accepted``   → a decision cycle was scheduled (its outcome is only logged)
- ``204 No Content`` → the alert is not ``Fired``; nothing to do
- ``400 Bad Request`` → undecodable body or a target that is not a Traffic Manager profile
"""

from __future__ import annotations

import structlog
from aiohttp import web

from tmbreaker.alerts.exceptions import (
    AlertDecodeError,
    ConditionMismatchError,
    IdentityFormatError,
)
from tmbreaker.alerts.parser import parse_alert
from tmbreaker.server.tasks import CycleScheduler

logger = structlog.stdlib.get_logger()

RESP_ACCEPTED = "Accepted"
DEFAULT_PATH = "/api/breaker"


async def _handle_breaker(request: web.Request) -> web.Response:
    scheduler: CycleScheduler = request.app["scheduler"]
    body = await request.read()

    try:
        identity = parse_alert(body)
    except ConditionMismatchError:
        return web.Response(status=204)
    except (AlertDecodeError, IdentityFormatError) as exc:
        return web.Response(status=400, text=str(exc))

    scheduler.spawn(identity)
    return web.Response(status=202, text=RESP_ACCEPTED)


async def _drain_cycles(app: web.Application) -> None:
    scheduler: CycleScheduler = app["scheduler"]
    await scheduler.drain(app["shutdown_grace_secs"])


def create_web_app(
    scheduler: CycleScheduler,
    path: str = DEFAULT_PATH,
    shutdown_grace_secs: float = 10.0,
) -> web.Application:
    """Create the aiohttp web application."""
    app = web.Application()
    app["scheduler"] = scheduler
    app["shutdown_grace_secs"] = shutdown_grace_secs
    app.router.add_post(path, _handle_breaker)
    app.on_cleanup.append(_drain_cycles)
    return app


async def start_server(
    app: web.Application,
    host: str = "0.0.0.0",
    port: int = 8080,
) -> web.AppRunner:
    """Start the webhook server. Returns the runner for cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("server_listening", host=host, port=port)
    return runner
