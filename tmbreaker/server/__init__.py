"""HTTP webhook surface and background cycle scheduling."""

from tmbreaker.server.app import create_web_app, start_server
from tmbreaker.server.tasks import CycleScheduler

__all__ = [
    "CycleScheduler",
    "create_web_app",
    "start_server",
]
