"""ASGI entrypoint for the body monitor API."""

from body_monitor.api.app import create_app
from body_monitor.containers import build_container

app = create_app(build_container())
