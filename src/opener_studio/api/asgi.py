"""ASGI entrypoint for the Opener Studio API."""

from opener_studio.api.app import create_app
from opener_studio.containers import build_container

app = create_app(build_container())
