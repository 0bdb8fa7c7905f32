"""ASGI entrypoint for the Ninja Training API."""

from ninja_training.api.app import create_app
from ninja_training.containers import build_container

app = create_app(build_container())
