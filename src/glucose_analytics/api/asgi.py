"""ASGI entrypoint for the glucose analytics API."""

from glucose_analytics.api.app import create_app
from glucose_analytics.containers import build_container

app = create_app(build_container())
