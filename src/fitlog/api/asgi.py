"""ASGI entrypoint for the fitlog API."""

from fitlog.api.app import create_app
from fitlog.containers import build_container

app = create_app(build_container())
