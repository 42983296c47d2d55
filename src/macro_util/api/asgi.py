"""ASGI entrypoint for the tool-dispatch server."""

from macro_util.api.app import create_app
from macro_util.containers import build_container

app = create_app(build_container())
