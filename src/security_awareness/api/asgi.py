"""ASGI entrypoint for the security awareness API."""

from security_awareness.api.app import create_app
from security_awareness.containers import build_container

app = create_app(build_container())
