"""ASGI entrypoint for the workshop journal API."""

from workshop_journal.api.app import create_app
from workshop_journal.containers import build_container

app = create_app(build_container())
