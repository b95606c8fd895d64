"""ASGI entrypoint for the nutrition goals API."""

from nutrition_goals.api.app import create_app
from nutrition_goals.containers import build_container

app = create_app(build_container())
