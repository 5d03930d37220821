"""ASGI entrypoint for the meal analysis API."""

from healthy_meal_track.api.app import create_app
from healthy_meal_track.containers import build_container

app = create_app(build_container())
