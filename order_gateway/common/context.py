from quart import current_app

from .config import Settings


def get_settings() -> Settings:
    return current_app.settings


def get_sheets():
    return current_app.sheets
