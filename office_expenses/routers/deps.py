from fastapi import Request

from office_expenses.core.config import Settings
from office_expenses.db.dal import Database


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    settings: Settings = request.app.state.settings
    return Database(settings.db_path)
