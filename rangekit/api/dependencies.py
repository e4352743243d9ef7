"""
Shared FastAPI dependencies
"""

from fastapi import Request

from rangekit.config.settings import Settings, get_settings


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with, falling back to the process default"""
    return getattr(request.app.state, "settings", None) or get_settings()
