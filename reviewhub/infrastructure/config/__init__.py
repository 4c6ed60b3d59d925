from .settings import (
    DatabaseSettings,
    LLMSettings,
    ServerSettings,
    SessionSettings,
    Settings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "LLMSettings",
    "ServerSettings",
    "SessionSettings",
    "Settings",
    "get_settings",
]
