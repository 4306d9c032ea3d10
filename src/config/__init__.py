from .logging import setup_logging
from .settings import Settings, get_settings, settings

__all__ = [
    "settings",
    "get_settings",
    "setup_logging",
    "Settings",
]
