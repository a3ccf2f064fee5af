from .settings import APP_VERSION, Settings, settings

__all__ = ["APP_VERSION", "Settings", "settings"]
