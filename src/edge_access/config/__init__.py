from .env import settings_from_env
from .settings import AccessSettings

__all__ = ["AccessSettings", "settings_from_env"]
