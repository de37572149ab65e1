"""Configuration module - public API.

Centralized configuration management using Pydantic BaseSettings.

Exports:
    settings: Singleton Settings instance
    Settings: Main settings class (for testing/overrides)
    NotificationSettings: Notification settings class (for testing)

Example:
    ```python
    from herald.configuration import settings

    default_channel = settings.notifications.default_channel
    ```
"""

from herald.configuration.notifications import NotificationSettings
from herald.configuration.settings import Settings, settings

__all__ = ["Settings", "NotificationSettings", "settings"]
