"""herald configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from herald.configuration.notifications import NotificationSettings


class Settings(BaseSettings):
    """herald configuration settings - main aggregator.

    Environment Variables:
        PREFIX: Environment prefix for non-production deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        APP_NAME: Application name added to every log entry

    Example:
        ```python
        from herald.configuration import settings

        if settings.notifications.enable_fallback:
            ...

        if settings.is_production:
            ...
        ```
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    APP_NAME: str = "herald"

    notifications: NotificationSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        if "notifications" not in kwargs:
            kwargs["notifications"] = NotificationSettings()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
