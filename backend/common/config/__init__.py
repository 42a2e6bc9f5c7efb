"""
Centralized configuration management for backend services.

This module provides a unified interface for accessing service-specific configuration
settings. It selects the appropriate settings class based on the service name.

The configuration system uses Pydantic Settings, which automatically loads values from:
    1. Environment variables (highest priority)
    2. .env file in the project root
    3. Default values defined in the settings classes

Service-Specific Settings:
    - JourneyServiceSettings: Configuration for journey-service
    - BaseServiceSettings: Base configuration shared by all services

Example:
    ```python
    from common.config import get_settings

    settings = get_settings("journey-service")
    print(settings.SERVICE_NAME)  # "journey-service"
    print(settings.PORT)  # 8004
    ```
"""

from common.config.settings import (
    BaseServiceSettings,
    JourneyServiceSettings,
)


def get_settings(service_name: str | None = None) -> BaseServiceSettings:
    """
    Get settings instance for the specified service.

    Performs fuzzy matching on the service name, so "journey" matches
    "journey-service".

    Args:
        service_name: Name of the service to get settings for. Any string
            containing "journey" returns JourneyServiceSettings; None or any
            other value returns BaseServiceSettings.

    Returns:
        Instance of the appropriate settings class.

    Note:
        - Settings are loaded from environment variables and .env file
        - Each call returns a new instance (settings are not cached)
        - Service name matching is case-insensitive
    """
    if service_name:
        service_lower = service_name.lower()
        if service_lower == "journey-service" or "journey" in service_lower:
            return JourneyServiceSettings()
    # Default to base settings
    return BaseServiceSettings()


__all__ = [
    "BaseServiceSettings",
    "JourneyServiceSettings",
    "get_settings",
]
