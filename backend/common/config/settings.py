"""
Centralized configuration management for backend services.

This module defines Pydantic Settings classes for managing configuration of the
customer journey service. It provides a hierarchical settings system with base
settings shared by every service and service-specific overrides.

Configuration Loading:
    Settings are loaded in the following priority order (highest to lowest):
    1. Environment variables
    2. .env file in the project root
    3. Default values defined in the classes

Validation:
    All settings are validated using Pydantic validators to ensure:
    - Type correctness
    - Value constraints (e.g., positive integers, positive timeouts)
    - Format requirements (e.g., CORS origins parsing, store backend names)

Service Settings Hierarchy:
    BaseServiceSettings (base class)
    └── JourneyServiceSettings

Example:
    ```python
    from common.config.settings import JourneyServiceSettings

    settings = JourneyServiceSettings()
    print(settings.SERVICE_NAME)  # "journey-service"
    print(settings.PORT)  # 8004
    print(settings.JOURNEY_VISITOR_CAP)  # 20
    ```

Environment Variables:
    All settings can be overridden via environment variables. For example:
    - LOG_LEVEL=DEBUG
    - RECORD_STORE_BACKEND=supabase
    - STORE_QUERY_TIMEOUT_SECONDS=10
    - CORS_ORIGINS=http://localhost:3000,https://example.com
"""

from typing import Any

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings

# Constants
SUPPORTED_RECORD_STORES = ("postgres", "supabase")
MAX_VISITOR_CAP = 1000


class BaseServiceSettings(BaseSettings):
    """
    Base settings class providing common configuration for all services.

    This class defines the shared configuration options: service metadata, API
    configuration, CORS, logging and database pool sizing. Service-specific
    settings classes inherit from this base class and override or extend these
    settings as needed.

    Attributes:
        SERVICE_NAME (str): Name identifier for the service. Default: "base-service"
        SERVICE_VERSION (str): Version string for the service. Default: "0.0.1"
        PORT (int): Port number the service listens on. Default: 8000

        ENVIRONMENT (str): Deployment environment. Values: "DEV" or "PROD". Default: "DEV"
        DEBUG (bool): Enable debug mode. Default: False
        LOG_LEVEL (str): Logging level. Default: "INFO"

        API_V1_STR (str): API version prefix for routes. Default: "/api/v1"
        CORS_ORIGINS (list[str]): Allowed CORS origins, comma-separated string or list.

        DATABASE_POOL_SIZE (int): Number of connections to maintain in the pool. Default: 10
        DATABASE_MAX_OVERFLOW (int): Maximum overflow connections beyond pool_size. Default: 5

    Note:
        - CORS_ORIGINS can be set as a comma-separated string or a list
        - Pool sizes are validated to be non-negative integers
    """

    # Service Information (defaults)
    SERVICE_NAME: str = "base-service"
    SERVICE_VERSION: str = "0.0.1"
    PORT: int = 8000

    # Global Configuration
    ENVIRONMENT: str = "DEV"  # Can be "DEV" or "PROD"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    @field_validator("ENVIRONMENT", mode="before")
    @classmethod
    def normalize_environment(cls, v: Any) -> str:
        """Upper-case the environment name and fold the long spellings into DEV or PROD."""
        value = str(v or "DEV").strip().upper()
        return {"DEVELOPMENT": "DEV", "PRODUCTION": "PROD"}.get(value, value)

    # API Configuration
    API_V1_STR: str = "/api/v1"

    # CORS Configuration
    CORS_ORIGINS: Any = ""

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Any) -> list[str]:
        """
        Assemble CORS origins from string or list format.

        Accepts either a comma-separated string
        ("http://localhost:3000,https://example.com") or a list of strings.
        Anything else, and empty input, yields an empty list.

        Args:
            v: Input value that can be a string, list, or other type.

        Returns:
            List of CORS origin strings with whitespace stripped.
        """
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return v
        return []

    # Database Configuration
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 5

    @field_validator("DATABASE_POOL_SIZE", "DATABASE_MAX_OVERFLOW", mode="before")
    @classmethod
    def validate_positive_int(cls, v: Any, info: ValidationInfo) -> int | None:
        """
        Validate that database pool configuration fields are positive integers.

        Handles type conversion from strings (common when loading from
        environment variables) and validates the value range.

        Args:
            v: Input value to validate. Can be int, str, or None.
            info: Pydantic ValidationInfo object containing field metadata.

        Returns:
            Validated integer value, or None if input is None.

        Raises:
            ValueError: If the value cannot be converted to an integer or is negative.
        """
        if v is None:
            return None
        try:
            int_val = int(v)
            if int_val < 0:
                msg = f"{info.field_name} must be a positive integer"
                raise ValueError(msg)
            return int_val
        except (ValueError, TypeError) as e:
            msg = f"{info.field_name} must be a valid positive integer, got: {v}"
            raise ValueError(
                msg
            ) from e

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


class JourneyServiceSettings(BaseServiceSettings):
    """
    Settings configuration for the customer journey service.

    This class extends BaseServiceSettings with the record store connection
    details and the bounds used when reconstructing visitor journeys.

    Inherited Attributes:
        All attributes from BaseServiceSettings are available with these overrides:
        - SERVICE_NAME: "journey-service"
        - SERVICE_VERSION: "0.1.0"
        - PORT: 8004

    Additional Attributes:
        RECORD_STORE_BACKEND (str): Which record store client to use.
            "postgres" (SQLAlchemy async ORM) or "supabase" (PostgREST).
        POSTGRES_HOST / POSTGRES_PORT / POSTGRES_USER / POSTGRES_PASSWORD /
        POSTGRES_DATABASE: Connection parameters for the postgres backend.
        SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY: Credentials for the
            supabase backend.
        STORE_QUERY_TIMEOUT_SECONDS (float): Timeout applied to every single
            record store query. A timeout is reported as a fetch failure.
        JOURNEY_VISITOR_CAP (int): Maximum number of visitors reconstructed
            per query. Default: 20.
        JOURNEY_RECENT_EVENT_SCAN (int): Number of most recent events scanned
            to discover visitors when no search is given. Default: 100.
        LEAD_SEARCH_LIMIT (int): Maximum number of leads matched by an email
            search. Default: 20.

    Example:
        ```python
        settings = JourneyServiceSettings()
        print(settings.RECORD_STORE_BACKEND)  # "postgres"
        print(settings.STORE_QUERY_TIMEOUT_SECONDS)  # 30.0
        ```

    Note:
        - Credentials should be provided via environment variables, never
          committed to the .env file of a shared repository
        - Reducing JOURNEY_VISITOR_CAP reduces the fan-out of concurrent
          store queries per request
    """

    SERVICE_NAME: str = "journey-service"
    SERVICE_VERSION: str = "0.1.0"
    PORT: int = 8004

    # Record Store Configuration
    RECORD_STORE_BACKEND: str = "postgres"

    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DATABASE: str = "journeys"

    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    STORE_QUERY_TIMEOUT_SECONDS: float = 30.0

    # Journey Reconstruction Bounds
    JOURNEY_VISITOR_CAP: int = 20
    JOURNEY_RECENT_EVENT_SCAN: int = 100
    LEAD_SEARCH_LIMIT: int = 20

    @field_validator("RECORD_STORE_BACKEND")
    @classmethod
    def validate_record_store_backend(cls, v: str) -> str:
        """
        Validate the record store backend name.

        Args:
            v: Backend name, matched case-insensitively.

        Returns:
            The lowercase backend name.

        Raises:
            ValueError: If the backend is not one of SUPPORTED_RECORD_STORES.
        """
        backend = v.strip().lower()
        if backend not in SUPPORTED_RECORD_STORES:
            msg = (
                f"RECORD_STORE_BACKEND must be one of {', '.join(SUPPORTED_RECORD_STORES)}, "
                f"got: {v}"
            )
            raise ValueError(msg)
        return backend

    @field_validator("STORE_QUERY_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Reject zero or negative query timeouts."""
        if v <= 0:
            msg = "STORE_QUERY_TIMEOUT_SECONDS must be greater than 0"
            raise ValueError(msg)
        return v

    @field_validator("JOURNEY_VISITOR_CAP", "JOURNEY_RECENT_EVENT_SCAN", "LEAD_SEARCH_LIMIT")
    @classmethod
    def validate_bounds(cls, v: int, info: ValidationInfo) -> int:
        """
        Validate reconstruction bounds.

        Raises:
            ValueError: If the value is less than 1 or exceeds MAX_VISITOR_CAP.
        """
        if v < 1:
            msg = f"{info.field_name} must be at least 1"
            raise ValueError(msg)
        if v > MAX_VISITOR_CAP:
            msg = f"{info.field_name} cannot exceed {MAX_VISITOR_CAP}"
            raise ValueError(msg)
        return v
