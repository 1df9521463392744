"""Environment variable loading and validation."""

import os
from pathlib import Path
from typing import List, Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder.

    Every value is optional; absent values leave the YAML/default settings
    in place. Without an OpenAI key the service answers with templated text.
    """

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        openai_model: Optional[str] = None,
        port: Optional[int] = None,
        allowed_origins: Optional[List[str]] = None,
        catalog_path: Optional[Path] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.openai_api_key = openai_api_key
        self.openai_model = openai_model
        self.port = port
        self.allowed_origins = allowed_origins
        self.catalog_path = catalog_path
        self.log_level = log_level
        self.environment = environment or "local"

    @property
    def llm_enabled(self) -> bool:
        return bool(self.openai_api_key)


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Optional environment variables:
    - OPENAI_API_KEY: Credential for the generative model
    - OPENAI_MODEL: Override the configured chat model
    - PORT: Listening port (1-65535)
    - ALLOWED_ORIGINS: Comma-separated CORS allow-list
    - CATALOG_PATH: Path to the job catalog JSON file
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Environment label for logs (default: local)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is present but invalid
    """
    errors = []

    openai_api_key = (os.getenv("OPENAI_API_KEY") or "").strip() or None
    openai_model = (os.getenv("OPENAI_MODEL") or "").strip() or None
    port_str = os.getenv("PORT")
    origins_str = os.getenv("ALLOWED_ORIGINS")
    catalog_path_str = os.getenv("CATALOG_PATH")
    log_level = os.getenv("LOG_LEVEL")
    environment = os.getenv("ENVIRONMENT")

    port = None
    if port_str:
        try:
            port = int(port_str)
            if port < 1 or port > 65535:
                errors.append(f"Invalid PORT: {port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid PORT: '{port_str}'. Must be a valid integer.")

    allowed_origins = None
    if origins_str is not None:
        allowed_origins = [o.strip() for o in origins_str.split(",") if o.strip()]
        if not allowed_origins:
            errors.append("ALLOWED_ORIGINS is set but contains no origins")

    if log_level:
        log_level = log_level.strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Verify PORT is a number between 1 and 65535",
                "Separate ALLOWED_ORIGINS entries with commas",
            ],
        )

    return EnvironmentConfig(
        openai_api_key=openai_api_key,
        openai_model=openai_model,
        port=port,
        allowed_origins=allowed_origins,
        catalog_path=Path(catalog_path_str) if catalog_path_str else None,
        log_level=log_level or None,
        environment=environment,
    )
