"""Configuration schema models using Pydantic."""

from enum import Enum
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, field_validator


DEFAULT_ALLOWED_ORIGINS = ["https://career-clinician-chat.lovable.app"]


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ServerConfig(BaseModel):
    """HTTP listener and CORS settings."""

    host: str = Field("0.0.0.0", min_length=1, description="Interface to bind")
    port: int = Field(3000, ge=1, le=65535, description="Listening port")
    allowed_origins: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS),
        description="Origins allowed to call the API from a browser",
    )

    @field_validator("allowed_origins")
    @classmethod
    def strip_origins(cls, v: List[str]) -> List[str]:
        """Strip whitespace and trailing slashes, drop empty entries."""
        origins = []
        for origin in v:
            cleaned = origin.strip().rstrip("/")
            if cleaned and cleaned not in origins:
                origins.append(cleaned)
        return origins


class CatalogConfig(BaseModel):
    """Where the job catalog comes from."""

    path: Path = Field(Path("data/jobs.json"), description="JSON file holding the job list")
    fallback_url_base: str = Field(
        "https://careerclinician.com/jobs/",
        min_length=1,
        description="Prefix used to build a posting URL when the source has none",
    )

    @field_validator("fallback_url_base")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        v = v.strip()
        return v if v.endswith("/") else f"{v}/"


class MatchingConfig(BaseModel):
    """Knobs for the tiered search ladder."""

    rate_slack: float = Field(
        0.15, ge=0.0, lt=1.0, description="Fraction the minimum rate may drop in the relaxation tier"
    )
    neighbor_expansion: bool = Field(True, description="Search bordering states when a state has no matches")
    neighbor_probe_limit: int = Field(4, ge=1, le=10, description="Maximum bordering states probed")
    neighbor_result_cap: int = Field(10, ge=1, le=100, description="Maximum postings from bordering states")
    fallback_size: int = Field(6, ge=1, le=50, description="Postings returned by the best-overall tier")


class SessionConfig(BaseModel):
    """Conversation history bounds."""

    max_turns: int = Field(24, ge=2, le=200, description="Messages kept per session (user + assistant)")
    max_sessions: int = Field(1000, ge=1, description="Sessions kept in memory before LRU eviction")


class LLMConfig(BaseModel):
    """Generative model settings. The API key comes from the environment."""

    model: str = Field("gpt-4o-mini", min_length=1, description="Chat completion model name")
    temperature: float = Field(0.3, ge=0.0, le=2.0, description="Sampling temperature")
    timeout_seconds: float = Field(30.0, gt=0, le=300, description="Request timeout for the model call")
    max_retries: int = Field(1, ge=0, le=5, description="Client-level retries on transient failures")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format (json or key-value)")

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the jobchat service."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    sessions: SessionConfig = Field(default_factory=SessionConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
