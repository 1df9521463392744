"""Main entry point for the jobchat service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import sys
from pathlib import Path
from typing import Optional, Tuple

import uvicorn

from jobchat.api import AppServices, create_app
from jobchat.catalog import load_catalog
from jobchat.composer import OpenAIGenerator, ResponseComposer
from jobchat.config.environment import EnvironmentConfig
from jobchat.config.exceptions import ConfigurationError
from jobchat.config.loader import load_config
from jobchat.config.models import AppConfig
from jobchat.extraction import FilterExtractor
from jobchat.logging import configure_logging, get_logger
from jobchat.matching import MatchEngine
from jobchat.sessions import SessionStore

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > environment > config file > INFO.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_services(app_config: AppConfig, env_config: EnvironmentConfig) -> AppServices:
    """Load the catalog and wire up the per-process services."""
    catalog = load_catalog(
        app_config.catalog.path,
        fallback_url_base=app_config.catalog.fallback_url_base,
    )

    generator = None
    if env_config.llm_enabled:
        generator = OpenAIGenerator(env_config.openai_api_key, settings=app_config.llm)
    else:
        logger.warning(
            "OPENAI_API_KEY not set; replies will be templated",
            extra={"event": "composer.model_disabled"},
        )

    return AppServices(
        catalog=catalog,
        extractor=FilterExtractor(),
        engine=MatchEngine(catalog, settings=app_config.matching),
        composer=ResponseComposer(generator=generator),
        sessions=SessionStore(
            max_turns=app_config.sessions.max_turns,
            max_sessions=app_config.sessions.max_sessions,
        ),
    )


def main() -> int:
    """
    Main entry point for the jobchat service.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = argparse.ArgumentParser(
        description="jobchat - conversational job search grounded in a static job catalog"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present, else built-in defaults)",
    )
    parser.add_argument("--host", default=None, help="Interface to bind (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (overrides config and PORT)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Load configuration and catalog, report, and exit without serving",
    )

    args = parser.parse_args()

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        host = args.host or app_config.server.host
        port = args.port or app_config.server.port

        logger.info(
            "jobchat starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "catalog_path": str(app_config.catalog.path),
                "llm_enabled": env_config.llm_enabled,
            },
        )

        services = build_services(app_config, env_config)

        if args.check:
            logger.info(
                f"Check complete: {len(services.catalog)} jobs loaded",
                extra={"event": "service.check.completed", "job_count": len(services.catalog)},
            )
            return 0 if len(services.catalog) else 1

        app = create_app(services, allowed_origins=app_config.server.allowed_origins)

        logger.info(
            f"Serving on {host}:{port}",
            extra={
                "event": "service.serving",
                "host": host,
                "port": port,
                "allowed_origins": app_config.server.allowed_origins,
            },
        )
        # log_config=None keeps uvicorn on the handlers configured above
        uvicorn.run(app, host=host, port=port, log_config=None)

        logger.info("jobchat stopped", extra={"event": "service.stopping"})
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
