"""
Bridge configuration management.

Configuration is loaded from multiple sources with a clear priority order:

    1. Environment variables (highest priority) - for containerized deployments
    2. Config file (config/server.ini) - for static deployments
    3. Built-in defaults (lowest priority) - sensible fallbacks

Configuration is loaded once at module import time and cached. The
BridgeConfig dataclass provides typed access to all settings.

Usage:
    from translation_bridge.config import config

    print(config.server.port)
    print(config.upstream.base_url)
    print(config.translation.default_target_language)

Environment Variable Mapping:
    BRIDGE_HOST                      -> server.host
    BRIDGE_PORT (or PORT)            -> server.port
    BRIDGE_UPSTREAM_URL              -> upstream.base_url
    BRIDGE_UPSTREAM_TIMEOUT          -> upstream.timeout_seconds
    BRIDGE_DEFAULT_TARGET_LANGUAGE   -> translation.default_target_language
    BRIDGE_REQUIRE_HTTPS             -> security.require_https
    BRIDGE_MAX_REQUEST_BYTES         -> security.max_request_bytes
    BRIDGE_CORS_ORIGINS              -> security.cors_origins
    BRIDGE_LOG_LEVEL                 -> logging.level
"""

import configparser
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Project root directory (contains src/, config/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_FILE = CONFIG_DIR / "server.ini"
CONFIG_EXAMPLE = CONFIG_DIR / "server.example.ini"


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================


@dataclass
class ServerSettings:
    """Network server configuration."""

    host: str = "0.0.0.0"  # nosec B104 - intentional for server binding
    port: int = 8080


@dataclass
class UpstreamSettings:
    """Translation engine endpoint configuration."""

    base_url: str = "https://ark.cn-beijing.volces.com/api/v3/responses"
    timeout_seconds: float = 60.0


@dataclass
class TranslationSettings:
    """Directive resolution defaults."""

    default_target_language: str = "zh"


@dataclass
class SecuritySettings:
    """Transport-level request checks."""

    require_https: bool = False
    max_request_bytes: int = 24 * 1024
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["simple", "detailed"] = "detailed"


@dataclass
class BridgeConfig:
    """
    Complete bridge configuration.

    Aggregates all settings sections. Access via the module-level `config`
    singleton, or build one explicitly and pass it to ``create_app``.
    """

    server: ServerSettings = field(default_factory=ServerSettings)
    upstream: UpstreamSettings = field(default_factory=UpstreamSettings)
    translation: TranslationSettings = field(default_factory=TranslationSettings)
    security: SecuritySettings = field(default_factory=SecuritySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def _parse_bool(value: str) -> bool:
    """Parse a string value to boolean."""
    return value.lower() in ("true", "yes", "1", "on", "enabled")


def _parse_list(value: str) -> list[str]:
    """Parse a comma-separated string to list, stripping whitespace."""
    if not value or value.strip() == "":
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _load_from_ini(parser: configparser.ConfigParser, cfg: BridgeConfig) -> None:
    """Load configuration from parsed INI file into BridgeConfig."""
    # Server section
    if parser.has_section("server"):
        if parser.has_option("server", "host"):
            cfg.server.host = parser.get("server", "host")
        if parser.has_option("server", "port"):
            cfg.server.port = parser.getint("server", "port")

    # Upstream section
    if parser.has_section("upstream"):
        if parser.has_option("upstream", "base_url"):
            cfg.upstream.base_url = parser.get("upstream", "base_url")
        if parser.has_option("upstream", "timeout_seconds"):
            cfg.upstream.timeout_seconds = parser.getfloat("upstream", "timeout_seconds")

    # Translation section
    if parser.has_section("translation"):
        if parser.has_option("translation", "default_target_language"):
            cfg.translation.default_target_language = parser.get(
                "translation", "default_target_language"
            ).strip()

    # Security section
    if parser.has_section("security"):
        if parser.has_option("security", "require_https"):
            cfg.security.require_https = _parse_bool(parser.get("security", "require_https"))
        if parser.has_option("security", "max_request_bytes"):
            cfg.security.max_request_bytes = parser.getint("security", "max_request_bytes")
        if parser.has_option("security", "cors_origins"):
            cfg.security.cors_origins = _parse_list(parser.get("security", "cors_origins"))

    # Logging section
    if parser.has_section("logging"):
        if parser.has_option("logging", "level"):
            cfg.logging.level = parser.get("logging", "level").upper()
        if parser.has_option("logging", "format"):
            val = parser.get("logging", "format").lower()
            if val in ("simple", "detailed"):
                cfg.logging.format = val  # type: ignore[assignment]


def _apply_env_overrides(cfg: BridgeConfig) -> None:
    """Apply environment variable overrides to configuration."""
    # Server settings
    if env_host := os.getenv("BRIDGE_HOST"):
        cfg.server.host = env_host
    if env_port := (os.getenv("BRIDGE_PORT") or os.getenv("PORT")):
        cfg.server.port = int(env_port)

    # Upstream settings
    if env_url := os.getenv("BRIDGE_UPSTREAM_URL"):
        cfg.upstream.base_url = env_url
    if env_timeout := os.getenv("BRIDGE_UPSTREAM_TIMEOUT"):
        cfg.upstream.timeout_seconds = float(env_timeout)

    # Translation settings
    if env_target := os.getenv("BRIDGE_DEFAULT_TARGET_LANGUAGE"):
        cfg.translation.default_target_language = env_target.strip()

    # Security settings
    if env_https := os.getenv("BRIDGE_REQUIRE_HTTPS"):
        cfg.security.require_https = _parse_bool(env_https)
    if env_max := os.getenv("BRIDGE_MAX_REQUEST_BYTES"):
        cfg.security.max_request_bytes = int(env_max)
    if env_cors := os.getenv("BRIDGE_CORS_ORIGINS"):
        cfg.security.cors_origins = _parse_list(env_cors)

    # Logging settings
    if env_log := os.getenv("BRIDGE_LOG_LEVEL"):
        cfg.logging.level = env_log.upper()


def load_config() -> BridgeConfig:
    """
    Load configuration from all sources with proper priority.

    Priority (highest wins):
        1. Environment variables
        2. config/server.ini
        3. config/server.example.ini (fallback for development)
        4. Built-in defaults

    Returns:
        BridgeConfig: Fully populated configuration object.
    """
    cfg = BridgeConfig()

    config_file = None
    if CONFIG_FILE.exists():
        config_file = CONFIG_FILE
    elif CONFIG_EXAMPLE.exists():
        config_file = CONFIG_EXAMPLE

    if config_file:
        parser = configparser.ConfigParser()
        parser.read(config_file, encoding="utf-8")
        _load_from_ini(parser, cfg)

    _apply_env_overrides(cfg)

    return cfg


def reload_config() -> "BridgeConfig":
    """
    Reload configuration from disk and environment.

    This updates the module-level `config` singleton. An already-created
    app keeps the settings object it was built with.
    """
    global config
    config = load_config()
    return config


# =============================================================================
# MODULE-LEVEL SINGLETON
# =============================================================================

config = load_config()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

_LOG_FORMATS = {
    "simple": "%(levelname)s %(message)s",
    "detailed": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
}


def configure_logging(settings: LoggingSettings) -> None:
    """Install the root log handler using the configured level and format."""
    logging.basicConfig(
        level=getattr(logging, settings.level, logging.INFO),
        format=_LOG_FORMATS.get(settings.format, _LOG_FORMATS["detailed"]),
        force=True,
    )


def get_config_status() -> dict:
    """
    Get configuration status for diagnostics.

    Returns a dictionary with configuration source information.
    """
    return {
        "config_file_exists": CONFIG_FILE.exists(),
        "config_file_path": str(CONFIG_FILE),
        "using_example": not CONFIG_FILE.exists() and CONFIG_EXAMPLE.exists(),
        "upstream_url": config.upstream.base_url,
        "default_target_language": config.translation.default_target_language,
        "require_https": config.security.require_https,
    }


def print_config_summary() -> None:
    """Print a summary of current configuration to stdout."""
    status = get_config_status()
    print("\n" + "=" * 60)
    print("BRIDGE CONFIGURATION")
    print("=" * 60)
    print(f"Config file: {status['config_file_path']}")
    print(f"File exists: {status['config_file_exists']}")
    if status["using_example"]:
        print("WARNING: Using example config (copy to server.ini for production)")
    print("-" * 60)
    print(f"Server:          {config.server.host}:{config.server.port}")
    print(f"Upstream:        {config.upstream.base_url}")
    print(f"Timeout:         {config.upstream.timeout_seconds}s")
    print(f"Default target:  {config.translation.default_target_language}")
    print(f"Require HTTPS:   {config.security.require_https}")
    print(f"Max body bytes:  {config.security.max_request_bytes}")
    print(f"Log level:       {config.logging.level}")
    print("=" * 60 + "\n")
