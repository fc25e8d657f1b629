"""
Configuration management for chain_rpc

Node endpoints, retry policy and logging come from environment variables,
optionally seeded from a .env file next to the package.
"""

import os
import logging
from dataclasses import dataclass, field
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

N = TypeVar("N", int, float)

# Loggers below the root package that follow the configured level
_CHILD_LOGGERS = ("infra", "evm", "solana", "protocols")


def _load_env_file():
    """Load .env from the directory containing the chain_rpc package"""
    env_file = Path(__file__).parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)


_load_env_file()


def _env_str(key: str, default: str = "") -> str:
    value = os.getenv(key)
    return default if value is None else value


def _env_number(key: str, default: N, cast: Callable[[str], N]) -> N:
    """Read a numeric variable; malformed values are logged and ignored"""
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring {key}='{raw}': not a valid {cast.__name__}, using {default}")
        return default


def _env_flag(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes", "on")


@dataclass
class RpcConfig:
    """
    Node endpoints and retry policy

    Environment variables:
        NODE_URL: EVM-compatible node endpoint
        SOLANA_NODE_URL: Solana node endpoint (falls back to NODE_URL)
        MAX_RETRIES: Attempts per call, including the first (default: 3)
        BASE_DELAY_MS: Backoff base delay (default: 400)
        JITTER_MIN / JITTER_MAX: Backoff jitter multiplier range (default: 0.7 / 1.3)
        MAX_DELAY_MS: Backoff cap (default: 30000)
        TIMEOUT_MS: Per-attempt timeout (default: 10000)
        RPC_BATCH_SIZE: Requests per JSON-RPC batch (default: 10)
        SOLANA_COMMITMENT: Commitment level for Solana reads (default: confirmed)
    """
    node_url: str = field(default_factory=lambda: _env_str("NODE_URL"))
    solana_node_url: str = field(
        default_factory=lambda: _env_str("SOLANA_NODE_URL") or _env_str("NODE_URL")
    )
    max_retries: int = field(default_factory=lambda: _env_number("MAX_RETRIES", 3, int))
    base_delay_ms: float = field(default_factory=lambda: _env_number("BASE_DELAY_MS", 400.0, float))
    jitter_min: float = field(default_factory=lambda: _env_number("JITTER_MIN", 0.7, float))
    jitter_max: float = field(default_factory=lambda: _env_number("JITTER_MAX", 1.3, float))
    max_delay_ms: float = field(default_factory=lambda: _env_number("MAX_DELAY_MS", 30_000.0, float))
    timeout_ms: float = field(default_factory=lambda: _env_number("TIMEOUT_MS", 10_000.0, float))
    batch_size: int = field(default_factory=lambda: _env_number("RPC_BATCH_SIZE", 10, int))
    commitment: str = field(default_factory=lambda: _env_str("SOLANA_COMMITMENT", "confirmed"))


@dataclass
class LoggingConfig:
    """
    Logging output settings

    Environment variables:
        LOG_LEVEL: Level name (default: INFO)
        LOG_FORMAT: logging.Formatter format string
        LOG_FILE: Rotating log file path; no file output when empty
        LOG_CONSOLE: Write to stderr (default: true)
        LOG_MAX_BYTES: Rotation size (default: 10MB)
        LOG_BACKUP_COUNT: Rotated files kept (default: 5)
    """
    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: _env_str(
        "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))
    log_file: str = field(default_factory=lambda: _env_str("LOG_FILE"))
    console_output: bool = field(default_factory=lambda: _env_flag("LOG_CONSOLE", True))
    max_bytes: int = field(default_factory=lambda: _env_number("LOG_MAX_BYTES", 10 * 1024 * 1024, int))
    backup_count: int = field(default_factory=lambda: _env_number("LOG_BACKUP_COUNT", 5, int))

    @property
    def level(self) -> int:
        """Numeric level; unknown names map to INFO"""
        value = getattr(logging, self.log_level.upper(), None)
        return value if isinstance(value, int) else logging.INFO


@dataclass
class Config:
    """
    Process-wide settings

    Usage:
        from chain_rpc.config import config

        rpc = RpcClient(config.rpc.node_url)
    """
    rpc: RpcConfig = field(default_factory=RpcConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def reload(cls) -> "Config":
        _load_env_file()
        return cls()


config = Config()


def get_config() -> Config:
    """Get global configuration instance"""
    return config


def reload_config() -> Config:
    """
    Re-read the environment into a new global Config.

    Modules that imported the old instance keep it; pass explicit
    RetryOptions or constructor arguments where a reload must take effect.
    """
    global config
    config = Config.reload()
    return config


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "chain_rpc",
) -> logging.Logger:
    """
    Attach console and/or rotating file handlers to the package logger.

    Existing handlers on that logger are closed and replaced, so calling
    this twice does not duplicate output.

    Args:
        log_config: Logging settings (defaults to config.logging)
        logger_name: Logger to configure

    Returns:
        The configured logger
    """
    log_config = log_config or config.logging
    formatter = logging.Formatter(log_config.log_format)

    root = logging.getLogger(logger_name)
    root.setLevel(log_config.level)
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)

    handlers: List[logging.Handler] = []
    if log_config.log_file:
        Path(log_config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_config.log_file,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding="utf-8",
        ))
    if log_config.console_output:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setLevel(log_config.level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for child in _CHILD_LOGGERS:
        logging.getLogger(f"{logger_name}.{child}").setLevel(log_config.level)

    if log_config.log_file:
        root.info(f"Logging to {log_config.log_file} at {log_config.log_level}")

    return root
