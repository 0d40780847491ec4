"""Configuration and logging setup for the kubelet summary client."""

import logging
import os
import pathlib

import httpx
import pydantic
import structlog

from . import summaryapi

CONFIG_ENV_VAR = "KUBELET_SUMMARY_CONFIG_PATH"
LOG_KEY_ORDER = ("timestamp", "level", "msg", "url")
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for the kubelet summary client."""

    model_config = pydantic.ConfigDict(frozen=True)

    port: int = pydantic.Field(
        summaryapi.DEFAULT_PORT,
        description="Kubelet port",
        gt=0,
        lt=65536,
    )
    use_insecure_scheme: bool = pydantic.Field(
        False,
        description="Use http instead of https",
    )
    timeout: float = pydantic.Field(
        summaryapi.DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output.

    Client events carry the kubelet ``url``, rendered right after the
    message and before any other keys.
    """
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=LOG_KEY_ORDER,
                drop_missing=True,
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str) -> ClientConfig:
    """Load and validate configuration from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file is not valid JSON or holds
            invalid values.
    """
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    return ClientConfig.model_validate_json(path.read_text())


def create_client(
    config_path: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> summaryapi.SummaryClient:
    """Create a summary client using a config path or environment default.

    Args:
        config_path: JSON configuration file. Falls back to the
            KUBELET_SUMMARY_CONFIG_PATH environment variable, then
            /config.json.
        transport: Optional httpx transport carrying TLS and auth settings.

    Returns:
        Configured SummaryClient.
    """
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, "/config.json")
    config = load_config(resolved_path)
    configure_logging(config.log_level)

    client = summaryapi.SummaryClient.from_config(config, transport=transport)
    logger.info(
        "Created kubelet summary client",
        port=config.port,
        scheme="http" if config.use_insecure_scheme else "https",
    )
    return client
