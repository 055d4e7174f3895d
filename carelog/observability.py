"""
Structured logging setup shared by every carelog module.

Modules obtain their logger with ``structlog.get_logger(__name__)`` and log
snake_case event names with key/value context. The renderer follows
``LoggingConfig.format``: JSON lines for deployed environments, the
colored console renderer for local development. In debug mode every event
also carries the file, function and line that emitted it.
"""

import logging

import structlog

from carelog.config import LoggingConfig, get_config


def configure_logging(config: LoggingConfig | None = None, debug: bool | None = None) -> None:
    """Configure structlog and the stdlib root logger it writes through."""
    app_config = get_config()
    config = config or app_config.logging
    debug = app_config.debug if debug is None else debug

    logging.basicConfig(format="%(message)s", level=config.level)
    logging.getLogger().setLevel(config.level)

    renderer: structlog.types.Processor
    if config.format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if debug:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                {
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                }
            )
        )
    processors.append(renderer)

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
