"""
structlog setup for applications using gotcha. Importing gotcha never
configures logging by itself.
"""

import logging
import sys

import structlog

from .config import Config


def configure_logging(level: str = None, json: bool = None, config: Config = None) -> None:
    """Route structlog through stdlib logging on stdout.

    Explicit arguments win over the ``logging`` section of ``config``.
    """
    log_config = (config or Config()).logging
    level = level or log_config.get('level', 'INFO')
    if json is None:
        json = log_config.get('json', True)

    logging.basicConfig(
        format=log_config.get('format', '%(message)s'),
        stream=sys.stdout,
        level=getattr(logging, str(level).upper(), logging.INFO),
        force=True,
    )

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
