"""
Logging utilities for the storefront services

Configures the standard library logging tree and structlog so that both
services emit the same key/value event logs.
"""

import copy
import logging
import logging.config
import time
from typing import Optional, Dict, Any

import structlog

LOG_FORMATS = ("console", "json")

# Default logging configuration
DEFAULT_LOGGING_CONFIG: Dict[str, Any] = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'default',
            'stream': 'ext://sys.stdout'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console'],
    },
    'loggers': {
        'uvicorn.access': {
            # Requests are logged by the services' own middleware
            'level': 'WARNING',
        },
        'httpx': {
            'level': 'WARNING',
        },
    }
}


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """
    Setup logging configuration

    Args:
        log_level: Level name applied to the root logger and console handler
        log_format: 'console' for human readable lines, 'json' for one JSON
            object per event
    """
    log_level = log_level.upper()
    if log_level not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown log level: {log_level}")
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {log_format}")

    config = copy.deepcopy(DEFAULT_LOGGING_CONFIG)
    config['root']['level'] = log_level
    config['handlers']['console']['level'] = log_level
    logging.config.dictConfig(config)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get logger instance

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


class RequestLogger:
    """Logger for HTTP requests"""

    def __init__(self, service: str, name: str = "storefront.requests"):
        self.service = service
        self.logger = get_logger(name)

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        response_time: float,
        client_ip: Optional[str] = None,
    ):
        """Log a completed HTTP request"""
        log = self.logger.warning if status_code >= 500 else self.logger.info
        log(
            "Request completed",
            service=self.service,
            method=method,
            path=path,
            status_code=status_code,
            response_time=round(response_time, 4),
            client_ip=client_ip,
        )


class request_timer:
    """Context manager measuring the wall time of a request"""

    def __init__(self):
        self.start_time: Optional[float] = None
        self.elapsed: float = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self.start_time
