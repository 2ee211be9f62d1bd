"""Process-wide log setup for the serverless handlers."""

import os
import logging
import sys
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "skyrealty-backend"

# HTTP clients used by supabase-py, stripe and the identity-provider calls
QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "urllib3", "stripe")


class LoggingConfig:
    """Logging settings read once per cold start."""

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json").lower()
    LOG_MASK_SENSITIVE = os.environ.get("LOG_MASK_SENSITIVE", "true").lower() == "true"
    LOG_CORRELATION_ID_HEADER = os.environ.get("LOG_CORRELATION_ID_HEADER", "X-Correlation-ID")
    LOG_SLOW_OPERATION_THRESHOLD_MS = int(os.environ.get("LOG_SLOW_OPERATION_THRESHOLD_MS", "1000"))

    _configured = False

    @classmethod
    def build_formatter(cls) -> logging.Formatter:
        if cls.LOG_FORMAT != "json":
            return logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        return jsonlogger.JsonFormatter(
            "%(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level"},
            static_fields={"service": SERVICE_NAME},
        )

    @classmethod
    def setup_logging(cls) -> None:
        """Route every record to stdout, where Vercel collects it."""
        level = getattr(logging, cls.LOG_LEVEL, logging.INFO)

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(cls.build_formatter())

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        cls._configured = True

    @classmethod
    def ensure_configured(cls) -> None:
        """Configure on the first request of a warm instance only."""
        if not cls._configured:
            cls.setup_logging()
