import sys
import logging
from logging.config import dictConfig
from warehouse.core.config import APP_ENV

LOG_LEVEL = "DEBUG" if APP_ENV == "development" else "INFO"

ACCESS_FIELDS = ("request_id", "client_addr", "method", "path", "status_code", "process_time_ms", "user_id")


class AccessFieldsFilter(logging.Filter):
    """Fills missing access fields so a stray record cannot break the formatter."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in ACCESS_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True


def setup_logging():
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "access_fields": {"()": AccessFieldsFilter},
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                },
                "access": {
                    "format": (
                        "%(asctime)s | ACCESS | %(request_id)s | %(client_addr)s | "
                        "%(method)s %(path)s | %(status_code)s | "
                        "%(process_time_ms)sms | user=%(user_id)s"
                    ),
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "default",
                },
                "access_console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "access",
                    "filters": ["access_fields"],
                },
            },
            "loggers": {
                "access": {
                    "handlers": ["access_console"],
                    "level": "INFO",
                    "propagate": False,
                },
                # stock mutations, fulfillment steps, restores
                "warehouse.services": {"level": LOG_LEVEL},
                "warehouse.repositories": {"level": LOG_LEVEL},
                # job runs are logged by the expiry service itself
                "apscheduler": {"level": "WARNING"},
                "httpx": {"level": "WARNING"},
            },
            "root": {
                "level": LOG_LEVEL,
                "handlers": ["console"],
            },
        }
    )
