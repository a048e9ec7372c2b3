import sys
from logging.config import dictConfig
from fabtrack.core.config import LOG_LEVEL

# third-party loggers that are too chatty at INFO
QUIET_LOGGERS = (
    "googleapiclient",
    "apscheduler",
    "sqlalchemy.engine",
)


def setup_logging():
    loggers = {
        # request_logging_middleware writes one line per request here
        "access": {
            "handlers": ["access_console"],
            "level": "INFO",
            "propagate": False,
        },
    }
    loggers.update({name: {"level": "WARNING"} for name in QUIET_LOGGERS})

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                },
                "access": {
                    "format": (
                        "%(asctime)s | ACCESS | %(request_id)s | "
                        "%(client_addr)s | %(user)s | %(method)s %(path)s | "
                        "%(status_code)s | %(process_time_ms)sms"
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
                },
            },
            "loggers": loggers,
            "root": {
                "level": LOG_LEVEL,
                "handlers": ["console"],
            },
        }
    )
