import logging
import logging.config
import os
from datetime import datetime
from taskflow.core.config import settings

LOG_FOLDERS = ("app", "error", "audit")
MAX_LOG_BYTES = 10485760  # 10MB
LOG_BACKUPS = 10

def _rotating_file(folder: str, level: str, formatter: str, stamp: str) -> dict:
    """Rotating handler writing to <LOG_DIR>/<folder>/<folder>-<date>.log"""
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": os.path.join(settings.LOG_DIR, folder, f"{folder}-{stamp}.log"),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUPS,
    }

def setup_logging():
    """Configure console plus rotating app, error and audit logs"""
    for folder in LOG_FOLDERS:
        os.makedirs(os.path.join(settings.LOG_DIR, folder), exist_ok=True)

    stamp = datetime.now().strftime("%Y-%m-%d")
    level = settings.LOG_LEVEL

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "audit": {
                "format": "%(asctime)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "app_file": _rotating_file("app", level, "detailed", stamp),
            "error_file": _rotating_file("error", "ERROR", "detailed", stamp),
            "audit_file": _rotating_file("audit", "INFO", "audit", stamp),
        },
        "loggers": {
            "": {
                "level": level,
                "handlers": ["console", "app_file", "error_file"],
            },
            # Rule firings and generation passes only
            "taskflow.audit": {
                "level": "INFO",
                "handlers": ["audit_file", "console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["app_file"],
                "propagate": False,
            },
        },
    })

    logging.getLogger(__name__).info(f"Logging configured at {level} in {settings.LOG_DIR}")
