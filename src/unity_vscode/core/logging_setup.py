"""Logging configuration shared by the command line and host adapters."""

import logging
import os
from logging.handlers import RotatingFileHandler

from unity_vscode.core.config import IntegrationConfig, get_config

LOGGER_NAME = "unity_vscode"


class WindowsSafeRotatingFileHandler(RotatingFileHandler):
    """RotatingFileHandler that gracefully handles Windows file locking during rotation."""

    def doRollover(self):
        try:
            super().doRollover()
        except PermissionError:
            # Another process holds the file; retry on the next rollover.
            pass


def configure_logging(cfg: IntegrationConfig | None = None, verbose: bool = False) -> logging.Logger:
    """Configure stderr logging plus an optional rotating log file."""
    cfg = cfg or get_config()
    level = logging.DEBUG if verbose else getattr(
        logging, cfg.log_level, logging.INFO)

    logging.basicConfig(
        level=level,
        format=cfg.log_format,
        stream=None,  # None -> sys.stderr; stdout carries command output
        force=True,
    )
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if cfg.log_file:
        try:
            os.makedirs(os.path.dirname(cfg.log_file) or ".", exist_ok=True)
            fh = WindowsSafeRotatingFileHandler(
                cfg.log_file, maxBytes=512 * 1024, backupCount=2, encoding="utf-8")
            fh.setFormatter(logging.Formatter(cfg.log_format))
            fh.setLevel(level)
            logger.addHandler(fh)
        except Exception as exc:
            # Never let logging setup break the command
            logger.debug("Failed to configure log file handler", exc_info=exc)

    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(max(logging.WARNING, level))

    return logger


def set_debug_output(enabled: bool) -> None:
    """Mirror the integration's Debug preference onto the package logger."""
    logging.getLogger(LOGGER_NAME).setLevel(
        logging.DEBUG if enabled else logging.INFO)
