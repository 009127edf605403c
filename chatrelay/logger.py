"""
Server logging module.

A thin wrapper around the ``chatrelay`` logger with helpers for the events
the relay cares about: connections, identification, broadcasts and drops.
"""

import logging

LOGGER_NAME = 'chatrelay'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level='INFO'):
    """Install a single console handler on the relay logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)

    # Remove existing handlers so repeated setup does not duplicate lines
    for handler in log.handlers[:]:
        log.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    log.addHandler(console_handler)
    return log


class ServerLogger:
    """Domain-level logging helpers."""

    def __init__(self, name: str = LOGGER_NAME):
        self.logger = logging.getLogger(name)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def debug(self, message: str):
        self.logger.debug(message)

    def log_connection(self, connection_id: str, addr):
        self.info(f"New connection from {addr}, assigned id={connection_id}")

    def log_identify(self, connection_id: str, username: str, online: int):
        self.info(f"User '{username}' identified on id={connection_id} ({online} online)")

    def log_disconnect(self, connection_id: str, username=None):
        if username is None:
            self.info(f"Connection id={connection_id} closed before identifying")
        else:
            self.info(f"User '{username}' (id={connection_id}) disconnected")

    def log_broadcast(self, connection_id: str, username: str, recipients: int):
        self.debug(f"Broadcast from '{username}' (id={connection_id}) to {recipients} recipients")

    def log_ignored(self, connection_id: str, reason: str):
        self.debug(f"Ignored event from id={connection_id}: {reason}")

    def log_delivery_failure(self, connection_id: str, error: Exception):
        self.warning(f"Delivery to id={connection_id} failed: {error}")


# Shared logger instance
logger = ServerLogger()
