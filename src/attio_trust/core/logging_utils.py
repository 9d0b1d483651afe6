"""
Shared logging utilities for Attio Trust components.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "attio_trust"


def get_logger(component: str) -> logging.Logger:
    """Get a component logger under the package namespace.

    Args:
        component: The component name (e.g., 'oauth', 'webhook', 'transport')

    Returns:
        The logger ``attio_trust.<component>``
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")


def redact(secret: Optional[str], visible: int = 4) -> str:
    """Render a secret as ``***`` plus its last few characters.

    Secrets no longer than ``visible`` render as ``***`` alone.
    """
    if not secret:
        return "None"
    if len(secret) <= visible:
        return "***"
    return "***" + secret[-visible:]


def setup_logging(config, stream=None) -> logging.Logger:
    """Configure the package logger from a TrustConfig.

    Handlers are attached to the ``attio_trust`` logger only, so host
    applications keep control of the root logger.
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(getattr(logging, config.log_level.upper()))

    # Clear any existing handlers to avoid duplicates on repeated setup
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.log_format)

    stream_handler = logging.StreamHandler(stream or sys.stderr)
    stream_handler.setFormatter(formatter)
    package_logger.addHandler(stream_handler)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='a')
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.propagate = False
    return package_logger
