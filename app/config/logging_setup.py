"""Process-wide logging configuration for runtime entrypoints."""

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def config_configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the running process.

    Args:
        level: Standard library logging level name.

    Returns:
        None: Configures logging handlers as side effect.

    Raises:
        ValueError: Raised when level is not a known logging level.
    """

    normalized_level = level.strip().upper()
    resolved_level = logging.getLevelName(normalized_level)
    if not isinstance(resolved_level, int):
        raise ValueError(f"unknown logging level={level}")

    logging.basicConfig(level=resolved_level, format=_LOG_FORMAT)
    logging.getLogger().setLevel(resolved_level)
