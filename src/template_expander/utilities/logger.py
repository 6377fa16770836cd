import logging
from typing import TextIO

DEFAULT_FORMAT = "%(levelname)s %(name)s - %(message)s"
PACKAGE_LOGGER = "template_expander"


class PackageStreamHandler(logging.StreamHandler):
    """Stream handler installed by :func:`configure_library_logging`."""


def configure_library_logging(
    level: int = logging.INFO,
    format: str = DEFAULT_FORMAT,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Send inflate/export progress from this package to a stream.

    Only the ``template_expander`` logger is touched; the root logger and other
    libraries keep whatever configuration the application gave them. Calling it
    again updates the level, format and stream instead of adding a second handler.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    handler = next(
        (h for h in logger.handlers if isinstance(h, PackageStreamHandler)), None
    )
    if handler is None:
        handler = PackageStreamHandler(stream)
        logger.addHandler(handler)
    elif stream is not None:
        handler.setStream(stream)

    handler.setFormatter(logging.Formatter(format))
    logger.setLevel(level)
    # Records are written here; propagating would print them again via root.
    logger.propagate = False
    return logger
