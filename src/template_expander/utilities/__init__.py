from .logger import DEFAULT_FORMAT, PackageStreamHandler, configure_library_logging

__all__ = ["DEFAULT_FORMAT", "PackageStreamHandler", "configure_library_logging"]
