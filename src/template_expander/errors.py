"""Failure taxonomy for template inflation and export.

Every error carries the filesystem path it concerns so callers (typically a
CLI) can report it without re-deriving context.
"""

from os import PathLike
from typing import Any


class TemplateExpanderError(Exception):
    """Base class for all failures raised by template_expander."""

    default_message = "Template error"

    def __init__(
        self,
        path: str | PathLike[str],
        detail: Any = None,
        message: str | None = None,
    ):
        self.path = str(path)
        self.detail = detail
        self.message = message or self.default_message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        text = f"{self.message}: {self.path}"
        if self.detail is not None:
            text += f" ({self.detail})"
        return text


class PathNotFoundError(TemplateExpanderError):
    default_message = "Template path does not exist"


class MissingAssetsDirectoryError(PathNotFoundError):
    default_message = "Template has no assets directory"


class ConfigurationError(TemplateExpanderError):
    default_message = "Invalid template configuration"


class FileReadError(TemplateExpanderError):
    default_message = "Failed to read template file"


class TemplateCompilationError(TemplateExpanderError):
    """The expansion engine rejected a file's content.

    ``path`` is the full path of the offending file and ``detail`` the
    engine's own error message.
    """

    default_message = "Failed to expand template file"


class OutputAlreadyExistsError(TemplateExpanderError):
    default_message = "Output path already exists"


class WriteError(TemplateExpanderError):
    default_message = "Failed to write output"
