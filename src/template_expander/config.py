"""Template configuration and inflate/export options.

``template.json`` at the template root controls which files under ``assets/``
are expanded::

    {
        "expand": "**/*",
        "noExpand": ["_no_expand_/**/*", "**/*.png"]
    }

Both keys accept a single pattern or a list. ``noExpand`` always wins over
``expand``.
"""

import logging
import os
from os import PathLike
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import _io
from .engine import ExpansionEngine
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "template.json"
ASSETS_DIR_NAME = "assets"
DEFAULT_EXPAND_PATTERNS = ["**/*"]


def normalize_relative_path(relative_path: str | PathLike[str]) -> str:
    """Return a relative path using platform-native separators."""
    return os.path.normpath(os.fspath(relative_path).replace("/", os.sep))


def _as_pattern_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    return value


class TemplateConfig(BaseModel):
    """Contents of ``template.json``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    expand: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXPAND_PATTERNS),
        description="Glob patterns of files to expand, relative to assets/",
    )
    no_expand: list[str] = Field(
        default_factory=list,
        alias="noExpand",
        description="Glob patterns of files copied verbatim, relative to assets/",
    )

    @field_validator("expand", "no_expand", mode="before")
    @classmethod
    def _coerce_patterns(cls, value: Any) -> Any:
        return _as_pattern_list(value)


async def load_template_config(template_path: str | PathLike[str]) -> TemplateConfig:
    """Load ``template.json`` from a template root.

    A missing file means defaults. Anything unparsable raises ConfigurationError.
    """
    config_path = Path(template_path) / CONFIG_FILE_NAME
    if not await _io.is_file(config_path):
        logger.debug(f"No {CONFIG_FILE_NAME} in {template_path}, using defaults")
        return TemplateConfig()

    try:
        raw = await _io.read_bytes(config_path)
    except OSError as exc:
        raise ConfigurationError(config_path, detail=exc) from exc

    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ConfigurationError(config_path, detail=f"malformed JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigurationError(
            config_path,
            detail=f"expected a JSON object, got {type(payload).__name__}",
        )

    try:
        return TemplateConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(config_path, detail=exc) from exc


class InMemoryFile(BaseModel):
    """A file supplied by the caller that overrides any asset at the same path.

    In-memory files are always expanded.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    relative_path: str = Field(alias="relativePath")
    content: str | bytes

    @field_validator("relative_path", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        if not isinstance(value, str | PathLike):
            return value
        # The path is joined onto the output directory on export.
        if Path(value).is_absolute() or Path(value).anchor:
            raise ValueError(f"must be relative to the assets directory: {value!r}")
        normalized = normalize_relative_path(value)
        if normalized == os.pardir or normalized.startswith(os.pardir + os.sep):
            raise ValueError(f"must not point outside the assets directory: {value!r}")
        return normalized


class InflateOptions(BaseModel):
    """Options for inflating a template in memory."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    in_memory_files: list[InMemoryFile] = Field(
        default_factory=list, alias="inMemoryFiles"
    )
    engine: ExpansionEngine | None = Field(
        default=None,
        description="Engine used to expand files; a default engine is created if omitted",
    )


class ExportOptions(InflateOptions):
    """Options for exporting a template to disk."""

    overwrite: bool = Field(
        default=False, description="Allow exporting into an existing output path"
    )
    clean: bool = Field(
        default=False,
        description="With overwrite, remove the existing output path before exporting",
    )
