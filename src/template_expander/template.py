import logging
from collections.abc import Iterator
from os import PathLike
from pathlib import Path
from typing import Any

from . import _io
from .config import (
    ASSETS_DIR_NAME,
    CONFIG_FILE_NAME,
    InflateOptions,
    TemplateConfig,
    load_template_config,
    normalize_relative_path,
)
from .engine import ExpansionEngine
from .errors import MissingAssetsDirectoryError, PathNotFoundError
from .files import ExpandableFile, OpaqueFile, TemplateFile
from .matching import PathMatcher

logger = logging.getLogger(__name__)


class Template:
    """An inflated template: every file under ``assets/`` keyed by relative path.

    PURPOSE: Merge caller supplied in-memory files with the files discovered on
    disk into one mapping, so each relative path resolves to exactly one
    TemplateFile that can be expanded in memory or exported.

    TEMPLATE LAYOUT:
    ```
    my-template/
    ├── template.json    # optional: {"expand": [...], "noExpand": [...]}
    └── assets/          # files to inflate
    ```

    PRECEDENCE (first one wins for a given relative path):
    1. In-memory files from ``InflateOptions.in_memory_files`` (always expanded)
    2. Disk files matched by ``expand`` and not by ``noExpand``
    3. Disk files matched by ``noExpand`` (copied verbatim)

    Disk files matched by neither pattern set are not part of the template.

    The file map is built once by ``read_files()`` and is fixed afterwards; only
    the content caches of individual files fill in lazily.
    """

    def __init__(
        self,
        template_path: str | PathLike[str],
        data: Any = None,
        options: InflateOptions | None = None,
    ):
        self.template_path = Path(template_path)
        self.data = data
        self.options = options or InflateOptions()
        self.engine: ExpansionEngine = self.options.engine or ExpansionEngine()
        self.config: TemplateConfig | None = None
        self._files: dict[str, TemplateFile] = {}
        self._read = False

    @property
    def assets_path(self) -> Path:
        return self.template_path / ASSETS_DIR_NAME

    @property
    def config_path(self) -> Path:
        return self.template_path / CONFIG_FILE_NAME

    @property
    def files(self) -> list[TemplateFile]:
        """Files in insertion order: in-memory, then expandable, then pass-through."""
        return list(self._files.values())

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[TemplateFile]:
        return iter(list(self._files.values()))

    def __contains__(self, relative_path: object) -> bool:
        if not isinstance(relative_path, str | PathLike):
            return False
        return normalize_relative_path(relative_path) in self._files

    def _add(self, file: TemplateFile) -> None:
        self._files[file.relative_path] = file

    async def read_files(self) -> None:
        """Discover the template's files. Runs once; later calls do nothing."""
        if self._read:
            return

        if not await _io.is_dir(self.template_path):
            raise PathNotFoundError(self.template_path)
        if not await _io.is_dir(self.assets_path):
            raise MissingAssetsDirectoryError(self.assets_path)

        config = await load_template_config(self.template_path)
        matcher = PathMatcher(self.assets_path)
        discovery = await matcher.discover(config)
        assets_root = matcher.assets_root

        for in_memory in self.options.in_memory_files:
            if in_memory.relative_path in self._files:
                logger.debug(f"Duplicate in-memory file {in_memory.relative_path} ignored")
                continue
            self._add(
                ExpandableFile(
                    in_memory.relative_path,
                    self.data,
                    assets_root,
                    self.engine,
                    content=in_memory.content,
                )
            )

        for full_path in discovery.expand_set:
            relative_path = matcher.relative_path(full_path)
            if relative_path not in self._files:
                self._add(
                    ExpandableFile(relative_path, self.data, assets_root, self.engine)
                )

        for full_path in discovery.pass_through_set:
            relative_path = matcher.relative_path(full_path)
            if relative_path in self._files:
                logger.debug(f"{relative_path} is overridden, not copied verbatim")
            else:
                self._add(
                    OpaqueFile(relative_path, self.data, assets_root, self.engine)
                )

        self.config = config
        self._read = True
        logger.info(f"Inflated template {self.template_path} with {len(self)} files")

    def find(self, relative_path: str | PathLike[str]) -> TemplateFile | None:
        """Find a file by relative path. Returns None if the file doesn't exist."""
        return self._files.get(normalize_relative_path(relative_path))

    async def export(self, output_path: str | PathLike[str]) -> None:
        """Export every file into ``output_path``. The first failure aborts."""
        output_dir = Path(output_path)
        for file in self.files:
            await file.export(output_dir)
        logger.info(f"Exported {len(self)} files to {output_dir}")

    def __repr__(self) -> str:
        return f"Template({str(self.template_path)!r}, files={len(self)})"
