import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, cast

from . import _io
from .engine import ExpansionEngine
from .errors import FileReadError, TemplateCompilationError, WriteError

logger = logging.getLogger(__name__)


class ContentState(str, Enum):
    """Lifecycle of a file's content. Transitions only move forward."""

    UNLOADED = "unloaded"
    LOADED = "loaded"
    EXPANDED = "expanded"


class TemplateFile:
    """A single file of an inflated template.

    PURPOSE: Give every file in a template the same lazy, cached interface no
    matter where its content comes from (an on-disk asset or a caller supplied
    buffer) and whether it is expanded or copied verbatim.

    VARIANTS:
    - ExpandableFile: content is passed through the ExpansionEngine
    - OpaqueFile: content is passed through unchanged, byte for byte

    CONTENT STATE:
    UNLOADED -> LOADED -> EXPANDED, each step happening at most once and only
    when ``expand()`` (or ``export()``) first needs it. Once expanded, the cached
    result is returned for the lifetime of the object, even if ``data`` is
    mutated afterwards.

    USAGE:
    ```python
    template = await inflate_template("my-template", {"msg": "hi"})
    readme = template.find("README.md")
    text = await readme.expand()
    await readme.export("out")
    ```
    """

    allow_expand: ClassVar[bool]

    def __init__(
        self,
        relative_path: str,
        data: Any,
        assets_root: Path,
        engine: ExpansionEngine,
        content: str | bytes | None = None,
    ):
        self.relative_path = relative_path
        self.data = data
        self.assets_root = Path(assets_root)
        self.engine = engine
        self._buffer = content.encode("utf-8") if isinstance(content, str) else content
        self._loaded: bytes | None = None
        self._expanded: str | bytes | None = None
        self._state = ContentState.UNLOADED
        self._lock = asyncio.Lock()

    @property
    def state(self) -> ContentState:
        return self._state

    @property
    def in_memory(self) -> bool:
        """True when content was supplied by the caller rather than read from disk."""
        return self._buffer is not None

    def get_full_path(self) -> Path:
        return self.assets_root / self.relative_path

    async def _load(self) -> bytes:
        if self._loaded is not None:
            return self._loaded

        if self._buffer is not None:
            self._loaded = self._buffer
        else:
            full_path = self.get_full_path()
            try:
                self._loaded = await _io.read_bytes(full_path)
            except OSError as exc:
                raise FileReadError(full_path, detail=exc) from exc
        self._state = ContentState.LOADED
        return self._loaded

    def _transform(self, loaded: bytes) -> str | bytes:
        raise NotImplementedError

    async def expand(self) -> str | bytes:
        """Return the expanded content, computing and caching it on first call."""
        if self._expanded is not None:
            logger.debug(f"Using cached expansion of {self.relative_path}")
            return self._expanded

        async with self._lock:
            if self._expanded is None:
                loaded = await self._load()
                self._expanded = self._transform(loaded)
                self._state = ContentState.EXPANDED
        return self._expanded

    async def _prepare_destination(self, output_dir: str | Path) -> Path:
        destination = Path(output_dir) / self.relative_path
        try:
            await _io.ensure_dir(destination.parent)
        except OSError as exc:
            raise WriteError(destination.parent, detail=exc) from exc
        return destination

    async def _write(self, destination: Path, content: bytes) -> None:
        try:
            await _io.write_bytes(destination, content)
        except OSError as exc:
            raise WriteError(destination, detail=exc) from exc

    async def export(self, output_dir: str | Path) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.relative_path!r}, "
            f"state={self._state.value}, in_memory={self.in_memory})"
        )


class ExpandableFile(TemplateFile):
    """A file whose content is expanded with the template data."""

    allow_expand = True

    def _transform(self, loaded: bytes) -> str:
        full_path = self.get_full_path()
        try:
            text = loaded.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateCompilationError(full_path, detail=exc) from exc

        try:
            return self.engine.render(text, self.data)
        except Exception as exc:
            raise TemplateCompilationError(full_path, detail=exc) from exc

    async def expand(self) -> str:
        return cast(str, await super().expand())

    async def export(self, output_dir: str | Path) -> None:
        destination = await self._prepare_destination(output_dir)
        content = await self.expand()
        await self._write(destination, content.encode("utf-8"))
        logger.debug(f"Expanded {self.relative_path} -> {destination}")


class OpaqueFile(TemplateFile):
    """A file copied verbatim. ``expand()`` returns the raw bytes."""

    allow_expand = False

    def _transform(self, loaded: bytes) -> bytes:
        return loaded

    async def expand(self) -> bytes:
        return cast(bytes, await super().expand())

    async def export(self, output_dir: str | Path) -> None:
        destination = await self._prepare_destination(output_dir)
        if self._buffer is not None:
            await self._write(destination, self._buffer)
            return

        source = self.get_full_path()
        if not await _io.is_file(source):
            raise FileReadError(source, detail="no such file")
        try:
            await _io.copy_file(source, destination)
        except OSError as exc:
            if exc.filename is not None and Path(exc.filename) == source:
                raise FileReadError(source, detail=exc) from exc
            raise WriteError(destination, detail=exc) from exc
        logger.debug(f"Copied {self.relative_path} -> {destination}")
