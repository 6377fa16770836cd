import logging
from os import PathLike
from pathlib import Path
from typing import Any

from . import _io
from .config import ExportOptions, InflateOptions
from .errors import OutputAlreadyExistsError, WriteError
from .template import Template

logger = logging.getLogger(__name__)


async def inflate_template(
    template_path: str | PathLike[str],
    data: Any = None,
    options: InflateOptions | None = None,
) -> Template:
    """Inflate a template in memory.

    Args:
        template_path: Directory containing ``assets/`` and optional ``template.json``
        data: Context used to expand the template's files
        options: In-memory file overrides and the expansion engine

    Returns:
        The inflated template. Nothing is written to disk.

    Raises:
        PathNotFoundError: The template directory does not exist
        MissingAssetsDirectoryError: The template has no ``assets/`` directory
        ConfigurationError: ``template.json`` is malformed
    """
    template = Template(template_path, data, options)
    await template.read_files()
    return template


async def export_template(
    template_path: str | PathLike[str],
    data: Any,
    output_path: str | PathLike[str],
    options: ExportOptions | None = None,
) -> None:
    """Inflate a template with data and write every file to ``output_path``.

    An existing ``output_path`` is an error unless ``options.overwrite`` is set.
    With ``overwrite`` alone files are written into the existing directory;
    with ``overwrite`` and ``clean`` the existing directory is removed first.

    Exports to the same output path must be serialized by the caller.

    Raises:
        OutputAlreadyExistsError: ``output_path`` exists and overwrite was not requested
        WriteError: The output directory or a file could not be written
        plus any error raised by ``inflate_template`` or a file's expansion
    """
    options = options or ExportOptions()
    output_dir = Path(output_path)

    exists = await _io.path_exists(output_dir)
    if exists and not options.overwrite:
        raise OutputAlreadyExistsError(output_dir)

    template = await inflate_template(template_path, data, options)

    if exists and options.clean:
        logger.debug(f"Removing existing output {output_dir}")
        try:
            await _io.remove_path(output_dir)
        except OSError as exc:
            raise WriteError(output_dir, detail=exc) from exc

    try:
        await _io.ensure_dir(output_dir)
    except OSError as exc:
        raise WriteError(output_dir, detail=exc) from exc

    await template.export(output_dir)
