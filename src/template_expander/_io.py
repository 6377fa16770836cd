import asyncio
import functools
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

T = TypeVar("T")


async def run_sync(function: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking callable in the default executor and await its result."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None, functools.partial(function, *args, **kwargs)
    )


async def path_exists(path: Path) -> bool:
    return await run_sync(path.exists)


async def is_dir(path: Path) -> bool:
    return await run_sync(path.is_dir)


async def is_file(path: Path) -> bool:
    return await run_sync(path.is_file)


async def read_bytes(path: Path) -> bytes:
    return await run_sync(path.read_bytes)


async def write_bytes(path: Path, content: bytes) -> None:
    await run_sync(path.write_bytes, content)


async def ensure_dir(path: Path) -> None:
    await run_sync(path.mkdir, parents=True, exist_ok=True)


async def copy_file(source: Path, destination: Path) -> None:
    await run_sync(shutil.copyfile, source, destination)


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


async def remove_path(path: Path) -> None:
    """Remove a directory tree, or a single file occupying ``path``."""
    await run_sync(_remove_path, path)
