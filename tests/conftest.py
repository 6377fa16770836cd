import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

AssetTree = dict[str, "str | bytes | AssetTree"]


def write_tree(root: Path, tree: AssetTree) -> None:
    """Materialize a nested dict of names to contents (or sub-dicts) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for name, content in tree.items():
        path = root / name
        if isinstance(content, dict):
            write_tree(path, content)
        elif isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))


@pytest.fixture
def make_template(tmp_path) -> Callable[..., Path]:
    """Factory creating a template directory under tmp_path.

    ``assets=None`` leaves out the assets directory entirely. ``config`` is
    written to template.json: dicts are JSON-encoded, strings written as-is.
    """

    def _make(
        assets: AssetTree | None = None,
        config: dict[str, Any] | str | None = None,
        name: str = "my-template",
    ) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        if assets is not None:
            write_tree(root / "assets", assets)
        if config is not None:
            text = config if isinstance(config, str) else json.dumps(config)
            (root / "template.json").write_text(text, encoding="utf-8")
        return root

    return _make
