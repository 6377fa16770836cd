import os

import pytest
from pydantic import ValidationError
from template_expander import (
    ConfigurationError,
    ExportOptions,
    InflateOptions,
    InMemoryFile,
    TemplateConfig,
    load_template_config,
)


class TestTemplateConfig:
    """Test the template.json model."""

    def test_defaults(self):
        config = TemplateConfig()
        assert config.expand == ["**/*"]
        assert config.no_expand == []

    def test_single_string_is_coerced(self):
        config = TemplateConfig.model_validate({"noExpand": "_no_expand_/**/*"})
        assert config.no_expand == ["_no_expand_/**/*"]

    def test_list_of_patterns(self):
        config = TemplateConfig.model_validate(
            {"expand": ["*.txt", "*.md"], "noExpand": ["a/**/*", "b/**/*"]}
        )
        assert config.expand == ["*.txt", "*.md"]
        assert config.no_expand == ["a/**/*", "b/**/*"]

    def test_field_name_accepted(self):
        assert TemplateConfig(no_expand=["x"]).no_expand == ["x"]

    def test_unknown_keys_tolerated(self):
        config = TemplateConfig.model_validate({"description": "my template"})
        assert config.expand == ["**/*"]


class TestLoadTemplateConfig:
    """Test loading template.json from a template root."""

    @pytest.mark.asyncio
    async def test_missing_file_uses_defaults(self, make_template):
        root = make_template({"a.txt": "a"})
        config = await load_template_config(root)
        assert config == TemplateConfig()

    @pytest.mark.asyncio
    async def test_empty_object(self, make_template):
        root = make_template({"a.txt": "a"}, config={})
        config = await load_template_config(root)
        assert config.expand == ["**/*"]

    @pytest.mark.asyncio
    async def test_reads_no_expand(self, make_template):
        root = make_template({}, config={"noExpand": "_no_expand_/**/*"})
        config = await load_template_config(root)
        assert config.no_expand == ["_no_expand_/**/*"]

    @pytest.mark.asyncio
    async def test_malformed_json(self, make_template):
        root = make_template({}, config="{ not json")
        with pytest.raises(ConfigurationError) as exc_info:
            await load_template_config(root)

        assert exc_info.value.path == str(root / "template.json")
        assert "malformed JSON" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_object_json(self, make_template):
        root = make_template({}, config='["**/*"]')
        with pytest.raises(ConfigurationError, match="expected a JSON object"):
            await load_template_config(root)

    @pytest.mark.asyncio
    async def test_invalid_pattern_type(self, make_template):
        root = make_template({}, config={"expand": 5})
        with pytest.raises(ConfigurationError):
            await load_template_config(root)


class TestInMemoryFile:
    """Test in-memory file overrides."""

    def test_alias(self):
        file = InMemoryFile.model_validate(
            {"relativePath": "a.txt", "content": "hello"}
        )
        assert file.relative_path == "a.txt"
        assert file.content == "hello"

    def test_path_normalised_to_native_separators(self):
        file = InMemoryFile(relative_path="dir/sub/a.txt", content=b"x")
        assert file.relative_path == os.path.join("dir", "sub", "a.txt")

    @pytest.mark.parametrize(
        "relative_path",
        ["../escaped.txt", "a/../../escaped.txt", "..", os.path.abspath("abs.txt")],
    )
    def test_paths_outside_assets_are_rejected(self, relative_path):
        with pytest.raises(ValidationError, match="assets directory"):
            InMemoryFile(relative_path=relative_path, content="x")

    def test_inner_parent_segments_are_collapsed(self):
        file = InMemoryFile(relative_path="a/../b.txt", content="x")
        assert file.relative_path == "b.txt"

    def test_bytes_content(self):
        assert InMemoryFile(relative_path="a", content=b"\x00").content == b"\x00"


class TestOptions:
    """Test inflate/export option defaults."""

    def test_inflate_defaults(self):
        options = InflateOptions()
        assert options.in_memory_files == []
        assert options.engine is None

    def test_export_defaults(self):
        options = ExportOptions()
        assert options.overwrite is False
        assert options.clean is False

    def test_export_options_are_inflate_options(self):
        assert isinstance(ExportOptions(overwrite=True), InflateOptions)
