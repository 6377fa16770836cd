"""template_expander - inflate a directory of template files against a data object.

A template is a directory with an ``assets/`` subdirectory and an optional
``template.json``. Files under ``assets/`` are expanded with Jinja2 (or copied
verbatim when matched by ``noExpand``), either in memory or into an output
directory:

```python
template = await inflate_template("my-template", {"msg": "Hello computer"})
text = await template.find("test1.txt").expand()

await export_template(
    "my-template",
    {"msg": "Hello computer"},
    "output",
    ExportOptions(overwrite=True, clean=True),
)
```
"""

import logging

from .config import (
    ExportOptions,
    InflateOptions,
    InMemoryFile,
    TemplateConfig,
    load_template_config,
)
from .engine import ExpansionEngine, create_environment, dump_json
from .errors import (
    ConfigurationError,
    FileReadError,
    MissingAssetsDirectoryError,
    OutputAlreadyExistsError,
    PathNotFoundError,
    TemplateCompilationError,
    TemplateExpanderError,
    WriteError,
)
from .export import export_template, inflate_template
from .files import ContentState, ExpandableFile, OpaqueFile, TemplateFile
from .matching import Discovery, PathMatcher, PatternSet
from .template import Template
from .utilities import configure_library_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "inflate_template",
    "export_template",
    # Template model
    "Template",
    "TemplateFile",
    "ExpandableFile",
    "OpaqueFile",
    "ContentState",
    # Configuration
    "TemplateConfig",
    "InMemoryFile",
    "InflateOptions",
    "ExportOptions",
    "load_template_config",
    # Matching
    "PathMatcher",
    "PatternSet",
    "Discovery",
    # Engine
    "ExpansionEngine",
    "create_environment",
    "dump_json",
    # Logging
    "configure_library_logging",
    # Errors
    "TemplateExpanderError",
    "PathNotFoundError",
    "MissingAssetsDirectoryError",
    "ConfigurationError",
    "FileReadError",
    "TemplateCompilationError",
    "OutputAlreadyExistsError",
    "WriteError",
]
