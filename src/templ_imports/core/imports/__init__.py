"""
Import Requirements Package.

Provides the ``ImportSpec`` value type, the top-level "imports-only" parse,
and the LibCST helpers that rebuild a module's import block.
"""

from templ_imports.core.imports.spec import (
  ImportSpec,
  module_imports,
  parse_import_statement,
  parse_imports,
)
from templ_imports.core.imports.utils import replace_import_block

__all__ = [
  "ImportSpec",
  "module_imports",
  "parse_import_statement",
  "parse_imports",
  "replace_import_block",
]
