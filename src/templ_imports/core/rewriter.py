"""
Header Rewriter.

Serializes the final import set back into the document header. The header's
non-import code is carried over untouched; only its top-level import
statements are replaced.
"""

from typing import Sequence

import libcst as cst

from templ_imports.core.imports import ImportSpec, replace_import_block
from templ_imports.errors import ParseError, SerializationError
from templ_imports.parser.nodes import Document, ensure_header


class HeaderRewriter:
  """
  Regenerates ``document.nodes[0]`` from an ordered list of imports.
  """

  def render(self, header_text: str, specs: Sequence[ImportSpec]) -> str:
    """
    Produces the new header text.

    Args:
        header_text: Current header code.
        specs: Imports in their final order.

    Returns:
        str: Header code with the new import block, trimmed.

    Raises:
        ParseError: If the current header is not valid Python.
        SerializationError: If the rewritten module fails to render.
    """
    try:
      module = cst.parse_module(header_text)
    except cst.ParserSyntaxError as e:
      raise ParseError(f"invalid header: {e.message}") from e

    try:
      statements = [spec.to_statement() for spec in specs]
      return replace_import_block(module, statements).code.strip()
    except Exception as e:
      raise SerializationError(f"failed to write updated header: {e}") from e

  def rewrite(self, document: Document, specs: Sequence[ImportSpec]) -> None:
    """
    Assigns the regenerated header to the document. This is the only mutation
    the pipeline performs.

    Args:
        document: The document to update.
        specs: Imports in their final order.
    """
    header = ensure_header(document)
    try:
      header.expression.value = self.render(header.expression.value, specs)
    except ParseError as e:
      raise ParseError(e.message, header.expression.range) from e
