"""
Import Processing Pipeline.

Orchestrates one run over a document:

1. Ensure ``nodes[0]`` is a header and read the imports it already has.
2. Walk every fragment in document order and resolve it against the header's
   imports overlaid with everything merged so far.
3. Rewrite the header once, from the merged set, after every fragment resolved.

The first failure aborts the walk; the header is never partially rewritten.
"""

from typing import Optional

import libcst as cst

from templ_imports.config import ImportsConfig
from templ_imports.core.extractor import extract_fragments
from templ_imports.core.imports import parse_imports
from templ_imports.core.merger import ImportMerger, ImportSet
from templ_imports.core.resolver import ImportResolver, ResolutionContext
from templ_imports.core.rewriter import HeaderRewriter
from templ_imports.errors import ParseError
from templ_imports.parser.nodes import Document, ensure_header
from templ_imports.parser.parser import parse_document
from templ_imports.utils.console import log_debug, log_info


def process_document(path: str, document: Document, config: Optional[ImportsConfig] = None) -> Document:
  """
  Updates the header imports of a parsed document.

  Args:
      path: Path anchoring module resolution; never read or written.
      document: The document to update. Only its header is modified.
      config: Resolution settings.

  Returns:
      Document: The same document, header rewritten.

  Raises:
      ParseError: The header or a fragment is not valid Python.
      ResolutionError: The auto-import primitive failed for a fragment.
      SerializationError: The new header could not be rendered.
  """
  header = ensure_header(document)
  try:
    existing = ImportSet(parse_imports(header.expression.value))
  except cst.ParserSyntaxError as e:
    raise ParseError(f"failed to get imports from existing code: {e.message}", header.expression.range) from e

  package = document.package.value
  resolver = ImportResolver(ResolutionContext.create(path, package, config))
  merger = ImportMerger()

  count = 0
  for fragment in extract_fragments(document):
    known = existing.union(merger.imports)
    required = resolver.resolve(package, known.sorted(), fragment)
    log_debug(f"Fragment at {fragment.range.start.line}:{fragment.range.start.col} requires {len(required)} import(s)")
    merger.merge(required)
    count += 1

  if merger.is_empty:
    log_info(f"No imports required by {count} fragment(s); header left unchanged.")
    return document

  HeaderRewriter().rewrite(document, merger.result())
  log_info(f"Wrote {len(merger.imports)} import(s) for [path]{path}[/path].")
  return document


def process(path: str, source: str, config: Optional[ImportsConfig] = None) -> Document:
  """
  Parses a templ document and updates its header imports.

  Args:
      path: Path anchoring module resolution; never read or written.
      source: The document text.
      config: Resolution settings.

  Returns:
      Document: The processed document, ready for ``Document.write``.

  Raises:
      ParseError: The document, its header, or a fragment is not valid.
      ResolutionError: The auto-import primitive failed for a fragment.
      SerializationError: The new header could not be rendered.
  """
  document = parse_document(source)
  return process_document(path, document, config)
