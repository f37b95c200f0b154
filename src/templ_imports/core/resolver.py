"""
Import Resolver.

Determines the imports a single fragment requires by running it, together
with the imports known so far, through the auto-import primitive.

The synthetic unit is::

    <one import line per known import>
    <fragment text>

It only needs a valid import block and a valid fragment; it is never written
anywhere. The package and the names the document binds around the fragment
are handed to the primitive as context.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

import libcst as cst

from templ_imports.autoimport.importer import AutoImporter
from templ_imports.config import ImportsConfig
from templ_imports.core.extractor import Fragment
from templ_imports.core.imports import ImportSpec, parse_imports
from templ_imports.errors import ParseError, ResolutionError


@dataclass
class ResolutionContext:
  """
  Everything one run needs to resolve fragments. Built per run, never shared.

  Attributes:
      filename (str): Path anchoring module lookup. Never read or written.
      package (str): Dotted package of the document.
      config (ImportsConfig): Resolution settings.
      importer (AutoImporter): The primitive, with its per-run lookup cache.
  """

  filename: str
  package: str = ""
  config: ImportsConfig = field(default_factory=ImportsConfig)
  importer: Optional[AutoImporter] = None

  def __post_init__(self) -> None:
    if self.importer is None:
      self.importer = AutoImporter(self.config)

  @classmethod
  def create(cls, path: str, package: str = "", config: Optional[ImportsConfig] = None) -> "ResolutionContext":
    """
    Builds a context for one run.

    Args:
        path: The document path given by the caller.
        package: Dotted package of the document.
        config: Resolution settings; defaults apply when omitted.

    Returns:
        ResolutionContext: A fresh context.
    """
    return cls(filename=str(Path(path)), package=package, config=config or ImportsConfig())


def synthesize_unit(known_imports: Iterable[ImportSpec], text: str) -> str:
  """
  Builds the synthetic compilation unit for one fragment.

  Args:
      known_imports: Imports rendered ahead of the fragment.
      text: Fragment text, appended verbatim.

  Returns:
      str: Python source.
  """
  lines = [spec.render() for spec in known_imports]
  lines.append(text)
  return "\n".join(lines).rstrip("\n") + "\n"


class ImportResolver:
  """
  Resolves per-fragment import requirements.
  """

  def __init__(self, context: ResolutionContext) -> None:
    self.context = context

  def resolve(self, package: str, known_imports: Iterable[ImportSpec], fragment: Fragment) -> List[ImportSpec]:
    """
    Returns every import the fragment needs.

    The result may repeat entries of ``known_imports``; resupplying them is
    expected and harmless.

    Args:
        package: Dotted package of the document.
        known_imports: Imports known so far.
        fragment: The fragment to resolve.

    Returns:
        List[ImportSpec]: Imports found in the resolved unit.

    Raises:
        ParseError: The unit does not parse; carries the fragment's range.
        ResolutionError: The auto-import primitive failed.
    """
    unit = synthesize_unit(known_imports, fragment.text)

    # 1. Syntax check
    try:
      parse_imports(unit)
    except cst.ParserSyntaxError as e:
      raise ParseError(f"invalid Python: {e.message}", fragment.range) from e

    # 2. Auto-import
    try:
      resolved = self.context.importer.process(self.context.filename, unit, package, bound=fragment.bound)
    except Exception as e:
      raise ResolutionError(f"failed to resolve imports for fragment at {_where(fragment)}: {e}") from e

    # 3. Imports of the resolved unit
    try:
      return parse_imports(resolved)
    except cst.ParserSyntaxError as e:
      raise ResolutionError(f"auto-import produced invalid code for fragment at {_where(fragment)}") from e


def _where(fragment: Fragment) -> str:
  start = fragment.range.start
  return f"{start.line}:{start.col}"
