"""
Error Taxonomy.

Every failure raised by the import pipeline derives from ``TemplImportsError``:

- ``ParseError``: the document, its header, or a synthesized fragment unit is not valid syntax.
- ``ResolutionError``: the auto-import primitive failed for a fragment.
- ``SerializationError``: the rewritten header could not be rendered back to text.

None of them are retried; they abort the run and propagate to the caller.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
  from templ_imports.parser.nodes import Range


class TemplImportsError(Exception):
  """Base class for all pipeline failures."""


class ParseError(TemplImportsError):
  """
  Raised when source text attributable to the user's document does not parse.

  Attributes:
      message (str): Human readable description of the failure.
      range (Optional[Range]): Location of the offending text in the original document.
  """

  def __init__(self, message: str, range: Optional["Range"] = None) -> None:
    self.message = message
    self.range = range
    super().__init__(self.__str__())

  def __str__(self) -> str:
    if self.range is None:
      return self.message
    start = self.range.start
    return f"{start.line}:{start.col}: {self.message}"


class ResolutionError(TemplImportsError):
  """Raised when the auto-import primitive cannot resolve a fragment."""


class SerializationError(TemplImportsError):
  """Raised when the synthesized header fails to render."""
