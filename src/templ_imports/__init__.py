"""
templ-imports Package.

Automatic import management for templ documents: Python headers followed by
markup templates with inline Python expressions. Every symbol referenced in
the header or in any nested expression is resolved to the import that provides
it, and the header's import block is rewritten as one canonical, sorted,
deduplicated set.

Usage
-----

.. code-block:: python

    import sys
    import templ_imports

    source = '''package greeting

    templ hello(name) {
      <p>{ string.capwords(name) }</p>
    }
    '''
    document = templ_imports.process("greeting/hello.templ", source)
    document.write(sys.stdout)
    # package greeting
    #
    # import string
    # ...
"""

from templ_imports.config import ImportsConfig
from templ_imports.core.process import process, process_document
from templ_imports.errors import ParseError, ResolutionError, SerializationError, TemplImportsError
from templ_imports.parser import Document, parse_document

__version__ = "0.1.0"

__all__ = [
  "Document",
  "ImportsConfig",
  "ParseError",
  "ResolutionError",
  "SerializationError",
  "TemplImportsError",
  "parse_document",
  "process",
  "process_document",
  "__version__",
]
