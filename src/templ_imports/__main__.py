"""
Entry point for module execution (``python -m templ_imports``).

This module delegates execution to the CLI handler in ``templ_imports.cli.__main__``.
"""

import sys
from templ_imports.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
