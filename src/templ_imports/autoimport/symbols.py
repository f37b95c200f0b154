"""
Default Symbol Table.

Bare names the auto-importer resolves without configuration. Each entry maps
the bound name to the import statement that provides it. Projects extend or
override the table through ``[tool.templ_imports.known_symbols]``.

Module names used as attribute bases (``json.dumps``) need no entry; they are
found in the standard library, next to the document, or among installed
packages.
"""

from typing import Dict

DEFAULT_KNOWN_SYMBOLS: Dict[str, str] = {
  # Conventional aliases
  "np": "import numpy as np",
  "pd": "import pandas as pd",
  "plt": "import matplotlib.pyplot as plt",
  "dt": "import datetime as dt",
  # Standard library classes and helpers
  "Counter": "from collections import Counter",
  "OrderedDict": "from collections import OrderedDict",
  "defaultdict": "from collections import defaultdict",
  "namedtuple": "from collections import namedtuple",
  "dataclass": "from dataclasses import dataclass",
  "Decimal": "from decimal import Decimal",
  "Enum": "from enum import Enum",
  "Fraction": "from fractions import Fraction",
  "partial": "from functools import partial",
  "reduce": "from functools import reduce",
  "wraps": "from functools import wraps",
  "Path": "from pathlib import Path",
  "pformat": "from pprint import pformat",
  "dedent": "from textwrap import dedent",
  "UUID": "from uuid import UUID",
  "urlencode": "from urllib.parse import urlencode",
  "quote_plus": "from urllib.parse import quote_plus",
  "escape": "from html import escape",
  # Typing
  "Any": "from typing import Any",
  "Callable": "from typing import Callable",
  "Dict": "from typing import Dict",
  "Iterable": "from typing import Iterable",
  "List": "from typing import List",
  "Mapping": "from typing import Mapping",
  "Optional": "from typing import Optional",
  "Sequence": "from typing import Sequence",
  "Tuple": "from typing import Tuple",
  "Union": "from typing import Union",
}
