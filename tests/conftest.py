"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console isolation so log capture in one test does not leak into the next.
- Shared sample documents.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'templ_imports' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from templ_imports.utils.console import reset_console, set_verbosity  # noqa: E402

GREETING = """package greeting

templ hello(name) {
  <p>{ string.capwords(name) }</p>
}
"""


@pytest.fixture(autouse=True)
def isolate_console():
  """
  Restores the default console and log level after each test.
  """
  yield
  set_verbosity(False)
  reset_console()


@pytest.fixture
def anchor(tmp_path):
  """
  Returns a document path inside an empty directory, so no sibling module
  can influence resolution.
  """
  return str(tmp_path / "page.templ")


@pytest.fixture
def greeting_source():
  return GREETING
