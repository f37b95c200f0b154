"""
Tests for ImportsConfig loading and validation.
"""

import pytest
from pydantic import ValidationError

from templ_imports.config import ImportsConfig, parse_cli_key_values


def test_defaults():
  config = ImportsConfig()
  assert config.stdlib is True
  assert config.local_modules is True
  assert config.resolve_installed is False
  assert config.symbol_table()["Decimal"] == "from decimal import Decimal"


def test_known_symbols_extend_and_override_defaults():
  config = ImportsConfig(
    known_symbols={
      "Markup": "from markupsafe import Markup",
      "np": "  import numpy as np  ",
      "Path": "from pathlib import PurePath as Path",
    }
  )
  table = config.symbol_table()
  assert table["Markup"] == "from markupsafe import Markup"
  assert table["np"] == "import numpy as np"
  assert table["Path"] == "from pathlib import PurePath as Path"


@pytest.mark.parametrize(
  "symbols",
  [
    {"Markup": "from markupsafe import escape"},
    {"os": "import os, sys"},
    {"x": "x = 1"},
  ],
)
def test_known_symbols_validation(symbols):
  with pytest.raises(ValidationError):
    ImportsConfig(known_symbols=symbols)


def test_load_from_pyproject(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.templ_imports]\nresolve_installed = true\n\n[tool.templ_imports.known_symbols]\nMarkup = "from markupsafe import Markup"\n'
  )
  nested = tmp_path / "templates" / "pages"
  nested.mkdir(parents=True)

  config = ImportsConfig.load(search_path=nested)
  assert config.resolve_installed is True
  assert config.known_symbols == {"Markup": "from markupsafe import Markup"}


def test_overrides_win(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.templ_imports]\nstdlib = false\n")
  config = ImportsConfig.load(search_path=tmp_path, overrides={"stdlib": True})
  assert config.stdlib is True


def test_missing_section(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[project]\nname = "site"\n')
  assert ImportsConfig.load(search_path=tmp_path) == ImportsConfig()


def test_broken_toml_is_ignored(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.templ_imports\n")
  assert ImportsConfig.load(search_path=tmp_path) == ImportsConfig()


def test_parse_cli_key_values():
  parsed = parse_cli_key_values(["resolve_installed=true", "stdlib = False", "name=a=b"])
  assert parsed == {"resolve_installed": True, "stdlib": False, "name": "a=b"}


def test_parse_cli_key_values_empty():
  assert parse_cli_key_values(None) == {}


def test_parse_cli_key_values_invalid():
  with pytest.raises(ValueError):
    parse_cli_key_values(["stdlib"])
