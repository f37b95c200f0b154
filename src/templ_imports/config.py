"""
Import Resolution Settings.

Settings for the auto-import primitive, read from ``[tool.templ_imports]`` in
the nearest ``pyproject.toml`` and overridable from the command line.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from templ_imports.autoimport.symbols import DEFAULT_KNOWN_SYMBOLS
from templ_imports.core.imports import parse_import_statement

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

TOOL_SECTION = "templ_imports"


class ImportsConfig(BaseModel):
  """
  Configuration for import resolution.
  """

  known_symbols: Dict[str, str] = Field(
    default_factory=dict,
    description="Extra bare names to resolve, mapped to the import statement providing them.",
  )
  stdlib: bool = Field(True, description="Resolve standard library modules used as 'module.attr'.")
  local_modules: bool = Field(True, description="Resolve modules living next to the document.")
  resolve_installed: bool = Field(False, description="Resolve any installed top-level module.")

  @field_validator("known_symbols")
  @classmethod
  def validate_known_symbols(cls, v: Dict[str, str]) -> Dict[str, str]:
    """
    Ensures every entry is a single import statement binding its key.

    Args:
        v (Dict[str, str]): Raw table.

    Returns:
        Dict[str, str]: The table with statements stripped.

    Raises:
        ValueError: If a statement is invalid or binds another name.
    """
    clean = {}
    for name, statement in v.items():
      spec = parse_import_statement(statement)
      if spec.bound_name != name:
        raise ValueError(f"Import {statement!r} binds {spec.bound_name!r}, not {name!r}")
      clean[name] = statement.strip()
    return clean

  def symbol_table(self) -> Dict[str, str]:
    """
    Returns the effective bare-name table: defaults overlaid with ``known_symbols``.

    Returns:
        Dict[str, str]: name -> import statement.
    """
    return {**DEFAULT_KNOWN_SYMBOLS, **self.known_symbols}

  @classmethod
  def load(
    cls,
    search_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
  ) -> "ImportsConfig":
    """
    Loads configuration from pyproject.toml and applies overrides.

    Args:
        search_path (Optional[Path]): Directory to start searching for TOML config.
        overrides (Optional[Dict]): Values taking precedence over the file (e.g. from the CLI).

    Returns:
        ImportsConfig: The resolved configuration.
    """
    settings = _find_tool_section(search_path or Path.cwd())
    settings.update(overrides or {})
    return cls(**settings)


def _find_tool_section(start: Path) -> Dict[str, Any]:
  """
  Returns ``[tool.templ_imports]`` from the closest pyproject.toml.

  The search walks from ``start`` towards the filesystem root and stops at the
  first pyproject.toml, whether or not it has the section. An unreadable file
  counts as an empty section.

  Args:
      start (Path): Directory the search begins in.

  Returns:
      Dict[str, Any]: A copy of the section, empty when absent.
  """
  start = start.resolve()
  for directory in (start, *start.parents):
    candidate = directory / "pyproject.toml"
    if not candidate.is_file():
      continue
    try:
      data = tomllib.loads(candidate.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
      return {}
    return dict(data.get("tool", {}).get(TOOL_SECTION, {}))
  return {}


def _coerce(raw: str) -> Any:
  value = raw.strip()
  return {"true": True, "false": False}.get(value.lower(), value)


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Turns ``--config`` arguments into overrides for ``ImportsConfig.load``.

  ``true``/``false`` (any case) become booleans; other values stay strings and
  are validated by the model.

  Args:
      items (Optional[List[str]]): Raw ``key=value`` strings from argparse.

  Returns:
      Dict[str, Any]: Overrides keyed by field name.

  Raises:
      ValueError: If an item has no '='.
  """
  overrides: Dict[str, Any] = {}
  for item in items or []:
    key, sep, raw = item.partition("=")
    if not sep:
      raise ValueError(f"Invalid config format: '{item}'. Expected 'key=value'.")
    overrides[key.strip()] = _coerce(raw)
  return overrides
