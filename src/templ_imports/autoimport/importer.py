"""
Auto Importer.

The single-file resolution primitive: given a Python unit, it drops top-level
imports nothing reads and adds the imports needed to bind every unresolved
name, then returns the rewritten unit.

Lookup order for an unresolved name:

1. The symbol table (``DEFAULT_KNOWN_SYMBOLS`` plus configured ``known_symbols``).
2. Only for names used as ``name.attr``:
   a module next to the unit's file, a standard library module that really
   has the attributes read on it, or (opt-in) any installed top-level module.

Names found nowhere are left alone.
"""

import importlib
import importlib.util
import sys
from pathlib import Path
from typing import AbstractSet, Dict, List, Optional, Set, Tuple

import libcst as cst

from templ_imports.autoimport.scanners import NameUsage, scan_names
from templ_imports.config import ImportsConfig
from templ_imports.core.imports import ImportSpec, module_imports, parse_import_statement, replace_import_block
from templ_imports.utils.console import log_debug

# Standard library modules whose import has visible side effects.
_NEVER_IMPORT = {"antigravity", "this", "idlelib", "turtle", "turtledemo", "tkinter"}

_STDLIB_MODULES = frozenset(getattr(sys, "stdlib_module_names", ()))


def _is_local_module(directory: Path, name: str) -> bool:
  return (directory / f"{name}.py").is_file() or (directory / name / "__init__.py").is_file()


def _is_installed(name: str) -> bool:
  try:
    return importlib.util.find_spec(name) is not None
  except (ImportError, ValueError):
    return False


def _has_submodule(module_name: str, attr: str) -> bool:
  try:
    return importlib.util.find_spec(f"{module_name}.{attr}") is not None
  except (ImportError, ValueError):
    return False


def _stdlib_exports(name: str, attrs: Set[str]) -> bool:
  """
  Checks that a standard library module provides every attribute read on it.

  Args:
      name: Module name.
      attrs: Attribute names accessed as ``name.attr``.

  Returns:
      bool: True if all attributes exist as module members or submodules.
  """
  if name.startswith("_") or name not in _STDLIB_MODULES or name in _NEVER_IMPORT:
    return False
  try:
    module = importlib.import_module(name)
  except Exception:
    return False
  return all(hasattr(module, attr) or _has_submodule(name, attr) for attr in attrs)


class AutoImporter:
  """
  Adds missing and removes unused top-level imports of a Python unit.

  Lookups are cached per instance; build one importer per run.
  """

  def __init__(self, config: Optional[ImportsConfig] = None) -> None:
    """
    Initializes the importer.

    Args:
        config: Resolution settings. Defaults to ``ImportsConfig()``.
    """
    self.config = config or ImportsConfig()
    self._symbols: Dict[str, ImportSpec] = {
      name: parse_import_statement(statement) for name, statement in self.config.symbol_table().items()
    }
    self._cache: Dict[Tuple[str, str, str, frozenset], Optional[ImportSpec]] = {}

  def process(self, filename: str, source: str, package: str = "", bound: AbstractSet[str] = frozenset()) -> str:
    """
    Rewrites the unit's import block.

    Args:
        filename: Path anchoring local module lookup; its parent directory is searched.
        source: The Python unit.
        package: Dotted package the unit belongs to.
        bound: Names bound by the surrounding template; never looked up.

    Returns:
        str: The unit with its import block regenerated.

    Raises:
        libcst.ParserSyntaxError: If the unit is not valid Python.
    """
    wrapper = cst.MetadataWrapper(cst.parse_module(source))
    module = wrapper.module
    usage = scan_names(wrapper)

    kept = [spec for spec in module_imports(module) if self._is_used(spec, usage)]
    imported = {spec.bound_name for spec in kept}

    added: List[ImportSpec] = []
    directory = Path(filename).parent
    for name in sorted(usage.unresolved - imported - set(bound)):
      spec = self.lookup(name, usage.attributes.get(name, set()), directory, package)
      if spec is not None:
        log_debug(f"Resolved [code]{name}[/code] -> [code]{spec.render()}[/code]")
        added.append(spec)
        imported.add(name)

    statements = [spec.to_statement() for spec in kept + added]
    return replace_import_block(module, statements).code

  def _is_used(self, spec: ImportSpec, usage: NameUsage) -> bool:
    if spec.is_future or spec.bound_name is None:
      return True
    return spec.bound_name in usage.accessed

  def lookup(self, name: str, attrs: Set[str], directory: Path, package: str = "") -> Optional[ImportSpec]:
    """
    Finds the import that binds ``name``.

    Args:
        name: The unresolved name.
        attrs: Attributes read on the name; empty when it is only used bare.
        directory: Directory searched for sibling modules.
        package: Dotted package of the unit.

    Returns:
        Optional[ImportSpec]: The import, or None when nothing provides the name.
    """
    key = (name, str(directory), package, frozenset(attrs))
    if key not in self._cache:
      self._cache[key] = self._lookup(name, attrs, directory, package)
    return self._cache[key]

  def _lookup(self, name: str, attrs: Set[str], directory: Path, package: str) -> Optional[ImportSpec]:
    if name in self._symbols:
      return self._symbols[name]
    if not attrs:
      return None

    if self.config.local_modules and _is_local_module(directory, name):
      if package and directory.name == package.rsplit(".", 1)[-1]:
        return ImportSpec(path=package, name=name)
      return ImportSpec(path=name)

    if self.config.stdlib and _stdlib_exports(name, attrs):
      return ImportSpec(path=name)

    if self.config.resolve_installed and _is_installed(name):
      return ImportSpec(path=name)

    return None
