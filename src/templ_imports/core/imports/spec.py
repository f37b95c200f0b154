"""
Import Requirements.

An ``ImportSpec`` is a normalized import requirement that binds exactly one
name: ``import path``, ``import path as alias``, ``from path import name`` or
``from path import name as alias`` (``name == "*"`` for star imports).

This module also provides the "imports-only" parse used throughout the
pipeline: it collects the top-level import statements of a Python unit.
"""

from dataclasses import dataclass
from typing import List, Optional

import libcst as cst

from templ_imports.core.imports.utils import get_full_name

FUTURE_MODULE = "__future__"


@dataclass(frozen=True)
class ImportSpec:
  """
  Represents one import statement binding one name.

  Attributes:
      path (str): Module path, with leading dots for relative imports.
      name (Optional[str]): Member imported by a ``from`` import, ``*`` for star imports.
      alias (Optional[str]): Name given with ``as``.
  """

  path: str
  name: Optional[str] = None
  alias: Optional[str] = None

  @property
  def literal(self) -> str:
    """
    The path literal: ``path`` for ``import`` statements, ``path:name`` for ``from`` imports.
    """
    if self.name is None:
      return self.path
    return f"{self.path}:{self.name}"

  @property
  def key(self) -> str:
    """Canonical identity used for deduplication."""
    if self.alias:
      return f"{self.alias}{self.literal}"
    return self.literal

  @property
  def bound_name(self) -> Optional[str]:
    """
    The local name this import introduces.

    ``import os.path`` binds ``os``; star imports bind nothing knowable.
    """
    if self.alias:
      return self.alias
    if self.name is None:
      return self.path.split(".")[0]
    if self.name == "*":
      return None
    return self.name

  @property
  def is_future(self) -> bool:
    return self.path == FUTURE_MODULE

  def render(self) -> str:
    """
    Renders the spec as a single Python import statement.

    Returns:
        str: e.g. ``from os import path as p``.
    """
    suffix = f" as {self.alias}" if self.alias else ""
    if self.name is None:
      return f"import {self.path}{suffix}"
    return f"from {self.path} import {self.name}{suffix}"

  def to_statement(self) -> cst.SimpleStatementLine:
    return cst.parse_statement(self.render() + "\n")


def _alias_name(alias: cst.ImportAlias) -> Optional[str]:
  if alias.asname is None:
    return None
  target = alias.asname.name
  if isinstance(target, cst.Name):
    return target.value
  return None


def specs_from_statement(node: cst.BaseSmallStatement) -> List[ImportSpec]:
  """
  Converts an ``Import`` or ``ImportFrom`` node into one spec per bound name.

  Args:
      node: The import node.

  Returns:
      List[ImportSpec]: Specs in statement order; empty for non-import nodes.
  """
  if isinstance(node, cst.Import):
    return [ImportSpec(path=get_full_name(a.name), alias=_alias_name(a)) for a in node.names]

  if isinstance(node, cst.ImportFrom):
    path = "." * len(node.relative)
    if node.module is not None:
      path += get_full_name(node.module)
    if isinstance(node.names, cst.ImportStar):
      return [ImportSpec(path=path, name="*")]
    return [ImportSpec(path=path, name=get_full_name(a.name), alias=_alias_name(a)) for a in node.names]

  return []


def module_imports(module: cst.Module) -> List[ImportSpec]:
  """
  Collects the top-level import statements of a parsed module.

  Args:
      module: The LibCST module.

  Returns:
      List[ImportSpec]: Specs in source order.
  """
  specs: List[ImportSpec] = []
  for stmt in module.body:
    if isinstance(stmt, cst.SimpleStatementLine):
      for small in stmt.body:
        specs.extend(specs_from_statement(small))
  return specs


def parse_imports(source: str) -> List[ImportSpec]:
  """
  Parses a Python unit and returns its top-level imports.

  Args:
      source: Python source text.

  Returns:
      List[ImportSpec]: Specs in source order.

  Raises:
      libcst.ParserSyntaxError: If the source is not valid Python.
  """
  return module_imports(cst.parse_module(source))


def parse_import_statement(statement: str) -> ImportSpec:
  """
  Parses text holding exactly one import of one name.

  Args:
      statement: e.g. ``"from decimal import Decimal"``.

  Returns:
      ImportSpec: The parsed spec.

  Raises:
      ValueError: If the text is not a single import binding a single name.
  """
  try:
    specs = parse_imports(statement.strip() + "\n")
  except cst.ParserSyntaxError as e:
    raise ValueError(f"Invalid import statement {statement!r}: {e.message}") from e
  if len(specs) != 1:
    raise ValueError(f"Expected exactly one imported name in {statement!r}, found {len(specs)}")
  return specs[0]
