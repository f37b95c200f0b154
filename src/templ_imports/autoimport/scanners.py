"""
Name Usage Scanners.

LibCST analysis that tells the auto-importer which names a unit reads, which
of them have no binding anywhere in scope, and which unbound names are used as
the base of an attribute access (``base.attr``). It also reports which names
a piece of template code binds, so fragments resolved later treat them as
locals.
"""

from dataclasses import dataclass, field
from typing import Dict, Set

import libcst as cst
from libcst.metadata import GlobalScope, ScopeProvider


@dataclass
class NameUsage:
  """
  Result of scanning one unit.

  Attributes:
      accessed (Set[str]): Every name read anywhere in the unit.
      unresolved (Set[str]): Names read without any binding (builtins count as bound).
      attributes (Dict[str, Set[str]]): For unresolved names used as ``base.attr``,
          the attribute names read on them.
  """

  accessed: Set[str] = field(default_factory=set)
  unresolved: Set[str] = field(default_factory=set)
  attributes: Dict[str, Set[str]] = field(default_factory=dict)


class AttributeBaseScanner(cst.CSTVisitor):
  """
  Records every ``Name`` node that is the direct base of an attribute access.

  Attributes:
      bases (Dict[int, str]): ``id()`` of the base Name node -> attribute name.
  """

  def __init__(self) -> None:
    self.bases: Dict[int, str] = {}

  def visit_Attribute(self, node: cst.Attribute) -> None:
    if isinstance(node.value, cst.Name):
      self.bases[id(node.value)] = node.attr.value


def scan_names(wrapper: cst.MetadataWrapper) -> NameUsage:
  """
  Scans a wrapped module for name reads.

  Args:
      wrapper: Metadata wrapper around the unit. Nodes in the result refer to
          ``wrapper.module``.

  Returns:
      NameUsage: The collected usage.
  """
  scopes = set(wrapper.resolve(ScopeProvider).values())
  bases = AttributeBaseScanner()
  wrapper.module.visit(bases)

  usage = NameUsage()
  for scope in scopes:
    if scope is None:
      continue
    for access in scope.accesses:
      node = access.node
      if not isinstance(node, cst.Name):
        continue
      usage.accessed.add(node.value)
      if access.referents:
        continue
      usage.unresolved.add(node.value)
      attr = bases.bases.get(id(node))
      if attr is not None:
        usage.attributes.setdefault(node.value, set()).add(attr)
  return usage


def bound_names(source: str) -> Set[str]:
  """
  Returns the names a unit binds at module level other than through imports:
  assignments, loop targets, walrus targets, functions and classes.

  Import bindings are left out so an import the unit relies on is still
  reported as required wherever it is used.

  Args:
      source: Python source text.

  Returns:
      Set[str]: Bound names; empty when the source does not parse, since the
      unit's own fragment reports that error.
  """
  try:
    wrapper = cst.MetadataWrapper(cst.parse_module(source))
  except cst.ParserSyntaxError:
    return set()

  names: Set[str] = set()
  for scope in set(wrapper.resolve(ScopeProvider).values()):
    if not isinstance(scope, GlobalScope):
      continue
    for assignment in scope.assignments:
      node = getattr(assignment, "node", None)
      if node is None or isinstance(node, (cst.Import, cst.ImportFrom)):
        continue
      names.add(assignment.name)
  return names


def parameter_names(source: str) -> Set[str]:
  """
  Returns the parameter names of the first function defined in ``source``.

  Args:
      source: Python source text starting with a ``def`` statement.

  Returns:
      Set[str]: Parameter names, ``*args`` and ``**kwargs`` included; empty
      when the source does not parse.
  """
  try:
    module = cst.parse_module(source)
  except cst.ParserSyntaxError:
    return set()
  if not module.body or not isinstance(module.body[0], cst.FunctionDef):
    return set()

  params = module.body[0].params
  names = {p.name.value for p in (*params.posonly_params, *params.params, *params.kwonly_params)}
  for star in (params.star_arg, params.star_kwarg):
    if isinstance(star, cst.Param):
      names.add(star.name.value)
  return names
