"""
Utilities for Import Statements.

Static helpers for analysing and rebuilding the top-level import block of a
LibCST module: name flattening, docstring and ``__future__`` detection, and
replacement of every top-level import with a new, ordered block.
"""

from typing import List, Sequence, Tuple, Union

import libcst as cst


def get_full_name(node: Union[cst.Name, cst.Attribute]) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
    node: The CST node representing the identifier.

  Returns:
    str: The dotted name (e.g., "os.path"), or an empty string for other nodes.
  """
  if isinstance(node, cst.Name):
    return node.value
  elif isinstance(node, cst.Attribute):
    return f"{get_full_name(node.value)}.{node.attr.value}"
  return ""


def is_docstring(node: cst.CSTNode, idx: int) -> bool:
  """
  Determines if a statement node represents a module docstring.

  Args:
      node: The statement node from the module body.
      idx: The index of this statement in the body list.

  Returns:
      bool: True if it is a docstring (string expression at index 0).
  """
  if idx != 0:
    return False
  if isinstance(node, cst.SimpleStatementLine):
    if len(node.body) == 1 and isinstance(node.body[0], cst.Expr):
      expr = node.body[0].value
      if isinstance(expr, (cst.SimpleString, cst.ConcatenatedString)):
        return True
  return False


def is_import(node: cst.CSTNode) -> bool:
  return isinstance(node, (cst.Import, cst.ImportFrom))


def split_import_lines(
  body: Sequence[cst.BaseStatement],
) -> Tuple[List[cst.BaseStatement], List[cst.BaseStatement], List[cst.EmptyLine]]:
  """
  Separates a module body into its docstring, the remaining non-import code,
  and the comments that were attached to removed import lines.

  Only top-level simple statements are considered; imports nested in
  functions, classes or ``try`` blocks are ordinary code. A line such as
  ``import os; x = 1`` keeps ``x = 1`` and its trailing comment; the trailing
  comment of a line holding only imports joins the carried comments.

  Args:
      body: The module's statements.

  Returns:
      Tuple: ``(docstring, rest, comments)``.
  """
  docstring: List[cst.BaseStatement] = []
  rest: List[cst.BaseStatement] = []
  comments: List[cst.EmptyLine] = []

  for idx, stmt in enumerate(body):
    if is_docstring(stmt, idx):
      docstring.append(stmt)
      continue
    if not isinstance(stmt, cst.SimpleStatementLine) or not any(is_import(s) for s in stmt.body):
      rest.append(stmt)
      continue

    comments.extend(line for line in stmt.leading_lines if line.comment is not None)
    kept = [s for s in stmt.body if not is_import(s)]
    trailing = stmt.trailing_whitespace.comment
    if not kept and trailing is not None:
      comments.append(cst.EmptyLine(comment=trailing))
    if kept:
      # Drop the dangling semicolon left on the new last statement.
      kept[-1] = kept[-1].with_changes(semicolon=cst.MaybeSentinel.DEFAULT)
      rest.append(stmt.with_changes(body=kept))

  return docstring, rest, comments


def replace_import_block(module: cst.Module, statements: Sequence[cst.SimpleStatementLine]) -> cst.Module:
  """
  Removes every top-level import of ``module`` and inserts ``statements`` instead.

  The new block goes after the module docstring, separated from it and from
  the following code by exactly one blank line. Comments carried by removed
  import lines are placed above the new block.

  Args:
      module: The module to rewrite.
      statements: Import statement lines, already ordered.

  Returns:
      cst.Module: The rewritten module.
  """
  docstring, rest, comments = split_import_lines(module.body)
  block = list(statements)

  if block:
    leading: List[cst.EmptyLine] = [cst.EmptyLine()] if docstring else []
    block[0] = block[0].with_changes(leading_lines=leading + comments)
    block[1:] = [stmt.with_changes(leading_lines=()) for stmt in block[1:]]

    if rest:
      kept_comments = [line for line in rest[0].leading_lines if line.comment is not None]
      rest[0] = rest[0].with_changes(leading_lines=[cst.EmptyLine()] + kept_comments)

  return module.with_changes(body=docstring + block + rest)
