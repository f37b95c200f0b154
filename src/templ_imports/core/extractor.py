"""
Fragment Extractor.

Walks a document's node tree and yields, in document order, every piece of
Python that has to be checked for import requirements.

Synthesis rules per node kind:

- Header and code nodes: their text, unchanged.
- String expressions: ``_templ_expr = (<expr>)``, so the expression is seen in
  a valid statement context.
- Elements: one ``_templ_attr_<i> = (<expr>)`` per dynamic attribute, in
  attribute order. Elements without dynamic attributes yield nothing.
- Templates: ``def _templ(<parameters>): pass``, covering annotations and
  default values.
- ``if`` blocks: ``if (<condition>): pass``.
- ``for`` blocks: ``for <clause>: pass``.
- Anything else yields nothing.

Composite nodes are always descended into, whether or not they yielded a
fragment themselves.

Every fragment also carries the names the document already binds where it
appears. Inside a template these include every name its own code binds: a
template compiles to one function, so they are locals throughout its body.
"""

from dataclasses import dataclass, replace
from functools import partial
from typing import Callable, Dict, FrozenSet, Iterator, List, Set, Tuple

from templ_imports.autoimport.scanners import bound_names, parameter_names
from templ_imports.parser.nodes import Document, Node, NodeKind, Range

EXPRESSION_TARGET = "_templ_expr"
ATTRIBUTE_TARGET = "_templ_attr"
TEMPLATE_TARGET = "_templ"


@dataclass(frozen=True)
class Fragment:
  """
  A unit of Python text extracted from one node.

  Attributes:
      node (Node): The node the text was taken from.
      text (str): Python statements to resolve.
      range (Range): Location of the originating code in the document.
      bound (FrozenSet[str]): Names defined by the document in scope of the
          fragment, other than through imports.
  """

  node: Node
  text: str
  range: Range
  bound: FrozenSet[str] = frozenset()


def bind_expression(target: str, expression: str) -> str:
  """
  Wraps an expression in an assignment to a throwaway name.

  The expression is parenthesized on its own lines so multi-line expressions
  and trailing comments stay valid.
  """
  return f"{target} = (\n{expression}\n)\n"


def condition_stub(condition: str) -> str:
  return f"if (\n{condition}\n):\n  pass\n"


def loop_stub(clause: str) -> str:
  return f"for {clause}:\n  pass\n"


def signature_stub(parameters: str) -> str:
  return f"def {TEMPLATE_TARGET}(\n{parameters}\n):\n  pass\n"


def _verbatim(text: str) -> str:
  return text


def _stubbed(stub: Callable[[str], str]) -> Callable[[Node], List[Fragment]]:
  def synthesize(node: Node) -> List[Fragment]:
    return [Fragment(node=node, text=stub(e.value), range=e.range) for e in node.code_expressions()]

  return synthesize


def _element(node: Node) -> List[Fragment]:
  return [
    Fragment(node=node, text=bind_expression(f"{ATTRIBUTE_TARGET}_{idx}", e.value), range=e.range)
    for idx, e in enumerate(node.code_expressions())
  ]


_SYNTHESIZERS: Dict[NodeKind, Callable[[Node], List[Fragment]]] = {
  NodeKind.HEADER: _stubbed(_verbatim),
  NodeKind.CODE: _stubbed(_verbatim),
  NodeKind.STRING_EXPRESSION: _stubbed(partial(bind_expression, EXPRESSION_TARGET)),
  NodeKind.ELEMENT: _element,
  NodeKind.TEMPLATE: _stubbed(signature_stub),
  NodeKind.IF: _stubbed(condition_stub),
  NodeKind.FOR: _stubbed(loop_stub),
}

# Kinds whose code can introduce names for the rest of a template body.
_BINDING_STUBS: Dict[NodeKind, Callable[[str], str]] = {
  NodeKind.CODE: _verbatim,
  NodeKind.IF: condition_stub,
  NodeKind.FOR: loop_stub,
}


def node_fragments(node: Node) -> List[Fragment]:
  """
  Synthesizes the fragments contributed by a single node (not its children).

  Args:
      node: Any document node.

  Returns:
      List[Fragment]: Possibly empty, with no bound names set.
  """
  synthesize = _SYNTHESIZERS.get(node.kind)
  if synthesize is None:
    return []
  return synthesize(node)


def module_bindings(document: Document) -> Set[str]:
  """
  Names the header and top-level code define, imports excluded.
  """
  names: Set[str] = set()
  for node in document.nodes:
    if node.kind in (NodeKind.HEADER, NodeKind.CODE):
      for expression in node.code_expressions():
        names |= bound_names(expression.value)
  return names


def template_bindings(template: Node) -> Set[str]:
  """
  Names local to a template body: its parameters and every name bound by
  template code anywhere inside it.

  Args:
      template: A template node.

  Returns:
      Set[str]: Local names.
  """
  names: Set[str] = set()
  for expression in template.code_expressions():
    names |= parameter_names(signature_stub(expression.value))

  stack: List[Node] = list(template.children())
  while stack:
    node = stack.pop()
    stub = _BINDING_STUBS.get(node.kind)
    if stub is not None:
      for expression in node.code_expressions():
        names |= bound_names(stub(expression.value))
    stack.extend(node.children())
  return names


def extract_fragments(document: Document) -> Iterator[Fragment]:
  """
  Yields every fragment of the document in depth-first pre-order.

  Traversal uses an explicit stack, so deeply nested documents do not hit
  the recursion limit. Each call starts a fresh traversal.

  Args:
      document: The document to walk. It is not modified.

  Yields:
      Fragment: The next fragment in document order, with the names bound
      in its scope.
  """
  module_scope = frozenset(module_bindings(document))
  stack: List[Tuple[Node, FrozenSet[str]]] = [(node, module_scope) for node in reversed(document.nodes)]
  while stack:
    node, bound = stack.pop()
    for fragment in node_fragments(node):
      yield replace(fragment, bound=bound)
    if node.kind == NodeKind.TEMPLATE:
      # Parameter defaults and annotations were resolved in the outer scope above.
      bound = bound | frozenset(template_bindings(node))
    stack.extend((child, bound) for child in reversed(node.children()))
