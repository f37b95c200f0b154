"""
Templ Document Nodes.

Defines the tree produced by the template parser:

- Document: the package directive, the node list, and the verbatim markup body.
- HeaderNode: the leading Python code region that owns the document's imports.
- Markup variants (Element, TemplateNode, IfNode, ForNode, ...).

Every variant carries a ``kind`` tag and answers two capability queries,
``code_expressions()`` and ``children()``, so tree walkers never need to
inspect concrete types.
"""

import io
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, TextIO


@dataclass(frozen=True)
class Position:
  """
  A location in the document source.

  Attributes:
      index (int): Zero based character offset.
      line (int): One based line number.
      col (int): One based column number.
  """

  index: int = 0
  line: int = 1
  col: int = 1


@dataclass(frozen=True)
class Range:
  """Half open span between two positions."""

  start: Position = field(default_factory=Position)
  end: Position = field(default_factory=Position)


@dataclass
class Expression:
  """
  A piece of Python code and where it came from.

  Attributes:
      value (str): The code text.
      range (Range): Source span of the text inside the document.
  """

  value: str = ""
  range: Range = field(default_factory=Range)


class NodeKind(str, Enum):
  """Closed set of node variants."""

  HEADER = "header"
  CODE = "code"
  STRING_EXPRESSION = "string_expression"
  ELEMENT = "element"
  TEXT = "text"
  TEMPLATE = "template"
  IF = "if"
  FOR = "for"


@dataclass
class Node:
  """
  Abstract base class for all document nodes.
  """

  kind: ClassVar[NodeKind]

  def code_expressions(self) -> List[Expression]:
    """
    Returns the code carried by this node, in source order.

    Returns:
        List[Expression]: Empty for variants holding no code.
    """
    return []

  def children(self) -> List["Node"]:
    """
    Returns the child nodes of a composite variant.

    Returns:
        List[Node]: Empty for leaf variants.
    """
    return []


@dataclass
class HeaderNode(Node):
  """
  The Python code between the package directive and the first template.

  This is the only node the import pipeline rewrites.
  """

  kind: ClassVar[NodeKind] = NodeKind.HEADER
  expression: Expression = field(default_factory=Expression)

  def code_expressions(self) -> List[Expression]:
    return [self.expression]


@dataclass
class CodeNode(Node):
  """Raw Python, either a ``{{ ... }}`` block or top-level code after the header."""

  kind: ClassVar[NodeKind] = NodeKind.CODE
  expression: Expression = field(default_factory=Expression)

  def code_expressions(self) -> List[Expression]:
    return [self.expression]


@dataclass
class StringExpressionNode(Node):
  """A ``{ expr }`` value rendered into the markup."""

  kind: ClassVar[NodeKind] = NodeKind.STRING_EXPRESSION
  expression: Expression = field(default_factory=Expression)

  def code_expressions(self) -> List[Expression]:
    return [self.expression]


@dataclass
class TextNode(Node):
  kind: ClassVar[NodeKind] = NodeKind.TEXT
  value: str = ""


@dataclass
class Attribute:
  """
  Base class for element attributes.

  Attributes:
      name (str): The attribute name as written.
  """

  name: str

  @property
  def expression(self) -> Optional[Expression]:
    """The code expression of a dynamic attribute, None for static ones."""
    return None


@dataclass
class ConstantAttribute(Attribute):
  """``name="value"``"""

  value: str = ""


@dataclass
class BoolConstantAttribute(Attribute):
  """``name``"""


@dataclass
class ExpressionAttribute(Attribute):
  """``name={ expr }``"""

  value: Expression = field(default_factory=Expression)

  @property
  def expression(self) -> Optional[Expression]:
    return self.value


@dataclass
class BoolExpressionAttribute(Attribute):
  """``name?={ expr }``, rendered only when the expression is truthy."""

  value: Expression = field(default_factory=Expression)

  @property
  def expression(self) -> Optional[Expression]:
    return self.value


@dataclass
class Element(Node):
  """
  A markup element with attributes and children.

  Attributes:
      name (str): Tag name.
      attributes (List[Attribute]): Attributes in source order.
      child_nodes (List[Node]): Nested content.
  """

  kind: ClassVar[NodeKind] = NodeKind.ELEMENT
  name: str = ""
  attributes: List[Attribute] = field(default_factory=list)
  child_nodes: List[Node] = field(default_factory=list)

  def code_expressions(self) -> List[Expression]:
    return [a.expression for a in self.attributes if a.expression is not None]

  def children(self) -> List[Node]:
    return self.child_nodes


@dataclass
class TemplateNode(Node):
  """``templ name(parameters) { ... }``"""

  kind: ClassVar[NodeKind] = NodeKind.TEMPLATE
  name: str = ""
  parameters: Expression = field(default_factory=Expression)
  child_nodes: List[Node] = field(default_factory=list)

  def code_expressions(self) -> List[Expression]:
    return [self.parameters]

  def children(self) -> List[Node]:
    return self.child_nodes


@dataclass
class IfNode(Node):
  """``if condition { ... } else { ... }``; ``else if`` chains nest in ``else_nodes``."""

  kind: ClassVar[NodeKind] = NodeKind.IF
  condition: Expression = field(default_factory=Expression)
  then_nodes: List[Node] = field(default_factory=list)
  else_nodes: List[Node] = field(default_factory=list)

  def code_expressions(self) -> List[Expression]:
    return [self.condition]

  def children(self) -> List[Node]:
    return self.then_nodes + self.else_nodes


@dataclass
class ForNode(Node):
  """``for target in iterable { ... }``"""

  kind: ClassVar[NodeKind] = NodeKind.FOR
  clause: Expression = field(default_factory=Expression)
  child_nodes: List[Node] = field(default_factory=list)

  def code_expressions(self) -> List[Expression]:
    return [self.clause]

  def children(self) -> List[Node]:
    return self.child_nodes


@dataclass
class Document:
  """
  A parsed templ document.

  Attributes:
      package (Expression): The dotted name from the ``package`` directive.
      nodes (List[Node]): Top-level nodes. ``nodes[0]`` is the header once processed.
      body (str): Verbatim source of everything after the header, used when writing.
  """

  package: Expression = field(default_factory=Expression)
  nodes: List[Node] = field(default_factory=list)
  body: str = ""

  @property
  def header(self) -> HeaderNode:
    """
    The document's header node.

    Raises:
        ValueError: If ``ensure_header`` has not established one yet.
    """
    if not self.nodes or self.nodes[0].kind != NodeKind.HEADER:
      raise ValueError("Document has no header node")
    return self.nodes[0]

  def write(self, out: TextIO) -> None:
    """
    Renders the document to a text stream.

    Only the header is regenerated; the markup body is written back verbatim.

    Args:
        out: Destination stream.
    """
    parts = [f"package {self.package.value}"]
    if self.nodes and self.nodes[0].kind == NodeKind.HEADER:
      header = self.nodes[0].expression.value.strip()
      if header:
        parts.append(header)
    body = self.body.strip("\n")
    if body:
      parts.append(body)
    out.write("\n\n".join(parts))
    out.write("\n")

  def to_source(self) -> str:
    buf = io.StringIO()
    self.write(buf)
    return buf.getvalue()


def ensure_header(document: Document) -> HeaderNode:
  """
  Guarantees that ``document.nodes[0]`` is a HeaderNode.

  An empty header is inserted when the node list is empty or starts with
  another variant.

  Args:
      document: The document to normalise (modified in place).

  Returns:
      HeaderNode: The document's header.
  """
  if not document.nodes or document.nodes[0].kind != NodeKind.HEADER:
    document.nodes.insert(0, HeaderNode())
  return document.nodes[0]
