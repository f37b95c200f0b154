"""
Templ Document Parser.

Parses the templ source format into a :class:`Document` tree.

Layout of a document::

    package greeting

    import os                     <- header (plain Python)

    templ hello(name) {           <- markup templates
      <p class={ css(name) }>{ name }</p>
    }

    def css(name):                <- top-level Python after the header
      ...

Inside a template the parser recognises elements, ``{ expr }`` values,
``{{ code }}`` blocks, ``if``/``else``/``for`` blocks and plain text.
Python expressions are scanned with brace balancing; braces inside string
literals and comments are ignored.
"""

import bisect
import re
import textwrap
from typing import List, Tuple

from templ_imports.errors import ParseError
from templ_imports.parser.nodes import (
  Attribute,
  BoolConstantAttribute,
  BoolExpressionAttribute,
  CodeNode,
  ConstantAttribute,
  Document,
  Element,
  Expression,
  ExpressionAttribute,
  ForNode,
  HeaderNode,
  IfNode,
  Node,
  Position,
  Range,
  StringExpressionNode,
  TemplateNode,
  TextNode,
)

VOID_ELEMENTS = {
  "area",
  "base",
  "br",
  "col",
  "embed",
  "hr",
  "img",
  "input",
  "link",
  "meta",
  "source",
  "track",
  "wbr",
}


class TemplateParser:
  """
  Recursive descent parser for templ documents.
  """

  _PACKAGE_RE = re.compile(r"\A\s*package[ \t]+(?P<name>[A-Za-z_][\w.]*)[ \t]*(?:\r?\n|\Z)")
  _TEMPL_START_RE = re.compile(r"^templ[ \t]", re.MULTILINE)
  _TEMPL_SIG_RE = re.compile(r"templ[ \t]+(?P<name>[A-Za-z_]\w*)[ \t]*\((?P<params>.*)\)[ \t]*\{[ \t]*$")
  _IF_RE = re.compile(r"if[ \t]+(?P<cond>.+?)[ \t]*\{[ \t]*$")
  _FOR_RE = re.compile(r"for[ \t]+(?P<clause>.+?[ \t]in[ \t].+?)[ \t]*\{[ \t]*$")
  _ELSE_IF_RE = re.compile(r"[ \t]*else[ \t]+(?=if[ \t])")
  _ELSE_RE = re.compile(r"[ \t]*else[ \t]*\{")
  _OPEN_TAG_RE = re.compile(r"<(?P<name>[A-Za-z][\w.:-]*)")
  _CLOSE_TAG_RE = re.compile(r"</[ \t]*(?P<name>[A-Za-z][\w.:-]*)[ \t]*>")
  _ATTR_NAME_RE = re.compile(r"[^\s=>/?{}\"']+")
  _UNQUOTED_VALUE_RE = re.compile(r"[^\s>\"'=<`]+")

  def __init__(self, source: str) -> None:
    self.source = source
    self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", source)]

  # --- Locations ---

  def position(self, index: int) -> Position:
    """
    Converts a character offset into a Position.

    Args:
        index: Zero based offset into the source.

    Returns:
        Position: Offset with one based line and column.
    """
    line = bisect.bisect_right(self._line_starts, index) - 1
    return Position(index=index, line=line + 1, col=index - self._line_starts[line] + 1)

  def span(self, start: int, end: int) -> Range:
    return Range(start=self.position(start), end=self.position(end))

  def _expression(self, start: int, end: int) -> Expression:
    """Builds an Expression for ``source[start:end]`` with surrounding whitespace trimmed."""
    raw = self.source[start:end]
    if not raw.strip():
      return Expression(value="", range=self.span(start, start))
    lead = len(raw) - len(raw.lstrip())
    trail = len(raw) - len(raw.rstrip())
    return Expression(value=raw.strip(), range=self.span(start + lead, end - trail))

  def _error(self, message: str, index: int) -> ParseError:
    return ParseError(message, self.span(index, index))

  # --- Document level ---

  def parse(self) -> Document:
    """
    Parses the stored source.

    Returns:
        Document: The document tree. ``nodes[0]`` is always the header.

    Raises:
        ParseError: If the source is not a valid templ document.
    """
    src = self.source
    m = self._PACKAGE_RE.match(src)
    if not m:
      raise self._error("expected 'package <name>' declaration", 0)
    package = Expression(value=m.group("name"), range=self.span(m.start("name"), m.end("name")))

    first_templ = self._TEMPL_START_RE.search(src, m.end())
    header_end = first_templ.start() if first_templ else len(src)
    nodes: List[Node] = [HeaderNode(expression=self._expression(m.end(), header_end))]

    pos = header_end
    while pos < len(src):
      nxt = self._TEMPL_START_RE.search(src, pos)
      chunk_end = nxt.start() if nxt else len(src)
      if chunk_end > pos:
        if src[pos:chunk_end].strip():
          nodes.append(CodeNode(expression=self._expression(pos, chunk_end)))
        pos = chunk_end
        continue
      template, pos = self._parse_template(pos)
      nodes.append(template)

    return Document(package=package, nodes=nodes, body=src[header_end:])

  def _line_end(self, pos: int) -> int:
    end = self.source.find("\n", pos)
    return len(self.source) if end == -1 else end

  def _parse_template(self, pos: int) -> Tuple[TemplateNode, int]:
    line_end = self._line_end(pos)
    m = self._TEMPL_SIG_RE.match(self.source, pos, line_end)
    if not m:
      raise self._error("invalid template signature, expected 'templ name(params) {'", pos)
    parameters = self._expression(m.start("params"), m.end("params"))
    children, pos = self._parse_nodes(m.end())
    return TemplateNode(name=m.group("name"), parameters=parameters, child_nodes=children), pos

  # --- Markup ---

  def _at_line_start(self, pos: int) -> bool:
    line_start = self.source.rfind("\n", 0, pos) + 1
    return not self.source[line_start:pos].strip()

  def _parse_nodes(self, pos: int, end_tag: str = "") -> Tuple[List[Node], int]:
    """
    Parses markup until the block closer.

    Args:
        pos: Offset of the first character of the content.
        end_tag: Element name whose closing tag ends the content. When empty,
            the content is a ``{ ... }`` block ended by ``}``.

    Returns:
        Tuple[List[Node], int]: The child nodes and the offset after the closer.
    """
    src = self.source
    nodes: List[Node] = []
    text_start = pos

    def flush(end: int) -> None:
      text = src[text_start:end]
      if text.strip():
        nodes.append(TextNode(value=text))

    while True:
      if pos >= len(src):
        expected = f"</{end_tag}>" if end_tag else "'}'"
        raise self._error(f"unexpected end of document, expected {expected}", pos)

      ch = src[pos]
      node = None

      if src.startswith("</", pos):
        flush(pos)
        m = self._CLOSE_TAG_RE.match(src, pos)
        if not m or m.group("name") != end_tag:
          expected = f"</{end_tag}>" if end_tag else "'}'"
          raise self._error(f"unexpected closing tag, expected {expected}", pos)
        return nodes, m.end()

      if ch == "}":
        flush(pos)
        if end_tag:
          raise self._error(f"unexpected '}}', expected </{end_tag}>", pos)
        return nodes, pos + 1

      if ch == "<" and self._OPEN_TAG_RE.match(src, pos):
        flush(pos)
        node, pos = self._parse_element(pos)
      elif src.startswith("{{", pos):
        flush(pos)
        node, pos = self._parse_code_block(pos)
      elif ch == "{":
        flush(pos)
        expression, pos = self._read_expression(pos)
        node = StringExpressionNode(expression=expression)
      elif ch in "if" and self._at_line_start(pos):
        line_end = self._line_end(pos)
        if self._IF_RE.match(src, pos, line_end):
          flush(pos)
          node, pos = self._parse_if(pos)
        elif self._FOR_RE.match(src, pos, line_end):
          flush(pos)
          node, pos = self._parse_for(pos)

      if node is None:
        pos += 1
        continue
      nodes.append(node)
      text_start = pos

  def _parse_if(self, pos: int) -> Tuple[IfNode, int]:
    m = self._IF_RE.match(self.source, pos, self._line_end(pos))
    if not m:
      raise self._error("invalid if statement, expected 'if condition {'", pos)
    condition = self._expression(m.start("cond"), m.end("cond"))
    then_nodes, pos = self._parse_nodes(m.end())

    else_nodes: List[Node] = []
    m_elif = self._ELSE_IF_RE.match(self.source, pos)
    m_else = self._ELSE_RE.match(self.source, pos)
    if m_elif:
      nested, pos = self._parse_if(m_elif.end())
      else_nodes = [nested]
    elif m_else:
      else_nodes, pos = self._parse_nodes(m_else.end())
    return IfNode(condition=condition, then_nodes=then_nodes, else_nodes=else_nodes), pos

  def _parse_for(self, pos: int) -> Tuple[ForNode, int]:
    m = self._FOR_RE.match(self.source, pos, self._line_end(pos))
    clause = self._expression(m.start("clause"), m.end("clause"))
    children, pos = self._parse_nodes(m.end())
    return ForNode(clause=clause, child_nodes=children), pos

  def _parse_element(self, pos: int) -> Tuple[Element, int]:
    src = self.source
    m = self._OPEN_TAG_RE.match(src, pos)
    name = m.group("name")
    pos = m.end()
    attributes: List[Attribute] = []

    while True:
      pos = self._skip_whitespace(pos)
      if pos >= len(src):
        raise self._error(f"unterminated <{name}> tag", m.start())
      if src.startswith("/>", pos):
        return Element(name=name, attributes=attributes), pos + 2
      if src[pos] == ">":
        pos += 1
        break
      attribute, pos = self._parse_attribute(pos)
      attributes.append(attribute)

    if name.lower() in VOID_ELEMENTS:
      return Element(name=name, attributes=attributes), pos

    children, pos = self._parse_nodes(pos, end_tag=name)
    return Element(name=name, attributes=attributes, child_nodes=children), pos

  def _parse_attribute(self, pos: int) -> Tuple[Attribute, int]:
    src = self.source
    m = self._ATTR_NAME_RE.match(src, pos)
    if not m:
      raise self._error("invalid attribute", pos)
    name = m.group(0)
    pos = m.end()

    if src.startswith("?=", pos):
      pos = self._skip_whitespace(pos + 2)
      if not src.startswith("{", pos):
        raise self._error(f"expected '{{' after '{name}?='", pos)
      expression, pos = self._read_expression(pos)
      return BoolExpressionAttribute(name=name, value=expression), pos

    if not src.startswith("=", pos):
      return BoolConstantAttribute(name=name), pos

    pos = self._skip_whitespace(pos + 1)
    if src.startswith("{", pos):
      expression, pos = self._read_expression(pos)
      return ExpressionAttribute(name=name, value=expression), pos
    if pos < len(src) and src[pos] in "\"'":
      quote = src[pos]
      end = src.find(quote, pos + 1)
      if end == -1:
        raise self._error(f"unterminated value for attribute '{name}'", pos)
      return ConstantAttribute(name=name, value=src[pos + 1 : end]), end + 1
    m = self._UNQUOTED_VALUE_RE.match(src, pos)
    if not m:
      raise self._error(f"missing value for attribute '{name}'", pos)
    return ConstantAttribute(name=name, value=m.group(0)), m.end()

  def _parse_code_block(self, pos: int) -> Tuple[CodeNode, int]:
    src = self.source
    start = pos + 2
    i = start
    depth = 0
    while i < len(src):
      c = src[i]
      if c in "\"'":
        i = self._skip_string(i)
        continue
      if c == "#":
        i = self._line_end(i)
        continue
      if c == "{":
        depth += 1
      elif c == "}":
        if depth == 0 and src.startswith("}}", i):
          raw = src[start:i]
          lead = len(raw) - len(raw.lstrip())
          trail = len(raw) - len(raw.rstrip())
          expression = Expression(
            value=textwrap.dedent(raw).strip(),
            range=self.span(start + lead, i - trail),
          )
          return CodeNode(expression=expression), i + 2
        depth -= 1
      i += 1
    raise self._error("unterminated '{{' code block", pos)

  # --- Lexical helpers ---

  def _skip_whitespace(self, pos: int) -> int:
    while pos < len(self.source) and self.source[pos].isspace():
      pos += 1
    return pos

  def _read_expression(self, pos: int) -> Tuple[Expression, int]:
    """
    Reads a brace delimited Python expression starting at ``source[pos] == '{'``.

    Returns:
        Tuple[Expression, int]: The trimmed expression and the offset after the closing brace.
    """
    src = self.source
    i = pos + 1
    depth = 1
    while i < len(src):
      c = src[i]
      if c in "\"'":
        i = self._skip_string(i)
        continue
      if c == "#":
        i = self._line_end(i)
        continue
      if c == "{":
        depth += 1
      elif c == "}":
        depth -= 1
        if depth == 0:
          expression = self._expression(pos + 1, i)
          if not expression.value:
            raise self._error("empty expression", pos)
          return expression, i + 1
      i += 1
    raise self._error("unterminated expression, expected '}'", pos)

  def _skip_string(self, pos: int) -> int:
    """Returns the offset just past the Python string literal opening at ``pos``."""
    src = self.source
    quote = src[pos]
    if src.startswith(quote * 3, pos):
      end = src.find(quote * 3, pos + 3)
      if end == -1:
        raise self._error("unterminated string literal", pos)
      return end + 3
    i = pos + 1
    while i < len(src):
      c = src[i]
      if c == "\\":
        i += 2
        continue
      if c == quote:
        return i + 1
      if c == "\n":
        break
      i += 1
    raise self._error("unterminated string literal", pos)


def parse_document(source: str) -> Document:
  """
  Parses templ source text.

  Args:
      source: The full document text.

  Returns:
      Document: The parsed tree.

  Raises:
      ParseError: If the text is not a valid templ document.
  """
  return TemplateParser(source).parse()
