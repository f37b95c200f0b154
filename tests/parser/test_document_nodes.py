"""
Tests for the document node model.

Verifies:
1. Capability queries (code_expressions, children) per variant.
2. Header establishment via ensure_header.
3. Document serialization.
"""

import pytest

from templ_imports.parser.nodes import (
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
  NodeKind,
  StringExpressionNode,
  TemplateNode,
  TextNode,
  ensure_header,
)


def test_element_exposes_only_dynamic_attributes():
  element = Element(
    name="a",
    attributes=[
      ConstantAttribute(name="class", value="link"),
      ExpressionAttribute(name="href", value=Expression("url")),
      BoolConstantAttribute(name="download"),
      BoolExpressionAttribute(name="hidden", value=Expression("is_hidden")),
    ],
  )
  assert [e.value for e in element.code_expressions()] == ["url", "is_hidden"]


def test_leaf_variants_have_no_children():
  assert TextNode(value="hi").children() == []
  assert StringExpressionNode(expression=Expression("x")).children() == []
  assert TextNode(value="hi").code_expressions() == []


def test_if_children_cover_both_branches():
  then_node = TextNode(value="yes")
  else_node = TextNode(value="no")
  node = IfNode(condition=Expression("ok"), then_nodes=[then_node], else_nodes=[else_node])
  assert node.children() == [then_node, else_node]


def test_control_flow_headers_are_code():
  """
  Conditions, loop clauses and template signatures are code of their own,
  separate from the nodes they contain.
  """
  condition = Expression("ok")
  clause = Expression("x in xs")
  parameters = Expression("x: Decimal")
  assert IfNode(condition=condition, then_nodes=[TextNode(value="a")]).code_expressions() == [condition]
  assert ForNode(clause=clause).code_expressions() == [clause]
  assert TemplateNode(name="t", parameters=parameters).code_expressions() == [parameters]


def test_kinds_are_distinct():
  kinds = [
    HeaderNode.kind,
    CodeNode.kind,
    StringExpressionNode.kind,
    Element.kind,
    TextNode.kind,
    TemplateNode.kind,
    IfNode.kind,
    ForNode.kind,
  ]
  assert len(set(kinds)) == len(NodeKind)


def test_ensure_header_inserts_into_empty_document():
  doc = Document(package=Expression("pkg"))
  header = ensure_header(doc)
  assert doc.nodes == [header]
  assert header.expression.value == ""


def test_ensure_header_inserts_before_other_nodes():
  template = TemplateNode(name="t")
  doc = Document(package=Expression("pkg"), nodes=[template])
  header = ensure_header(doc)
  assert doc.nodes == [header, template]


def test_ensure_header_keeps_existing_header():
  existing = HeaderNode(expression=Expression("import os"))
  doc = Document(package=Expression("pkg"), nodes=[existing])
  assert ensure_header(doc) is existing
  assert len(doc.nodes) == 1


def test_header_property_requires_header():
  doc = Document(package=Expression("pkg"), nodes=[TemplateNode(name="t")])
  with pytest.raises(ValueError):
    _ = doc.header


def test_write_joins_sections_with_blank_lines():
  doc = Document(
    package=Expression("pkg"),
    nodes=[HeaderNode(expression=Expression("import os"))],
    body="\ntempl t() {\n}\n",
  )
  assert doc.to_source() == "package pkg\n\nimport os\n\ntempl t() {\n}\n"


def test_write_omits_empty_header():
  doc = Document(package=Expression("pkg"), nodes=[HeaderNode()], body="templ t() {\n}\n")
  assert doc.to_source() == "package pkg\n\ntempl t() {\n}\n"


def test_write_package_only():
  assert Document(package=Expression("pkg")).to_source() == "package pkg\n"
