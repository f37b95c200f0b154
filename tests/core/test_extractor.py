"""
Tests for the fragment extractor.

Verifies:
1. Synthesis rules per node kind.
2. Depth-first pre-order traversal, including descent into nodes that
   yield nothing themselves.
3. Restartable, non-recursive traversal.
"""

from templ_imports.core.extractor import bind_expression, extract_fragments, node_fragments
from templ_imports.parser import parse_document
from templ_imports.parser.nodes import (
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
  StringExpressionNode,
  TemplateNode,
  TextNode,
)


def _document():
  element = Element(
    name="div",
    attributes=[
      ConstantAttribute(name="class", value="x"),
      ExpressionAttribute(name="href", value=Expression("a")),
      BoolExpressionAttribute(name="hidden", value=Expression("b")),
    ],
    child_nodes=[
      StringExpressionNode(expression=Expression("c")),
      IfNode(
        condition=Expression("cond"),
        then_nodes=[CodeNode(expression=Expression("d = 1"))],
        else_nodes=[StringExpressionNode(expression=Expression("e"))],
      ),
    ],
  )
  return Document(
    package=Expression("pkg"),
    nodes=[
      HeaderNode(expression=Expression("import os")),
      TemplateNode(name="t", child_nodes=[element, TextNode(value="hi")]),
      CodeNode(expression=Expression("def f(): pass")),
    ],
  )


def test_bind_expression():
  assert bind_expression("_templ_expr", "x") == "_templ_expr = (\nx\n)\n"


def test_fragments_in_document_order():
  texts = [f.text for f in extract_fragments(_document())]
  assert texts == [
    "import os",
    "def _templ(\n\n):\n  pass\n",
    "_templ_attr_0 = (\na\n)\n",
    "_templ_attr_1 = (\nb\n)\n",
    "_templ_expr = (\nc\n)\n",
    "if (\ncond\n):\n  pass\n",
    "d = 1",
    "_templ_expr = (\ne\n)\n",
    "def f(): pass",
  ]


def test_traversal_is_restartable():
  doc = _document()
  assert [f.text for f in extract_fragments(doc)] == [f.text for f in extract_fragments(doc)]


def test_fragments_keep_node_and_range():
  source = "package pkg\n\ntempl t(x) {\n  <p>{ len(x) }</p>\n}\n"
  fragments = list(extract_fragments(parse_document(source)))
  expression = fragments[-1]
  assert isinstance(expression.node, StringExpressionNode)
  assert expression.range.start.index == source.index("len(x)")


def test_static_element_yields_nothing():
  element = Element(name="p", attributes=[ConstantAttribute(name="id", value="x")])
  assert node_fragments(element) == []


def test_text_yields_nothing():
  assert node_fragments(TextNode(value="hi")) == []


def test_control_flow_headers_become_statements():
  assert [f.text for f in node_fragments(IfNode(condition=Expression("os.environ.get(\"DEBUG\")")))] == [
    "if (\nos.environ.get(\"DEBUG\")\n):\n  pass\n"
  ]
  assert [f.text for f in node_fragments(ForNode(clause=Expression("x in itertools.chain(a, b)")))] == [
    "for x in itertools.chain(a, b):\n  pass\n"
  ]
  assert [f.text for f in node_fragments(TemplateNode(name="t", parameters=Expression("x: Decimal = ZERO")))] == [
    "def _templ(\nx: Decimal = ZERO\n):\n  pass\n"
  ]


def test_multiline_expression_stays_valid():
  fragment = node_fragments(StringExpressionNode(expression=Expression("f(\n  x,  # note\n)")))[0]
  assert fragment.text == "_templ_expr = (\nf(\n  x,  # note\n)\n)\n"


def test_deep_nesting_does_not_recurse():
  innermost = StringExpressionNode(expression=Expression("leaf"))
  node = innermost
  for _ in range(5000):
    node = Element(name="div", child_nodes=[node])
  doc = Document(package=Expression("pkg"), nodes=[node])

  fragments = list(extract_fragments(doc))
  assert len(fragments) == 1
  assert fragments[0].node is innermost


def _bound_at(fragments, text):
  return next(f.bound for f in fragments if f.text == text)


def test_fragments_carry_module_bindings():
  source = (
    "package pkg\n\n"
    "import os\n"
    "LIMIT = 3\n\n"
    "templ t(items) {\n"
    "  <p>{ LIMIT }</p>\n"
    "}\n\n"
    "def helper():\n"
    "  return 1\n"
  )
  fragments = list(extract_fragments(parse_document(source)))
  bound = _bound_at(fragments, "_templ_expr = (\nLIMIT\n)\n")
  assert {"LIMIT", "helper", "items"} <= bound
  assert "os" not in bound


def test_template_locals_are_bound_throughout_body():
  source = (
    "package pkg\n\n"
    "templ t(days) {\n"
    "  <p>{ Path }</p>\n"
    "  for dt in days {\n"
    "    <li>{ dt.strftime('%d') }</li>\n"
    "  }\n"
    "  {{ Path = days[0] }}\n"
    "}\n"
  )
  fragments = list(extract_fragments(parse_document(source)))
  assert {"days", "dt", "Path"} <= _bound_at(fragments, "_templ_expr = (\nPath\n)\n")
  assert {"days", "dt", "Path"} <= _bound_at(fragments, "_templ_expr = (\ndt.strftime('%d')\n)\n")


def test_signature_sees_only_outer_scope():
  source = "package pkg\n\ntempl t(total: Decimal, days=None) {\n  { days }\n}\n"
  fragments = list(extract_fragments(parse_document(source)))
  signature = _bound_at(fragments, "def _templ(\ntotal: Decimal, days=None\n):\n  pass\n")
  assert "days" not in signature
  assert "total" not in signature
