"""
Tests for HeaderRewriter.
"""

import pytest

from templ_imports.core.imports import ImportSpec
from templ_imports.core.rewriter import HeaderRewriter
from templ_imports.errors import ParseError, SerializationError
from templ_imports.parser import parse_document
from templ_imports.parser.nodes import Document, Expression, HeaderNode, TemplateNode


@pytest.fixture
def rewriter():
  return HeaderRewriter()


def test_render_into_empty_header(rewriter):
  assert rewriter.render("", [ImportSpec("os")]) == "import os"


def test_render_keeps_docstring_and_code(rewriter):
  header = '"""Doc."""\nimport sys\n\nVALUE = 1'
  result = rewriter.render(header, [ImportSpec("json"), ImportSpec("sys")])
  assert result == '"""Doc."""\n\nimport json\nimport sys\n\nVALUE = 1'


def test_render_is_idempotent(rewriter):
  specs = [ImportSpec("__future__", name="annotations"), ImportSpec("os")]
  once = rewriter.render("# settings\nimport os\nDEBUG = os.environ.get('DEBUG')\n", specs)
  assert rewriter.render(once, specs) == once


def test_render_invalid_header(rewriter):
  with pytest.raises(ParseError):
    rewriter.render("def (:", [ImportSpec("os")])


def test_render_failure_is_serialization_error(rewriter, monkeypatch):
  def boom(module, statements):
    raise RuntimeError("cannot render")

  monkeypatch.setattr("templ_imports.core.rewriter.replace_import_block", boom)
  with pytest.raises(SerializationError, match="cannot render"):
    rewriter.render("", [ImportSpec("os")])


def test_rewrite_updates_header_only(rewriter):
  source = "package pkg\n\nimport sys\n\ntempl t() {\n  <p>hi</p>\n}\n"
  doc = parse_document(source)
  template = doc.nodes[1]

  rewriter.rewrite(doc, [ImportSpec("os")])

  assert doc.nodes[0].expression.value == "import os"
  assert doc.nodes[1] is template
  assert doc.to_source() == "package pkg\n\nimport os\n\ntempl t() {\n  <p>hi</p>\n}\n"


def test_rewrite_inserts_missing_header(rewriter):
  doc = Document(package=Expression("pkg"), nodes=[TemplateNode(name="t")])
  rewriter.rewrite(doc, [ImportSpec("os")])
  assert isinstance(doc.nodes[0], HeaderNode)
  assert doc.nodes[0].expression.value == "import os"


def test_rewrite_error_carries_header_range(rewriter):
  source = "package pkg\n\ndef (:\n\ntempl t() {\n}\n"
  doc = parse_document(source)
  with pytest.raises(ParseError) as exc:
    rewriter.rewrite(doc, [ImportSpec("os")])
  assert exc.value.range == doc.nodes[0].expression.range
  assert doc.nodes[0].expression.value == "def (:"
