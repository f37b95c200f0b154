"""
Templ Document Parsing.

``nodes`` defines the document tree; ``parser`` turns source text into it.
"""

from templ_imports.parser.nodes import Document, HeaderNode, Node, NodeKind, ensure_header
from templ_imports.parser.parser import parse_document

__all__ = ["Document", "HeaderNode", "Node", "NodeKind", "ensure_header", "parse_document"]
