"""
Tests for ImportSet and ImportMerger.

Verifies:
1. Deduplication by canonical key.
2. Deterministic ordering (``__future__`` first, then by literal and alias).
3. Overlay semantics of union.
"""

import itertools

from templ_imports.core.imports import ImportSpec
from templ_imports.core.merger import ImportMerger, ImportSet, import_sort_key

SPECS = [
  ImportSpec("sys"),
  ImportSpec("__future__", name="annotations"),
  ImportSpec("collections", name="OrderedDict"),
  ImportSpec("json"),
  ImportSpec("numpy", alias="np"),
]


def test_sorted_order():
  rendered = [s.render() for s in ImportSet(SPECS).sorted()]
  assert rendered == [
    "from __future__ import annotations",
    "from collections import OrderedDict",
    "import json",
    "import numpy as np",
    "import sys",
  ]


def test_order_independent_of_insertion():
  expected = ImportSet(SPECS).sorted()
  for perm in itertools.permutations(SPECS):
    assert ImportSet(perm).sorted() == expected


def test_alias_breaks_ties():
  specs = [ImportSpec("numpy", alias="np"), ImportSpec("numpy"), ImportSpec("numpy", alias="N")]
  assert [s.alias for s in ImportSet(specs).sorted()] == [None, "N", "np"]


def test_sort_key_puts_future_first():
  assert import_sort_key(ImportSpec("__future__", name="annotations")) < import_sort_key(ImportSpec("abc"))


def test_duplicates_collapse():
  merger = ImportMerger()
  merger.merge([ImportSpec("os"), ImportSpec("os")])
  merger.merge([ImportSpec("os")])
  assert merger.result() == [ImportSpec("os")]


def test_same_module_with_different_alias_is_kept_twice():
  merger = ImportMerger()
  merger.merge([ImportSpec("numpy"), ImportSpec("numpy", alias="np")])
  assert len(merger.imports) == 2


def test_empty_merger():
  merger = ImportMerger()
  assert merger.is_empty
  assert merger.result() == []
  merger.merge([])
  assert merger.is_empty


def test_union_returns_new_set():
  left = ImportSet([ImportSpec("os")])
  right = ImportSet([ImportSpec("sys")])
  combined = left.union(right)

  assert len(combined) == 2
  assert len(left) == 1
  assert ImportSpec("sys") in combined
  assert ImportSpec("sys") not in left


def test_contains_rejects_other_types():
  assert "os" not in ImportSet([ImportSpec("os")])
