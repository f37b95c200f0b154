"""
Import Merger.

Accumulates the imports resolved for every fragment into one canonical set.

Members are keyed by ``ImportSpec.key``; inserting a spec whose key is already
present overwrites it (last writer wins). The same symbol resolves to the same
import on every fragment, so overwriting is idempotent rather than lossy.
"""

from typing import Dict, Iterable, Iterator, List, Tuple

from templ_imports.core.imports import ImportSpec


def import_sort_key(spec: ImportSpec) -> Tuple[bool, str, str]:
  """
  Ordering key for serialization.

  ``__future__`` imports come first, since Python rejects them after any other
  statement; everything else is ascending by path literal, then alias.

  Args:
      spec: The import to order.

  Returns:
      Tuple[bool, str, str]: Sort key.
  """
  return (not spec.is_future, spec.literal, spec.alias or "")


class ImportSet:
  """
  A set of imports with a deterministic serialization order.
  """

  def __init__(self, specs: Iterable[ImportSpec] = ()) -> None:
    self._members: Dict[str, ImportSpec] = {}
    self.update(specs)

  def add(self, spec: ImportSpec) -> None:
    self._members[spec.key] = spec

  def update(self, specs: Iterable[ImportSpec]) -> None:
    for spec in specs:
      self.add(spec)

  def union(self, other: "ImportSet") -> "ImportSet":
    """
    Returns a new set holding this set's members overlaid with ``other``'s.

    Args:
        other: Members that win on key collisions.

    Returns:
        ImportSet: The combined set.
    """
    merged = ImportSet(self)
    merged.update(other)
    return merged

  def sorted(self) -> List[ImportSpec]:
    return sorted(self._members.values(), key=import_sort_key)

  def __contains__(self, spec: object) -> bool:
    return isinstance(spec, ImportSpec) and spec.key in self._members

  def __iter__(self) -> Iterator[ImportSpec]:
    return iter(self._members.values())

  def __len__(self) -> int:
    return len(self._members)

  def __repr__(self) -> str:
    return f"ImportSet({[s.render() for s in self.sorted()]!r})"


class ImportMerger:
  """
  Folds per-fragment resolution results into a running ImportSet.

  Attributes:
      imports (ImportSet): The running set.
  """

  def __init__(self) -> None:
    self.imports = ImportSet()

  def merge(self, specs: Iterable[ImportSpec]) -> None:
    """
    Inserts or overwrites every spec by canonical key.

    Args:
        specs: The imports one fragment requires.
    """
    self.imports.update(specs)

  @property
  def is_empty(self) -> bool:
    return len(self.imports) == 0

  def result(self) -> List[ImportSpec]:
    """
    Returns the merged imports in canonical order.

    Returns:
        List[ImportSpec]: Sorted members.
    """
    return self.imports.sorted()
