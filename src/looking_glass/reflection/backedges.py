"""
Backedge Collector.

Backedges are the reverse of call edges: if variant ``foo(int)`` lists
``bar(int)`` as a backedge, then ``bar`` was compiled against ``foo`` and must be
re-examined whenever ``foo`` changes.

Two kinds of edges are reported for a generic function:

1.  **Variant edges**: one key per compiled variant (see
    :mod:`looking_glass.reflection.specializations`), even when it has no dependents.
2.  **Dispatch-table edges**: dependents that rely on *how* a call was dispatched,
    triggered by any structural change to the function such as a new method. The
    runtime stores them as one flat interleaved sequence
    ``[signature, dependent, signature, dependent, ...]``; they are reported under
    :class:`DispatchTableKey` keys grouped by signature.

Edges are never followed transitively.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

from looking_glass.errors import MalformedStateError
from looking_glass.reflection.specializations import SpecializationWalker

logger = logging.getLogger(__name__)


class DispatchTableKey(NamedTuple):
  """Key for dependents recorded on a dispatch table rather than on one variant."""

  table: Any
  signature: Tuple[type, ...]


def pair_interleaved(flat: Sequence[Any], subject: Optional[Any] = None) -> List[Tuple[Any, Any]]:
  """
  Pairs a flat ``[a0, b0, a1, b1, ...]`` sequence into ``[(a0, b0), (a1, b1), ...]``.

  Args:
      flat (Sequence[Any]): The interleaved sequence.
      subject (Any, optional): Owner of the sequence, named in errors.

  Returns:
      List[Tuple[Any, Any]]: Pairs in their original order.

  Raises:
      MalformedStateError: If the sequence has odd length.
  """
  if len(flat) % 2:
    raise MalformedStateError(
      f"Dispatch table backedges have odd length {len(flat)}; trailing element {flat[-1]!r} has no pair",
      subject=subject,
    )
  return [(flat[i], flat[i + 1]) for i in range(0, len(flat), 2)]


class BackedgeCollector:
  """
  Builds the invalidation graph of a generic function.
  """

  def __init__(self, walker: Optional[SpecializationWalker] = None):
    """
    Initializes the collector.

    Args:
        walker (SpecializationWalker, optional): Variant enumerator to use.
    """
    self.walker = walker or SpecializationWalker()

  def backedges(self, f: Any) -> Dict[Any, List[Any]]:
    """
    Collects all backedges of ``f``.

    Args:
        f (Any): A generic function.

    Returns:
        Dict[Any, List[Any]]: Map from each compiled variant, and from each
        ``DispatchTableKey``, to its dependents. A missing key means the edges could
        not be determined.

    Raises:
        MalformedStateError: If the dispatch-table edge sequence cannot be paired.
    """
    out: Dict[Any, List[Any]] = {variant: self._variant_edges(variant) for variant in self.walker.specializations(f)}

    table, flat = self._table_storage(f)
    for signature, dependent in pair_interleaved(flat, subject=f):
      out.setdefault(DispatchTableKey(table, signature), []).append(dependent)

    return out

  def _variant_edges(self, variant: Any) -> List[Any]:
    try:
      return list(variant.backedges)
    except (AttributeError, TypeError):
      return []

  def _table_storage(self, f: Any) -> Tuple[Any, List[Any]]:
    try:
      table = f.table
      return table, list(table.backedges)
    except (AttributeError, TypeError) as e:
      logger.debug(f"Dispatch table edges of {f!r} are unavailable: {e}")
      return None, []


def func_backedges(f: Any) -> Dict[Any, List[Any]]:
  """
  Returns all the backedges on all specializations of ``f``, plus its dispatch-table edges.

  .. code-block:: python

      @generic
      def foo(x):
        return 2 * x

      @generic
      def bar(x):
        return foo(x) + 1

      bar(1)
      func_backedges(foo)
      # {CompiledVariant for foo(int): [CompiledVariant for bar(int)],
      #  DispatchTableKey(table=MethodTable('foo'), signature=(int,)): [CompiledVariant for bar(int)]}
  """
  return BackedgeCollector().backedges(f)
