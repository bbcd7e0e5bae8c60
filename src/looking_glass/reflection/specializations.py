"""
Specialization Walker.

Enumerates the compiled variants ("specializations") of a generic function,
across all of its method definitions.

The physical storage of variants depends on the runtime version (a slot table
with unpopulated gaps, or a legacy linked chain). Reading it is delegated to a
:class:`VariantSource` strategy chosen once, when the walker is built, by
probing the runtime version.

A method whose storage cannot be read contributes no variants; the rest of the
walk continues.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from looking_glass import runtime
from looking_glass.errors import UnavailableStructureError
from looking_glass.runtime import CompiledVariant, MethodDefinition, TypeMapEntry

logger = logging.getLogger(__name__)

# Errors meaning "this storage cannot be read", contained per method.
_STORAGE_ERRORS = (AttributeError, TypeError, LookupError, PermissionError, UnavailableStructureError)


class VariantSource(ABC):
  """Strategy reading the compiled variants out of a method's storage."""

  @abstractmethod
  def iter_variants(self, method: MethodDefinition) -> Iterator[CompiledVariant]:
    """
    Yields every populated variant of ``method``.

    Args:
        method (MethodDefinition): The method to read.
    """


class SlotArraySource(VariantSource):
  """Reads an open-addressed slot table, skipping unassigned slots."""

  def iter_variants(self, method: MethodDefinition) -> Iterator[CompiledVariant]:
    slots = method.specializations
    for i in range(len(slots)):
      if slots.is_assigned(i):
        yield slots[i]


class LinkedEntrySource(VariantSource):
  """Follows a chain of entries until the terminating sentinel."""

  def iter_variants(self, method: MethodDefinition) -> Iterator[CompiledVariant]:
    entry = method.specializations
    while isinstance(entry, TypeMapEntry):
      yield entry.func
      entry = entry.next


def variant_source_for(version: Tuple[int, int]) -> VariantSource:
  """
  Picks the storage reader matching a runtime version.

  Args:
      version (Tuple[int, int]): Runtime version to probe.

  Returns:
      VariantSource: A slot-table reader or a linked-chain reader.
  """
  if tuple(version) >= runtime.SLOT_STORAGE_SINCE:
    return SlotArraySource()
  return LinkedEntrySource()


class VariantView:
  """
  Lazy, restartable view over the variants of one method.

  Every iteration re-reads the live storage.
  """

  def __init__(self, source: VariantSource, method: MethodDefinition):
    self._source = source
    self._method = method

  def __iter__(self) -> Iterator[CompiledVariant]:
    return self._source.iter_variants(self._method)

  def __repr__(self) -> str:
    return f"VariantView({self._method!r})"


class SpecializationWalker:
  """
  Lists the compiled variants of generic functions.

  Attributes:
      source (VariantSource): The storage reader in use.
  """

  def __init__(self, source: Optional[VariantSource] = None, runtime_version: Optional[Tuple[int, int]] = None):
    """
    Initializes the walker.

    Args:
        source (VariantSource, optional): Explicit storage reader.
        runtime_version (Tuple[int, int], optional): Version to probe when no source is
            given. Defaults to the running runtime's version.
    """
    if source is None:
      source = variant_source_for(runtime_version or runtime.RUNTIME_VERSION)
    self.source = source

  def variants_of(self, method: MethodDefinition) -> VariantView:
    """
    Returns a lazy view of the variants compiled for ``method``.

    Args:
        method (MethodDefinition): The method to read.

    Returns:
        VariantView: Restartable iterable of variants.
    """
    return VariantView(self.source, method)

  def specializations(self, f: Any, signature: Optional[Sequence[type]] = None) -> Dict[CompiledVariant, MethodDefinition]:
    """
    Maps every compiled variant of ``f`` to the method it was compiled from.

    Args:
        f (Any): A generic function.
        signature (Sequence[type], optional): Only consider methods that may match
            these argument types.

    Returns:
        Dict[CompiledVariant, MethodDefinition]: Variant to method mapping. Empty for
        callables without a method table.
    """
    try:
      methods = f.methods(tuple(signature)) if signature is not None else f.methods()
    except (AttributeError, TypeError):
      logger.debug(f"{f!r} has no readable method table")
      return {}

    out: Dict[CompiledVariant, MethodDefinition] = {}
    for method in methods:
      for variant in self.collect_variants(method):
        out[variant] = method
    return out

  def collect_variants(self, method: MethodDefinition) -> List[CompiledVariant]:
    """
    Reads the variants of ``method`` into a list; unreadable storage yields none.

    Args:
        method (MethodDefinition): The method to read.

    Returns:
        List[CompiledVariant]: The variants currently compiled.
    """
    try:
      return list(self.variants_of(method))
    except _STORAGE_ERRORS as e:
      logger.debug(f"Specialization storage of {method!r} is unavailable: {e}")
      return []


def func_specializations(f: Any, signature: Optional[Sequence[type]] = None) -> Dict[CompiledVariant, MethodDefinition]:
  """
  Returns all the specializations of each method of ``f``.

  .. code-block:: python

      @generic
      def foo(x):
        return 2 * x

      foo(2) + foo(2.0)
      {v.spec_types for v in func_specializations(foo)}
      # {(int,), (float,)}
  """
  return SpecializationWalker().specializations(f, signature)


def method_specializations(method: MethodDefinition) -> List[CompiledVariant]:
  """Returns the compiled variants of a single method."""
  return SpecializationWalker().collect_variants(method)
