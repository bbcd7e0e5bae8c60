"""
Specialization Storage Layouts.

A method keeps its compiled variants in one of two physical layouts, depending
on the runtime version:

1.  **Slot table** (current): an open-addressed array. Slots are filled as
    variants are compiled; unpopulated slots stay empty, so readers must check
    :meth:`SlotTable.is_assigned` before indexing.
2.  **Linked entries** (legacy): a chain of :class:`TypeMapEntry` nodes ending
    in the :data:`END_OF_ENTRIES` sentinel.
"""

from typing import Any, Hashable, List, Optional


class SlotTable:
  """
  Open-addressed hash table with linear probing.

  Attributes:
      _slots (List[Optional[tuple]]): ``(key, value)`` pairs or ``None`` for empty slots.
      _count (int): Number of occupied slots.
  """

  def __init__(self, capacity: int = 4):
    """
    Initializes an empty table.

    Args:
        capacity (int): Initial number of slots.
    """
    self._slots: List[Optional[tuple]] = [None] * max(1, capacity)
    self._count = 0

  def __len__(self) -> int:
    """Number of slots, populated or not."""
    return len(self._slots)

  def is_assigned(self, index: int) -> bool:
    """
    Checks whether a slot holds a value.

    Args:
        index (int): Slot index.

    Returns:
        bool: True if the slot is populated.
    """
    return self._slots[index] is not None

  def __getitem__(self, index: int) -> Any:
    entry = self._slots[index]
    if entry is None:
      raise LookupError(f"Slot {index} is not assigned")
    return entry[1]

  def get(self, key: Hashable) -> Optional[Any]:
    """
    Looks up the value stored under ``key``.

    Args:
        key (Hashable): Lookup key.

    Returns:
        Optional[Any]: The stored value, or None.
    """
    for idx in self._probe(key):
      entry = self._slots[idx]
      if entry is None:
        return None
      if entry[0] == key:
        return entry[1]
    return None

  def insert(self, key: Hashable, value: Any) -> None:
    """
    Stores ``value`` under ``key``, growing the table past half occupancy.

    Args:
        key (Hashable): Lookup key.
        value (Any): Value to store.
    """
    if (self._count + 1) * 2 > len(self._slots):
      self._grow()
    for idx in self._probe(key):
      entry = self._slots[idx]
      if entry is None:
        self._slots[idx] = (key, value)
        self._count += 1
        return
      if entry[0] == key:
        self._slots[idx] = (key, value)
        return

  def _probe(self, key: Hashable):
    size = len(self._slots)
    start = hash(key) % size
    for offset in range(size):
      yield (start + offset) % size

  def _grow(self) -> None:
    old = [entry for entry in self._slots if entry is not None]
    self._slots = [None] * (len(self._slots) * 2)
    self._count = 0
    for key, value in old:
      self.insert(key, value)


class _EndOfEntries:
  """Terminator of a linked entry chain."""

  _instance = None

  def __new__(cls):
    if cls._instance is None:
      cls._instance = super().__new__(cls)
    return cls._instance

  def __repr__(self) -> str:
    return "END_OF_ENTRIES"

  def __bool__(self) -> bool:
    return False


END_OF_ENTRIES = _EndOfEntries()


class TypeMapEntry:
  """
  One node of a legacy linked specialization chain.

  Attributes:
      signature (tuple): The concrete argument types of the variant.
      func (Any): The stored variant.
      next (Any): The following node or ``END_OF_ENTRIES``.
  """

  __slots__ = ("signature", "func", "next")

  def __init__(self, signature: tuple, func: Any, next: Any = END_OF_ENTRIES):
    self.signature = signature
    self.func = func
    self.next = next

  def __repr__(self) -> str:
    return f"TypeMapEntry({self.signature!r})"


def chain_lookup(head: Any, signature: tuple) -> Optional[Any]:
  """
  Finds the value stored for ``signature`` in a linked chain.

  Args:
      head (Any): First node, or the sentinel for an empty chain.
      signature (tuple): Concrete argument types.

  Returns:
      Optional[Any]: The stored value, or None.
  """
  entry = head
  while isinstance(entry, TypeMapEntry):
    if entry.signature == signature:
      return entry.func
    entry = entry.next
  return None


def chain_push(head: Any, signature: tuple, value: Any) -> TypeMapEntry:
  """Prepends a node and returns the new head."""
  return TypeMapEntry(signature, value, head)
