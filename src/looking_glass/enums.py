"""
Enumerations for looking-glass.

This module defines the filter vocabularies accepted by the global classifier
and the closed set of binding kinds and storage layouts used across the codebase.
"""

from enum import Enum


class Constness(str, Enum):
  """
  Filter on whether a module-level binding is declared constant (``Final``).
  """

  ALL = "all"
  CONST = "const"
  NONCONST = "nonconst"


class Mutability(str, Enum):
  """
  Filter on the structural mutability of the bound value.

  Orthogonal to :class:`Constness`: a constant binding may point at a mutable list.
  """

  ALL = "all"
  MUTABLE = "mutable"
  IMMUTABLE = "immutable"


class BindingKind(str, Enum):
  """
  What a module-level name is bound to. Resolved once per lookup.
  """

  TYPE = "type"
  CALLABLE = "callable"
  NAMESPACE = "namespace"
  PLAIN_VALUE = "plain_value"


class StorageLayout(str, Enum):
  """
  Physical shape of a method's specialization storage.
  """

  SLOTS = "slots"  # open-addressed array, unpopulated slots are empty
  LINKED = "linked"  # singly linked entries ending in a sentinel
