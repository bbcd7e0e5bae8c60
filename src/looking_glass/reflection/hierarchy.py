"""
Type Hierarchy helpers.

Ancestors follow the primary base (``__base__``) of each class; ``object`` is
its own supertype and ends the chain.
"""

from typing import Any, Callable, List, Optional

from looking_glass.utils.console import console

INDENT = "    "


def supertype(t: type) -> type:
  """Primary base of ``t``; ``object`` for ``object`` itself."""
  base = t.__base__
  return t if base is None else base


def supertypes(x: Any) -> List[type]:
  """
  Returns the ancestor chain of a type, or of a value's type.

  For a type, its ancestors root-most last (``object``). For any other value,
  its runtime type followed by that type's ancestors.

  .. code-block:: python

      supertypes(bool)  # [int, object]
      supertypes(True)  # [bool, int, object]
  """
  if not isinstance(x, type):
    t = type(x)
    return [t] + supertypes(t)

  result: List[type] = []
  t0, t1 = x, supertype(x)
  while t1 is not t0:
    result.append(t1)
    t0, t1 = t1, supertype(t1)
  return result


def subtypes(t: type) -> List[type]:
  """Immediate subclasses of ``t``, sorted by qualified name."""
  return sorted(type.__subclasses__(t), key=lambda s: (s.__module__, s.__qualname__))


def type_name(t: type) -> str:
  if t.__module__ == "builtins":
    return t.__qualname__
  return f"{t.__module__}.{t.__qualname__}"


def print_typetree(t: type, depth: int = 0, list_subtypes: Optional[Callable[[type], List[Any]]] = None) -> None:
  """
  Prints the type hierarchy rooted at ``t``, depth-first, one indent level per generation.

  Intended for interactive use: output goes to the active console and nothing is returned.

  Args:
      t (type): Root of the tree.
      depth (int): Indentation level of ``t``.
      list_subtypes (Callable, optional): Lists the immediate subtypes of a type.
          Defaults to :func:`subtypes`.
  """
  list_subtypes = list_subtypes or subtypes
  console.print(f"{INDENT * depth}{type_name(t)}", markup=False, highlight=False, soft_wrap=True)
  for s in list_subtypes(t):
    print_typetree(s, depth + 1, list_subtypes)
