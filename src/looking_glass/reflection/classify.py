"""
Global Classifier.

Finds the "globals" of a module: names bound to plain values, as opposed to
types, callables or modules. These are the candidates for shared mutable state.

Two independent filters narrow the result:

1.  **Constness** of the *binding* (declared ``Final`` or not), read through
    :func:`looking_glass.reflection.bindings.lookup_binding`.
2.  **Mutability** of the bound *value* (shallow). A ``Final`` binding to a list
    is constant and mutable at the same time.

Classification fails closed: any error while examining a name excludes it.
"""

import dataclasses
import enum
import logging
import typing
from decimal import Decimal
from fractions import Fraction
from types import ModuleType
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from looking_glass.config import InspectorConfig
from looking_glass.enums import BindingKind, Constness, Mutability
from looking_glass.reflection.bindings import BindingLookup, ModuleBindings

logger = logging.getLogger(__name__)

_IMMUTABLE_TYPES = (
  int,
  float,
  complex,
  str,
  bytes,
  bool,
  type(None),
  type(Ellipsis),
  type(NotImplemented),
  tuple,
  frozenset,
  range,
  Decimal,
  Fraction,
  enum.Enum,
)


def binding_kind(value: Any) -> BindingKind:
  """
  Classifies what a binding points at.

  Args:
      value (Any): The bound value.

  Returns:
      BindingKind: TYPE for classes and typing constructs, NAMESPACE for modules,
      CALLABLE for anything else callable, PLAIN_VALUE otherwise.
  """
  if isinstance(value, (type, typing.TypeVar)) or typing.get_origin(value) is not None:
    return BindingKind.TYPE
  if isinstance(value, ModuleType):
    return BindingKind.NAMESPACE
  if callable(value):
    return BindingKind.CALLABLE
  return BindingKind.PLAIN_VALUE


def is_immutable(value: Any) -> bool:
  """
  Checks the shallow structural immutability of a value.

  A tuple is immutable even if it holds lists; only the value itself is inspected.

  Args:
      value (Any): The value.

  Returns:
      bool: True for scalars, strings, tuples, frozensets, enum members and frozen
      dataclass or pydantic instances.
  """
  if isinstance(value, _IMMUTABLE_TYPES):
    return True
  if dataclasses.is_dataclass(value) and not isinstance(value, type):
    return type(value).__dataclass_params__.frozen
  if isinstance(value, BaseModel):
    return bool(value.model_config.get("frozen", False))
  return False


class GlobalClassifier:
  """
  Enumerates and classifies module-level bindings.

  Attributes:
      config (InspectorConfig): Supplies the internal-name prefix.
      lookup (Optional[BindingLookup]): Replacement binding lookup. When None, each
          enumeration reads a module's `Final` names once through :class:`ModuleBindings`.
  """

  def __init__(self, config: Optional[InspectorConfig] = None, lookup: Optional[BindingLookup] = None):
    """
    Initializes the classifier.

    Args:
        config (InspectorConfig, optional): Configuration.
        lookup (BindingLookup, optional): Replacement for :func:`lookup_binding`.
    """
    self.config = config or InspectorConfig()
    self.lookup = lookup

  def _lookup_for(self, module: ModuleType) -> BindingLookup:
    return self.lookup or ModuleBindings(module)

  def is_global(
    self,
    module: ModuleType,
    name: str,
    constness: Union[Constness, str] = Constness.ALL,
    mutability: Union[Mutability, str] = Mutability.ALL,
  ) -> bool:
    """
    Checks whether ``module.name`` is a global matching both filters.

    Args:
        module (ModuleType): The owning module.
        name (str): The binding name.
        constness (Constness): ``all``, ``const`` or ``nonconst``.
        mutability (Mutability): ``all``, ``mutable`` or ``immutable``.

    Returns:
        bool: True if the name qualifies. False on any lookup error.

    Raises:
        ValueError: If a filter value is not recognised.
    """
    return self._is_global(module, name, Constness(constness), Mutability(mutability), self._lookup_for(module))

  def _is_global(
    self, module: ModuleType, name: str, constness: Constness, mutability: Mutability, lookup: BindingLookup
  ) -> bool:
    try:
      return self._qualifies(module, name, constness, mutability, lookup)
    except Exception as e:
      logger.debug(f"Could not classify {name!r} in {module!r}: {e}")
      return False

  def _qualifies(
    self, module: ModuleType, name: str, constness: Constness, mutability: Mutability, lookup: BindingLookup
  ) -> bool:
    if self.config.is_internal(name):
      return False

    namespace = vars(module)
    if name not in namespace:
      return False
    value = namespace[name]
    if binding_kind(value) is not BindingKind.PLAIN_VALUE:
      return False

    if constness is not Constness.ALL:
      info = lookup(module, name)
      # Unknown constness matches neither filter.
      if info is None or not info.exists:
        return False
      if info.is_const != (constness is Constness.CONST):
        return False

    if mutability is not Mutability.ALL:
      if is_immutable(value) != (mutability is Mutability.IMMUTABLE):
        return False

    return True

  def names(
    self,
    module: ModuleType,
    constness: Union[Constness, str] = Constness.ALL,
    mutability: Union[Mutability, str] = Mutability.ALL,
  ) -> List[str]:
    """
    Lists the global names of ``module`` in sorted order.

    Args:
        module (ModuleType): The module.
        constness (Constness): Constness filter.
        mutability (Mutability): Mutability filter.

    Returns:
        List[str]: Sorted global names, possibly empty.
    """
    constness = Constness(constness)
    mutability = Mutability(mutability)
    # One lookup per enumeration, so Final names are read once per module.
    lookup = self._lookup_for(module)
    return [n for n in sorted(vars(module)) if self._is_global(module, n, constness, mutability, lookup)]

  def values(
    self,
    module: ModuleType,
    constness: Union[Constness, str] = Constness.ALL,
    mutability: Union[Mutability, str] = Mutability.ALL,
  ) -> Dict[str, Any]:
    """
    Maps each global name of ``module`` to its current value.

    Returns:
        Dict[str, Any]: Name to value.
    """
    namespace = vars(module)
    return {n: namespace[n] for n in self.names(module, constness, mutability)}

  def all_objects(self, module: ModuleType) -> List[Any]:
    """
    Returns the values of every name currently bound in ``module``.

    Broader than globals: includes functions, classes, submodules and internal names.

    Args:
        module (ModuleType): The module.

    Returns:
        List[Any]: Bound values ordered by name.
    """
    namespace = vars(module)
    return [namespace[n] for n in sorted(namespace)]

  def function_names(self, module: ModuleType) -> List[str]:
    """
    Lists the non-internal names bound to callables that are not types.

    Args:
        module (ModuleType): The module.

    Returns:
        List[str]: Sorted function names.
    """
    namespace = vars(module)
    return [
      n
      for n in sorted(namespace)
      if not self.config.is_internal(n) and binding_kind(namespace[n]) is BindingKind.CALLABLE
    ]

  def functions(self, module: ModuleType) -> List[Any]:
    """Returns the function objects named by :meth:`function_names`."""
    namespace = vars(module)
    return [namespace[n] for n in self.function_names(module)]


def module_name_isglobal(
  m: ModuleType,
  name: str,
  constness: Union[Constness, str] = Constness.ALL,
  mutability: Union[Mutability, str] = Mutability.ALL,
) -> bool:
  return GlobalClassifier().is_global(m, name, constness, mutability)


def module_globals_names(
  m: ModuleType,
  constness: Union[Constness, str] = Constness.ALL,
  mutability: Union[Mutability, str] = Mutability.ALL,
) -> List[str]:
  """
  Returns the names of all global variables in module ``m``.

  Pass ``constness="const"`` / ``"nonconst"`` to keep only ``Final`` / non-``Final``
  bindings, and ``mutability="mutable"`` / ``"immutable"`` to filter on the values.
  """
  return GlobalClassifier().names(m, constness, mutability)


def module_globals(
  m: ModuleType,
  constness: Union[Constness, str] = Constness.ALL,
  mutability: Union[Mutability, str] = Mutability.ALL,
) -> Dict[str, Any]:
  """Returns a dict mapping the name to the value of every global variable in ``m``."""
  return GlobalClassifier().values(m, constness, mutability)


def module_objects(m: ModuleType) -> List[Any]:
  """Returns every object bound in ``m``."""
  return GlobalClassifier().all_objects(m)


def module_functions_names(m: ModuleType) -> List[str]:
  """Returns the names of all functions bound in ``m``."""
  return GlobalClassifier().function_names(m)


def module_functions(m: ModuleType) -> List[Any]:
  """Returns all function objects bound in ``m``."""
  return GlobalClassifier().functions(m)
