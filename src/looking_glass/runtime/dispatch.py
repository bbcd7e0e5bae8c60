"""
Multiple-Dispatch Runtime.

This module provides :class:`GenericFunction`, a callable that dispatches on the
concrete types of all positional arguments and specializes lazily:

1.  **Methods**: every registered implementation becomes a :class:`MethodDefinition`
    keyed by its declared signature (a tuple of classes).
2.  **Variants**: the first call with a previously unseen tuple of concrete argument
    types compiles a :class:`CompiledVariant` into the method's storage.
3.  **Backedges**: when a variant calls another generic function, the caller is
    recorded on the callee's variant. If the callee was reached through a less
    specific method than the argument types, the caller is also recorded on the
    callee's :class:`MethodTable`, since adding a method could change that dispatch.

The reflection layer only reads these structures; nothing here is invalidated.
"""

import functools
import inspect
import typing
from contextvars import ContextVar
from typing import Any, Callable, List, Optional, Tuple

from looking_glass.enums import StorageLayout
from looking_glass.runtime.storage import END_OF_ENTRIES, SlotTable, chain_lookup, chain_push

Signature = Tuple[type, ...]

# Version of the internal storage layout exposed by this runtime.
RUNTIME_VERSION: Tuple[int, int] = (2, 1)

# First runtime version storing specializations in a slot table.
SLOT_STORAGE_SINCE: Tuple[int, int] = (1, 5)

_ACTIVE_VARIANT: ContextVar[Optional["CompiledVariant"]] = ContextVar("looking_glass_active_variant", default=None)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def layout_for(version: Tuple[int, int]) -> StorageLayout:
  """
  Returns the storage layout used by a given runtime version.

  Args:
      version (Tuple[int, int]): Runtime version.

  Returns:
      StorageLayout: SLOTS for current runtimes, LINKED for legacy ones.
  """
  return StorageLayout.SLOTS if tuple(version) >= SLOT_STORAGE_SINCE else StorageLayout.LINKED


def _type_name(t: type) -> str:
  return getattr(t, "__qualname__", repr(t))


def format_signature(signature: Signature) -> str:
  """Renders a signature tuple as ``(int, str)``."""
  return "(" + ", ".join(_type_name(t) for t in signature) + ")"


class CompiledVariant:
  """
  A method specialized for one tuple of concrete argument types.

  The ``backedges`` list is only allocated once the first dependent is recorded;
  before that, reading it raises ``AttributeError``.

  Attributes:
      method (MethodDefinition): The method this variant was compiled from.
      spec_types (Signature): The concrete argument types.
  """

  __slots__ = ("method", "spec_types", "backedges", "__weakref__")

  def __init__(self, method: "MethodDefinition", spec_types: Signature):
    self.method = method
    self.spec_types = spec_types

  def add_backedge(self, dependent: "CompiledVariant") -> None:
    """
    Records that ``dependent`` relies on this variant staying valid.

    Args:
        dependent (CompiledVariant): The calling variant.
    """
    try:
      edges = self.backedges
    except AttributeError:
      edges = self.backedges = []
    if not any(e is dependent for e in edges):
      edges.append(dependent)

  def __repr__(self) -> str:
    return f"CompiledVariant for {self.method.function.__name__}{format_signature(self.spec_types)}"


class MethodDefinition:
  """
  One registered implementation of a generic function.

  A method accepts a range of positional arities: its required parameters, then
  any parameters with defaults, then (with ``*args``) any number of extras.

  Attributes:
      function (GenericFunction): Owning function.
      signature (Signature): Declared classes of the required parameters.
      optional (Signature): Declared classes of the defaulted positional parameters.
      varargs (Optional[type]): Declared class of ``*args`` items, None without ``*args``.
      impl (Callable): The Python implementation.
      layout (StorageLayout): Shape of ``specializations``.
      specializations (Any): A :class:`SlotTable` or the head of a linked chain.
  """

  def __init__(
    self,
    function: "GenericFunction",
    signature: Signature,
    impl: Callable,
    layout: StorageLayout,
    optional: Signature = (),
    varargs: Optional[type] = None,
  ):
    self.function = function
    self.signature = signature
    self.optional = optional
    self.varargs = varargs
    self.impl = impl
    self.layout = layout
    self.specializations: Any = SlotTable() if layout is StorageLayout.SLOTS else END_OF_ENTRIES

  def param_types(self, arity: int) -> Optional[Signature]:
    """
    Declared classes of the first ``arity`` positional parameters.

    Args:
        arity (int): Number of positional arguments passed.

    Returns:
        Optional[Signature]: One class per argument, or None if the method cannot take ``arity`` arguments.
    """
    declared = self.signature + self.optional
    if arity < len(self.signature):
      return None
    if arity <= len(declared):
      return declared[:arity]
    if self.varargs is None:
      return None
    return declared + (self.varargs,) * (arity - len(declared))

  def is_applicable(self, arg_types: Signature) -> bool:
    """True if every argument type is a subclass of the declared type."""
    params = self.param_types(len(arg_types))
    return params is not None and all(issubclass(a, s) for a, s in zip(arg_types, params))

  def could_match(self, arg_types: Signature) -> bool:
    """True if some call with arguments of ``arg_types`` (or subclasses) may select this method."""
    params = self.param_types(len(arg_types))
    return params is not None and all(issubclass(a, s) or issubclass(s, a) for a, s in zip(arg_types, params))

  def is_more_specific(self, other: "MethodDefinition", arity: Optional[int] = None) -> bool:
    """
    True if this method is strictly narrower than ``other``.

    Args:
        other (MethodDefinition): Method to compare with.
        arity (int, optional): Compare the parameters used by a call with this many
            arguments. Defaults to the required parameters only.
    """
    if arity is None:
      mine, theirs = self.signature, other.signature
    else:
      mine, theirs = self.param_types(arity), other.param_types(arity)
      if mine is None or theirs is None:
        return False
    return mine != theirs and all(issubclass(a, b) for a, b in zip(mine, theirs))

  def variant_for(self, spec_types: Signature) -> CompiledVariant:
    """
    Returns the compiled variant for ``spec_types``, compiling it on first use.

    Args:
        spec_types (Signature): Concrete argument types.

    Returns:
        CompiledVariant: The cached or newly created variant.
    """
    if self.layout is StorageLayout.SLOTS:
      variant = self.specializations.get(spec_types)
      if variant is None:
        variant = CompiledVariant(self, spec_types)
        self.specializations.insert(spec_types, variant)
      return variant

    variant = chain_lookup(self.specializations, spec_types)
    if variant is None:
      variant = CompiledVariant(self, spec_types)
      self.specializations = chain_push(self.specializations, spec_types, variant)
    return variant

  @property
  def key(self) -> Tuple[Signature, Signature, Optional[type]]:
    """Identity of the declared parameters; one method per key."""
    return (self.signature, self.optional, self.varargs)

  def __repr__(self) -> str:
    params = [_type_name(t) for t in self.signature]
    params += [f"[{_type_name(t)}]" for t in self.optional]
    if self.varargs is not None:
      params.append(f"*{_type_name(self.varargs)}")
    return f"{self.function.__name__}(" + ", ".join(params) + ")"


class MethodTable:
  """
  Dispatch table of a generic function.

  ``backedges`` is a flat interleaved list ``[spec_types, dependent, spec_types, dependent, ...]``.

  Attributes:
      name (str): Function name.
      methods (List[MethodDefinition]): Registered methods in registration order.
      backedges (List[Any]): Interleaved table-level dependencies.
  """

  def __init__(self, name: str):
    self.name = name
    self.methods: List[MethodDefinition] = []
    self.backedges: List[Any] = []

  def insert(self, method: MethodDefinition) -> None:
    """Adds a method, replacing one with identical declared parameters."""
    self.methods = [m for m in self.methods if m.key != method.key]
    self.methods.append(method)

  def resolve(self, arg_types: Signature) -> MethodDefinition:
    """
    Selects the most specific applicable method.

    Args:
        arg_types (Signature): Concrete argument types.

    Returns:
        MethodDefinition: The selected method.

    Raises:
        TypeError: If no method applies, or the choice is ambiguous.
    """
    candidates = [m for m in self.methods if m.is_applicable(arg_types)]
    if not candidates:
      raise TypeError(f"no method matching {self.name}{format_signature(arg_types)}")
    best = [m for m in candidates if not any(o.is_more_specific(m, len(arg_types)) for o in candidates)]
    if len(best) > 1:
      raise TypeError(f"{self.name}{format_signature(arg_types)} is ambiguous: {best}")
    return best[0]

  def add_backedge(self, spec_types: Signature, dependent: CompiledVariant) -> None:
    """Records a table-level dependency, once per ``(spec_types, dependent)`` pair."""
    for i in range(0, len(self.backedges) - 1, 2):
      if self.backedges[i] == spec_types and self.backedges[i + 1] is dependent:
        return
    self.backedges.extend([spec_types, dependent])

  def __repr__(self) -> str:
    return f"MethodTable({self.name!r})"


def _dispatch_type(ann: Any) -> type:
  if isinstance(ann, type):
    return ann
  origin = typing.get_origin(ann)
  return origin if isinstance(origin, type) else object


def _params_from_annotations(func: Callable) -> Tuple[Signature, Signature, Optional[type]]:
  """Splits positional parameters into required, defaulted and ``*args`` dispatch types."""
  try:
    hints = typing.get_type_hints(func)
  except Exception:
    hints = getattr(func, "__annotations__", {})

  required: List[type] = []
  optional: List[type] = []
  varargs: Optional[type] = None
  for param in inspect.signature(func).parameters.values():
    ann = _dispatch_type(hints.get(param.name, object))
    if param.kind is inspect.Parameter.VAR_POSITIONAL:
      varargs = ann
    elif param.kind in _POSITIONAL:
      (required if param.default is inspect.Parameter.empty else optional).append(ann)
  return tuple(required), tuple(optional), varargs


class GenericFunction:
  """
  A callable dispatching on the concrete types of its positional arguments.

  Attributes:
      table (MethodTable): The dispatch table.
      layout (StorageLayout): Specialization storage layout for new methods.
  """

  def __init__(self, name: str, layout: Optional[StorageLayout] = None):
    """
    Initializes a function with no methods.

    Args:
        name (str): Function name.
        layout (StorageLayout, optional): Storage layout. Defaults to the layout of
            :data:`RUNTIME_VERSION`.
    """
    self.__name__ = name
    self.__qualname__ = name
    self.table = MethodTable(name)
    self.layout = layout or layout_for(RUNTIME_VERSION)

  def register(self, func: Optional[Callable] = None, *, signature: Optional[Signature] = None) -> Any:
    """
    Registers an implementation. Usable as ``@f.register`` or ``@f.register(signature=(int,))``.

    Args:
        func (Callable, optional): The implementation.
        signature (Signature, optional): Explicit classes of required parameters. Defaults to
            the parameter annotations: required, defaulted and ``*args`` parameters all
            dispatch, and unannotated ones dispatch on ``object``.

    Returns:
        The implementation, unchanged, or a decorator.
    """
    if func is None:
      return functools.partial(self.register, signature=signature)

    if signature is not None:
      self.table.insert(MethodDefinition(self, tuple(signature), func, self.layout))
    else:
      required, optional, varargs = _params_from_annotations(func)
      self.table.insert(MethodDefinition(self, required, func, self.layout, optional, varargs))
    return func

  def methods(self, signature: Optional[Signature] = None) -> List[MethodDefinition]:
    """
    Lists registered methods, optionally those that may match ``signature``.

    Args:
        signature (Signature, optional): Argument-type filter.

    Returns:
        List[MethodDefinition]: Matching methods.
    """
    if signature is None:
      return list(self.table.methods)
    sig = tuple(signature)
    return [m for m in self.table.methods if m.could_match(sig)]

  def __call__(self, *args: Any, **kwargs: Any) -> Any:
    arg_types = tuple(type(a) for a in args)
    method = self.table.resolve(arg_types)
    variant = method.variant_for(arg_types)

    caller = _ACTIVE_VARIANT.get()
    if caller is not None:
      variant.add_backedge(caller)
      if method.param_types(len(arg_types)) != arg_types:
        self.table.add_backedge(arg_types, caller)

    token = _ACTIVE_VARIANT.set(variant)
    try:
      return method.impl(*args, **kwargs)
    finally:
      _ACTIVE_VARIANT.reset(token)

  def __repr__(self) -> str:
    count = len(self.table.methods)
    return f"<generic function {self.__name__} with {count} method{'' if count == 1 else 's'}>"


def generic(func: Optional[Callable] = None, *, layout: Optional[StorageLayout] = None) -> Any:
  """
  Decorator turning a function into a :class:`GenericFunction` with one method.

  Args:
      func (Callable, optional): The first implementation.
      layout (StorageLayout, optional): Storage layout override.

  Returns:
      GenericFunction: The new generic function, or a decorator.
  """

  def wrap(f: Callable) -> GenericFunction:
    gf = GenericFunction(f.__name__, layout=layout)
    gf.__module__ = f.__module__
    gf.__qualname__ = f.__qualname__
    gf.__doc__ = f.__doc__
    gf.register(f)
    return gf

  if func is None:
    return wrap
  return wrap(func)

