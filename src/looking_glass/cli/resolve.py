"""
Target Resolution.

Command-line targets name live objects:

*   ``package.module:attr.path``: import ``package.module``, then follow attributes.
*   ``package.module.attr``: import the longest importable prefix, then follow
    the remaining attributes.
*   ``int``: a bare name that is not a module resolves against ``builtins``.
"""

import builtins
import importlib
from types import ModuleType
from typing import Any, Tuple


def _follow(obj: Any, path: str, target: str) -> Any:
  for part in filter(None, path.split(".")):
    if not hasattr(obj, part):
      raise AttributeError(f"{target!r}: {obj!r} has no attribute {part!r}")
    obj = getattr(obj, part)
  return obj


def resolve_module(name: str) -> ModuleType:
  """
  Imports a module by dotted name.

  Raises:
      ImportError: If the module cannot be imported.
  """
  return importlib.import_module(name)


def resolve_target(target: str) -> Any:
  """
  Resolves a target string to an object.

  Args:
      target (str): ``module:attr``, a dotted path, or a builtin name.

  Returns:
      Any: The resolved object.

  Raises:
      ImportError: If no prefix of the path can be imported.
      AttributeError: If an attribute along the path is missing.
  """
  if ":" in target:
    module_name, _, attr_path = target.partition(":")
    return _follow(importlib.import_module(module_name), attr_path, target)

  parts = target.split(".")
  if len(parts) == 1 and hasattr(builtins, target):
    return getattr(builtins, target)

  for i in range(len(parts), 0, -1):
    module_name = ".".join(parts[:i])
    try:
      module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
      # Only swallow the failure for the prefix being probed, not for its imports.
      if e.name is not None and module_name != e.name and not module_name.startswith(e.name + "."):
        raise
      continue
    return _follow(module, ".".join(parts[i:]), target)

  raise ImportError(f"Cannot import any prefix of {target!r}")


def resolve_type(name: str) -> type:
  """
  Resolves a target that must denote a class.

  Raises:
      TypeError: If the target is not a class.
  """
  obj = resolve_target(name)
  if not isinstance(obj, type):
    raise TypeError(f"{name!r} is not a type (got {type(obj).__name__})")
  return obj


def parse_signature(text: str) -> Tuple[type, ...]:
  """
  Parses ``"int,str"`` into ``(int, str)``.

  Args:
      text (str): Comma separated type targets. Empty means the empty signature.

  Returns:
      Tuple[type, ...]: The argument types.
  """
  return tuple(resolve_type(part.strip()) for part in text.split(",") if part.strip())
