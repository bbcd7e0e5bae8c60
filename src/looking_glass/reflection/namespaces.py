"""
Namespace Traverser.

Enumerates the child modules bound inside a module, directly or transitively.

Module graphs are not trees: one module may be reachable through several
parents, and re-exports can form cycles. Identity is the deduplication key, and
the transitive walk owns a visited set seeded with the root before any child is
entered, so no module is entered or emitted twice.

Foundational modules (standard library and builtins) are skipped unless asked
for; their mutual imports make them expensive and uninteresting to walk.
"""

import logging
import sys
from types import ModuleType
from typing import Dict, List, Optional

from looking_glass.config import InspectorConfig

logger = logging.getLogger(__name__)

_BUILTIN_ROOTS = frozenset(sys.builtin_module_names) | frozenset(sys.stdlib_module_names)


def _top_package(module: ModuleType) -> str:
  return str(getattr(module, "__name__", "")).partition(".")[0]


def _short_name(module: ModuleType) -> str:
  return str(getattr(module, "__name__", "")).rpartition(".")[2]


class NamespaceTraverser:
  """
  Walks the module graph below a root module.

  Attributes:
      config (InspectorConfig): Traversal defaults and extra foundational packages.
  """

  def __init__(self, config: Optional[InspectorConfig] = None):
    self.config = config or InspectorConfig()

  def is_foundational(self, module: ModuleType) -> bool:
    """
    Checks whether a module belongs to the standard library, builtins, or a configured package.

    Args:
        module (ModuleType): The module to check.

    Returns:
        bool: True if the module's top-level package is foundational.
    """
    top = _top_package(module)
    return top in _BUILTIN_ROOTS or top in self.config.foundational_modules

  def name_is_submodule(self, module: ModuleType, name: str) -> bool:
    """
    Checks whether ``name`` is bound in ``module`` to a module other than itself.

    Both the module's own short name and any alias bound to the module object are
    self-references.

    Args:
        module (ModuleType): The parent module.
        name (str): The binding name.

    Returns:
        bool: True if the binding denotes a child module.
    """
    namespace = vars(module)
    if name not in namespace or name == _short_name(module):
      return False
    value = namespace[name]
    return isinstance(value, ModuleType) and value is not module

  def direct_children(
    self,
    module: ModuleType,
    include_foundational: Optional[bool] = None,
    include_imported: Optional[bool] = None,
  ) -> List[ModuleType]:
    """
    Lists the modules bound directly inside ``module``.

    Args:
        module (ModuleType): The parent module.
        include_foundational (bool, optional): Keep standard library / builtin children.
        include_imported (bool, optional): Keep modules that are bound by import
            rather than owned (``child.__name__`` not under ``module.__name__``).

    Returns:
        List[ModuleType]: Distinct children, in name order.
    """
    return self._children(
      module,
      module,
      self._flag(include_foundational, "include_foundational"),
      self._flag(include_imported, "include_imported"),
    )

  def all_descendants(
    self,
    module: ModuleType,
    include_foundational: Optional[bool] = None,
    include_imported: Optional[bool] = None,
  ) -> List[ModuleType]:
    """
    Lists every module reachable below ``module``.

    Args:
        module (ModuleType): The root module (never part of the result).
        include_foundational (bool, optional): Walk into standard library / builtin modules.
        include_imported (bool, optional): Follow modules bound by import.

    Returns:
        List[ModuleType]: Distinct descendants in discovery order.
    """
    foundational = self._flag(include_foundational, "include_foundational")
    imported = self._flag(include_imported, "include_imported")

    visited: Dict[int, ModuleType] = {id(module): module}
    found: List[ModuleType] = []
    worklist = [module]

    while worklist:
      current = worklist.pop(0)
      for child in self._children(current, module, foundational, imported):
        if id(child) in visited:
          continue
        visited[id(child)] = child
        found.append(child)
        worklist.append(child)

    return found

  def _flag(self, value: Optional[bool], name: str) -> bool:
    return getattr(self.config, name) if value is None else value

  def _children(self, module: ModuleType, root: ModuleType, foundational: bool, imported: bool) -> List[ModuleType]:
    try:
      names = sorted(vars(module))
    except TypeError:
      logger.debug(f"{module!r} exposes no namespace")
      return []

    root_package = _top_package(root)
    prefix = f"{getattr(module, '__name__', '')}."
    children: List[ModuleType] = []
    seen_ids = set()

    for name in names:
      if not self.name_is_submodule(module, name):
        continue
      child = vars(module)[name]
      if id(child) in seen_ids:
        continue
      if not foundational and self.is_foundational(child) and _top_package(child) != root_package:
        continue
      if not imported and not str(getattr(child, "__name__", "")).startswith(prefix):
        continue
      seen_ids.add(id(child))
      children.append(child)

    return children


def module_submodules(
  m: ModuleType,
  recursive: bool = True,
  base: bool = False,
  imported: bool = False,
) -> List[ModuleType]:
  """
  Returns the submodules of ``m``.

  Args:
      m (ModuleType): Root module.
      recursive (bool): All descendants if True, direct children otherwise.
      base (bool): Include standard library / builtin modules.
      imported (bool): Follow modules bound by import.

  Returns:
      List[ModuleType]: Distinct submodules.
  """
  traverser = NamespaceTraverser()
  if recursive:
    return traverser.all_descendants(m, include_foundational=base, include_imported=imported)
  return traverser.direct_children(m, include_foundational=base, include_imported=imported)
