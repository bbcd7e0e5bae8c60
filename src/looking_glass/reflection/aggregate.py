"""
Recursive Global Inventories.

Combines the :class:`NamespaceTraverser` and the :class:`GlobalClassifier` to
report the globals of a whole module subtree. The result is sparse: modules
without any matching global do not appear at all, the root included.

Foundational modules are never walked here. Imported (not owned) modules are
walked on request and are keyed by their own module object, so a global reached
through an alias is attributed to the module that defines it.
"""

from types import ModuleType
from typing import Any, Dict, List, Optional, Tuple, Union

from looking_glass.config import InspectorConfig
from looking_glass.enums import Constness, Mutability
from looking_glass.reflection.classify import GlobalClassifier
from looking_glass.reflection.namespaces import NamespaceTraverser


class Aggregator:
  """
  Builds per-module global inventories over a module subtree.

  Attributes:
      traverser (NamespaceTraverser): Module graph walker.
      classifier (GlobalClassifier): Per-module global enumerator.
  """

  def __init__(
    self,
    traverser: Optional[NamespaceTraverser] = None,
    classifier: Optional[GlobalClassifier] = None,
    config: Optional[InspectorConfig] = None,
  ):
    """
    Initializes the aggregator.

    Args:
        traverser (NamespaceTraverser, optional): Walker to use.
        classifier (GlobalClassifier, optional): Classifier to use.
        config (InspectorConfig, optional): Configuration for default collaborators.
    """
    self.traverser = traverser or NamespaceTraverser(config)
    self.classifier = classifier or GlobalClassifier(config)

  def recursive_global_names(
    self,
    module: ModuleType,
    constness: Union[Constness, str] = Constness.ALL,
    mutability: Union[Mutability, str] = Mutability.ALL,
    include_imported: Optional[bool] = None,
  ) -> Dict[ModuleType, List[str]]:
    """
    Lists global names for ``module`` and each of its descendants.

    Args:
        module (ModuleType): Root module.
        constness (Constness): Constness filter.
        mutability (Mutability): Mutability filter.
        include_imported (bool, optional): Also walk modules bound by import.

    Returns:
        Dict[ModuleType, List[str]]: Sorted names per module; modules with no
        matching names are omitted.
    """
    modules = [module] + self.traverser.all_descendants(
      module, include_foundational=False, include_imported=include_imported
    )
    out: Dict[ModuleType, List[str]] = {}
    for mod in modules:
      names = self.classifier.names(mod, constness, mutability)
      if names:
        out[mod] = names
    return out

  def recursive_globals(
    self,
    module: ModuleType,
    constness: Union[Constness, str] = Constness.ALL,
    mutability: Union[Mutability, str] = Mutability.ALL,
    include_imported: Optional[bool] = None,
  ) -> Dict[Tuple[ModuleType, str], Any]:
    """
    Maps each ``(module, name)`` of the subtree to the global's current value.

    Args:
        module (ModuleType): Root module.
        constness (Constness): Constness filter.
        mutability (Mutability): Mutability filter.
        include_imported (bool, optional): Also walk modules bound by import.

    Returns:
        Dict[Tuple[ModuleType, str], Any]: Fully qualified globals.
    """
    out: Dict[Tuple[ModuleType, str], Any] = {}
    for mod, names in self.recursive_global_names(module, constness, mutability, include_imported).items():
      namespace = vars(mod)
      for name in names:
        out[(mod, name)] = namespace[name]
    return out


def module_recursive_globals_names(
  m: ModuleType,
  constness: Union[Constness, str] = Constness.ALL,
  mutability: Union[Mutability, str] = Mutability.ALL,
  imported: bool = False,
) -> Dict[ModuleType, List[str]]:
  """
  Returns the global names of each module in the subtree of ``m``.

  See :func:`module_recursive_globals`.
  """
  return Aggregator().recursive_global_names(m, constness, mutability, include_imported=imported)


def module_recursive_globals(
  m: ModuleType,
  constness: Union[Constness, str] = Constness.ALL,
  mutability: Union[Mutability, str] = Mutability.ALL,
  imported: bool = False,
) -> Dict[Tuple[ModuleType, str], Any]:
  """
  Returns a dict mapping the fully qualified name to the value of every global
  in ``m`` and all its submodules.
  """
  return Aggregator().recursive_globals(m, constness, mutability, include_imported=imported)
