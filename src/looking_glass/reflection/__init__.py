"""
Reflection Package.

Read-only introspection of the dispatch runtime and of live module graphs.

Modules:
    - ``specializations``: Compiled variants of generic functions.
    - ``backedges``: Invalidation edges of variants and dispatch tables.
    - ``namespaces``: Direct and transitive submodule enumeration.
    - ``bindings``: Existence and constness of module-level bindings.
    - ``classify``: Global / function classification within one module.
    - ``aggregate``: Global inventories over a module subtree.
    - ``hierarchy``: Supertype chains and type trees.
"""

from looking_glass.reflection.aggregate import Aggregator, module_recursive_globals, module_recursive_globals_names
from looking_glass.reflection.backedges import BackedgeCollector, DispatchTableKey, func_backedges, pair_interleaved
from looking_glass.reflection.bindings import BindingInfo, ModuleBindings, lookup_binding
from looking_glass.reflection.classify import (
  GlobalClassifier,
  binding_kind,
  is_immutable,
  module_functions,
  module_functions_names,
  module_globals,
  module_globals_names,
  module_name_isglobal,
  module_objects,
)
from looking_glass.reflection.hierarchy import print_typetree, subtypes, supertype, supertypes
from looking_glass.reflection.namespaces import NamespaceTraverser, module_submodules
from looking_glass.reflection.specializations import (
  LinkedEntrySource,
  SlotArraySource,
  SpecializationWalker,
  VariantSource,
  func_specializations,
  method_specializations,
  variant_source_for,
)

__all__ = [
  "Aggregator",
  "BackedgeCollector",
  "BindingInfo",
  "DispatchTableKey",
  "GlobalClassifier",
  "LinkedEntrySource",
  "ModuleBindings",
  "NamespaceTraverser",
  "SlotArraySource",
  "SpecializationWalker",
  "VariantSource",
  "binding_kind",
  "func_backedges",
  "func_specializations",
  "is_immutable",
  "lookup_binding",
  "method_specializations",
  "module_functions",
  "module_functions_names",
  "module_globals",
  "module_globals_names",
  "module_name_isglobal",
  "module_objects",
  "module_recursive_globals",
  "module_recursive_globals_names",
  "module_submodules",
  "pair_interleaved",
  "print_typetree",
  "subtypes",
  "supertype",
  "supertypes",
  "variant_source_for",
]
