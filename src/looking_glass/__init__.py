"""
looking-glass Package.

Reflection utilities for understanding a running program: which compiled
variants a generic function has, what invalidates them, and which mutable
globals live in a module tree.

Most helpers are named after what they reflect over:

- ``func_specializations(f)`` lists the compiled variants of a generic function.
- ``module_functions_names(m)`` lists the functions bound in a module.
- ``module_globals_names(m)`` lists the global variables of a module.

Usage
-----

.. code-block:: python

    import looking_glass as lg

    @lg.generic
    def foo(x):
      return 2 * x

    @lg.generic
    def bar(x):
      return foo(x) + 1

    bar(1)
    lg.func_specializations(foo)  # {CompiledVariant for foo(int): foo(object)}
    lg.func_backedges(foo)  # foo(int) is depended on by bar(int)

    import mypkg
    lg.module_recursive_globals_names(mypkg, constness="nonconst", mutability="mutable")
"""

from looking_glass.config import InspectorConfig
from looking_glass.enums import BindingKind, Constness, Mutability, StorageLayout
from looking_glass.errors import LookingGlassError, MalformedStateError, UnavailableStructureError
from looking_glass.reflection import (
  Aggregator,
  BackedgeCollector,
  BindingInfo,
  DispatchTableKey,
  GlobalClassifier,
  NamespaceTraverser,
  SpecializationWalker,
  func_backedges,
  func_specializations,
  lookup_binding,
  method_specializations,
  module_functions,
  module_functions_names,
  module_globals,
  module_globals_names,
  module_objects,
  module_recursive_globals,
  module_recursive_globals_names,
  module_submodules,
  print_typetree,
  supertypes,
)
from looking_glass.runtime import GenericFunction, generic

__version__ = "0.1.0"

__all__ = [
  "Aggregator",
  "BackedgeCollector",
  "BindingInfo",
  "BindingKind",
  "Constness",
  "DispatchTableKey",
  "GenericFunction",
  "GlobalClassifier",
  "InspectorConfig",
  "LookingGlassError",
  "MalformedStateError",
  "Mutability",
  "NamespaceTraverser",
  "SpecializationWalker",
  "StorageLayout",
  "UnavailableStructureError",
  "__version__",
  "func_backedges",
  "func_specializations",
  "generic",
  "lookup_binding",
  "method_specializations",
  "module_functions",
  "module_functions_names",
  "module_globals",
  "module_globals_names",
  "module_objects",
  "module_recursive_globals",
  "module_recursive_globals_names",
  "module_submodules",
  "print_typetree",
  "supertypes",
]
