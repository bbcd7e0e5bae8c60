"""
Runtime Package.

A small specializing multiple-dispatch runtime. The reflection layer introspects
its structures; it never mutates them.

Modules:
    - ``dispatch``: Generic functions, method tables, methods and compiled variants.
    - ``storage``: Version-dependent specialization storage layouts.
"""

from looking_glass.runtime.dispatch import (
  RUNTIME_VERSION,
  SLOT_STORAGE_SINCE,
  CompiledVariant,
  GenericFunction,
  MethodDefinition,
  MethodTable,
  format_signature,
  generic,
  layout_for,
)
from looking_glass.runtime.storage import END_OF_ENTRIES, SlotTable, TypeMapEntry

__all__ = [
  "CompiledVariant",
  "END_OF_ENTRIES",
  "GenericFunction",
  "MethodDefinition",
  "MethodTable",
  "RUNTIME_VERSION",
  "SLOT_STORAGE_SINCE",
  "SlotTable",
  "TypeMapEntry",
  "format_signature",
  "generic",
  "layout_for",
]
