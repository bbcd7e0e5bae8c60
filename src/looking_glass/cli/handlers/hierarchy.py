"""
Type Hierarchy Command Handlers.
"""

from looking_glass.cli.resolve import resolve_type
from looking_glass.reflection.hierarchy import print_typetree, supertypes, type_name
from looking_glass.utils.console import console, log_error


def handle_typetree(name: str) -> int:
  """Prints the subclass tree rooted at a type."""
  try:
    t = resolve_type(name)
  except (ImportError, AttributeError, TypeError) as e:
    log_error(f"Cannot resolve {name}: {e}")
    return 1
  print_typetree(t)
  return 0


def handle_supertypes(name: str) -> int:
  """Prints the ancestor chain of a type, nearest first."""
  try:
    t = resolve_type(name)
  except (ImportError, AttributeError, TypeError) as e:
    log_error(f"Cannot resolve {name}: {e}")
    return 1
  console.print(" <: ".join(type_name(s) for s in [t] + supertypes(t)), markup=False, highlight=False)
  return 0
