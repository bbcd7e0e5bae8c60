"""
CLI Command Handlers Facade.

Re-exports the handlers from ``looking_glass.cli.handlers`` so the dispatcher
(and tests patching it) reference a single module.
"""

from looking_glass.cli.handlers.functions import handle_backedges, handle_specializations
from looking_glass.cli.handlers.hierarchy import handle_supertypes, handle_typetree
from looking_glass.cli.handlers.modules import handle_functions, handle_globals, handle_submodules

__all__ = [
  "handle_backedges",
  "handle_functions",
  "handle_globals",
  "handle_specializations",
  "handle_submodules",
  "handle_supertypes",
  "handle_typetree",
]
