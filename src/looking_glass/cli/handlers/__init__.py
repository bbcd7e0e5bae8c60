from .functions import handle_backedges, handle_specializations
from .hierarchy import handle_supertypes, handle_typetree
from .modules import handle_functions, handle_globals, handle_submodules

__all__ = [
  "handle_backedges",
  "handle_functions",
  "handle_globals",
  "handle_specializations",
  "handle_submodules",
  "handle_supertypes",
  "handle_typetree",
]
