"""
Generic Function Command Handlers.

Renders the compiled variants and the invalidation edges of a generic function.
"""

from typing import Optional

from rich.table import Table

from looking_glass.cli.resolve import parse_signature, resolve_target
from looking_glass.errors import MalformedStateError
from looking_glass.reflection.backedges import BackedgeCollector, DispatchTableKey
from looking_glass.reflection.specializations import SpecializationWalker
from looking_glass.runtime import format_signature
from looking_glass.utils.console import console, log_error, log_info


def handle_specializations(target: str, signature: Optional[str] = None) -> int:
  """
  Lists every compiled variant of a generic function.

  Args:
      target (str): ``module:attr`` path of the function.
      signature (str, optional): Comma separated argument types restricting the methods.

  Returns:
      int: Exit code.
  """
  try:
    f = resolve_target(target)
    sig = parse_signature(signature) if signature is not None else None
  except (ImportError, AttributeError, TypeError) as e:
    log_error(f"Cannot resolve {target}: {e}")
    return 1

  found = SpecializationWalker().specializations(f, sig)
  if not found:
    log_info(f"No specializations for {target}.")
    return 0

  table = Table(title=f"Specializations of {target}")
  table.add_column("Variant", style="bold magenta")
  table.add_column("Method", style="cyan")
  for variant, method in sorted(found.items(), key=lambda kv: repr(kv[0])):
    table.add_row(repr(variant), repr(method))

  console.print(table)
  return 0


def handle_backedges(target: str) -> int:
  """
  Lists the dependents recorded on each variant and on the dispatch table.

  Args:
      target (str): ``module:attr`` path of the function.

  Returns:
      int: Exit code; 1 when the target cannot be resolved or its edges are malformed.
  """
  try:
    f = resolve_target(target)
  except (ImportError, AttributeError) as e:
    log_error(f"Cannot resolve {target}: {e}")
    return 1

  try:
    edges = BackedgeCollector().backedges(f)
  except MalformedStateError as e:
    log_error(str(e))
    return 1

  if not edges:
    log_info(f"No backedges for {target}.")
    return 0

  table = Table(title=f"Backedges of {target}")
  table.add_column("Source", style="bold magenta")
  table.add_column("Dependents")
  for key, dependents in edges.items():
    if isinstance(key, DispatchTableKey):
      label = f"dispatch table {format_signature(key.signature)}"
    else:
      label = repr(key)
    table.add_row(label, "\n".join(repr(d) for d in dependents) or "-")

  console.print(table)
  return 0
