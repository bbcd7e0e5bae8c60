"""
Module Command Handlers.

Submodule listings, function listings and global inventories of live modules.
"""

from typing import Optional

from rich.table import Table

from looking_glass.cli.resolve import resolve_module
from looking_glass.config import InspectorConfig
from looking_glass.reflection.aggregate import Aggregator
from looking_glass.reflection.classify import GlobalClassifier
from looking_glass.reflection.namespaces import NamespaceTraverser
from looking_glass.utils.console import console, log_error, log_info


def handle_submodules(
  name: str,
  direct: bool = False,
  foundational: Optional[bool] = None,
  imported: Optional[bool] = None,
) -> int:
  """
  Lists the submodules of a module.

  Args:
      name (str): Dotted module name.
      direct (bool): Only list direct children.
      foundational (bool, optional): Override for walking standard library modules.
      imported (bool, optional): Override for following imported modules.

  Returns:
      int: Exit code.
  """
  try:
    module = resolve_module(name)
  except ImportError as e:
    log_error(f"Cannot import {name}: {e}")
    return 1

  config = InspectorConfig.load(include_foundational=foundational, include_imported=imported)
  traverser = NamespaceTraverser(config)
  found = traverser.direct_children(module) if direct else traverser.all_descendants(module)

  if not found:
    log_info(f"{name} has no submodules.")
    return 0
  for child in found:
    console.print(child.__name__, style="bold blue", highlight=False)
  return 0


def handle_functions(name: str) -> int:
  """
  Lists the function names bound in a module.

  Args:
      name (str): Dotted module name.

  Returns:
      int: Exit code.
  """
  try:
    module = resolve_module(name)
  except ImportError as e:
    log_error(f"Cannot import {name}: {e}")
    return 1

  for fn in GlobalClassifier(InspectorConfig.load()).function_names(module):
    console.print(fn, style="bold magenta", highlight=False)
  return 0


def handle_globals(
  name: str,
  constness: str = "all",
  mutability: str = "all",
  recursive: bool = False,
  imported: Optional[bool] = None,
  show_values: bool = False,
) -> int:
  """
  Prints the global variables of a module, or of its whole subtree.

  Args:
      name (str): Dotted module name.
      constness (str): ``all``, ``const`` or ``nonconst``.
      mutability (str): ``all``, ``mutable`` or ``immutable``.
      recursive (bool): Include every submodule.
      imported (bool, optional): Follow imported modules when recursive.
      show_values (bool): Add a column with each value's repr.

  Returns:
      int: Exit code.
  """
  try:
    module = resolve_module(name)
  except ImportError as e:
    log_error(f"Cannot import {name}: {e}")
    return 1

  config = InspectorConfig.load(include_imported=imported)
  if recursive:
    found = Aggregator(config=config).recursive_global_names(module, constness, mutability)
  else:
    names = GlobalClassifier(config).names(module, constness, mutability)
    found = {module: names} if names else {}

  if not found:
    log_info(f"No matching globals in {name}.")
    return 0

  table = Table(title=f"Globals of {name}")
  table.add_column("Module", style="bold blue")
  table.add_column("Name", style="bold magenta")
  if show_values:
    table.add_column("Value", overflow="fold")

  for mod, names in found.items():
    namespace = vars(mod)
    for n in names:
      row = [mod.__name__, n]
      if show_values:
        row.append(repr(namespace[n]))
      table.add_row(*row)

  console.print(table)
  return 0
