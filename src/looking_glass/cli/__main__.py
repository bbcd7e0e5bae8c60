"""
Main Entry Point for the looking-glass CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `looking_glass.cli.commands`.
"""

import argparse
import sys
from typing import List, Optional

from looking_glass import __version__
from looking_glass.cli import commands
from looking_glass.enums import Constness, Mutability
from looking_glass.utils.console import enable_debug


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="looking-glass: Runtime reflection for generic functions and modules")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("--debug", action="store_true", help="Show contained lookup failures")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: SPECIALIZATIONS ---
  cmd_spec = subparsers.add_parser("specializations", help="List the compiled variants of a generic function")
  cmd_spec.add_argument("target", help="Function path (e.g. mypkg.mod:foo)")
  cmd_spec.add_argument(
    "--signature",
    default=None,
    help="Comma separated argument types; only methods that may match are read (e.g. int,str)",
  )

  # --- Command: BACKEDGES ---
  cmd_back = subparsers.add_parser("backedges", help="List what must be re-examined when a function changes")
  cmd_back.add_argument("target", help="Function path (e.g. mypkg.mod:foo)")

  # --- Command: SUBMODULES ---
  cmd_sub = subparsers.add_parser("submodules", help="List the submodules of a module")
  cmd_sub.add_argument("module", help="Dotted module name")
  cmd_sub.add_argument("--direct", action="store_true", help="Only direct children")
  cmd_sub.add_argument(
    "--foundational",
    action="store_true",
    default=None,
    help="Walk into standard library / builtin modules (Overrides config)",
  )
  cmd_sub.add_argument(
    "--imported",
    action="store_true",
    default=None,
    help="Follow modules bound by import (Overrides config)",
  )

  # --- Command: FUNCTIONS ---
  cmd_fn = subparsers.add_parser("functions", help="List the functions bound in a module")
  cmd_fn.add_argument("module", help="Dotted module name")

  # --- Command: GLOBALS ---
  cmd_glob = subparsers.add_parser("globals", help="List the global variables of a module")
  cmd_glob.add_argument("module", help="Dotted module name")
  cmd_glob.add_argument("--constness", choices=[c.value for c in Constness], default=Constness.ALL.value)
  cmd_glob.add_argument("--mutability", choices=[m.value for m in Mutability], default=Mutability.ALL.value)
  cmd_glob.add_argument("--recursive", action="store_true", help="Include every submodule")
  cmd_glob.add_argument(
    "--imported",
    action="store_true",
    default=None,
    help="With --recursive, follow modules bound by import (Overrides config)",
  )
  cmd_glob.add_argument("--values", action="store_true", help="Show each global's value")

  # --- Command: TYPETREE / SUPERTYPES ---
  cmd_tree = subparsers.add_parser("typetree", help="Print the subclass tree of a type")
  cmd_tree.add_argument("type", help="Type path (e.g. numbers.Number or int)")
  cmd_sup = subparsers.add_parser("supertypes", help="Print the ancestor chain of a type")
  cmd_sup.add_argument("type", help="Type path (e.g. bool)")

  args = parser.parse_args(argv)

  if args.debug:
    enable_debug()

  if args.command == "specializations":
    return commands.handle_specializations(args.target, args.signature)

  elif args.command == "backedges":
    return commands.handle_backedges(args.target)

  elif args.command == "submodules":
    return commands.handle_submodules(args.module, args.direct, args.foundational, args.imported)

  elif args.command == "functions":
    return commands.handle_functions(args.module)

  elif args.command == "globals":
    return commands.handle_globals(
      args.module, args.constness, args.mutability, args.recursive, args.imported, args.values
    )

  elif args.command == "typetree":
    return commands.handle_typetree(args.type)

  elif args.command == "supertypes":
    return commands.handle_supertypes(args.type)

  return 0


if __name__ == "__main__":
  sys.exit(main())
