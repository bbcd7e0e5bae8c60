"""
Binding Inspector.

Answers "does this module-level name exist, and is it constant?" for one
``(module, name)`` pair. A binding is constant when the name is annotated with
``typing.Final`` (bare or subscripted) at module level.

How annotations are read depends on the interpreter:

1.  **Python 3.14+**: annotations are evaluated lazily, so they are read through
    ``annotationlib`` in forward-reference format, which tolerates undefined names.
2.  **Older interpreters**: ``inspect.get_annotations`` on the module.
3.  **Source fallback**: when annotations cannot be produced at all, the module's
    source is parsed with LibCST and module-level ``Final`` declarations are collected.

If none of these can answer, :func:`lookup_binding` returns ``None``: constness is
unknown, which callers must not confuse with "not constant".
"""

import inspect
import logging
import sys
import typing
from types import ModuleType
from typing import Any, Callable, Dict, Optional, Set

import libcst as cst
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

if sys.version_info >= (3, 14):
  import annotationlib

  def _read_annotations(module: ModuleType) -> Dict[str, Any]:
    return annotationlib.get_annotations(module, format=annotationlib.Format.FORWARDREF)

else:

  def _read_annotations(module: ModuleType) -> Dict[str, Any]:
    return inspect.get_annotations(module)


class BindingInfo(BaseModel):
  """
  Externally observed view of a module-level binding.
  """

  model_config = ConfigDict(frozen=True)

  exists: bool
  is_const: bool


BindingLookup = Callable[[ModuleType, str], Optional[BindingInfo]]


def _is_final_text(text: str) -> bool:
  text = text.strip()
  for prefix in ("typing.", "typing_extensions.", "t."):
    if text.startswith(prefix):
      text = text[len(prefix) :]
  return text == "Final" or text.startswith("Final[")


def is_final_annotation(annotation: Any) -> bool:
  """
  Checks whether a runtime annotation value declares ``Final``.

  Args:
      annotation (Any): A value from a module's annotations (object, string or forward ref).

  Returns:
      bool: True for ``Final`` and ``Final[...]``.
  """
  if annotation is typing.Final or typing.get_origin(annotation) is typing.Final:
    return True
  if isinstance(annotation, str):
    return _is_final_text(annotation)
  forward_arg = getattr(annotation, "__forward_arg__", None)
  if isinstance(forward_arg, str):
    return _is_final_text(forward_arg)
  return False


class FinalNameCollector(cst.CSTVisitor):
  """
  Collects names declared ``Final`` at module level.

  Function and class bodies are skipped; conditional blocks at module level are not.

  Attributes:
      final_names (Set[str]): Names found so far.
  """

  def __init__(self):
    """Initializes the collector with no names."""
    self.final_names: Set[str] = set()

  def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
    return False

  def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
    return False

  def visit_AnnAssign(self, node: cst.AnnAssign) -> Optional[bool]:
    """
    Records ``name: Final = ...`` declarations.

    Args:
        node: The annotated assignment.

    Returns:
        False, annotations hold no nested declarations.
    """
    if isinstance(node.target, cst.Name) and self._is_final_expr(node.annotation.annotation):
      self.final_names.add(node.target.value)
    return False

  def _is_final_expr(self, expr: cst.BaseExpression) -> bool:
    if isinstance(expr, cst.Subscript):
      expr = expr.value
    if isinstance(expr, cst.Name):
      return expr.value == "Final"
    if isinstance(expr, cst.Attribute):
      return expr.attr.value == "Final"
    if isinstance(expr, cst.SimpleString):
      value = expr.evaluated_value
      return isinstance(value, str) and _is_final_text(value)
    return False


def final_names_from_source(source: str) -> Set[str]:
  """
  Parses module source and returns its module-level ``Final`` names.

  Args:
      source (str): Module source code.

  Returns:
      Set[str]: Declared constant names.

  Raises:
      libcst.ParserSyntaxError: If the source cannot be parsed.
  """
  collector = FinalNameCollector()
  cst.parse_module(source).visit(collector)
  return collector.final_names


def _final_names(module: ModuleType) -> Optional[Set[str]]:
  try:
    annotations = _read_annotations(module)
  except Exception as e:
    logger.debug(f"Annotations of {module!r} are unavailable ({e}); falling back to source")
  else:
    return {name for name, ann in annotations.items() if is_final_annotation(ann)}

  try:
    return final_names_from_source(inspect.getsource(module))
  except (OSError, TypeError, cst.ParserSyntaxError) as e:
    logger.debug(f"Source of {module!r} is unavailable: {e}")
    return None


def lookup_binding(module: ModuleType, name: str) -> Optional[BindingInfo]:
  """
  Reports existence and constness of ``module.name``.

  Args:
      module (ModuleType): The owning module.
      name (str): The binding name.

  Returns:
      Optional[BindingInfo]: The binding view, or None when constness cannot be determined.
  """
  return ModuleBindings(module)(module, name)


class ModuleBindings:
  """
  Binding lookup for one module that reads its ``Final`` names at most once.

  Meant to live for a single enumeration: a fresh instance sees later edits to
  the module. Usable wherever a :data:`BindingLookup` is expected; other modules
  are delegated to :func:`lookup_binding`.

  Attributes:
      module (ModuleType): The module whose bindings are read.
  """

  def __init__(self, module: ModuleType):
    self.module = module
    self._loaded = False
    self._final_names: Optional[Set[str]] = None

  def final_names(self) -> Optional[Set[str]]:
    """The module's ``Final`` names, or None when they cannot be determined."""
    if not self._loaded:
      self._final_names = _final_names(self.module)
      self._loaded = True
    return self._final_names

  def __call__(self, module: ModuleType, name: str) -> Optional[BindingInfo]:
    if module is not self.module:
      return lookup_binding(module, name)

    try:
      namespace = vars(module)
    except TypeError:
      return None

    final_names = self.final_names()
    if final_names is None:
      return None

    exists = name in namespace
    return BindingInfo(exists=exists, is_const=exists and name in final_names)
