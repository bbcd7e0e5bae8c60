"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A factory for synthetic module graphs.
- Console isolation so captured output never leaks between tests.
"""

import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Optional

import pytest

# Add src to path so we can import 'looking_glass' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from looking_glass.utils.console import reset_console  # noqa: E402


@pytest.fixture
def make_module() -> Callable[..., ModuleType]:
  """
  Factory building an in-memory module.

  Usage::

      mod = make_module("pkg.sub", x=1, annotations={"x": Final})
  """

  def _make(name: str, annotations: Optional[Dict[str, Any]] = None, **attrs: Any) -> ModuleType:
    mod = ModuleType(name)
    for key, value in attrs.items():
      setattr(mod, key, value)
    mod.__annotations__ = dict(annotations or {})
    return mod

  return _make


@pytest.fixture(autouse=True)
def isolate_console():
  """Ensures console is reset to stdout after every test."""
  reset_console()
  yield
  reset_console()
