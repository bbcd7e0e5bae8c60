"""
Tests for the Namespace Traverser.

Uses synthetic module graphs to check termination and deduplication with
diamonds, cycles and self-references, plus the foundational and ownership filters.
"""

import json
import os

from looking_glass.config import InspectorConfig
from looking_glass.reflection.namespaces import NamespaceTraverser, module_submodules


def _names(mods):
  return [m.__name__ for m in mods]


def test_direct_children_sorted_and_owned(make_module):
  root = make_module("lgpkg")
  root.b = make_module("lgpkg.b")
  root.a = make_module("lgpkg.a")
  root.x = 1

  assert _names(module_submodules(root, recursive=False)) == ["lgpkg.a", "lgpkg.b"]


def test_self_reference_is_not_a_child(make_module):
  root = make_module("lgpkg")
  root.lgpkg = root

  traverser = NamespaceTraverser()
  assert not traverser.name_is_submodule(root, "lgpkg")
  assert traverser.direct_children(root) == []
  assert traverser.all_descendants(root) == []


def test_diamond_yields_each_module_once(make_module):
  root = make_module("lgpkg")
  left = make_module("lgpkg.left")
  right = make_module("lgpkg.right")
  shared = make_module("lgpkg.left.shared")
  root.left, root.right = left, right
  left.shared = shared
  # right reaches shared through an import, not ownership
  right.shared = shared

  found = module_submodules(root, imported=True)
  assert _names(found) == ["lgpkg.left", "lgpkg.right", "lgpkg.left.shared"]


def test_cycle_terminates(make_module):
  root = make_module("lgpkg")
  child = make_module("lgpkg.child")
  grandchild = make_module("lgpkg.child.grand")
  root.child = child
  child.grand = grandchild
  grandchild.back = root
  grandchild.again = child

  found = module_submodules(root, imported=True)
  assert _names(found) == ["lgpkg.child", "lgpkg.child.grand"]
  assert root not in found


def test_same_module_under_two_names(make_module):
  root = make_module("lgpkg")
  child = make_module("lgpkg.child")
  root.child = child
  root.alias = child

  assert module_submodules(root, recursive=False) == [child]


def test_foundational_modules_skipped_by_default(make_module):
  root = make_module("lgpkg", json=json, os=os)

  assert module_submodules(root, recursive=False, imported=True) == []
  assert set(module_submodules(root, recursive=False, base=True, imported=True)) == {json, os}


def test_configured_foundational_package(make_module):
  root = make_module("lgpkg")
  root.dep = make_module("lgdep")

  traverser = NamespaceTraverser(InspectorConfig(foundational_modules=["lgdep"]))
  assert traverser.direct_children(root, include_imported=True) == []
  assert traverser.is_foundational(root.dep)
  assert not traverser.is_foundational(root)


def test_foundational_root_can_walk_its_own_package():
  traverser = NamespaceTraverser()
  found = traverser.all_descendants(json)

  assert json.decoder in found
  assert all(m.__name__.startswith("json.") for m in found)


def test_imported_modules_need_opt_in(make_module):
  root = make_module("lgpkg")
  other = make_module("lgother")
  root.other = other

  assert module_submodules(root) == []
  assert module_submodules(root, imported=True) == [other]
  assert NamespaceTraverser(InspectorConfig(include_imported=True)).all_descendants(root) == [other]


def test_non_module_values_ignored(make_module):
  root = make_module("lgpkg", value=[1], fn=len, cls=int)
  assert NamespaceTraverser().all_descendants(root) == []


def test_self_alias_is_not_a_child(make_module):
  root = make_module("lgpkg")
  root.me = root
  root.child = make_module("lgpkg.child")

  traverser = NamespaceTraverser()
  assert not traverser.name_is_submodule(root, "me")
  assert traverser.direct_children(root, include_imported=True) == [root.child]


def test_all_descendants_is_idempotent(make_module):
  root = make_module("lgpkg")
  left = make_module("lgpkg.left")
  right = make_module("lgpkg.right")
  shared = make_module("lgpkg.left.shared")
  root.left, root.right = left, right
  left.shared = shared
  right.shared = shared
  shared.up = root
  shared.sibling = right

  traverser = NamespaceTraverser()
  first = traverser.all_descendants(root, include_imported=True)
  second = traverser.all_descendants(root, include_imported=True)

  assert {id(m) for m in first} == {id(m) for m in second} == {id(left), id(right), id(shared)}
  assert len(first) == len(second) == 3
