"""
Tests for the Specialization Walker.

Verifies:
1. Zero calls produce no specializations; each new type tuple adds exactly one.
2. Both storage layouts are read through the strategy picked from the runtime version.
3. Unreadable storage is contained per method.
"""

import logging

import pytest

from looking_glass.enums import StorageLayout
from looking_glass.errors import UnavailableStructureError
from looking_glass.reflection.specializations import (
  LinkedEntrySource,
  SlotArraySource,
  SpecializationWalker,
  VariantSource,
  func_specializations,
  method_specializations,
  variant_source_for,
)
from looking_glass.runtime import GenericFunction, generic


@pytest.fixture
def foo():
  @generic
  def foo(x):
    return 2 * x

  return foo


def test_no_calls_no_specializations(foo):
  assert func_specializations(foo) == {}


def test_one_call_one_specialization(foo):
  foo(2)
  specs = func_specializations(foo)

  assert len(specs) == 1
  (variant, method), = specs.items()
  assert variant.spec_types == (int,)
  assert method is foo.methods()[0]


def test_repeated_signature_does_not_add(foo):
  foo(2)
  foo(3)
  foo(2.0)

  assert {v.spec_types for v in func_specializations(foo)} == {(int,), (float,)}


def test_specializations_span_methods():
  f = GenericFunction("f")
  f.register(lambda x: 1, signature=(int,))
  f.register(lambda x: 2, signature=(str,))
  f(1)
  f("a")

  specs = func_specializations(f)
  assert sorted(repr(m) for m in specs.values()) == ["f(int)", "f(str)"]

  only_str = func_specializations(f, (str,))
  assert [v.spec_types for v in only_str] == [(str,)]


def test_source_picked_from_version():
  assert isinstance(variant_source_for((2, 1)), SlotArraySource)
  assert isinstance(variant_source_for((1, 4)), LinkedEntrySource)
  assert isinstance(SpecializationWalker(runtime_version=(1, 0)).source, LinkedEntrySource)
  assert isinstance(SpecializationWalker().source, SlotArraySource)


def test_legacy_linked_layout():
  @generic(layout=StorageLayout.LINKED)
  def foo(x):
    return x

  foo(1)
  foo("a")

  walker = SpecializationWalker(runtime_version=(1, 4))
  assert {v.spec_types for v in walker.specializations(foo)} == {(int,), (str,)}


def test_view_is_restartable(foo):
  foo(1)
  view = SpecializationWalker().variants_of(foo.methods()[0])

  assert list(view) == list(view)
  foo("a")
  assert len(list(view)) == 2


def test_mismatched_layout_is_contained(foo, caplog):
  """A slot table read as a linked chain or vice versa yields nothing, not an error."""
  foo(1)
  with caplog.at_level(logging.DEBUG):
    assert SpecializationWalker(source=LinkedEntrySource()).specializations(foo) == {}

  @generic(layout=StorageLayout.LINKED)
  def bar(x):
    return x

  bar(1)
  assert SpecializationWalker(source=SlotArraySource()).specializations(bar) == {}


class _DeniedSource(VariantSource):
  def __init__(self, denied):
    self.denied = denied

  def iter_variants(self, method):
    if method.signature == self.denied:
      raise PermissionError("storage access denied")
    yield from SlotArraySource().iter_variants(method)


class _MissingSource(VariantSource):
  def iter_variants(self, method):
    raise UnavailableStructureError("no storage")


def test_unreadable_method_contributes_zero():
  f = GenericFunction("f")
  f.register(lambda x: 1, signature=(int,))
  f.register(lambda x: 2, signature=(str,))
  f(1)
  f("a")

  specs = SpecializationWalker(source=_DeniedSource((int,))).specializations(f)
  assert [v.spec_types for v in specs] == [(str,)]

  assert SpecializationWalker(source=_MissingSource()).specializations(f) == {}


def test_plain_callable_has_no_specializations():
  assert func_specializations(len) == {}
  assert func_specializations(lambda x: x) == {}


def test_method_specializations(foo):
  foo(1)
  method = foo.methods()[0]

  assert [v.spec_types for v in method_specializations(method)] == [(int,)]
