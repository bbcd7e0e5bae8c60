"""
Tests for the Multiple-Dispatch Runtime.

Verifies that:
1.  Calls select the most specific method and compile one variant per type tuple.
2.  Nested generic calls record variant backedges.
3.  Inexact dispatch also records a dispatch-table backedge.
4.  The legacy layout stores variants in a linked chain.
"""

import pytest

from looking_glass.enums import StorageLayout
from looking_glass.runtime import (
  END_OF_ENTRIES,
  GenericFunction,
  RUNTIME_VERSION,
  SLOT_STORAGE_SINCE,
  SlotTable,
  TypeMapEntry,
  format_signature,
  generic,
  layout_for,
)


def test_layout_for_versions():
  assert layout_for(RUNTIME_VERSION) is StorageLayout.SLOTS
  assert layout_for(SLOT_STORAGE_SINCE) is StorageLayout.SLOTS
  assert layout_for((1, 4)) is StorageLayout.LINKED


def test_most_specific_method_wins():
  f = GenericFunction("f")

  @f.register
  def _any(x):
    return "object"

  @f.register
  def _int(x: int):
    return "int"

  assert f(1) == "int"
  assert f("a") == "object"
  # bool is a subclass of int
  assert f(True) == "int"


def test_register_with_explicit_signature():
  f = GenericFunction("f")
  f.register(lambda x, y: "pair", signature=(int, str))

  assert f(1, "a") == "pair"
  with pytest.raises(TypeError, match="no method matching"):
    f("a", 1)


def test_ambiguous_dispatch_raises():
  f = GenericFunction("f")
  f.register(lambda x, y: 1, signature=(int, object))
  f.register(lambda x, y: 2, signature=(object, int))

  with pytest.raises(TypeError, match="ambiguous"):
    f(1, 1)


def test_same_signature_replaces_method():
  f = GenericFunction("f")
  f.register(lambda x: 1, signature=(int,))
  f.register(lambda x: 2, signature=(int,))

  assert len(f.methods()) == 1
  assert f(3) == 2


def test_variants_are_compiled_once_per_type_tuple():
  @generic
  def foo(x):
    return x

  foo(1)
  foo(2)
  foo("a")

  method = foo.methods()[0]
  assert isinstance(method.specializations, SlotTable)
  stored = [method.specializations[i] for i in range(len(method.specializations)) if method.specializations.is_assigned(i)]
  assert sorted(v.spec_types[0].__name__ for v in stored) == ["int", "str"]


def test_nested_call_records_backedges():
  @generic
  def foo(x):
    return 2 * x

  @generic
  def bar(x):
    return foo(x) + 1

  assert bar(1) == 3

  foo_variant = foo.methods()[0].variant_for((int,))
  bar_variant = bar.methods()[0].variant_for((int,))
  assert foo_variant.backedges == [bar_variant]

  # foo(int) was reached through foo(object): the table records it too.
  assert foo.table.backedges == [(int,), bar_variant]

  # Top-level calls have no caller.
  with pytest.raises(AttributeError):
    bar_variant.backedges


def test_exact_dispatch_records_no_table_edge():
  foo = GenericFunction("foo")
  foo.register(lambda x: x, signature=(int,))

  @generic
  def bar(x):
    return foo(x)

  bar(1)
  bar(1)

  assert foo.table.backedges == []
  assert len(foo.methods()[0].variant_for((int,)).backedges) == 1


def test_linked_layout_stores_chain():
  @generic(layout=StorageLayout.LINKED)
  def foo(x):
    return x

  method = foo.methods()[0]
  assert method.specializations is END_OF_ENTRIES

  foo(1)
  foo(1.0)
  assert isinstance(method.specializations, TypeMapEntry)
  assert method.specializations.next.next is END_OF_ENTRIES


def test_methods_signature_filter():
  f = GenericFunction("f")
  f.register(lambda x: 1, signature=(int,))
  f.register(lambda x: 2, signature=(str,))
  f.register(lambda x: 3, signature=(object,))

  assert [m.signature for m in f.methods((int,))] == [(int,), (object,)]
  # object may be refined to any subclass at call time
  assert len(f.methods((object,))) == 3


def test_reprs():
  @generic
  def foo(x: int, y: str):
    return x

  method = foo.methods()[0]
  assert repr(method) == "foo(int, str)"
  assert repr(method.variant_for((int, str))) == "CompiledVariant for foo(int, str)"
  assert repr(foo) == "<generic function foo with 1 method>"
  assert format_signature(()) == "()"
  assert foo.__doc__ is None


def test_defaulted_parameters_dispatch():
  @generic
  def scale(x, factor=2):
    return x * factor

  assert scale(3) == 6
  assert scale(3, 10) == 30

  method = scale.methods()[0]
  assert method.signature == (object,)
  assert method.optional == (object,)
  assert repr(method) == "scale(object, [object])"
  assert {v.spec_types for v in [method.variant_for((int,)), method.variant_for((int, int))]} == {(int,), (int, int)}


def test_varargs_dispatch():
  @generic
  def total(*xs: int):
    return sum(xs)

  assert total() == 0
  assert total(1, 2) == 3
  assert repr(total.methods()[0]) == "total(*int)"
  with pytest.raises(TypeError, match="no method matching"):
    total(1, "a")


def test_too_many_arguments_rejected():
  @generic
  def one(x):
    return x

  with pytest.raises(TypeError, match="no method matching"):
    one(1, 2)


def test_specific_method_wins_over_defaulted_one():
  @generic
  def scale(x, factor=2):
    return "general"

  @scale.register
  def _scale_int(x: int):
    return "int"

  assert scale(3) == "int"
  assert scale(3, 4) == "general"
  assert len(scale.methods()) == 2


def test_param_types_by_arity():
  f = GenericFunction("f")
  f.register(lambda x, y=1, *rest: x)
  method = f.methods()[0]

  assert method.param_types(0) is None
  assert method.param_types(1) == (object,)
  assert method.param_types(4) == (object,) * 4
