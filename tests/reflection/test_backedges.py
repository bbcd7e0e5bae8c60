"""
Tests for the Backedge Collector.

Verifies:
1. One key per compiled variant, even without dependents.
2. Dispatch-table edges are paired and grouped by signature.
3. An odd-length table sequence is a hard error naming the function.
"""

import pytest

from looking_glass.errors import MalformedStateError
from looking_glass.reflection.backedges import BackedgeCollector, DispatchTableKey, func_backedges, pair_interleaved
from looking_glass.reflection.specializations import func_specializations
from looking_glass.runtime import GenericFunction, generic


def _foo_bar():
  @generic
  def foo(x):
    return 2 * x

  @generic
  def bar(x):
    return foo(x) + 1

  return foo, bar


def test_foo_bar_backedges():
  foo, bar = _foo_bar()
  bar(1)

  edges = func_backedges(foo)
  foo_int = foo.methods()[0].variant_for((int,))
  bar_int = bar.methods()[0].variant_for((int,))

  assert edges[foo_int] == [bar_int]
  assert edges[DispatchTableKey(foo.table, (int,))] == [bar_int]
  assert len(edges) == 2


def test_key_per_variant_even_without_dependents():
  foo, _ = _foo_bar()
  foo(1)
  foo("a")

  edges = func_backedges(foo)
  assert set(edges) == set(func_specializations(foo))
  assert all(deps == [] for deps in edges.values())


def test_no_variants_no_edges():
  foo, _ = _foo_bar()
  assert func_backedges(foo) == {}


def test_table_edges_grouped_by_signature():
  foo = GenericFunction("foo")
  foo.register(lambda x: x, signature=(object,))
  a, b, c = object(), object(), object()
  foo.table.backedges = [(int,), a, (str,), b, (int,), c]

  edges = func_backedges(foo)
  assert edges[DispatchTableKey(foo.table, (int,))] == [a, c]
  assert edges[DispatchTableKey(foo.table, (str,))] == [b]


def test_odd_length_table_raises():
  foo, _ = _foo_bar()
  foo.table.backedges = [(int,), object(), (str,)]

  with pytest.raises(MalformedStateError, match="odd length") as exc:
    func_backedges(foo)
  assert exc.value.subject is foo
  assert "foo" in str(exc.value)


def test_pair_interleaved():
  assert pair_interleaved([]) == []
  assert pair_interleaved(["a", 1, "b", 2]) == [("a", 1), ("b", 2)]
  with pytest.raises(MalformedStateError):
    pair_interleaved(["a"])


def test_plain_callable_has_no_edges():
  assert BackedgeCollector().backedges(len) == {}
