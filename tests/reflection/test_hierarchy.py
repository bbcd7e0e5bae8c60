"""
Tests for the Type Hierarchy helpers.
"""

from rich.console import Console

from looking_glass.reflection.hierarchy import print_typetree, subtypes, supertype, supertypes, type_name
from looking_glass.utils.console import set_console


class Animal:
  pass


class Dog(Animal):
  pass


class Cat(Animal):
  pass


class Puppy(Dog):
  pass


def test_supertype_fixpoint():
  assert supertype(object) is object
  assert supertype(bool) is int


def test_supertypes_of_type_and_value():
  assert supertypes(bool) == [int, object]
  assert supertypes(True) == [bool, int, object]
  assert supertypes(object) == []
  assert supertypes(Puppy) == [Dog, Animal, object]


def test_subtypes_sorted():
  assert subtypes(Animal) == [Cat, Dog]
  assert subtypes(Puppy) == []


def test_type_name():
  assert type_name(int) == "int"
  assert type_name(Dog) == f"{__name__}.Dog"


def test_print_typetree_indents_by_depth():
  capture = Console(record=True, width=200)
  set_console(capture)

  print_typetree(Animal)

  prefix = __name__
  assert capture.export_text().splitlines() == [
    f"{prefix}.Animal",
    f"    {prefix}.Cat",
    f"    {prefix}.Dog",
    f"        {prefix}.Puppy",
  ]


def test_print_typetree_custom_listing():
  capture = Console(record=True, width=200)
  set_console(capture)

  print_typetree(int, list_subtypes=lambda t: [bool] if t is int else [])

  assert capture.export_text().splitlines() == ["int", "    bool"]
