"""
Tests for the Inspector configuration model.
"""

import pytest
from pydantic import ValidationError

from looking_glass.config import DEFAULT_INTERNAL_PREFIX, InspectorConfig


def test_defaults():
  config = InspectorConfig()

  assert config.internal_prefix == DEFAULT_INTERNAL_PREFIX == "__"
  assert config.include_foundational is False
  assert config.include_imported is False
  assert config.foundational_modules == []


def test_is_internal():
  config = InspectorConfig()
  assert config.is_internal("__name__")
  assert config.is_internal("__secret")
  assert not config.is_internal("_private")
  assert not config.is_internal("public")


def test_empty_prefix_rejected():
  with pytest.raises(ValidationError):
    InspectorConfig(internal_prefix="")
