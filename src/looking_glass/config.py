"""
Inspector Configuration Store.

Settings are resolved from the ``[tool.looking_glass]`` table of the nearest
``pyproject.toml`` and overridden by explicit arguments (usually CLI flags).
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_INTERNAL_PREFIX = "__"


class InspectorConfig(BaseModel):
  """
  Configuration shared by the namespace traverser and the global classifier.
  """

  internal_prefix: str = Field(
    DEFAULT_INTERNAL_PREFIX,
    description="Names starting with this prefix are runtime-internal and never reported as globals.",
  )
  include_foundational: bool = Field(False, description="If True, traverse into standard library / builtin modules.")
  include_imported: bool = Field(
    False, description="If True, follow modules bound by import, not only owned submodules."
  )
  foundational_modules: List[str] = Field(
    default_factory=list, description="Extra top-level packages treated as foundational."
  )

  @field_validator("internal_prefix")
  @classmethod
  def validate_prefix(cls, v: str) -> str:
    """
    Ensures the internal-name prefix is usable.

    Args:
        v (str): The configured prefix.

    Returns:
        str: The prefix, unchanged.

    Raises:
        ValueError: If the prefix is empty (every name would be internal).
    """
    if not v:
      raise ValueError("internal_prefix must not be empty")
    return v

  def is_internal(self, name: str) -> bool:
    """
    Checks whether a binding name is runtime-internal.

    Args:
        name (str): The binding name.

    Returns:
        bool: True if the name starts with the internal prefix.
    """
    return name.startswith(self.internal_prefix)

  @classmethod
  def load(
    cls,
    internal_prefix: Optional[str] = None,
    include_foundational: Optional[bool] = None,
    include_imported: Optional[bool] = None,
    foundational_modules: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "InspectorConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        internal_prefix (Optional[str]): Override for the internal-name prefix.
        include_foundational (Optional[bool]): Override for foundational traversal.
        include_imported (Optional[bool]): Override for following imported modules.
        foundational_modules (Optional[List[str]]): Extra foundational packages,
            merged with the TOML list.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        InspectorConfig: The fully resolved configuration object.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    final_prefix = internal_prefix or toml_config.get("internal_prefix", DEFAULT_INTERNAL_PREFIX)

    if include_foundational is not None:
      final_foundational = include_foundational
    else:
      final_foundational = toml_config.get("include_foundational", False)

    if include_imported is not None:
      final_imported = include_imported
    else:
      final_imported = toml_config.get("include_imported", False)

    extra_modules = list(toml_config.get("foundational_modules", []))
    for name in foundational_modules or []:
      if name not in extra_modules:
        extra_modules.append(name)

    return cls(
      internal_prefix=final_prefix,
      include_foundational=final_foundational,
      include_imported=final_imported,
      foundational_modules=extra_modules,
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the start directory and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      return data.get("tool", {}).get("looking_glass", {}), parent

  return {}, None
