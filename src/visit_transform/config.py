"""
Compiler Options Store.

Defines the ``CompilerOptions`` snapshot that a transformation session hands
to every visitor context, and the loader resolving it from ``pyproject.toml``.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

logger = logging.getLogger(__name__)

TOOL_SECTION = "visit_transform"


class CompilerOptions(BaseModel):
  """
  Effective compiler configuration for one transformation session.

  Unknown keys are kept as extra fields, so host specific options survive
  the round trip through the model.
  """

  model_config = ConfigDict(extra="allow")

  python_version: Optional[str] = Field(None, description="Target grammar version (e.g. '3.12').")
  strict: bool = Field(False, description="Hint for visitors to fail instead of passing code through.")
  encoding: str = Field("utf-8", description="Source encoding used when reading and writing units.")

  def get(self, key: str, default: Any = None) -> Any:
    """
    Reads a declared or extra option by name.

    Args:
        key (str): Option name.
        default (Any): Value returned when the option is absent.

    Returns:
        Any: The option value.
    """
    if key in type(self).model_fields:
      return getattr(self, key)
    return (self.model_extra or {}).get(key, default)

  @classmethod
  def load(cls, search_path: Optional[Path] = None, **overrides: Any) -> "CompilerOptions":
    """
    Loads options from pyproject.toml and applies explicit overrides.

    Overrides whose value is ``None`` are ignored so that unset CLI style
    arguments do not shadow file configuration.

    Args:
        search_path (Optional[Path]): Directory to start searching for TOML config.
        **overrides: Option values taking priority over the file.

    Returns:
        CompilerOptions: The resolved options.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    final = dict(toml_config)
    final.update({k: v for k, v in overrides.items() if v is not None})
    return cls.model_validate(final)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the directory and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring malformed %s: %s", toml_path, e)
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None
