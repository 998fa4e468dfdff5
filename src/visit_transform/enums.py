"""
Enumerations for visit-transform.

This module defines the closed set of capability levels a transformer can be
declared with. The level decides which fields the visitor context exposes and
which construction arguments the transformer factory expects.
"""

from enum import Enum


class CapabilityLevel(str, Enum):
  """
  Declared tier of optional context capabilities.

  The string values are the public level tags accepted by ``transform``.
  """

  RAW = "raw"
  CONFIG = "config"
  CHECKER = "checker"
  COMPILER_OPTIONS = "compilerOptions"  # Synonym of CONFIG reading the third argument
  PROGRAM = "program"

  def __str__(self) -> str:
    return self.value
