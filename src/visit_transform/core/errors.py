"""
Exception hierarchy for the transformer core.

Two families of failure exist:

1.  **Configuration errors** are raised synchronously while building a
    transformer (unknown level, missing capability argument). They indicate a
    programming error by the caller.
2.  **Traversal errors** are raised while a source unit is walked. Exceptions
    thrown by the visit function itself are never wrapped; the classes below
    only cover misuse detected by the core or the host adapter.
"""

from typing import Any, Optional


class TransformError(Exception):
  """Base class for all errors raised by visit-transform."""


class InvalidLevelError(TransformError, TypeError):
  """
  Raised when a transformer is requested for an unknown capability level.
  """

  def __init__(self, level: Any) -> None:
    self.level = level
    super().__init__(f"'{level}' isn't a valid transformer factory type.")


class CapabilityArgumentError(TransformError, ValueError):
  """
  Raised when a factory is called without a capability its level guarantees.
  """

  def __init__(self, name: str, level: Any) -> None:
    self.name = name
    self.level = level
    super().__init__(f"The '{level}' transformer factory requires a '{name}' argument, got None.")


class MissingCapabilityError(TransformError, AttributeError):
  """
  Raised when a visit function reads a capability its context does not carry.
  """

  def __init__(self, name: str, level: Any) -> None:
    self.name = name
    self.level = level
    super().__init__(f"'{name}' is not available to visitors declared at the '{level}' level.")


class FieldAlreadySetError(TransformError, AttributeError):
  """
  Raised when an already initialized context field is assigned again.
  """

  def __init__(self, name: str, level: Any) -> None:
    self.name = name
    self.level = level
    super().__init__(f"Context field '{name}' is already set for this traversal ({level} level).")


class InvalidOutcomeError(TransformError, TypeError):
  """
  Raised when a visit function returns something that is not a node,
  a sequence of nodes, ``REMOVE`` or ``None``.
  """

  def __init__(self, outcome: Any, node: Optional[Any] = None) -> None:
    self.outcome = outcome
    self.node = node
    where = f" while visiting {type(node).__name__}" if node is not None else ""
    super().__init__(f"Invalid visit result of type {type(outcome).__name__}{where}.")


class RootLiftError(TransformError, ValueError):
  """
  Raised when the root of a source unit is replaced by more than one node.
  """

  def __init__(self, count: int) -> None:
    self.count = count
    super().__init__(f"The root node can only be replaced by a single node, got {count}.")
