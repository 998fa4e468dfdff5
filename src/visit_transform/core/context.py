"""
Visitor Context Module.

This module provides the context objects bound to every call of a user visit
function during the traversal of one source unit. There is one class per
capability tier:

- ``RawVisitorContext``: source file, transformation session, node factory,
  compiler options and the per-traversal blackboard.
- ``ConfigVisitorContext``: adds the caller supplied ``config`` mapping.
- ``CheckerVisitorContext``: adds a ``type_checker``.
- ``ProgramVisitorContext``: adds the whole ``program``.

Every capability is a set-once field. The composer fills the optional ones at
traversal start; a visit function may read them but never reassign them.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Set, Type, TypeVar

from pydantic import BaseModel

from visit_transform.enums import CapabilityLevel
from visit_transform.core.errors import FieldAlreadySetError, MissingCapabilityError

T = TypeVar("T", bound=BaseModel)

# Every optional capability any tier may expose.
OPTIONAL_CAPABILITIES = ("config", "type_checker", "program")


class capability:
  """
  Descriptor for a set-once context field.

  Reading an unfilled field raises ``MissingCapabilityError``; writing a
  filled one raises ``FieldAlreadySetError``.
  """

  def __set_name__(self, owner: type, name: str) -> None:
    self.name = name

  def __get__(self, ctx: Optional["RawVisitorContext"], owner: Optional[type] = None) -> Any:
    if ctx is None:
      return self
    if self.name not in ctx._filled:
      raise MissingCapabilityError(self.name, ctx.level)
    return ctx._values[self.name]

  def __set__(self, ctx: "RawVisitorContext", value: Any) -> None:
    if self.name in ctx._filled:
      raise FieldAlreadySetError(self.name, ctx.level)
    ctx._values[self.name] = value
    ctx._filled.add(self.name)


class RawVisitorContext:
  """
  Context available at every level.

  One instance exists per traversal; all node visits of that traversal
  receive the same object.
  """

  level = CapabilityLevel.RAW

  source_file = capability()
  transformation_context = capability()
  node_factory = capability()
  compiler_options = capability()
  blackboard = capability()

  def __init__(
    self,
    source_file: Any,
    transformation_context: Any,
    level: Optional[CapabilityLevel] = None,
  ) -> None:
    """
    Binds the base fields for one traversal.

    Args:
        source_file: Root of the tree being rewritten.
        transformation_context: The host rewrite session.
        level: Declared level tag, when it differs from the class default.
    """
    self._values: Dict[str, Any] = {}
    self._filled: Set[str] = set()
    if level is not None:
      self.level = CapabilityLevel(level)

    self.source_file = source_file
    self.transformation_context = transformation_context
    self.node_factory = transformation_context.factory
    self.compiler_options = transformation_context.get_compiler_options()
    self.blackboard = {}

  def __getattr__(self, name: str) -> Any:
    # Only reached for attributes this tier does not define.
    if name in OPTIONAL_CAPABILITIES:
      raise MissingCapabilityError(name, self.level)
    raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

  def __setattr__(self, name: str, value: Any) -> None:
    if name in OPTIONAL_CAPABILITIES and not isinstance(getattr(type(self), name, None), capability):
      raise MissingCapabilityError(name, self.level)
    super().__setattr__(name, value)

  def is_filled(self, name: str) -> bool:
    """Returns True once the field has been assigned."""
    return name in self._filled

  def fill(self, name: str, value: Any) -> bool:
    """
    Idempotently initializes a field.

    Args:
        name: Field name.
        value: Value to assign if the field is still empty.

    Returns:
        bool: True if the value was assigned, False if the field was already set.
    """
    if self.is_filled(name):
      return False
    setattr(self, name, value)
    return True

  def fill_from(self, name: str, supplier: Callable[[], Any]) -> bool:
    """
    Like ``fill``, but computes the value only when the field is empty.

    Args:
        name: Field name.
        supplier: Zero-argument callable producing the value.

    Returns:
        bool: True if the value was assigned.
    """
    if self.is_filled(name):
      return False
    setattr(self, name, supplier())
    return True

  def __repr__(self) -> str:
    fields = ", ".join(sorted(self._filled))
    return f"<{type(self).__name__} level={self.level.value!r} fields=[{fields}]>"


class ConfigVisitorContext(RawVisitorContext):
  """
  Context carrying caller supplied configuration.

  Used by both the ``config`` and the ``compilerOptions`` levels.
  """

  level = CapabilityLevel.CONFIG

  config = capability()

  def get_config(self, key: str, default: Any = None) -> Any:
    """Retrieve a raw value from the configuration mapping."""
    return self.config.get(key, default)

  def validate_config(self, model: Type[T]) -> T:
    """
    Validates the configuration against a visitor specific Pydantic schema.

    Keys the schema does not declare are dropped before validation, so a
    single configuration mapping can serve several visitors.

    Args:
        model: Pydantic model describing the expected settings.

    Returns:
        An instance of ``model``.
    """
    config: Mapping[str, Any] = self.config
    relevant_keys = model.model_fields.keys()
    subset = {k: v for k, v in config.items() if k in relevant_keys}
    return model.model_validate(subset)


class CheckerVisitorContext(ConfigVisitorContext):
  """
  Context carrying a semantic query capability.
  """

  level = CapabilityLevel.CHECKER

  type_checker = capability()


class ProgramVisitorContext(CheckerVisitorContext):
  """
  Context carrying the whole-program model and the type checker derived from it.
  """

  level = CapabilityLevel.PROGRAM

  program = capability()


CONTEXT_CLASSES: Dict[CapabilityLevel, Type[RawVisitorContext]] = {
  CapabilityLevel.RAW: RawVisitorContext,
  CapabilityLevel.CONFIG: ConfigVisitorContext,
  CapabilityLevel.CHECKER: CheckerVisitorContext,
  CapabilityLevel.COMPILER_OPTIONS: ConfigVisitorContext,
  CapabilityLevel.PROGRAM: ProgramVisitorContext,
}
