"""
Context Composer.

``transform(level, visit)`` turns a single visit function into a transformer
factory. Each level wraps the visit function with an initializer for its extra
context fields and delegates to the ``raw`` factory, which owns the actual
walk:

======================  ===============================================  ================================
Level                   Factory signature                                Extra context fields
======================  ===============================================  ================================
``raw``                 ``(transformation_context)``                     none
``config``              ``(transformation_context, config=None)``        ``config``
``checker``             ``(transformation_context, type_checker,         ``type_checker``, ``config``
                        config=None)``
``compilerOptions``     ``(transformation_context, _unused=None,         ``config``
                        config=None)``
``program``             ``(transformation_context, program,              ``program``, ``type_checker``,
                        config=None)``                                   ``config``
======================  ===============================================  ================================

The level is validated when ``transform`` is called, never during traversal.
"""

from typing import Any, Callable, Dict, Optional, Union

from visit_transform.enums import CapabilityLevel
from visit_transform.core.context import (
  CONTEXT_CLASSES,
  CheckerVisitorContext,
  ConfigVisitorContext,
  ProgramVisitorContext,
)
from visit_transform.core.engine import SourceTransformer, VisitFunction, make_raw_transformer
from visit_transform.core.errors import CapabilityArgumentError, InvalidLevelError
from visit_transform.core.host import TransformationContext

TransformerFactory = Callable[..., SourceTransformer]
LevelLike = Union[CapabilityLevel, str]


def coerce_level(level: Any) -> CapabilityLevel:
  """
  Validates a level tag.

  Args:
      level: A ``CapabilityLevel`` or one of its string values.

  Returns:
      CapabilityLevel: The matching member.

  Raises:
      InvalidLevelError: If the value is not one of the five level tags.
  """
  try:
    return CapabilityLevel(level)
  except ValueError:
    raise InvalidLevelError(level) from None


def transform(level: LevelLike, visit: Optional[VisitFunction] = None) -> Any:
  """
  Creates a transformer factory from a visit function.

  The visit function is called as ``visit(ctx, node)`` once per visited node.
  ``ctx`` is the traversal's visitor context, of the variant matching
  ``level``. Returning ``None`` recurses into the node's children, ``REMOVE``
  deletes the node, and a node or sequence of nodes replaces it.

  Can also be used as a decorator: ``@transform("config")``.

  Args:
      level: Capability level the visit function requires.
      visit: The per-node visit function.

  Returns:
      The level specific transformer factory, or a decorator producing one.

  Raises:
      InvalidLevelError: If ``level`` is unknown.
  """
  resolved = coerce_level(level)
  if visit is None:
    return lambda fn: transform(resolved, fn)
  return _BUILDERS[resolved](resolved, visit)


def _as_config(config: Any) -> Any:
  return {} if config is None else config


def _raw(level: CapabilityLevel, visit: VisitFunction) -> TransformerFactory:
  def factory(transformation_context: TransformationContext) -> SourceTransformer:
    return make_raw_transformer(transformation_context, visit, CONTEXT_CLASSES[level], level=level)

  return factory


def _config(level: CapabilityLevel, visit: VisitFunction) -> TransformerFactory:
  def factory(transformation_context: TransformationContext, config: Any = None) -> SourceTransformer:
    def initialize(ctx: ConfigVisitorContext) -> None:
      ctx.fill("config", _as_config(config))

    return make_raw_transformer(transformation_context, visit, CONTEXT_CLASSES[level], initialize, level)

  return factory


def _compiler_options(level: CapabilityLevel, visit: VisitFunction) -> TransformerFactory:
  # Same context as ``config``; the first construction argument is ignored.
  def factory(
    transformation_context: TransformationContext, _unused: Any = None, config: Any = None
  ) -> SourceTransformer:
    def initialize(ctx: ConfigVisitorContext) -> None:
      ctx.fill("config", _as_config(config))

    return make_raw_transformer(transformation_context, visit, CONTEXT_CLASSES[level], initialize, level)

  return factory


def _checker(level: CapabilityLevel, visit: VisitFunction) -> TransformerFactory:
  def factory(
    transformation_context: TransformationContext, type_checker: Any, config: Any = None
  ) -> SourceTransformer:
    if type_checker is None:
      raise CapabilityArgumentError("type_checker", level)

    def initialize(ctx: CheckerVisitorContext) -> None:
      ctx.fill("type_checker", type_checker)
      ctx.fill("config", _as_config(config))

    return make_raw_transformer(transformation_context, visit, CONTEXT_CLASSES[level], initialize, level)

  return factory


def _program(level: CapabilityLevel, visit: VisitFunction) -> TransformerFactory:
  def factory(transformation_context: TransformationContext, program: Any, config: Any = None) -> SourceTransformer:
    if program is None:
      raise CapabilityArgumentError("program", level)

    def initialize(ctx: ProgramVisitorContext) -> None:
      ctx.fill("program", program)
      ctx.fill_from("type_checker", ctx.program.get_type_checker)
      ctx.fill("config", _as_config(config))

    return make_raw_transformer(transformation_context, visit, CONTEXT_CLASSES[level], initialize, level)

  return factory


_BUILDERS: Dict[CapabilityLevel, Callable[[CapabilityLevel, VisitFunction], TransformerFactory]] = {
  CapabilityLevel.RAW: _raw,
  CapabilityLevel.CONFIG: _config,
  CapabilityLevel.CHECKER: _checker,
  CapabilityLevel.COMPILER_OPTIONS: _compiler_options,
  CapabilityLevel.PROGRAM: _program,
}
