"""
Orchestration logic for running transformers over source units.

This module provides the ``TransformPipeline``, the host side of the
transformer contract: it owns a ``TransformationContext``, binds each
transformer factory to it and applies the resulting source transformers, in
order, to one unit at a time.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

import libcst as cst
from pydantic import BaseModel, Field

from visit_transform.core.engine import SourceTransformer
from visit_transform.core.host import CSTTransformationContext, TransformationContext
from visit_transform.utils.console import log_success, log_warning

logger = logging.getLogger(__name__)

BoundFactory = Callable[[TransformationContext], SourceTransformer]


def bind(factory: Callable[..., SourceTransformer], *args: Any) -> BoundFactory:
  """
  Fixes the construction arguments that follow the transformation context.

  Args:
      factory: A level factory returned by ``transform``.
      *args: Construction arguments (e.g. ``type_checker, config``).

  Returns:
      A factory taking only the transformation context.
  """

  def bound(transformation_context: TransformationContext) -> SourceTransformer:
    return factory(transformation_context, *args)

  return bound


class TransformResult(BaseModel):
  """
  Outcome of transforming a single source unit.
  """

  path: Optional[str] = Field(None, description="Identifier of the unit, if any.")
  code: str = Field(default="", description="The rewritten source code.")
  removed: bool = Field(False, description="True if a transformer deleted the root.")
  success: bool = Field(True, description="False if the unit was skipped after an error.")
  errors: List[str] = Field(default_factory=list, description="Error messages for a skipped unit.")

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0


class TransformPipeline:
  """
  Applies a sequence of transformers to source units.
  """

  def __init__(
    self,
    factories: List[BoundFactory],
    context: Optional[TransformationContext] = None,
  ) -> None:
    """
    Initializes the pipeline.

    Args:
        factories: Bound transformer factories, applied in order.
        context: Host session; defaults to a LibCST session with default options.
    """
    self.factories = factories
    self.context = context or CSTTransformationContext()

  def run(self, module: cst.Module) -> Optional[cst.Module]:
    """
    Executes every transformer on the module.

    Args:
        module: The tree to transform.

    Returns:
        The rewritten tree, or None if a transformer removed the root.
    """
    current: Optional[cst.Module] = module
    for factory in self.factories:
      current = factory(self.context)(current)
      if current is None:
        logger.debug("Root removed; skipping remaining transformers")
        break
    return current

  def run_code(self, code: str, path: Optional[str] = None) -> TransformResult:
    """
    Parses, transforms and renders one unit.

    Args:
        code: Source text.
        path: Optional identifier reported in the result.

    Returns:
        TransformResult: The rendered unit.
    """
    module = cst.parse_module(code)
    result = self.run(module)
    if result is None:
      return TransformResult(path=path, code="", removed=True)
    return TransformResult(path=path, code=result.code)

  def run_sources(self, sources: Mapping[str, str], skip_failures: bool = False) -> Dict[str, TransformResult]:
    """
    Transforms several units independently.

    Args:
        sources: Mapping of path to source text.
        skip_failures: If True, a failing unit is logged and reported instead
            of aborting the whole run.

    Returns:
        Dict[str, TransformResult]: Results keyed by path, in input order.
    """
    results: Dict[str, TransformResult] = {}
    for path, code in sources.items():
      try:
        results[path] = self.run_code(code, path=path)
      except Exception as e:
        if not skip_failures:
          raise
        log_warning(f"Skipping [path]{path}[/path]: {type(e).__name__}: {e}")
        results[path] = TransformResult(path=path, code=code, success=False, errors=[str(e)])

    failed = sum(1 for r in results.values() if not r.success)
    if not failed:
      log_success(f"Transformed {len(results)} unit(s)")
    return results
