"""
Transformer Core Package.

- ``composer``: ``transform(level, visit)`` and level dispatch.
- ``engine``: the raw pre-order rewrite walk.
- ``context``: visitor context variants.
- ``host``: the injected host session (LibCST by default).
- ``factory``: replacement node builders.
- ``pipeline``: applying transformers to source units.
"""

from visit_transform.core.composer import transform
from visit_transform.core.context import (
  CheckerVisitorContext,
  ConfigVisitorContext,
  ProgramVisitorContext,
  RawVisitorContext,
)
from visit_transform.core.engine import make_raw_transformer
from visit_transform.core.host import REMOVE, CSTTransformationContext, TransformationContext
from visit_transform.core.pipeline import TransformPipeline, TransformResult, bind

__all__ = [
  "transform",
  "make_raw_transformer",
  "REMOVE",
  "RawVisitorContext",
  "ConfigVisitorContext",
  "CheckerVisitorContext",
  "ProgramVisitorContext",
  "TransformationContext",
  "CSTTransformationContext",
  "TransformPipeline",
  "TransformResult",
  "bind",
]
