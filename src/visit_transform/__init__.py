"""
visit-transform Package.

Builds syntax-tree rewriting passes from a single per-node visit function.
A visit function declares the capability level it needs (plain traversal,
user configuration, a type checker, or the whole program) and receives a
context exposing exactly those capabilities.

Usage
-----

One-shot Conversion
^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import libcst as cst
    import visit_transform as vt

    def drop_prints(ctx, node):
      if isinstance(node, cst.SimpleStatementLine) and "print(" in ctx.source_file.code_for_node(node):
        return vt.REMOVE

    print(vt.transform_code("x = 1\\nprint(x)\\n", "raw", drop_prints))
    # x = 1

Pipeline Usage
^^^^^^^^^^^^^^

.. code-block:: python

    from visit_transform import TransformPipeline, bind, transform

    @transform("config")
    def rename(ctx, node):
      if isinstance(node, cst.Name) and node.value == ctx.config["old"]:
        return node.with_changes(value=ctx.config["new"])

    pipeline = TransformPipeline([bind(rename, {"old": "a", "new": "b"})])
    result = pipeline.run_code("a = a + 1")
    print(result.code)
    # b = b + 1
"""

from typing import Any, Optional

from visit_transform.config import CompilerOptions
from visit_transform.enums import CapabilityLevel
from visit_transform.core.composer import transform
from visit_transform.core.context import (
  CheckerVisitorContext,
  ConfigVisitorContext,
  ProgramVisitorContext,
  RawVisitorContext,
)
from visit_transform.core.errors import (
  CapabilityArgumentError,
  FieldAlreadySetError,
  InvalidLevelError,
  InvalidOutcomeError,
  MissingCapabilityError,
  RootLiftError,
  TransformError,
)
from visit_transform.core.factory import NodeFactory
from visit_transform.core.host import REMOVE, CSTTransformationContext, TransformationContext
from visit_transform.core.pipeline import TransformPipeline, TransformResult, bind
from visit_transform.semantics.program import CSTProgram, CSTTypeChecker
from visit_transform.utils.console import configure_logging

__version__ = "0.1.0"


def transform_code(
  code: str,
  level: Any,
  visit: Any,
  *args: Any,
  compiler_options: Optional[CompilerOptions] = None,
) -> str:
  """
  Runs one visit function over a string of Python code.

  This is a convenience wrapper around ``transform`` and ``TransformPipeline``.

  Args:
      code (str): The source code to rewrite.
      level: Capability level of ``visit``.
      visit: The per-node visit function.
      *args: Construction arguments after the transformation context
          (e.g. ``config`` for the ``config`` level).
      compiler_options (CompilerOptions, optional): Options exposed to the visitor.

  Returns:
      str: The rewritten code, or an empty string if the root was removed.
  """
  factory = transform(level, visit)
  context = CSTTransformationContext(compiler_options=compiler_options)
  pipeline = TransformPipeline([bind(factory, *args)], context=context)
  return pipeline.run_code(code).code


__all__ = [
  "transform",
  "transform_code",
  "CapabilityLevel",
  "CompilerOptions",
  "REMOVE",
  "RawVisitorContext",
  "ConfigVisitorContext",
  "CheckerVisitorContext",
  "ProgramVisitorContext",
  "TransformationContext",
  "CSTTransformationContext",
  "NodeFactory",
  "TransformPipeline",
  "TransformResult",
  "bind",
  "CSTProgram",
  "CSTTypeChecker",
  "TransformError",
  "InvalidLevelError",
  "CapabilityArgumentError",
  "MissingCapabilityError",
  "FieldAlreadySetError",
  "InvalidOutcomeError",
  "RootLiftError",
  "configure_logging",
  "__version__",
]
