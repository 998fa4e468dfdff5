"""
Rewrite Engine.

Builds the ``raw`` source transformer every capability level delegates to.
A source transformer performs one synchronous pre-order walk of a tree and
interprets each visit result:

- ``None``: keep the node and rewrite its children with the same step.
- ``REMOVE``: drop the node and its subtree.
- a node: substitute it; it is not visited.
- a list, tuple or ``FlattenSentinel``: substitute the nodes in order; none
  of them is visited.

Errors raised by the visit function or by the host's child primitive are not
caught here.
"""

from typing import Any, Callable, Optional, Type

import libcst as cst

from visit_transform.enums import CapabilityLevel
from visit_transform.core.context import RawVisitorContext
from visit_transform.core.errors import InvalidOutcomeError, RootLiftError
from visit_transform.core.host import REMOVE, ChildResult, TransformationContext

VisitFunction = Callable[[Any, Any], Any]
SourceTransformer = Callable[[Any], Optional[Any]]
ContextInitializer = Callable[[Any], None]


def normalize_outcome(outcome: Any) -> Optional[ChildResult]:
  """
  Maps a visit result onto the host child-result vocabulary.

  Args:
      outcome: Value returned by the visit function.

  Returns:
      ``None`` for "recurse", ``REMOVE``, a tuple of nodes, or the node itself.
  """
  if outcome is None or outcome is REMOVE:
    return outcome
  if isinstance(outcome, cst.FlattenSentinel):
    return tuple(outcome.nodes)
  if isinstance(outcome, (list, tuple)):
    return tuple(outcome)
  return outcome


def make_raw_transformer(
  transformation_context: TransformationContext,
  raw_visit: VisitFunction,
  context_class: Type[RawVisitorContext] = RawVisitorContext,
  initializer: Optional[ContextInitializer] = None,
  level: CapabilityLevel = CapabilityLevel.RAW,
) -> SourceTransformer:
  """
  Binds a visit function to a host session.

  Args:
      transformation_context: Host session providing the child primitive.
      raw_visit: Called as ``raw_visit(ctx, node)`` for every visited node.
      context_class: Visitor context variant to instantiate per traversal.
      initializer: Fills level specific fields once, before the root is visited.
      level: Level tag recorded on the context.

  Returns:
      A function mapping one tree root to its rewritten form, or ``None`` if
      the root was removed.
  """

  def transform_source(source_file: Any) -> Optional[Any]:
    ctx = context_class(source_file, transformation_context, level=level)
    if initializer is not None:
      initializer(ctx)

    def step(node: Any) -> ChildResult:
      outcome = normalize_outcome(raw_visit(ctx, node))
      if outcome is None:
        return transformation_context.visit_each_child(node, step)
      return outcome

    root = _lift_root(step(source_file))
    if root is not None and not transformation_context.is_node(root):
      raise InvalidOutcomeError(root, source_file)
    return root

  return transform_source


def _lift_root(result: ChildResult) -> Optional[Any]:
  """Reduces the root's child result to a single root or None."""
  if result is REMOVE:
    return None
  if isinstance(result, tuple):
    if len(result) > 1:
      raise RootLiftError(len(result))
    return result[0] if result else None
  return result
