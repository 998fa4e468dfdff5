"""
Host Transformation Session.

The rewrite engine never inspects node shapes itself. Everything it needs from
the host tree library is injected through a ``TransformationContext``:

1.  **Node factory** for building replacement nodes.
2.  **Compiler options** snapshot for the current session.
3.  **Child rewriting**: "rewrite the children of this node with this
    per-node callback".

``CSTTransformationContext`` is the LibCST implementation used by default.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Tuple, Union

import libcst as cst

from visit_transform.config import CompilerOptions
from visit_transform.core.errors import InvalidOutcomeError
from visit_transform.core.factory import NodeFactory

REMOVE = cst.RemovalSentinel.REMOVE

# What a per-child visitor hands back to the host: the kept or replacement
# node, REMOVE, or an ordered tuple of replacement nodes.
ChildResult = Union[cst.CSTNode, cst.RemovalSentinel, Tuple[cst.CSTNode, ...]]
ChildVisitor = Callable[[cst.CSTNode], ChildResult]


class TransformationContext(ABC):
  """
  Abstract rewrite session supplied by the host pipeline.
  """

  @property
  @abstractmethod
  def factory(self) -> NodeFactory:
    """The node factory for replacement nodes."""

  @abstractmethod
  def get_compiler_options(self) -> CompilerOptions:
    """Returns a snapshot of the effective compiler options."""

  def is_node(self, value: Any) -> bool:
    """
    Tells whether a visit result can stand in for a node of this host.

    Hosts without a common node base class accept anything.
    """
    return True

  @abstractmethod
  def visit_each_child(self, node: Any, visitor: ChildVisitor) -> Any:
    """
    Rewrites the direct children of ``node`` using ``visitor``.

    Args:
        node: The parent whose children are visited, in source order.
        visitor: Per-child callback.

    Returns:
        ``node`` with its children replaced according to the visitor results.
    """


class CSTTransformationContext(TransformationContext):
  """
  Rewrite session over LibCST trees.
  """

  def __init__(
    self,
    compiler_options: Optional[CompilerOptions] = None,
    factory: Optional[NodeFactory] = None,
  ) -> None:
    """
    Initializes the session.

    Args:
        compiler_options: Effective options; defaults to ``CompilerOptions()``.
        factory: Node factory; defaults to a plain ``NodeFactory``.
    """
    self._compiler_options = compiler_options or CompilerOptions()
    self._factory = factory or NodeFactory()

  @property
  def factory(self) -> NodeFactory:
    return self._factory

  def get_compiler_options(self) -> CompilerOptions:
    return self._compiler_options.model_copy(deep=True)

  def is_node(self, value: Any) -> bool:
    return isinstance(value, cst.CSTNode)

  def visit_each_child(self, node: cst.CSTNode, visitor: ChildVisitor) -> cst.CSTNode:
    return visit_each_child(node, visitor)


class _ChildRewriter(cst.CSTTransformer):
  """
  Transformer that descends exactly one level below ``root``.

  LibCST calls ``on_leave`` for a child right after its ``on_visit`` when the
  child's own children are skipped, so one pending slot is enough even when
  the same node object appears several times.
  """

  def __init__(self, root: cst.CSTNode, visitor: ChildVisitor) -> None:
    super().__init__()
    self._root = root
    self._visitor = visitor
    self._pending: Any = None

  def on_visit(self, node: cst.CSTNode) -> bool:
    if node is self._root:
      return True
    self._pending = self._visitor(node)
    return False

  def on_leave(
    self, original_node: cst.CSTNode, updated_node: cst.CSTNode
  ) -> Union[cst.CSTNode, cst.RemovalSentinel, cst.FlattenSentinel]:
    if original_node is self._root:
      return updated_node

    result, self._pending = self._pending, None
    if result is REMOVE:
      return cst.RemovalSentinel.REMOVE
    if isinstance(result, tuple):
      # A single element also fits slots that do not accept sequences.
      if len(result) == 1:
        result = result[0]
      else:
        return cst.FlattenSentinel(list(result))
    if isinstance(result, cst.CSTNode):
      return result
    raise InvalidOutcomeError(result, original_node)


def visit_each_child(node: cst.CSTNode, visitor: ChildVisitor) -> cst.CSTNode:
  """
  Rewrites the direct children of a LibCST node.

  Errors raised by LibCST while validating the rebuilt parent (e.g. removing
  a required child) propagate unchanged.

  Args:
      node: Parent node.
      visitor: Callback applied to each direct child, in source order.

  Returns:
      The parent with rewritten children.
  """
  return node.visit(_ChildRewriter(node, visitor))
