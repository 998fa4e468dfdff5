"""
Tests for the Raw Rewrite Engine.

Verifies:
1. Pre-order traversal and default recursion (identity).
2. Deletion, single replacement and multi-node replacement.
3. Replacement nodes are not re-visited.
4. Root handling (removal, lifting).
5. Blackboard lifetime.
6. Error propagation.
7. Independence from the host tree shape (toy host).
"""

from dataclasses import dataclass, field
from typing import List

import libcst as cst
import pytest

from cst_helpers import is_assignment_to, statement_names
from visit_transform.config import CompilerOptions
from visit_transform.core.context import RawVisitorContext
from visit_transform.core.engine import make_raw_transformer, normalize_outcome
from visit_transform.core.errors import InvalidOutcomeError, RootLiftError
from visit_transform.core.factory import NodeFactory
from visit_transform.core.host import REMOVE, TransformationContext


def test_recursion_default_is_identity(tc, module):
  """A visitor that never decides leaves the tree structurally unchanged."""
  visited = []

  def visit(ctx, node):
    visited.append(node)

  result = make_raw_transformer(tc, visit)(module)

  assert result.deep_equals(module)
  assert result.code == module.code
  assert len(visited) > 10


def test_pre_order_visits_parent_before_children(tc, module):
  names = []
  first = []

  def visit(ctx, node):
    if not first:
      first.append(node)
    if isinstance(node, cst.Name):
      names.append(node.value)

  make_raw_transformer(tc, visit)(module)

  assert first[0] is module
  assert names == ["a", "b", "foo", "c"]


def test_delete_interior_node(tc, module):
  """Deleting B removes its subtree and keeps siblings in order."""
  names = []

  def visit(ctx, node):
    if isinstance(node, cst.Name):
      names.append(node.value)
    if is_assignment_to(node, "b"):
      return REMOVE

  result = make_raw_transformer(tc, visit)(module)

  assert statement_names(result) == ["a", "c"]
  assert "foo" not in names
  assert result.code == "a = 1\nc = 3\n"


def test_replace_single_node_is_not_revisited(tc, module):
  replacement = cst.parse_statement("y = bar(3)\n")
  seen = []

  def visit(ctx, node):
    seen.append(node)
    if is_assignment_to(node, "b"):
      return replacement

  result = make_raw_transformer(tc, visit)(module)

  assert statement_names(result) == ["a", "y", "c"]
  assert result.body[1] is replacement
  visited_names = [n.value for n in seen if isinstance(n, cst.Name)]
  assert "bar" not in visited_names
  assert "y" not in visited_names


def test_replace_expression_in_required_slot(tc, module):
  def visit(ctx, node):
    if isinstance(node, cst.Name) and node.value == "foo":
      return ctx.node_factory.dotted_name("jax.numpy.foo")

  result = make_raw_transformer(tc, visit)(module)

  assert result.code == "a = 1\nb = jax.numpy.foo(2)\nc = 3\n"


def test_single_element_sequence_fills_required_slot(tc, module):
  def visit(ctx, node):
    if isinstance(node, cst.Name) and node.value == "foo":
      return [cst.Name("bar")]

  result = make_raw_transformer(tc, visit)(module)

  assert result.code == "a = 1\nb = bar(2)\nc = 3\n"


@pytest.mark.parametrize("wrap", [list, tuple, cst.FlattenSentinel])
def test_replace_with_multiple_nodes(tc, module, wrap):
  first = cst.parse_statement("y1 = 1\n")
  second = cst.parse_statement("y2 = 2\n")

  def visit(ctx, node):
    if is_assignment_to(node, "b"):
      return wrap([first, second])

  result = make_raw_transformer(tc, visit)(module)

  assert statement_names(result) == ["a", "y1", "y2", "c"]


def test_empty_sequence_acts_as_removal(tc, module):
  def visit(ctx, node):
    if is_assignment_to(node, "b"):
      return []

  result = make_raw_transformer(tc, visit)(module)
  assert statement_names(result) == ["a", "c"]


def test_root_removed_returns_none(tc, module):
  assert make_raw_transformer(tc, lambda ctx, node: REMOVE)(module) is None


def test_root_replaced_by_single_element_sequence(tc, module):
  other = cst.parse_module("z = 0\n")

  def visit(ctx, node):
    if node is module:
      return [other]

  assert make_raw_transformer(tc, visit)(module) is other


def test_root_replaced_by_many_nodes_fails(tc, module):
  def visit(ctx, node):
    if node is module:
      return [cst.parse_module(""), cst.parse_module("")]

  with pytest.raises(RootLiftError):
    make_raw_transformer(tc, visit)(module)


def test_context_is_shared_within_traversal(tc, module):
  contexts = []

  def visit(ctx, node):
    contexts.append(ctx)

  make_raw_transformer(tc, visit)(module)

  assert all(c is contexts[0] for c in contexts)
  assert isinstance(contexts[0], RawVisitorContext)
  assert contexts[0].source_file is module
  assert contexts[0].transformation_context is tc


def test_blackboard_identity_and_accumulation(tc, module):
  boards = []
  counts = []

  def visit(ctx, node):
    boards.append(ctx.blackboard)
    ctx.blackboard["count"] = ctx.blackboard.get("count", 0) + 1
    counts.append(ctx.blackboard["count"])

  make_raw_transformer(tc, visit)(module)

  assert boards[0] is boards[-1]
  assert counts == list(range(1, len(counts) + 1))


def test_blackboard_is_fresh_per_traversal(tc, module):
  boards = []

  def visit(ctx, node):
    if node is ctx.source_file:
      boards.append(dict(ctx.blackboard))
      ctx.blackboard["seen"] = True
      boards.append(ctx.blackboard)

  transformer = make_raw_transformer(tc, visit)
  transformer(module)
  transformer(module)

  assert boards[0] == {}
  assert boards[2] == {}
  assert boards[1] is not boards[3]


def test_initializer_runs_once_before_first_visit(tc, module):
  calls = []

  def initialize(ctx):
    calls.append("init")

  def visit(ctx, node):
    calls.append("visit")

  make_raw_transformer(tc, visit, initializer=initialize)(module)

  assert calls[0] == "init"
  assert calls.count("init") == 1


def test_visitor_error_propagates_unchanged(tc, module):
  boom = RuntimeError("boom")

  def visit(ctx, node):
    if isinstance(node, cst.Name) and node.value == "foo":
      raise boom

  with pytest.raises(RuntimeError) as exc_info:
    make_raw_transformer(tc, visit)(module)
  assert exc_info.value is boom


def test_host_error_propagates(tc, module):
  """Removing a required child is rejected by LibCST itself."""

  def visit(ctx, node):
    if isinstance(node, cst.Integer):
      return REMOVE

  with pytest.raises(TypeError):
    make_raw_transformer(tc, visit)(module)


def test_invalid_outcome_is_rejected(tc, module):
  def visit(ctx, node):
    if isinstance(node, cst.Integer):
      return "not a node"

  with pytest.raises(InvalidOutcomeError):
    make_raw_transformer(tc, visit)(module)


def test_invalid_root_outcome_is_rejected(tc, module):
  def visit(ctx, node):
    if node is module:
      return 42

  with pytest.raises(InvalidOutcomeError):
    make_raw_transformer(tc, visit)(module)


def test_normalize_outcome():
  node = cst.Name("x")
  assert normalize_outcome(None) is None
  assert normalize_outcome(REMOVE) is REMOVE
  assert normalize_outcome(node) is node
  assert normalize_outcome([node]) == (node,)
  assert normalize_outcome(cst.FlattenSentinel([node, node])) == (node, node)


# --- Host independence ---


@dataclass
class ToyNode:
  label: str
  children: List["ToyNode"] = field(default_factory=list)


class ToyContext(TransformationContext):
  """Minimal host over ToyNode trees."""

  @property
  def factory(self) -> NodeFactory:
    return NodeFactory()

  def get_compiler_options(self) -> CompilerOptions:
    return CompilerOptions()

  def visit_each_child(self, node, visitor):
    children = []
    for child in node.children:
      result = visitor(child)
      if result is REMOVE:
        continue
      if isinstance(result, tuple):
        children.extend(result)
      else:
        children.append(result)
    return ToyNode(node.label, children)


def labels(node: ToyNode) -> List[str]:
  return [c.label for c in node.children]


def test_toy_host_delete_middle_child():
  root = ToyNode("R", [ToyNode("A"), ToyNode("B", [ToyNode("B1")]), ToyNode("C")])
  visited = []

  def visit(ctx, node):
    visited.append(node.label)
    if node.label == "B":
      return REMOVE

  result = make_raw_transformer(ToyContext(), visit)(root)

  assert labels(result) == ["A", "C"]
  assert visited == ["R", "A", "B", "C"]


def test_toy_host_replace_many_and_recurse():
  root = ToyNode("R", [ToyNode("X", [ToyNode("X1")]), ToyNode("Y")])

  def visit(ctx, node):
    if node.label == "X1":
      return [ToyNode("P"), ToyNode("Q")]

  result = make_raw_transformer(ToyContext(), visit)(root)

  assert labels(result) == ["X", "Y"]
  assert labels(result.children[0]) == ["P", "Q"]
