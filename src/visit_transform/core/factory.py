"""
Node Factory.

Builders for the replacement nodes a visit function returns. The factory is
reached through ``ctx.node_factory`` and wraps the LibCST node constructors and
parser entry points. Attributes it does not define are forwarded to the
``libcst`` module, so ``factory.Name("x")`` is ``libcst.Name("x")``.
"""

import math
from typing import Any, List, Union

import libcst as cst

ExpressionLike = Union[str, cst.BaseExpression]


class NodeFactory:
  """
  Constructs detached LibCST nodes.
  """

  def name(self, value: str) -> cst.Name:
    """Creates a bare identifier."""
    return cst.Name(value)

  def dotted_name(self, name_str: str) -> Union[cst.Name, cst.Attribute]:
    """
    Creates a Name or nested Attribute chain from a dotted path.

    Args:
        name_str: Path such as ``"jax.numpy.abs"``.

    Returns:
        The expression node.
    """
    parts = name_str.split(".")
    node: Union[cst.Name, cst.Attribute] = cst.Name(parts[0])
    for part in parts[1:]:
      node = cst.Attribute(value=node, attr=cst.Name(part))
    return node

  def literal(self, value: Any) -> cst.BaseExpression:
    """
    Converts a Python constant into its expression node.

    Args:
        value: ``None``, a bool, int, float or str.

    Returns:
        The literal node.

    Raises:
        TypeError: If the value has no literal form (including inf and nan).
    """
    if value is None or isinstance(value, bool):
      return cst.Name(repr(value))
    if isinstance(value, int):
      if value < 0:
        return cst.UnaryOperation(operator=cst.Minus(), expression=cst.Integer(str(-value)))
      return cst.Integer(str(value))
    if isinstance(value, float):
      if not math.isfinite(value):
        raise TypeError(f"Cannot build a literal node from non-finite float {value!r}")
      if math.copysign(1.0, value) < 0:
        return cst.UnaryOperation(operator=cst.Minus(), expression=cst.Float(repr(-value)))
      return cst.Float(repr(value))
    if isinstance(value, str):
      return cst.SimpleString(repr(value))
    raise TypeError(f"Cannot build a literal node from {type(value).__name__}")

  def expression(self, code: str) -> cst.BaseExpression:
    """Parses a single expression."""
    return cst.parse_expression(code)

  def statement(self, code: str) -> cst.BaseStatement:
    """Parses a single (possibly compound) statement."""
    return cst.parse_statement(code)

  def statements(self, code: str) -> List[cst.BaseStatement]:
    """Parses a block of statements, e.g. to splice several in place of one."""
    return list(cst.parse_module(code).body)

  def call(self, func: ExpressionLike, *args: Any, **kwargs: Any) -> cst.Call:
    """
    Creates a call expression.

    Args:
        func: Callee node or dotted path string.
        *args: Positional arguments; non-node values go through ``literal``.
        **kwargs: Keyword arguments; non-node values go through ``literal``.

    Returns:
        The call node.
    """
    callee = self.dotted_name(func) if isinstance(func, str) else func
    arg_nodes = [cst.Arg(value=self._as_expression(a)) for a in args]
    for key, value in kwargs.items():
      arg_nodes.append(
        cst.Arg(
          keyword=cst.Name(key),
          value=self._as_expression(value),
          equal=cst.AssignEqual(
            whitespace_before=cst.SimpleWhitespace(""),
            whitespace_after=cst.SimpleWhitespace(""),
          ),
        )
      )
    return cst.Call(func=callee, args=arg_nodes)

  def comment(self, text: str) -> cst.EmptyLine:
    """Creates a standalone comment line."""
    return cst.EmptyLine(comment=cst.Comment(f"# {text}"))

  def _as_expression(self, value: Any) -> cst.BaseExpression:
    if isinstance(value, cst.BaseExpression):
      return value
    return self.literal(value)

  def __getattr__(self, name: str) -> Any:
    """
    Fallback to the ``libcst`` module for node classes and helpers.

    Args:
        name (str): Attribute name.

    Returns:
        Any: The attribute from ``libcst``.
    """
    return getattr(cst, name)
