"""
Whole-Program Model.

The transformer core only needs two things from a program: that it can hand
out a type checker, and that the type checker is an opaque query object. These
are captured by the ``Program`` and ``TypeChecker`` protocols.

``CSTProgram`` and ``CSTTypeChecker`` implement them over LibCST metadata.
Metadata is resolved on the exact ``Module`` objects held by the program
(no defensive copy), so nodes reached while transforming
``program.get_source_file(path)`` can be queried directly.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Set, Tuple, Union, runtime_checkable

import libcst as cst
from libcst.metadata import (
  CodeRange,
  MetadataWrapper,
  ParentNodeProvider,
  PositionProvider,
  QualifiedNameProvider,
  Scope,
  ScopeProvider,
)
from libcst.metadata.base_provider import LazyValue


class TypeChecker(Protocol):
  """Marker protocol for semantic query capabilities."""


@runtime_checkable
class Program(Protocol):
  """Whole-program model consumed by the ``program`` level."""

  def get_type_checker(self) -> Any: ...


class CSTProgram:
  """
  A set of parsed source units keyed by path.
  """

  def __init__(self, sources: Mapping[str, Union[str, cst.Module]]) -> None:
    """
    Parses every unit that is given as text.

    Args:
        sources: Mapping of path to source text or already parsed module.
    """
    self._modules: Dict[str, cst.Module] = {}
    for path, source in sources.items():
      self._modules[path] = source if isinstance(source, cst.Module) else cst.parse_module(source)
    self._type_checker: Optional["CSTTypeChecker"] = None

  @property
  def paths(self) -> List[str]:
    """Unit paths in insertion order."""
    return list(self._modules)

  def get_source_file(self, path: str) -> Optional[cst.Module]:
    """Returns the parsed unit for a path, if present."""
    return self._modules.get(path)

  def get_source_files(self) -> List[cst.Module]:
    """Returns every parsed unit."""
    return list(self._modules.values())

  def items(self) -> Iterable[Tuple[str, cst.Module]]:
    return self._modules.items()

  def get_type_checker(self) -> "CSTTypeChecker":
    """Returns the program's type checker, creating it on first use."""
    if self._type_checker is None:
      self._type_checker = CSTTypeChecker(self)
    return self._type_checker


class CSTTypeChecker:
  """
  Semantic queries over a ``CSTProgram`` backed by LibCST metadata providers.
  """

  def __init__(self, program: CSTProgram) -> None:
    self.program = program
    self._wrappers: Dict[str, MetadataWrapper] = {
      path: MetadataWrapper(module, unsafe_skip_copy=True) for path, module in program.items()
    }

  def _lookup(self, provider: Any, node: cst.CSTNode) -> Tuple[Optional[str], Any]:
    """Finds the unit owning ``node`` and the provider's value for it."""
    for path, wrapper in self._wrappers.items():
      mapping = wrapper.resolve(provider)
      if node in mapping:
        value = mapping[node]
        # Lazily computed providers (qualified names) store thunks.
        if isinstance(value, LazyValue):
          value = value()
        return path, value
    return None, None

  def get_qualified_names(self, node: cst.CSTNode) -> Set[str]:
    """
    Resolves the fully qualified names a name, attribute or call may refer to.

    Args:
        node: Node of one of the program's units.

    Returns:
        Set of dotted names, empty when unresolved.
    """
    _, names = self._lookup(QualifiedNameProvider, node)
    if not names:
      return set()
    return {qn.name for qn in names}

  def get_scope(self, node: cst.CSTNode) -> Optional[Scope]:
    """Returns the lexical scope enclosing ``node``."""
    _, scope = self._lookup(ScopeProvider, node)
    return scope

  def get_position(self, node: cst.CSTNode) -> Optional[CodeRange]:
    """Returns the source range of ``node``."""
    _, position = self._lookup(PositionProvider, node)
    return position

  def get_parent(self, node: cst.CSTNode) -> Optional[cst.CSTNode]:
    """Returns the parent of ``node``, or None for a root or unknown node."""
    _, parent = self._lookup(ParentNodeProvider, node)
    return parent

  def get_source_path(self, node: cst.CSTNode) -> Optional[str]:
    """Returns the path of the unit containing ``node``."""
    path, _ = self._lookup(PositionProvider, node)
    return path
