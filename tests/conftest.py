"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A default LibCST transformation session.
"""

import sys
from pathlib import Path
import libcst as cst
import pytest

# Add src to path so we can import 'visit_transform' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from visit_transform.core.host import CSTTransformationContext  # noqa: E402


@pytest.fixture
def tc() -> CSTTransformationContext:
  """A fresh LibCST transformation session with default options."""
  return CSTTransformationContext()


@pytest.fixture
def module() -> cst.Module:
  """Three top-level statements, used as the [A, B, C] tree in many tests."""
  return cst.parse_module("a = 1\nb = foo(2)\nc = 3\n")
