"""
Whole-program model and semantic queries.
"""

from visit_transform.semantics.program import CSTProgram, CSTTypeChecker, Program, TypeChecker

__all__ = ["CSTProgram", "CSTTypeChecker", "Program", "TypeChecker"]
