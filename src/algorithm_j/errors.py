"""Error types for algorithm-j.

Inference fails in exactly three ways, all terminal: an unknown variable,
an impossible unification, and a recursive type. The surface syntax adds
lexical and parse errors.
"""

from __future__ import annotations
from typing import List, Optional, TYPE_CHECKING

from .syntax import SourceLocation
from .error_reporting import (
    AlgorithmJError,
    DerivationTrace,
    ErrorContext,
    ErrorKind,
    suggest_similar_names,
)

if TYPE_CHECKING:
    from .core import Monotype, TypeVar


class InferenceError(AlgorithmJError):
    """Base class for type inference failures."""
    pass


class UnknownVariableError(InferenceError):
    """A name has no binding in the context where it is used."""

    def __init__(self, name: str, location: Optional[SourceLocation] = None,
                 available_names: Optional[List[str]] = None):
        context = ErrorContext(
            location=location,
            span=len(name),
            kind=ErrorKind.UNKNOWN_VARIABLE,
            actual=name,
            available_names=available_names,
            similar_names=suggest_similar_names(name, available_names or []),
        )
        super().__init__(f"Unknown variable '{name}'", context)
        self.name = name


class ImpossibleUnificationError(InferenceError):
    """Two types with incompatible constructors or arities."""

    def __init__(self, left: Monotype, right: Monotype, location: Optional[SourceLocation] = None):
        context = ErrorContext(
            location=location,
            kind=ErrorKind.IMPOSSIBLE_UNIFICATION,
            expected=str(left),
            actual=str(right),
        )
        super().__init__(f"Cannot unify types '{left}' and '{right}'", context)
        self.left = left
        self.right = right


class RecursiveTypeError(InferenceError):
    """Unifying a variable with a type containing it would build an infinite type."""

    def __init__(self, type: Monotype, variable: TypeVar, location: Optional[SourceLocation] = None):
        context = ErrorContext(
            location=location,
            kind=ErrorKind.RECURSIVE_TYPE,
            expected=variable,
            actual=str(type),
        )
        super().__init__(
            f"Unifying '{type}' and '{variable}' would create a recursive type", context
        )
        self.type = type
        self.variable = variable


class LexError(AlgorithmJError):
    """Lexical analysis error."""

    def __init__(self, message: str, line: int, column: int, filename: Optional[str] = None):
        location = SourceLocation(line, column, filename)
        super().__init__(
            f"Lexical error at {line}:{column}: {message}",
            ErrorContext(location=location, kind=ErrorKind.LEX_ERROR, filename=filename),
        )
        self.line = line
        self.column = column


class ParseError(AlgorithmJError):
    """Parse error: unexpected token, unexpected end of input or trailing tokens."""

    def __init__(self, message: str, line: int, column: int, filename: Optional[str] = None,
                 span: int = 1):
        location = SourceLocation(line, column, filename)
        super().__init__(
            f"Parse error at {line}:{column}: {message}",
            ErrorContext(location=location, span=span, kind=ErrorKind.PARSE_ERROR, filename=filename),
        )
        self.line = line
        self.column = column


__all__ = [
    "AlgorithmJError",
    "DerivationTrace",
    "ErrorContext",
    "ErrorKind",
    "InferenceError",
    "UnknownVariableError",
    "ImpossibleUnificationError",
    "RecursiveTypeError",
    "LexError",
    "ParseError",
]
