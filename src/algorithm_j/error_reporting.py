"""Error reporting for algorithm-j.

This module provides:
- Source location display with a marker under the offending position
- Suggestions for common mistakes (misspelled names, self application)
- Type derivation traces for verbose output
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum, auto

from .syntax import SourceLocation
from .colors import Colors


class ErrorKind(Enum):
    """Categories of errors for suggestion generation."""
    UNKNOWN_VARIABLE = auto()
    IMPOSSIBLE_UNIFICATION = auto()
    RECURSIVE_TYPE = auto()
    LEX_ERROR = auto()
    PARSE_ERROR = auto()


@dataclass
class ErrorContext:
    """Context information for an error."""
    source_code: Optional[str] = None
    filename: Optional[str] = None
    location: Optional[SourceLocation] = None
    span: int = 1
    kind: Optional[ErrorKind] = None
    # Additional context for generating suggestions
    expected: Optional[str] = None
    actual: Optional[str] = None
    available_names: Optional[List[str]] = None
    similar_names: Optional[List[str]] = None


@dataclass
class TypeDerivation:
    """A step in type derivation for verbose output."""
    description: str
    location: Optional[SourceLocation]
    context: Dict[str, str]  # Variable name -> type
    result: Optional[str]


@dataclass
class DerivationTrace:
    """Accumulates type derivation steps for verbose output.

    A trace belongs to one inference run; the driver writes to it only when
    `enabled` is set.
    """
    enabled: bool = False
    steps: List[TypeDerivation] = field(default_factory=list)

    def add_step(self, description: str, location: Optional[SourceLocation] = None,
                 context: Optional[Dict[str, str]] = None, result: Optional[str] = None):
        """Add a derivation step."""
        if self.enabled:
            self.steps.append(TypeDerivation(
                description=description,
                location=location,
                context=context or {},
                result=result
            ))

    def clear(self) -> None:
        self.steps = []

    def format(self) -> str:
        """Format the trace for display."""
        if not self.steps:
            return ""

        lines = [Colors.bold("\nType Derivation Trace:")]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"\n{Colors.dim(f'Step {i}:')} {step.description}")

            if step.location:
                lines.append(f"  {Colors.dim('at')} {format_location(step.location)}")

            if step.context:
                lines.append(f"  {Colors.dim('context:')}")
                for var, ty in step.context.items():
                    lines.append(f"    {Colors.var_name(var)} : {Colors.type_name(ty)}")

            if step.result:
                lines.append(f"  {Colors.dim('result:')} {Colors.type_name(step.result)}")

        return "\n".join(lines)


def format_location(location: Optional[SourceLocation]) -> str:
    """Format a source location for display."""
    if not location:
        return "<unknown location>"

    parts = []
    if location.filename:
        parts.append(location.filename)
    parts.append(f"{location.line}:{location.column}")

    return ":".join(parts)


def show_source_context(source_code: str, location: SourceLocation,
                        error_message: str = "", span: int = 1) -> str:
    """Show the offending line with the previous one and mark `span` columns.

    The marker is clipped to the end of the line; a location just past the
    end (as for an unexpected end of input) gets a single caret.
    """
    lines = source_code.split('\n')
    if not 1 <= location.line <= len(lines):
        return ""

    header = [Colors.error(f"Error: {error_message}")] if error_message else []
    header.append(f"{Colors.dim('at')} {format_location(location)}")

    first = max(1, location.line - 1)
    gutter = len(str(location.line))
    excerpt = []
    for number in range(first, location.line + 1):
        excerpt.append(f"  {number:>{gutter}} │ {lines[number - 1]}")

    offending = lines[location.line - 1]
    start = max(location.column, 1)
    width = max(1, min(span, len(offending) - start + 1))
    marker = Colors.hint('^' * width)
    excerpt.append(f"  {' ' * gutter} │ {' ' * (start - 1)}{marker}")

    return '\n'.join(header + [""] + excerpt)


def suggest_similar_names(name: str, available_names: List[str], max_suggestions: int = 3) -> List[str]:
    """Names in scope close to `name`, nearest first.

    Short names tolerate fewer edits: one per three characters, at least two.
    """
    limit = max(2, len(name) // 3)
    scored = sorted(
        (edit_distance(name, candidate), candidate)
        for candidate in set(available_names)
        if candidate != name
    )
    return [candidate for distance, candidate in scored if distance <= limit][:max_suggestions]


def edit_distance(s1: str, s2: str) -> int:
    """Levenshtein distance, keeping a single row of the table."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1
    row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, 1):
        diagonal, row[0] = row[0], i
        for j, c2 in enumerate(s2, 1):
            above = row[j]
            row[j] = min(above + 1, row[j - 1] + 1, diagonal + (c1 != c2))
            diagonal = above
    return row[-1]


def generate_suggestion(error_context: ErrorContext) -> Optional[str]:
    """Generate a helpful suggestion based on the error context."""
    if not error_context.kind:
        return None

    suggestions = []

    if error_context.kind == ErrorKind.UNKNOWN_VARIABLE:
        if error_context.similar_names:
            names = ", ".join(f"'{name}'" for name in error_context.similar_names[:3])
            suggestions.append(f"Did you mean: {names}?")
        elif error_context.available_names is not None and not error_context.available_names:
            suggestions.append("The context is empty; bind primitives with --bind or enable the prelude")

    elif error_context.kind == ErrorKind.IMPOSSIBLE_UNIFICATION:
        if error_context.expected and error_context.actual:
            if "→" in error_context.expected and "→" not in error_context.actual:
                suggestions.append("A value that is not a function is applied to an argument")

    elif error_context.kind == ErrorKind.RECURSIVE_TYPE:
        suggestions.append("A value is used as its own argument (as in 'x x'); lambda-bound names are monomorphic")
        suggestions.append("Bind the function with 'let' to use it at several types")

    elif error_context.kind == ErrorKind.PARSE_ERROR:
        suggestions.append("Expressions are 'λx. e', 'let x = e in e', applications 'f x' and parentheses")

    if suggestions:
        return "\n".join(f"{Colors.hint('Hint:')} {s}" for s in suggestions)

    return None


class AlgorithmJError(Exception):
    """Base class for all algorithm-j errors with enhanced reporting."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.context = context or ErrorContext()
        self.trace: Optional[DerivationTrace] = None

    def format_error(self) -> str:
        """Format the error with context, suggestions and any attached trace."""
        parts = []

        if self.context.source_code and self.context.location:
            parts.append(show_source_context(
                self.context.source_code,
                self.context.location,
                str(self),
                self.context.span,
            ))
        else:
            parts.append(Colors.error(f"Error: {self}"))
            if self.context.location:
                parts.append(f"{Colors.dim('at')} {format_location(self.context.location)}")

        suggestion = generate_suggestion(self.context)
        if suggestion:
            parts.append("")
            parts.append(suggestion)

        if self.trace is not None:
            trace_output = self.trace.format()
            if trace_output:
                parts.append(trace_output)

        return '\n'.join(parts)
