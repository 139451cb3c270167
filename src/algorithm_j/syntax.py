"""Abstract syntax tree for the lambda calculus with let."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
from abc import ABC, abstractmethod


@dataclass(frozen=True)
class SourceLocation:
    """Source code location information."""
    line: int
    column: int
    filename: Optional[str] = None


class Expr(ABC):
    """Base class for expressions."""

    @abstractmethod
    def __repr__(self) -> str:
        pass

    def __str__(self) -> str:
        return format_expr(self)


@dataclass(frozen=True, repr=False)
class Var(Expr):
    """Variable reference."""
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        return f"Var({self.name})"


@dataclass(frozen=True, repr=False)
class App(Expr):
    """Function application."""
    function: Expr
    argument: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        return f"App({self.function!r}, {self.argument!r})"


@dataclass(frozen=True, repr=False)
class Abs(Expr):
    """Lambda abstraction."""
    param: str
    body: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        return f"Abs({self.param}, {self.body!r})"


@dataclass(frozen=True, repr=False)
class Let(Expr):
    """Let binding: ``let name = value in body``."""
    name: str
    value: Expr
    body: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        return f"Let({self.name}, {self.value!r}, {self.body!r})"


# Helper constructors

def var(name: str) -> Var:
    return Var(name)


def app(function: Expr, *arguments: Expr) -> Expr:
    """Left-nested application: ``app(f, x, y)`` is ``(f x) y``."""
    result = function
    for argument in arguments:
        result = App(result, argument)
    return result


def lam(*params_and_body) -> Expr:
    """Curried abstraction: ``lam("x", "y", body)`` is ``λx. λy. body``."""
    *params, body = params_and_body
    if not params:
        raise ValueError("lam() needs at least one parameter")
    result = body
    for param in reversed(params):
        result = Abs(param, result)
    return result


def let(name: str, value: Expr, body: Expr) -> Let:
    return Let(name, value, body)


def format_expr(expr: Expr, ascii: bool = False) -> str:
    """Render an expression in surface syntax."""
    lambda_symbol = "\\" if ascii else "λ"

    def render(node: Expr) -> str:
        if isinstance(node, Var):
            return node.name
        elif isinstance(node, App):
            # Abstractions and lets extend as far right as possible.
            if isinstance(node.function, (Var, App)):
                function_str = render(node.function)
            else:
                function_str = f"({render(node.function)})"
            if isinstance(node.argument, Var):
                argument_str = render(node.argument)
            else:
                argument_str = f"({render(node.argument)})"
            return f"{function_str} {argument_str}"
        elif isinstance(node, Abs):
            return f"{lambda_symbol}{node.param}. {render(node.body)}"
        elif isinstance(node, Let):
            return f"let {node.name} = {render(node.value)} in {render(node.body)}"
        else:
            raise TypeError(f"Unknown expression: {node!r}")

    return render(expr)
