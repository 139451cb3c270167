"""Typing judgments ``Γ ⊢ e : σ``."""

from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet

from .core import Polytype, TypeVar
from .context import Context
from .syntax import Expr


@dataclass(frozen=True)
class Typing:
    """The judgment that `expr` has type `scheme` under `context`."""
    context: Context
    expr: Expr
    scheme: Polytype

    def free(self) -> FrozenSet[TypeVar]:
        """Variables free in the scheme but not in the context."""
        return self.scheme.free() - self.context.free()

    def __str__(self) -> str:
        from .pretty import format_typing
        return format_typing(self)
