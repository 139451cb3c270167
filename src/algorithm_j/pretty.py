"""Textual rendering of types, contexts and typing judgments."""

from __future__ import annotations
from typing import Dict, List, TYPE_CHECKING

from .core import Monotype, Polytype, TApp, TVar, TypeVar
from .syntax import format_expr

if TYPE_CHECKING:
    from .context import Context
    from .judgment import Typing


def format_mono(t: Monotype, ascii: bool = False) -> str:
    """Render a monotype.

    Arrows associate to the right; constructor arguments that are themselves
    applications or arrows are parenthesized.
    """
    arrow_symbol = "->" if ascii else "→"

    def render(node: Monotype, position: str) -> str:
        if isinstance(node, TVar):
            return node.name
        assert isinstance(node, TApp)
        if node.is_arrow():
            text = f"{render(node.args[0], 'domain')} {arrow_symbol} {render(node.args[1], 'top')}"
            return f"({text})" if position in ("domain", "argument") else text
        if not node.args:
            return node.constructor
        args_str = " ".join(render(arg, "argument") for arg in node.args)
        text = f"{node.constructor} {args_str}"
        return f"({text})" if position == "argument" else text

    return render(t, "top")


def format_poly(scheme: Polytype, ascii: bool = False) -> str:
    """Render a scheme as ``∀a b. body``; unquantified schemes show just the body."""
    body = format_mono(scheme.body, ascii)
    if not scheme.quantified:
        return body
    quantifier = "forall " if ascii else "∀"
    variables = " ".join(sorted(scheme.quantified))
    return f"{quantifier}{variables}. {body}"


def _letter_names():
    """Yield a, b, ..., z, a1, b1, ..."""
    suffix = 0
    while True:
        for letter in "abcdefghijklmnopqrstuvwxyz":
            yield letter if suffix == 0 else f"{letter}{suffix}"
        suffix += 1


def normalize(scheme: Polytype) -> Polytype:
    """Rename quantified variables to a, b, c, ... in order of first occurrence.

    Names free in the scheme are never reused, so the result is
    alpha-equivalent to the input. Quantified variables that do not occur in
    the body are dropped.
    """
    order: List[TypeVar] = []

    def visit(node: Monotype) -> None:
        if isinstance(node, TVar):
            if node.name in scheme.quantified and node.name not in order:
                order.append(node.name)
        else:
            assert isinstance(node, TApp)
            for arg in node.args:
                visit(arg)

    visit(scheme.body)
    taken = scheme.free()
    names = (name for name in _letter_names() if name not in taken)
    mapping: Dict[TypeVar, Monotype] = {alpha: TVar(next(names)) for alpha in order}
    body = scheme.body.substitute(mapping)
    return Polytype(frozenset(v.name for v in mapping.values() if isinstance(v, TVar)), body)


def format_context(ctxt: Context, ascii: bool = False) -> str:
    """Render a context as ``x : σ, y : τ``."""
    if not len(ctxt):
        return "{}" if ascii else "∅"
    return ", ".join(f"{b.name} : {format_poly(b.scheme, ascii)}" for b in ctxt)


def format_typing(typing: Typing, ascii: bool = False) -> str:
    """Render a judgment as ``Γ ⊢ e : σ``."""
    turnstile = "|-" if ascii else "⊢"
    return (
        f"{format_context(typing.context, ascii)} {turnstile} "
        f"{format_expr(typing.expr, ascii)} : {format_poly(typing.scheme, ascii)}"
    )
