"""Hindley-Milner type inference using Algorithm J.

The driver walks the expression tree once, solving equations between
monotypes with a unifier as it goes. Polymorphism is introduced only at
`let`: the type of the bound expression is generalized over the variables
the surrounding context does not mention. Lambda-bound names stay
monomorphic.

Every call to `infer` creates its own `Algorithm`, so the fresh-variable
counter and the alias map are never shared between runs.
"""

from __future__ import annotations
import logging
from typing import Optional

from .core import Monotype, Polytype, TVar, arrow, generalize, instantiate
from .context import Context
from .syntax import Abs, App, Expr, Let, Var
from .unify import AliasMap, Unifier
from .errors import InferenceError, UnknownVariableError
from .error_reporting import DerivationTrace
from .judgment import Typing

logger = logging.getLogger(__name__)


class Algorithm:
    """State of one inference run: fresh-variable counter and alias map."""

    def __init__(self, trace: Optional[DerivationTrace] = None):
        self.counter = 0
        self.aliases = AliasMap()
        self.unifier = Unifier(self.aliases)
        self.trace = trace if trace is not None else DerivationTrace()

    def fresh(self) -> TVar:
        """Allocate a type variable not used before in this run."""
        self.counter += 1
        return TVar(f"t{self.counter}")

    def instantiate(self, scheme: Polytype) -> Monotype:
        return instantiate(scheme, self.fresh)

    def canonicalize(self, t: Monotype) -> Monotype:
        return self.aliases.canonicalize(t)

    def unify(self, t1: Monotype, t2: Monotype) -> None:
        self.unifier.unify(t1, t2)

    def run(self, expr: Expr, ctxt: Context) -> Polytype:
        """Infer the most general scheme of `expr` under `ctxt`."""
        t = self.infer(expr, ctxt)
        t = self.canonicalize(t)
        scheme = generalize(t, ctxt)
        if self.trace.enabled:
            self.trace.add_step("Generalize result", result=str(scheme))
        return scheme

    def infer(self, expr: Expr, ctxt: Context) -> Monotype:
        """Compute a monotype for `expr`, extending the alias map as needed."""
        if isinstance(expr, Var):
            return self.infer_var(expr, ctxt)
        elif isinstance(expr, App):
            return self.infer_app(expr, ctxt)
        elif isinstance(expr, Abs):
            return self.infer_abs(expr, ctxt)
        elif isinstance(expr, Let):
            return self.infer_let(expr, ctxt)
        else:
            raise TypeError(f"Cannot infer type of {expr!r}")

    def infer_var(self, expr: Var, ctxt: Context) -> Monotype:
        scheme = ctxt.lookup(expr.name)
        if scheme is None:
            raise UnknownVariableError(expr.name, expr.location, ctxt.names())
        t = self.instantiate(scheme)
        if self.trace.enabled:
            self.trace.add_step(
                f"Instantiate {expr.name}",
                location=expr.location,
                context={expr.name: str(scheme)},
                result=str(t),
            )
        return t

    def infer_app(self, expr: App, ctxt: Context) -> Monotype:
        function_type = self.infer(expr.function, ctxt)
        argument_type = self.infer(expr.argument, ctxt)
        result = self.fresh()
        self.unify(function_type, arrow(argument_type, result))
        if self.trace.enabled:
            self.trace.add_step(
                f"Apply {expr}",
                location=expr.location,
                result=str(self.canonicalize(result)),
            )
        return result

    def infer_abs(self, expr: Abs, ctxt: Context) -> Monotype:
        param = self.fresh()
        body = self.infer(expr.body, ctxt.extend(expr.param, Polytype.mono(param)))
        t = arrow(param, body)
        if self.trace.enabled:
            self.trace.add_step(
                f"Abstract over {expr.param}",
                location=expr.location,
                context={expr.param: str(self.canonicalize(param))},
                result=str(self.canonicalize(t)),
            )
        return t

    def infer_let(self, expr: Let, ctxt: Context) -> Monotype:
        value = self.infer(expr.value, ctxt)
        value = self.canonicalize(value)
        scheme = generalize(value, ctxt)
        if self.trace.enabled:
            self.trace.add_step(
                f"Generalize {expr.name}",
                location=expr.location,
                context={expr.name: str(scheme)},
            )
        logger.debug("let %s : %s", expr.name, scheme)
        return self.infer(expr.body, ctxt.extend(expr.name, scheme))


def infer(expr: Expr, ctxt: Optional[Context] = None,
          trace: Optional[DerivationTrace] = None) -> Polytype:
    """Infer the most general type scheme of `expr`.

    Raises UnknownVariableError, ImpossibleUnificationError or
    RecursiveTypeError; the first failure aborts the whole call.
    """
    if ctxt is None:
        ctxt = Context()
    algorithm = Algorithm(trace)
    try:
        return algorithm.run(expr, ctxt)
    except InferenceError as e:
        if algorithm.trace.enabled:
            e.trace = algorithm.trace
        raise


def infer_typing(expr: Expr, ctxt: Optional[Context] = None,
                 trace: Optional[DerivationTrace] = None) -> Typing:
    """Infer the type of `expr` and package it as a typing judgment."""
    if ctxt is None:
        ctxt = Context()
    return Typing(ctxt, expr, infer(expr, ctxt, trace))
