"""algorithm-j - Hindley-Milner type inference (Algorithm J) with let-polymorphism."""

__version__ = "0.1.0"

from .core import (
    ARROW,
    Monotype,
    Polytype,
    TApp,
    TVar,
    alpha_equivalent,
    arrow,
    arrows,
    con,
    forall,
    generalize,
    instantiate,
)
from .context import Binding, Context
from .syntax import Abs, App, Expr, Let, Var
from .unify import AliasMap, Unifier, unify
from .inference import Algorithm, infer, infer_typing
from .judgment import Typing
from .errors import (
    AlgorithmJError,
    ImpossibleUnificationError,
    InferenceError,
    LexError,
    ParseError,
    RecursiveTypeError,
    UnknownVariableError,
)
from .parser import parse_context, parse_expr, parse_mono, parse_poly
