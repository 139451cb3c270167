"""Core type algebra for algorithm-j.

This module defines monotypes and polytypes (type schemes) together with
the operations the inference driver needs on them: free variables, the
occurs check, substitution, generalization, instantiation and
alpha-equivalence of schemes.

All types are immutable. Substitution builds new nodes only along the path
that actually changes and shares every untouched subtree.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, Tuple, TYPE_CHECKING
from abc import ABC, abstractmethod

if TYPE_CHECKING:
    from .context import Context


# Type variables are plain names.
TypeVar = str

ARROW = "->"


class Monotype(ABC):
    """Base class for monotypes (types without quantifiers)."""

    @abstractmethod
    def free(self) -> FrozenSet[TypeVar]:
        """Return the set of type variables occurring in this type."""
        pass

    @abstractmethod
    def occurs(self, alpha: TypeVar) -> bool:
        """Check whether `alpha` appears anywhere in this type."""
        pass

    @abstractmethod
    def replace(self, alpha: TypeVar, target: Monotype) -> Monotype:
        """Substitute every occurrence of `alpha` by `target`."""
        pass

    @abstractmethod
    def substitute(self, mapping: Dict[TypeVar, Monotype]) -> Monotype:
        """Apply a simultaneous substitution."""
        pass

    def generalize(self, ctxt: Context) -> Polytype:
        """Quantify over the variables not constrained by `ctxt`."""
        return generalize(self, ctxt)

    def __str__(self) -> str:
        from .pretty import format_mono
        return format_mono(self)


@dataclass(frozen=True)
class TVar(Monotype):
    """A type variable."""
    name: TypeVar

    def free(self) -> FrozenSet[TypeVar]:
        return frozenset((self.name,))

    def occurs(self, alpha: TypeVar) -> bool:
        return self.name == alpha

    def replace(self, alpha: TypeVar, target: Monotype) -> Monotype:
        return target if self.name == alpha else self

    def substitute(self, mapping: Dict[TypeVar, Monotype]) -> Monotype:
        return mapping.get(self.name, self)

    def __repr__(self) -> str:
        return f"TVar({self.name!r})"


@dataclass(frozen=True)
class TApp(Monotype):
    """Application of a named type constructor to argument types.

    The arity is the number of arguments; a nullary application such as
    ``TApp("Int", ())`` is a base type.
    """
    constructor: str
    args: Tuple[Monotype, ...] = ()

    def __post_init__(self) -> None:
        # Lists would break hashing, so normalize to a tuple.
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    @property
    def arity(self) -> int:
        return len(self.args)

    def is_arrow(self) -> bool:
        """Check if this is the built-in binary function type."""
        return self.constructor == ARROW and len(self.args) == 2

    def free(self) -> FrozenSet[TypeVar]:
        result: FrozenSet[TypeVar] = frozenset()
        for arg in self.args:
            result = result | arg.free()
        return result

    def occurs(self, alpha: TypeVar) -> bool:
        return any(arg.occurs(alpha) for arg in self.args)

    def replace(self, alpha: TypeVar, target: Monotype) -> Monotype:
        new_args = tuple(arg.replace(alpha, target) for arg in self.args)
        if all(new is old for new, old in zip(new_args, self.args)):
            return self
        return TApp(self.constructor, new_args)

    def substitute(self, mapping: Dict[TypeVar, Monotype]) -> Monotype:
        new_args = tuple(arg.substitute(mapping) for arg in self.args)
        if all(new is old for new, old in zip(new_args, self.args)):
            return self
        return TApp(self.constructor, new_args)

    def __repr__(self) -> str:
        if not self.args:
            return f"TApp({self.constructor!r})"
        args_str = ", ".join(repr(arg) for arg in self.args)
        return f"TApp({self.constructor!r}, ({args_str},))"


@dataclass(frozen=True)
class Polytype:
    """A type scheme: a monotype quantified over a flat set of variables.

    The quantified set is not required to match the free variables of the
    body. A scheme built with `Polytype.mono` quantifies over nothing and
    is used for lambda-bound names.
    """
    quantified: FrozenSet[TypeVar]
    body: Monotype

    def __post_init__(self) -> None:
        if not isinstance(self.quantified, frozenset):
            object.__setattr__(self, "quantified", frozenset(self.quantified))

    @staticmethod
    def mono(body: Monotype) -> Polytype:
        """Wrap a monotype in a non-generalized scheme."""
        return Polytype(frozenset(), body)

    def free(self) -> FrozenSet[TypeVar]:
        """Free variables of the body minus the quantified ones."""
        return self.body.free() - self.quantified

    def is_mono(self) -> bool:
        return not self.quantified

    def instantiate(self, fresh: Callable[[], Monotype]) -> Monotype:
        return instantiate(self, fresh)

    def alpha_equivalent(self, other: Polytype) -> bool:
        return alpha_equivalent(self, other)

    def __str__(self) -> str:
        from .pretty import format_poly
        return format_poly(self)


# Constructors

def con(name: str, *args: Monotype) -> TApp:
    """Build a constructor application, e.g. ``con("List", TVar("a"))``."""
    return TApp(name, tuple(args))


def arrow(domain: Monotype, codomain: Monotype) -> TApp:
    """Build the function type ``domain -> codomain``."""
    return TApp(ARROW, (domain, codomain))


def arrows(*types: Monotype) -> Monotype:
    """Build a right-nested chain of arrows: ``arrows(a, b, c) == a -> (b -> c)``."""
    if not types:
        raise ValueError("arrows() needs at least one type")
    result = types[-1]
    for domain in reversed(types[:-1]):
        result = arrow(domain, result)
    return result


def forall(variables: Iterable[TypeVar], body: Monotype) -> Polytype:
    """Build a scheme quantified over `variables`."""
    return Polytype(frozenset(variables), body)


# Free-function forms of the algebra

def free(t: Monotype) -> FrozenSet[TypeVar]:
    """Return the variables occurring anywhere in `t`."""
    return t.free()


def occurs(alpha: TypeVar, t: Monotype) -> bool:
    """Check whether `alpha` occurs in `t`."""
    return t.occurs(alpha)


def replace(t: Monotype, alpha: TypeVar, target: Monotype) -> Monotype:
    """Substitute every occurrence of `alpha` in `t` by `target`."""
    return t.replace(alpha, target)


def generalize(t: Monotype, ctxt: Context) -> Polytype:
    """Quantify `t` over its variables that are not free in `ctxt`.

    Variables still free in the context may be constrained later on, so
    quantifying over them would be unsound.
    """
    return Polytype(t.free() - ctxt.free(), t)


def instantiate(scheme: Polytype, fresh: Callable[[], Monotype]) -> Monotype:
    """Replace each quantified variable of `scheme` by a fresh type.

    The whole old-to-new mapping is built before anything is substituted,
    so a fresh name that happens to equal another quantified name is never
    rewritten a second time.
    """
    if not scheme.quantified:
        return scheme.body
    mapping = {alpha: fresh() for alpha in sorted(scheme.quantified)}
    return scheme.body.substitute(mapping)


def alpha_equivalent(left: Polytype, right: Polytype) -> bool:
    """Check whether two schemes are equal up to renaming of bound variables.

    Both bodies are walked in lock-step. Quantified variables are paired
    through a two-way partial bijection fixed at first encounter; free
    variables must have identical names. There is no backtracking: the
    first pairing seen is binding.
    """
    forward: Dict[TypeVar, TypeVar] = {}
    backward: Dict[TypeVar, TypeVar] = {}

    def walk(a: Monotype, b: Monotype) -> bool:
        if isinstance(a, TVar) and isinstance(b, TVar):
            a_bound = a.name in left.quantified
            b_bound = b.name in right.quantified
            if a_bound and b_bound:
                mapped = forward.get(a.name)
                mapped_back = backward.get(b.name)
                if mapped is None and mapped_back is None:
                    forward[a.name] = b.name
                    backward[b.name] = a.name
                    return True
                return mapped == b.name and mapped_back == a.name
            if not a_bound and not b_bound:
                return a.name == b.name
            return False
        if isinstance(a, TApp) and isinstance(b, TApp):
            if a.constructor != b.constructor or a.arity != b.arity:
                return False
            return all(walk(x, y) for x, y in zip(a.args, b.args))
        return False

    return walk(left.body, right.body)

