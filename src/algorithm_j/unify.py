"""Unification of monotypes.

The alias map records which type variables have been unified with which
types. It behaves like a union-find structure without path compression:
a variable may point at another variable that points at a concrete type,
and canonicalization always follows such chains to the end.
"""

from __future__ import annotations
import logging
from typing import Dict, Iterator, Optional, Tuple

from .core import Monotype, TApp, TVar, TypeVar
from .errors import ImpossibleUnificationError, RecursiveTypeError

logger = logging.getLogger(__name__)


class AliasMap:
    """Mapping from type variables to the types they were unified with."""

    def __init__(self):
        self.mapping: Dict[TypeVar, Monotype] = {}

    def lookup(self, alpha: TypeVar) -> Optional[Monotype]:
        """Look up the direct alias of a variable, without following chains."""
        return self.mapping.get(alpha)

    def bind(self, alpha: TypeVar, target: Monotype) -> None:
        """Record that `alpha` stands for `target`.

        Only unaliased variables may be bound; unification canonicalizes its
        operands first, so a second binding means the map is corrupt.
        """
        assert alpha not in self.mapping, f"type variable {alpha} is already aliased"
        self.mapping[alpha] = target

    def resolve(self, t: Monotype) -> Monotype:
        """Follow the alias chain of `t` until an unaliased variable or an application."""
        while isinstance(t, TVar):
            target = self.mapping.get(t.name)
            if target is None:
                break
            t = target
        return t

    def canonicalize(self, t: Monotype) -> Monotype:
        """Resolve `t` and all of its components against the map."""
        t = self.resolve(t)
        if isinstance(t, TApp):
            new_args = tuple(self.canonicalize(arg) for arg in t.args)
            if all(new is old for new, old in zip(new_args, t.args)):
                return t
            return TApp(t.constructor, new_args)
        return t

    def __contains__(self, alpha: object) -> bool:
        return alpha in self.mapping

    def __iter__(self) -> Iterator[Tuple[TypeVar, Monotype]]:
        return iter(self.mapping.items())

    def __len__(self) -> int:
        return len(self.mapping)

    def __repr__(self) -> str:
        entries = ", ".join(f"{alpha} ↦ {target}" for alpha, target in self.mapping.items())
        return f"AliasMap({entries})"


class Unifier:
    """Unifies monotypes by extending an alias map.

    Unification is not transactional: bindings made before a failure stay in
    the map, and the caller must discard the whole run.
    """

    def __init__(self, aliases: Optional[AliasMap] = None):
        self.aliases = aliases if aliases is not None else AliasMap()

    def canonicalize(self, t: Monotype) -> Monotype:
        return self.aliases.canonicalize(t)

    def unify(self, t1: Monotype, t2: Monotype) -> None:
        """Make `t1` and `t2` equal, or raise an InferenceError."""
        t1 = self.canonicalize(t1)
        t2 = self.canonicalize(t2)

        if t1 == t2:
            return

        if isinstance(t1, TApp) and isinstance(t2, TApp):
            if t1.constructor == t2.constructor and t1.arity == t2.arity:
                for arg1, arg2 in zip(t1.args, t2.args):
                    self.unify(arg1, arg2)
                return
        elif isinstance(t1, TVar):
            self._bind_var(t1, t2)
            return
        elif isinstance(t2, TVar):
            self._bind_var(t2, t1)
            return

        raise ImpossibleUnificationError(t1, t2)

    def _bind_var(self, alpha: TVar, t: Monotype) -> None:
        """Alias `alpha` to `t` after the occurs check."""
        if t.occurs(alpha.name):
            raise RecursiveTypeError(t, alpha.name)
        logger.debug("alias %s ↦ %s", alpha.name, t)
        self.aliases.bind(alpha.name, t)


def unify(t1: Monotype, t2: Monotype, aliases: Optional[AliasMap] = None) -> AliasMap:
    """Unify two monotypes and return the alias map that makes them equal."""
    unifier = Unifier(aliases)
    unifier.unify(t1, t2)
    return unifier.aliases
