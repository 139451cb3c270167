"""Typing contexts.

A context is an ordered sequence of name/scheme bindings. Lookups see the
most recent binding for a name, and extending a context always produces a
new value, so a context can be shared by any number of inference runs.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .core import Polytype, TypeVar


@dataclass(frozen=True)
class Binding:
    """A name bound to a type scheme."""
    name: str
    scheme: Polytype

    def __str__(self) -> str:
        return f"{self.name} : {self.scheme}"


@dataclass(frozen=True)
class Context:
    """Immutable typing context."""
    bindings: Tuple[Binding, ...] = ()

    @staticmethod
    def empty() -> Context:
        return Context()

    @staticmethod
    def of(bindings: Union[Mapping[str, Polytype], Iterable[Tuple[str, Polytype]]]) -> Context:
        """Build a context from a mapping or from (name, scheme) pairs, in order."""
        items = bindings.items() if isinstance(bindings, Mapping) else bindings
        return Context(tuple(Binding(name, scheme) for name, scheme in items))

    def extend(self, name: str, scheme: Polytype) -> Context:
        """Return a new context with `name` bound to `scheme`."""
        return Context(self.bindings + (Binding(name, scheme),))

    bind = extend

    def lookup(self, name: str) -> Optional[Polytype]:
        """Look up the most recent binding for `name`."""
        for binding in reversed(self.bindings):
            if binding.name == name:
                return binding.scheme
        return None

    def free(self) -> FrozenSet[TypeVar]:
        """Free type variables of every scheme in the context."""
        result: FrozenSet[TypeVar] = frozenset()
        for binding in self.bindings:
            result = result | binding.scheme.free()
        return result

    def names(self) -> List[str]:
        """Visible names, most recent binding first, without duplicates."""
        seen: List[str] = []
        for binding in reversed(self.bindings):
            if binding.name not in seen:
                seen.append(binding.name)
        return seen

    def merge(self, other: Context) -> Context:
        """Append the bindings of `other`, which then shadow ours."""
        return Context(self.bindings + other.bindings)

    def __contains__(self, name: object) -> bool:
        return any(binding.name == name for binding in self.bindings)

    def __iter__(self) -> Iterator[Binding]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)

    def __str__(self) -> str:
        from .pretty import format_context
        return format_context(self)
