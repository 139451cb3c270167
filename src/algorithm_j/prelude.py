"""Primitive bindings available to programs by default."""

from .context import Context
from .parser import parse_context

PRELUDE = """
-- arithmetic
zero  : Int
one   : Int
plus  : Int -> Int -> Int
minus : Int -> Int -> Int
times : Int -> Int -> Int
eq    : Int -> Int -> Bool

-- booleans
true  : Bool
false : Bool
if    : forall a. Bool -> a -> a -> a

-- recursion
fix   : forall a. (a -> a) -> a

-- pairs
pair  : forall a b. a -> b -> Pair a b
fst   : forall a b. Pair a b -> a
snd   : forall a b. Pair a b -> b

-- lists
nil   : forall a. List a
cons  : forall a. a -> List a -> List a
head  : forall a. List a -> a
tail  : forall a. List a -> List a
isnil : forall a. List a -> Bool

unit  : Unit
"""


def prelude_context() -> Context:
    """Parse the prelude into a fresh context."""
    return parse_context(PRELUDE, "<prelude>")
