"""Tests for the unification engine."""

import pytest
from algorithm_j.core import TVar, arrow, con
from algorithm_j.unify import AliasMap, Unifier, unify
from algorithm_j.errors import ImpossibleUnificationError, RecursiveTypeError


a, b, c = TVar("a"), TVar("b"), TVar("c")
INT = con("Int")
BOOL = con("Bool")
STRING = con("String")


def test_unify_variable_with_type():
    """Test that a variable is aliased to the other side."""
    aliases = unify(a, INT)
    assert aliases.lookup("a") == INT
    assert aliases.canonicalize(a) == INT


def test_unify_identical_types_records_nothing():
    """Test that identical operands leave the map untouched."""
    aliases = unify(arrow(a, INT), arrow(a, INT))
    assert len(aliases) == 0


def test_unify_two_variables():
    """Test that unifying two variables makes them canonically equal."""
    aliases = unify(a, b)
    assert aliases.canonicalize(a) == aliases.canonicalize(b)


def test_unify_applications_componentwise():
    """Test unification of constructor applications."""
    aliases = unify(arrow(a, con("List", b)), arrow(INT, con("List", BOOL)))
    assert aliases.canonicalize(arrow(a, b)) == arrow(INT, BOOL)


def test_canonicalize_follows_chains():
    """Test that alias chains are resolved transitively."""
    aliases = AliasMap()
    aliases.bind("a", b)
    aliases.bind("b", c)
    aliases.bind("c", con("List", TVar("d")))
    assert aliases.canonicalize(a) == con("List", TVar("d"))
    assert aliases.canonicalize(arrow(a, b)) == arrow(con("List", TVar("d")), con("List", TVar("d")))
    # Chains are kept as recorded.
    assert aliases.lookup("a") == b


def test_canonicalize_long_chain():
    """Test a chain much longer than any expression tree in the tests."""
    aliases = AliasMap()
    for i in range(5000):
        aliases.bind(f"v{i}", TVar(f"v{i + 1}"))
    aliases.bind("v5000", INT)
    assert aliases.canonicalize(TVar("v0")) == INT


def test_canonicalize_resolves_inside_applications():
    """Test that arguments of an application are canonicalized."""
    aliases = AliasMap()
    aliases.bind("a", INT)
    t = con("Pair", a, b)
    assert aliases.canonicalize(t) == con("Pair", INT, b)
    untouched = con("Pair", b, c)
    assert aliases.canonicalize(untouched) is untouched


def test_occurs_check():
    """Test that a variable cannot be unified with a type containing it."""
    with pytest.raises(RecursiveTypeError) as exc_info:
        unify(a, con("List", a))
    assert exc_info.value.variable == "a"
    assert exc_info.value.type == con("List", a)


def test_occurs_check_after_canonicalization():
    """Test that the occurs check sees through aliases."""
    aliases = AliasMap()
    aliases.bind("b", con("List", a))
    with pytest.raises(RecursiveTypeError):
        unify(a, b, aliases)


def test_constructor_mismatch():
    """Test that different constructors cannot be unified."""
    with pytest.raises(ImpossibleUnificationError) as exc_info:
        unify(INT, STRING)
    assert exc_info.value.left == INT
    assert exc_info.value.right == STRING


def test_arity_mismatch():
    """Test that equal constructor names with different arities fail."""
    with pytest.raises(ImpossibleUnificationError):
        unify(con("Pair", a, b), con("Pair", a))


def test_function_against_base_type():
    """Test that a function type does not unify with a base type."""
    with pytest.raises(ImpossibleUnificationError) as exc_info:
        unify(arrow(INT, INT), INT)
    assert exc_info.value.left == arrow(INT, INT)


def test_failure_payload_is_canonicalized():
    """Test that errors report the canonical forms of the operands."""
    aliases = AliasMap()
    aliases.bind("a", INT)
    with pytest.raises(ImpossibleUnificationError) as exc_info:
        unify(a, BOOL, aliases)
    assert exc_info.value.left == INT
    assert exc_info.value.right == BOOL


@pytest.mark.parametrize("left,right", [
    (a, INT),
    (a, b),
    (INT, STRING),
    (a, arrow(a, b)),
    (arrow(a, b), arrow(INT, BOOL)),
    (con("Pair", a, a), con("Pair", INT, BOOL)),
    (con("Pair", a), con("Pair", a, b)),
    (arrow(a, a), arrow(b, con("List", b))),
])
def test_unify_is_symmetric(left, right):
    """Test that unify(A, B) and unify(B, A) agree on success or failure."""
    def outcome(x, y):
        try:
            unify(x, y)
            return None
        except (ImpossibleUnificationError, RecursiveTypeError) as e:
            return type(e)

    assert outcome(left, right) == outcome(right, left)


def test_unification_is_not_transactional():
    """Test that bindings made before a failure stay in the map."""
    unifier = Unifier()
    with pytest.raises(ImpossibleUnificationError):
        unifier.unify(con("Pair", a, INT), con("Pair", BOOL, BOOL))
    assert unifier.aliases.lookup("a") == BOOL


def test_first_failure_aborts_remaining_pairs():
    """Test that later argument pairs are not unified after a failure."""
    unifier = Unifier()
    with pytest.raises(ImpossibleUnificationError):
        unifier.unify(con("Pair", INT, b), con("Pair", BOOL, c))
    assert "b" not in unifier.aliases
    assert "c" not in unifier.aliases


def test_rebinding_an_aliased_variable_is_an_invariant_violation():
    """Test that the alias map refuses to alias a variable twice."""
    aliases = AliasMap()
    aliases.bind("a", INT)
    with pytest.raises(AssertionError):
        aliases.bind("a", BOOL)
