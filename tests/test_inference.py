"""Tests for Algorithm J inference."""

import pytest
from algorithm_j.core import *
from algorithm_j.context import Context
from algorithm_j.syntax import Abs, App, Let, Var, app, lam, let, var
from algorithm_j.inference import Algorithm, infer, infer_typing
from algorithm_j.errors import (
    ImpossibleUnificationError,
    InferenceError,
    RecursiveTypeError,
    UnknownVariableError,
)
from algorithm_j.error_reporting import DerivationTrace
from algorithm_j.parser import parse_context, parse_expr, parse_poly
from algorithm_j.prelude import prelude_context


INT = con("Int")
STRING = con("String")


def infer_source(source: str, ctxt: Context = None) -> Polytype:
    return infer(parse_expr(source), ctxt)


def assert_alpha_equivalent(actual: Polytype, expected: str) -> None:
    assert alpha_equivalent(actual, parse_poly(expected)), f"{actual} is not {expected}"


@pytest.mark.parametrize("name", ["x", "plus", "y'", "Foo"])
def test_unknown_variable(name):
    """Test that an unbound name fails with the unknown-variable error only."""
    with pytest.raises(UnknownVariableError) as exc_info:
        infer(Var(name), Context())
    assert exc_info.value.name == name


def test_unknown_variable_inside_lambda():
    """Test that lookups under binders still report missing names."""
    with pytest.raises(UnknownVariableError) as exc_info:
        infer(lam("x", app(var("x"), var("y"))))
    assert exc_info.value.name == "y"


def test_self_application_is_recursive():
    """Test that λx. x x is rejected by the occurs check."""
    with pytest.raises(RecursiveTypeError) as exc_info:
        infer(lam("x", app(var("x"), var("x"))), Context())
    error = exc_info.value
    assert isinstance(error.type, TApp) and error.type.is_arrow()
    assert error.type.args[0] == TVar(error.variable)


def test_identity():
    """Test the type of the identity function."""
    assert_alpha_equivalent(infer_source("λx. x"), "forall a. a -> a")


def test_apply():
    """Test λf. λx. f x."""
    scheme = infer(lam("f", "x", app(var("f"), var("x"))), Context())
    assert_alpha_equivalent(scheme, "forall a b. (a -> b) -> a -> b")


def test_const_and_compose():
    """Test the K combinator and function composition."""
    assert_alpha_equivalent(infer_source("λx y. x"), "forall a b. a -> b -> a")
    assert_alpha_equivalent(
        infer_source("λf g x. f (g x)"),
        "forall a b c. (a -> b) -> (c -> a) -> c -> b",
    )


def test_let_polymorphism():
    """Test that a let-bound identity can be used at a concrete type."""
    ctxt = Context().extend("n", Polytype.mono(INT))
    scheme = infer(let("id", lam("x", var("x")), app(var("id"), var("n"))), ctxt)
    assert scheme == Polytype.mono(INT)


def test_let_bound_function_used_at_two_types():
    """Test that generalization allows two instantiations of one binding."""
    ctxt = parse_context("n : Int, s : String, pair : forall a b. a -> b -> Pair a b")
    scheme = infer_source("let id = λx. x in pair (id n) (id s)", ctxt)
    assert scheme == Polytype.mono(con("Pair", INT, STRING))


def test_lambda_bound_names_are_monomorphic():
    """Test that a lambda parameter cannot be used at two types."""
    ctxt = parse_context("n : Int, s : String, pair : forall a b. a -> b -> Pair a b")
    with pytest.raises(ImpossibleUnificationError):
        infer_source("(λid. pair (id n) (id s)) (λx. x)", ctxt)


def test_let_does_not_generalize_context_variables():
    """Test that a let inside a lambda keeps the parameter's type shared."""
    ctxt = parse_context("n : Int, s : String, pair : forall a b. a -> b -> Pair a b")
    with pytest.raises(ImpossibleUnificationError):
        infer_source("λf. let g = f in pair (g n) (g s)", ctxt)
    assert_alpha_equivalent(infer_source("λx. let y = x in y"), "forall a. a -> a")


def test_unify_argument_mismatch():
    """Test that incompatible argument types are reported."""
    ctxt = Context.of([
        ("unify", parse_poly("forall x. x -> x -> x")),
        ("n", Polytype.mono(INT)),
        ("s", Polytype.mono(STRING)),
    ])
    with pytest.raises(ImpossibleUnificationError) as exc_info:
        infer(app(var("unify"), var("n"), var("s")), ctxt)
    assert {exc_info.value.left, exc_info.value.right} == {INT, STRING}


def test_applying_a_non_function():
    """Test that applying a base-typed value fails."""
    ctxt = Context().extend("n", Polytype.mono(INT))
    with pytest.raises(ImpossibleUnificationError):
        infer_source("n n", ctxt)


def test_free_context_variables_stay_free():
    """Test that the result is generalized against the initial context."""
    ctxt = Context().extend("x", Polytype.mono(TVar("a")))
    scheme = infer_source("λy. x", ctxt)
    assert scheme.quantified.isdisjoint({"a"})
    assert "a" in scheme.free()
    assert_alpha_equivalent(scheme, "forall b. b -> a")


def test_shadowing():
    """Test that the innermost binding of a name is used."""
    ctxt = parse_context("x : Int, s : String")
    assert infer_source("let x = s in x", ctxt) == Polytype.mono(STRING)
    assert_alpha_equivalent(infer_source("λx. λx. x"), "forall a b. a -> b -> b")


def test_context_is_not_modified():
    """Test that inference never changes the caller's context."""
    ctxt = parse_context("n : Int")
    before = ctxt.bindings
    infer_source("let id = λx. x in λy. id n", ctxt)
    assert ctxt.bindings is before
    assert len(ctxt) == 1


def test_prelude_programs():
    """Test inference against the built-in primitives."""
    ctxt = prelude_context()
    assert infer_source(
        "let double = λx. plus x x in λn. double (double n)", ctxt
    ) == Polytype.mono(arrow(INT, INT))
    assert_alpha_equivalent(
        infer_source("fix (λlength xs. if (isnil xs) zero (plus one (length (tail xs))))", ctxt),
        "forall a. List a -> Int",
    )
    assert_alpha_equivalent(
        infer_source("fix (λmap f xs. if (isnil xs) nil (cons (f (head xs)) (map f (tail xs))))", ctxt),
        "forall a b. (a -> b) -> List a -> List b",
    )


def test_independent_runs():
    """Test that each call starts with a fresh counter and alias map."""
    expr = parse_expr("λf x. f x")
    first = infer(expr)
    second = infer(expr)
    assert first == second


def test_algorithm_state_is_per_instance():
    """Test that two drivers do not share state."""
    one = Algorithm()
    two = Algorithm()
    one.infer(parse_expr("λx. x"), Context())
    assert one.counter == 1
    assert two.counter == 0
    assert len(two.aliases) == 0
    assert two.fresh() == TVar("t1")


def test_driver_infer_returns_monotype():
    """Test the monotype produced before final generalization."""
    algorithm = Algorithm()
    t = algorithm.infer(parse_expr("λf x. f x"), Context())
    assert algorithm.canonicalize(t) == arrow(arrow(TVar("t2"), TVar("t3")), arrow(TVar("t2"), TVar("t3")))


def test_trace_records_steps():
    """Test that an enabled trace collects derivation steps."""
    trace = DerivationTrace(enabled=True)
    infer(parse_expr("let id = λx. x in id"), Context(), trace)
    descriptions = [step.description for step in trace.steps]
    assert "Generalize id" in descriptions
    assert descriptions[-1] == "Generalize result"
    assert "Type Derivation Trace" in trace.format()


def test_disabled_trace_stays_empty():
    trace = DerivationTrace()
    infer(parse_expr("λx. x"), Context(), trace)
    assert trace.steps == []


def test_error_carries_enabled_trace():
    """Test that a failing run attaches its trace to the error."""
    trace = DerivationTrace(enabled=True)
    with pytest.raises(InferenceError) as exc_info:
        infer(parse_expr("λx. x x"), Context(), trace)
    assert exc_info.value.trace is trace


def test_infer_typing():
    """Test that the judgment packages context, expression and scheme."""
    ctxt = parse_context("n : Int")
    expr = parse_expr("let id = λx. x in id")
    typing = infer_typing(expr, ctxt)
    assert typing.context is ctxt
    assert typing.expr == expr
    assert_alpha_equivalent(typing.scheme, "forall a. a -> a")
    assert typing.free() == frozenset()


def test_nested_let():
    """Test lets that refer to earlier lets."""
    assert_alpha_equivalent(
        infer(let("id", lam("x", var("x")), let("k", lam("a", "b", var("a")), App(var("k"), var("id"))))),
        "forall a b. a -> b -> b",
    )


def test_lambda_structure_helpers():
    """Test the expression helpers build the expected tree."""
    assert lam("x", "y", var("x")) == Abs("x", Abs("y", Var("x")))
    assert app(var("f"), var("x"), var("y")) == App(App(Var("f"), Var("x")), Var("y"))
    assert let("x", var("y"), var("x")) == Let("x", Var("y"), Var("x"))


def test_to_as_a_term_variable():
    assert_alpha_equivalent(infer_source("λto. to"), "forall a. a to a")
