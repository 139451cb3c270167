"""Tests for the command-line interface."""

from click.testing import CliRunner

from algorithm_j import __version__
from algorithm_j.cli import main
from algorithm_j.colors import disable_colors

disable_colors()


def run(*args, input=None):
    return CliRunner().invoke(main, ["--no-color", *args], input=input)


def test_version():
    result = run("--version")
    assert result.exit_code == 0
    assert f"algorithm-j version {__version__}" in result.output


def test_type_only():
    """Test printing just the normalized scheme."""
    result = run("--no-prelude", "-t", "λf. λx. f x")
    assert result.exit_code == 0
    assert result.output.strip() == "∀a b. (a → b) → a → b"


def test_judgment_output():
    """Test the default Γ ⊢ e : σ output."""
    result = run("--no-prelude", "-b", "n : Int", "let id = λx. x in id n")
    assert result.exit_code == 0
    assert result.output.strip() == "n : Int ⊢ let id = λx. x in id n : Int"


def test_ascii_output():
    result = run("--no-prelude", "--ascii", "\\f. \\x. f x")
    assert result.exit_code == 0
    assert result.output.strip() == "{} |- \\f. \\x. f x : forall a b. (a -> b) -> a -> b"


def test_raw_output_keeps_generated_names():
    result = run("--no-prelude", "--raw", "-t", "λx. x")
    assert result.exit_code == 0
    assert result.output.strip() == "∀t1. t1 → t1"


def test_prelude_is_on_by_default():
    result = run("-t", "let double = λx. plus x x in λn. double (double n)")
    assert result.exit_code == 0
    assert result.output.strip() == "Int → Int"


def test_inference_error_exit_code():
    """Test that inference failures exit with status 2."""
    result = run("--no-prelude", "x")
    assert result.exit_code == 2
    assert "Unknown variable 'x'" in result.output


def test_occurs_check_failure():
    result = run("--no-prelude", "λx. x x")
    assert result.exit_code == 2
    assert "recursive type" in result.output


def test_misspelled_prelude_name():
    result = run("plsu one one")
    assert result.exit_code == 2
    assert "'plus'" in result.output


def test_parse_error_exit_code():
    """Test that syntax errors exit with status 1 and show the source."""
    result = run("--no-prelude", "λx")
    assert result.exit_code == 1
    assert "Parse error" in result.output
    assert "λx" in result.output


def test_bad_binding():
    result = run("--no-prelude", "-b", "n Int", "n")
    assert result.exit_code == 1
    assert "Parse error" in result.output


def test_file_input(tmp_path):
    """Test reading the expression from a file."""
    program = tmp_path / "program.lam"
    program.write_text("-- identity\nlet id = λx. x\nin id\n", encoding="utf-8")
    result = run("--no-prelude", "-t", "--file", str(program))
    assert result.exit_code == 0
    assert result.output.strip() == "∀a. a → a"


def test_file_parse_error_names_the_file(tmp_path):
    program = tmp_path / "broken.lam"
    program.write_text("let id = λx. x\n", encoding="utf-8")
    result = run("--no-prelude", "--file", str(program))
    assert result.exit_code == 1
    assert "broken.lam" in result.output


def test_context_file(tmp_path):
    """Test loading extra bindings from a file."""
    bindings = tmp_path / "env.ctx"
    bindings.write_text("n : Int\ns : String\n", encoding="utf-8")
    result = run("-t", "--context", str(bindings), "pair n s")
    assert result.exit_code == 0
    assert result.output.strip() == "Pair Int String"


def test_verbose_prints_trace():
    result = run("--no-prelude", "-v", "let id = λx. x in id")
    assert result.exit_code == 0
    assert "Type Derivation Trace" in result.output
    assert "Generalize id" in result.output


def test_bad_binding_before_repl():
    """Test that a malformed --bind is reported when no expression is given."""
    result = run("--no-prelude", "-b", "x", input=":quit\n")
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Parse error" in result.output


def test_repl_uses_bindings_and_context_file(tmp_path, monkeypatch):
    """Test that the REPL starts from --bind and --context bindings."""
    from algorithm_j.repl import Repl

    monkeypatch.setattr(Repl, "_setup_readline", lambda self: None)
    bindings = tmp_path / "env.ctx"
    bindings.write_text("s : String\n", encoding="utf-8")
    result = run("-b", "n : Int", "--context", str(bindings), input="pair n s\n:quit\n")
    assert result.exit_code == 0
    assert "Pair Int String" in result.output
