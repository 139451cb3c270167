"""Interactive type inference session.

Expressions typed at the prompt are inferred against the session context.
`:let` adds the generalized type of an expression to the context, so later
inputs can use it polymorphically.
"""

from __future__ import annotations
from typing import List, Optional
import os

from .colors import Colors
from .config import Config
from .context import Context
from .core import Polytype
from .error_reporting import DerivationTrace
from .errors import AlgorithmJError
from .inference import infer
from .parser import parse_binding, parse_expr
from .pretty import format_poly, normalize


class ReplState:
    """State of the REPL session."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.context: Context = self.config.initial_context()
        self.history: List[str] = []
        self.trace_enabled = self.config.verbose

    def reset(self) -> None:
        self.context = self.config.initial_context()

    def render(self, scheme: Polytype) -> str:
        if self.config.normalize:
            scheme = normalize(scheme)
        return format_poly(scheme, self.config.ascii)

    def infer_source(self, source: str) -> Polytype:
        """Parse and infer an expression against the session context."""
        trace = DerivationTrace(enabled=self.trace_enabled)
        scheme = infer(parse_expr(source), self.context, trace)
        if trace.enabled:
            print(trace.format())
        return scheme

    def define(self, name: str, source: str) -> Polytype:
        """Infer `source` and bind its scheme to `name`."""
        scheme = self.infer_source(source)
        self.context = self.context.extend(name, scheme)
        return scheme


class Repl:
    """The REPL interface."""

    HELP = """
Commands:

  :help, :h              Show this help message
  :quit, :q              Exit the REPL
  :type, :t <expr>       Show the inferred type of an expression
  :let <name> = <expr>   Infer an expression and bind it in the context
  :bind <name> : <type>  Add a binding with the given type scheme
  :context, :c           Show the current context
  :clear                 Reset the context
  :trace                 Toggle the type derivation trace

Syntax:

  x                      Variable
  f x y                  Application
  λx. e   \\x. e   lambda x. e
  let x = e in b         Let binding (generalized)
  forall a b. a -> b     Type scheme
"""

    def __init__(self, config: Optional[Config] = None):
        self.state = ReplState(config)
        self.histfile = os.path.expanduser("~/.algorithm_j_history")

    def _setup_readline(self) -> None:
        """Setup readline with history and completion."""
        try:
            import readline
        except ImportError:
            return
        try:
            readline.read_history_file(self.histfile)
        except (FileNotFoundError, OSError):
            pass

        import atexit
        atexit.register(readline.write_history_file, self.histfile)

        readline.set_completer(self._completer)
        readline.parse_and_bind("tab: complete")

    def _completer(self, text: str, state: int) -> Optional[str]:
        """Tab completion for bound names and keywords."""
        names = self.state.context.names() + ["let", "in", "lambda", "forall"]
        matches = [name for name in names if name.startswith(text)]
        if state < len(matches):
            return matches[state]
        return None

    def run(self) -> None:
        """Run the REPL."""
        self._setup_readline()
        print(Colors.bold("algorithm-j REPL"))
        print(f"Type {Colors.keyword(':help')} for help, {Colors.keyword(':quit')} to exit")
        print()

        while True:
            try:
                line = input(f"{Colors.BRIGHT_BLUE}λ>{Colors.RESET} ")
            except EOFError:
                print("\nGoodbye!")
                break
            except KeyboardInterrupt:
                print("\nUse :quit to exit")
                continue

            if line.strip().startswith(":"):
                if not self.handle_command(line.strip()):
                    print("Goodbye!")
                    break
            else:
                self.process_input(line)

    def handle_command(self, command: str) -> bool:
        """Handle a REPL command. Returns False when the session should end."""
        cmd, _, argument = command.partition(" ")
        argument = argument.strip()

        if cmd in [":quit", ":q"]:
            return False

        elif cmd in [":help", ":h"]:
            print(self.HELP)

        elif cmd in [":type", ":t"]:
            if not argument:
                print("Usage: :type <expr>")
            else:
                self.process_input(argument)

        elif cmd == ":let":
            name, equals, source = argument.partition("=")
            name = name.strip()
            if not equals or not name.isidentifier() or not source.strip():
                print("Usage: :let <name> = <expr>")
            else:
                self._report(lambda: self._define(name, source))

        elif cmd == ":bind":
            if not argument:
                print("Usage: :bind <name> : <type>")
            else:
                self._report(lambda: self._bind(argument))

        elif cmd in [":context", ":c"]:
            self.show_context()

        elif cmd == ":clear":
            self.state.reset()
            print("Context reset")

        elif cmd == ":trace":
            self.state.trace_enabled = not self.state.trace_enabled
            print(f"Trace {'enabled' if self.state.trace_enabled else 'disabled'}")

        else:
            print(f"Unknown command: {cmd}")
            print("Type :help for help")

        return True

    def _define(self, name: str, source: str) -> None:
        scheme = self.state.define(name, source)
        print(Colors.success(f"{Colors.var_name(name)} : {Colors.type_name(self.state.render(scheme))}"))

    def _bind(self, source: str) -> None:
        name, scheme = parse_binding(source)
        self.state.context = self.state.context.extend(name, scheme)
        print(Colors.success(f"{Colors.var_name(name)} : {Colors.type_name(format_poly(scheme, self.state.config.ascii))}"))

    def show_context(self) -> None:
        if not len(self.state.context):
            print("Empty context")
            return
        for binding in self.state.context:
            rendered = format_poly(binding.scheme, self.state.config.ascii)
            print(f"  {Colors.var_name(binding.name)} : {Colors.type_name(rendered)}")

    def process_input(self, source: str) -> None:
        """Infer and print the type of an expression."""
        if not source.strip():
            return
        self.state.history.append(source)
        self._report(lambda: print(Colors.type_name(self.state.render(self.state.infer_source(source)))))

    def _report(self, action) -> None:
        try:
            action()
        except AlgorithmJError as e:
            print(e.format_error())

