"""Command-line interface for algorithm-j."""

import click
import sys
from typing import Optional, Tuple

from algorithm_j import __version__


@click.command()
@click.argument('expression', required=False)
@click.option('--file', '-f', 'filename', type=click.Path(exists=True, dir_okay=False),
              help='Read the expression from a file')
@click.option('--bind', '-b', 'bindings', multiple=True, metavar="'NAME : TYPE'",
              help='Add a binding to the initial context (repeatable)')
@click.option('--context', '-c', 'context_file', type=click.Path(exists=True, dir_okay=False),
              help='Read additional bindings from a file, one per line')
@click.option('--prelude/--no-prelude', default=True, help='Start from the built-in primitives')
@click.option('--type-only', '-t', is_flag=True, help='Print only the inferred type')
@click.option('--ascii', is_flag=True, help='Use ASCII symbols in output')
@click.option('--raw', is_flag=True, help='Do not rename quantified variables to a, b, c, ...')
@click.option('--verbose', '-v', is_flag=True, help='Show the type derivation trace and debug logs')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.option('--version', is_flag=True, help='Show version information')
def main(expression: Optional[str] = None,
         filename: Optional[str] = None,
         bindings: Tuple[str, ...] = (),
         context_file: Optional[str] = None,
         prelude: bool = True,
         type_only: bool = False,
         ascii: bool = False,
         raw: bool = False,
         verbose: bool = False,
         no_color: bool = False,
         version: bool = False) -> None:
    """algorithm-j - Hindley-Milner type inference for the lambda calculus.

    If EXPRESSION or --file is given, infer its most general type.
    Otherwise, start an interactive REPL.

    Examples:

      algorithm-j 'λf. λx. f x'

      algorithm-j --no-prelude -b 'n : Int' 'let id = λx. x in id n'

      algorithm-j -v 'let double = λx. plus x x in λn. double (double n)'
    """
    from algorithm_j.colors import Colors, disable_colors
    from algorithm_j.config import Config, configure_logging

    if version:
        click.echo(f"algorithm-j version {__version__}")
        sys.exit(0)

    if no_color:
        disable_colors()
    configure_logging(verbose)

    config = Config(
        use_prelude=prelude,
        ascii=ascii,
        normalize=not raw,
        verbose=verbose,
        color=not no_color,
        bindings=list(bindings),
        context_file=context_file,
    )

    from algorithm_j.errors import AlgorithmJError, InferenceError

    if expression is None and filename is None:
        from algorithm_j.repl import Repl
        try:
            repl = Repl(config)
        except AlgorithmJError as e:
            click.echo(e.format_error(), err=True)
            sys.exit(1)
        repl.run()
        return

    from algorithm_j.error_reporting import DerivationTrace
    from algorithm_j.inference import infer
    from algorithm_j.judgment import Typing
    from algorithm_j.parser import parse_expr
    from algorithm_j.pretty import format_poly, format_typing, normalize

    source = expression
    source_name = "<command line>"
    if filename:
        with open(filename, 'r', encoding='utf-8') as f:
            source = f.read()
        source_name = filename

    try:
        ctxt = config.initial_context()
        expr = parse_expr(source, source_name)
        trace = DerivationTrace(enabled=verbose)
        scheme = infer(expr, ctxt, trace)
    except InferenceError as e:
        e.context.source_code = e.context.source_code or source
        click.echo(e.format_error(), err=True)
        sys.exit(2)
    except AlgorithmJError as e:
        if e.context.filename == source_name:
            e.context.source_code = source
        click.echo(e.format_error(), err=True)
        sys.exit(1)

    if trace.enabled:
        click.echo(trace.format())
    if config.normalize:
        scheme = normalize(scheme)

    if type_only:
        click.echo(Colors.type_name(format_poly(scheme, ascii)))
    else:
        click.echo(format_typing(Typing(ctxt, expr, scheme), ascii))


if __name__ == "__main__":
    main()
