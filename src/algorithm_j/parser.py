"""Recursive descent parser for lambda terms, types and contexts.

Expression grammar::

    expr  := LAMBDA IDENT+ '.' expr
           | 'let' IDENT '=' expr 'in' expr
           | app
    app   := atom atom*
    atom  := IDENT | '(' expr ')'

Type grammar (capitalized names are constructors, others are variables)::

    scheme := FORALL IDENT (','? IDENT)* '.' mono | mono
    mono   := tapp (ARROW mono)?
    tapp   := CON atype* | atype
    atype  := IDENT | '(' mono ')'

Inside types the identifier `to` is also an arrow; in expressions it is an
ordinary variable name.
"""

from typing import List, Optional, Tuple

from .lexer import Token, TokenType, lex
from .syntax import Abs, App, Expr, Let, SourceLocation, Var
from .core import Monotype, Polytype, TApp, TVar, arrow
from .context import Context
from .errors import ParseError


def _describe(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.NEWLINE:
        return "end of line"
    return f"'{token.value}'"


def is_constructor_name(name: str) -> bool:
    return name[:1].isupper()


TYPE_ARROW_WORD = "to"


class Parser:
    """Recursive descent parser."""

    def __init__(self, tokens: List[Token], filename: Optional[str] = None):
        self.tokens = tokens
        self.filename = filename
        self.position = 0
        self.current_token = tokens[0] if tokens else Token(TokenType.EOF, "", 1, 1)

    def advance(self) -> None:
        """Move to the next token."""
        if self.position < len(self.tokens) - 1:
            self.position += 1
            self.current_token = self.tokens[self.position]

    def error(self, message: str, token: Optional[Token] = None) -> ParseError:
        token = token or self.current_token
        return ParseError(message, token.line, token.column, self.filename, max(1, len(token.value)))

    def location(self) -> SourceLocation:
        return SourceLocation(self.current_token.line, self.current_token.column, self.filename)

    def expect(self, token_type: TokenType, description: str) -> Token:
        """Consume a token of the expected type."""
        if self.current_token.type != token_type:
            if self.current_token.type == TokenType.EOF:
                raise self.error(f"Unexpected end of input, expected {description}")
            raise self.error(f"Expected {description}, got {_describe(self.current_token)}")
        token = self.current_token
        self.advance()
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token.type in token_types

    def consume(self, token_type: TokenType) -> bool:
        """Consume a token if it matches the type."""
        if self.current_token.type == token_type:
            self.advance()
            return True
        return False

    def skip_newlines(self) -> None:
        while self.current_token.type == TokenType.NEWLINE:
            self.advance()

    def expect_end(self) -> None:
        self.skip_newlines()
        if not self.match(TokenType.EOF):
            raise self.error(f"Unexpected trailing input starting at {_describe(self.current_token)}")

    # Expression parsing

    def parse_expr(self) -> Expr:
        """Parse an expression."""
        location = self.location()

        if self.consume(TokenType.LAMBDA):
            params = [self.expect(TokenType.IDENT, "a parameter name").value]
            while self.match(TokenType.IDENT):
                params.append(self.current_token.value)
                self.advance()
            self.expect(TokenType.DOT, "'.'")
            body = self.parse_expr()
            for param in reversed(params):
                body = Abs(param, body, location)
            return body

        if self.consume(TokenType.LET):
            name = self.expect(TokenType.IDENT, "a variable").value
            self.expect(TokenType.EQUALS, "'='")
            value = self.parse_expr()
            self.expect(TokenType.IN, "'in'")
            body = self.parse_expr()
            return Let(name, value, body, location)

        if self.match(TokenType.IDENT, TokenType.LPAREN):
            return self.parse_application()

        if self.match(TokenType.EOF):
            raise self.error("Unexpected end of input, expected an expression")
        raise self.error(
            f"Expected 'λ', 'let', '(' or a variable, got {_describe(self.current_token)}"
        )

    def parse_application(self) -> Expr:
        """Parse left-associative application."""
        expr = self.parse_atom()
        while self.match(TokenType.IDENT, TokenType.LPAREN):
            location = self.location()
            argument = self.parse_atom()
            expr = App(expr, argument, location)
        return expr

    def parse_atom(self) -> Expr:
        """Parse a variable or a parenthesized expression."""
        if self.match(TokenType.IDENT):
            token = self.current_token
            self.advance()
            return Var(token.value, SourceLocation(token.line, token.column, self.filename))

        if self.consume(TokenType.LPAREN):
            expr = self.parse_expr()
            self.expect(TokenType.RPAREN, "')'")
            return expr

        raise self.error(f"Expected '(' or a variable, got {_describe(self.current_token)}")

    # Type parsing

    def parse_poly(self) -> Polytype:
        """Parse a type scheme."""
        if self.consume(TokenType.FORALL):
            variables = [self.expect(TokenType.IDENT, "a type variable").value]
            while self.match(TokenType.IDENT, TokenType.COMMA):
                if self.consume(TokenType.COMMA):
                    continue
                variables.append(self.current_token.value)
                self.advance()
            for name in variables:
                if is_constructor_name(name):
                    raise self.error(f"Type constructor '{name}' cannot be quantified")
            self.expect(TokenType.DOT, "'.'")
            return Polytype(frozenset(variables), self.parse_mono())
        return Polytype.mono(self.parse_mono())

    def parse_mono(self) -> Monotype:
        """Parse a monotype; arrows associate to the right."""
        domain = self.parse_type_application()
        if self.at_type_arrow():
            self.advance()
            return arrow(domain, self.parse_mono())
        return domain

    def at_type_arrow(self) -> bool:
        if self.match(TokenType.ARROW):
            return True
        return self.match(TokenType.IDENT) and self.current_token.value == TYPE_ARROW_WORD

    def parse_type_application(self) -> Monotype:
        if self.match(TokenType.IDENT) and is_constructor_name(self.current_token.value):
            name = self.current_token.value
            self.advance()
            args = []
            while self.match(TokenType.IDENT, TokenType.LPAREN) and not self.at_type_arrow():
                args.append(self.parse_atomic_type())
            return TApp(name, tuple(args))
        return self.parse_atomic_type()

    def parse_atomic_type(self) -> Monotype:
        if self.match(TokenType.IDENT) and not self.at_type_arrow():
            name = self.current_token.value
            self.advance()
            if is_constructor_name(name):
                return TApp(name, ())
            return TVar(name)

        if self.consume(TokenType.LPAREN):
            t = self.parse_mono()
            self.expect(TokenType.RPAREN, "')'")
            return t

        if self.match(TokenType.EOF):
            raise self.error("Unexpected end of input, expected a type")
        raise self.error(f"Expected a type, got {_describe(self.current_token)}")

    # Contexts

    def parse_binding(self) -> Tuple[str, Polytype]:
        name = self.expect(TokenType.IDENT, "a variable").value
        self.expect(TokenType.COLON, "':'")
        return name, self.parse_poly()

    def parse_context(self) -> Context:
        """Parse ``name : scheme`` bindings separated by ',', ';' or newlines."""
        bindings = []
        self.skip_newlines()
        while not self.match(TokenType.EOF):
            bindings.append(self.parse_binding())
            if not self.match(TokenType.COMMA, TokenType.SEMICOLON, TokenType.NEWLINE, TokenType.EOF):
                raise self.error(f"Expected ',' or a new line, got {_describe(self.current_token)}")
            while self.match(TokenType.COMMA, TokenType.SEMICOLON, TokenType.NEWLINE):
                self.advance()
        return Context.of(bindings)


def parse_expr(source: str, filename: Optional[str] = None) -> Expr:
    """Parse a complete expression."""
    parser = Parser(lex(source, filename), filename)
    expr = parser.parse_expr()
    parser.expect_end()
    return expr


def parse_mono(source: str) -> Monotype:
    """Parse a complete monotype."""
    parser = Parser(lex(source))
    t = parser.parse_mono()
    parser.expect_end()
    return t


def parse_poly(source: str) -> Polytype:
    """Parse a complete type scheme, e.g. ``forall a. a -> a``."""
    parser = Parser(lex(source))
    scheme = parser.parse_poly()
    parser.expect_end()
    return scheme


def parse_binding(source: str) -> Tuple[str, Polytype]:
    """Parse a single ``name : scheme`` binding."""
    parser = Parser(lex(source))
    binding = parser.parse_binding()
    parser.expect_end()
    return binding


def parse_context(source: str, filename: Optional[str] = None) -> Context:
    """Parse a sequence of bindings into a context."""
    parser = Parser(lex(source, filename, keep_newlines=True), filename)
    return parser.parse_context()

