"""Recursive-descent parser for funlang, built from small parser combinators.

All grammar can be loosely defined as follows:

```
<program>     ::= (<identifier> "=" <expr> ";")+          ; must contain a binding named "main"

<expr>        ::= <variable> | <integer> | <boolean> | "(" <complex> ")"
<complex>     ::= <abstraction> | <application> | <conditional> | <binop>
<abstraction> ::= ("λ" | "\\") <identifier> "." <expr>
<application> ::= <expr> <expr>
<conditional> ::= "if" <expr> "then" <expr> "else" <expr>
<binop>       ::= <expr> <operator> <expr>
<operator>    ::= "+" | "-" | "*" | "/" | "==" | "<" | ">"

<variable>    ::= <identifier>                            ; reserved words are not identifiers
<identifier>  ::= [A-Za-z][A-Za-z0-9_]*
<integer>     ::= [0-9]+                                  ; must fit in a signed 64-bit integer
<boolean>     ::= "true" | "false"
```

Whitespace (newlines included) may appear around any token. Compound terms must always be parenthesized when used as
a subexpression, so `(f x y)` is a syntax error and has to be written `((f x) y)`.

Complex forms are tried in the order abstraction, application, conditional, binop. Abstractions and conditionals are
recognized by their leading token. Applications and binops both begin with an arbitrary <expr>, so that operand is
parsed once and the form is then chosen by what follows it: another <expr> makes an application, an <operator> makes a
binop. Nested parentheses therefore never cause an operand to be re-parsed.

A parser is any callable taking (source, pos) and returning (value, new_pos). On failure it calls source.fail, which
records what was expected at the furthest position reached and raises _Failure to backtrack.
"""

import re

from funlang.lang.error import MissingMainError, ParseError
from funlang.pure.term import (INT_MAX, Abstraction, Application, BooleanLiteral, Conditional, IntegerLiteral,
                               PrimitiveOp, PrimOp, Program, Variable)


RESERVED = {"if", "then", "else", "true", "false"}
MAIN = "main"

_WHITESPACE = re.compile(r"\s*")


class _Failure(Exception):
    """Raised by a parser that does not match at pos. Alternatives catch it to backtrack."""

    def __init__(self, pos):
        super().__init__(pos)
        self.pos = pos


class _Source:
    """Text being parsed, plus the furthest failure seen so far (used for error messages)."""

    def __init__(self, text):
        self.text = text
        self.furthest = 0
        self.expected = []

    def fail(self, pos, expected):
        if pos > self.furthest:
            self.furthest = pos
            self.expected = [expected]
        elif pos == self.furthest and expected not in self.expected:
            self.expected.append(expected)
        raise _Failure(pos)

    def error(self):
        return ParseError(" or ".join(self.expected), self.text, self.furthest)


def skip_whitespace(text, pos):
    return _WHITESPACE.match(text, pos).end()


# combinators

def literal(string, expected=None):
    """Matches string exactly."""
    expected = expected or f"'{string}'"

    def parser(source, pos):
        if source.text.startswith(string, pos):
            return string, pos + len(string)
        source.fail(pos, expected)

    return parser


def regex(pattern, expected):
    """Matches pattern at pos, returning the matched text."""
    compiled = re.compile(pattern)

    def parser(source, pos):
        match = compiled.match(source.text, pos)
        if match is None:
            source.fail(pos, expected)
        return match.group(), match.end()

    return parser


def keyword(word):
    """Matches word only if it is not the prefix of a longer identifier."""
    return regex(re.escape(word) + r"(?![A-Za-z0-9_])", f"'{word}'")


def ws(inner):
    """Runs inner, skipping whitespace before and after it."""

    def parser(source, pos):
        value, pos = inner(source, skip_whitespace(source.text, pos))
        return value, skip_whitespace(source.text, pos)

    return parser


def alt(*parsers):
    """Returns the result of the first parser that matches. Order is priority."""

    def parser(source, pos):
        for option in parsers[:-1]:
            try:
                return option(source, pos)
            except _Failure:
                continue
        return parsers[-1](source, pos)

    return parser


def mapped(inner, func):
    """Runs inner and transforms its value with func."""

    def parser(source, pos):
        value, pos = inner(source, pos)
        return func(value), pos

    return parser


def many1(inner):
    """Runs inner as many times as it matches, at least once. Returns the list of values."""

    def parser(source, pos):
        value, pos = inner(source, pos)
        values = [value]
        while True:
            try:
                value, pos = inner(source, pos)
            except _Failure:
                return values, pos
            values.append(value)

    return parser


# grammar

def identifier(source, pos):
    name, end = _IDENTIFIER(source, pos)
    if name in RESERVED:
        source.fail(pos, f"identifier ('{name}' is reserved)")
    return name, end


def integer_literal(source, pos):
    digits, end = _DIGITS(source, pos)
    value = int(digits)
    if value > INT_MAX:
        source.fail(pos, "integer within 64 bits")
    return IntegerLiteral(value), end


def expression(source, pos):
    """<expr>, with surrounding whitespace."""
    return _EXPRESSION(source, pos)


def parenthesized(source, pos):
    __, pos = _OPEN_PAREN(source, pos)
    term, pos = _COMPLEX(source, pos)
    __, pos = _CLOSE_PAREN(source, pos)
    return term, pos


def abstraction(source, pos):
    __, pos = _LAMBDA(source, pos)
    param, pos = _IDENTIFIER_TOKEN(source, pos)
    __, pos = _PERIOD(source, pos)
    body, pos = expression(source, pos)
    return Abstraction(param, body), pos


def operand_form(source, pos):
    """<application> or <binop>, which share their first operand."""
    left, pos = expression(source, pos)
    try:
        right, end = expression(source, pos)
        return Application(left, right), end
    except _Failure:
        pass

    op, pos = _OPERATOR(source, pos)
    right, pos = expression(source, pos)
    return PrimitiveOp(op, left, right), pos


def conditional(source, pos):
    __, pos = _IF(source, pos)
    cond, pos = expression(source, pos)
    __, pos = _THEN(source, pos)
    then, pos = expression(source, pos)
    __, pos = _ELSE(source, pos)
    else_, pos = expression(source, pos)
    return Conditional(cond, then, else_), pos


def binding(source, pos):
    """<identifier> "=" <expr> ";". Returns (name, term, position of name)."""
    start = skip_whitespace(source.text, pos)
    name, pos = _IDENTIFIER_TOKEN(source, pos)
    __, pos = _EQUALS(source, pos)
    term, pos = expression(source, pos)
    __, pos = _SEMICOLON(source, pos)
    return (name, term, start), pos


_IDENTIFIER = regex(r"[A-Za-z][A-Za-z0-9_]*", "identifier")
_DIGITS = regex(r"[0-9]+", "integer")

_IDENTIFIER_TOKEN = ws(identifier)
_OPEN_PAREN = ws(literal("("))
_CLOSE_PAREN = ws(literal(")"))
_LAMBDA = ws(alt(literal("λ"), literal("\\", "'λ'")))
_PERIOD = ws(literal("."))
_EQUALS = ws(literal("="))
_SEMICOLON = ws(literal(";"))
_IF = ws(keyword("if"))
_THEN = ws(keyword("then"))
_ELSE = ws(keyword("else"))
_OPERATOR = ws(alt(*(mapped(literal(op.symbol), lambda __, op=op: op) for op in PrimOp)))

_BOOLEAN = alt(
    mapped(keyword("true"), lambda __: BooleanLiteral(True)),
    mapped(keyword("false"), lambda __: BooleanLiteral(False))
)
_EXPRESSION = ws(alt(mapped(identifier, Variable), integer_literal, _BOOLEAN, parenthesized))
_COMPLEX = alt(abstraction, operand_form, conditional)
_PROGRAM = many1(binding)


def _run(parser, text):
    """Runs parser on all of text. Raises ParseError describing the furthest failure if text doesn't match."""
    source = _Source(text)
    try:
        value, pos = parser(source, skip_whitespace(text, 0))
        if pos != len(text):
            source.fail(pos, "end of input")
    except _Failure:
        raise source.error() from None
    return value


def parse_expression(text):
    """Parses a single <expr>. All of text must be consumed."""
    return _run(expression, text)


def parse_bindings(text):
    """Parses a sequence of bindings, returning a list of (name, term, position of name)."""
    return _run(_PROGRAM, text)


def parse_program(text):
    """Parses a sequence of bindings, returning a list of (name, term)."""
    return [(name, term) for name, term, __ in parse_bindings(text)]


def parse_main_program(text):
    """Parses a whole program into a Program. A later binding of a name replaces the earlier one, except for 'main',
    which must be bound exactly once.
    """
    env = {}
    for name, term, pos in parse_bindings(text):
        if name == MAIN and MAIN in env:
            raise ParseError(name, text, pos, msg="'{1}' is bound more than once", length=len(name))
        env[name] = term

    if MAIN not in env:
        raise MissingMainError(env)
    return Program(env, env[MAIN])
