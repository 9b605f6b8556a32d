"""Term model for the funlang language: pure lambda calculus extended with integers, booleans, conditionals and
primitive operations.

```
<term> ::= <variable>                               ; "variable"
         | "λ" <variable> "." <term>                ; "abstraction"
         | <term> <term>                            ; "application"
         | <integer> | <boolean>                    ; literals
         | "if" <term> "then" <term> "else" <term>  ; "conditional"
         | <term> <operator> <term>                 ; "primitive operation"
```

Terms are immutable trees: substitution and evaluation always build new terms, so a subterm can be handed around
freely without being copied.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class PrimOp(Enum):
    """Primitive binary operators. Values are the operator symbols used by the parser and printer."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    EQ = "=="
    LT = "<"
    GT = ">"

    @property
    def symbol(self):
        return self.value

    @property
    def is_arithmetic(self):
        return self in (PrimOp.ADD, PrimOp.SUB, PrimOp.MUL, PrimOp.DIV)

    @property
    def is_comparison(self):
        return self in (PrimOp.LT, PrimOp.GT)


class Term:
    """Superclass of every term. Subclasses are frozen dataclasses, so equality is structural."""

    @property
    def nodes(self):
        """Child terms, left to right."""
        return ()

    def display(self, indents=0):
        """Recursively displays term tree with readable format.

        Format:
        <Term>(<leaf>, nodes=[
            <Term>(<leaf>, nodes=[
                ...
                <Term>(<leaf>)  # <-- if nodes is empty
            ])
        ])
        """
        leaf = self._leaf()
        result = f"{'    ' * indents}{type(self).__name__}({leaf}"
        if self.nodes:
            result += ", nodes=[" if leaf else "nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def _leaf(self):
        """Non-term payload of this node, as shown by display."""
        return ""

    def __str__(self):
        from funlang.pure.printer import pretty_print  # printer depends on this module
        return pretty_print(self)


@dataclass(frozen=True)
class Variable(Term):
    name: str

    def _leaf(self):
        return repr(self.name)


@dataclass(frozen=True)
class Abstraction(Term):
    param: str
    body: Term

    @property
    def nodes(self):
        return (self.body,)

    def _leaf(self):
        return repr(self.param)


@dataclass(frozen=True)
class Application(Term):
    left: Term
    right: Term

    @property
    def nodes(self):
        return self.left, self.right


@dataclass(frozen=True)
class IntegerLiteral(Term):
    value: int

    def _leaf(self):
        return str(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Term):
    value: bool

    def _leaf(self):
        return str(self.value)


@dataclass(frozen=True)
class Conditional(Term):
    cond: Term
    then: Term
    else_: Term

    @property
    def nodes(self):
        return self.cond, self.then, self.else_


@dataclass(frozen=True)
class PrimitiveOp(Term):
    op: PrimOp
    left: Term
    right: Term

    @property
    def nodes(self):
        return self.left, self.right

    def _leaf(self):
        return repr(self.op.symbol)


# range of IntegerLiteral values (signed 64-bit)
INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1

# binds names to terms
Environment = Dict[str, Term]


@dataclass(frozen=True)
class Program:
    """Top-level bindings of a source file together with the term bound to 'main'."""
    env: Environment
    main: Term


def var(name):
    return Variable(name)


def lam(param, body):
    return Abstraction(param, body)


def app(left, right):
    return Application(left, right)


def integer(value):
    return IntegerLiteral(value)


def boolean(value):
    return BooleanLiteral(value)


def ifte(cond, then, else_):
    return Conditional(cond, then, else_)


def primop(op, left, right):
    return PrimitiveOp(op, left, right)


def add(left, right):
    return primop(PrimOp.ADD, left, right)


def sub(left, right):
    return primop(PrimOp.SUB, left, right)


def mul(left, right):
    return primop(PrimOp.MUL, left, right)


def div(left, right):
    return primop(PrimOp.DIV, left, right)


def eq(left, right):
    return primop(PrimOp.EQ, left, right)


def lt(left, right):
    return primop(PrimOp.LT, left, right)


def gt(left, right):
    return primop(PrimOp.GT, left, right)


def empty_env():
    """Returns a new, empty Environment."""
    return {}
