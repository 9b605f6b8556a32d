"""Renders terms back to funlang surface syntax. Every compound term is parenthesized, so the output parses back to an
equal term, though it is rarely the shortest source for it. The exception is negative integers: they print as `-1`,
which is not a literal in the grammar (negative values only arise from evaluation).
"""

from funlang.pure.term import (Abstraction, Application, BooleanLiteral, Conditional, IntegerLiteral, PrimitiveOp,
                               Variable)


def pretty_print(term):
    """Returns surface syntax for term."""
    if isinstance(term, Variable):
        return term.name
    elif isinstance(term, Abstraction):
        return f"(λ{term.param}. {pretty_print(term.body)})"
    elif isinstance(term, Application):
        return f"({pretty_print(term.left)} {pretty_print(term.right)})"
    elif isinstance(term, IntegerLiteral):
        return str(term.value)
    elif isinstance(term, BooleanLiteral):
        return "true" if term.value else "false"
    elif isinstance(term, Conditional):
        return f"(if {pretty_print(term.cond)} then {pretty_print(term.then)} else {pretty_print(term.else_)})"
    elif isinstance(term, PrimitiveOp):
        return f"({pretty_print(term.left)} {term.op.symbol} {pretty_print(term.right)})"

    raise TypeError(f"cannot print {type(term).__name__}")
