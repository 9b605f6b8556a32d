"""Natural numbers encoded as Church numerals. funlang has native integers, but Church numerals are still the usual way
to exercise the pure lambda calculus part of the evaluator, and results that are Church numerals are shown with their
value by the session.

Source: https://en.wikipedia.org/wiki/Church_encoding#Calculation_with_Church_numerals
"""

from funlang.pure.term import Abstraction, Application, Variable


def church(num, f="f", x="x"):
    """Returns the Church numeral for natural number num: λf.λx.f (f (... (f x)))."""
    if isinstance(num, bool) or not isinstance(num, int) or num < 0:
        raise ValueError(f"expected natural number, got '{num}'")

    body = Variable(x)
    for __ in range(num):
        body = Application(Variable(f), body)
    return Abstraction(f, Abstraction(x, body))


def unchurch(cnum):
    """Returns the natural number encoded by cnum, or None if cnum isn't a Church numeral. Parameter names don't
    matter, but they have to be distinct.
    """
    if not isinstance(cnum, Abstraction) or not isinstance(cnum.body, Abstraction):
        return None

    f, x = cnum.param, cnum.body.param
    if f == x:
        return None

    num = 0
    nth_body = cnum.body.body
    while isinstance(nth_body, Application):
        if nth_body.left != Variable(f):
            return None
        nth_body = nth_body.right
        num += 1

    return num if nth_body == Variable(x) else None
