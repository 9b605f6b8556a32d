"""Capture-avoiding substitution over funlang terms.

Given a redex (λx.M) N, beta reduction replaces every free occurrence of x in M with N. A binder inside M whose
parameter occurs free in N would capture it, so such binders are alpha-renamed first:

    (λy.x)[x := y]  ->  λy_1.y      (not λy.y)

Fresh names are generated deterministically by appending _1, _2, ... to the original parameter.
"""

from funlang.pure.term import (Abstraction, Application, BooleanLiteral, Conditional, IntegerLiteral, PrimitiveOp,
                               Variable)


def substitute(term, target, replacement):
    """Returns term with all free occurrences of the variable named target replaced with replacement."""
    if isinstance(term, Variable):
        return replacement if term.name == target else term

    elif isinstance(term, Abstraction):
        if term.param == target:
            return term  # target is shadowed by this binder

        if term.param in free_variables(replacement):
            # target is excluded too, or renamed occurrences would be substituted as well
            fresh = fresh_name(term.param, term, replacement, Variable(target))
            body = substitute(term.body, term.param, Variable(fresh))
            return Abstraction(fresh, substitute(body, target, replacement))

        return Abstraction(term.param, substitute(term.body, target, replacement))

    elif isinstance(term, Application):
        return Application(substitute(term.left, target, replacement), substitute(term.right, target, replacement))

    elif isinstance(term, Conditional):
        return Conditional(
            substitute(term.cond, target, replacement),
            substitute(term.then, target, replacement),
            substitute(term.else_, target, replacement)
        )

    elif isinstance(term, PrimitiveOp):
        return PrimitiveOp(term.op, substitute(term.left, target, replacement),
                           substitute(term.right, target, replacement))

    elif isinstance(term, (IntegerLiteral, BooleanLiteral)):
        return term

    raise TypeError(f"cannot substitute into {type(term).__name__}")


def free_variables(term):
    """Set of variable names that occur free in term."""
    if isinstance(term, Variable):
        return {term.name}
    elif isinstance(term, Abstraction):
        return free_variables(term.body) - {term.param}

    free = set()
    for node in term.nodes:
        free |= free_variables(node)
    return free


def all_variables(term):
    """Set of every variable name in term, free or bound."""
    if isinstance(term, Variable):
        return {term.name}

    names = {term.param} if isinstance(term, Abstraction) else set()
    for node in term.nodes:
        names |= all_variables(node)
    return names


def fresh_name(base, *terms):
    """Returns the first of base, base_1, base_2, ... that does not occur anywhere in terms."""
    used = set()
    for term in terms:
        used |= all_variables(term)

    name = base
    counter = 1
    while name in used:
        name = f"{base}_{counter}"
        counter += 1
    return name
