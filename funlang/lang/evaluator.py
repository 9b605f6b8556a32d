"""Call-by-value evaluation of funlang terms.

The evaluator threads an environment of top-level bindings through every call. Variables are looked up by name each
time they are evaluated, which is what lets a top-level binding such as `fac` refer to itself. Lambda parameters, on
the other hand, are eliminated by substitution as soon as an abstraction is applied:

    eval(env, (λx.M) N)  =  eval(env - {x}, M[x := eval(env, N)])

Terms that cannot be reduced further (applying a non-abstraction, branching on a non-boolean, comparing mismatched
operands) are "stuck" and returned as they are rather than treated as errors. This allows open terms and
free-standing combinators to be evaluated symbolically.
"""

from funlang.lang.error import DivisionByZeroError, IntegerOverflowError, StepLimitExceededError
from funlang.pure.substitution import substitute
from funlang.pure.term import (INT_MAX, INT_MIN, Abstraction, Application, BooleanLiteral, Conditional, IntegerLiteral,
                               PrimitiveOp, PrimOp, Variable)


class CallByValueEvaluator:
    """Implements strict, left-to-right evaluation of terms. Abstraction bodies are evaluated eagerly, even when the
    abstraction is never applied, so a divergent body will loop forever.

    step_limit bounds the number of reductions (beta reductions and primitive operations) a single evaluator may
    perform; None means no limit. error_handler, if given, is told about every reduction.
    """

    def __init__(self, step_limit=None, error_handler=None):
        self.step_limit = step_limit
        self.error_handler = error_handler
        self.steps = 0

    def evaluate(self, env, term):
        """Evaluates term under env. Raises an EvalError if any subterm fails to evaluate."""
        if isinstance(term, Variable):
            return env.get(term.name, term)

        elif isinstance(term, Abstraction):
            return Abstraction(term.param, self.evaluate(_without(env, term.param), term.body))

        elif isinstance(term, Application):
            return self._apply(env, term)

        elif isinstance(term, (IntegerLiteral, BooleanLiteral)):
            return term

        elif isinstance(term, Conditional):
            cond = self.evaluate(env, term.cond)
            if isinstance(cond, BooleanLiteral):
                return self.evaluate(env, term.then if cond.value else term.else_)
            return Conditional(cond, term.then, term.else_)  # stuck: branches stay unevaluated

        elif isinstance(term, PrimitiveOp):
            return self._primitive(env, term)

        raise TypeError(f"cannot evaluate {type(term).__name__}")

    def _apply(self, env, term):
        left = self.evaluate(env, term.left)
        right = self.evaluate(env, term.right)

        if not isinstance(left, Abstraction):
            return Application(left, right)

        redex = Application(left, right)
        self._step("β", redex)

        return self.evaluate(_without(env, left.param), substitute(left.body, left.param, right))

    def _primitive(self, env, term):
        left = self.evaluate(env, term.left)
        right = self.evaluate(env, term.right)
        reduced = PrimitiveOp(term.op, left, right)

        both_ints = isinstance(left, IntegerLiteral) and isinstance(right, IntegerLiteral)
        both_bools = isinstance(left, BooleanLiteral) and isinstance(right, BooleanLiteral)

        if both_ints and term.op.is_arithmetic:
            self._step("δ", reduced)
            return IntegerLiteral(self._arithmetic(reduced, left.value, right.value))

        elif both_ints and term.op.is_comparison:
            self._step("δ", reduced)
            if term.op is PrimOp.LT:
                return BooleanLiteral(left.value < right.value)
            return BooleanLiteral(left.value > right.value)

        elif (both_ints or both_bools) and term.op is PrimOp.EQ:
            self._step("δ", reduced)
            return BooleanLiteral(left.value == right.value)

        return reduced

    @staticmethod
    def _arithmetic(term, n1, n2):
        """Computes term.op on n1 and n2 with 64-bit signed semantics. Division truncates towards zero."""
        if term.op is PrimOp.ADD:
            result = n1 + n2
        elif term.op is PrimOp.SUB:
            result = n1 - n2
        elif term.op is PrimOp.MUL:
            result = n1 * n2
        else:
            if n2 == 0:
                raise DivisionByZeroError(term)
            result = abs(n1) // abs(n2)
            if (n1 < 0) != (n2 < 0):
                result = -result

        if not INT_MIN <= result <= INT_MAX:
            raise IntegerOverflowError(term, result)
        return result

    def _step(self, label, term):
        self.steps += 1
        if self.step_limit is not None and self.steps > self.step_limit:
            raise StepLimitExceededError(term, self.step_limit)
        if self.error_handler is not None:
            self.error_handler.register_step(label, term)


def _without(env, name):
    """env without a binding for name. Parameters shadow top-level bindings of the same name."""
    if name not in env:
        return env
    return {key: bound for key, bound in env.items() if key != name}


def evaluate(env, term, step_limit=None, error_handler=None):
    """Evaluates term under env with a fresh CallByValueEvaluator."""
    return CallByValueEvaluator(step_limit, error_handler).evaluate(env, term)
