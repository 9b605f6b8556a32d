"""Error handling for funlang. Only GenericExceptions should be encountered during running: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

The core (parser, evaluator) only raises; printing, colouring and exiting are left to ErrorHandler.
"""

import sys

from termcolor import colored

from funlang.pure.printer import pretty_print


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a funlang error/warning. exprs are formatted
    into msg, and exprs[0] should be the offending expr: start and end mark the span of it to be highlighted.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal


class ParseError(GenericException):
    """Source text that is not valid funlang syntax. Diagnosed on the offending line of text. msg may refer to
    expected as {1}.
    """

    def __init__(self, expected, text, pos, msg="invalid syntax: expected {1}", length=1):
        line_start = text.rfind("\n", 0, pos) + 1
        line_end = text.find("\n", pos)
        if line_end == -1:
            line_end = len(text)

        self.line = text[line_start:line_end]
        self.line_num = text.count("\n", 0, pos) + 1
        self.col = pos - line_start
        self.pos = pos
        self.expected = expected

        location = f"line {self.line_num}, column {self.col + 1}: "
        super().__init__(location + msg, (self.line, expected), start=self.col, end=self.col + length)


class MissingMainError(ParseError):
    """Program without a binding named 'main'."""

    def __init__(self, names=()):
        GenericException.__init__(self, "program has no binding named '{}'", "main", diagnosis=False)
        self.names = list(names)
        self.line, self.line_num, self.col, self.pos, self.expected = "", None, None, None, "main"


class EvalError(GenericException):
    """Superclass of errors raised while evaluating a term."""

    def __init__(self, msg, term, **kwargs):
        super().__init__(msg, pretty_print(term), **kwargs)
        self.term = term


class DivisionByZeroError(EvalError):

    def __init__(self, term):
        super().__init__("'{}' divides by zero", term)


class IntegerOverflowError(EvalError):

    def __init__(self, term, value):
        super().__init__("'{}' overflows a 64-bit integer", term)
        self.value = value


class StepLimitExceededError(EvalError):

    def __init__(self, term, limit):
        super().__init__(f"step limit of {limit} exceeded while evaluating '{{}}'", term, diagnosis=False)
        self.limit = limit


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom funlang errors/warnings. Also
    receives evaluation steps, which are printed when trace is set.
    """
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, trace=False):
        self.fatal = fatal
        self.trace = trace
        self.traceback = {}
        self.steps = 0

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def register_step(self, label, term):
        """Records a single evaluation step. label is 'β' for beta reductions and 'δ' for primitive operations."""
        self.steps += 1
        if self.trace:
            print(colored(f"{label} ", ErrorHandler.STEP, attrs=["bold"]) + pretty_print(term))

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = ""
        for file, (line, line_num) in self.traceback.items():
            if line:
                error_msg = colored(f"{file}:{line_num}: ", attrs=["bold"])

        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(GenericException("keyboard interrupt"))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(GenericException("maximum recursion depth exceeded: term might not have a normal form"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
