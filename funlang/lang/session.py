"""Session control for funlang. Loads and runs program files, or accumulates bindings and evaluates expressions one line
at a time in command-line mode.
"""

from funlang.lang.error import GenericException, ParseError
from funlang.lang.evaluator import evaluate
from funlang.lang.numerical import unchurch
from funlang.lang.parser import MAIN, parse_bindings, parse_expression, parse_main_program
from funlang.pure.substitution import free_variables


class Session:
    """Governs a funlang session, with control over the scope of top-level bindings."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = "#"     # comments run from here to the end of the line

    def __init__(self, error_handler, path, cmd_line, step_limit=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path              # used for error messages
        self.cmd_line = cmd_line      # whether or not in command-line mode
        self.step_limit = step_limit  # reductions allowed per evaluation, None for no limit

        self.env = {}      # dict of name: Term bound in the current session
        self.results = []  # list of (original, evaluated) Terms
        self.source = ""

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    self.source = Session.strip_comments(file.read())
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def strip_comments(text):
        """Removes comments from text, keeping line breaks so that line numbers in errors stay correct."""
        return "\n".join(line.split(Session.COMMENT, 1)[0] for line in text.split("\n"))

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line from the command-line. Returns the line without comments and trailing whitespace, and
        whether or not it needs a continuation (unbalanced parentheses).
        """
        line = Session.strip_comments(line).rstrip()
        return line, line.count("(") > line.count(")")

    def run(self):
        """Parses this session's program file and evaluates its 'main' binding. Will raise any errors that are
        encountered.
        """
        try:
            program = parse_main_program(self.source)
        except ParseError as error:
            if error.line_num is not None:
                self.error_handler.register_line(self.path, error.line, error.line_num)
            raise

        self.env = dict(program.env)
        self.results.append((program.main, self.evaluate(program.main)))

        unbound = sorted(free_variables(self.results[-1][1]) - set(self.env))
        if unbound:
            msg = "result of '{}' has free variables: " + ", ".join(unbound)
            self.error_handler.warn(msg, MAIN, diagnosis=False)

    def add(self, line, line_num):
        """Adds a command-line line to the session. Bindings (name = expr;) extend the session's environment, any
        other expression is evaluated against it.
        """
        self.error_handler.register_line(self.path, line, line_num)  # in case error is raised

        try:
            bindings = parse_bindings(line)
        except ParseError as binding_error:
            try:
                term = parse_expression(line)
            except ParseError as expr_error:
                raise max(binding_error, expr_error, key=lambda error: error.pos) from None
            self.results.append((term, self.evaluate(term)))
        else:
            for name, term, __ in bindings:
                self.env[name] = term

        self.error_handler.remove_line(self.path)  # error was not raised

    def evaluate(self, term):
        """Evaluates term against the session's bindings."""
        return evaluate(self.env, term, self.step_limit, self.error_handler)

    def pop(self):
        """Removes the latest result and returns it formatted for display."""
        return Session.format_result(*self.results.pop())

    @staticmethod
    def format_result(original, evaluated):
        """'original ⇒ evaluated', noting the value of evaluated if it is a Church numeral."""
        result = f"{original} ⇒ {evaluated}"
        num = unchurch(evaluated)
        if num is not None:
            result += f"  [Church numeral {num}]"
        return result
