import contextlib
import io
import os
import tempfile
import unittest

from funlang.lang.error import DivisionByZeroError, ErrorHandler, GenericException, MissingMainError, ParseError
from funlang.lang.numerical import church
from funlang.lang.session import Session
from funlang.pure.term import add, app, integer, lam, var


PROGRAMS = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "..", "programs")


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.error_handler = ErrorHandler(fatal=False)
        self.tmp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp_dir.cleanup()

    def write(self, text):
        path = os.path.join(self.tmp_dir.name, "program.fun")
        with open(path, "w", encoding="utf-8") as file:
            file.write(text)
        return path

    def run_program(self, text):
        sess = Session(self.error_handler, self.write(text), cmd_line=False)
        sess.run()
        return sess

    def test_run(self):
        sess = self.run_program("double = (λx. (x * 2));\nmain = (double 21);\n")
        self.assertEqual([(app(var("double"), integer(21)), integer(42))], sess.results)
        self.assertEqual({"double", "main"}, set(sess.env))

    def test_programs(self):
        cases = {
            "factorial.fun": integer(120),
            "fibonacci.fun": integer(55),
            "church.fun": church(5),
        }
        for file, expected in cases.items():
            sess = Session(self.error_handler, os.path.join(PROGRAMS, file), cmd_line=False)
            sess.run()
            self.assertEqual(expected, sess.results[-1][1], file)

    def test_comments(self):
        sess = self.run_program("# header\nx = 1; # one\n\nmain = (x + 1);  # two\n")
        self.assertEqual(integer(2), sess.results[-1][1])

    def test_parse_error_registers_line(self):
        path = self.write("x = 1;\nmain = (x +);\n")
        sess = Session(self.error_handler, path, cmd_line=False)
        self.assertRaises(ParseError, sess.run)
        self.assertEqual(("main = (x +);", 2), self.error_handler.traceback[path])

    def test_missing_main(self):
        sess = Session(self.error_handler, self.write("x = 1;"), cmd_line=False)
        self.assertRaises(MissingMainError, sess.run)

    def test_eval_error(self):
        sess = Session(self.error_handler, self.write("main = (1 / 0);"), cmd_line=False)
        self.assertRaises(DivisionByZeroError, sess.run)

    def test_missing_file(self):
        path = os.path.join(self.tmp_dir.name, "missing.fun")
        self.assertRaises(GenericException, Session, self.error_handler, path, False)

    def test_reserved_filename(self):
        self.assertRaises(GenericException, Session, self.error_handler, Session.SH_FILE, False)

    def test_free_variables_warning(self):
        output = io.StringIO()
        with contextlib.redirect_stdout(output):
            self.run_program("main = (f 1);")
        self.assertIn("free variables: f", output.getvalue())

    def test_format_result(self):
        self.assertEqual("(1 + 2) ⇒ 3", Session.format_result(add(integer(1), integer(2)), integer(3)))

        result = Session.format_result(var("two"), church(2))
        self.assertTrue(result.endswith("[Church numeral 2]"), result)

    def test_preprocess_line(self):
        cases = {
            "x = 1;": ("x = 1;", False),
            "(λx.  # comment": ("(λx.", True),
            "((f x) y)   ": ("((f x) y)", False),
            "(f (": ("(f (", True),
        }
        for line, expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(line))


class CommandLineSessionTestCase(unittest.TestCase):

    def setUp(self):
        self.error_handler = ErrorHandler()
        self.sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True)

    def test_not_fatal(self):
        self.assertFalse(self.error_handler.fatal)

    def test_bindings_and_expressions(self):
        self.sess.add("id = (λx. x); k = (λx. (λy. x));", 1)
        self.assertEqual({"id": lam("x", var("x")), "k": lam("x", lam("y", var("x")))}, self.sess.env)
        self.assertEqual([], self.sess.results)

        self.sess.add("((k (id 1)) 2)", 2)
        self.assertEqual("((k (id 1)) 2) ⇒ 1", self.sess.pop())
        self.assertEqual([], self.sess.results)

    def test_rebinding(self):
        self.sess.add("x = 1;", 1)
        self.sess.add("x = 2;", 2)
        self.sess.add("(x + 1)", 3)
        self.assertEqual(integer(3), self.sess.results[-1][1])

    def test_error(self):
        with self.assertRaises(ParseError) as context:
            self.sess.add("(1 + )", 1)
        self.assertEqual(5, context.exception.col)
        self.assertEqual(("(1 + )", 1), self.error_handler.traceback[Session.SH_FILE])

        with self.assertRaises(ParseError) as context:
            self.sess.add("x = (1 + );", 2)
        self.assertEqual(9, context.exception.col)

    def test_step_limit(self):
        sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True, step_limit=10)
        sess.add("omega = (λx. (x x));", 1)
        with self.assertRaises(GenericException):
            sess.add("(omega omega)", 2)


if __name__ == '__main__':
    unittest.main()
