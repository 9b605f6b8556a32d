import contextlib
import io
import os
import re
import sys
import tempfile
import unittest

from funlang.lang.error import DivisionByZeroError
from funlang.main import build_parser, deep_call, main
from funlang.pure.term import div, integer


PROGRAMS = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "programs")


def run(argv):
    """Runs main with argv, returning what it prints."""
    output = io.StringIO()
    with contextlib.redirect_stdout(output):
        main(argv)
    return re.sub(r"\x1b\[[0-9;]*m", "", output.getvalue())


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp_dir.cleanup()

    def write(self, text):
        path = os.path.join(self.tmp_dir.name, "program.fun")
        with open(path, "w", encoding="utf-8") as file:
            file.write(text)
        return path

    def test_run_file(self):
        self.assertEqual("(fac 5) ⇒ 120\n", run([os.path.join(PROGRAMS, "factorial.fun")]))
        self.assertIn("[Church numeral 5]", run([os.path.join(PROGRAMS, "church.fun")]))

    def test_ast(self):
        output = run([self.write("main = (1 < 2);"), "--ast"])
        self.assertEqual("(1 < 2) ⇒ true\nBooleanLiteral(True)\n", output)

    def test_trace(self):
        output = run([self.write("main = ((λx. (x + 1)) 2);"), "--trace"])
        self.assertEqual(["β ((λx. (x + 1)) 2)", "δ (2 + 1)", "((λx. (x + 1)) 2) ⇒ 3"], output.splitlines())

    def test_step_limit(self):
        path = self.write("omega = (λx. (x x));\nmain = (omega omega);")
        with contextlib.redirect_stdout(io.StringIO()) as output:
            with self.assertRaises(SystemExit) as context:
                main([path, "--steps", "50"])
        self.assertEqual(1, context.exception.code)
        self.assertIn("step limit of 50 exceeded", output.getvalue())

    def test_parse_error(self):
        path = self.write("main = (1 +);")
        with contextlib.redirect_stdout(io.StringIO()) as output:
            self.assertRaises(SystemExit, main, [path])
        self.assertIn("invalid syntax", output.getvalue())

    def test_deep_recursion(self):
        path = self.write("count = (λn. (if (n == 0) then 0 else (1 + (count (n - 1)))));\nmain = (count 500);")
        self.assertEqual("(count 500) ⇒ 500\n", run([path]))

    def test_deep_call(self):
        limit = sys.getrecursionlimit()

        def depth(n):
            return 0 if n == 0 else 1 + depth(n - 1)

        self.assertEqual(20000, deep_call(depth, 20000))
        self.assertEqual(limit, sys.getrecursionlimit())

        def divide():
            raise DivisionByZeroError(div(integer(1), integer(0)))

        self.assertRaises(DivisionByZeroError, deep_call, divide)

    def test_arguments(self):
        args = build_parser().parse_args(["prog.fun", "--steps", "10", "--trace"])
        self.assertEqual(("prog.fun", 10, True, False), (args.file, args.steps, args.trace, args.ast))

        args = build_parser().parse_args([])
        self.assertIsNone(args.file)
        self.assertIsNone(args.steps)

        for steps in ["0", "-3", "many"]:
            with contextlib.redirect_stderr(io.StringIO()):
                self.assertRaises(SystemExit, build_parser().parse_args, ["--steps", steps])


if __name__ == '__main__':
    unittest.main()
