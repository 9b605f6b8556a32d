import unittest

from funlang.lang.numerical import church, unchurch
from funlang.pure.term import app, integer, lam, var


class NumericalTestCase(unittest.TestCase):

    def test_church(self):
        should_fail = [-2, 0.3, 4.0, 14.2, True, "3"]
        for case in should_fail:
            self.assertRaises(ValueError, church, case)

        should_pass = {
            0: lam("f", lam("x", var("x"))),
            3: lam("f", lam("x", app(var("f"), app(var("f"), app(var("f"), var("x")))))),
        }
        for case, result in should_pass.items():
            self.assertEqual(result, church(case))

        self.assertEqual(lam("s", lam("z", app(var("s"), var("z")))), church(1, "s", "z"))

    def test_unchurch(self):
        should_fail = [
            lam("f", lam("x", app(var("f"), var("f")))),
            lam("f", lam("x", app(app(var("x"), var("f")), var("x")))),
            lam("f", lam("f", var("f"))),
            lam("f", var("f")),
            var("x"),
            integer(3),
        ]
        for case in should_fail:
            self.assertIsNone(unchurch(case), case)

        should_pass = {
            0: lam("f", lam("x", var("x"))),
            3: lam("f", lam("x", app(var("f"), app(var("f"), app(var("f"), var("x")))))),
            2: lam("s", lam("z", app(var("s"), app(var("s"), var("z"))))),
        }
        for result, case in should_pass.items():
            self.assertEqual(result, unchurch(case), case)

        for num in range(10):
            self.assertEqual(num, unchurch(church(num)))


if __name__ == '__main__':
    unittest.main()
