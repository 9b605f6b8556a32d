"""Handles interactive/command-line mode for funlang interpreter. Uses cmd as backend."""

import cmd

from funlang.pure.printer import pretty_print


class Shell(cmd.Cmd):
    """funlang interpreter shell."""
    intro = "funlang interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary funlang binding or expression."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}" if self._tmp_line else line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not line:
                return

            self.sess.add(line, self.line_num)

            if self.sess.results:
                print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return self.default(f"help {arg}")
        print("Welcome to the funlang interpreter!\n\n"
              "funlang is the lambda calculus extended with integers, booleans, conditionals and \n"
              "arithmetic. Compound expressions are always parenthesized.\n\n"
              "Try it out by typing 'id = (λx. x);'. This will bind the term '(λx. x)' to the \n"
              "name 'id'. Next, try typing '(id (2 + 3))'. This will apply 'id' to '(2 + 3)', \n"
              "giving '5' as the result. '\\' can be typed instead of 'λ', and 'env' lists \n"
              "the current bindings.")

    def do_env(self, arg):
        """Lists the current session's bindings."""
        if arg:
            return self.default(f"env {arg}")  # e.g. a binding named env
        for name, term in self.sess.env.items():
            print(f"{name} = {pretty_print(term)};")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            return self.default(f"exit {arg}")
        return True
