"""Uses the funlang parser and evaluator to run program files or to run in command-line mode. Also uses error handling
context manager. Installed as the funlang executable script.

Evaluation recurses once (several Python frames) per level of the funlang term, so program files are run in a worker
thread with a large stack and a raised recursion limit.
"""

import argparse
import sys
import threading

from funlang.lang.error import ErrorHandler
from funlang.lang.session import Session
from funlang.lang.shell import Shell


RECURSION_LIMIT = 200_000
STACK_SIZE = 512 * 1024 * 1024  # bytes, for the worker thread


def deep_call(func, *args):
    """Calls func(*args) in a thread with a stack of STACK_SIZE and a recursion limit of at least RECURSION_LIMIT.
    Returns its result, or re-raises whatever it raised in the calling thread.
    """
    outcome = {}

    def target():
        try:
            outcome["result"] = func(*args)
        except BaseException as error:  # re-raised below, in the caller's thread
            outcome["error"] = error

    old_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
    old_size = threading.stack_size(STACK_SIZE)
    try:
        worker = threading.Thread(target=target, daemon=True)
        worker.start()
    finally:
        threading.stack_size(old_size)

    try:
        worker.join()
    finally:
        sys.setrecursionlimit(old_limit)

    if "error" in outcome:
        raise outcome["error"]
    return outcome.get("result")


def run_file(error_handler, path, step_limit=None, ast=False):
    """Runs the program at path and prints its result."""
    sess = Session(error_handler, path, cmd_line=False, step_limit=step_limit)
    sess.run()

    for original, evaluated in sess.results:
        print(Session.format_result(original, evaluated))
        if ast:
            print(evaluated.display())


def positive_int(value):
    """argparse type for --steps."""
    num = int(value)
    if num <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number of steps, got {value}")
    return num


def build_parser():
    parser = argparse.ArgumentParser(prog="funlang", description="Interpreter for the lambda calculus with integers, "
                                                                 "booleans, conditionals and arithmetic.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--steps", type=positive_int, default=None,
                        help="maximum number of reductions per evaluation (default: no limit)")
    parser.add_argument("--trace", action="store_true", help="print every reduction step")
    parser.add_argument("--ast", action="store_true", help="also print the syntax tree of each result")
    return parser


def main(argv=None):
    """Runs funlang interpreter. Called from funlang executable script."""
    args = build_parser().parse_args(argv)

    with ErrorHandler(trace=args.trace) as error_handler:
        if args.file is not None:
            deep_call(run_file, error_handler, args.file, args.steps, args.ast)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, step_limit=args.steps)).cmdloop()


if __name__ == "__main__":
    main()
