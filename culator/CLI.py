# CLI.py
"""Command-line front end for the calculator.

Responsibilities
----------------
- Parse options (precision, keep-going, clipboard, help) with argparse
- Feed one expression at a time to MathEngine: each positional argument,
  or else each line of standard input
- Print results to stdout; warnings and errors go to stderr via LOGGER
- Stop at the first fatal error unless keep-going is enabled

Stdin note
----------
A last line without a trailing newline is dropped, not evaluated. Input
piped from `printf '1+1'` therefore prints nothing.

Leading minus
-------------
An argument starting with '-' is read as an option, so `culator -2+3`
and `culator -pi` are rejected or misread. Put such expressions after `--`:
`culator -- -2+3 -pi`. A bare negative number (`culator -2`) is the one
exception; argparse takes it as an expression.
"""

import argparse
import re
import sys

import pyperclip

from . import MathEngine as MathEngine
from . import config_manager as config_manager
from . import error as E
from .logger import LOGGER


PROG = "culator"
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def lenient_int(text):
    """Parse like C atoi(): optional sign and leading digits, 0 if none.

    Out-of-range values saturate at the bounds of a C int.
    """
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    return max(INT_MIN, min(INT_MAX, int(match.group(1))))


class ArgumentParser(argparse.ArgumentParser):

    def error(self, message):
        self.exit(
            EXIT_FAILURE,
            f"{self.prog}: {message}\nTry '{self.prog} --help' for more information.\n",
        )


def build_parser():
    parser = ArgumentParser(
        prog=PROG,
        usage="%(prog)s [OPTIONS] [EXPRESSION ...]",
        description="A simple infix notation floating-point cli calculator.\n"
                    "Reads from stdin if no EXPRESSION is given.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-h", "--help", "-?", action="help",
                        help="display this help and exit")
    parser.add_argument("-p", "--precision", type=lenient_int, metavar="NUM",
                        help="number of significant digits in each result")
    parser.add_argument("-k", "--keep-going", action="store_true", default=None,
                        help="report a malformed expression and continue with the next one")
    parser.add_argument("-c", "--copy", action="store_true", default=None,
                        help="copy the last result to the clipboard")
    parser.add_argument("expressions", nargs="*", metavar="EXPRESSION",
                        help="expression to evaluate")
    return parser


def read_lines(stream):
    """Yield newline-terminated lines without the newline."""
    for line in stream:
        if not line.endswith("\n"):
            LOGGER.debug(f"Discarding unterminated last line: {line!r}")
            return
        yield line[:-1]


def run(expressions, precision, keep_going=False, max_depth=None):
    """Evaluate expressions in order and print each result.

    Returns (exit status, last printed result or None).
    """
    status = EXIT_SUCCESS
    last_result = None

    for problem in expressions:
        try:
            result = MathEngine.calculate(problem, precision=precision, max_depth=max_depth)
        except E.MathError as e:
            family, _ = E.describe(e.code)
            LOGGER.debug(f"{family} {e.code} in {e.equation!r}")
            LOGGER.error(e.message, exc=e)
            status = EXIT_FAILURE
            if not keep_going:
                break
            continue

        if result is not None:
            print(result, flush=True)
            last_result = result

    return status, last_result


def copy_to_clipboard(text):
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        LOGGER.warn(f"Could not copy result to clipboard: {e}")


def main(argv=None):
    settings = config_manager.load_setting_value("all")
    LOGGER.set_debug(settings["debug"])

    args = build_parser().parse_args(argv)

    precision = settings["precision"] if args.precision is None else args.precision
    keep_going = settings["keep_going"] if args.keep_going is None else args.keep_going
    copy_result = settings["copy_result"] if args.copy is None else args.copy

    # Positional expressions win; stdin is never touched then
    if args.expressions:
        expressions = args.expressions
    else:
        expressions = read_lines(sys.stdin)

    status, last_result = run(expressions, precision, keep_going, settings["max_depth"])

    if copy_result and last_result is not None:
        copy_to_clipboard(last_result)

    return status


if __name__ == "__main__":
    sys.exit(main())
