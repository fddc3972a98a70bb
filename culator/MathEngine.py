# MathEngine.py
"""
Core calculation engine.

Pipeline
--------
1) Lexer: walks the raw input string and hands out one token at a time.
   Names are resolved against the registry here, not in the parser.
2) Parser (recursive descent, one method per precedence level) pulls tokens
   on demand and computes the value as it goes. No tree is built.
3) Formatter: renders the long double result like C's printf("%.*Lg").
"""

import enum
import string

import numpy as np

from . import config_manager as config_manager
from . import ScientificEngine
from . import error as E
from .logger import LOGGER


real = ScientificEngine.real

DIGITS = string.digits
IDENT_START = string.ascii_letters + "_"
IDENT_CHARS = IDENT_START + DIGITS
WHITESPACE = " \t\n\r\v"

# Upper bound on printed significant digits
MAX_PRECISION = 4096


# -----------------------------
# Tokens
# -----------------------------

class TokenKind(enum.Enum):
    """Token categories; the value is the name used in error messages."""
    VAL = "Val"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"
    FUNC = "Func"
    CONST = "Const"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    EOF = "EOF"


# Single character tokens; '*' and '^' are handled separately because of '**'
SIMPLE_TOKENS = {
    "+": TokenKind.ADD,
    "-": TokenKind.SUB,
    "/": TokenKind.DIV,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}


class Token:
    """One classified lexical unit.

    value    -- number or constant value (VAL, CONST)
    function -- registry Function (FUNC)
    start, end -- offsets into the source text
    """
    def __init__(self, kind, start, end, value=None, function=None):
        self.kind = kind
        self.start = start
        self.end = end
        self.value = value
        self.function = function

    def __repr__(self):
        if self.kind in (TokenKind.VAL, TokenKind.CONST):
            return f"Token({self.kind.value}, {self.value}, {self.start}:{self.end})"
        if self.kind is TokenKind.FUNC:
            return f"Token(Func {self.function.name}/{self.function.arity}, {self.start}:{self.end})"
        return f"Token({self.kind.value!r}, {self.start}:{self.end})"


# -----------------------------
# Lexer
# -----------------------------

class Lexer:
    """Cursor over one expression string."""

    def __init__(self, problem, registry=None):
        self.problem = problem
        self.registry = registry if registry is not None else ScientificEngine.DEFAULT_REGISTRY
        self.pos = 0

    def _skip_run(self, chars):
        while self.pos < len(self.problem) and self.problem[self.pos] in chars:
            self.pos += 1

    def next_token(self):
        """Advance past one token and return it.

        Unknown names and stray characters are reported as warnings and
        skipped; the loop then tries again, so this never fails.
        """
        problem = self.problem
        while True:
            self._skip_run(WHITESPACE)
            start = self.pos

            # --- End of input: stay put ---
            if start >= len(problem):
                return Token(TokenKind.EOF, start, start)

            current_char = problem[start]

            # --- Numbers: digits, optional '.', digits ---
            if current_char in DIGITS:
                self._skip_run(DIGITS)
                if self.pos < len(problem) and problem[self.pos] == ".":
                    self.pos += 1
                    self._skip_run(DIGITS)
                str_number = problem[start:self.pos]
                return Token(TokenKind.VAL, start, self.pos, value=real(str_number.rstrip(".")))

            # --- Names: constants first, then functions ---
            if current_char in IDENT_START:
                self._skip_run(IDENT_CHARS)
                name = problem[start:self.pos]
                entry = self.registry.lookup(name)
                if isinstance(entry, ScientificEngine.Constant):
                    return Token(TokenKind.CONST, start, self.pos, value=entry.value)
                if isinstance(entry, ScientificEngine.Function):
                    return Token(TokenKind.FUNC, start, self.pos, function=entry)
                LOGGER.warn(f"Unknown name '{name}', skipping")
                continue

            # --- Power: '**' or '^'; a lone '*' is multiplication ---
            if current_char == "^":
                self.pos += 1
                return Token(TokenKind.POW, start, self.pos)
            if current_char == "*":
                self.pos += 1
                if self.pos < len(problem) and problem[self.pos] == "*":
                    self.pos += 1
                    return Token(TokenKind.POW, start, self.pos)
                return Token(TokenKind.MUL, start, self.pos)

            kind = SIMPLE_TOKENS.get(current_char)
            if kind is not None:
                self.pos += 1
                return Token(kind, start, self.pos)

            LOGGER.warn(f"Invalid '{current_char}' token, skipping")
            self.pos += 1


# -----------------------------
# Parser / evaluator
# -----------------------------

class Parser:
    """Parsing session for a single expression.

    Holds the current token, the lexer cursor and the nesting depth. Create
    a new one per expression.
    """

    def __init__(self, problem, registry=None, max_depth=None):
        self.problem = problem
        self.lexer = Lexer(problem, registry)
        self.token = None
        self.depth = 0
        self.max_depth = max_depth if max_depth is not None else config_manager.DEFAULTS["max_depth"]

    def next_token(self):
        self.token = self.lexer.next_token()
        LOGGER.debug(self.token)

    def is_token(self, kind):
        return self.token.kind is kind

    def match_token(self, kind):
        """Consume the current token if it is of the given kind."""
        if self.is_token(kind):
            self.next_token()
            return True
        return False

    def expect_token(self, kind):
        if self.match_token(kind):
            return
        raise E.SyntaxError(
            f"Expected token '{kind.value}', got '{self.token.kind.value}'",
            code="3009",
            equation=self.problem,
            expected=kind.value,
            actual=self.token.kind.value,
            position=self.token.start,
        )

    def _enter(self):
        self.depth += 1
        if self.depth > self.max_depth:
            raise E.NestingError(E.ERROR_MESSAGES["3031"], code="3031", equation=self.problem)

    # ---- Parsing functions in precedence order ----

    def parse_atom(self):
        """Numbers, constants, function calls and '(' sub-expressions."""
        token = self.token

        if token.kind in (TokenKind.VAL, TokenKind.CONST):
            self.next_token()
            return token.value

        if token.kind is TokenKind.FUNC:
            function = token.function
            self.next_token()
            self.expect_token(TokenKind.LPAREN)
            args = []
            for _ in range(function.arity - 1):
                args.append(self.parse_sum())
                self.expect_token(TokenKind.COMMA)
            args.append(self.parse_sum())
            self.expect_token(TokenKind.RPAREN)
            return function.evaluate(args)

        if self.match_token(TokenKind.LPAREN):
            value = self.parse_sum()
            self.expect_token(TokenKind.RPAREN)
            return value

        raise E.SyntaxError(
            f"Unexpected token '{token.kind.value}'",
            code="3011",
            equation=self.problem,
            actual=token.kind.value,
            position=token.start,
        )

    def parse_unary(self):
        """Leading '-' negates, leading '+' does nothing; both repeat."""
        self._enter()
        try:
            if self.match_token(TokenKind.SUB):
                return -self.parse_unary()
            if self.match_token(TokenKind.ADD):
                return self.parse_unary()
            return self.parse_atom()
        finally:
            self.depth -= 1

    def parse_power(self):
        """'^' / '**'. The exponent is itself a power, so 2^3^2 = 2^(3^2)."""
        self._enter()
        try:
            base = self.parse_unary()
            if self.match_token(TokenKind.POW):
                return np.power(base, self.parse_power())
            return base
        finally:
            self.depth -= 1

    def parse_product(self):
        """Multiplication and division, left to right."""
        value = self.parse_power()
        while self.is_token(TokenKind.MUL) or self.is_token(TokenKind.DIV):
            operator = self.token.kind
            self.next_token()
            if operator is TokenKind.MUL:
                value = value * self.parse_power()
            else:
                value = value / self.parse_power()
        return value

    def parse_sum(self):
        """Addition and subtraction, left to right."""
        value = self.parse_product()
        while self.is_token(TokenKind.ADD) or self.is_token(TokenKind.SUB):
            operator = self.token.kind
            self.next_token()
            if operator is TokenKind.ADD:
                value = value + self.parse_product()
            else:
                value = value - self.parse_product()
        return value

    def parse(self):
        """Evaluate the whole expression; None if it holds no tokens."""
        self.next_token()
        if self.is_token(TokenKind.EOF):
            return None
        value = self.parse_sum()
        if not self.is_token(TokenKind.EOF):
            LOGGER.debug(f"Ignoring input after position {self.token.start}: {self.problem[self.token.start:]!r}")
        return value


# -----------------------------
# Result formatting
# -----------------------------

def format_result(value, precision):
    """Render value like printf("%.<precision>Lg")."""
    if precision < 0:
        precision = 6
    elif precision == 0:
        precision = 1
    precision = min(precision, MAX_PRECISION)

    value = real(value)
    if np.isnan(value):
        return "-nan" if np.signbit(value) else "nan"
    if np.isinf(value):
        return "-inf" if value < 0 else "inf"

    # The exponent after rounding to `precision` digits picks the notation
    scientific = np.format_float_scientific(value, precision=precision - 1, unique=False)
    mantissa, exponent = scientific.split("e")
    exponent = int(exponent)

    if -4 <= exponent < precision:
        return np.format_float_positional(
            value, precision=precision - 1 - exponent, unique=False, fractional=True, trim="-"
        )

    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    sign = "-" if exponent < 0 else "+"
    return f"{mantissa}e{sign}{abs(exponent):02d}"


# -----------------------------
# Public entry points
# -----------------------------

def evaluate(problem, registry=None, max_depth=None):
    """Parse and evaluate one expression. Returns a long double or None."""
    if max_depth is None:
        max_depth = config_manager.load_setting_value("max_depth")
    parser = Parser(problem, registry, max_depth)
    # inf / nan results are expected; no RuntimeWarnings
    with np.errstate(all="ignore"):
        try:
            return parser.parse()
        except RecursionError as e:
            raise E.NestingError(E.ERROR_MESSAGES["3031"], code="3031", equation=problem) from e


def calculate(problem, precision=None, registry=None, max_depth=None):
    """Main API: evaluate -> format. None for an empty expression."""
    if precision is None:
        precision = config_manager.load_setting_value("precision")
    ergebnis = evaluate(problem, registry, max_depth)
    if ergebnis is None:
        return None
    return format_result(ergebnis, precision)
