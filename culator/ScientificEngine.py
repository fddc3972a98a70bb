# ScientificEngine
"""
Built-in constants and functions available to expressions.

Every value is a numpy.longdouble (the platform's long double) and every
function is evaluated with numpy ufuncs, so domain errors and overflow follow
IEEE rules (nan / inf) instead of raising.
"""
import numpy as np

from . import error as E


MAX_FUNC_ARGS = 256

real = np.longdouble

# 36 significant digits: enough for any long double format
PI = real("3.141592653589793238462643383279502884")
E_ = real("2.718281828459045235360287471352662498")


class Constant:
    """Named numeric constant."""
    def __init__(self, name, value):
        self.name = name
        self.value = real(value)

    def __repr__(self):
        return f"Constant({self.name!r}, {self.value})"


class Function:
    """Named native routine with a fixed number of arguments."""
    def __init__(self, name, arity, routine):
        self.name = name
        self.arity = arity
        self.routine = routine

    def evaluate(self, args):
        """Call the routine with exactly `arity` reals."""
        return real(self.routine(*args))

    def __repr__(self):
        return f"Function({self.name!r}, arity={self.arity})"


class Registry:
    """Read-only lookup table for constants and functions.

    Names are unique inside each namespace. When a name exists in both,
    lookup() returns the constant.
    """
    def __init__(self, constants, functions):
        self.constants = {}
        self.functions = {}

        for constant in constants:
            if constant.name in self.constants:
                raise ValueError(E.ERROR_MESSAGES["2001"] + constant.name)
            self.constants[constant.name] = constant

        for function in functions:
            if function.name in self.functions:
                raise ValueError(E.ERROR_MESSAGES["2001"] + function.name)
            if not 1 <= function.arity <= MAX_FUNC_ARGS:
                raise ValueError(E.ERROR_MESSAGES["2002"] + function.name)
            self.functions[function.name] = function

    def lookup(self, name):
        """Return the Constant or Function registered as name, or None."""
        constant = self.constants.get(name)
        if constant is not None:
            return constant
        return self.functions.get(name)

    def __contains__(self, name):
        return self.lookup(name) is not None


# -----------------------------
# Custom routines
# -----------------------------

def torad(x):
    return x * PI / real(180)


def todeg(x):
    return x * real(180) / PI


def round_half_away(x):
    """C roundl(): halfway cases go away from zero (np.round rounds to even)."""
    return np.copysign(np.floor(np.fabs(x) + real(0.5)), x)


CONSTANTS = [
    Constant("pi", PI),
    Constant("e", E_),
    Constant("M_E", E_),
    Constant("M_LOG2E", "1.442695040888963407359924681001892137"),
    Constant("M_LOG10E", "0.434294481903251827651128918916605082"),
    Constant("M_LN2", "0.693147180559945309417232121458176568"),
    Constant("M_LN10", "2.302585092994045684017991454684364208"),
    Constant("M_PI", PI),
    Constant("M_PI_2", "1.570796326794896619231321691639751442"),
    Constant("M_PI_4", "0.785398163397448309615660845819875721"),
    Constant("M_1_PI", "0.318309886183790671537767526745028724"),
    Constant("M_2_PI", "0.636619772367581343075535053490057448"),
    Constant("M_2_SQRTPI", "1.128379167095512573896158903121545172"),
    Constant("M_SQRT2", "1.414213562373095048801688724209698079"),
    Constant("M_SQRT1_2", "0.707106781186547524400844362104849039"),
    Constant("log2e", "1.442695040888963407359924681001892137"),
    Constant("log10e", "0.434294481903251827651128918916605082"),
    Constant("ln2", "0.693147180559945309417232121458176568"),
    Constant("ln10", "2.302585092994045684017991454684364208"),
    Constant("sqrt2", "1.414213562373095048801688724209698079"),
    Constant("sqrt1_2", "0.707106781186547524400844362104849039"),
]

FUNCTIONS = [
    Function("sqrt", 1, np.sqrt),
    Function("cbrt", 1, np.cbrt),
    Function("sin", 1, np.sin),
    Function("cos", 1, np.cos),
    Function("tan", 1, np.tan),
    Function("asin", 1, np.arcsin),
    Function("acos", 1, np.arccos),
    Function("atan", 1, np.arctan),
    Function("atan2", 2, np.arctan2),
    Function("sinh", 1, np.sinh),
    Function("cosh", 1, np.cosh),
    Function("tanh", 1, np.tanh),
    Function("asinh", 1, np.arcsinh),
    Function("acosh", 1, np.arccosh),
    Function("atanh", 1, np.arctanh),
    Function("exp", 1, np.exp),
    Function("exp2", 1, np.exp2),
    Function("expm1", 1, np.expm1),
    Function("log", 1, np.log),
    Function("log10", 1, np.log10),
    Function("log2", 1, np.log2),
    Function("log1p", 1, np.log1p),
    Function("pow", 2, np.power),
    Function("hypot", 2, np.hypot),
    Function("floor", 1, np.floor),
    Function("ceil", 1, np.ceil),
    Function("trunc", 1, np.trunc),
    Function("round", 1, round_half_away),
    Function("fabs", 1, np.fabs),
    Function("abs", 1, np.fabs),
    Function("fmod", 2, np.fmod),
    Function("fmin", 2, np.fmin),
    Function("fmax", 2, np.fmax),
    Function("min", 2, np.fmin),
    Function("max", 2, np.fmax),
    # register custom functions
    Function("torad", 1, torad),
    Function("todeg", 1, todeg),
]


DEFAULT_REGISTRY = Registry(CONSTANTS, FUNCTIONS)
