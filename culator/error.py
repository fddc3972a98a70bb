


class MathError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

class SyntaxError(MathError):
    """A token of the wrong kind where a specific one is required."""
    def __init__(self, message, code="3011", equation=None, expected=None, actual=None, position=None):
        super().__init__(message, code=code, equation=equation)
        self.expected = expected
        self.actual = actual
        self.position = position

class NestingError(MathError):
    pass






Error_Dictionary= {

    "1" : "Missing Files",
    "2" : "Scientific Calculation Error",
    "3" : "Calculator Error",
    "5" : "Configuration Error",
    "9" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "2001" : "Duplicate name in registry: ", # + name
    "2002" : "Function arity out of range: ", # + name

    "3009" : "Missing expected token: ", # + Expected / got
    "3011" : "Unexpected Token: ", # + Token
    "3031" : "Expression too deeply nested.",

    "5001" : "Invalid setting ignored: ", # + key


    "9999" : "Unexpected Error: " #+error
}


def describe(code):
    """Return the family name and message for an error code ('3009' -> Calculator Error)."""
    family = Error_Dictionary.get(str(code)[:1], Error_Dictionary["9"])
    return family, ERROR_MESSAGES.get(str(code), ERROR_MESSAGES["9999"])
