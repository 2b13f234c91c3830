# error.py
"""""
Error taxonomy and result types shared by the engine modules.

- MathError and its subclasses are raised inside the tokenizer / parser / evaluator.
- MathEngine.evaluate() catches them and turns them into an EvaluationResult,
  so nothing the user types can escape as an exception.
"""""

from enum import Enum


class ErrorKind(Enum):
    DIVISION_BY_ZERO = "division_by_zero"   # also covers every other non-finite result
    INVALID_INPUT = "invalid_input"         # NaN or non-numeric
    FORMAT_ERROR = "format_error"           # malformed syntax


class MathError(Exception):
    kind = ErrorKind.FORMAT_ERROR

    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation


class FormatError(MathError):
    kind = ErrorKind.FORMAT_ERROR


class CalculationError(MathError):
    kind = ErrorKind.DIVISION_BY_ZERO


class InputError(MathError):
    kind = ErrorKind.INVALID_INPUT


class EvaluationResult:
    """Tagged union: either a finite float (value) or an ErrorKind (error)."""

    def __init__(self, value=None, error=None):
        self.value = value
        self.error = error

    @classmethod
    def number(cls, value):
        return cls(value=float(value))

    @classmethod
    def failure(cls, kind):
        return cls(error=kind)

    @property
    def is_error(self):
        return self.error is not None

    def __eq__(self, other):
        if not isinstance(other, EvaluationResult):
            return NotImplemented
        return self.value == other.value and self.error == other.error

    def __hash__(self):
        return hash((self.value, self.error))

    def __repr__(self):
        if self.is_error:
            return f"Error({self.error.name})"
        return f"Number({self.value!r})"


# Fixed texts shown on the display. The session blocks every key except AC while one is shown.
DISPLAY_MESSAGES = {
    ErrorKind.DIVISION_BY_ZERO: "Can't divide by 0",
    ErrorKind.INVALID_INPUT: "Invalid Input",
    ErrorKind.FORMAT_ERROR: "Format Error",
}

ERROR_TEXTS = ["Error"] + list(DISPLAY_MESSAGES.values())


def is_error_text(value):
    return value in ERROR_TEXTS


Error_Dictionary = {

    "2" : "Scientific Calculation Error",
    "3" : "Calculator Error",
    "5" : "Configuration Error",
    "6" : "Communication Error",

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number


ERROR_MESSAGES = {
    "2001" : "Unknown function: ", # + name
    "2002" : "Factorial needs a literal number: ", # + problem

    "3003" : "Result is not finite.",
    "3008" : "More than one '.' in one number.",
    "3009" : "Missing ')'. ",
    "3010" : "Missing '('. ",
    "3011" : "Unexpected Token: ", # + Token
    "3012" : "Unexpected end of expression.",
    "3016" : "Unknown character: ", # + character
    "3017" : "Malformed number: ", # + literal
    "3018" : "Exponent without a mantissa: ", # + literal
    "3026" : "Nesting too deep.",
    "3027" : "Result is not a number.",

    "5001" : "Configuration could not be read: ", # + path
    "5002" : "Configuration could not be saved: ", # + path

    "6001" : "Exchange rate service unreachable: ", # + reason
    "6002" : "AI service unreachable: ", # + reason

    "9999" : "Unexpected Error: " #+error
}
