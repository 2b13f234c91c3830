# Normalizer.py
"""""
Tokenizer for raw calculator input.

A single left-to-right scan does what would otherwise be several text rewrites:
1) whitespace is dropped before scanning,
2) display glyphs become canonical tokens (× -> *, ÷ -> /, π -> PI, φ -> PHI, ^ -> **, √ -> sqrt, -- -> +),
3) implicit multiplication is inserted while tokens are appended ('2(3)', '(1)(2)', '5!2', '2π'),
4) '<number>!' is replaced by the factorial of the literal.

normalize() renders the token list back to text, e.g. '2π(1+1)' -> '2*PI*(1+1)'.
"""""

import math

from . import ScientificEngine
from . import error as E

NUMBER = "number"
OPERATOR = "operator"
FUNCTION = "function"
CONSTANT = "constant"
LPAREN = "lparen"
RPAREN = "rparen"

Operations = ["+", "-", "*", "/", "**"]

GLYPHS = {
    "×": (OPERATOR, "*"),
    "÷": (OPERATOR, "/"),
    "/": (OPERATOR, "/"),
    "+": (OPERATOR, "+"),
    "^": (OPERATOR, "**"),
    "π": (CONSTANT, "PI"),
    "φ": (CONSTANT, "PHI"),
    "√": (FUNCTION, "sqrt"),
    "(": (LPAREN, "("),
    ")": (RPAREN, ")"),
}

# Longest names first so 'sec' is not read as 'e' + ..., and 'phi' before 'pi'
IDENTIFIERS = sorted(
    [(name, FUNCTION) for name in ScientificEngine.FUNCTIONS] +
    [(alias, CONSTANT) for alias in ScientificEngine.CONSTANT_ALIASES],
    key=lambda item: len(item[0]),
    reverse=True,
)

# Token kinds that end an operand / start an operand (for implicit multiplication)
ENDS_OPERAND = (NUMBER, CONSTANT, RPAREN)
STARTS_OPERAND = (NUMBER, FUNCTION, CONSTANT, LPAREN)


class Token:
    def __init__(self, kind, text, value=None, literal=False):
        self.kind = kind
        self.text = text
        self.value = value
        self.literal = literal  # True only for numbers typed by the user ('!' may follow them)

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.text) == (other.kind, other.text)

    def __repr__(self):
        return f"Token({self.kind}, {self.text!r})"


def render_number(value):
    """Text for a computed number token (used for factorial results)."""
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def append_token(tokens, token):
    """Append token, inserting '*' where two operands touch."""
    if tokens and tokens[-1].kind in ENDS_OPERAND and token.kind in STARTS_OPERAND:
        tokens.append(Token(OPERATOR, "*"))
    tokens.append(token)


def is_digit(char):
    """ASCII digits only; str.isdigit() also accepts '²', '①' and other scripts."""
    return "0" <= char <= "9"


def scan_number(problem, start):
    """Return the end index of the numeric literal starting at start.

    Accepts '12', '1.5', '.5', '5.' and scientific notation ('1e5', '2.5e-3').
    An 'e' only counts as exponent when a digit (optionally signed) follows it,
    otherwise it is left for the constant E.
    """
    b = start
    has_dot = False
    has_digit = False
    while b < len(problem) and (is_digit(problem[b]) or problem[b] == "."):
        if problem[b] == ".":
            if has_dot:
                raise E.FormatError("More than one '.' in one number.", code="3008", equation=problem)
            has_dot = True
        else:
            has_digit = True
        b += 1

    if not has_digit:
        raise E.FormatError(f"Malformed number: {problem[start:b]}", code="3017", equation=problem)

    if b < len(problem) and problem[b] in "eE":
        exponent = b + 1
        if exponent < len(problem) and problem[exponent] in "+-":
            exponent += 1
        if exponent < len(problem) and is_digit(problem[exponent]):
            b = exponent
            while b < len(problem) and is_digit(problem[b]):
                b += 1
    return b


def scan_identifier(problem, start, tokens):
    """Split a run of ASCII letters into known function / constant names."""
    end = start
    while end < len(problem) and problem[end].isascii() and problem[end].isalpha():
        end += 1

    b = start
    while b < end:
        for name, kind in IDENTIFIERS:
            if problem.startswith(name, b) and b + len(name) <= end:
                if kind == CONSTANT:
                    canonical = ScientificEngine.CONSTANT_ALIASES[name]
                    if canonical == "E" and b + len(name) == end and end < len(problem) and is_digit(problem[end]):
                        # 'e5' is an exponent with nothing in front of it, not E*5
                        raise E.FormatError(f"Exponent without a mantissa: {problem[b:end + 1]}", code="3018", equation=problem)
                    append_token(tokens, Token(CONSTANT, canonical, ScientificEngine.CONSTANTS[canonical]))
                else:
                    append_token(tokens, Token(FUNCTION, name))
                b += len(name)
                break
        else:
            raise E.FormatError(f"Unknown function: {problem[b:end]}", code="2001", equation=problem)
    return end


def tokenize(problem):
    """Convert a raw input string into a flat list of Tokens."""
    problem = "".join(problem.split())
    tokens = []
    b = 0

    while b < len(problem):
        current_char = problem[b]

        # --- Numbers ---
        if is_digit(current_char) or current_char == ".":
            end = scan_number(problem, b)
            text = problem[b:end]
            append_token(tokens, Token(NUMBER, text, float(text), literal=True))
            b = end
            continue

        # --- Factorial of the preceding literal ---
        elif current_char == "!":
            if not tokens or tokens[-1].kind != NUMBER or not tokens[-1].literal:
                raise E.FormatError(f"Factorial needs a literal number: {problem[:b + 1]}", code="2002", equation=problem)
            operand = tokens.pop()
            value = ScientificEngine.factorial(operand.value)
            tokens.append(Token(NUMBER, render_number(value), value))

        # --- Minus runs: '--' is '+', an odd run leaves one '-' ---
        elif current_char == "-":
            run = 0
            while b < len(problem) and problem[b] == "-":
                run += 1
                b += 1
            for _ in range(run // 2):
                tokens.append(Token(OPERATOR, "+"))
            if run % 2:
                tokens.append(Token(OPERATOR, "-"))
            continue

        # --- '*' and '**' ---
        elif current_char == "*":
            if problem.startswith("**", b):
                tokens.append(Token(OPERATOR, "**"))
                b += 1
            else:
                tokens.append(Token(OPERATOR, "*"))

        # --- Glyphs, operators and parentheses ---
        elif current_char in GLYPHS:
            kind, text = GLYPHS[current_char]
            value = ScientificEngine.CONSTANTS.get(text) if kind == CONSTANT else None
            append_token(tokens, Token(kind, text, value))

        # --- Function names and constants ---
        elif current_char.isascii() and current_char.isalpha():
            b = scan_identifier(problem, b, tokens)
            continue

        else:
            raise E.FormatError(f"Unknown character: {current_char}", code="3016", equation=problem)

        b += 1

    return tokens


def normalize(problem):
    """Canonical text form of problem, e.g. '2π÷4' -> '2*PI/4'."""
    return "".join(token.text for token in tokenize(problem))
