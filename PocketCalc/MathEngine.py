# MathEngine.py
"""""
Core calculation engine of the calculator.

Pipeline
--------
1) Tokenizer (Normalizer.tokenize): raw input -> flat token list, implicit '*' and literal '!' resolved.
2) Parser (AST): recursive descent over the fixed token set, precedence aware.
3) Evaluator: walks the AST with the selected angle mode and returns a float.
4) Classification: float -> EvaluationResult (Number / DIVISION_BY_ZERO / INVALID_INPUT / FORMAT_ERROR).

The parser only knows the tokens the Normalizer can produce; no text is ever executed.
"""""

import logging
import math

from . import Formatter
from . import Normalizer
from . import ScientificEngine
from . import error as E
from .ScientificEngine import AngleMode

logger = logging.getLogger(__name__)


# -----------------------------
# AST node types
# -----------------------------

class Number:
    """AST node for a numeric literal or constant."""
    def __init__(self, value):
        self.value = float(value)

    def evaluate(self, angle_mode):
        return self.value

    def __repr__(self):
        return f"Number({self.value!r})"


class BinOp:
    """AST node for a binary operation: left <operator> right."""
    def __init__(self, left, operator, right):
        self.left = left
        self.operator = operator
        self.right = right

    def evaluate(self, angle_mode):
        left_value = self.left.evaluate(angle_mode)
        right_value = self.right.evaluate(angle_mode)

        if self.operator == '+':
            return left_value + right_value
        elif self.operator == '-':
            return left_value - right_value
        elif self.operator == '*':
            return left_value * right_value
        elif self.operator == '/':
            return ScientificEngine.divide(left_value, right_value)
        elif self.operator == '**':
            return ScientificEngine.power(left_value, right_value)
        else:
            raise E.FormatError(f"Unknown operator: {self.operator}", code="3011")

    def __repr__(self):
        return f"BinOp({self.operator!r}, left={self.left}, right={self.right})"


class FunctionCall:
    """AST node for a prefix function applied to one operand."""
    def __init__(self, name, argument):
        self.name = name
        self.argument = argument

    def evaluate(self, angle_mode):
        argument_value = self.argument.evaluate(angle_mode)
        try:
            return ScientificEngine.apply_function(self.name, argument_value, angle_mode)
        except KeyError:
            raise E.FormatError(f"Unknown function: {self.name}", code="2001")

    def __repr__(self):
        return f"FunctionCall({self.name!r}, {self.argument})"


# -----------------------------
# Parser (recursive descent)
# -----------------------------

def ast(tokens):
    """Parse a token list into an AST.

    Precedence via nested functions: factor -> power -> unary -> term -> sum.
    Power binds tighter than a leading minus (-2^2 = -4) and is right-associative.
    """
    tokens = list(tokens)

    def peek_operator(*operators):
        return bool(tokens) and tokens[0].kind == Normalizer.OPERATOR and tokens[0].text in operators

    def parse_factor():
        """Numbers, constants, sub-expressions in '()', and prefix functions."""
        if not tokens:
            raise E.FormatError("Unexpected end of expression.", code="3012")
        token = tokens.pop(0)

        if token.kind == Normalizer.LPAREN:
            baum_in_der_klammer = parse_sum()
            if not tokens or tokens.pop(0).kind != Normalizer.RPAREN:
                raise E.FormatError("Missing closing parenthesis ')'", code="3009")
            return baum_in_der_klammer

        elif token.kind == Normalizer.FUNCTION:
            # sin(30) or the adjacent form sin30
            return FunctionCall(token.text, parse_factor())

        elif token.kind == Normalizer.CONSTANT:
            return Number(ScientificEngine.CONSTANTS[token.text])

        elif token.kind == Normalizer.NUMBER:
            return Number(token.value)

        raise E.FormatError(f"Unexpected token: {token.text}", code="3011")

    def parse_power():
        """Exponentiation '**' (right-associative through parse_unary)."""
        basis = parse_factor()
        if peek_operator("**"):
            tokens.pop(0)
            exponent = parse_unary()
            return BinOp(basis, "**", exponent)
        return basis

    def parse_unary():
        """Handle leading '+'/'-' (unary minus becomes 0 - operand)."""
        if peek_operator("+", "-"):
            operator = tokens.pop(0).text
            operand = parse_unary()

            if operator == "-":
                if isinstance(operand, Number):
                    return Number(-operand.value)
                return BinOp(Number(0), "-", operand)
            return operand
        return parse_power()

    def parse_term():
        """Multiplication and division."""
        aktueller_baum = parse_unary()
        while peek_operator("*", "/"):
            operator = tokens.pop(0).text
            rechtes_teil = parse_unary()
            aktueller_baum = BinOp(aktueller_baum, operator, rechtes_teil)
        return aktueller_baum

    def parse_sum():
        """Addition and subtraction."""
        aktueller_baum = parse_term()
        while peek_operator("+", "-"):
            operator = tokens.pop(0).text
            rechte_seite = parse_term()
            aktueller_baum = BinOp(aktueller_baum, operator, rechte_seite)
        return aktueller_baum

    finaler_baum = parse_sum()

    if tokens:
        if tokens[0].kind == Normalizer.RPAREN:
            raise E.FormatError("Missing opening parenthesis '('", code="3010")
        raise E.FormatError(f"Unexpected token: {tokens[0].text}", code="3011")

    logger.debug("Final AST: %s", finaler_baum)
    return finaler_baum


# -----------------------------
# Public entry points
# -----------------------------

def evaluate(problem, angle_mode=AngleMode.DEG):
    """Evaluate problem to an EvaluationResult. Never raises for user input."""
    angle_mode = AngleMode(angle_mode)
    try:
        tokens = Normalizer.tokenize(problem)
        if not tokens:
            return E.EvaluationResult.number(0.0)

        ergebnis = ast(tokens).evaluate(angle_mode)

        if math.isinf(ergebnis):
            raise E.CalculationError("Result is not finite.", code="3003")
        if math.isnan(ergebnis):
            raise E.InputError("Result is not a number.", code="3027")
        return E.EvaluationResult.number(ergebnis)

    except E.MathError as e:
        e.equation = problem
        logger.debug("Error %s: %s (equation: %r)", e.code, e.message, problem)
        return E.EvaluationResult.failure(e.kind)
    except RecursionError:
        logger.debug("Error 3026: %s (equation: %r)", E.ERROR_MESSAGES["3026"], problem)
        return E.EvaluationResult.failure(E.ErrorKind.FORMAT_ERROR)
    except ArithmeticError as e:
        logger.debug("Error 3003: %s (equation: %r)", e, problem)
        return E.EvaluationResult.failure(E.ErrorKind.DIVISION_BY_ZERO)


def calculate(problem, angle_mode=AngleMode.DEG, fractions=True):
    """evaluate() + Formatter.format_result(): raw input -> display string."""
    return Formatter.format_result(evaluate(problem, angle_mode), fractions=fractions)


def test_main():
    """Simple REPL-like runner for manual testing of the engine."""
    print("Enter the problem: ")
    problem = input()
    print(Normalizer.normalize(problem))
    print(calculate(problem))


if __name__ == "__main__":
    test_main()
