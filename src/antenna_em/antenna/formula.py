"""Sandboxed radiation-pattern expressions.

User formulas such as ``abs(sin(theta) * cos(3*theta))`` are tokenized,
converted to reverse Polish notation with the shunting-yard algorithm and
assembled into a small AST. The AST is compiled into nested numpy closures,
so a formula evaluates on scalars or whole (theta, phi) grids and can only
reach the arithmetic, comparison and math functions listed below.
"""
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union
import numpy as np

Number = Union[float, np.ndarray]


class FormulaError(ValueError):
    """Raised when a pattern expression cannot be parsed."""


# name -> (numpy implementation, min args, max args); max None = variadic
_FUNCTIONS = {
    "sin": (np.sin, 1, 1),
    "cos": (np.cos, 1, 1),
    "tan": (np.tan, 1, 1),
    "asin": (np.arcsin, 1, 1),
    "acos": (np.arccos, 1, 1),
    "atan": (np.arctan, 1, 1),
    "abs": (np.abs, 1, 1),
    "sqrt": (np.sqrt, 1, 1),
    "exp": (np.exp, 1, 1),
    "log": (np.log, 1, 1),
    "ln": (np.log, 1, 1),
    "log10": (np.log10, 1, 1),
    "pow": (np.power, 2, 2),
    "min": (np.minimum, 1, None),
    "max": (np.maximum, 1, None),
}

_CONSTANTS = {
    "pi": np.pi,
    "e": np.e,
}

VARIABLES = ("theta", "phi")

# operator -> (precedence, right associative)
_BINARY = {
    "<": (1, False),
    "<=": (1, False),
    ">": (1, False),
    ">=": (1, False),
    "+": (2, False),
    "-": (2, False),
    "*": (3, False),
    "/": (3, False),
    "^": (5, True),
}
_UNARY_PRECEDENCE = 4

# bounds the AST depth so compiling and evaluating stay well inside the recursion limit
MAX_FORMULA_TOKENS = 256

_TOKEN_RE = re.compile(r"""
    \s*(?:
        (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
      | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
      | (?P<op><=|>=|[-+*/^<>])
      | (?P<lparen>\()
      | (?P<rparen>\))
      | (?P<comma>,)
    )""", re.VERBOSE)


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int


# --- AST -------------------------------------------------------------------

@dataclass(frozen=True)
class Num:
    value: float


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class Neg:
    operand: "Node"


@dataclass(frozen=True)
class BinOp:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple["Node", ...]


Node = Union[Num, Var, Neg, BinOp, Call]


def normalize_formula(text: str) -> str:
    """
    Rewrite user input into canonical formula syntax.

    Strips legacy ``Math.`` prefixes, maps θ/φ/π to names and ``**`` to ``^``.

    Args:
        text: Raw formula text

    Returns:
        Canonical formula text
    """
    out = text.replace("Math.", "")
    out = out.replace("θ", "theta").replace("φ", "phi").replace("π", "pi")
    out = out.replace("**", "^")
    return out.strip()


def tokenize(text: str) -> List[Token]:
    """Split a canonical formula into tokens."""
    tokens = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None or match.end() == pos:
            raise FormulaError(f"Unexpected character {text[pos]!r} at position {pos}")
        kind = match.lastgroup
        tokens.append(Token(kind, match.group(kind), match.start(kind)))
        pos = match.end()
    return tokens


def parse(text: str) -> Node:
    """
    Parse a formula into an AST using the shunting-yard algorithm.

    Args:
        text: Formula text (raw user input is normalized first)

    Returns:
        Root AST node

    Raises:
        FormulaError: On syntax errors, unknown names, wrong arity or a
            formula longer than MAX_FORMULA_TOKENS tokens
    """
    tokens = tokenize(normalize_formula(text))
    if not tokens:
        raise FormulaError("Empty formula")
    if len(tokens) > MAX_FORMULA_TOKENS:
        raise FormulaError(f"Formula has {len(tokens)} tokens, the limit is {MAX_FORMULA_TOKENS}")

    output: List[Node] = []
    # Entries: ("op", symbol) | ("neg", "-") | ("func", name) | ("paren", "(")
    stack: List[Tuple[str, str]] = []
    arg_counts: List[int] = []
    expect_operand = True

    def reduce_top():
        kind, symbol = stack.pop()
        if kind == "neg":
            _require(output, 1, symbol)
            output.append(Neg(output.pop()))
        else:
            _require(output, 2, symbol)
            right = output.pop()
            left = output.pop()
            output.append(BinOp(symbol, left, right))

    for i, tok in enumerate(tokens):
        if tok.kind == "number":
            if not expect_operand:
                raise FormulaError(f"Missing operator before {tok.text!r} at position {tok.pos}")
            output.append(Num(float(tok.text)))
            expect_operand = False

        elif tok.kind == "name":
            if not expect_operand:
                raise FormulaError(f"Missing operator before {tok.text!r} at position {tok.pos}")
            name = tok.text.lower()
            is_call = i + 1 < len(tokens) and tokens[i + 1].kind == "lparen"
            if is_call:
                if name not in _FUNCTIONS:
                    raise FormulaError(f"Unknown function {tok.text!r}")
                stack.append(("func", name))
            elif tok.text in VARIABLES:
                output.append(Var(tok.text))
                expect_operand = False
            elif name in _CONSTANTS:
                output.append(Num(_CONSTANTS[name]))
                expect_operand = False
            else:
                raise FormulaError(f"Unknown name {tok.text!r}")

        elif tok.kind == "op":
            if expect_operand:
                if tok.text == "-":
                    stack.append(("neg", "-"))
                    continue
                if tok.text == "+":
                    continue
                raise FormulaError(f"Operator {tok.text!r} at position {tok.pos} is missing an operand")
            prec, right_assoc = _BINARY[tok.text]
            while stack and stack[-1][0] in ("op", "neg"):
                top_prec = _UNARY_PRECEDENCE if stack[-1][0] == "neg" else _BINARY[stack[-1][1]][0]
                if top_prec > prec or (top_prec == prec and not right_assoc):
                    reduce_top()
                else:
                    break
            stack.append(("op", tok.text))
            expect_operand = True

        elif tok.kind == "lparen":
            if not expect_operand:
                raise FormulaError(f"Unexpected '(' at position {tok.pos}")
            stack.append(("paren", "("))
            arg_counts.append(0 if stack[-2:-1] and stack[-2][0] == "func" else -1)

        elif tok.kind == "comma":
            if expect_operand or not arg_counts or arg_counts[-1] < 0:
                raise FormulaError(f"Unexpected ',' at position {tok.pos}")
            while stack and stack[-1][0] != "paren":
                reduce_top()
            arg_counts[-1] += 1
            expect_operand = True

        elif tok.kind == "rparen":
            while stack and stack[-1][0] != "paren":
                reduce_top()
            if not stack:
                raise FormulaError(f"Unbalanced ')' at position {tok.pos}")
            stack.pop()
            n_args = arg_counts.pop()
            if n_args >= 0:
                if expect_operand:
                    raise FormulaError(f"Empty argument at position {tok.pos}")
                _, name = stack.pop()
                output.append(_make_call(name, output, n_args + 1))
            elif expect_operand:
                raise FormulaError(f"Empty parentheses at position {tok.pos}")
            expect_operand = False

    if expect_operand:
        raise FormulaError("Formula ends with an operator")

    while stack:
        if stack[-1][0] in ("paren", "func"):
            raise FormulaError("Unbalanced '('")
        reduce_top()

    if len(output) != 1:
        raise FormulaError("Malformed formula")
    return output[0]


def _require(output: Sequence[Node], n: int, symbol: str) -> None:
    if len(output) < n:
        raise FormulaError(f"Operator {symbol!r} is missing an operand")


def _make_call(name: str, output: List[Node], n_args: int) -> Call:
    _, min_args, max_args = _FUNCTIONS[name]
    if n_args < min_args or (max_args is not None and n_args > max_args):
        raise FormulaError(f"{name}() got {n_args} argument(s)")
    args = tuple(output[-n_args:])
    del output[-n_args:]
    return Call(name, args)


# --- Compilation -----------------------------------------------------------

Evaluator = Callable[[Number, Number], Number]


def _compile_node(node: Node) -> Evaluator:
    if isinstance(node, Num):
        value = node.value
        return lambda theta, phi: value
    if isinstance(node, Var):
        if node.name == "theta":
            return lambda theta, phi: theta
        return lambda theta, phi: phi
    if isinstance(node, Neg):
        inner = _compile_node(node.operand)
        return lambda theta, phi: -inner(theta, phi)
    if isinstance(node, BinOp):
        left = _compile_node(node.left)
        right = _compile_node(node.right)
        op = node.op
        if op == "+":
            return lambda theta, phi: left(theta, phi) + right(theta, phi)
        if op == "-":
            return lambda theta, phi: left(theta, phi) - right(theta, phi)
        if op == "*":
            return lambda theta, phi: left(theta, phi) * right(theta, phi)
        if op == "/":
            return lambda theta, phi: np.divide(left(theta, phi), right(theta, phi))
        if op == "^":
            return lambda theta, phi: np.power(np.asarray(left(theta, phi), dtype=np.float64),
                                               right(theta, phi))
        compare = {"<": np.less, "<=": np.less_equal, ">": np.greater, ">=": np.greater_equal}[op]
        return lambda theta, phi: np.where(compare(left(theta, phi), right(theta, phi)), 1.0, 0.0)
    if isinstance(node, Call):
        func = _FUNCTIONS[node.name][0]
        args = [_compile_node(a) for a in node.args]
        if len(args) == 1:
            only = args[0]
            return lambda theta, phi: func(only(theta, phi))
        if node.name in ("min", "max"):
            def reduce_args(theta, phi):
                result = args[0](theta, phi)
                for a in args[1:]:
                    result = func(result, a(theta, phi))
                return result
            return reduce_args
        first, second = args
        return lambda theta, phi: func(first(theta, phi), second(theta, phi))
    raise FormulaError(f"Unsupported node {node!r}")


class CompiledFormula:
    """A parsed formula callable as ``f(theta, phi)``.

    Results may be negative or non-finite; callers that need a pattern
    magnitude should go through ``patterns.get_pattern_function``.
    """

    def __init__(self, source: str):
        self.source = source
        self.ast = parse(source)
        self._fn = _compile_node(self.ast)

    def __call__(self, theta: Number, phi: Number = 0.0) -> Number:
        with np.errstate(all="ignore"):
            result = self._fn(theta, phi)
        shape = np.broadcast(theta, phi).shape
        if not shape:
            return float(result)
        return np.broadcast_to(result, shape).astype(np.float64)

    def __repr__(self) -> str:
        return f"CompiledFormula({self.source!r})"


def compile_formula(text: str) -> CompiledFormula:
    """Compile a formula, raising FormulaError when it is invalid."""
    return CompiledFormula(text)


def validate_formula(text: str) -> Tuple[bool, Optional[str]]:
    """
    Smoke-test a formula at theta = phi = 0.5.

    Returns:
        (valid, error message or None)
    """
    try:
        value = compile_formula(text)(0.5, 0.5)
    except FormulaError as e:
        return False, str(e)
    if not np.isfinite(value):
        return False, "Formula does not evaluate to a finite real number"
    return True, None


def prettify_formula(text: str) -> str:
    """
    Render a formula in math notation for display.

    Example: ``pow(sin(theta), 2) * 3`` -> ``(sin(θ))^2·3``
    """
    if not text:
        return ""

    pretty = normalize_formula(text)
    pretty = re.sub(r"\bpow\(([^,]+),\s*([^)]+)\)", r"(\1)^\2", pretty)
    pretty = re.sub(r"\bsqrt\b", "√", pretty)
    pretty = re.sub(r"\bpi\b", "π", pretty)
    pretty = re.sub(r"\blog\b", "ln", pretty)
    pretty = re.sub(r"\btheta\b", "θ", pretty)
    pretty = re.sub(r"\bphi\b", "φ", pretty)
    pretty = re.sub(r"\s*\*\s*", "·", pretty)
    return pretty
