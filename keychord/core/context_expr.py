"""Context expression parser and evaluator.

Context expressions guard binding groups, for example::

    drawerFocused
    worktreeFocused && !drawerFocused
    pickerOpen || modalOpen
    !(pickerOpen || modalOpen)

Grammar::

    expr      = or_expr
    or_expr   = and_expr ('||' and_expr)*
    and_expr  = unary ('&&' unary)*
    unary     = '!' unary | primary
    primary   = identifier | '(' expr ')'

Identifiers that are not in the context flag vocabulary evaluate to false.
That keeps mapping files written for newer builds loadable by older ones;
`unknown_context_flags` reports them for tooling that wants to be strict.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

from keychord.core.binding_contexts import CONTEXT_FLAGS, ActiveContexts


class ContextSyntaxError(ValueError):
    """Raised when a context expression cannot be parsed."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class Not:
    operand: Expr


@dataclass(frozen=True)
class And:
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Or:
    left: Expr
    right: Expr


Expr = Union[Identifier, Not, And, Or]


@dataclass(frozen=True)
class ParsedContextExpr:
    """A compiled context expression, reused across evaluations."""

    source: str
    ast: Expr


@dataclass(frozen=True)
class _Token:
    kind: str  # identifier | and | or | not | lparen | rparen | eof
    text: str
    position: int


# Combined depth of '!' and '(' nesting the parser accepts.
MAX_NESTING_DEPTH = 100

_SINGLE_CHAR_TOKENS = {"!": "not", "(": "lparen", ")": "rparen"}
_DOUBLE_CHAR_TOKENS = {"&&": "and", "||": "or"}


def _is_identifier_start(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_identifier_char(ch: str) -> bool:
    return _is_identifier_start(ch) or ("0" <= ch <= "9")


def _tokenize(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    i = 0
    length = len(source)

    while i < length:
        ch = source[i]

        if ch.isspace():
            i += 1
            continue

        pair = source[i : i + 2]
        if pair in _DOUBLE_CHAR_TOKENS:
            tokens.append(_Token(_DOUBLE_CHAR_TOKENS[pair], pair, i))
            i += 2
            continue

        if ch in _SINGLE_CHAR_TOKENS:
            tokens.append(_Token(_SINGLE_CHAR_TOKENS[ch], ch, i))
            i += 1
            continue

        if _is_identifier_start(ch):
            start = i
            while i < length and _is_identifier_char(source[i]):
                i += 1
            tokens.append(_Token("identifier", source[start:i], start))
            continue

        raise ContextSyntaxError(f"Unexpected character '{ch}' at position {i}", i)

    tokens.append(_Token("eof", "", length))
    return tokens


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: list[_Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def _peek(self) -> _Token:
        return self._tokens[self._pos]

    def _consume(self) -> _Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _error(self, token: _Token, expected: str | None = None) -> ContextSyntaxError:
        found = "end of expression" if token.kind == "eof" else f"token '{token.text}'"
        if expected:
            return ContextSyntaxError(
                f"Expected {expected} but found {found} at position {token.position}", token.position
            )
        return ContextSyntaxError(f"Unexpected {found} at position {token.position}", token.position)

    def parse(self) -> Expr:
        ast = self._parse_or()
        token = self._peek()
        if token.kind != "eof":
            raise self._error(token)
        return ast

    def _parse_or(self) -> Expr:
        left = self._parse_and()
        while self._peek().kind == "or":
            self._consume()
            left = Or(left, self._parse_and())
        return left

    def _parse_and(self) -> Expr:
        left = self._parse_unary()
        while self._peek().kind == "and":
            self._consume()
            left = And(left, self._parse_unary())
        return left

    def _enter(self, token: _Token) -> None:
        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            raise ContextSyntaxError(
                f"Expression nested too deeply at position {token.position}", token.position
            )

    def _parse_unary(self) -> Expr:
        token = self._peek()
        if token.kind == "not":
            self._consume()
            self._enter(token)
            operand = self._parse_unary()
            self._depth -= 1
            return Not(operand)
        return self._parse_primary()

    def _parse_primary(self) -> Expr:
        token = self._peek()
        if token.kind == "identifier":
            self._consume()
            return Identifier(token.text)
        if token.kind == "lparen":
            self._consume()
            self._enter(token)
            expr = self._parse_or()
            closing = self._peek()
            if closing.kind != "rparen":
                raise self._error(closing, expected="')'")
            self._consume()
            self._depth -= 1
            return expr
        raise self._error(token)


@lru_cache(maxsize=512)
def parse_context_expr(source: str) -> ParsedContextExpr:
    """Compile a context expression string.

    Raises:
        ContextSyntaxError: if the expression is empty, malformed or nested
            deeper than ``MAX_NESTING_DEPTH``.
    """
    return ParsedContextExpr(source=source, ast=_Parser(_tokenize(source)).parse())


def _evaluate(root: Expr, contexts: ActiveContexts) -> bool:
    # Explicit stack: long '&&'/'||' chains build left-deep trees.
    stack: list[tuple[Expr, bool]] = [(root, False)]
    values: list[bool] = []
    while stack:
        node, visited = stack.pop()
        if isinstance(node, Identifier):
            values.append(node.name in contexts)
        elif isinstance(node, Not):
            if visited:
                values[-1] = not values[-1]
            else:
                stack.append((node, True))
                stack.append((node.operand, False))
        elif isinstance(node, (And, Or)):
            if not visited:
                stack.append((node, True))
                stack.append((node.left, False))
            elif values[-1] != isinstance(node, Or):
                # Left side did not decide the result; the right side does.
                values.pop()
                stack.append((node.right, False))
        else:
            raise TypeError(f"Unknown context expression node: {node!r}")
    return values.pop()


def matches_context(expr: ParsedContextExpr, contexts: ActiveContexts) -> bool:
    """Check whether a compiled expression holds for the active contexts."""
    return _evaluate(expr.ast, contexts)


def evaluate_context_expr(source: str, contexts: ActiveContexts) -> bool:
    """Parse (cached) and evaluate an expression in one step."""
    return matches_context(parse_context_expr(source), contexts)


def validate_context_expr(source: str) -> str | None:
    """Return an error message for an invalid expression, or None if valid."""
    try:
        parse_context_expr(source)
    except ContextSyntaxError as e:
        return str(e)
    return None


def _walk_identifiers(root: Expr) -> Iterator[str]:
    stack: list[Expr] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Identifier):
            yield node.name
        elif isinstance(node, Not):
            stack.append(node.operand)
        else:
            stack.append(node.right)
            stack.append(node.left)


def extract_context_flags(expr: ParsedContextExpr) -> list[str]:
    """List the flag names referenced by an expression, first occurrence first."""
    return list(dict.fromkeys(_walk_identifiers(expr.ast)))


def unknown_context_flags(expr: ParsedContextExpr) -> list[str]:
    """List referenced flag names that are outside the known flag vocabulary."""
    return [name for name in extract_context_flags(expr) if name not in CONTEXT_FLAGS]
