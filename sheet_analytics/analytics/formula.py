"""Sandboxed arithmetic evaluation for formula cells.

Formulas are parsed with :mod:`ast` and only a whitelist of node types is
walked, so nothing in the host environment is reachable from a cell.
"""
from __future__ import annotations

import ast
import operator
import re
from typing import Any, Callable, Protocol

from .errors import FormulaError
from .values import parse_number

CellLookup = Callable[[str], Any]

_CELL_REF_RE = re.compile(r"^[A-Z]{1,3}[1-9][0-9]*$")
_MAX_EXPONENT = 1000
_MAX_INT_BITS = 4096

_BINARY_OPS: dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPS: dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class FormulaEvaluator(Protocol):
    def evaluate(self, formula: str, lookup: CellLookup) -> Any:
        """Resolve ``formula`` to a value or raise FormulaError."""


class ArithmeticEvaluator:
    """Evaluate ``=1+2*A3`` style formulas: numbers, operators, parentheses and cell references."""

    def evaluate(self, formula: str, lookup: CellLookup) -> Any:
        source = formula.strip()
        if source.startswith("="):
            source = source[1:]
        if not source.strip():
            raise FormulaError("Empty formula")
        try:
            tree = ast.parse(source.strip(), mode="eval")
        except (SyntaxError, ValueError, RecursionError, MemoryError) as exc:
            raise FormulaError(f"Cannot parse formula {formula!r}") from exc
        try:
            return self._eval(tree.body, lookup)
        except (ArithmeticError, ValueError, RecursionError) as exc:
            raise FormulaError(f"Cannot evaluate formula {formula!r}: {exc}") from exc

    def _eval(self, node: ast.AST, lookup: CellLookup) -> Any:
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
                raise FormulaError(f"Unsupported literal {node.value!r}")
            return _bounded(node.value)
        if isinstance(node, ast.Name):
            return self._reference(node.id, lookup)
        if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
            return _UNARY_OPS[type(node.op)](self._eval(node.operand, lookup))
        if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
            left = self._eval(node.left, lookup)
            right = self._eval(node.right, lookup)
            if isinstance(node.op, ast.Pow):
                if abs(right) > _MAX_EXPONENT:
                    raise FormulaError("Exponent too large")
                # exact integer powers are capped before they are computed
                if isinstance(left, int) and isinstance(right, int) and right > 0:
                    if left.bit_length() * right > _MAX_INT_BITS:
                        raise FormulaError("Result too large")
            return _bounded(_BINARY_OPS[type(node.op)](left, right))
        raise FormulaError(f"Unsupported expression: {type(node).__name__}")

    def _reference(self, name: str, lookup: CellLookup) -> float:
        address = name.upper()
        if not _CELL_REF_RE.match(address):
            raise FormulaError(f"Unknown name {name!r}")
        raw = lookup(address)
        if raw is None:
            return 0
        number = parse_number(raw)
        if number is None:
            raise FormulaError(f"Cell {address} is not numeric")
        return number


def _bounded(value: Any) -> Any:
    if isinstance(value, int) and value.bit_length() > _MAX_INT_BITS:
        raise FormulaError("Result too large")
    return value
