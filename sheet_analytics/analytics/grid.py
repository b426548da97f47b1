"""Convert a sparse cell map into a dense table snapshot."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import pandas as pd

from .addressing import format_address
from .errors import FormulaError
from .formula import ArithmeticEvaluator, FormulaEvaluator
from .models import Cell
from .values import is_empty

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Table:
    """Header labels plus data rows; sheet row 1 is the header and is not part of ``frame``.

    ``frame`` uses positional column labels so duplicate headers stay distinct.
    """
    headers: list[str]
    frame: pd.DataFrame = field(repr=False)

    @property
    def row_count(self) -> int:
        return len(self.frame)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def is_empty(self) -> bool:
        return not self.headers

    def column(self, index: int) -> pd.Series:
        return self.frame[index]

    def index_of(self, header: str) -> int | None:
        try:
            return self.headers.index(header)
        except ValueError:
            return None

    def sheet_row(self, data_index: int) -> int:
        """1-indexed sheet row of a data row (the header occupies row 1)."""
        return data_index + 2


def empty_table() -> Table:
    return Table(headers=[], frame=pd.DataFrame(dtype=object))


def coerce_cells(cells: Mapping[str, Cell | Mapping[str, Any]]) -> dict[str, Cell]:
    coerced: dict[str, Cell] = {}
    for address, cell in cells.items():
        if isinstance(cell, Cell):
            coerced[address] = cell
        else:
            coerced[address] = Cell.model_validate({"id": address, **cell})
    return coerced


def build_table(
    cells: Mapping[str, Cell | Mapping[str, Any]],
    evaluator: FormulaEvaluator | None = None,
) -> Table:
    cell_map = coerce_cells(cells)
    if not cell_map:
        return empty_table()

    resolver = _FormulaResolver(cell_map, evaluator or ArithmeticEvaluator())
    max_row = max(cell.row for cell in cell_map.values())
    max_col = max(cell.col for cell in cell_map.values())

    grid: list[list[Any]] = [[None] * max_col for _ in range(max_row)]
    for cell in cell_map.values():
        grid[cell.row - 1][cell.col - 1] = resolver.value_of(cell)

    headers = [_header_label(value, idx) for idx, value in enumerate(grid[0])]
    frame = pd.DataFrame(grid[1:], columns=range(max_col), dtype=object)
    logger.debug("Built %dx%d table from %d cells", max_row, max_col, len(cell_map))
    return Table(headers=headers, frame=frame)


def _header_label(value: Any, index: int) -> str:
    if is_empty(value):
        return f"Column {index + 1}"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class _Pending(Exception):
    """Raised through the evaluator when a referenced formula cell has not been resolved yet."""

    def __init__(self, address: str) -> None:
        super().__init__(address)
        self.address = address


class _FormulaResolver:
    """Resolve formula cells through the evaluator, falling back to the raw formula text.

    Resolution uses an explicit work stack instead of recursion, so long reference
    chains cannot exhaust the interpreter stack, and every cell is resolved once.
    """

    def __init__(self, cells: dict[str, Cell], evaluator: FormulaEvaluator) -> None:
        self._by_address = {format_address(c.row, c.col): c for c in cells.values()}
        self._evaluator = evaluator
        self._resolved: dict[str, Any] = {}
        self._on_stack: set[str] = set()

    def value_of(self, cell: Cell) -> Any:
        if not cell.formula:
            return cell.value
        address = format_address(cell.row, cell.col)
        if address not in self._resolved:
            self._resolve(address)
        return self._resolved[address]

    def _resolve(self, root: str) -> None:
        stack = [root]
        self._on_stack.add(root)
        while stack:
            address = stack[-1]
            formula = self._by_address[address].formula
            try:
                value = self._evaluator.evaluate(formula, self._lookup)
            except _Pending as pending:
                stack.append(pending.address)
                self._on_stack.add(pending.address)
                continue
            except FormulaError as exc:
                logger.debug("Formula in %s fell back to raw text: %s", address, exc)
                value = formula
            self._resolved[address] = value
            stack.pop()
            self._on_stack.discard(address)

    def _lookup(self, address: str) -> Any:
        cell = self._by_address.get(address)
        if cell is None:
            return None
        if not cell.formula:
            return cell.value
        if address in self._resolved:
            return self._resolved[address]
        if address in self._on_stack:
            raise FormulaError(f"Circular reference through {address}")
        raise _Pending(address)
