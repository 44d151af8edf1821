from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any

import numpy as np

from isoplot.geometry import vertices_from_extremes
from isoplot.math_utils import sign
from isoplot.quadtree.cell import Cell, CellTree

if TYPE_CHECKING:
    from isoplot.protocols import ScalarField

logger = logging.getLogger(__name__)

SMALL_CELL_FACTOR: float = 10.0


def should_descend_deep_cell(cell: Cell, tol: Any) -> bool:
    """Decide whether a cell past min_depth still needs refining.

    - no, if every edge span is below SMALL_CELL_FACTOR * tol on all axes
    - no, if all corners are NaN
    - yes, if some but not all corners are NaN
    - otherwise yes iff the corner values do not all share one sign
      (zero is its own sign)
    """
    if np.all(cell.span < SMALL_CELL_FACTOR * np.asarray(tol)):
        return False

    values = cell.values()
    nan = np.isnan(values)
    if nan.all():
        return False
    if nan.any():
        return True

    first = sign(values[0])
    return any(sign(v) != first for v in values[1:])


def build_tree(
        dim: int,
        fn: ScalarField,
        p_min: Any,
        p_max: Any,
        min_depth: int,
        max_cells: int,
        tol: Any,
) -> CellTree:
    """Breadth-first refinement of the box [p_min, p_max].

    A cell is split while depth < min_depth or should_descend_deep_cell holds,
    as long as the leaf count stays under max_cells. max_cells is raised to
    branching_factor**min_depth so the minimum depth is always reached.
    """
    tree = CellTree(dim)
    branching_factor = tree.branching_factor
    max_cells = max(branching_factor ** min_depth, max_cells)

    root = tree.add_root(vertices_from_extremes(dim, p_min, p_max, fn))

    queue: deque[Cell] = deque([root])
    leaf_count = 1

    while queue and leaf_count < max_cells:
        cell = queue.popleft()
        if cell.depth < min_depth or should_descend_deep_cell(cell, tol):
            queue.extend(tree.split(cell, fn))
            leaf_count += branching_factor - 1

    logger.debug(
        "Built quadtree: %d cells, %d leaves, max depth %d, %d field evaluations",
        len(tree), leaf_count, tree.max_depth(), tree.evaluations,
    )
    return tree
