from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from isoplot.quadtree.cell import Cell, CellTree


def walk_in_direction(tree: CellTree, cell: Cell, axis: int, direction: int) -> Cell | None:
    """Find the node adjacent to cell along axis, at the same depth or coarser.

    direction is 0 toward the min side, 1 toward the max side. If the cell
    already sits on the far side of its parent, walk the parent first and
    descend into the mirrored child; otherwise the neighbor is the sibling
    obtained by flipping the axis bit. Returns None at the domain boundary.
    """
    m = 1 << axis
    parent = tree.parent(cell)
    if parent is None:
        return None

    mirrored = cell.child_direction ^ m
    if bool(cell.child_direction & m) == (direction == 1):
        walked = walk_in_direction(tree, parent, axis, direction)
        if walked is not None and walked.children:
            return tree.child(walked, mirrored)
        return walked

    return tree.child(parent, mirrored)


def leaves_on_face(tree: CellTree, cell: Cell, axis: int, direction: int) -> Iterator[Cell]:
    """Yield the leaves of cell touching its face on the given side of axis."""
    if cell.is_leaf:
        yield cell
        return

    m = 1 << axis
    for i in range(tree.branching_factor):
        if bool(i & m) == (direction == 1):
            yield from leaves_on_face(tree, tree.child(cell, i), axis, direction)


def leaves_in_direction(tree: CellTree, cell: Cell, axis: int, direction: int) -> Iterator[Cell]:
    """Yield every leaf across the face of cell on the given side of axis.

    Yields nothing at the domain boundary.
    """
    walked = walk_in_direction(tree, cell, axis, direction)
    if walked is None:
        return
    yield from leaves_on_face(tree, walked, axis, 1 - direction)
