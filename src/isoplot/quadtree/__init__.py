from isoplot.quadtree.builder import build_tree, should_descend_deep_cell
from isoplot.quadtree.cell import Cell, CellTree
from isoplot.quadtree.neighbors import leaves_in_direction, leaves_on_face, walk_in_direction

__all__ = [
    "Cell",
    "CellTree",
    "build_tree",
    "should_descend_deep_cell",
    "walk_in_direction",
    "leaves_on_face",
    "leaves_in_direction",
]
